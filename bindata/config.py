#!/usr/bin/env python3
"""
Configuration management for bindata.
Handles loading defaults, a YAML config file and command-line overrides,
and freezes the result into an immutable Settings value.
"""

import os
from pathlib import Path
from typing import Any, Dict, NamedTuple, Optional

import yaml

from .errors import ConfigError
from .formatters import LiteralMode

DEFAULT_PACKAGE = 'main'
PACKAGE_ENV_VAR = 'GOPACKAGE'  # set by `go generate`


class Settings(NamedTuple):
    """Resolved options for one run."""
    package: str
    map_name: str
    root: str
    mode: LiteralMode
    output: Optional[str]


class ConfigManager:
    """Manages configuration loading and merging."""

    DEFAULT_CONFIG_NAMES = ['bindata.yaml', 'bindata.yml']

    # Single source of truth: Default configuration as YAML string
    DEFAULT_CONFIG_YAML = """# bindata configuration file
# Place this file in your project directory or use --config to specify location.
# Command-line flags override anything set here.

generate:
  package: null  # Go package name; null uses $GOPACKAGE, then "main"
  map_name: "bindata"  # Name of the generated map variable
  root: ""  # Keys are made relative to this path ("" = current directory)
  strings: false  # Store data as strings instead of byte slices
  output: null  # Output file; null writes to stdout
"""

    def __init__(self):
        self.config: Dict[str, Any] = yaml.safe_load(self.DEFAULT_CONFIG_YAML)
        self.config_path: Optional[Path] = None

    def find_config_file(self, explicit_path: Optional[str] = None) -> Optional[Path]:
        """Find configuration file in order of precedence."""
        if explicit_path:
            path = Path(explicit_path)
            if path.exists():
                return path
            raise ConfigError(f"config file not found: {explicit_path}")

        # Check current directory
        for name in self.DEFAULT_CONFIG_NAMES:
            path = Path.cwd() / name
            if path.exists():
                return path

        # Check user config directory
        config_dir = Path.home() / '.config' / 'bindata'
        for name in self.DEFAULT_CONFIG_NAMES:
            path = config_dir / name
            if path.exists():
                return path

        return None

    def load_config(self, config_path: Optional[str] = None) -> None:
        """Load configuration from file, if one is found."""
        path = self.find_config_file(config_path)
        if not path:
            return  # Use defaults

        try:
            with open(path, 'r', encoding='utf-8') as f:
                user_config = yaml.safe_load(f) or {}
        except (yaml.YAMLError, UnicodeDecodeError) as e:
            raise ConfigError(f"invalid config file {path}: {e}") from e

        if not isinstance(user_config, dict):
            raise ConfigError(f"invalid config file {path}: expected a mapping")

        self.config_path = path
        for section, options in user_config.items():
            self._merge_section(path, section, options)

    def _merge_section(self, path: Path, section: str, options: Any) -> None:
        """Merge one section of a user config file over the defaults."""
        if section not in self.config:
            raise ConfigError(f"invalid config file {path}: unknown section {section!r}")
        if options is None:
            return
        if not isinstance(options, dict):
            raise ConfigError(f"invalid config file {path}: {section!r} must be a mapping")
        unknown = sorted(set(options) - set(self.config[section]))
        if unknown:
            raise ConfigError(
                f"invalid config file {path}: unknown option {section}.{unknown[0]}")
        self.config[section].update(options)

    def get(self, key_path: str, default: Any = None) -> Any:
        """Get config value by dot-notation path (e.g., 'generate.map_name')."""
        section, _, name = key_path.partition('.')
        return self.config.get(section, {}).get(name, default)

    def update_from_args(self, args: Any) -> None:
        """Copy every option given on the command line over the configuration."""
        generate = self.config['generate']
        for name in generate:
            value = getattr(args, name, None)
            if value is not None:
                generate[name] = value

    def settings(self) -> Settings:
        """Freeze the merged configuration for a run."""
        package = self.get('generate.package') or os.environ.get(PACKAGE_ENV_VAR) or DEFAULT_PACKAGE
        try:
            mode = LiteralMode.from_config(self.get('generate.strings', False))
        except ValueError as e:
            raise ConfigError(str(e)) from e
        output = self.get('generate.output')
        return Settings(
            package=str(package),
            map_name=str(self.get('generate.map_name') or 'bindata'),
            root=str(self.get('generate.root') or ''),
            mode=mode,
            output=str(output) if output else None,
        )

    def generate_default_config_file(self, path: Optional[Path] = None) -> Path:
        """Generate a default configuration file with comments."""
        if not path:
            path = Path.cwd() / self.DEFAULT_CONFIG_NAMES[0]

        with open(path, 'w', encoding='utf-8') as f:
            f.write(self.DEFAULT_CONFIG_YAML)

        return path
