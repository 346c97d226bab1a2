#!/usr/bin/env python3
"""
bindata - Embed binary files as Go byte slices or strings.

The data is stored as a map of byte slices or strings indexed by the file
paths given on the command line. Directories are walked recursively and
keys are made relative to the current directory, or to the root given
with -r.

Usage:
    bindata hello.go
    bindata -o jpegs.go pic1.jpg pic2.jpg pic3.jpg
    bindata -s -m assets -r static -o assets.go static
"""

import argparse
import io
import os
import sys
import tempfile
from typing import List, Optional

from . import __version__
from .collector import close_all, collect, expand_response_files
from .config import ConfigManager, Settings
from .errors import ConfigError, TemplateError
from .renderer import RenderContext, render


def parse_arguments(args=None):
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        prog='bindata',
        description='Embed binary files as byte slices or strings into a Go source file',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog='''
Examples:
  %(prog)s hello.go                             # Print hello.go as a []byte map to stdout
  %(prog)s -o jpegs.go pic1.jpg pic2.jpg        # Write the map to jpegs.go
  %(prog)s -s -m assets -r static static        # Strings keyed relative to static/
  %(prog)s -o data.go @files.txt                # Paths listed in a response file

With go generate:
  //go:generate bindata -o jpegs.go pic1.jpg pic2.jpg pic3.jpg
        '''
    )

    parser.add_argument(
        'paths',
        nargs='*',
        help='Files, directories or @response_file to embed'
    )

    parser.add_argument(
        '-o', '--output',
        metavar='PATH',
        help='Output file (default: stdout)'
    )

    parser.add_argument(
        '-p', '--package',
        metavar='NAME',
        help='Name of the package (default: $GOPACKAGE or main)'
    )

    parser.add_argument(
        '-m', '--map',
        dest='map_name',
        metavar='NAME',
        help='Name of the map variable (default: bindata)'
    )

    parser.add_argument(
        '-r', '--root',
        metavar='PATH',
        help='Root path for map keys (default: current directory)'
    )

    parser.add_argument(
        '-s', '--strings',
        action=argparse.BooleanOptionalAction,
        default=None,
        help='Save data as strings instead of byte slices (--no-strings overrides a config file)'
    )

    parser.add_argument(
        '-c', '--config',
        metavar='PATH',
        help='Path to a bindata.yaml configuration file'
    )

    parser.add_argument(
        '--generate-config',
        action='store_true',
        help='Write a default bindata.yaml to the current directory and exit'
    )

    parser.add_argument(
        '-q', '--quiet',
        action='store_true',
        help='Do not print warnings'
    )

    parser.add_argument(
        '--version',
        action='version',
        version=f'%(prog)s {__version__}'
    )

    parsed = parser.parse_args(args)
    if not parsed.paths and not parsed.generate_config:
        parser.error('at least one path is required')
    return parsed


def write_atomic(path: str, ctx: RenderContext) -> None:
    """
    Render ctx into path through a temporary file in the same directory.

    The temporary file replaces path only once rendering has completed,
    so a failed run never leaves a truncated output behind.
    """
    directory = os.path.dirname(os.path.abspath(path))
    try:
        fd, tmp_path = tempfile.mkstemp(prefix='.bindata-', suffix='.tmp', dir=directory)
    except OSError as e:
        raise OSError(e.errno, e.strerror, path) from e
    try:
        with open(fd, 'w', encoding='utf-8', newline='\n') as f:
            render(ctx, f)
        umask = os.umask(0)
        os.umask(umask)
        os.chmod(tmp_path, 0o666 & ~umask)
        os.replace(tmp_path, path)
    except BaseException:
        try:
            os.unlink(tmp_path)
        except FileNotFoundError:
            pass
        raise


def write_stdout(ctx: RenderContext) -> None:
    """Render ctx to standard output as UTF-8, whatever the locale encoding."""
    sys.stdout.flush()
    out = io.TextIOWrapper(sys.stdout.buffer, encoding='utf-8', newline='\n',
                           write_through=True)
    try:
        render(ctx, out)
        out.flush()
    finally:
        # Leave sys.stdout usable
        out.detach()


def generate(paths: List[str], settings: Settings, warn: bool = True) -> None:
    """Collect paths and write the generated file described by settings."""
    files = collect(expand_response_files(paths), settings.root, warn=warn)
    ctx = RenderContext(
        package=settings.package,
        map_name=settings.map_name,
        mode=settings.mode,
        files=files,
    )
    try:
        if settings.output:
            write_atomic(settings.output, ctx)
        else:
            write_stdout(ctx)
    finally:
        close_all(files)


def run(argv: Optional[List[str]] = None) -> int:
    """Run bindata with the given arguments; errors propagate to the caller."""
    args = parse_arguments(argv)

    config_manager = ConfigManager()

    if args.generate_config:
        path = config_manager.generate_default_config_file()
        print(f"Generated default config file: {path}", file=sys.stderr)
        return 0

    # CLI overrides config file
    config_manager.load_config(args.config)
    config_manager.update_from_args(args)

    generate(args.paths, config_manager.settings(), warn=not args.quiet)
    return 0


def main(argv: Optional[List[str]] = None):
    """CLI entry point."""
    try:
        status = run(argv)
    except (OSError, TemplateError, ConfigError) as e:
        print(f"bindata: {e}", file=sys.stderr)
        sys.exit(1)
    sys.exit(status)


if __name__ == '__main__':
    main()
