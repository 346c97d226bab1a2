"""
Exception types raised by bindata.
"""


class TemplateError(Exception):
    """The generated file could not be written to its destination."""


class ConfigError(Exception):
    """A configuration file is missing or malformed."""


class PathOutsidePrefixError(OSError):
    """A collected file does not live under the key prefix."""

    def __init__(self, path: str, prefix: str):
        super().__init__(f"{path} is not under root {prefix or '.'}")
        self.path = path
        self.prefix = prefix
