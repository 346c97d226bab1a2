"""
bindata - Embed files as Go byte slices or strings.

This package provides the pieces behind the ``bindata`` command:
- Path collection over files and directory trees
- Streaming byte-slice and string literal formatters
- Rendering of the generated Go source file
- YAML configuration with command-line overrides
"""

__version__ = "0.1.0"

# Note: We don't import modules here so that `python -m bindata.cli`
# runs without a RuntimeWarning. The CLI is exposed through the
# console_scripts entry point.

__all__ = [
    '__version__',
]
