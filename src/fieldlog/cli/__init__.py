"""
fieldlog command-line interface.
"""

from fieldlog import __version__

__all__ = ['__version__']
