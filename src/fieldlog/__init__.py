"""
fieldlog: export planning for amateur-radio field operations.

Collects export options from activity and export handlers and resolves them
into export jobs with template-driven file names and titles.
"""

__version__ = "0.1.0"
