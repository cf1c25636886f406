"""Decompile Android packages and publish their sources as a browsable HTML report."""

__version__ = "0.1.0"
