"""Screenbook — screen catalog and navigation graph analysis."""

__version__ = "0.1.0"
