"""Regulatory website monitoring: prioritize, classify, diff and version pages."""

__version__ = "0.1.0"
