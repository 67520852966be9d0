"""Utility helpers shared by blogmd parsers and renderers."""
