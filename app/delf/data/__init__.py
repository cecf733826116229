"""Bundled data files for delf."""
