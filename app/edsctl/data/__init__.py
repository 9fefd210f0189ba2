"""Bundled data files for edsctl."""
