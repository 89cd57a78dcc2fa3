"""Logging setup and per-file error log."""
