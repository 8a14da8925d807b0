"""Utility modules for the backup agent."""

from .formatters import archive_pattern, format_file_size, is_plain_filename, render_filename

__all__ = ["archive_pattern", "format_file_size", "is_plain_filename", "render_filename"]
