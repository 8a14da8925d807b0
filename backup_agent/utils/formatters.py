"""Formatting utilities for archive names and log output."""

import glob
import os

NAME_PLACEHOLDER = "%name%"
TIMESTAMP_PLACEHOLDER = "%timestamp%"


def render_filename(template: str, name: str, timestamp: int) -> str:
    """Substitute the job name and timestamp into a filename template.

    Args:
        template: Template containing ``%name%`` and/or ``%timestamp%``.
        name: Job name.
        timestamp: Seconds since epoch.

    Returns:
        Archive base name, without extension.
    """
    return template.replace(NAME_PLACEHOLDER, name).replace(TIMESTAMP_PLACEHOLDER, str(timestamp))


def archive_pattern(template: str, name: str, extension: str) -> str:
    """Shell pattern matching every archive name ``render_filename`` can give a job."""
    pattern = glob.escape(template)
    pattern = pattern.replace(NAME_PLACEHOLDER, glob.escape(name))
    pattern = pattern.replace(TIMESTAMP_PLACEHOLDER, "[0-9]*")
    return f"{pattern}.{glob.escape(extension)}"


def is_plain_filename(name: str) -> bool:
    """True if ``name`` names an entry inside a directory, not a path."""
    if not name or name in (".", ".."):
        return False
    separators = {"/", os.sep}
    if os.altsep:
        separators.add(os.altsep)
    return not any(sep in name for sep in separators)


def format_file_size(size_bytes: int) -> str:
    """Format file size in human readable format.
    
    Args:
        size_bytes: Size in bytes.
        
    Returns:
        Human readable size string.
    """
    if size_bytes < 1024:
        return f"{size_bytes}B"
    elif size_bytes < 1024 * 1024:
        return f"{size_bytes // 1024}KB"
    elif size_bytes < 1024 * 1024 * 1024:
        return f"{size_bytes // (1024 * 1024)}MB"
    else:
        return f"{size_bytes // (1024 * 1024 * 1024)}GB"
