"""
File handling utilities for record uploads.
"""

import json
import mimetypes
import os
import uuid
from pathlib import Path
from typing import Any, Optional, Set

from ..core.exceptions import ValidationError


def generate_unique_filename(original_filename: str) -> str:
    """
    Generate a unique filename using UUID.

    Args:
        original_filename: Original name of the file

    Returns:
        Unique filename keeping the original (lower-cased) extension
    """
    return f"{uuid.uuid4()}{get_file_extension(original_filename)}"


def ensure_upload_dir(upload_dir: str) -> None:
    """Create the upload directory if it does not exist."""
    os.makedirs(upload_dir, exist_ok=True)


def get_file_extension(filename: str) -> str:
    """
    Get file extension in lowercase.

    Args:
        filename: Name of the file

    Returns:
        File extension (e.g., '.pdf', '.jpg')
    """
    return Path(filename or "").suffix.lower()


def is_allowed_file(filename: str, allowed_extensions: Set[str]) -> bool:
    """Check if file extension is allowed."""
    return get_file_extension(filename) in allowed_extensions


def guess_mime_type(filename: str, fallback: Optional[str] = None) -> str:
    """Best-effort MIME type from the filename."""
    guessed, _ = mimetypes.guess_type(filename or "")
    return guessed or fallback or "application/octet-stream"


def format_file_size(size_bytes: int) -> str:
    """
    Format file size in human-readable format.

    Args:
        size_bytes: File size in bytes

    Returns:
        Formatted string (e.g., '2.45 MB')
    """
    size = float(size_bytes)
    for unit in ["B", "KB", "MB", "GB"]:
        if size < 1024.0:
            return f"{size:.2f} {unit}"
        size /= 1024.0
    return f"{size:.2f} TB"


def parse_json_field(raw: Optional[str], field: str, expected: type) -> Any:
    """
    Decode a JSON-encoded multipart form field.

    Args:
        raw: Raw form value, or None when the field was omitted
        field: Field name, used in the error message
        expected: ``dict`` or ``list``

    Returns:
        The decoded value, or None when ``raw`` is None

    Raises:
        ValidationError: If the value is not valid JSON of the expected type
    """
    if raw is None:
        return None
    try:
        value = json.loads(raw)
    except json.JSONDecodeError:
        raise ValidationError(f"{field} must be valid JSON")
    if not isinstance(value, expected):
        raise ValidationError(f"{field} must be a JSON {expected.__name__}")
    return value
