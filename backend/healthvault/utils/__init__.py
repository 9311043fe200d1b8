"""
Utils package initialization.
"""

from healthvault.utils.codes import (
    generate_otp_code,
    generate_health_code,
    is_valid_health_code,
    HEALTH_CODE_ALPHABET,
    HEALTH_CODE_PATTERN,
)
from healthvault.utils.file_utils import (
    generate_unique_filename,
    ensure_upload_dir,
    get_file_extension,
    is_allowed_file,
    guess_mime_type,
    format_file_size,
    parse_json_field,
)

__all__ = [
    "generate_otp_code",
    "generate_health_code",
    "is_valid_health_code",
    "HEALTH_CODE_ALPHABET",
    "HEALTH_CODE_PATTERN",
    "generate_unique_filename",
    "ensure_upload_dir",
    "get_file_extension",
    "is_allowed_file",
    "guess_mime_type",
    "format_file_size",
    "parse_json_field",
]
