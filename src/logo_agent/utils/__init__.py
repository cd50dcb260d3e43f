"""Utility modules for logo agent."""

from .images import (
    MAX_LOGO_BYTES,
    MIN_LOGO_BYTES,
    detect_image_format,
    file_extension_for,
    is_valid_logo_buffer,
)

__all__ = [
    "MAX_LOGO_BYTES",
    "MIN_LOGO_BYTES",
    "detect_image_format",
    "file_extension_for",
    "is_valid_logo_buffer",
]
