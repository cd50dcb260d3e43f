"""Image buffer checks based on size bounds and magic bytes."""

MIN_LOGO_BYTES = 1024
MAX_LOGO_BYTES = 10 * 1024 * 1024

# Accepted signatures and the format they identify
_SIGNATURES: tuple[tuple[bytes, str], ...] = (
    (b"\x89PNG", "png"),
    (b"GIF8", "gif"),
    (b"\xff\xd8\xff\xe0", "jpeg"),  # JFIF
    (b"\xff\xd8\xff\xe1", "jpeg"),  # Exif
    (b"\xff\xd8\xff\xe2", "jpeg"),  # ICC profile
)

_EXTENSIONS = {"png": ".png", "gif": ".gif", "jpeg": ".jpg"}


def detect_image_format(data: bytes) -> str | None:
    """Detect the image format from the leading bytes.

    Args:
        data: Raw image bytes

    Returns:
        "png", "gif" or "jpeg", or None when no accepted signature matches
    """
    header = data[:8]
    for signature, image_format in _SIGNATURES:
        if header.startswith(signature):
            return image_format
    return None


def is_valid_logo_buffer(data: bytes) -> bool:
    """Check size bounds (1 KiB to 10 MiB) and the image signature."""
    if not data:
        return False
    if len(data) < MIN_LOGO_BYTES or len(data) > MAX_LOGO_BYTES:
        return False
    return detect_image_format(data) is not None


def file_extension_for(data: bytes) -> str:
    """File extension for the detected format, ".png" when unknown."""
    return _EXTENSIONS.get(detect_image_format(data) or "", ".png")
