"""Object names for stored images: <folder>/<cuid><ext>."""

from pathlib import PurePosixPath

from lms.shared.utils.generators import generate_cuid

_CONTENT_TYPE_SUFFIX = {
    "image/png": ".png",
    "image/jpeg": ".jpg",
    "image/webp": ".webp",
    "image/gif": ".gif",
}


def image_public_id(folder: str, filename: str, content_type: str) -> str:
    """Return a fresh public id under folder, keeping a known image extension."""
    suffix = _CONTENT_TYPE_SUFFIX.get(content_type) or PurePosixPath(filename).suffix.lower()
    return f"{folder.strip('/')}/{generate_cuid()}{suffix}"
