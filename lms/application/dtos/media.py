"""DTOs for uploaded images."""

from dataclasses import dataclass


@dataclass(frozen=True)
class StoredImage:
    """Image held by the storage backend; public_id is the handle for destroy()."""

    public_id: str
    url: str

    def as_dict(self) -> dict[str, str]:
        return {"public_id": self.public_id, "url": self.url}


@dataclass(frozen=True)
class ImageUpload:
    """Uploaded file content handed from the API layer to a use case."""

    content: bytes
    filename: str
    content_type: str
