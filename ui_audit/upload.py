"""Upload boundary: wrap screenshots and filter out anything that is not an image."""

import base64
import mimetypes
from dataclasses import dataclass
from pathlib import Path

from compliance.utils import hash_bytes

IMAGE_TYPE_PREFIX = "image/"


def is_image_type(content_type: str | None) -> bool:
    """Only the declared MIME type is checked; the bytes are never sniffed."""
    return bool(content_type) and content_type.lower().startswith(IMAGE_TYPE_PREFIX)


@dataclass(frozen=True)
class UploadedImage:
    """A screenshot as received from the browser or the filesystem."""

    filename: str
    content_type: str
    data: bytes

    @property
    def is_image(self) -> bool:
        return is_image_type(self.content_type)

    @property
    def byte_count(self) -> int:
        return len(self.data)

    @property
    def sha256(self) -> str:
        return hash_bytes(self.data)

    @property
    def data_url(self) -> str:
        """Inline data URL so the page can show the analyzed screenshot."""
        encoded = base64.b64encode(self.data).decode("ascii")
        return f"data:{self.content_type};base64,{encoded}"

    @classmethod
    def from_file_storage(cls, file) -> "UploadedImage":
        """Build from a werkzeug FileStorage (Flask request.files entry)."""
        return cls(
            filename=file.filename or "",
            content_type=file.mimetype or "",
            data=file.read(),
        )

    @classmethod
    def from_path(cls, path: str | Path) -> "UploadedImage":
        """
        Build from a file on disk, guessing the MIME type from its name.
        Raises FileNotFoundError if the file does not exist.
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Screenshot not found: {path}")
        content_type, _ = mimetypes.guess_type(path.name)
        return cls(filename=path.name, content_type=content_type or "", data=path.read_bytes())
