"""Encoded image snapshots: loading, identification, rendering and saving."""

from __future__ import annotations

import base64
import io
import logging
import secrets
import zlib
from pathlib import Path

from PIL import Image, ImageGrab

from snapsim.image_compare import compare_snapshots
from snapsim.size import MIN_PIXEL_ROOT, Size

log = logging.getLogger(__name__)

REQUIRED_EXTENSION = ".jpg"
UNKNOWN_MIME_TYPE = "image/unknown"
INVALID_LABEL = "Invalid Image"

MIME_TYPES: dict[str, str] = {
    "BMP": "image/bmp",
    "DIB": "image/bmp",
    "WMF": "image/x-emf",
    "EMF": "image/x-emf",
    "GIF": "image/gif",
    "ICO": "image/ico",
    "JPEG": "image/jpeg",
    "MPO": "image/jpeg",
    "PNG": "image/png",
    "TIFF": "image/tiff",
}


def full_path_name(file_name: str) -> str:
    """Normalize a save target: random name if empty, always a ``.jpg`` suffix."""
    if Path(file_name).name in ("", "."):
        file_name = secrets.token_hex(6)
    if not file_name.lower().endswith(REQUIRED_EXTENSION):
        file_name += REQUIRED_EXTENSION
    return file_name


class Snapshot:
    """An encoded image held in memory.

    The size, format and label are worked out once, when the snapshot is
    created. Data that Pillow cannot identify gives an invalid snapshot
    rather than an error: its ``size`` is None and it renders as
    ``image/unknown``.
    """

    def __init__(self, data: bytes) -> None:
        self._data = bytes(data)
        self._size: Size | None = None
        self._format: str | None = None
        try:
            with Image.open(io.BytesIO(self._data)) as image:
                self._size = Size(image.width, image.height)
                self._format = image.format
        except OSError as exc:
            log.debug("not a decodable image (%d bytes): %s", len(self._data), exc)
        if self._size is None:
            self._label = INVALID_LABEL
        else:
            self._label = f"Image #{zlib.crc32(self._data)} ({self._size})"

    @classmethod
    def parse(cls, text: str) -> Snapshot:
        """Create a snapshot from base64 text, or else from the file ``text`` names.

        Raises:
            OSError: If ``text`` is not base64 and the file cannot be read.
            ValueError: If ``text`` is not base64 and not a usable path.
        """
        try:
            # line breaks from wrapped encoders are not part of the payload
            data = base64.b64decode("".join(text.split()), validate=True)
        except ValueError:
            data = Path(text).read_bytes()
        return cls(data)

    @classmethod
    def from_image(cls, image: Image.Image, format: str = "PNG") -> Snapshot:
        buf = io.BytesIO()
        image.save(buf, format=format)
        return cls(buf.getvalue())

    @classmethod
    def capture_screen(cls, left: int, top: int, width: int, height: int) -> Snapshot:
        """Capture a rectangle of the screen as a JPEG snapshot."""
        grabbed = ImageGrab.grab(bbox=(left, top, left + width, top + height))
        return cls.from_image(grabbed.convert("RGB"), format="JPEG")

    @property
    def data(self) -> bytes:
        return self._data

    @property
    def size(self) -> Size | None:
        return self._size

    @property
    def format(self) -> str | None:
        return self._format

    @property
    def is_valid(self) -> bool:
        return self._size is not None

    @property
    def label(self) -> str:
        return self._label

    @property
    def mime_type(self) -> str:
        if self._format is None:
            return UNKNOWN_MIME_TYPE
        return MIME_TYPES.get(self._format, UNKNOWN_MIME_TYPE)

    @property
    def to_base64(self) -> str:
        return base64.b64encode(self._data).decode("ascii")

    @property
    def rendering(self) -> str:
        """HTML image tag with the snapshot inlined as a data URI."""
        return f'<img src="data:{self.mime_type};base64,{self.to_base64}" />'

    def save(self, path: str) -> str:
        """Write the snapshot to ``path`` (normalized by ``full_path_name``).

        Returns the path written to, or ``path`` unchanged if it is empty.
        """
        if not path:
            return path
        self._require_valid("save")
        full_path = full_path_name(path)
        Path(full_path).write_bytes(self._data)
        log.debug("saved %s to %s", self._label, full_path)
        return full_path

    def reduce_to(self, size: Size) -> Image.Image:
        """Resample to ``size`` with bicubic filtering, keeping at least one pixel per axis."""
        self._require_valid("resample")
        target = (max(size.width, 1), max(size.height, 1))
        with Image.open(io.BytesIO(self._data)) as image:
            return image.convert("RGB").resize(target, Image.Resampling.BICUBIC)

    def similarity_to(self, other: Snapshot | None, min_dimension: int = MIN_PIXEL_ROOT) -> float:
        """Similarity from 0.0 to 1.0, where scaled copies of an image can score 1.0.

        Rotation is not taken into account.
        """
        if other is None:
            return 0.0
        return compare_snapshots(self, other, min_dimension=min_dimension).similarity

    def _require_valid(self, action: str) -> None:
        if not self.is_valid:
            raise ValueError(f"cannot {action} {INVALID_LABEL.lower()}")

    def __eq__(self, other: object) -> bool:
        return isinstance(other, Snapshot) and self._data == other._data

    def __hash__(self) -> int:
        return hash(self._data)

    def __str__(self) -> str:
        return self._label

    def __repr__(self) -> str:
        return f"Snapshot({self._label!r})"
