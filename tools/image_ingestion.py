"""Turn user-selected image files into opaque data-URI strings."""

from __future__ import annotations

import asyncio
import base64
import mimetypes
from pathlib import Path

DEFAULT_MIME_TYPE = "application/octet-stream"


def encode_image_bytes(data: bytes, mime_type: str | None = None) -> str:
    """Encode raw bytes as ``data:<mime>;base64,<payload>``."""

    payload = base64.b64encode(data).decode("ascii")
    return f"data:{mime_type or DEFAULT_MIME_TYPE};base64,{payload}"


def _read_and_encode(path: Path) -> str:
    mime_type, _ = mimetypes.guess_type(path.name)
    return encode_image_bytes(path.read_bytes(), mime_type)


async def encode_image_file(path: str | Path) -> str:
    """Read ``path`` off the event loop and return it as a data URI.

    The result is stored verbatim on the wardrobe item; nothing downstream
    inspects it.
    """

    return await asyncio.to_thread(_read_and_encode, Path(path))


def decode_data_uri(value: str) -> bytes:
    """Inverse of :func:`encode_image_bytes`, for previews and tests."""

    header, sep, payload = value.partition(",")
    if not sep or not header.startswith("data:") or not header.endswith(";base64"):
        raise ValueError("Not a base64 data URI")
    return base64.b64decode(payload, validate=True)


__all__ = ["decode_data_uri", "encode_image_bytes", "encode_image_file"]
