"""Image ingestion produces opaque data URIs."""

from pathlib import Path
import sys

import pytest

sys.path.append(str(Path(__file__).resolve().parents[1]))

from tools.image_ingestion import decode_data_uri, encode_image_bytes, encode_image_file

PNG_HEADER = b"\x89PNG\r\n\x1a\n" + bytes(range(32))


@pytest.mark.asyncio
async def test_encode_image_file_guesses_mime_type(tmp_path: Path) -> None:
    path = tmp_path / "shirt.png"
    path.write_bytes(PNG_HEADER)

    uri = await encode_image_file(path)

    assert uri.startswith("data:image/png;base64,")
    assert decode_data_uri(uri) == PNG_HEADER


def test_unknown_extension_uses_octet_stream() -> None:
    assert encode_image_bytes(b"abc").startswith("data:application/octet-stream;base64,")


def test_decode_rejects_plain_strings() -> None:
    with pytest.raises(ValueError):
        decode_data_uri("https://example.com/shirt.png")
