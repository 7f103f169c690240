import base64

import pytest

from multi_compress.blob import Blob, File
from multi_compress.compression.convert import Representation, convert_blob, read_file
from multi_compress.exceptions import UnsupportedRepresentationError

BLOB = Blob(data=b"\x89PNG-ish", mime_type="image/png")


def test_blob_is_returned_as_is():
    assert convert_blob(BLOB, Representation.BLOB) is BLOB


def test_file_wraps_blob_with_name():
    result = convert_blob(BLOB, Representation.FILE, "cat.png")

    assert isinstance(result, File)
    assert result.name == "cat.png"
    assert result.data == BLOB.data
    assert result.mime_type == "image/png"


def test_file_default_name():
    assert convert_blob(BLOB, Representation.FILE).name == "compressed"


def test_base64_is_data_url():
    result = convert_blob(BLOB, Representation.BASE64)

    prefix = "data:image/png;base64,"
    assert result.startswith(prefix)
    assert base64.b64decode(result[len(prefix):]) == BLOB.data


def test_array_buffer_is_bytes():
    result = convert_blob(BLOB, Representation.ARRAY_BUFFER)

    assert isinstance(result, bytes)
    assert result == BLOB.data


def test_parse_known_and_unknown():
    assert Representation.parse("arrayBuffer") is Representation.ARRAY_BUFFER
    assert Representation.parse(Representation.FILE) is Representation.FILE
    with pytest.raises(UnsupportedRepresentationError, match="Unsupported type: text"):
        Representation.parse("text")


def test_read_file_uses_extension(tmp_path, png_file):
    path = tmp_path / "picture.png"
    path.write_bytes(png_file.data)

    result = read_file(path)

    assert result.name == "picture.png"
    assert result.mime_type == "image/png"
    assert result.data == png_file.data


def test_read_file_sniffs_unknown_extension(tmp_path, gif_file):
    path = tmp_path / "upload.bin"
    path.write_bytes(gif_file.data)

    assert read_file(str(path)).mime_type == "image/gif"
