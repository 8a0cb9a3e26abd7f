import io
import os

import pytest
from starlette.datastructures import UploadFile

from uploads import stored_upload


def _upload(data: bytes = b"RIFFdata") -> UploadFile:
    return UploadFile(io.BytesIO(data), filename="clip.webm")


@pytest.mark.asyncio
async def test_copies_upload_then_removes_it(tmp_path):
    async with stored_upload(_upload(), str(tmp_path / "uploads")) as path:
        with open(path, "rb") as fh:
            assert fh.read() == b"RIFFdata"
    assert not os.path.exists(path)
    assert os.listdir(tmp_path / "uploads") == []


@pytest.mark.asyncio
async def test_removes_file_when_body_raises(tmp_path):
    with pytest.raises(RuntimeError):
        async with stored_upload(_upload(), str(tmp_path)) as path:
            raise RuntimeError("upstream blew up")
    assert not os.path.exists(path)


@pytest.mark.asyncio
async def test_already_deleted_file_is_not_an_error(tmp_path):
    async with stored_upload(_upload(), str(tmp_path)) as path:
        os.unlink(path)
    assert os.listdir(tmp_path) == []
