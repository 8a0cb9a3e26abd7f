import logging
import os
import tempfile
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi.concurrency import run_in_threadpool
from starlette.datastructures import UploadFile

logger = logging.getLogger(__name__)


def _write_temp_file(directory: str, data: bytes) -> str:
    os.makedirs(directory, exist_ok=True)
    fd, path = tempfile.mkstemp(dir=directory, prefix="audio-")
    with os.fdopen(fd, "wb") as out:
        out.write(data)
    return path


@asynccontextmanager
async def stored_upload(upload: UploadFile, directory: str) -> AsyncIterator[str]:
    """Copy an upload into ``directory`` and yield its path; the file is removed on exit."""
    data = await upload.read()
    path = await run_in_threadpool(_write_temp_file, directory, data)
    try:
        yield path
    finally:
        try:
            os.unlink(path)
        except OSError as e:
            logger.warning("Could not remove temp upload %s: %s", path, e)
