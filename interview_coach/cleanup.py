"""Scoped acquisition and release of per-request resources.

The local upload is always removed when its scope exits. The remote file is
released only if the upload to Gemini produced a handle, and a failed release
never changes the request's outcome.
"""

import logging
import os
from contextlib import asynccontextmanager

from .models import UploadedVideo
from .uploads import receive_upload

logger = logging.getLogger(__name__)


def release_local(video: UploadedVideo):
    try:
        if os.path.exists(video.path):
            os.remove(video.path)
            logger.info(f"Deleted temporary file: {video.path}")
    except OSError as e:
        logger.error(f"Failed to delete temporary file {video.path}: {e}")


@asynccontextmanager
async def local_upload_scope(upload, upload_dir):
    video = await receive_upload(upload, upload_dir)
    try:
        yield video
    finally:
        release_local(video)


@asynccontextmanager
async def remote_file_scope(client, video: UploadedVideo):
    handle = await client.upload_remote(video.path, video.mime_type)
    try:
        yield handle
    finally:
        try:
            await client.release_remote(handle)
        except Exception as e:
            logger.warning(f"Remote release of {handle.name} failed: {type(e).__name__}: {e}")
