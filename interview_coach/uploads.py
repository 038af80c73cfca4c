import logging
import os
import tempfile
from pathlib import Path

from .errors import InvalidRequestError
from .models import UploadedVideo

logger = logging.getLogger(__name__)

NO_VIDEO_MESSAGE = "No video file uploaded."
CHUNK_SIZE = 1024 * 1024  # 1MB
DEFAULT_MIME_TYPE = "application/octet-stream"


async def receive_upload(upload, upload_dir) -> UploadedVideo:
    """
    Store the multipart `video` field in a fresh file under upload_dir

    Raises InvalidRequestError before touching the disk if the field is
    missing.
    """
    if upload is None or not getattr(upload, "filename", None):
        logger.warning("Request has no video file")
        raise InvalidRequestError(NO_VIDEO_MESSAGE)

    upload_dir = Path(upload_dir)
    upload_dir.mkdir(parents=True, exist_ok=True)

    suffix = Path(upload.filename).suffix
    temp_file = tempfile.NamedTemporaryFile(
        delete=False, dir=upload_dir, prefix="upload_", suffix=suffix
    )
    size = 0
    try:
        with temp_file:
            while True:
                chunk = await upload.read(CHUNK_SIZE)
                if not chunk:
                    break
                temp_file.write(chunk)
                size += len(chunk)
    except BaseException as e:
        logger.error(f"Error storing upload {upload.filename}: {str(e)}")
        os.remove(temp_file.name)
        raise

    video = UploadedVideo(
        path=Path(temp_file.name),
        original_filename=upload.filename,
        mime_type=upload.content_type or DEFAULT_MIME_TYPE,
        size=size,
    )
    logger.info(f"Received file: {video.original_filename}, saved to {video.path} ({size} bytes)")
    return video
