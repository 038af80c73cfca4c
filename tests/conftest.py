from __future__ import annotations

import io
from pathlib import Path

import pytest
from fastapi import UploadFile
from starlette.datastructures import Headers

from interview_coach.config import Settings
from interview_coach.errors import RemoteProcessingError
from interview_coach.models import FileState, RemoteFileHandle

GOOD_RESPONSE = (
    'prefix ```json\n'
    '{"english_speaking":{"score":7,"reasoning":"clear"},'
    '"confidence":{"score":8,"reasoning":"steady"},'
    '"humility":{"score":9,"reasoning":"grounded"},'
    '"overall_summary":"Strong communicator."} \n'
    '``` suffix'
)

GOOD_PAYLOAD = {
    "english_speaking": {"score": 7, "reasoning": "clear"},
    "confidence": {"score": 8, "reasoning": "steady"},
    "humility": {"score": 9, "reasoning": "grounded"},
    "overall_summary": "Strong communicator.",
}


class FakeAnalysisClient:
    """Stands in for GeminiAnalysisClient and records what was called."""

    def __init__(self, raw_text=GOOD_RESPONSE, final_state=FileState.ACTIVE, upload_error=None,
                 ready_error=None, release_error=None):
        self.raw_text = raw_text
        self.final_state = final_state
        self.upload_error = upload_error
        self.ready_error = ready_error
        self.release_error = release_error
        self.calls: list[str] = []
        self.released: list[str] = []
        self.uploaded_path: Path | None = None
        self.uploaded_bytes: bytes | None = None
        self.is_ready = False

    async def initialize(self):
        self.is_ready = True

    def shutdown(self):
        pass

    async def upload_remote(self, local_path, mime_type):
        self.calls.append("upload_remote")
        self.uploaded_path = Path(local_path)
        self.uploaded_bytes = Path(local_path).read_bytes()
        if self.upload_error is not None:
            raise self.upload_error
        return RemoteFileHandle(
            name="files/abc123",
            state=FileState.PROCESSING,
            uri="https://generativelanguage.googleapis.com/v1beta/files/abc123",
            mime_type=mime_type,
            display_name=Path(local_path).name,
        )

    async def await_ready(self, handle):
        self.calls.append("await_ready")
        if self.ready_error is not None:
            raise self.ready_error
        if self.final_state != FileState.ACTIVE:
            raise RemoteProcessingError(f"File processing failed for {handle.display_name}")
        handle.state = FileState.ACTIVE
        return handle

    async def request_analysis(self, handle):
        self.calls.append("request_analysis")
        return self.raw_text

    async def release_remote(self, handle):
        self.released.append(handle.name)
        if self.release_error is not None:
            raise self.release_error


def make_upload(content: bytes = b"\x00\x00\x00\x18ftypmp42", filename="interview.mp4", content_type="video/mp4"):
    headers = Headers({"content-type": content_type}) if content_type else None
    return UploadFile(file=io.BytesIO(content), filename=filename, headers=headers)


@pytest.fixture
def settings(tmp_path):
    return Settings(
        gemini_api_key="test-key",
        upload_dir=tmp_path / "uploads",
        log_dir=tmp_path / "logs",
        poll_interval=0,
        poll_max_attempts=3,
    )


@pytest.fixture
def fake_client():
    return FakeAnalysisClient()


def leftover_uploads(upload_dir: Path) -> list[Path]:
    if not upload_dir.exists():
        return []
    return list(upload_dir.iterdir())
