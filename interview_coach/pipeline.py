import logging
import uuid
from enum import Enum

from .cleanup import local_upload_scope, remote_file_scope
from .extractor import extract_analysis
from .models import AnalysisResult

logger = logging.getLogger(__name__)


class RequestState(str, Enum):
    RECEIVED = "RECEIVED"
    UPLOADING_REMOTE = "UPLOADING_REMOTE"
    POLLING = "POLLING"
    ANALYZING = "ANALYZING"
    EXTRACTING = "EXTRACTING"
    RESPONDING = "RESPONDING"
    FAILED = "FAILED"
    CLEANED_UP = "CLEANED_UP"


class AnalysisRequest:
    """Tracks and logs the state of one /analyze request."""

    def __init__(self, request_id=None):
        self.request_id = request_id or uuid.uuid4().hex[:12]
        self.state = RequestState.RECEIVED
        self.history = [RequestState.RECEIVED]

    def advance(self, state: RequestState):
        logger.debug(f"[{self.request_id}] {self.state.value} -> {state.value}")
        self.state = state
        self.history.append(state)


async def analyze_upload(upload, upload_dir, client, request=None) -> AnalysisResult:
    """
    Run the full flow for one uploaded video:
    store locally, upload to Gemini, wait for ACTIVE, generate, extract.

    Local and remote files are released before this returns or raises.
    """
    request = request or AnalysisRequest()
    logger.info(f"[{request.request_id}] Starting analysis request")

    try:
        async with local_upload_scope(upload, upload_dir) as video:
            request.advance(RequestState.UPLOADING_REMOTE)
            async with remote_file_scope(client, video) as handle:
                request.advance(RequestState.POLLING)
                handle = await client.await_ready(handle)

                request.advance(RequestState.ANALYZING)
                raw_text = await client.request_analysis(handle)

                request.advance(RequestState.EXTRACTING)
                result = extract_analysis(raw_text)

                request.advance(RequestState.RESPONDING)
    except Exception as e:
        logger.error(f"[{request.request_id}] Failed in state {request.state.value}: {type(e).__name__}: {e}")
        request.advance(RequestState.FAILED)
        raise
    finally:
        request.advance(RequestState.CLEANED_UP)
        logger.info(f"[{request.request_id}] Resources released")

    return result
