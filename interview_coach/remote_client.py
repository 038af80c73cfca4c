import asyncio
import functools
import logging
import os
from concurrent.futures import ThreadPoolExecutor

from google import genai
from google.genai import types

from .errors import (
    RemoteProcessingError,
    RemoteTimeoutError,
    RemoteTransportError,
    UpstreamError,
)
from .models import FileState, RemoteFileHandle
from .prompt import ANALYSIS_PROMPT, PROMPT_VERSION

logger = logging.getLogger(__name__)


class GeminiAnalysisClient:
    """
    Upload / poll / generate / delete against the Gemini Files API.

    The google-genai SDK is blocking, so every call runs on a small thread
    pool and the poll delay uses asyncio.sleep; a slow remote file never
    stalls other requests.
    """

    def __init__(
        self,
        api_key: str,
        model: str = "gemini-2.0-flash",
        poll_interval: float = 10.0,
        poll_max_attempts: int = 30,
        max_workers: int = 4,
        client=None,
    ):
        self.api_key = api_key
        self.model = model
        self.poll_interval = poll_interval
        self.poll_max_attempts = poll_max_attempts
        self.executor = ThreadPoolExecutor(max_workers=max_workers)
        self._client = client

    @classmethod
    def from_settings(cls, settings):
        return cls(
            api_key=settings.gemini_api_key,
            model=settings.gemini_model,
            poll_interval=settings.poll_interval,
            poll_max_attempts=settings.poll_max_attempts,
            max_workers=settings.max_workers,
        )

    @property
    def is_ready(self) -> bool:
        return self._client is not None

    async def initialize(self):
        """Create the Gemini client"""
        if self._client is not None:
            return
        try:
            self._client = genai.Client(api_key=self.api_key)
            logger.info(f"Gemini client initialized (model={self.model}, prompt={PROMPT_VERSION})")
        except Exception as e:
            logger.error(f"Error initializing Gemini client: {str(e)}")
            raise

    def shutdown(self):
        self.executor.shutdown(wait=False)
        logger.debug("Gemini executor shut down")

    async def _call(self, fn, *args, **kwargs):
        if self._client is None:
            await self.initialize()
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(
            self.executor, functools.partial(fn, *args, **kwargs)
        )

    async def upload_remote(self, local_path, mime_type: str) -> RemoteFileHandle:
        """
        Upload the local file to Gemini file storage
        """
        display_name = os.path.basename(str(local_path))
        try:
            uploaded = await self._call(
                lambda: self._client.files.upload(
                    file=str(local_path),
                    config=types.UploadFileConfig(mime_type=mime_type, display_name=display_name),
                )
            )
        except Exception as e:
            logger.error(f"Error uploading {display_name} to Gemini: {str(e)}")
            logger.error(f"Error type: {type(e).__name__}")
            raise RemoteTransportError(f"Upload of {display_name} failed: {e}") from e

        handle = _to_handle(uploaded)
        logger.info(f"Uploaded file {handle.display_name} as: {handle.name} (state={_state_name(handle)})")
        return handle

    async def _refresh(self, handle: RemoteFileHandle) -> RemoteFileHandle:
        try:
            remote = await self._call(lambda: self._client.files.get(name=handle.name))
        except Exception as e:
            logger.error(f"Error querying state of {handle.name}: {str(e)}")
            raise RemoteTransportError(f"State query for {handle.name} failed: {e}") from e
        return _to_handle(remote)

    async def await_ready(self, handle: RemoteFileHandle) -> RemoteFileHandle:
        """
        Poll the remote file until it leaves PROCESSING.

        Gives up with RemoteTimeoutError after poll_max_attempts state checks.
        """
        attempts = 0
        while handle.state == FileState.PROCESSING:
            if attempts >= self.poll_max_attempts:
                logger.error(
                    f"File {handle.name} still processing after {attempts} checks "
                    f"({attempts * self.poll_interval:.0f}s)"
                )
                raise RemoteTimeoutError(f"File {handle.name} did not become ACTIVE in time")
            logger.info(f"File {handle.display_name} is still processing. Waiting...")
            await asyncio.sleep(self.poll_interval)
            handle = await self._refresh(handle)
            attempts += 1

        if handle.state == FileState.FAILED:
            logger.error(f"File processing failed for {handle.display_name}")
            raise RemoteProcessingError(f"File processing failed for {handle.display_name}")

        if handle.state != FileState.ACTIVE:
            logger.error(f"File {handle.name} ended in unexpected state {_state_name(handle)}")
            raise RemoteProcessingError(f"Unexpected state {_state_name(handle)} for {handle.name}")

        logger.info(f"File {handle.display_name} is now ACTIVE.")
        return handle

    async def request_analysis(self, handle: RemoteFileHandle) -> str:
        """
        Send the analysis prompt with a reference to the ready remote file
        """
        if not handle.is_active:
            raise RemoteProcessingError(
                f"File {handle.name} is {_state_name(handle)}, not ACTIVE"
            )

        logger.info(f"Sending analysis request to Gemini ({self.model})...")
        contents = [
            ANALYSIS_PROMPT,
            types.Part.from_uri(file_uri=handle.uri, mime_type=handle.mime_type),
        ]
        try:
            response = await self._call(
                lambda: self._client.models.generate_content(model=self.model, contents=contents)
            )
        except Exception as e:
            logger.error(f"Error calling Gemini API: {str(e)}")
            logger.error(f"Error type: {type(e).__name__}")
            raise UpstreamError(f"Generation request failed: {e}") from e

        text = getattr(response, "text", None)
        if not text:
            logger.error(f"Gemini returned no text for {handle.name}")
            raise UpstreamError("No valid response received from Gemini API.")

        logger.info(f"Received analysis from Gemini ({len(text)} chars).")
        return text

    async def release_remote(self, handle: RemoteFileHandle):
        """Delete the remote file; failures are logged only."""
        try:
            await self._call(lambda: self._client.files.delete(name=handle.name))
            logger.info(f"Deleted file {handle.name} from Gemini storage.")
        except Exception as e:
            logger.warning(f"Could not delete {handle.name} from Gemini storage: {str(e)}")
            logger.warning(f"Error type: {type(e).__name__}")


def _to_handle(remote_file) -> RemoteFileHandle:
    raw_state = getattr(remote_file.state, "value", remote_file.state)
    try:
        state = FileState(raw_state)
    except ValueError:
        state = None
    return RemoteFileHandle(
        name=remote_file.name,
        state=state,
        uri=getattr(remote_file, "uri", None),
        mime_type=getattr(remote_file, "mime_type", None),
        display_name=getattr(remote_file, "display_name", None) or remote_file.name,
    )


def _state_name(handle: RemoteFileHandle) -> str:
    return handle.state.value if handle.state else "UNKNOWN"
