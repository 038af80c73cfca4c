from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Optional
import logging
import time
import traceback

import uvicorn
from fastapi import Depends, FastAPI, File, Request, UploadFile
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from . import __version__
from .config import Settings, load_settings
from .errors import InvalidRequestError
from .logging_setup import setup_logging
from .models import AnalysisResult, ErrorResponse
from .pipeline import AnalysisRequest, analyze_upload
from .remote_client import GeminiAnalysisClient
from .uploads import NO_VIDEO_MESSAGE

logger = logging.getLogger(__name__)

ANALYSIS_FAILED_MESSAGE = "Failed to analyze the video. Please check the server logs."


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_analysis_client(request: Request):
    return request.app.state.analysis_client


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = app.state.settings
    client = app.state.analysis_client

    logger.info("=" * 60)
    logger.info("INTERVIEW COACH API STARTING UP")
    logger.info("=" * 60)
    logger.info(f"Allowed origin: {settings.allowed_origin}")
    logger.info(f"Upload directory: {settings.upload_dir}")
    logger.info(f"Poll: every {settings.poll_interval}s, at most {settings.poll_max_attempts} checks")

    settings.upload_dir.mkdir(parents=True, exist_ok=True)
    try:
        await client.initialize()
        logger.info("Analysis client initialized successfully")
    except Exception as e:
        logger.error(f"Failed to initialize analysis client: {e}")
        logger.error(f"Error type: {type(e).__name__}")
        raise

    yield

    logger.info("Interview Coach API shutting down")
    client.shutdown()


def create_app(settings: Optional[Settings] = None, analysis_client=None) -> FastAPI:
    """
    Build the FastAPI application.

    With no arguments, settings come from the environment (a missing
    GEMINI_API_KEY aborts startup) and logging is configured from them.
    """
    if settings is None:
        settings = load_settings()
        setup_logging(settings.log_dir, settings.log_level)
    if analysis_client is None:
        analysis_client = GeminiAnalysisClient.from_settings(settings)

    app = FastAPI(title="Interview Coach API", version=__version__, lifespan=lifespan)
    app.state.settings = settings
    app.state.analysis_client = analysis_client

    app.add_middleware(
        CORSMiddleware,
        allow_origins=[settings.allowed_origin],
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
    )

    # Request logging middleware
    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        start_time = time.time()
        logger.info(f"Incoming request: {request.method} {request.url}")
        client_ip = request.client.host if request.client else "unknown"
        logger.debug(f"Client IP: {client_ip}")

        try:
            response = await call_next(request)
        except Exception as e:
            process_time = time.time() - start_time
            logger.error(f"Request failed: {request.method} {request.url} - Error: {str(e)} - Time: {process_time:.3f}s")
            raise

        process_time = time.time() - start_time
        logger.info(f"Response: {request.method} {request.url} - Status: {response.status_code} - Time: {process_time:.3f}s")
        response.headers["X-Process-Time"] = str(process_time)
        return response

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        logger.error(f"Validation error for {request.url}: {exc.errors()}")
        return JSONResponse(status_code=400, content={"error": NO_VIDEO_MESSAGE})

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        logger.error(f"Unhandled exception for {request.url}: {str(exc)}")
        logger.error(f"Exception type: {type(exc).__name__}")
        return JSONResponse(status_code=500, content={"error": ANALYSIS_FAILED_MESSAGE})

    @app.post(
        "/analyze",
        response_model=AnalysisResult,
        responses={
            400: {"model": ErrorResponse, "description": "No video file uploaded"},
            500: {"model": ErrorResponse, "description": "Analysis failed"},
        },
    )
    async def analyze(
        video: Optional[UploadFile] = File(None),
        settings: Settings = Depends(get_settings),
        client=Depends(get_analysis_client),
    ):
        """
        Analyze an uploaded interview video and return scored feedback
        """
        request = AnalysisRequest()
        try:
            return await analyze_upload(video, settings.upload_dir, client, request)

        except InvalidRequestError as e:
            logger.warning(f"[{request.request_id}] Invalid request: {e}")
            return JSONResponse(status_code=400, content={"error": str(e)})
        except Exception as e:
            logger.error(f"[{request.request_id}] Error during AI analysis: {str(e)}")
            logger.error(f"Error type: {type(e).__name__}")
            logger.error(f"Full traceback: {traceback.format_exc()}")
            return JSONResponse(status_code=500, content={"error": ANALYSIS_FAILED_MESSAGE})

    @app.get("/health")
    async def health_check(client=Depends(get_analysis_client)):
        logger.debug("Health check endpoint called")
        ready = bool(getattr(client, "is_ready", False))
        return {
            "status": "healthy",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "version": __version__,
            "analysis_client": {
                "status": "healthy" if ready else "unknown",
                "message": "Gemini client initialized" if ready else "Gemini client not initialized",
            },
        }

    return app


def main():
    """Run the API with uvicorn."""
    settings = load_settings()
    setup_logging(settings.log_dir, settings.log_level)
    settings.ensure_directories()
    app = create_app(settings)
    logger.info(f"Backend server is running at http://{settings.host}:{settings.port}")
    uvicorn.run(app, host=settings.host, port=settings.port, log_config=None)


if __name__ == "__main__":
    main()
