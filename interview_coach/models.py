from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Annotated, Optional, Union

from pydantic import BaseModel, Field, StrictFloat, StrictInt, field_validator


class FileState(str, Enum):
    PROCESSING = "PROCESSING"
    ACTIVE = "ACTIVE"
    FAILED = "FAILED"


@dataclass
class UploadedVideo:
    """A video written to the local upload directory for one request."""

    path: Path
    original_filename: str
    mime_type: str
    size: int


@dataclass
class RemoteFileHandle:
    """The Gemini-side copy of an uploaded video."""

    name: str
    state: Optional[FileState]
    uri: Optional[str] = None
    mime_type: Optional[str] = None
    display_name: Optional[str] = None

    @property
    def is_active(self) -> bool:
        return self.state == FileState.ACTIVE


# Strict: "8" and true are rejected, 7 and 7.5 pass through unchanged.
Score = Union[
    Annotated[StrictInt, Field(ge=1, le=10)],
    Annotated[StrictFloat, Field(ge=1, le=10)],
]


class CategoryScore(BaseModel):
    score: Score
    reasoning: str

    @field_validator('reasoning')
    @classmethod
    def reasoning_not_blank(cls, v):
        if not v.strip():
            raise ValueError('reasoning must not be empty')
        return v


class AnalysisResult(BaseModel):
    english_speaking: CategoryScore
    confidence: CategoryScore
    humility: CategoryScore
    overall_summary: str

    model_config = {
        "json_schema_extra": {
            "example": {
                "english_speaking": {"score": 7, "reasoning": "Clear pronunciation, minor grammar slips."},
                "confidence": {"score": 8, "reasoning": "Steady voice and good eye contact."},
                "humility": {"score": 9, "reasoning": "Credits the team when describing results."},
                "overall_summary": "Strong communicator with a grounded, collaborative tone."
            }
        }
    }


class ErrorResponse(BaseModel):
    error: str
