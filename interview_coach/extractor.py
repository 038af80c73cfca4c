import json
import logging
import re

from pydantic import ValidationError

from .errors import ResponseFormatError, ResponseParseError
from .models import AnalysisResult

logger = logging.getLogger(__name__)

FENCED_JSON = re.compile(r"```json[ \t]*\r?\n(.*?)\r?\n[ \t]*```", re.DOTALL)


def extract_payload(raw_text: str) -> str:
    """
    Return the body of the first ```json fenced block in the model output
    """
    match = FENCED_JSON.search(raw_text or "")
    if not match or not match.group(1).strip():
        logger.error(f"No fenced JSON block in model output ({len(raw_text or '')} chars)")
        logger.debug(f"Raw model output: {raw_text!r}")
        raise ResponseFormatError("Could not extract JSON from AI response.")
    return match.group(1)


def extract_analysis(raw_text: str) -> AnalysisResult:
    """
    Parse the model output into an AnalysisResult.

    Either the whole payload validates or an error is raised; partial
    results are never returned.
    """
    payload = extract_payload(raw_text)

    try:
        data = json.loads(payload)
    except json.JSONDecodeError as e:
        logger.error(f"Fenced payload is not valid JSON: {e}")
        raise ResponseParseError(f"Invalid JSON in AI response: {e}") from e

    try:
        result = AnalysisResult.model_validate(data)
    except ValidationError as e:
        logger.error(f"Payload does not match the analysis schema: {e.errors()}")
        raise ResponseParseError(f"AI response does not match the expected schema: {e}") from e

    logger.debug(
        f"Extracted scores: english_speaking={result.english_speaking.score}, "
        f"confidence={result.confidence.score}, humility={result.humility.score}"
    )
    return result
