"""
Recovery and validation of structured model output.

Models tend to wrap JSON in markdown fences or surround it with commentary, and
to omit fields or bend types. ``recover_json`` digs the JSON value out of the
raw completion and ``validate_analysis`` turns it into an ``AnalysisResult``,
first against the strict schema and then against the lenient one.
"""

import json
import logging
from typing import Any

import regex
from pydantic import ValidationError

from signloop.exceptions import SchemaValidationError, UnparsableResponseError
from signloop.models.schemas import AnalysisResult, LenientAnalysisResult

logger = logging.getLogger(__name__)

OPENING_FENCE = regex.compile(r"^```(?:json)?\s*", regex.IGNORECASE)
CLOSING_FENCE = regex.compile(r"\s*```$")


def _reject_constant(name: str) -> Any:
    raise ValueError(f"{name} is not valid JSON")


def _loads(text: str) -> Any:
    """Parse strict JSON; NaN and Infinity are rejected."""
    return json.loads(text, parse_constant=_reject_constant)


def strip_code_fences(text: str) -> str:
    """Remove a leading ```json / ``` fence and a trailing ``` fence."""
    text = OPENING_FENCE.sub("", text.strip(), count=1)
    return CLOSING_FENCE.sub("", text, count=1).strip()


def recover_json(raw_text: str) -> Any:
    """
    Recover a JSON value from a model response.

    Tries the trimmed text as-is, then the text with code fences stripped,
    then the slice between the first ``{`` and the last ``}``.

    Args:
        raw_text: Raw completion text

    Returns:
        The parsed JSON value

    Raises:
        UnparsableResponseError: If none of the attempts parse
    """
    trimmed = raw_text.strip()
    try:
        return _loads(trimmed)
    except ValueError:
        pass

    without_fences = strip_code_fences(trimmed)
    try:
        value = _loads(without_fences)
        logger.debug("Recovered JSON after stripping code fences")
        return value
    except ValueError:
        pass

    first_brace = without_fences.find("{")
    last_brace = without_fences.rfind("}")
    if first_brace != -1 and last_brace > first_brace:
        try:
            value = _loads(without_fences[first_brace:last_brace + 1])
            logger.debug("Recovered JSON from brace slice at %d..%d", first_brace, last_brace)
            return value
        except ValueError as e:
            logger.error(f"Brace slice of model response is not valid JSON: {e}")
            raise UnparsableResponseError(raw_text) from e

    logger.error("No JSON object found in model response (%d chars)", len(raw_text))
    raise UnparsableResponseError(raw_text)


def validate_analysis(parsed_value: Any) -> AnalysisResult:
    """
    Validate a recovered value against the strict schema, then the lenient one.

    Args:
        parsed_value: Output of recover_json

    Returns:
        AnalysisResult, with defaults filled in when only the lenient tier passed

    Raises:
        SchemaValidationError: If the value fails both tiers
    """
    try:
        return AnalysisResult.model_validate(parsed_value)
    except ValidationError as strict_error:
        logger.warning(
            "Strict validation failed with %d errors, retrying with defaults",
            strict_error.error_count()
        )

    try:
        lenient = LenientAnalysisResult.model_validate(parsed_value)
        return AnalysisResult.model_validate(lenient.model_dump())
    except ValidationError as e:
        logger.error(f"Lenient validation failed: {e}")
        raise SchemaValidationError(parsed_value, e.errors(include_url=False)) from e


def parse_analysis_response(raw_text: str) -> AnalysisResult:
    """Recover and validate an AnalysisResult from raw model output."""
    return validate_analysis(recover_json(raw_text))
