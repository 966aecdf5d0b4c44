import os
import json
import logging
from typing import Any, Callable, Dict, Mapping, Optional, Tuple, Union

from pydantic import ValidationError as PydanticValidationError

from schemas import AnalysisRequest
from .errors import AnalysisError, ConfigurationError, MethodError, ValidationError
from .gemini import build_payload, extract_result, generate_content
from .prompts import get_system_prompt, uses_search

logger = logging.getLogger(__name__)

API_KEY_VAR = "GEMINI_API_KEY"

Body = Union[bytes, str, Dict[str, Any], None]
Generate = Callable[[dict, str], dict]


def _get_api_key(environ: Mapping[str, str]) -> str:
    api_key = environ.get(API_KEY_VAR)
    if not api_key:
        raise ConfigurationError(f"API key is missing. Please set {API_KEY_VAR} in the environment.")
    return api_key


def _parse_body(body: Body) -> Dict[str, Any]:
    if body is None or body == b"" or body == "":
        return {}
    if isinstance(body, dict):
        return body
    try:
        if isinstance(body, bytes):
            body = body.decode("utf-8")
        data = json.loads(body)
    except (UnicodeDecodeError, json.JSONDecodeError):
        raise ValidationError("Request body must be a JSON object.")
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object.")
    return data


def _validate(data: Dict[str, Any]) -> AnalysisRequest:
    try:
        return AnalysisRequest.model_validate(data)
    except PydanticValidationError as e:
        first = e.errors()[0]
        raise ValidationError(first.get("msg", "Invalid request."))


def run_analysis(request: AnalysisRequest, api_key: str, generate: Optional[Generate] = None) -> Dict[str, Any]:
    """Prompt, call Gemini once and shape the answer as {text, sources}."""
    system_prompt = get_system_prompt(request.type, request.location, request.date_posted)
    payload = build_payload(request.resume_text, system_prompt, uses_search(request.type))

    response = (generate or generate_content)(payload, api_key)
    result = extract_result(response)
    logger.info("Analysis '%s' completed with %d source(s)", request.type, len(result.sources))
    return result.model_dump()


def handle_analysis(
    method: Optional[str],
    body: Body,
    environ: Optional[Mapping[str, str]] = None,
    generate: Optional[Generate] = None,
) -> Tuple[int, Dict[str, Any]]:
    """Translate one inbound call into ``(status_code, json_payload)``.

    Platform adapters hand over the verb (None when the platform already
    routes on it), the raw body and optionally the environment holding
    the API key. Every failure is logged and returned as ``{"error": ...}``.
    """
    try:
        api_key = _get_api_key(os.environ if environ is None else environ)
        if method is not None and method.upper() != "POST":
            raise MethodError()

        request = _validate(_parse_body(body))
        logger.info("Analysis requested: type=%s", request.type)

        return 200, run_analysis(request, api_key, generate=generate)

    except AnalysisError as e:
        logger.error("%s: %s", type(e).__name__, e.message)
        return e.status_code, {"error": e.message}
    except Exception as e:
        logger.exception("Unexpected error during analysis")
        return 500, {"error": f"Error generating content: {e}"}
