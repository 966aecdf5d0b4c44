import os
import logging
from typing import Any, Dict, List

import requests
from dotenv import load_dotenv

from schemas import AnalysisResult, Source
from .errors import UpstreamError

load_dotenv()
MODEL_NAME = os.getenv("GEMINI_MODEL", "gemini-2.5-flash-preview-09-2025")
API_BASE = os.getenv("GEMINI_API_BASE", "https://generativelanguage.googleapis.com/v1beta").rstrip("/")
GEMINI_TIMEOUT = float(os.getenv("GEMINI_TIMEOUT", "60"))

NO_TEXT_PLACEHOLDER = "No response text found."

logger = logging.getLogger(__name__)

GENERATION_CONFIG = {
    "temperature": 0.7,
    "topK": 64,
    "topP": 0.95,
    "maxOutputTokens": 8192,
}

SAFETY_SETTINGS = [
    {"category": category, "threshold": "BLOCK_MEDIUM_AND_ABOVE"}
    for category in (
        "HARM_CATEGORY_HARASSMENT",
        "HARM_CATEGORY_HATE_SPEECH",
        "HARM_CATEGORY_SEXUALLY_EXPLICIT",
        "HARM_CATEGORY_DANGEROUS_CONTENT",
    )
]

SEARCH_TOOL = {"google_search": {}}


def build_payload(resume_text: str, system_prompt: str, use_search: bool) -> dict:
    """Assemble the generateContent request body."""
    payload = {
        "contents": [
            {
                "role": "user",
                "parts": [{"text": f"Here is my resume:\n\n{resume_text}"}],
            }
        ],
        "systemInstruction": {"parts": [{"text": system_prompt}]},
        "generationConfig": dict(GENERATION_CONFIG),
        "safetySettings": [dict(s) for s in SAFETY_SETTINGS],
    }
    if use_search:
        payload["tools"] = [dict(SEARCH_TOOL)]
    return payload


def _error_message(response) -> str:
    try:
        body = response.json()
    except ValueError:
        body = None
    logger.error("Gemini API Error (HTTP %s): %s", response.status_code, body if body is not None else response.text)

    if isinstance(body, dict):
        error = body.get("error")
        if isinstance(error, dict) and error.get("message"):
            return str(error["message"])
    return f"Failed to call Gemini API (HTTP {response.status_code})."


def generate_content(payload: dict, api_key: str, model: str = MODEL_NAME, timeout: float = GEMINI_TIMEOUT) -> dict:
    """POST ``payload`` to Gemini once and return the decoded JSON body.

    Any transport failure, non-2xx status or non-object body raises
    UpstreamError. There is no retry.
    """
    url = f"{API_BASE}/models/{model}:generateContent"
    headers = {
        "x-goog-api-key": api_key,
        "Content-Type": "application/json",
    }

    try:
        response = requests.post(url, headers=headers, json=payload, timeout=timeout)
    except requests.RequestException as e:
        raise UpstreamError(f"Failed to call Gemini API: {e}") from e

    if not response.ok:
        raise UpstreamError(_error_message(response))

    try:
        data = response.json()
    except ValueError as e:
        raise UpstreamError("Gemini API returned a non-JSON response.") from e
    if not isinstance(data, dict):
        raise UpstreamError("Gemini API returned an unexpected response shape.")
    return data


def _first(items: Any) -> Dict[str, Any]:
    if isinstance(items, list) and items and isinstance(items[0], dict):
        return items[0]
    return {}


def _collect_sources(entries: Any) -> List[Source]:
    sources = []
    if not isinstance(entries, list):
        return sources
    for entry in entries:
        web = entry.get("web") if isinstance(entry, dict) else None
        if not isinstance(web, dict):
            continue
        uri, title = web.get("uri"), web.get("title")
        # both fields must be present and non-empty, otherwise drop quietly
        if isinstance(uri, str) and uri and isinstance(title, str) and title:
            sources.append(Source(uri=uri, title=title))
    return sources


def extract_result(response: dict) -> AnalysisResult:
    """Reduce a generateContent response to text plus its web sources."""
    candidate = _first(response.get("candidates") if isinstance(response, dict) else None)
    content = candidate.get("content")
    part = _first(content.get("parts") if isinstance(content, dict) else None)

    text = part.get("text")
    if not isinstance(text, str) or not text:
        text = NO_TEXT_PLACEHOLDER

    sources: List[Source] = []
    grounding = candidate.get("groundingMetadata")
    if isinstance(grounding, dict):
        sources.extend(_collect_sources(grounding.get("groundingAttributions")))
        sources.extend(_collect_sources(grounding.get("groundingChunks")))

    return AnalysisResult(text=text, sources=sources)
