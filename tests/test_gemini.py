import pytest
import requests

from analysis import gemini
from analysis.errors import UpstreamError
from analysis.gemini import NO_TEXT_PLACEHOLDER, build_payload, extract_result, generate_content
from fakes import gemini_response


class FakeResponse:
    def __init__(self, status_code=200, data=None, text=""):
        self.status_code = status_code
        self._data = data
        self.text = text

    @property
    def ok(self):
        return 200 <= self.status_code < 300

    def json(self):
        if self._data is None:
            raise ValueError("no json")
        return self._data


def test_payload_without_search():
    payload = build_payload("Jane Doe", "system prompt", use_search=False)
    assert "tools" not in payload
    assert payload["contents"][0]["role"] == "user"
    assert payload["contents"][0]["parts"][0]["text"].endswith("Jane Doe")
    assert payload["systemInstruction"] == {"parts": [{"text": "system prompt"}]}
    assert payload["generationConfig"] == {
        "temperature": 0.7,
        "topK": 64,
        "topP": 0.95,
        "maxOutputTokens": 8192,
    }
    categories = {s["category"] for s in payload["safetySettings"]}
    assert categories == {
        "HARM_CATEGORY_HARASSMENT",
        "HARM_CATEGORY_HATE_SPEECH",
        "HARM_CATEGORY_SEXUALLY_EXPLICIT",
        "HARM_CATEGORY_DANGEROUS_CONTENT",
    }
    assert all(s["threshold"] == "BLOCK_MEDIUM_AND_ABOVE" for s in payload["safetySettings"])


def test_payload_with_search():
    payload = build_payload("Jane Doe", "system prompt", use_search=True)
    assert payload["tools"] == [{"google_search": {}}]


def test_extract_text_and_no_sources():
    result = extract_result(gemini_response(text="hello"))
    assert result.text == "hello"
    assert result.sources == []


def test_extract_drops_attribution_with_empty_title():
    grounding = {
        "groundingAttributions": [
            {"web": {"uri": "https://jobs.example.com/1", "title": "Engineer - Example"}},
            {"web": {"uri": "https://jobs.example.com/2", "title": ""}},
        ]
    }
    result = extract_result(gemini_response(grounding=grounding))
    assert [s.model_dump() for s in result.sources] == [
        {"uri": "https://jobs.example.com/1", "title": "Engineer - Example"}
    ]


def test_extract_ignores_malformed_entries():
    grounding = {
        "groundingAttributions": [
            {"web": {"uri": "https://a.example.com"}},
            {"web": None},
            {"segment": {}},
            "junk",
        ],
        "groundingChunks": [
            {"web": {"uri": "https://b.example.com", "title": "B"}},
            {"web": {"uri": "", "title": "C"}},
        ],
    }
    result = extract_result(gemini_response(grounding=grounding))
    assert [(s.uri, s.title) for s in result.sources] == [("https://b.example.com", "B")]


def test_extract_keeps_order_and_duplicates():
    web = {"web": {"uri": "https://a.example.com", "title": "A"}}
    other = {"web": {"uri": "https://z.example.com", "title": "Z"}}
    result = extract_result(gemini_response(grounding={"groundingAttributions": [other, web, web]}))
    assert [s.title for s in result.sources] == ["Z", "A", "A"]


@pytest.mark.parametrize(
    "response",
    [
        {},
        {"candidates": []},
        {"candidates": [{"finishReason": "SAFETY"}]},
        {"candidates": [{"content": {"parts": []}}]},
        {"candidates": [{"content": {"parts": [{"text": ""}]}}]},
    ],
)
def test_extract_missing_text_uses_placeholder(response):
    result = extract_result(response)
    assert result.text == NO_TEXT_PLACEHOLDER
    assert result.sources == []


def test_generate_content_posts_once(monkeypatch):
    calls = []

    def fake_post(url, headers=None, json=None, timeout=None):
        calls.append((url, headers, json, timeout))
        return FakeResponse(200, gemini_response())

    monkeypatch.setattr(gemini.requests, "post", fake_post)
    data = generate_content({"contents": []}, "secret", model="test-model", timeout=5)

    assert data == gemini_response()
    assert len(calls) == 1
    url, headers, body, timeout = calls[0]
    assert url.endswith("/models/test-model:generateContent")
    assert headers["x-goog-api-key"] == "secret"
    assert "secret" not in url
    assert body == {"contents": []}
    assert timeout == 5


def test_generate_content_surfaces_upstream_message(monkeypatch):
    error = {"error": {"code": 400, "message": "API key not valid.", "status": "INVALID_ARGUMENT"}}
    monkeypatch.setattr(gemini.requests, "post", lambda *a, **kw: FakeResponse(400, error))

    with pytest.raises(UpstreamError) as exc:
        generate_content({}, "bad-key")
    assert exc.value.message == "API key not valid."
    assert exc.value.status_code == 502


def test_generate_content_without_error_body(monkeypatch):
    monkeypatch.setattr(gemini.requests, "post", lambda *a, **kw: FakeResponse(503, None, "unavailable"))

    with pytest.raises(UpstreamError) as exc:
        generate_content({}, "key")
    assert "HTTP 503" in exc.value.message


def test_generate_content_transport_failure(monkeypatch):
    def boom(*args, **kwargs):
        raise requests.ConnectionError("connection refused")

    monkeypatch.setattr(gemini.requests, "post", boom)

    with pytest.raises(UpstreamError) as exc:
        generate_content({}, "key")
    assert "connection refused" in exc.value.message


def test_generate_content_non_json_success(monkeypatch):
    monkeypatch.setattr(gemini.requests, "post", lambda *a, **kw: FakeResponse(200, None, "<html>"))

    with pytest.raises(UpstreamError):
        generate_content({}, "key")
