import pytest

from fakes import FakeGemini, gemini_response


@pytest.fixture
def env():
    return {"GEMINI_API_KEY": "test-key"}


@pytest.fixture
def fake_gemini():
    return FakeGemini(response=gemini_response())
