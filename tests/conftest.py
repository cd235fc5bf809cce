"""Shared fixtures for all test modules."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from mdai.config import default_config

SAMPLE_DOCUMENT = """# Notes

Python generators are lazy.

> What does yield from do?
"""


@pytest.fixture
def config():
    return default_config()


@pytest.fixture
def sample_document():
    return SAMPLE_DOCUMENT


@pytest.fixture
def md_file(tmp_path):
    path = tmp_path / "notes.md"
    path.write_text(SAMPLE_DOCUMENT, encoding="utf-8")
    return path


@pytest.fixture
def fake_client():
    """Stand-in for OpenAIClient with canned answers."""
    client = MagicMock()
    client.model = "gpt-4o-mini"
    client.max_tokens = 2000
    client.temperature = 0.7
    client.complete = AsyncMock(return_value="It delegates to a subgenerator.")

    async def fake_stream(system_message, user_message, operation=""):
        for chunk in ["It delegates ", "to a subgenerator."]:
            yield chunk

    client.stream = MagicMock(side_effect=fake_stream)
    return client
