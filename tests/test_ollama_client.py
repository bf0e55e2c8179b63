"""
Tests for the Ollama client.

All HTTP traffic is mocked by patching requests.post / requests.get, so no
Ollama server is needed.
"""

import sys
from pathlib import Path
from unittest.mock import Mock, patch

import pytest
import requests

# Add project root to path for imports
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from batch_summarizer.ai.ollama_client import GenerationResult, OllamaClient
from batch_summarizer.config import ModelOptions, SummarizerConfig
from batch_summarizer.errors import ApiError, RequestTimedOut, ServiceUnavailable


def make_response(status_code=200, payload=None, json_error=False):
    response = Mock()
    response.status_code = status_code
    response.text = "server said no"
    if json_error:
        response.json.side_effect = ValueError("not json")
    else:
        response.json.return_value = payload
    return response


@pytest.fixture
def client():
    config = SummarizerConfig(
        api_base="http://localhost:11434/",
        model="llama3.2",
        timeout_seconds=42,
        model_options=ModelOptions(temperature=0.5, top_p=0.8),
    )
    return OllamaClient(config)


class TestPayload:

    def test_build_payload(self, client):
        assert client.build_payload("Hello") == {
            "model": "llama3.2",
            "prompt": "Hello",
            "stream": False,
            "options": {"temperature": 0.5, "top_p": 0.8},
        }

    def test_trailing_slash_is_trimmed(self, client):
        assert client.generate_url == "http://localhost:11434/api/generate"


class TestGenerate:

    @patch('batch_summarizer.ai.ollama_client.requests.post')
    def test_success_returns_stripped_text(self, mock_post, client):
        mock_post.return_value = make_response(payload={'response': '  A summary.  \n'})

        result = client.generate("Summarize")

        assert result.success
        assert result.text == "A summary."
        args, kwargs = mock_post.call_args
        assert args[0] == "http://localhost:11434/api/generate"
        assert kwargs['json']['stream'] is False
        assert kwargs['timeout'] == 42

    @patch('batch_summarizer.ai.ollama_client.requests.post')
    def test_connection_error_maps_to_service_unavailable(self, mock_post, client):
        mock_post.side_effect = requests.exceptions.ConnectionError("refused")

        result = client.generate("Summarize")

        assert not result.success
        assert result.error_kind == ServiceUnavailable.kind
        assert "not running" in result.error_message

    @pytest.mark.parametrize("exc", [
        requests.exceptions.ReadTimeout("slow"),
        requests.exceptions.ConnectTimeout("slow connect"),
    ])
    @patch('batch_summarizer.ai.ollama_client.requests.post')
    def test_timeouts_map_to_request_timed_out(self, mock_post, exc, client):
        mock_post.side_effect = exc
        assert client.generate("Summarize").error_kind == RequestTimedOut.kind

    @patch('batch_summarizer.ai.ollama_client.requests.post')
    def test_non_200_maps_to_api_error(self, mock_post, client):
        mock_post.return_value = make_response(status_code=500)

        result = client.generate("Summarize")

        assert result.error_kind == ApiError.kind
        assert "500" in result.error_message

    @pytest.mark.parametrize("response", [
        make_response(payload={'model': 'llama3.2'}),
        make_response(payload={'response': '   '}),
        make_response(payload=['not', 'a', 'dict']),
        make_response(json_error=True),
    ])
    @patch('batch_summarizer.ai.ollama_client.requests.post')
    def test_unusable_body_maps_to_invalid_response(self, mock_post, response, client):
        mock_post.return_value = response
        assert client.generate("Summarize").error_kind == "invalid_response"

    @patch('batch_summarizer.ai.ollama_client.requests.post')
    def test_generate_text_raises_typed_error(self, mock_post, client):
        mock_post.side_effect = requests.exceptions.ReadTimeout("slow")
        with pytest.raises(RequestTimedOut):
            client.generate_text("Summarize")


class TestGenerationResult:

    def test_unwrap_success(self):
        assert GenerationResult.ok("text").unwrap() == "text"

    def test_failed_round_trips_error_kind(self):
        result = GenerationResult.failed(ServiceUnavailable("down"))
        exc = result.to_exception()
        assert isinstance(exc, ServiceUnavailable)
        assert exc.message == "down"


class TestCheckConnection:

    @patch('batch_summarizer.ai.ollama_client.requests.get')
    def test_reachable(self, mock_get, client):
        mock_get.return_value = make_response(payload={'models': []})
        assert client.check_connection() is True
        assert mock_get.call_args[0][0] == "http://localhost:11434/api/tags"

    @patch('batch_summarizer.ai.ollama_client.requests.get')
    def test_unreachable(self, mock_get, client):
        mock_get.side_effect = requests.exceptions.ConnectionError("refused")
        assert client.check_connection() is False
