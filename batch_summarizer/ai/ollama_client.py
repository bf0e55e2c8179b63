"""
Ollama Client for the Batch Summarizer
Sends prompts to a local Ollama server through its REST API.

Every generation call returns a GenerationResult instead of raising, so
callers decide explicitly how to propagate a failure:

    result = client.generate(prompt)
    if not result.success:
        ...  # result.error_kind / result.error_message
    text = result.text

Failure mapping:
- connection refused / unreachable  -> ServiceUnavailable
- request exceeded timeout          -> RequestTimedOut
- no usable 'response' field        -> InvalidResponse
- anything else                     -> ApiError
"""

import time
from dataclasses import dataclass

import requests

from ..config import OLLAMA_CONNECTION_CHECK_TIMEOUT, SummarizerConfig
from ..errors import (
    GENERATION_ERRORS_BY_KIND,
    ApiError,
    GenerationError,
    InvalidResponse,
    RequestTimedOut,
    ServiceUnavailable,
)
from ..logging_config import debug_log

GENERATE_ENDPOINT = "/api/generate"
TAGS_ENDPOINT = "/api/tags"


@dataclass
class GenerationResult:
    """
    Outcome of one generation call: either text or an error.

    Attributes:
        success: True if the backend returned usable text.
        text: Generated text, stripped (empty on failure).
        error_kind: GenerationError.kind of the failure (None on success).
        error_message: Human-readable failure description.
        elapsed_seconds: Wall-clock time of the request.
    """
    success: bool
    text: str = ""
    error_kind: str | None = None
    error_message: str | None = None
    elapsed_seconds: float = 0.0

    @classmethod
    def ok(cls, text: str, elapsed_seconds: float = 0.0) -> 'GenerationResult':
        return cls(success=True, text=text, elapsed_seconds=elapsed_seconds)

    @classmethod
    def failed(cls, exc: GenerationError, elapsed_seconds: float = 0.0) -> 'GenerationResult':
        return cls(
            success=False,
            error_kind=exc.kind,
            error_message=exc.message,
            elapsed_seconds=elapsed_seconds,
        )

    def to_exception(self) -> GenerationError:
        """Rebuild the typed exception for a failed result."""
        error_cls = GENERATION_ERRORS_BY_KIND.get(self.error_kind, ApiError)
        return error_cls(self.error_message or "Unknown generation error")

    def unwrap(self) -> str:
        """Return the text, or raise the typed exception for a failure."""
        if not self.success:
            raise self.to_exception()
        return self.text


class OllamaClient:
    """
    Minimal Ollama REST client for non-streaming text generation.

    Attributes:
        api_base: Base URL of the Ollama server.
        model_name: Model identifier sent with each request.
        timeout: Per-request timeout in seconds.
        options: Sampling options (temperature, top_p).
    """

    def __init__(self, config: SummarizerConfig, session: requests.Session | None = None):
        self.api_base = config.api_base.rstrip('/')
        self.model_name = config.model
        self.timeout = config.timeout_seconds
        self.options = config.model_options.as_payload()
        self._http = session or requests

    @property
    def generate_url(self) -> str:
        return f"{self.api_base}{GENERATE_ENDPOINT}"

    def check_connection(self) -> bool:
        """
        Check if Ollama is running and accessible.

        Returns:
            bool: True if Ollama answered the tags endpoint with status 200
        """
        try:
            response = self._http.get(
                f"{self.api_base}{TAGS_ENDPOINT}",
                timeout=OLLAMA_CONNECTION_CHECK_TIMEOUT
            )
            connected = response.status_code == 200
            debug_log(f"[OLLAMA] Connection check: status {response.status_code}")
            return connected
        except requests.exceptions.RequestException as e:
            debug_log(f"[OLLAMA] Connection error: cannot reach {self.api_base} ({e})")
            return False

    def build_payload(self, prompt: str) -> dict:
        return {
            "model": self.model_name,
            "prompt": prompt,
            "stream": False,
            "options": dict(self.options),
        }

    def generate(self, prompt: str) -> GenerationResult:
        """
        Generate text for a prompt.

        Args:
            prompt: Fully rendered prompt.

        Returns:
            GenerationResult carrying either the stripped text or the error.
        """
        debug_log(f"[OLLAMA GENERATE] Model: {self.model_name}, prompt length: {len(prompt)} chars")
        start_time = time.time()

        try:
            text = self._post_generate(prompt)
        except GenerationError as e:
            elapsed = time.time() - start_time
            debug_log(f"[OLLAMA GENERATE] Failed after {elapsed:.2f}s: {e.kind}: {e.message}")
            return GenerationResult.failed(e, elapsed)

        elapsed = time.time() - start_time
        debug_log(f"[OLLAMA GENERATE] Output length: {len(text)} chars in {elapsed:.2f}s")
        return GenerationResult.ok(text, elapsed)

    def generate_text(self, prompt: str) -> str:
        """
        Generate text, raising a GenerationError subclass on failure.

        Raises:
            ServiceUnavailable, RequestTimedOut, InvalidResponse, ApiError
        """
        return self.generate(prompt).unwrap()

    def _post_generate(self, prompt: str) -> str:
        try:
            response = self._http.post(
                self.generate_url,
                json=self.build_payload(prompt),
                headers={'Content-Type': 'application/json'},
                timeout=self.timeout
            )
        # ConnectTimeout is both a Timeout and a ConnectionError; report it as a timeout
        except requests.exceptions.Timeout as e:
            raise RequestTimedOut(
                "Request timed out. The document might be too large or Ollama is slow."
            ) from e
        except requests.exceptions.ConnectionError as e:
            raise ServiceUnavailable(
                f"Ollama is not running at {self.api_base}. Please start Ollama first."
            ) from e
        except requests.exceptions.RequestException as e:
            raise ApiError(f"API Error: {e}") from e

        if response.status_code != 200:
            raise ApiError(f"API Error: Ollama returned status {response.status_code}: {response.text}")

        try:
            result = response.json()
        except ValueError as e:
            raise InvalidResponse("Invalid response from Ollama API: body is not JSON") from e

        generated_text = result.get('response') if isinstance(result, dict) else None
        if not isinstance(generated_text, str) or not generated_text.strip():
            raise InvalidResponse("Invalid response from Ollama API")

        return generated_text.strip()
