"""
Error taxonomy for the Batch Document Summarizer.

Generation failures are split by cause so the batch driver can log a
meaningful reason for each failed document:

    SummarizerError
        ├── GenerationError
        │     ├── ServiceUnavailable   (Ollama not reachable)
        │     ├── RequestTimedOut      (request exceeded configured timeout)
        │     ├── InvalidResponse      (no usable 'response' field)
        │     └── ApiError             (anything else the backend reported)
        ├── TextExtractionFailure      (document unreadable or unparseable)
        └── ConfigError                (invalid configuration values)
"""


class SummarizerError(Exception):
    """Base class for all summarizer errors."""


class GenerationError(SummarizerError):
    """
    A call to the generation backend failed.

    Attributes:
        kind: Short machine-readable failure category used in logs and results.
    """

    kind = "generation_error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ServiceUnavailable(GenerationError):
    kind = "service_unavailable"


class RequestTimedOut(GenerationError):
    kind = "request_timed_out"


class InvalidResponse(GenerationError):
    kind = "invalid_response"


class ApiError(GenerationError):
    kind = "api_error"


class TextExtractionFailure(SummarizerError):
    """Source document could not be read or parsed."""


class ConfigError(SummarizerError, ValueError):
    """Configuration file or values are invalid."""


# Lookup used to rebuild an exception from a tagged generation result
GENERATION_ERRORS_BY_KIND = {
    cls.kind: cls
    for cls in (ServiceUnavailable, RequestTimedOut, InvalidResponse, ApiError)
}
