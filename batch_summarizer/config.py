"""
Batch Summarizer Configuration Module
Centralized configuration for the application.

Module-level constants are the defaults. A YAML file (config/summarizer.yaml
by default) can override any of them; load_config() merges the file over
the defaults and validates the result into a SummarizerConfig.
"""

import os
from dataclasses import dataclass, field, replace
from pathlib import Path

import yaml

from batch_summarizer.errors import ConfigError

# Debug Mode Configuration
DEBUG_MODE = os.environ.get('DEBUG', 'false').lower() == 'true'

APP_NAME = "BatchSummarizer"

# Default configuration file shipped with the project
DEFAULT_CONFIG_FILE = Path(__file__).parent.parent / "config" / "summarizer.yaml"

# Folder Paths (relative to the working directory)
DEFAULT_DOCS_FOLDER = "./docs"
DEFAULT_SUMMARIES_FOLDER = "./summaries"
DEFAULT_LOG_FILE = "./processing.log"

# Supported input formats and the fixed output extension
SUPPORTED_EXTENSIONS = {'.pdf': 'PDF', '.txt': 'TEXT'}
SUMMARY_EXTENSION = ".txt"

# File Processing Limits
MAX_FILE_SIZE_MB = 500
LARGE_FILE_WARNING_MB = 100

# AI Model Configuration
OLLAMA_API_BASE = "http://127.0.0.1:11434"  # Default Ollama API endpoint
OLLAMA_MODEL_NAME = "llama3.2"
OLLAMA_TIMEOUT_SECONDS = 300  # 5 minutes per request
OLLAMA_CONNECTION_CHECK_TIMEOUT = 5

# Processing Settings
MAX_SUMMARY_LENGTH = 2000  # Characters; advisory only
MAX_CONCURRENCY = 1  # Documents processed at the same time

# Chunking (hierarchical summarization of large documents)
# llama3.2 has a 131k context window; 1 token is estimated as 4 characters
CHUNKING_ENABLED = True
MAX_TOKENS_PER_CHUNK = 100000
CHUNK_SIZE_THRESHOLD = 400000  # Characters (~100k tokens)
MAX_CHUNK_SUMMARY_LENGTH = 1000

# Sampling parameters sent with every generation request
MODEL_TEMPERATURE = 0.7
MODEL_TOP_P = 0.9

# Prompt Templates
# {max_length} is replaced by the length target, {text} by the payload.
TEXT_PLACEHOLDER = "{text}"
LENGTH_PLACEHOLDER = "{max_length}"

DEFAULT_PROMPTS = {
    'chunk_summary': (
        "Summarize this text section in maximum {max_length} characters. "
        "Write in flowing paragraphs, not lists or bullet points. "
        "Start directly with the key points, no introductory phrases:\n\n"
        "{text}\n\n"
        "Summary:"
    ),
    'document_summary': (
        "Summarize this text in maximum {max_length} characters. "
        "Write in flowing paragraphs, not lists or bullet points. "
        "Mention the author only if it is explicitly stated in the text - "
        "do not assume that the author of the document is the author of the text. "
        "Start directly with the key points and main ideas, no introductory phrases "
        "like \"Here is a summary\" or \"This document discusses\". "
        "Write a coherent narrative summary in paragraph form.\n\n"
        "{text}\n\n"
        "Summary:"
    ),
    'final_summary': (
        "Create a comprehensive summary of the following text sections in maximum "
        "{max_length} characters. Write in flowing paragraphs, not lists or bullet "
        "points. Start directly with the key points and main ideas, no introductory "
        "phrases. Write a coherent narrative summary that flows naturally from one "
        "topic to the next:\n\n"
        "{text}\n\n"
        "Summary:"
    ),
}


@dataclass
class ChunkingConfig:
    """Settings for splitting oversized documents."""
    enabled: bool = CHUNKING_ENABLED
    max_tokens_per_chunk: int = MAX_TOKENS_PER_CHUNK
    chunk_size_threshold: int = CHUNK_SIZE_THRESHOLD
    max_chunk_summary_length: int = MAX_CHUNK_SUMMARY_LENGTH


@dataclass
class ModelOptions:
    """Sampling options forwarded to Ollama."""
    temperature: float = MODEL_TEMPERATURE
    top_p: float = MODEL_TOP_P

    def as_payload(self) -> dict:
        return {'temperature': self.temperature, 'top_p': self.top_p}


@dataclass
class SummarizerConfig:
    """
    Complete run configuration.

    Attributes:
        docs_folder: Folder scanned for PDF/TXT documents.
        summaries_folder: Result store; one <stem>.txt per document.
        log_file: Append-only processing log (None disables it).
        api_base: Ollama base URL (without /api/generate).
        model: Ollama model identifier.
        max_summary_length: Advisory character cap for final summaries.
        max_concurrency: Documents processed per batch (1 = sequential).
        timeout_seconds: Per-request timeout for generation calls.
        chunking: Chunking thresholds for large documents.
        model_options: Sampling parameters.
        prompts: Template name -> template string.
    """
    docs_folder: Path = Path(DEFAULT_DOCS_FOLDER)
    summaries_folder: Path = Path(DEFAULT_SUMMARIES_FOLDER)
    log_file: Path | None = Path(DEFAULT_LOG_FILE)
    api_base: str = OLLAMA_API_BASE
    model: str = OLLAMA_MODEL_NAME
    max_summary_length: int = MAX_SUMMARY_LENGTH
    max_concurrency: int = MAX_CONCURRENCY
    timeout_seconds: float = OLLAMA_TIMEOUT_SECONDS
    chunking: ChunkingConfig = field(default_factory=ChunkingConfig)
    model_options: ModelOptions = field(default_factory=ModelOptions)
    prompts: dict[str, str] = field(default_factory=lambda: dict(DEFAULT_PROMPTS))

    def render_prompt(self, template_name: str, max_length: int, text: str) -> str:
        """
        Build a prompt from a named template.

        The length target is substituted first, then the payload replaces
        the first {text} placeholder. The payload itself is never scanned
        for placeholders.
        """
        template = self.prompts[template_name]
        template = template.replace(LENGTH_PLACEHOLDER, str(max_length))
        return template.replace(TEXT_PLACEHOLDER, text, 1)

    def with_overrides(self, **overrides) -> 'SummarizerConfig':
        """Return a copy with non-None overrides applied, then validated."""
        values = {key: value for key, value in overrides.items() if value is not None}
        for key in ('docs_folder', 'summaries_folder', 'log_file'):
            if key in values:
                values[key] = Path(values[key])
        updated = replace(self, **values)
        validate_config(updated)
        return updated


def validate_config(config: SummarizerConfig) -> None:
    """
    Check configuration values.

    Raises:
        ConfigError: If any value is out of range or a template is unusable.
    """
    if config.max_concurrency < 1:
        raise ConfigError(f"max_concurrency must be at least 1 (got {config.max_concurrency})")
    if config.max_summary_length <= 0:
        raise ConfigError("max_summary_length must be positive")
    if config.timeout_seconds <= 0:
        raise ConfigError("timeout_seconds must be positive")
    if not config.model:
        raise ConfigError("model must not be empty")

    chunking = config.chunking
    if chunking.max_tokens_per_chunk <= 0:
        raise ConfigError("chunking.max_tokens_per_chunk must be positive")
    if chunking.chunk_size_threshold <= 0:
        raise ConfigError("chunking.chunk_size_threshold must be positive")
    if chunking.max_chunk_summary_length <= 0:
        raise ConfigError("chunking.max_chunk_summary_length must be positive")

    for name in DEFAULT_PROMPTS:
        template = config.prompts.get(name)
        if not template:
            raise ConfigError(f"Prompt template '{name}' is missing")
        if TEXT_PLACEHOLDER not in template:
            raise ConfigError(f"Prompt template '{name}' has no {TEXT_PLACEHOLDER} placeholder")


def _read_config_file(config_path: Path) -> dict:
    """Loads raw settings from a YAML file; empty dict if the file is missing."""
    from batch_summarizer.logging_config import debug_log

    try:
        with open(config_path, encoding='utf-8') as f:
            data = yaml.safe_load(f) or {}
    except FileNotFoundError:
        debug_log(f"[Config] Config file not found at {config_path}. Using default values.")
        return {}
    except yaml.YAMLError as e:
        raise ConfigError(f"Failed to parse config file {config_path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"Config file {config_path} must contain a mapping at the top level")

    debug_log(f"[Config] Loaded settings from {config_path}")
    return data


def load_config(config_path: Path | str | None = None) -> SummarizerConfig:
    """
    Load the run configuration.

    Args:
        config_path: YAML file to read. Defaults to config/summarizer.yaml.

    Returns:
        Validated SummarizerConfig.

    Raises:
        ConfigError: If the file cannot be parsed or values are invalid.
    """
    path = Path(config_path) if config_path else DEFAULT_CONFIG_FILE
    data = _read_config_file(path)

    folders = data.get('folders', {}) or {}
    ollama = data.get('ollama', {}) or {}
    processing = data.get('processing', {}) or {}
    chunking_data = data.get('chunking', {}) or {}
    options_data = data.get('model_options', {}) or {}
    prompts_data = data.get('prompts', {}) or {}

    log_file = folders.get('log_file', DEFAULT_LOG_FILE)

    try:
        config = SummarizerConfig(
            docs_folder=Path(folders.get('docs', DEFAULT_DOCS_FOLDER)),
            summaries_folder=Path(folders.get('summaries', DEFAULT_SUMMARIES_FOLDER)),
            log_file=Path(log_file) if log_file else None,
            api_base=str(ollama.get('api_base', OLLAMA_API_BASE)).rstrip('/'),
            model=str(ollama.get('model', OLLAMA_MODEL_NAME)),
            timeout_seconds=float(ollama.get('timeout_seconds', OLLAMA_TIMEOUT_SECONDS)),
            max_summary_length=int(processing.get('max_summary_length', MAX_SUMMARY_LENGTH)),
            max_concurrency=int(processing.get('max_concurrency', MAX_CONCURRENCY)),
            chunking=ChunkingConfig(
                enabled=bool(chunking_data.get('enabled', CHUNKING_ENABLED)),
                max_tokens_per_chunk=int(chunking_data.get('max_tokens_per_chunk', MAX_TOKENS_PER_CHUNK)),
                chunk_size_threshold=int(chunking_data.get('chunk_size_threshold', CHUNK_SIZE_THRESHOLD)),
                max_chunk_summary_length=int(
                    chunking_data.get('max_chunk_summary_length', MAX_CHUNK_SUMMARY_LENGTH)
                ),
            ),
            model_options=ModelOptions(
                temperature=float(options_data.get('temperature', MODEL_TEMPERATURE)),
                top_p=float(options_data.get('top_p', MODEL_TOP_P)),
            ),
            prompts={**DEFAULT_PROMPTS, **{str(k): str(v) for k, v in prompts_data.items()}},
        )
    except (TypeError, ValueError) as e:
        raise ConfigError(f"Invalid value in config file {path}: {e}") from e

    validate_config(config)
    return config
