"""
Tests for the logging helpers and the append-only processing log.
"""

import re
import sys
import threading
from pathlib import Path

import pytest

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from batch_summarizer.logging_config import (
    Timer,
    close_processing_log,
    configure_processing_log,
    error,
    format_duration,
    info,
    iso_timestamp,
    warning,
)

LINE_PATTERN = re.compile(r"^\[\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}\.\d{3}Z\] (.*)$")


@pytest.fixture
def log_path(tmp_path):
    path = tmp_path / "logs" / "processing.log"
    configure_processing_log(path)
    yield path
    close_processing_log()


class TestProcessingLog:

    def test_lines_are_timestamped(self, log_path):
        info("Processing: a.pdf")
        warning("Summary for a.pdf exceeds 2000 characters (2100)")
        error("Error processing b.pdf: Request timed out")
        close_processing_log()

        lines = log_path.read_text(encoding='utf-8').splitlines()
        messages = [LINE_PATTERN.match(line).group(1) for line in lines]
        assert messages == [
            "Processing: a.pdf",
            "Summary for a.pdf exceeds 2000 characters (2100)",
            "Error processing b.pdf: Request timed out",
        ]

    def test_multiline_message_gets_a_timestamp_per_line(self, log_path):
        error("Error processing a.pdf: API Error: Ollama returned status 502: <html>\n<body>Bad gateway</body>")
        close_processing_log()

        lines = log_path.read_text(encoding='utf-8').splitlines()
        assert len(lines) == 2
        assert all(LINE_PATTERN.match(line) for line in lines)
        assert LINE_PATTERN.match(lines[1]).group(1) == "<body>Bad gateway</body>"

    def test_log_is_appended_across_runs(self, log_path):
        info("first run")
        close_processing_log()
        configure_processing_log(log_path)
        info("second run")
        close_processing_log()

        assert len(log_path.read_text(encoding='utf-8').splitlines()) == 2

    def test_concurrent_writers_do_not_interleave(self, log_path):
        def write_many(tag):
            for i in range(50):
                info(f"{tag} message {i}")

        threads = [threading.Thread(target=write_many, args=(tag,)) for tag in "abcd"]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()
        close_processing_log()

        lines = log_path.read_text(encoding='utf-8').splitlines()
        assert len(lines) == 200
        assert all(LINE_PATTERN.match(line) for line in lines)

    def test_disabled_until_configured(self, tmp_path):
        close_processing_log()
        info("console only")
        configure_processing_log(None)
        info("still console only")

        assert list(tmp_path.iterdir()) == []


class TestHelpers:

    def test_iso_timestamp_format(self):
        assert re.fullmatch(r"\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}\.\d{3}Z", iso_timestamp())

    @pytest.mark.parametrize("seconds, expected", [
        (0, "0h 0m 0s"),
        (59.9, "0h 0m 59s"),
        (3725.4, "1h 2m 5s"),
    ])
    def test_format_duration(self, seconds, expected):
        assert format_duration(seconds) == expected

    def test_timer_measures_duration(self):
        with Timer("noop", auto_log=False) as timer:
            pass
        assert timer.get_duration_ms() >= 0

    def test_timer_not_completed(self):
        with pytest.raises(ValueError):
            Timer("never run").get_duration_ms()
