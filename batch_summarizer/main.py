"""
Batch Summarizer - Command Line Entry Point

Summarizes every PDF/TXT document in the docs folder that does not yet
have a summary. Safe to interrupt and rerun: finished summaries are kept
and only the missing ones are generated on the next run.

Signals:
    First SIGINT/SIGTERM: stop starting new documents and generation calls,
    let in-flight requests return, then exit.
    Second signal: exit immediately.

Exit codes:
    0 - run finished (individual documents may still have failed)
    1 - configuration error or the run aborted
    130 - run cancelled by a signal
"""

import argparse
import os
import signal
import sys
import threading

from batch_summarizer.ai.ollama_client import OllamaClient
from batch_summarizer.config import load_config
from batch_summarizer.errors import ConfigError
from batch_summarizer.logging_config import (
    close_processing_log,
    configure_processing_log,
    error,
    info,
    warning,
)
from batch_summarizer.summarization import BatchSummarizer, HierarchicalDocumentSummarizer

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_CANCELLED = 130


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="batch-summarizer",
        description="Summarize every PDF/TXT document in a folder with a local Ollama model."
    )
    parser.add_argument('--config', help="YAML config file (default: config/summarizer.yaml)")
    parser.add_argument('--docs', dest='docs_folder', help="Folder with documents to summarize")
    parser.add_argument('--summaries', dest='summaries_folder', help="Folder for summary files")
    parser.add_argument('--log-file', dest='log_file', help="Append-only processing log")
    parser.add_argument('--model', help="Ollama model name")
    parser.add_argument('--api-base', dest='api_base', help="Ollama base URL")
    parser.add_argument('--concurrency', dest='max_concurrency', type=int,
                        help="Documents processed per batch (1 = sequential)")
    parser.add_argument('--timeout', dest='timeout_seconds', type=float,
                        help="Per-request timeout in seconds")
    parser.add_argument('--max-length', dest='max_summary_length', type=int,
                        help="Target summary length in characters")
    parser.add_argument('--skip-connection-check', action='store_true',
                        help="Do not check the Ollama connection before starting")
    return parser


def install_signal_handlers(cancel_event: threading.Event):
    """First signal requests cancellation, the second one exits immediately."""

    def handle_signal(signum, frame):
        name = signal.Signals(signum).name
        if cancel_event.is_set():
            os._exit(EXIT_CANCELLED)
        info(f"Received {name}, exiting...")
        cancel_event.set()

    signal.signal(signal.SIGINT, handle_signal)
    signal.signal(signal.SIGTERM, handle_signal)


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    try:
        config = load_config(args.config).with_overrides(
            docs_folder=args.docs_folder,
            summaries_folder=args.summaries_folder,
            log_file=args.log_file,
            model=args.model,
            api_base=args.api_base,
            max_concurrency=args.max_concurrency,
            timeout_seconds=args.timeout_seconds,
            max_summary_length=args.max_summary_length,
        )
    except ConfigError as e:
        error(f"Fatal error: {e}")
        return EXIT_FAILURE

    configure_processing_log(config.log_file)
    try:
        client = OllamaClient(config)
        if not args.skip_connection_check and not client.check_connection():
            warning(
                f"Ollama is not reachable at {config.api_base}; "
                "documents will fail until the service is started"
            )

        cancel_event = threading.Event()
        install_signal_handlers(cancel_event)

        summarizer = BatchSummarizer(
            config,
            document_summarizer=HierarchicalDocumentSummarizer(config, client),
            cancel_event=cancel_event
        )
        result = summarizer.run()

        if result.aborted:
            return EXIT_FAILURE
        if result.cancelled:
            return EXIT_CANCELLED
        return EXIT_OK
    finally:
        close_processing_log()


if __name__ == "__main__":
    sys.exit(main())
