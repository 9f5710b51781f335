# ABOUTME: CLI entry point for PrepPulse.
# ABOUTME: Provides subcommands: fetch, analyze-pdf, serve.

import argparse
import asyncio
import json
import logging
import sys
from datetime import datetime
from pathlib import Path

import structlog

from prep_pulse.config import get_settings
from prep_pulse.errors import AllSourcesFailedError
from prep_pulse.models import AnalysisDepth, DateRangePreset, FetchProgress, Language, Topic


def configure_logging() -> None:
    """Configure structlog for console or JSON output."""
    settings = get_settings()

    log_level = getattr(logging, settings.log_level.upper(), logging.INFO)

    if settings.log_format == "json":
        structlog.configure(
            processors=[
                structlog.processors.TimeStamper(fmt="iso"),
                structlog.processors.add_log_level,
                structlog.processors.JSONRenderer(),
            ],
            wrapper_class=structlog.make_filtering_bound_logger(log_level),
        )
    else:
        structlog.configure(
            processors=[
                structlog.processors.TimeStamper(fmt="%Y-%m-%d %H:%M:%S"),
                structlog.processors.add_log_level,
                structlog.dev.ConsoleRenderer(colors=True),
            ],
            wrapper_class=structlog.make_filtering_bound_logger(log_level),
        )


def _print_progress(progress: FetchProgress) -> None:
    print(f"  [{progress.source}] {progress.message}", file=sys.stderr)


def _write_json(payload: list, output: str | None) -> None:
    text = json.dumps(payload, ensure_ascii=False, indent=2)
    if output:
        Path(output).write_text(text, encoding="utf-8")
    else:
        print(text)


def cmd_fetch(args: argparse.Namespace) -> int:
    """Fetch a batch of articles and optionally summarize them.

    Prints JSON to stdout, or writes it to --output.
    """
    from prep_pulse.collector import NewsCollector

    log = structlog.get_logger()
    log.info("cmd_fetch_start", topics=args.topics, preset=args.preset)

    custom = None
    if args.preset == DateRangePreset.CUSTOM.value:
        custom = (
            datetime.fromisoformat(args.start) if args.start else None,
            datetime.fromisoformat(args.end) if args.end else None,
        )

    async def run() -> list:
        async with NewsCollector() as collector:
            return await collector.collect(
                [Topic(topic) for topic in args.topics],
                preset=DateRangePreset(args.preset),
                language=Language(args.language),
                custom=custom,
                summarize=args.summarize,
                on_progress=_print_progress,
            )

    try:
        articles = asyncio.run(run())
    except AllSourcesFailedError as e:
        log.error("cmd_fetch_failed", tried=e.tried)
        print(f"\n{e.user_message}\n", file=sys.stderr)
        return 1

    _write_json([article.model_dump(mode="json") for article in articles], args.output)
    log.info("cmd_fetch_complete", articles=len(articles))
    return 0


def cmd_analyze_pdf(args: argparse.Namespace) -> int:
    """Analyze one or more PDF files.

    Returns 1 if any file failed, after processing all of them.
    """
    from prep_pulse.pdf.processor import PdfProcessor, PdfUpload

    log = structlog.get_logger()
    log.info("cmd_analyze_pdf_start", files=len(args.files))

    uploads = []
    for name in args.files:
        path = Path(name)
        try:
            data = path.read_bytes()
        except OSError as e:
            log.error("pdf_read_failed", path=name, error=str(e))
            data = b""
        uploads.append(PdfUpload(filename=path.name, data=data, content_type=None))

    async def run() -> list:
        processor = PdfProcessor()
        try:
            return await processor.process_batch(
                uploads,
                depth=AnalysisDepth(args.depth),
                language=Language(args.language),
            )
        finally:
            await processor.aclose()

    outcomes = asyncio.run(run())
    _write_json([outcome.model_dump(mode="json") for outcome in outcomes], args.output)

    failed = [outcome.filename for outcome in outcomes if not outcome.ok]
    log.info("cmd_analyze_pdf_complete", total=len(outcomes), failed=len(failed))
    return 1 if failed else 0


def cmd_serve(args: argparse.Namespace) -> int:
    """Run the JSON API with uvicorn."""
    import uvicorn

    uvicorn.run("prep_pulse.web.app:app", host=args.host, port=args.port, reload=args.reload)
    return 0


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser with subcommands."""
    parser = argparse.ArgumentParser(
        prog="prep_pulse",
        description="PrepPulse - current-affairs retrieval and analysis for exam preparation",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # fetch command
    fetch_parser = subparsers.add_parser(
        "fetch",
        help="Fetch articles from the first news source that has any",
    )
    fetch_parser.add_argument(
        "--topics",
        nargs="+",
        default=[Topic.ALL.value],
        choices=[topic.value for topic in Topic],
        help="Topics to search (default: all)",
    )
    fetch_parser.add_argument(
        "--preset",
        default=DateRangePreset.WEEK.value,
        choices=[preset.value for preset in DateRangePreset],
        help="Date range (default: week)",
    )
    fetch_parser.add_argument("--start", type=str, help="Custom range start (ISO 8601)")
    fetch_parser.add_argument("--end", type=str, help="Custom range end (ISO 8601)")
    fetch_parser.add_argument(
        "--language",
        default=Language.EN.value,
        choices=[language.value for language in Language],
        help="Article and summary language (default: en)",
    )
    fetch_parser.add_argument(
        "--summarize",
        action="store_true",
        help="Attach AI summaries to the fetched articles",
    )
    fetch_parser.add_argument("--output", type=str, help="Write JSON here instead of stdout")

    # analyze-pdf command
    pdf_parser = subparsers.add_parser(
        "analyze-pdf",
        help="Extract and analyze PDF study material",
    )
    pdf_parser.add_argument("files", nargs="+", help="PDF files to analyze")
    pdf_parser.add_argument(
        "--depth",
        default=AnalysisDepth.BASIC.value,
        choices=[depth.value for depth in AnalysisDepth],
        help="Analysis depth (default: basic)",
    )
    pdf_parser.add_argument(
        "--language",
        default=Language.EN.value,
        choices=[language.value for language in Language],
        help="Language of the analysis (default: en)",
    )
    pdf_parser.add_argument("--output", type=str, help="Write JSON here instead of stdout")

    # serve command
    serve_parser = subparsers.add_parser("serve", help="Run the HTTP API")
    serve_parser.add_argument("--host", default="127.0.0.1", help="Bind address")
    serve_parser.add_argument("--port", type=int, default=8000, help="Bind port")
    serve_parser.add_argument("--reload", action="store_true", help="Reload on code changes")

    return parser


def main() -> int:
    """Main entry point."""
    configure_logging()

    parser = create_parser()
    args = parser.parse_args()

    commands = {
        "fetch": cmd_fetch,
        "analyze-pdf": cmd_analyze_pdf,
        "serve": cmd_serve,
    }

    handler = commands.get(args.command)
    if handler:
        return handler(args)

    parser.print_help()
    return 1


if __name__ == "__main__":
    sys.exit(main())
