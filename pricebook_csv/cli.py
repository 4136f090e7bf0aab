#!/usr/bin/env python3
"""
Convert price book XML exports to CSV.

    pricebook-csv usd-list-prices.xml eur-sale-prices.xml --output-dir out/
    pricebook-csv https://example.com/exports/usd-list-prices.xml --stdout
"""

import argparse
import logging
import sys

from .config import load_settings
from .errors import ConfigError, ConversionError
from .pipeline import PipelineDriver
from .sinks import DirectorySink, StreamSink
from .sources import check_input_kind, read_source, source_name

logger = logging.getLogger(__name__)


def build_parser():
    ap = argparse.ArgumentParser(prog="pricebook-csv", description="Convert price book XML exports to CSV.")
    ap.add_argument("sources", nargs="+", metavar="SOURCE", help="XML file path or http(s) URL")
    ap.add_argument("--config", default=None, help="YAML settings file")
    ap.add_argument("--output-dir", default=None, help="directory for the CSV files (overrides config)")
    ap.add_argument("--stdout", action="store_true", help="print CSV to stdout instead of writing files")
    ap.add_argument("--strict", action="store_true", help="reject documents with price entries before header/currency")
    ap.add_argument("--verbose", "-v", action="store_true", help="debug logging")
    return ap


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    try:
        settings = load_settings(args.config)
    except ConfigError as e:
        print(f"[error] {e}", file=sys.stderr)
        return 2

    if args.output_dir:
        settings.output_dir = args.output_dir
    if args.strict:
        settings.strict = True

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    sink = StreamSink(sys.stdout) if args.stdout else DirectorySink(settings.output_dir)
    driver = PipelineDriver(
        sink,
        strict=settings.strict,
        chunk_size=settings.chunk_size,
        default_output_name=settings.default_output_name,
    )

    failed = 0
    for source in args.sources:
        try:
            check_input_kind(source_name(source), settings.allowed_extensions)
            doc = read_source(source, timeout=settings.http_timeout, max_bytes=settings.max_input_bytes)
        except ConversionError as e:
            logger.error("Skipping %s: %s", source, e)
            print(f"Conversion failed: {source}", file=sys.stderr)
            failed += 1
            continue

        outcome = driver.convert(doc.content, doc.name)
        if outcome.ok:
            if args.stdout:
                logger.info("Wrote %d rows from %s to stdout", outcome.row_count, source)
            else:
                print(f"Done! Wrote {outcome.row_count} rows to {sink.output_dir / outcome.output_name}")
        else:
            print(f"{outcome.message}: {source}", file=sys.stderr)
            failed += 1

    return 1 if failed else 0


if __name__ == "__main__":
    sys.exit(main())
