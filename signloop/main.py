#!/usr/bin/env python3
"""
Main entry point for the contract analysis pipeline.
"""

import os
import sys
import json
import asyncio
import logging
import argparse
import mimetypes

from signloop.config import Config
from signloop.contract_analyzer import ContractAnalyzer
from signloop.exceptions import ContractAnalysisError

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s:%(lineno)d - %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S"
)
logger = logging.getLogger(__name__)


def guess_mime_type(file_path: str) -> str:
    mime_type, _ = mimetypes.guess_type(file_path)
    return mime_type or "application/octet-stream"


async def extract_file(file_path: str, mime_type: str, config: Config) -> dict:
    """
    Extract text from a file and return it with extraction details.

    Args:
        file_path: Path to the document.
        mime_type: Declared MIME type.
        config: Configuration settings.

    Returns:
        Dictionary with text, method and confidence.
    """
    analyzer = ContractAnalyzer(config)
    with open(file_path, 'rb') as f:
        file_content = f.read()
    extraction = await analyzer.extract_text(file_content, mime_type)
    return {
        "text": extraction.text,
        "method": extraction.method.value,
        "confidence": extraction.confidence,
    }


async def analyze_file(file_path: str, mime_type: str, metadata: dict, config: Config) -> dict:
    """
    Analyze a contract file and return results.

    Args:
        file_path: Path to contract file.
        mime_type: Declared MIME type.
        metadata: contractType / region hints.
        config: Configuration settings.

    Returns:
        Dictionary of analysis results.
    """
    analyzer = ContractAnalyzer(config)
    with open(file_path, 'rb') as f:
        file_content = f.read()
    outcome = await analyzer.analyze_document(file_content, mime_type, metadata=metadata)
    return {
        "provider": outcome.provider,
        "model": outcome.model,
        "processing_time_ms": outcome.processing_time_ms,
        "extraction": {
            "method": outcome.extraction.method.value,
            "confidence": outcome.extraction.confidence,
            "char_count": len(outcome.extraction.text),
        },
        "result": outcome.result.model_dump(),
    }


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Contract extraction and risk analysis")
    subparsers = parser.add_subparsers(dest="command", help="Command to run")
    subparsers.add_parser("api", help="Run API server")

    extract_parser = subparsers.add_parser("extract", help="Extract text from a document")
    extract_parser.add_argument("file", help="Path to document")
    extract_parser.add_argument("--mime-type", help="Declared MIME type (guessed from extension by default)")

    analyze_parser = subparsers.add_parser("analyze", help="Analyze a contract file")
    analyze_parser.add_argument("file", help="Path to contract file")
    analyze_parser.add_argument("--mime-type", help="Declared MIME type (guessed from extension by default)")
    analyze_parser.add_argument("--contract-type", help="Contract type hint")
    analyze_parser.add_argument("--region", help="Region hint")
    analyze_parser.add_argument("--output", "-o", help="Output file for analysis results")
    args = parser.parse_args(argv)

    config = Config()

    if args.command == "api":
        from signloop.api.server import run_server
        run_server(config)
        return 0

    if args.command not in ("extract", "analyze"):
        parser.print_help()
        return 1

    if not os.path.exists(args.file):
        print(f"Error: File not found: {args.file}", file=sys.stderr)
        return 1

    mime_type = args.mime_type or guess_mime_type(args.file)
    try:
        if args.command == "extract":
            result = asyncio.run(extract_file(args.file, mime_type, config))
        else:
            metadata = {"contractType": args.contract_type, "region": args.region}
            result = asyncio.run(analyze_file(args.file, mime_type, metadata, config))
    except ContractAnalysisError as e:
        logger.error("%s: %s", type(e).__name__, e)
        print(f"Error: {e}", file=sys.stderr)
        return 2

    if getattr(args, "output", None):
        with open(args.output, 'w') as f:
            json.dump(result, f, indent=2)
        print(f"Analysis saved to {args.output}")
    else:
        print(json.dumps(result, indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
