"""CLI harness: serve the HTTP API, or analyze a case file from disk."""
from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path

from caselens.analysis import CaseAnalysisError, CaseProcessor, ProcessingSettings
from caselens.api import ServerSettings, create_app
from caselens.llm import LLMError, LLMService, LLMSettings


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
    )


def _cmd_serve(args: argparse.Namespace) -> int:
    settings = ServerSettings()
    host = args.host or settings.host
    port = args.port or settings.port
    app = create_app(server_settings=settings)
    print(f"Server running at http://{host}:{port}")
    print(f"Health check available at http://{host}:{port}/health")
    app.run(host=host, port=port, debug=settings.debug)
    return 0


def _cmd_analyze(args: argparse.Namespace) -> int:
    file_path = Path(args.file).resolve()
    if not file_path.exists():
        print(f"Error: file not found: {file_path}", file=sys.stderr)
        return 1
    text = file_path.read_text(encoding="utf-8")

    async def run():
        processor = CaseProcessor(LLMService(LLMSettings()), settings=ProcessingSettings())
        if args.next_steps:
            return await processor.process_next_steps(text)
        return await processor.process_case(text)

    try:
        result = asyncio.run(run())
    except (CaseAnalysisError, LLMError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    print(json.dumps(result.model_dump(by_alias=True), indent=2, ensure_ascii=False))
    return 0


def main() -> int:
    parser = argparse.ArgumentParser(description="Case history analysis")
    parser.add_argument("--log-level", default=None, help="Log level (default: SERVER_LOG_LEVEL or INFO)")
    sub = parser.add_subparsers(dest="cmd", required=True)

    p_serve = sub.add_parser("serve", help="Run the HTTP API")
    p_serve.add_argument("--host", default=None, help="Bind address (default: SERVER_HOST)")
    p_serve.add_argument("--port", "-p", type=int, default=None, help="Bind port (default: SERVER_PORT or 3000)")
    p_serve.set_defaults(func=_cmd_serve)

    p_analyze = sub.add_parser("analyze", help="Analyze a case history text file and print JSON")
    p_analyze.add_argument("--next-steps", action="store_true", help="Produce a next-steps plan instead")
    p_analyze.add_argument("file", help="Path to a UTF-8 text file")
    p_analyze.set_defaults(func=_cmd_analyze)

    args = parser.parse_args()
    _configure_logging(args.log_level or ServerSettings().log_level)
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
