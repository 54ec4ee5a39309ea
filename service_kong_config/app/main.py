#!/usr/bin/env python3
"""
Command line entry point for the Kong configuration generator.

Usage: kong-config generate [--project-root DIR]
"""

import argparse
import sys
from typing import List, Optional

from shared.config import get_config
from shared.errors import GatewayConfigException
from shared.logging import configure_logging, get_logger
from .generator import KongConfigGenerator, GenerationResult, MODE_CUSTOM


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="kong-config", description="Generate Kong declarative configuration")
    subparsers = parser.add_subparsers(dest="command", required=True)

    generate = subparsers.add_parser("generate", help="Generate kong.yml from OpenAPI documents")
    generate.add_argument("--project-root", help="Project root directory (default: current directory)")
    generate.add_argument("--log-level", help="Log level (debug, info, warning, error)")
    generate.add_argument("--json-logs", action="store_true", default=None, help="Emit JSON log lines")

    return parser


def print_summary(result: GenerationResult) -> None:
    """Print the files and services of a generation run."""
    print("\nKong configuration generated" + (" (custom mode)" if result.mode == MODE_CUSTOM else ""))
    print("Files:")
    for path in result.written:
        print(f"   - {path}")

    if result.services:
        print("Services:")
        for name in result.services:
            print(f"   - {name}")

    if result.diagnostics:
        print(f"Warnings: {len(result.diagnostics)}")
        for diagnostic in result.diagnostics:
            print(f"   ⚠️  {diagnostic.message}")

    if result.mode == MODE_CUSTOM:
        print("\nTo switch back to framework mode, rename the override document and run generate again.")


def main(argv: Optional[List[str]] = None) -> int:
    """Main function."""
    args = build_parser().parse_args(argv)

    overrides = {}
    if args.project_root:
        overrides["project_root"] = args.project_root
    if args.log_level:
        overrides["log_level"] = args.log_level
    if args.json_logs is not None:
        overrides["json_logs"] = args.json_logs

    config = get_config(**overrides)
    configure_logging("kong_config", config.log_level, config.json_logs)
    logger = get_logger("kong_config.cli")

    try:
        result = KongConfigGenerator(config).generate()
    except GatewayConfigException as e:
        logger.error("Kong configuration generation failed", code=e.code, error=e.message)
        if config.json_logs:
            print(e.to_response().model_dump_json(), file=sys.stderr)
        else:
            print(f"\n❌ {e.format()}", file=sys.stderr)
        return 1

    print_summary(result)
    return 0


if __name__ == "__main__":
    sys.exit(main())
