"""Bug reporter CLI.

Subcommands:
  create        -> create a Bug work item and print its id
  check-config  -> validate the settings file (token redacted)

Only the command result goes to stdout; log lines go to stderr.

Exit codes: 0 success, 1 call-time failure, 2 configuration or argument error.
"""

from __future__ import annotations

import argparse
import json
import os
import sys
from typing import Any

from bugreporter.config import CONFIG_DEFAULT, ReporterConfig, load_config
from bugreporter.errors import BugReporterError, classify_error, redact
from bugreporter.logging import configure_logging
from bugreporter.reporter import BugReporter

CONFIG_HELP = f"Path to the settings file (default: {CONFIG_DEFAULT})"

_MAX_HELP_WIDTH = 100
_USAGE_CATEGORIES = {"config", "argument"}


class _HelpFormatter(argparse.HelpFormatter):
    def __init__(self, prog: str) -> None:
        super().__init__(prog, max_help_position=30, width=_MAX_HELP_WIDTH)


class _FormatterArgumentParser(argparse.ArgumentParser):
    def __init__(self, *args: Any, **kwargs: Any) -> None:
        kwargs.setdefault("formatter_class", _HelpFormatter)
        super().__init__(*args, **kwargs)


def _build_parser() -> argparse.ArgumentParser:
    p = _FormatterArgumentParser(
        prog="bugreporter", description="Create Azure DevOps bugs from test failures"
    )
    p.add_argument(
        "--json-logs",
        action="store_true",
        help="Emit JSON log lines (env: BUGREPORTER_LOG_JSON=1)",
    )
    p.add_argument("--log-level", default="INFO", help="Logging level (default: INFO)")
    sub = p.add_subparsers(
        dest="cmd",
        required=True,
        parser_class=_FormatterArgumentParser,
        metavar="<command>",
    )

    pc = sub.add_parser("create", help="Create a Bug work item")
    pc.add_argument("title", help="Bug title")
    pc.add_argument("--description", help="Override DefaultDescription")
    pc.add_argument("--repro-steps", help="Override DefaultReproSteps")
    pc.add_argument("--assigned-to", help="Override AssignedTo")
    pc.add_argument("--config", default=CONFIG_DEFAULT, help=CONFIG_HELP)
    pc.add_argument(
        "--dry-run",
        action="store_true",
        help="Print the request URL and patch document without sending it",
    )

    pk = sub.add_parser("check-config", help="Validate the settings file")
    pk.add_argument("--config", default=CONFIG_DEFAULT, help=CONFIG_HELP)
    return p


def _config_summary(cfg: ReporterConfig) -> dict[str, Any]:
    return {
        "source_file": str(cfg.source_file) if cfg.source_file else None,
        "AzureDevOpsUrl": cfg.endpoint_base_url,
        "Project": cfg.project,
        "PersonalAccessToken": "<redacted>",
        "AssignedTo": cfg.default_assignee,
        "DefaultDescription": cfg.default_description,
        "DefaultReproSteps": cfg.default_repro_steps,
        "TimeoutSeconds": cfg.timeout_seconds,
    }


def _cmd_check_config(args: argparse.Namespace) -> int:
    cfg = load_config(args.config)
    print(json.dumps(_config_summary(cfg), indent=2))
    return 0


def _cmd_create(args: argparse.Namespace) -> int:
    reporter = BugReporter.from_config_path(args.config)
    overrides = {
        "description": args.description,
        "repro_steps": args.repro_steps,
        "assigned_to": args.assigned_to,
    }
    if args.dry_run:
        prepared = reporter.build_request(args.title, **overrides)
        print(f"POST {prepared.url}")
        print(json.dumps(prepared.operations, indent=2))
        return 0
    args._secrets = [reporter.config.access_token]
    print(reporter.create_bug(args.title, **overrides))
    return 0


_HANDLERS = {
    "create": _cmd_create,
    "check-config": _cmd_check_config,
}


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    json_logs = args.json_logs or os.environ.get("BUGREPORTER_LOG_JSON") == "1"
    logger = configure_logging(json_logging=json_logs, level=args.log_level, stream=sys.stderr)
    handler = _HANDLERS[args.cmd]
    try:
        return handler(args)
    except BugReporterError as exc:
        info = classify_error(exc, getattr(args, "_secrets", ()))
        logger.log_error(
            f"{args.cmd} failed",
            error=info.message,
            category=info.category,
            transient=info.transient,
            details=info.details,
        )
        print(f"[{info.category}] {redact(info.message)}", file=sys.stderr)
        return 2 if info.category in _USAGE_CATEGORIES else 1


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
