"""p4watch CLI.

Subcommands:
  modifications -> list file modifications submitted in a time window (JSON)
  label         -> apply a label to the configured view
  sync          -> sync the workspace (``p4 sync``)
  init          -> register the client workspace for a project
  validate      -> load + validate configuration and print a summary
  schema        -> write the configuration JSON Schema

Logging goes to stderr so stdout stays machine readable.
"""

from __future__ import annotations

import argparse
import json
import os
import sys
from collections.abc import Callable
from datetime import datetime
from pathlib import Path
from typing import Any

from p4watch.adapter import P4Adapter
from p4watch.config import P4Config
from p4watch.errors import ConfigurationError
from p4watch.runtime import EXIT_OK, EXIT_USAGE, execute_command, prepare_config
from p4watch.schemas import SCHEMA_FILENAME, get_config_schema

CONFIG_DEFAULT = "p4watch.config.yaml"

AdapterFactory = Callable[[P4Config], P4Adapter]

_MAX_HELP_WIDTH = 100


class _HelpFormatter(argparse.HelpFormatter):
    def __init__(self, prog: str) -> None:
        super().__init__(prog, max_help_position=30, width=_MAX_HELP_WIDTH)


class _FormatterArgumentParser(argparse.ArgumentParser):
    def __init__(self, *args: Any, **kwargs: Any) -> None:
        kwargs.setdefault("formatter_class", _HelpFormatter)
        super().__init__(*args, **kwargs)


def _timestamp(value: str) -> datetime:
    try:
        return datetime.fromisoformat(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"not an ISO timestamp: {value!r}") from exc


def _build_parser() -> argparse.ArgumentParser:
    p = _FormatterArgumentParser(
        prog="p4watch", description="Perforce change detection and labelling for CI"
    )
    p.add_argument(
        "--quiet",
        action="store_true",
        help="Suppress informational logging (env: P4WATCH_QUIET=1)",
    )
    sub = p.add_subparsers(
        dest="cmd",
        required=True,
        parser_class=_FormatterArgumentParser,
        metavar="<command>",
    )

    pm = sub.add_parser("modifications", help="List modifications submitted in a time window")
    pm.add_argument("--config", default=CONFIG_DEFAULT)
    pm.add_argument("--from", dest="start", type=_timestamp, required=True)
    pm.add_argument(
        "--to", dest="end", type=_timestamp, help="End of the window (default: now)"
    )
    pm.add_argument("--output", help="Write JSON to this file instead of stdout")
    pm.add_argument("--pretty", action="store_true")

    pl = sub.add_parser("label", help="Apply a label to the configured view")
    pl.add_argument("--config", default=CONFIG_DEFAULT)
    pl.add_argument("name")
    pl.add_argument(
        "--force", action="store_true", help="Label even if behavior.apply_label is false"
    )

    ps = sub.add_parser("sync", help="Sync the workspace")
    ps.add_argument("--config", default=CONFIG_DEFAULT)
    ps.add_argument(
        "--force", action="store_true", help="Sync even if behavior.auto_get_source is false"
    )

    pi = sub.add_parser("init", help="Register the client workspace for a project")
    pi.add_argument("--config", default=CONFIG_DEFAULT)
    pi.add_argument("project")
    pi.add_argument(
        "--working-dir",
        default=".",
        help="Fallback directory when perforce.working_directory is not configured",
    )

    pv = sub.add_parser("validate", help="Validate configuration")
    pv.add_argument("--config", default=CONFIG_DEFAULT)

    sch = sub.add_parser("schema", help="Emit the configuration JSON Schema")
    sch.add_argument("--output", default=SCHEMA_FILENAME)
    sch.add_argument("--stdout", action="store_true")
    return p


def _cmd_modifications(adapter: P4Adapter, args: argparse.Namespace) -> int:
    end = args.end or datetime.now()
    mods = adapter.get_modifications(args.start, end)
    payload = [m.to_dict() for m in mods]
    text = json.dumps(payload, indent=2 if args.pretty else None)
    if args.output:
        Path(args.output).write_text(text + "\n", encoding="utf-8")
        if not args.quiet:
            print(f"Wrote {len(payload)} modifications to {args.output}")
    else:
        print(text)
    return EXIT_OK


def _cmd_label(adapter: P4Adapter, args: argparse.Namespace) -> int:
    adapter.label_source_control(args.name, datetime.now())
    if not args.quiet:
        if adapter.config.apply_label:
            print(f"Applied label {args.name}")
        else:
            print("Labelling disabled (behavior.apply_label is false); nothing done")
    return EXIT_OK


def _cmd_sync(adapter: P4Adapter, args: argparse.Namespace) -> int:
    adapter.get_source()
    return EXIT_OK


def _cmd_init(adapter: P4Adapter, args: argparse.Namespace) -> int:
    adapter.initialize_directory(args.project, args.working_dir)
    if not args.quiet:
        directory = adapter.workspace.resolve_working_directory(args.working_dir)
        print(f"Initialized {args.project} in {directory}")
    return EXIT_OK


def _cmd_validate(cfg: P4Config) -> int:
    print(
        json.dumps(
            {
                "executable": cfg.executable,
                "views": list(cfg.views),
                "client": cfg.client,
                "user": cfg.user,
                "port": cfg.port,
                "working_directory": cfg.working_directory,
                "auto_get_source": cfg.auto_get_source,
                "apply_label": cfg.apply_label,
            },
            indent=2,
        )
    )
    return EXIT_OK


def _cmd_schema(args: argparse.Namespace) -> int:
    text = json.dumps(get_config_schema(), indent=2)
    if args.stdout:
        print(text)
    else:
        Path(args.output).write_text(text + "\n", encoding="utf-8")
        print(f"Wrote {args.output}")
    return EXIT_OK


def _apply_overrides(cfg: P4Config, args: argparse.Namespace) -> P4Config:
    if getattr(args, "force", False):
        if args.cmd == "label":
            return cfg.with_overrides(apply_label=True)
        if args.cmd == "sync":
            return cfg.with_overrides(auto_get_source=True)
    return cfg


def _build_handlers(
    args: argparse.Namespace, cfg: P4Config, adapter_factory: AdapterFactory
) -> dict[str, Callable[[], int]]:
    if args.cmd == "validate":
        return {"validate": lambda: _cmd_validate(cfg)}
    adapter = adapter_factory(cfg)
    return {
        "modifications": lambda: _cmd_modifications(adapter, args),
        "label": lambda: _cmd_label(adapter, args),
        "sync": lambda: _cmd_sync(adapter, args),
        "init": lambda: _cmd_init(adapter, args),
    }


def main(argv: list[str] | None = None, *, adapter_factory: AdapterFactory = P4Adapter) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    if not args.quiet and os.environ.get("P4WATCH_QUIET") == "1":
        args.quiet = True
    if args.cmd == "schema":
        return _cmd_schema(args)
    try:
        cfg = _apply_overrides(prepare_config(args), args)
    except ConfigurationError as exc:
        print(f"[config] {exc}", file=sys.stderr)
        return EXIT_USAGE
    handler = _build_handlers(args, cfg, adapter_factory).get(args.cmd)
    if handler is None:  # pragma: no cover - argparse enforces valid choices
        parser.print_help()
        return EXIT_USAGE
    return execute_command(handler, args, args.cmd)


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
