"""CLI entry point for breakcheck."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import cast

from breakcheck import __version__
from breakcheck.config import load_detector_config
from breakcheck.loader import SnapshotLoadError, load_snapshot
from breakcheck.rule_engine import Detector, RuleRegistry, default_registry, removed_resources
from breakcheck.rule_engine.rules import documentation_reference

EXIT_VIOLATIONS = 1
EXIT_LOAD_ERROR = 2


def _cmd_check(args: argparse.Namespace) -> None:
    config = load_detector_config(cast(Path | None, args.config))
    version = cast(str | None, args.schema_version) or config.default_version
    resource = cast(str | None, args.resource)

    try:
        old = load_snapshot(cast(str, args.old))
        new = load_snapshot(cast(str, args.new))
    except SnapshotLoadError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(EXIT_LOAD_ERROR)

    detector = Detector(default_registry(), docs_base_url=config.docs_base_url)
    if resource is not None:
        if resource not in old:
            print(f"Error: resource '{resource}' not found in old snapshot", file=sys.stderr)
            sys.exit(EXIT_LOAD_ERROR)
        old = {resource: old[resource]}
        new = {resource: new[resource]} if resource in new else {}

    removed = removed_resources(old, new)
    messages = detector.detect_provider(version, old, new)

    for name in removed:
        print(f"Resource `{name}` was removed from the new snapshot; its fields were not compared")
    for message in messages:
        print(message)

    total = len(removed) + len(messages)
    if not total:
        print("No breaking changes detected.")
        return

    print(f"\n{total} breaking change(s) detected.")
    if config.fail_on_violation:
        sys.exit(EXIT_VIOLATIONS)


def _cmd_rules(args: argparse.Namespace) -> None:
    config = load_detector_config(cast(Path | None, args.config))
    version = cast(str | None, args.schema_version) or config.default_version
    registry = default_registry()

    if cast(str, args.format) == "markdown":
        print(render_rules_markdown(registry, version, config.docs_base_url))
        return

    for rule in registry:
        marker = " (manual review)" if rule.undetectable() else ""
        print(f"{rule.identifier}: {rule.name}{marker}")


def render_rules_markdown(registry: RuleRegistry, version: str, docs_base_url: str) -> str:
    """Documentation page listing every rule in the registry."""
    lines = [f"# Breaking changes: {registry.category}", ""]
    for rule in registry:
        lines.append(f"## {rule.name}")
        lines.append("")
        lines.append(f"Identifier: `{rule.identifier}`")
        lines.append("")
        lines.append(rule.definition)
        if rule.undetectable():
            lines.append("")
            lines.append("> Not detected automatically. Review changes to this area by hand.")
        lines.append("")
        lines.append(documentation_reference(version, rule.identifier, docs_base_url).strip())
        lines.append("")
    return "\n".join(lines).rstrip() + "\n"


def main() -> None:
    parser = argparse.ArgumentParser(
        prog="breakcheck",
        description="Detect breaking changes between two resource schema snapshots",
    )
    _ = parser.add_argument(
        "-V", "--version", action="version", version=f"breakcheck {__version__}"
    )
    _ = parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command")

    # check subcommand
    check_p = subparsers.add_parser("check", help="Compare two schema snapshots")
    _ = check_p.add_argument("old", help="Baseline snapshot (path or URL)")
    _ = check_p.add_argument("new", help="Candidate snapshot (path or URL)")
    _ = check_p.add_argument(
        "--schema-version", default=None, help="Version used in documentation links"
    )
    _ = check_p.add_argument("--resource", default=None, help="Only compare this resource")
    _ = check_p.add_argument("--config", type=Path, default=None, help="Path to config file")

    # rules subcommand
    rules_p = subparsers.add_parser("rules", help="List every known breaking-change rule")
    _ = rules_p.add_argument(
        "--format", choices=["text", "markdown"], default="text", help="Output format"
    )
    _ = rules_p.add_argument(
        "--schema-version", default=None, help="Version used in documentation links"
    )
    _ = rules_p.add_argument("--config", type=Path, default=None, help="Path to config file")

    args = parser.parse_args(sys.argv[1:])
    logging.basicConfig(
        level=logging.DEBUG if cast(bool, args.verbose) else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    dispatch = {
        "check": _cmd_check,
        "rules": _cmd_rules,
    }
    command = cast(str | None, args.command)
    handler = dispatch.get(command) if command is not None else None
    if handler:
        handler(args)
    else:
        parser.print_help()
        sys.exit(1)
