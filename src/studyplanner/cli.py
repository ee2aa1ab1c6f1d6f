"""CLI entrypoint for studyplanner."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Any

from studyplanner.export import export_csv, export_ics
from studyplanner.io import read_json, write_json, write_text
from studyplanner.persistence import ScheduleRepository
from studyplanner.reporting import build_error_report, build_success_report
from studyplanner.session import CommandResult, PlannerSession
from studyplanner.settings import resolve_data_dir, resolve_settings
from studyplanner.validation import ValidationReport

logger = logging.getLogger(__name__)


def _read_script(script: str) -> list[str]:
    if script == "-":
        return sys.stdin.read().splitlines()
    return Path(script).read_text(encoding="utf-8").splitlines()


def _load_settings(config_path: str | None, validation_report: ValidationReport) -> dict[str, Any]:
    source: dict[str, Any] = {}
    if config_path:
        try:
            source = read_json(config_path)
        except FileNotFoundError:
            validation_report.add_error(
                code="file_not_found",
                message=f"Config file not found: {config_path}",
                field_path="$.config",
            )
        except ValueError as exc:
            validation_report.add_error(code="invalid_json", message=str(exc), field_path="$.config")
    return resolve_settings(source, validation_report)


def _emit(payload: dict[str, Any], output_path: str | None) -> None:
    if output_path:
        write_json(output_path, payload)


def run_script_command(
    script: str,
    output_path: str | None,
    *,
    config_path: str | None = None,
    data_dir: str | None = None,
    save: bool = True,
) -> int:
    validation_report = ValidationReport()
    settings = _load_settings(config_path, validation_report)
    if data_dir:
        settings["data_dir"] = data_dir
    if not save:
        settings["auto_save"] = False

    try:
        lines = _read_script(script)
    except OSError as exc:
        validation_report.add_error(code="script_read_error", message=str(exc), field_path="$.script")
        _emit(build_error_report([], code="script_read_error", validation_report=validation_report), output_path)
        print(f"error: {exc}", file=sys.stderr)
        return 2

    session = PlannerSession(ScheduleRepository(resolve_data_dir(settings)), settings)
    results: list[tuple[int, str, CommandResult]] = []
    for line_number, raw in enumerate(lines, start=1):
        command = raw.strip()
        if not command or command.startswith("#"):
            continue
        result = session.execute(command)
        results.append((line_number, command, result))
        print(f"> {command}")
        print(result.message)

    if validation_report.errors or any(not result.success for _, _, result in results):
        _emit(build_error_report(results, validation_report=validation_report), output_path)
        return 2

    _emit(build_success_report(results, session.schedule, validation_report), output_path)
    return 0


def run_export_command(
    schedule_path: str,
    fmt: str,
    output_path: str,
    timezone_name: str | None = None,
    *,
    config_path: str | None = None,
) -> int:
    settings = _load_settings(config_path, ValidationReport())
    try:
        schedule = ScheduleRepository(Path(schedule_path).parent).load_schedule(schedule_path)
    except FileNotFoundError:
        print(f"error: schedule file not found: {schedule_path}", file=sys.stderr)
        return 2
    except OSError as exc:
        print(f"error: could not read schedule file {schedule_path}: {exc}", file=sys.stderr)
        return 2
    except (ValueError, KeyError, TypeError) as exc:
        print(f"error: invalid schedule file {schedule_path}: {exc}", file=sys.stderr)
        return 2

    if fmt == "csv":
        content = export_csv(schedule)
    else:
        try:
            content = export_ics(schedule, tz_name=timezone_name or settings["export_timezone"])
        except (LookupError, ValueError) as exc:
            print(f"error: unknown time zone: {exc}", file=sys.stderr)
            return 2
    write_text(output_path, content)
    logger.info("exported %d blocks to %s", len(schedule.blocks), output_path)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="studyplanner", description="Multi-subject study planner CLI")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command", required=True)

    run_parser = subparsers.add_parser("run", help="Execute planner commands from a script file")
    run_parser.add_argument("--script", required=True, help="Path to a command script, or - for stdin")
    run_parser.add_argument("--output", help="Path to the JSON report")
    run_parser.add_argument("--config", help="Path to a settings JSON file")
    run_parser.add_argument("--data-dir", help="Directory for saved schedules and plans")
    run_parser.add_argument("--no-save", action="store_true", help="Do not auto-save generated schedules")

    export_parser = subparsers.add_parser("export", help="Export a saved schedule")
    export_parser.add_argument("--schedule", required=True, help="Path to a saved schedule JSON file")
    export_parser.add_argument("--format", required=True, choices=("csv", "ics"), help="Export format")
    export_parser.add_argument("--output", required=True, help="Path to the exported file")
    export_parser.add_argument("--timezone", help="IANA time zone for iCalendar export")
    export_parser.add_argument("--config", help="Path to a settings JSON file")

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.command == "run":
        return run_script_command(
            args.script,
            args.output,
            config_path=args.config,
            data_dir=args.data_dir,
            save=not args.no_save,
        )
    if args.command == "export":
        return run_export_command(
            args.schedule, args.format, args.output, args.timezone, config_path=args.config
        )

    parser.error("Unknown command")
    return 2


if __name__ == "__main__":
    raise SystemExit(main())
