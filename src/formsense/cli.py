"""CLI entry point for formsense."""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Any

from pydantic import BaseModel, TypeAdapter

from formsense import __version__, logger
from formsense.dependencies import ensure_cli_dependencies
from formsense.exceptions import PackageError
from formsense.logging import configure_logging
from formsense.pipeline import FormPipeline, persist_result
from formsense.settings import get_settings
from formsense.typing.models import DetectedField, FilledField, LibraryDocument

_DETECTED_FIELDS = TypeAdapter(list[DetectedField])
_FILLED_FIELDS = TypeAdapter(list[FilledField])
_DOCUMENTS = TypeAdapter(list[LibraryDocument])


def build_parser() -> argparse.ArgumentParser:
    """Create the command-line parser.

    Returns:
        argparse.ArgumentParser: The configured argument parser.
    """
    parser = argparse.ArgumentParser(prog="formsense")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    subparsers = parser.add_subparsers(dest="command")

    detect_parser = subparsers.add_parser("detect", help="Detect form fields in a PDF and match known templates")
    detect_parser.add_argument("--input", required=True, type=Path, dest="input_path")
    detect_parser.add_argument("--output", type=Path, default=None, dest="output_path")
    detect_parser.add_argument(
        "--learn-template",
        default=None,
        dest="learn_template",
        help="Register the detected fields as a custom template with this id",
    )

    extract_parser = subparsers.add_parser("extract", help="Build candidate data from reference documents")
    extract_parser.add_argument("--documents", required=True, type=Path, dest="documents_path")
    extract_parser.add_argument("--output", type=Path, default=None, dest="output_path")

    map_parser = subparsers.add_parser("map", help="Propose values for detected fields")
    map_parser.add_argument("--fields", required=True, type=Path, dest="fields_path")
    map_parser.add_argument("--candidates", required=True, type=Path, dest="candidates_path")
    map_parser.add_argument("--output", type=Path, default=None, dest="output_path")
    map_parser.add_argument("--rules-only", action="store_true", dest="rules_only")

    validate_parser = subparsers.add_parser("validate", help="Validate filled field values")
    validate_parser.add_argument("--fields", required=True, type=Path, dest="fields_path")
    validate_parser.add_argument("--output", type=Path, default=None, dest="output_path")

    templates_parser = subparsers.add_parser("templates", help="Inspect the template catalog")
    templates_subparsers = templates_parser.add_subparsers(dest="templates_command")
    templates_subparsers.add_parser("list", help="List registered templates")

    return parser


def _read_json(path: Path) -> Any:
    """Read a JSON document from disk.

    Args:
        path (Path): JSON file path.

    Returns:
        Any: Decoded payload.
    """
    return json.loads(path.read_text(encoding="utf-8"))


def _unwrap_fields(payload: Any) -> Any:
    """Accept either a bare field list or a detection result holding one."""
    if isinstance(payload, dict) and "fields" in payload:
        return payload["fields"]
    return payload


def _emit(result: BaseModel | dict[str, Any], output_path: Path | None) -> None:
    """Write a result to a file, or to stdout when no path is given.

    Args:
        result (BaseModel | dict[str, Any]): Result payload.
        output_path (Path | None): Destination file.
    """
    if isinstance(result, BaseModel):
        if output_path is not None:
            persist_result(result, output_path)
            return
        text = result.model_dump_json(indent=2)
    else:
        text = json.dumps(result, indent=2, default=str, ensure_ascii=False)
        if output_path is not None:
            output_path.parent.mkdir(parents=True, exist_ok=True)
            output_path.write_text(text, encoding="utf-8")
            return
    sys.stdout.write(text + "\n")


def _run_command(args: argparse.Namespace, pipeline: FormPipeline) -> None:
    """Dispatch one parsed sub-command.

    Args:
        args (argparse.Namespace): Parsed CLI args.
        pipeline (FormPipeline): Configured pipeline.
    """
    if args.command == "detect":
        detection = pipeline.detect_fields(args.input_path.read_bytes())
        if args.learn_template:
            pipeline.learn_template(args.learn_template, detection)
        _emit(detection, args.output_path)
    elif args.command == "extract":
        documents = _DOCUMENTS.validate_python(_read_json(args.documents_path))
        _emit(pipeline.extract_data(documents), args.output_path)
    elif args.command == "map":
        fields = _DETECTED_FIELDS.validate_python(_unwrap_fields(_read_json(args.fields_path)))
        candidates = _read_json(args.candidates_path)
        if args.rules_only:
            pipeline.field_mapper = None
        _emit(pipeline.map_fields(fields, candidates), args.output_path)
    elif args.command == "validate":
        filled = _FILLED_FIELDS.validate_python(_unwrap_fields(_read_json(args.fields_path)))
        report = pipeline.validate(filled)
        _emit(report, args.output_path)
        if not report.is_valid:
            logger.info("Validation found issues", extra={"issues": len(report.errors)})
    elif args.command == "templates":
        for template in pipeline.registry.list_templates():
            sys.stdout.write(f"{template.id}\t{template.name}\n")


def main(argv: list[str] | None = None) -> int:
    """Run the CLI.

    Args:
        argv (list[str] | None): Arguments, defaults to `sys.argv[1:]`.

    Returns:
        int: Exit code (0 for success, 1 for error, 130 when interrupted).
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command is None or (args.command == "templates" and args.templates_command is None):
        parser.print_help()
        return 0

    try:
        settings = get_settings()
        configure_logging(settings=settings)
        ensure_cli_dependencies(args.command)
        pipeline = FormPipeline.from_settings(settings)
        _run_command(args, pipeline)
    except PackageError:
        logger.exception("Command failed", extra={"command": args.command})
        return 1
    except KeyboardInterrupt:
        logger.info("Command aborted by user")
        return 130
    except Exception:
        logger.exception("Unexpected error", extra={"command": args.command})
        return 1

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
