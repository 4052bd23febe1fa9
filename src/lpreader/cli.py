"""Command-line interface for lpreader."""

from __future__ import annotations

import argparse
import codecs
import io
import json
import logging
import sys
import tomllib
from dataclasses import dataclass
from functools import partial
from pathlib import Path
from typing import Any

from lpreader.errors import ReadError, UnopenableInputError
from lpreader.model import Model, VariableType

OUTPUT_FORMATS = ("summary", "json")


@dataclass(frozen=True, slots=True)
class CliOptions:
    """Parsed CLI options."""

    input_file: Path
    output_file: Path | None
    output_format: str
    encoding: str
    debug: bool
    verbose: bool


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser (separate function for testability)."""
    p = argparse.ArgumentParser(
        prog="lpreader",
        description="Read an LP optimization model and report its contents",
    )
    p.add_argument("input", help="Input .lp file (optionally gzip compressed)")
    p.add_argument("-o", "--output", help="Output file (default: stdout)")
    p.add_argument(
        "-f",
        "--format",
        choices=OUTPUT_FORMATS,
        default=None,
        help="Output format (default: summary)",
    )
    p.add_argument(
        "--encoding",
        default=None,
        metavar="ENC",
        help="Input text encoding (default: utf-8)",
    )
    p.add_argument(
        "--config",
        metavar="FILE",
        help="Config file (default: auto-discover lpreader.toml)",
    )
    p.add_argument("--debug", action="store_true", help="Dump sections and model to stderr")
    p.add_argument("-v", "--verbose", action="store_true", help="Log pipeline stages to stderr")
    return p


def load_config(config_path: Path | None, input_dir: Path) -> dict[str, Any]:
    """Load a TOML config file, returning an empty dict on missing/absent file."""
    path = config_path if config_path is not None else input_dir / "lpreader.toml"

    if not path.is_file():
        return {}

    with open(path, "rb") as f:
        return tomllib.load(f)


def resolve_options(args: argparse.Namespace) -> CliOptions:
    """Merge config file and CLI args into CliOptions.

    Precedence: config file < CLI flags.
    """
    input_file = Path(args.input)
    input_dir = input_file.parent
    if not input_dir.parts:
        input_dir = Path(".")

    config_path = Path(args.config) if args.config else None
    try:
        config = load_config(config_path, input_dir)
    except tomllib.TOMLDecodeError as exc:
        raise argparse.ArgumentTypeError(f"invalid config file: {exc}") from exc

    # Encoding: config < CLI
    encoding = "utf-8"
    cfg_encoding = config.get("encoding")
    if isinstance(cfg_encoding, str):
        encoding = cfg_encoding
    if args.encoding is not None:
        encoding = args.encoding
    try:
        codecs.lookup(encoding)
    except LookupError as exc:
        raise argparse.ArgumentTypeError(f"unknown encoding: {encoding!r}") from exc

    # Output format: config < CLI
    output_format = "summary"
    cfg_output = config.get("output")
    if isinstance(cfg_output, dict):
        cfg_format = cfg_output.get("format")
        if cfg_format is not None:
            if cfg_format not in OUTPUT_FORMATS:
                raise argparse.ArgumentTypeError(
                    f"invalid output format in config: {cfg_format!r}"
                )
            output_format = cfg_format
    if args.format is not None:
        output_format = args.format

    output_file = Path(args.output) if args.output else None

    return CliOptions(
        input_file=input_file,
        output_file=output_file,
        output_format=output_format,
        encoding=encoding,
        debug=args.debug,
        verbose=args.verbose,
    )


def format_summary(model: Model) -> str:
    """Short human-readable description of a model."""
    counts = {vtype: 0 for vtype in VariableType}
    for var in model.variables:
        counts[var.type] += 1
    quadratic = bool(model.objective.quadratic_terms) or any(
        c.expression.quadratic_terms for c in model.constraints
    )

    out = io.StringIO()
    out.write(f"sense: {model.sense.value}\n")
    if model.objective.name is not None:
        out.write(f"objective: {model.objective.name}\n")
    out.write(f"problem: {'quadratic' if quadratic else 'linear'}\n")
    out.write(f"variables: {len(model.variables)}\n")
    for vtype, count in counts.items():
        if count:
            out.write(f"  {vtype.value}: {count}\n")
    out.write(f"constraints: {len(model.constraints)}\n")
    out.write(f"sos: {len(model.sos)}\n")
    return out.getvalue()


def read_file(options: CliOptions) -> str:
    """Read an LP file and render it in the requested output format."""
    from lpreader.debug import dump_model, dump_sections
    from lpreader.reader import read_lp

    on_sections = partial(dump_sections, file=sys.stderr) if options.debug else None
    model = read_lp(options.input_file, options.encoding, on_sections)

    if options.debug:
        dump_model(model, file=sys.stderr)

    if options.output_format == "json":
        return json.dumps(model.to_dict(), indent=2, allow_nan=False) + "\n"
    return format_summary(model)


def main(argv: list[str] | None = None) -> int:
    """CLI entry point. Returns exit code (0/1/2). Does not call sys.exit()."""
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        options = resolve_options(args)
    except argparse.ArgumentTypeError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2

    if options.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")

    try:
        text = read_file(options)
    except UnopenableInputError as exc:
        print(str(exc), file=sys.stderr)
        return 2
    except ReadError as exc:
        print(str(exc), file=sys.stderr)
        return 1

    if options.output_file:
        options.output_file.write_text(text, encoding="utf-8")
    else:
        sys.stdout.write(text)

    return 0
