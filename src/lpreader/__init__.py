"""LP file reader for linear and quadratic optimization models."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pathlib import Path

    from lpreader.model import Model

__version__ = "0.1.0"


def read(source: str, filename: str = "input.lp") -> Model:
    """Read LP source text into a Model."""
    from lpreader.reader import read_lp_string

    return read_lp_string(source, filename)


def read_file(path: str | Path, encoding: str = "utf-8") -> Model:
    """Read an LP file (plain or gzip compressed) into a Model."""
    from lpreader.reader import read_lp

    return read_lp(path, encoding)
