"""Reading pipeline: input bytes to an immutable Model.

    lines -> Lexer -> TokenClassifier -> split_sections -> section processors -> Model

Every stage runs to completion before the next starts; token buffers are
dropped once the model has been built.
"""

from __future__ import annotations

import gzip
import io
import logging
from collections.abc import Callable, Iterable
from pathlib import Path
from typing import BinaryIO, TextIO

from lpreader.builder import ModelBuilder
from lpreader.classifier import TokenClassifier
from lpreader.errors import ReadError, UnopenableInputError
from lpreader.lexer import Lexer
from lpreader.model import Model
from lpreader.processors import process_sections
from lpreader.sections import TokenSlice, split_sections
from lpreader.tokens import SectionKeyword

logger = logging.getLogger(__name__)

_GZIP_MAGIC = b"\x1f\x8b"

SectionsHook = Callable[[dict[SectionKeyword, TokenSlice]], None]


def _split(lexer: Lexer, filename: str) -> dict[SectionKeyword, TokenSlice]:
    tokens = TokenClassifier(lexer, filename).classify()
    logger.debug("%s: %d tokens after classification", filename, len(tokens))

    sections = split_sections(tokens)
    logger.debug(
        "%s: sections %s",
        filename,
        ", ".join(k.name.lower() for k in sections) or "(none)",
    )
    return sections


def _attach_context(exc: ReadError, lexer: Lexer | None, filename: str) -> None:
    if lexer is not None and not exc.source:
        exc.source = lexer.source
    exc.filename = filename


def read_lines(
    lines: Iterable[str], filename: str = "input.lp", on_sections: SectionsHook | None = None
) -> Model:
    """Run the pipeline over an iterable of source lines.

    ``on_sections`` is called with the section map before the section
    processors run.
    """
    lexer: Lexer | None = None
    try:
        lexer = Lexer(lines, filename)
        sections = _split(lexer, filename)
        if on_sections is not None:
            on_sections(sections)
        builder = ModelBuilder()
        process_sections(sections, builder)
    except ReadError as exc:
        _attach_context(exc, lexer, filename)
        raise

    model = builder.build()
    logger.debug(
        "%s: %d variables, %d constraints, %d sos",
        filename,
        len(model.variables),
        len(model.constraints),
        len(model.sos),
    )
    return model


def read_lp_string(source: str, filename: str = "input.lp") -> Model:
    """Read a model from LP source text."""
    return read_lines(source.splitlines(keepends=True), filename)


def read_lp_stream(
    stream: BinaryIO | TextIO,
    filename: str = "input.lp",
    encoding: str = "utf-8",
    on_sections: SectionsHook | None = None,
) -> Model:
    """Read a model from an open stream positioned at the start of the file.

    Binary streams are decoded with ``encoding``; seekable binary streams
    starting with the gzip magic number are decompressed first.
    """
    if isinstance(stream, io.TextIOBase):
        return read_lines(stream, filename, on_sections)

    binary: BinaryIO = stream
    decompressed: gzip.GzipFile | None = None
    if stream.seekable():
        head = stream.read(len(_GZIP_MAGIC))
        stream.seek(-len(head), io.SEEK_CUR)
        if head == _GZIP_MAGIC:
            logger.debug("%s: gzip compressed input", filename)
            binary = decompressed = gzip.GzipFile(fileobj=stream, mode="rb")

    try:
        text = io.TextIOWrapper(binary, encoding=encoding, newline="")
    except LookupError as exc:
        if decompressed is not None:
            decompressed.close()
        raise UnopenableInputError(f"cannot read {filename}: {exc}", filename) from exc

    try:
        return read_lines(text, filename, on_sections)
    except (UnicodeDecodeError, OSError, EOFError) as exc:
        raise UnopenableInputError(f"cannot read {filename}: {exc}", filename) from exc
    finally:
        # Leave the caller's stream open
        text.detach()
        if decompressed is not None:
            decompressed.close()


def read_lp(
    path: str | Path, encoding: str = "utf-8", on_sections: SectionsHook | None = None
) -> Model:
    """Read a model from an LP file, optionally gzip compressed."""
    path = Path(path)
    try:
        f = path.open("rb")
    except OSError as exc:
        raise UnopenableInputError(f"cannot open {path}: {exc.strerror}", str(path)) from exc

    logger.debug("reading %s", path)
    with f:
        return read_lp_stream(f, str(path), encoding, on_sections)
