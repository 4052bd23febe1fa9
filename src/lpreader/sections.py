"""Section splitting and the immutable token slice the section grammars consume."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from lpreader.errors import DuplicateSectionError
from lpreader.tokens import SectionKeyword, Span, Token, TokenType


@dataclass(frozen=True, slots=True)
class TokenSlice:
    """Read-only view ``tokens[start:end]``; advancing returns a new slice."""

    tokens: tuple[Token, ...]
    start: int
    end: int

    def __len__(self) -> int:
        return self.end - self.start

    def at_end(self) -> bool:
        return self.start >= self.end

    def peek(self, offset: int = 0) -> Token | None:
        idx = self.start + offset
        if idx < self.end:
            return self.tokens[idx]
        return None

    def at(self, *types: TokenType) -> bool:
        """True if the slice starts with tokens of exactly these types."""
        if len(types) > len(self):
            return False
        return all(self.tokens[self.start + i].type == tt for i, tt in enumerate(types))

    def advance(self, count: int = 1) -> TokenSlice:
        return TokenSlice(self.tokens, min(self.start + count, self.end), self.end)

    def last_span(self) -> Span:
        """Span of the last token in the section, for end-of-section errors."""
        return self.tokens[max(self.end - 1, 0)].span


def split_sections(tokens: Sequence[Token]) -> dict[SectionKeyword, TokenSlice]:
    """Partition the token stream into one slice per non-empty section.

    Tokens before the first section keyword are recorded under
    ``SectionKeyword.NONE``.
    """
    frozen = tuple(tokens)
    sections: dict[SectionKeyword, TokenSlice] = {}
    seen: set[SectionKeyword] = set()

    current = SectionKeyword.NONE
    current_start = 0

    def close(end: int) -> None:
        if end > current_start:
            sections[current] = TokenSlice(frozen, current_start, end)

    for idx, tok in enumerate(frozen):
        if tok.type != TokenType.SECTION:
            continue
        close(idx)

        keyword = tok.value
        assert isinstance(keyword, SectionKeyword)
        if keyword in seen:
            raise DuplicateSectionError(f"section '{keyword.name.lower()}' appears twice", tok.span)
        seen.add(keyword)

        current = keyword
        current_start = idx + 1

    close(len(frozen))
    return sections
