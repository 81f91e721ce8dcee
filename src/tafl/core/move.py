"""Move value object."""

from __future__ import annotations

from dataclasses import dataclass

from tafl.core.types import Square, col_of, parse_square, row_of, square_name


@dataclass(frozen=True, slots=True)
class Move:
    """Immutable value object: slide a piece from one square to another."""

    from_sq: Square
    to_sq: Square

    def distance(self, size: int) -> int:
        return abs(row_of(self.from_sq, size) - row_of(self.to_sq, size)) + abs(
            col_of(self.from_sq, size) - col_of(self.to_sq, size)
        )

    def is_orthogonal(self, size: int) -> bool:
        if self.from_sq == self.to_sq:
            return False
        return row_of(self.from_sq, size) == row_of(self.to_sq, size) or col_of(
            self.from_sq, size
        ) == col_of(self.to_sq, size)

    # ── Display ──────────────────────────────────────────────────────────

    def notation(self, size: int) -> str:
        """Coordinate notation, e.g. ``'d1-d4'``."""
        return f"{square_name(self.from_sq, size)}-{square_name(self.to_sq, size)}"

    @classmethod
    def parse(cls, text: str, size: int) -> Move:
        """Parse ``'d1-d4'`` (``'d1d4'`` is not accepted: rows may be two digits)."""
        parts = text.strip().split("-")
        if len(parts) != 2:
            raise ValueError(f"Invalid move text: {text!r}")
        return cls(parse_square(parts[0], size), parse_square(parts[1], size))
