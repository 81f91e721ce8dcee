"""Piece value object."""

from __future__ import annotations

from dataclasses import dataclass

from tafl.core.enums import PieceKind, Side

# Layout character ↔ (Side, PieceKind)
_CHAR_MAP: dict[str, tuple[Side, PieceKind]] = {
    "t": (Side.ATTACKER, PieceKind.SOLDIER),
    "T": (Side.DEFENDER, PieceKind.SOLDIER),
    "K": (Side.DEFENDER, PieceKind.KING),
}

_UNICODE: dict[tuple[Side, PieceKind], str] = {
    (Side.ATTACKER, PieceKind.SOLDIER): "♟",
    (Side.DEFENDER, PieceKind.SOLDIER): "♙",
    (Side.DEFENDER, PieceKind.KING): "♔",
}

_LAYOUT_CHARS: dict[tuple[Side, PieceKind], str] = {v: k for k, v in _CHAR_MAP.items()}


@dataclass(frozen=True, slots=True)
class Piece:
    """Immutable value object representing a tafl piece."""

    side: Side
    kind: PieceKind = PieceKind.SOLDIER

    def __post_init__(self) -> None:
        if self.kind == PieceKind.KING and self.side != Side.DEFENDER:
            raise ValueError("Only the defenders have a king")

    @property
    def is_king(self) -> bool:
        return self.kind == PieceKind.KING

    # ── Serialisation ────────────────────────────────────────────────────

    def __str__(self) -> str:
        """Layout character: ``t`` attacker, ``T`` defender, ``K`` king."""
        return _LAYOUT_CHARS[(self.side, self.kind)]

    @classmethod
    def from_char(cls, char: str) -> Piece:
        """Create piece from a layout character, e.g. ``'K'`` → king."""
        try:
            side, kind = _CHAR_MAP[char]
        except KeyError:
            raise ValueError(f"Invalid piece character: {char!r}") from None
        return cls(side, kind)

    @property
    def symbol(self) -> str:
        return _UNICODE[(self.side, self.kind)]


ATTACKER = Piece(Side.ATTACKER)
DEFENDER = Piece(Side.DEFENDER)
KING = Piece(Side.DEFENDER, PieceKind.KING)
