"""Command-line self-play: the engine plays both sides of a preset."""

from __future__ import annotations

import argparse
import logging
import sys
from collections.abc import Sequence

from tafl.core.enums import Side
from tafl.core.errors import TaflError
from tafl.core.state import GameState
from tafl.core.variant import PRESET_NAMES, Variant
from tafl.engine.python_search import PythonSearchEngine
from tafl.engine.search import SearchLimits
from tafl.game.controller import GameController
from tafl.game.player import AIPlayer

_LOGGER = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="tafl-selfplay",
        description="Let the engine play a game of Hnefatafl against itself.",
    )
    parser.add_argument("--variant", choices=PRESET_NAMES, default="copenhagen")
    parser.add_argument("--depth", type=int, default=2, help="maximum search depth")
    parser.add_argument(
        "--time-ms",
        type=int,
        default=2000,
        help="time per move in milliseconds (0 = depth only)",
    )
    parser.add_argument(
        "--max-plies",
        type=int,
        default=200,
        help="stop after this many moves even if the game is undecided",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    parser.add_argument(
        "-q", "--quiet", action="store_true", help="do not print boards"
    )
    return parser


def run_selfplay(
    variant: Variant,
    limits: SearchLimits,
    max_plies: int,
    echo: bool = True,
) -> GameState:
    """Play *variant* engine-vs-engine and return the final state."""
    engine = PythonSearchEngine()
    pending: list[GameState] = []
    controller = GameController()
    size = variant.size

    if echo:
        controller.events.on_move.append(
            lambda move, captures, state: print(
                f"{state.move_count}. {move.notation(size)}"
                + (f" x{len(captures)}" if captures else "")
                + f"\n{state.board}\n"
            )
        )

    controller.new_game(
        AIPlayer(Side.ATTACKER, "Attacker AI", on_request_move=pending.append),
        AIPlayer(Side.DEFENDER, "Defender AI", on_request_move=pending.append),
        variant=variant,
    )
    if echo:
        print(f"{controller.state.board}\n")

    plies = 0
    while pending and plies < max_plies:
        state = pending.pop()
        result = engine.search(state, limits)
        _LOGGER.info(
            "%s plays %s (score %d, depth %d, %d nodes)",
            state.side_to_move,
            result.best_move.notation(size),
            result.score,
            result.depth,
            result.nodes,
        )
        if not controller.submit_move(result.best_move):
            raise RuntimeError(f"Engine produced an illegal move {result.best_move}")
        plies += 1

    return controller.state


def main(argv: Sequence[str] | None = None) -> int:
    """Entry point for ``tafl-selfplay``."""
    args = _build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        variant = Variant.preset(args.variant)
        limits = SearchLimits(
            max_depth=args.depth,
            time_limit_ms=args.time_ms if args.time_ms > 0 else None,
        )
        final = run_selfplay(variant, limits, args.max_plies, echo=not args.quiet)
    except (TaflError, ValueError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2

    if final.is_over:
        outcome = f"{final.status.name} ({final.end_reason.name})"
        print(f"{outcome} after {final.move_count} moves")
    else:
        print(f"Stopped undecided after {final.move_count} moves")
    return 0


if __name__ == "__main__":
    sys.exit(main())
