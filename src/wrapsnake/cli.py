"""Command-line entry point: serve, simulate and inspect leaderboards."""

from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import dataclass
from pathlib import Path

import numpy as np

from wrapsnake.config import CollisionPolicy, DeviceType, Difficulty, GameConfig
from wrapsnake.engine import GameSession
from wrapsnake.grid import CellType, Grid
from wrapsnake.snake import Direction

logger = logging.getLogger(__name__)

_GLYPHS: dict[int, str] = {
    CellType.EMPTY: ".",
    CellType.SNAKE: "o",
    CellType.FOOD: "*",
}


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="wrapsnake",
        description="Wrap-around snake engine, simulator and leaderboard server.",
    )
    sub = parser.add_subparsers(dest="command", help="Available commands.")

    # --- serve ---
    serve_p = sub.add_parser("serve", help="Run the HTTP/WebSocket server.")
    serve_p.add_argument("--host", type=str, default=None)
    serve_p.add_argument("--port", type=int, default=None)
    serve_p.add_argument(
        "--database", type=str, default=None,
        help="SQLite file for the leaderboard (default: in memory).",
    )

    # --- simulate ---
    sim_p = sub.add_parser(
        "simulate", help="Play a headless game with random turns.",
    )
    sim_p.add_argument("--config", type=str, default=None,
                       help="Path to a JSON game config.")
    sim_p.add_argument("--rows", type=int, default=None)
    sim_p.add_argument("--cols", type=int, default=None)
    sim_p.add_argument(
        "--difficulty", type=str, default=None,
        choices=[d.value for d in Difficulty],
    )
    sim_p.add_argument(
        "--policy", type=str, default=None,
        choices=[p.value for p in CollisionPolicy],
    )
    sim_p.add_argument("--steps", type=int, default=500)
    sim_p.add_argument("--seed", type=int, default=None)
    sim_p.add_argument(
        "--turn-prob", type=float, default=0.2,
        help="Chance of requesting a random turn each tick.",
    )
    sim_p.add_argument("--show", action="store_true",
                       help="Print the board after every tick.")

    # --- leaderboard ---
    lb_p = sub.add_parser("leaderboard", help="Print the top scores.")
    lb_p.add_argument("difficulty", choices=[d.value for d in Difficulty])
    lb_p.add_argument(
        "--device", type=str, default=DeviceType.DESKTOP.value,
        choices=[d.value for d in DeviceType],
    )
    lb_p.add_argument("--database", type=str, required=True)
    lb_p.add_argument("--limit", type=int, default=None)

    return parser


@dataclass
class SimulationResult:
    """Outcome of a headless game."""

    ticks: int
    score: int
    length: int
    game_over: bool
    board_full: bool

    def summary(self) -> str:
        if self.board_full:
            status = "board full"
        elif self.game_over:
            status = "collision"
        else:
            status = "still alive"
        return (
            f"Simulation: {self.ticks} ticks, score {self.score}, "
            f"length {self.length} ({status})"
        )


def render_board(state: dict) -> str:
    """Draw a state dict as ASCII, head marked ``@``."""
    grid = Grid(state["grid"]["rows"], state["grid"]["cols"])
    body = [tuple(seg) for seg in state["snake"]["body"]]
    food = tuple(state["food"]) if state["food"] is not None else None
    cells = grid.paint(body, food)
    lines = [[_GLYPHS[int(v)] for v in row] for row in cells]
    head_row, head_col = body[0]
    lines[head_row - 1][head_col - 1] = "@"
    return "\n".join("".join(line) for line in lines)


def simulate(
    config: GameConfig,
    *,
    steps: int = 500,
    seed: int | None = None,
    turn_prob: float = 0.2,
    show: bool = False,
) -> SimulationResult:
    """Run a game with random turn requests until it ends or *steps* pass."""
    rng = np.random.default_rng(seed)
    session = GameSession(config, seed=seed, direction=Direction.RIGHT)
    directions = list(Direction)

    state = session.get_state()
    for _ in range(steps):
        if rng.random() < turn_prob:
            session.set_direction(directions[int(rng.integers(len(directions)))])
        state = session.step()
        if show:
            print(render_board(state), end="\n\n")  # noqa: T201
        if state["game_over"]:
            break

    return SimulationResult(
        ticks=state["tick"],
        score=state["score"],
        length=len(state["snake"]["body"]),
        game_over=state["game_over"],
        board_full=state["board_full"],
    )


def _run_serve(args: argparse.Namespace) -> int:
    import uvicorn

    from wrapsnake.server.app import create_app
    from wrapsnake.server.settings import ServerSettings

    overrides = {
        key: val
        for key, val in (
            ("host", args.host), ("port", args.port), ("database", args.database),
        )
        if val is not None
    }
    settings = ServerSettings(**overrides)
    logging.getLogger().setLevel(settings.log_level.upper())
    app = create_app(settings)
    uvicorn.run(app, host=settings.host, port=settings.port)
    return 0


def _run_simulate(args: argparse.Namespace) -> int:
    config = GameConfig.load(args.config) if args.config else GameConfig()

    overrides: dict = {}
    flag_map = {
        "rows": "rows",
        "cols": "cols",
        "difficulty": "difficulty",
        "policy": "collision_policy",
    }
    for cli_name, cfg_name in flag_map.items():
        val = getattr(args, cli_name, None)
        if val is not None:
            overrides[cfg_name] = val
    if "rows" in overrides and "cols" not in overrides:
        overrides["cols"] = overrides["rows"]

    if overrides:
        d = config.to_dict()
        d.update(overrides)
        config = GameConfig(**d)

    result = simulate(
        config,
        steps=args.steps,
        seed=args.seed,
        turn_prob=args.turn_prob,
        show=args.show,
    )
    print(result.summary())  # noqa: T201
    return 0


def _run_leaderboard(args: argparse.Namespace) -> int:
    from wrapsnake.leaderboard import LeaderboardError, SqliteLeaderboardStore

    if not Path(args.database).is_file():
        logger.error("Leaderboard database %s not found.", args.database)
        return 1
    try:
        store = SqliteLeaderboardStore(args.database)
    except LeaderboardError as exc:
        logger.error("%s", exc)
        return 1
    try:
        entries = store.top(
            Difficulty(args.difficulty), DeviceType(args.device), args.limit,
        )
    except LeaderboardError as exc:
        logger.error("%s", exc)
        return 1
    finally:
        store.close()

    if not entries:
        print(f"No scores yet for {args.difficulty}/{args.device}.")  # noqa: T201
        return 0
    for rank, entry in enumerate(entries, start=1):
        print(f"{rank}. {entry.name:<32} {entry.score:>6}")  # noqa: T201
    return 0


def main(argv: list[str] | None = None) -> int:
    """Entry point for the ``wrapsnake`` CLI."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 1

    handlers = {
        "serve": _run_serve,
        "simulate": _run_simulate,
        "leaderboard": _run_leaderboard,
    }
    return handlers[args.command](args)


if __name__ == "__main__":
    sys.exit(main())
