"""Command line entry point: run the session server or a headless game."""

from __future__ import annotations

import argparse
import json
import logging
import sys

logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="canvas-snake",
        description="Canvas Snake session server and headless simulator.",
    )
    parser.add_argument(
        "--log-level", type=str, default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
    )
    sub = parser.add_subparsers(dest="command", help="Available commands.")

    # --- serve ---
    serve_p = sub.add_parser("serve", help="Run the HTTP/WebSocket server.")
    serve_p.add_argument("--host", type=str, default="127.0.0.1")
    serve_p.add_argument("--port", type=int, default=8000)

    # --- simulate ---
    sim_p = sub.add_parser(
        "simulate", help="Run a game headlessly and print a summary.",
    )
    sim_p.add_argument(
        "--config", type=str, default=None,
        help="Path to a JSON engine config (overrides other flags).",
    )
    sim_p.add_argument("--ticks", type=int, default=400)
    sim_p.add_argument("--cols", type=int, default=None)
    sim_p.add_argument("--rows", type=int, default=None)
    sim_p.add_argument("--apples", type=int, default=None)
    sim_p.add_argument("--seed", type=int, default=None)
    sim_p.add_argument(
        "--keys", type=str, default="",
        help="Comma-separated key names fed one per tick, e.g. "
             "'ArrowDown,f,f,a'. Use 'space' for the space bar.",
    )

    return parser


def _parse_keys(raw: str) -> list[str]:
    keys = [k.strip() for k in raw.split(",") if k.strip()]
    return [" " if k == "space" else k for k in keys]


def _run_serve(args: argparse.Namespace) -> int:
    import uvicorn

    from canvas_snake.server.app import create_app

    uvicorn.run(
        create_app(), host=args.host, port=args.port,
        log_level=args.log_level.lower(),
    )
    return 0


def _run_simulate(args: argparse.Namespace) -> int:
    from dataclasses import replace

    from canvas_snake.config import EngineConfig
    from canvas_snake.engine import SnakeEngine

    config = EngineConfig.load(args.config) if args.config else EngineConfig()

    overrides: dict = {}
    flag_map = {
        "cols": "cols",
        "rows": "rows",
        "apples": "num_apples",
        "seed": "seed",
    }
    for cli_name, cfg_name in flag_map.items():
        val = getattr(args, cli_name, None)
        if val is not None:
            overrides[cfg_name] = val
    if overrides:
        config = replace(config, **overrides)

    engine = SnakeEngine(config)
    script = _parse_keys(args.keys)
    for i in range(args.ticks):
        if i < len(script):
            engine.handle_key(script[i])
        engine.tick()

    state = engine.get_state()
    summary = {
        "ticks": state["tick"],
        "steps": state["step"],
        "score": state["score"],
        "status": state["status"],
        "length": len(state["snake"]["path"]),
        "apples": len(state["apples"]["positions"]),
    }
    print(json.dumps(summary))  # noqa: T201
    return 0


def main(argv: list[str] | None = None) -> int:
    """Entry point for the ``canvas-snake`` CLI."""
    parser = _build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )

    if args.command is None:
        parser.print_help()
        return 1

    handlers = {
        "serve": _run_serve,
        "simulate": _run_simulate,
    }
    try:
        return handlers[args.command](args)
    except ValueError as exc:
        logger.error("Invalid configuration: %s", exc)
        return 2


if __name__ == "__main__":
    sys.exit(main())
