from __future__ import annotations

import argparse
import logging
import time
from typing import List, Optional

import uvicorn

from ..engine.board import STARTPOS_FEN, Board
from ..engine.perft import divide, perft
from ..protocol.console.loop import run_console
from ..protocol.http.app import create_app


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="chess-rules", description="Chess rules engine")
    sub = parser.add_subparsers(dest="command", required=True)

    serve = sub.add_parser("serve", help="Run the HTTP adjudication service")
    serve.add_argument("--host", default="0.0.0.0", help="Bind address (default: 0.0.0.0)")
    serve.add_argument("--port", type=int, default=8000, help="Port (default: 8000)")
    serve.add_argument("--log-level", default="INFO", help="Logging level (default: INFO)")

    play = sub.add_parser("play", help="Play moves from stdin, one per line")
    play.add_argument("--log-level", default="WARNING", help="Logging level (default: WARNING)")

    pf = sub.add_parser("perft", help="Count leaf nodes of the legal move tree")
    pf.add_argument("--fen", default=STARTPOS_FEN, help="FEN string (default: startpos)")
    pf.add_argument("--depth", type=int, default=3, help="Perft depth (default: 3)")
    pf.add_argument("--divide", action="store_true", help="Print per-move counts")
    return parser


def main(argv: Optional[List[str]] = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command == "serve":
        uvicorn.run(
            create_app(log_level=args.log_level),
            host=args.host,
            port=args.port,
            log_level=args.log_level.lower(),
        )
    elif args.command == "play":
        logging.basicConfig(level=args.log_level.upper(), force=True)
        run_console()
    elif args.command == "perft":
        min_depth = 1 if args.divide else 0
        if args.depth < min_depth:
            parser.error(f"--depth must be >= {min_depth}")
        try:
            board = Board.from_fen(args.fen)
        except ValueError as e:
            parser.error(f"invalid FEN: {e}")
        start = time.perf_counter()
        if args.divide:
            counts = divide(board, args.depth)
            for uci, n in sorted(counts.items()):
                print(f"{uci}: {n}")
            nodes = sum(counts.values())
        else:
            nodes = perft(board, args.depth)
        dt = time.perf_counter() - start
        print(f"nodes={nodes} depth={args.depth} time_ms={int(dt * 1000)}")


if __name__ == "__main__":
    main()
