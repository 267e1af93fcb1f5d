from __future__ import annotations

import argparse
import logging
import time
from typing import List, Optional

import uvicorn

from ..engine.fen import STARTPOS_FEN, parse_fen
from ..engine.perft import perft
from ..protocol.text.loop import run as run_text_loop


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="chessrules", description="Chess rules engine")
    sub = parser.add_subparsers(dest="command", required=True)

    serve = sub.add_parser("serve", help="Run the HTTP API")
    serve.add_argument("--host", type=str, default="127.0.0.1", help="Bind address")
    serve.add_argument("--port", type=int, default=8000, help="Bind port (default: 8000)")
    serve.add_argument(
        "--log-level",
        type=str,
        default="info",
        choices=["critical", "error", "warning", "info", "debug"],
    )

    sub.add_parser("play", help="Play in the terminal with text commands")

    p = sub.add_parser("perft", help="Count move-tree leaf nodes for a FEN")
    p.add_argument("--fen", type=str, default=STARTPOS_FEN, help="FEN string (default: startpos)")
    p.add_argument("--depth", type=int, default=3, help="Perft depth (default: 3)")
    return parser


def main(argv: Optional[List[str]] = None) -> None:
    args = build_parser().parse_args(argv)

    if args.command == "serve":
        uvicorn.run(
            "chessrules.protocol.http.app:create_app",
            factory=True,
            host=args.host,
            port=args.port,
            log_level=args.log_level,
        )
    elif args.command == "play":
        logging.basicConfig(level=logging.WARNING)
        run_text_loop()
    elif args.command == "perft":
        pos, side, _, _ = parse_fen(args.fen)
        start = time.perf_counter()
        nodes = perft(pos, side, args.depth)
        dt = time.perf_counter() - start
        print(f"nodes={nodes} depth={args.depth} time_ms={int(dt*1000)}")


if __name__ == "__main__":
    main()
