from __future__ import annotations

import argparse
from typing import Sequence

import uvicorn

from src.api.app import build_app
from src.config.settings import settings
from src.logging_config import get_logger


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Run the todo query service")
    p.add_argument("--host", default=settings.host, help="Bind address")
    p.add_argument("--port", type=int, default=settings.port, help="Bind port")
    p.add_argument(
        "--capacity",
        type=int,
        default=settings.cache_capacity,
        help="Maximum number of todos kept in the cache",
    )
    p.add_argument(
        "--ttl-ms",
        type=int,
        default=settings.cache_ttl_ms,
        help="Milliseconds a todo lives after its last write",
    )
    return p


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.capacity < 1 or args.ttl_ms < 1:
        parser.error("--capacity and --ttl-ms must be positive")

    logger = get_logger()
    cfg = settings.model_copy(
        update={
            "host": args.host,
            "port": args.port,
            "cache_capacity": args.capacity,
            "cache_ttl_ms": args.ttl_ms,
        }
    )
    app = build_app(cfg)
    logger.info(
        "Server ready",
        extra={
            "url": f"http://{cfg.host}:{cfg.port}/",
            "capacity": cfg.cache_capacity,
            "ttl_ms": cfg.cache_ttl_ms,
        },
    )
    uvicorn.run(app, host=cfg.host, port=cfg.port, log_config=None)
    app.state.stats.log_summary()
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
