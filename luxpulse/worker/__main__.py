"""Worker entry point: ``python -m luxpulse.worker``."""

import argparse
import asyncio

from loguru import logger

from luxpulse.api.infrastructure.logging import configure_structured_logging
from luxpulse.config import AppConfig
from luxpulse.worker.tick import build_engine, build_sink, run_worker, run_worker_tick


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="LuxPulse rule evaluation worker")
    parser.add_argument("--once", action="store_true", help="Run a single tick and exit")
    parser.add_argument("--fixture", help="Fixture to replay (overrides WORKER_FIXTURE_NAME)")
    args = parser.parse_args(argv)

    config = AppConfig()
    configure_structured_logging(config.logging)

    worker_config = config.worker
    if args.fixture:
        worker_config = worker_config.model_copy(update={"fixture_name": args.fixture})

    if args.once:
        run_worker_tick(build_engine(worker_config), worker_config, sink=build_sink(worker_config), tick_id=1)
        return 0

    try:
        asyncio.run(run_worker(worker_config))
    except KeyboardInterrupt:
        logger.info("🛑 Worker interrupted")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
