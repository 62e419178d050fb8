from __future__ import annotations

import asyncio
import logging

from chessahoochee.db.partitions import OPTIONS, PLAYERS, TOURNAMENTS
from chessahoochee.db.repositories import open_repositories
from chessahoochee.settings import get_database_path, get_log_level, get_seed_on_startup

logger = logging.getLogger("chessahoochee")


async def _run() -> int:
    repositories = open_repositories(get_database_path()).initialize(seed=get_seed_on_startup())
    results = await asyncio.gather(*repositories.seed_tasks, return_exceptions=True)
    failures = [result for result in results if isinstance(result, BaseException)]
    for name in (PLAYERS, OPTIONS, TOURNAMENTS):
        logger.info("partition %s ready", name)
    if failures:
        logger.error("%s seed task(s) failed", len(failures))
        return 1
    return 0


def main() -> int:
    logging.basicConfig(level=get_log_level(), format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    return asyncio.run(_run())


if __name__ == "__main__":
    raise SystemExit(main())
