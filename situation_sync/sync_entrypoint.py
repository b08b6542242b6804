"""Run sync jobs once from the command line.

    python -m situation_sync.sync_entrypoint                 # every job
    python -m situation_sync.sync_entrypoint sync-hazards    # selected jobs

Exits non-zero when any job reports a failure, so cron and container schedulers
surface it.
"""

import asyncio
import sys
from typing import List, Optional

from situation_sync.core.db import SessionLocal
from situation_sync.core.logging import get_logger
from situation_sync.services.sync_service import JOBS, SyncReport, run_job

log = get_logger("sync_entrypoint")


async def run_jobs(names: List[str]) -> List[SyncReport]:
    db = SessionLocal()
    try:
        return [await run_job(name, db) for name in names]
    finally:
        db.close()


def main(argv: Optional[List[str]] = None) -> int:
    names = list(argv if argv is not None else sys.argv[1:]) or list(JOBS)
    unknown = [name for name in names if name not in JOBS]
    if unknown:
        log.error(f"Unknown job(s): {', '.join(unknown)}. Available: {', '.join(JOBS)}")
        return 2

    reports = asyncio.run(run_jobs(names))
    for report in reports:
        state = "ok" if report.success else "FAILED"
        log.info(f"{report.function}: {state} upserted={report.upserted} errors={report.errors}")
    return 0 if all(report.success for report in reports) else 1


if __name__ == "__main__":
    sys.exit(main())
