import asyncio
import logging
from typing import Optional, Tuple

from assistant_client import AssistantClient
from exceptions import RunTimeoutError
from models import RunStatus

logger = logging.getLogger(__name__)


async def wait_for_run(
    client: AssistantClient,
    thread_id: str,
    run_id: str,
    status: RunStatus,
    interval: float = 1.0,
    max_attempts: Optional[int] = None,
) -> Tuple[RunStatus, int]:
    """Re-check a run every ``interval`` seconds until it leaves queued/in_progress.

    Returns the terminal status and how many status checks were made. With
    ``max_attempts`` unset the loop only ends when the run does.
    """
    attempts = 0
    while status.is_pending:
        if max_attempts is not None and attempts >= max_attempts:
            raise RunTimeoutError(run_id, attempts)
        await asyncio.sleep(interval)
        status = await client.get_run_status(thread_id, run_id)
        attempts += 1
        logger.info("Run %s status: %s", run_id, status.value)
    return status, attempts
