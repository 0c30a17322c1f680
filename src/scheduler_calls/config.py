from __future__ import annotations

import logging
import os

from .http_scheduler_client import HttpSchedulerClient
from .scheduler_client import FakeSchedulerClient, SchedulerClient

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECS = 15.0


def build_client() -> SchedulerClient:
    """Pick a scheduler client from the environment.

    Without SCHEDULER_MASTER_URL calls are recorded by a FakeSchedulerClient.
    """
    master_url = os.getenv("SCHEDULER_MASTER_URL", "").strip()
    stream_id = os.getenv("SCHEDULER_STREAM_ID", "").strip() or None
    token = os.getenv("SCHEDULER_TOKEN", "").strip() or None
    raw_timeout = os.getenv("SCHEDULER_TIMEOUT_SECS", str(DEFAULT_TIMEOUT_SECS)).strip()
    try:
        timeout = float(raw_timeout)
    except ValueError:
        logger.debug("ignoring invalid SCHEDULER_TIMEOUT_SECS=%r", raw_timeout)
        timeout = DEFAULT_TIMEOUT_SECS

    if not master_url:
        return FakeSchedulerClient()
    return HttpSchedulerClient(master_url=master_url, stream_id=stream_id, token=token, timeout_secs=timeout)
