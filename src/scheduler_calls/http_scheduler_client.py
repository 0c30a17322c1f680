from __future__ import annotations

import logging
from typing import Optional

import httpx

from .domain_types import Call, CallKind
from .scheduler_client import SchedulerAck, SchedulerClient
from .wire import encode_call

logger = logging.getLogger(__name__)

STREAM_ID_HEADER = "Mesos-Stream-Id"


class HttpSchedulerClient(SchedulerClient):
    """Posts one encoded call per request to the scheduler endpoint.

    The client holds no session: the stream id obtained from a SUBSCRIBE
    response must be passed in by the caller for every later call.
    """

    def __init__(
        self,
        master_url: str,
        stream_id: Optional[str] = None,
        token: Optional[str] = None,
        timeout_secs: float = 15.0,
    ) -> None:
        self.master_url = master_url.rstrip("/")
        self.stream_id = stream_id
        self.token = token
        self.timeout = timeout_secs
        self.headers = {"Content-Type": "application/json", "Accept": "application/json"}
        if self.token:
            self.headers["Authorization"] = f"Bearer {self.token}"

    @property
    def endpoint(self) -> str:
        return f"{self.master_url}/api/v1/scheduler"

    def send(self, call: Call) -> SchedulerAck:
        body = encode_call(call)
        headers = dict(self.headers)
        if self.stream_id and call.type is not CallKind.SUBSCRIBE:
            headers[STREAM_ID_HEADER] = self.stream_id
        logger.debug("sending %s call to %s", call.type.value, self.endpoint)

        if call.type is CallKind.SUBSCRIBE:
            # The response body is the event stream; only the headers are read here.
            with httpx.Client(timeout=self.timeout) as client:
                with client.stream("POST", self.endpoint, json=body, headers=headers) as resp:
                    resp.raise_for_status()
                    return SchedulerAck(status_code=resp.status_code, stream_id=resp.headers.get(STREAM_ID_HEADER))

        with httpx.Client(timeout=self.timeout) as client:
            resp = client.post(self.endpoint, json=body, headers=headers)
            resp.raise_for_status()
            return SchedulerAck(status_code=resp.status_code, stream_id=resp.headers.get(STREAM_ID_HEADER))
