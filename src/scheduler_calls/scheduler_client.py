from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Protocol

from .domain_types import Call
from .wire import encode_call


@dataclass(frozen=True)
class SchedulerAck:
    status_code: int
    stream_id: str | None


class SchedulerClient(Protocol):
    def send(self, call: Call) -> SchedulerAck: ...


@dataclass
class FakeSchedulerClient:
    """Encodes calls as the HTTP client would and keeps them instead of sending."""

    sent: list[dict[str, Any]] = field(default_factory=list)

    def send(self, call: Call) -> SchedulerAck:
        self.sent.append(encode_call(call))
        return SchedulerAck(status_code=202, stream_id=None)
