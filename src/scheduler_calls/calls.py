from __future__ import annotations

from .accept import AcceptBuilder, AcceptOption
from .domain_types import (
    Acknowledge,
    Call,
    CallOption,
    Decline,
    Filters,
    FrameworkInfo,
    Kill,
    Message,
    Reconcile,
    Request,
    ResourceRequest,
    Revive,
    Shutdown,
    Subscribe,
)
from .reconcile import ReconcileOption, optional_agent_id


def filters(value: Filters | None = None, *, refuse_seconds: float | None = None) -> CallOption:
    """Set the filters of an ACCEPT or DECLINE call.

    Without arguments the filters are cleared rather than set to an empty
    object. Applying the option to any other call kind raises
    UnsupportedFiltersError.
    """
    chosen = value
    if chosen is None and refuse_seconds is not None:
        chosen = Filters(refuse_seconds=refuse_seconds)
    return lambda call: call.with_filters(chosen)


def framework(framework_id: str) -> CallOption:
    return lambda call: call.with_framework_id(framework_id)


def subscribe(force: bool, info: FrameworkInfo) -> Call:
    """Subscribe call; the framework id is taken from ``info`` (absent on first subscription)."""
    return Call(payload=Subscribe(framework_info=info, force=force), framework_id=info.id)


def accept(*options: AcceptOption) -> Call:
    """Accept call. Callers are expected to fill in the framework id and filters."""
    builder = AcceptBuilder()
    for option in options:
        option(builder)
    return Call(payload=builder.build())


def revive() -> Call:
    return Call(payload=Revive())


def decline(*offer_ids: str) -> Call:
    """Decline call. Callers are expected to fill in the framework id and filters."""
    return Call(payload=Decline(offer_ids=offer_ids))


def kill(task_id: str, agent_id: str = "") -> Call:
    return Call(payload=Kill(task_id=task_id, agent_id=optional_agent_id(agent_id)))


def shutdown(executor_id: str, agent_id: str) -> Call:
    return Call(payload=Shutdown(executor_id=executor_id, agent_id=agent_id))


def acknowledge(agent_id: str, task_id: str, uuid: bytes) -> Call:
    return Call(payload=Acknowledge(agent_id=agent_id, task_id=task_id, uuid=uuid))


def reconcile(*options: ReconcileOption) -> Call:
    """Reconcile call; see reconcile_tasks. Without options every known task is reconciled."""
    payload = Reconcile()
    for option in options:
        payload = option(payload)
    return Call(payload=payload)


def message(agent_id: str, executor_id: str, data: bytes) -> Call:
    return Call(payload=Message(agent_id=agent_id, executor_id=executor_id, data=data))


def request(*requests: ResourceRequest) -> Call:
    return Call(payload=Request(requests=requests))
