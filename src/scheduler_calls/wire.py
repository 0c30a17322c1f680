"""JSON mapping of scheduler calls (v1 scheduler HTTP API).

Identifiers are encoded as ``{"value": ...}`` objects and byte fields as
base64 strings. Optional fields that are unset are left out entirely.
"""
from __future__ import annotations

import base64
import binascii
from typing import Any, Mapping

from .domain_types import (
    ALL_TASKS,
    Accept,
    Acknowledge,
    Call,
    CallKind,
    CommandInfo,
    Create,
    Decline,
    Destroy,
    Filters,
    FrameworkInfo,
    Kill,
    Launch,
    Message,
    OfferOperation,
    OperationKind,
    Reconcile,
    ReconcileTask,
    Request,
    Reserve,
    Resource,
    ResourceRequest,
    Revive,
    Shutdown,
    Subscribe,
    TaskInfo,
    Unreserve,
    ValueRange,
)
from .errors import MalformedCallError

_PAYLOAD_KEYS = {kind: kind.value.lower() for kind in CallKind}
_OPERATION_KEYS = {kind: kind.value.lower() for kind in OperationKind}


def _id(value: str) -> dict[str, str]:
    return {"value": value}


def _value(data: Mapping[str, Any], key: str) -> str:
    return data[key]["value"]


def _optional_value(data: Mapping[str, Any], key: str) -> str | None:
    if key not in data:
        return None
    return data[key]["value"]


def _b64(raw: bytes) -> str:
    return base64.b64encode(raw).decode("ascii")


def _unb64(text: str) -> bytes:
    return base64.b64decode(text)


def _compact(data: dict[str, Any]) -> dict[str, Any]:
    return {k: v for k, v in data.items() if v is not None}


# Supporting records


def encode_filters(filters: Filters) -> dict[str, Any]:
    return _compact({"refuse_seconds": filters.refuse_seconds})


def decode_filters(data: Mapping[str, Any]) -> Filters:
    return Filters(refuse_seconds=data.get("refuse_seconds"))


def encode_framework_info(info: FrameworkInfo) -> dict[str, Any]:
    return _compact(
        {
            "user": info.user,
            "name": info.name,
            "id": _id(info.id) if info.id is not None else None,
            "failover_timeout": info.failover_timeout,
            "checkpoint": info.checkpoint,
            "role": info.role,
            "hostname": info.hostname,
            "principal": info.principal,
        }
    )


def decode_framework_info(data: Mapping[str, Any]) -> FrameworkInfo:
    return FrameworkInfo(
        user=data["user"],
        name=data["name"],
        id=_optional_value(data, "id"),
        failover_timeout=data.get("failover_timeout"),
        checkpoint=data.get("checkpoint"),
        role=data.get("role"),
        hostname=data.get("hostname"),
        principal=data.get("principal"),
    )


def encode_resource(resource: Resource) -> dict[str, Any]:
    out: dict[str, Any] = {"name": resource.name}
    if resource.scalar is not None:
        out["type"] = "SCALAR"
        out["scalar"] = {"value": resource.scalar}
    elif resource.ranges is not None:
        out["type"] = "RANGES"
        out["ranges"] = {"range": [{"begin": r.begin, "end": r.end} for r in resource.ranges]}
    elif resource.set_items is not None:
        out["type"] = "SET"
        out["set"] = {"item": list(resource.set_items)}
    if resource.role is not None:
        out["role"] = resource.role
    if resource.reservation_principal is not None:
        out["reservation"] = {"principal": resource.reservation_principal}
    if resource.persistence_id is not None or resource.container_path is not None:
        disk: dict[str, Any] = {}
        if resource.persistence_id is not None:
            disk["persistence"] = {"id": resource.persistence_id}
        if resource.container_path is not None:
            disk["volume"] = {"container_path": resource.container_path, "mode": "RW"}
        out["disk"] = disk
    return out


def decode_resource(data: Mapping[str, Any]) -> Resource:
    ranges = None
    if "ranges" in data:
        ranges = tuple(ValueRange(begin=r["begin"], end=r["end"]) for r in data["ranges"].get("range", []))
    set_items = None
    if "set" in data:
        set_items = tuple(data["set"].get("item", []))
    disk = data.get("disk", {})
    return Resource(
        name=data["name"],
        scalar=data["scalar"]["value"] if "scalar" in data else None,
        ranges=ranges,
        set_items=set_items,
        role=data.get("role"),
        reservation_principal=data.get("reservation", {}).get("principal"),
        persistence_id=disk.get("persistence", {}).get("id"),
        container_path=disk.get("volume", {}).get("container_path"),
    )


def encode_task_info(task: TaskInfo) -> dict[str, Any]:
    out: dict[str, Any] = {
        "name": task.name,
        "task_id": _id(task.task_id),
        "agent_id": _id(task.agent_id),
        "resources": [encode_resource(r) for r in task.resources],
    }
    if task.command is not None:
        out["command"] = {"value": task.command.value, "shell": task.command.shell}
    if task.data is not None:
        out["data"] = _b64(task.data)
    return out


def decode_task_info(data: Mapping[str, Any]) -> TaskInfo:
    command = None
    if "command" in data:
        command = CommandInfo(value=data["command"]["value"], shell=data["command"].get("shell", True))
    return TaskInfo(
        name=data["name"],
        task_id=_value(data, "task_id"),
        agent_id=_value(data, "agent_id"),
        resources=tuple(decode_resource(r) for r in data.get("resources", [])),
        command=command,
        data=_unb64(data["data"]) if "data" in data else None,
    )


# Offer operations


def encode_operation(operation: OfferOperation) -> dict[str, Any]:
    variant = operation.variant
    if isinstance(variant, Launch):
        body: dict[str, Any] = {"task_infos": [encode_task_info(t) for t in variant.task_infos]}
    elif isinstance(variant, (Reserve, Unreserve)):
        body = {"resources": [encode_resource(r) for r in variant.resources]}
    else:
        body = {"volumes": [encode_resource(r) for r in variant.volumes]}
    return {"type": operation.type.value, _OPERATION_KEYS[operation.type]: body}


def decode_operation(data: Mapping[str, Any]) -> OfferOperation:
    try:
        kind = OperationKind(data["type"])
    except (KeyError, ValueError) as exc:
        raise MalformedCallError(f"unknown offer operation type {data.get('type')!r}") from exc
    key = _OPERATION_KEYS[kind]
    others = sorted(k for other, k in _OPERATION_KEYS.items() if other is not kind and k in data)
    if others:
        raise MalformedCallError(f"offer operation of type {kind.value} carries payload for {others}")
    if key not in data:
        raise MalformedCallError(f"offer operation of type {kind.value} has no {key!r} payload")
    body = data[key]
    if kind is OperationKind.LAUNCH:
        return OfferOperation(Launch(task_infos=[decode_task_info(t) for t in body.get("task_infos", [])]))
    if kind is OperationKind.RESERVE:
        return OfferOperation(Reserve(resources=[decode_resource(r) for r in body.get("resources", [])]))
    if kind is OperationKind.UNRESERVE:
        return OfferOperation(Unreserve(resources=[decode_resource(r) for r in body.get("resources", [])]))
    if kind is OperationKind.CREATE:
        return OfferOperation(Create(volumes=[decode_resource(r) for r in body.get("volumes", [])]))
    return OfferOperation(Destroy(volumes=[decode_resource(r) for r in body.get("volumes", [])]))


# Calls


def _encode_payload(call: Call) -> dict[str, Any] | None:
    p = call.payload
    if isinstance(p, Subscribe):
        return {"framework_info": encode_framework_info(p.framework_info), "force": p.force}
    if isinstance(p, Accept):
        out: dict[str, Any] = {
            "offer_ids": [_id(o) for o in p.offer_ids],
            "operations": [encode_operation(op) for op in p.operations],
        }
        if p.filters is not None:
            out["filters"] = encode_filters(p.filters)
        return out
    if isinstance(p, Decline):
        out = {"offer_ids": [_id(o) for o in p.offer_ids]}
        if p.filters is not None:
            out["filters"] = encode_filters(p.filters)
        return out
    if isinstance(p, Revive):
        return None
    if isinstance(p, Kill):
        out = {"task_id": _id(p.task_id)}
        if p.agent_id is not None:
            out["agent_id"] = _id(p.agent_id)
        return out
    if isinstance(p, Shutdown):
        return {"executor_id": _id(p.executor_id), "agent_id": _id(p.agent_id)}
    if isinstance(p, Acknowledge):
        return {"agent_id": _id(p.agent_id), "task_id": _id(p.task_id), "uuid": _b64(p.uuid)}
    if isinstance(p, Reconcile):
        if p.tasks is ALL_TASKS:
            return {}
        tasks = []
        for task in p.tasks:
            entry = {"task_id": _id(task.task_id)}
            if task.agent_id is not None:
                entry["agent_id"] = _id(task.agent_id)
            tasks.append(entry)
        return {"tasks": tasks}
    if isinstance(p, Message):
        return {"agent_id": _id(p.agent_id), "executor_id": _id(p.executor_id), "data": _b64(p.data)}
    return {
        "requests": [
            _compact(
                {
                    "agent_id": _id(r.agent_id) if r.agent_id is not None else None,
                    "resources": [encode_resource(res) for res in r.resources],
                }
            )
            for r in p.requests
        ]
    }


def encode_call(call: Call) -> dict[str, Any]:
    out: dict[str, Any] = {"type": call.type.value}
    if call.framework_id is not None:
        out["framework_id"] = _id(call.framework_id)
    body = _encode_payload(call)
    if body is not None:
        out[_PAYLOAD_KEYS[call.type]] = body
    return out


def validate_wire_call(data: Mapping[str, Any]) -> CallKind:
    """Check that exactly the payload matching ``type`` is present."""
    try:
        kind = CallKind(data["type"])
    except (KeyError, ValueError) as exc:
        raise MalformedCallError(f"unknown call type {data.get('type')!r}") from exc
    expected = _PAYLOAD_KEYS[kind]
    others = sorted(key for k, key in _PAYLOAD_KEYS.items() if k is not kind and key in data)
    if others:
        raise MalformedCallError(f"{kind.value} call carries payload for {others}")
    if kind is not CallKind.REVIVE and expected not in data:
        raise MalformedCallError(f"{kind.value} call has no {expected!r} payload")
    return kind


def _decode_payload(kind: CallKind, body: Mapping[str, Any]) -> Any:
    if kind is CallKind.SUBSCRIBE:
        return Subscribe(
            framework_info=decode_framework_info(body["framework_info"]),
            force=body.get("force", False),
        )
    if kind is CallKind.ACCEPT:
        return Accept(
            offer_ids=[o["value"] for o in body.get("offer_ids", [])],
            operations=[decode_operation(op) for op in body.get("operations", [])],
            filters=decode_filters(body["filters"]) if "filters" in body else None,
        )
    if kind is CallKind.DECLINE:
        return Decline(
            offer_ids=[o["value"] for o in body.get("offer_ids", [])],
            filters=decode_filters(body["filters"]) if "filters" in body else None,
        )
    if kind is CallKind.REVIVE:
        return Revive()
    if kind is CallKind.KILL:
        return Kill(task_id=_value(body, "task_id"), agent_id=_optional_value(body, "agent_id"))
    if kind is CallKind.SHUTDOWN:
        return Shutdown(executor_id=_value(body, "executor_id"), agent_id=_value(body, "agent_id"))
    if kind is CallKind.ACKNOWLEDGE:
        return Acknowledge(
            agent_id=_value(body, "agent_id"),
            task_id=_value(body, "task_id"),
            uuid=_unb64(body["uuid"]),
        )
    if kind is CallKind.RECONCILE:
        if "tasks" not in body:
            return Reconcile(tasks=ALL_TASKS)
        return Reconcile(
            tasks=[
                ReconcileTask(task_id=_value(t, "task_id"), agent_id=_optional_value(t, "agent_id"))
                for t in body["tasks"]
            ]
        )
    if kind is CallKind.MESSAGE:
        return Message(
            agent_id=_value(body, "agent_id"),
            executor_id=_value(body, "executor_id"),
            data=_unb64(body["data"]),
        )
    return Request(
        requests=[
            ResourceRequest(
                agent_id=_optional_value(r, "agent_id"),
                resources=[decode_resource(res) for res in r.get("resources", [])],
            )
            for r in body.get("requests", [])
        ]
    )


def decode_call(data: Mapping[str, Any]) -> Call:
    kind = validate_wire_call(data)
    key = _PAYLOAD_KEYS[kind]
    try:
        framework_id = _optional_value(data, "framework_id")
        payload = _decode_payload(kind, data.get(key, {}))
    except (KeyError, TypeError, AttributeError, binascii.Error) as exc:
        raise MalformedCallError(f"malformed {kind.value} call: {exc!r}") from exc
    return Call(payload=payload, framework_id=framework_id)
