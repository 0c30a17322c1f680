from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Callable, ClassVar, Sequence, Union

from .errors import MalformedCallError, UnsupportedFiltersError


class CallKind(str, Enum):
    SUBSCRIBE = "SUBSCRIBE"
    ACCEPT = "ACCEPT"
    DECLINE = "DECLINE"
    REVIVE = "REVIVE"
    KILL = "KILL"
    SHUTDOWN = "SHUTDOWN"
    ACKNOWLEDGE = "ACKNOWLEDGE"
    RECONCILE = "RECONCILE"
    MESSAGE = "MESSAGE"
    REQUEST = "REQUEST"


class OperationKind(str, Enum):
    LAUNCH = "LAUNCH"
    RESERVE = "RESERVE"
    UNRESERVE = "UNRESERVE"
    CREATE = "CREATE"
    DESTROY = "DESTROY"


# Supporting records


@dataclass(frozen=True)
class Filters:
    refuse_seconds: float | None = None


@dataclass(frozen=True)
class FrameworkInfo:
    user: str
    name: str
    id: str | None = None
    failover_timeout: float | None = None
    checkpoint: bool | None = None
    role: str | None = None
    hostname: str | None = None
    principal: str | None = None


@dataclass(frozen=True)
class ValueRange:
    begin: int
    end: int


@dataclass(frozen=True)
class Resource:
    """A named quantity of a resource.

    Exactly one of ``scalar``, ``ranges`` or ``set_items`` describes the amount.
    ``reservation_principal`` marks a dynamic reservation; ``persistence_id``
    and ``container_path`` describe a persistent disk volume.
    """

    name: str
    scalar: float | None = None
    ranges: Sequence[ValueRange] | None = None
    set_items: Sequence[str] | None = None
    role: str | None = None
    reservation_principal: str | None = None
    persistence_id: str | None = None
    container_path: str | None = None

    def __post_init__(self) -> None:
        if self.ranges is not None:
            object.__setattr__(self, "ranges", tuple(self.ranges))
        if self.set_items is not None:
            object.__setattr__(self, "set_items", tuple(self.set_items))


@dataclass(frozen=True)
class CommandInfo:
    value: str
    shell: bool = True


@dataclass(frozen=True)
class TaskInfo:
    name: str
    task_id: str
    agent_id: str
    resources: Sequence[Resource] = ()
    command: CommandInfo | None = None
    data: bytes | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "resources", tuple(self.resources))


@dataclass(frozen=True)
class ResourceRequest:
    agent_id: str | None = None
    resources: Sequence[Resource] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "resources", tuple(self.resources))


# Offer operations


@dataclass(frozen=True)
class Launch:
    kind: ClassVar[OperationKind] = OperationKind.LAUNCH
    task_infos: Sequence[TaskInfo] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "task_infos", tuple(self.task_infos))


@dataclass(frozen=True)
class Reserve:
    kind: ClassVar[OperationKind] = OperationKind.RESERVE
    resources: Sequence[Resource] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "resources", tuple(self.resources))


@dataclass(frozen=True)
class Unreserve:
    kind: ClassVar[OperationKind] = OperationKind.UNRESERVE
    resources: Sequence[Resource] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "resources", tuple(self.resources))


@dataclass(frozen=True)
class Create:
    kind: ClassVar[OperationKind] = OperationKind.CREATE
    volumes: Sequence[Resource] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "volumes", tuple(self.volumes))


@dataclass(frozen=True)
class Destroy:
    kind: ClassVar[OperationKind] = OperationKind.DESTROY
    volumes: Sequence[Resource] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "volumes", tuple(self.volumes))


OperationVariant = Union[Launch, Reserve, Unreserve, Create, Destroy]
_OPERATION_VARIANTS = (Launch, Reserve, Unreserve, Create, Destroy)


@dataclass(frozen=True)
class OfferOperation:
    """One operation applied to offered resources; the kind follows the variant."""

    variant: OperationVariant

    def __post_init__(self) -> None:
        if not isinstance(self.variant, _OPERATION_VARIANTS):
            raise MalformedCallError(f"unknown offer operation variant {type(self.variant).__name__}")

    @property
    def type(self) -> OperationKind:
        return self.variant.kind


# Call payloads


class _AllTasks:
    """Marker for a reconcile call that asks about every known task."""

    _instance: ClassVar[_AllTasks | None] = None

    def __new__(cls) -> _AllTasks:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "ALL_TASKS"

    def __reduce__(self) -> str:
        return "ALL_TASKS"


ALL_TASKS = _AllTasks()


@dataclass(frozen=True)
class Subscribe:
    kind: ClassVar[CallKind] = CallKind.SUBSCRIBE
    framework_info: FrameworkInfo
    force: bool = False


@dataclass(frozen=True)
class Accept:
    kind: ClassVar[CallKind] = CallKind.ACCEPT
    offer_ids: Sequence[str] = ()
    operations: Sequence[OfferOperation] = ()
    filters: Filters | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "offer_ids", tuple(self.offer_ids))
        object.__setattr__(self, "operations", tuple(self.operations))


@dataclass(frozen=True)
class Decline:
    kind: ClassVar[CallKind] = CallKind.DECLINE
    offer_ids: Sequence[str] = ()
    filters: Filters | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "offer_ids", tuple(self.offer_ids))


@dataclass(frozen=True)
class Revive:
    kind: ClassVar[CallKind] = CallKind.REVIVE


@dataclass(frozen=True)
class Kill:
    kind: ClassVar[CallKind] = CallKind.KILL
    task_id: str
    agent_id: str | None = None


@dataclass(frozen=True)
class Shutdown:
    kind: ClassVar[CallKind] = CallKind.SHUTDOWN
    executor_id: str
    agent_id: str


@dataclass(frozen=True)
class Acknowledge:
    kind: ClassVar[CallKind] = CallKind.ACKNOWLEDGE
    agent_id: str
    task_id: str
    uuid: bytes


@dataclass(frozen=True)
class ReconcileTask:
    task_id: str
    agent_id: str | None = None


@dataclass(frozen=True)
class Reconcile:
    """Tasks to reconcile, or ``ALL_TASKS`` for implicit reconciliation.

    ``ALL_TASKS`` and an empty tuple are different requests: the first leaves
    the task list out of the call, the second sends an empty one.
    """

    kind: ClassVar[CallKind] = CallKind.RECONCILE
    tasks: Union[Sequence[ReconcileTask], _AllTasks] = field(default=ALL_TASKS)

    def __post_init__(self) -> None:
        if self.tasks is not ALL_TASKS:
            object.__setattr__(self, "tasks", tuple(self.tasks))

    @property
    def all_tasks(self) -> bool:
        return self.tasks is ALL_TASKS


@dataclass(frozen=True)
class Message:
    kind: ClassVar[CallKind] = CallKind.MESSAGE
    agent_id: str
    executor_id: str
    data: bytes


@dataclass(frozen=True)
class Request:
    kind: ClassVar[CallKind] = CallKind.REQUEST
    requests: Sequence[ResourceRequest] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "requests", tuple(self.requests))


CallPayload = Union[
    Subscribe, Accept, Decline, Revive, Kill, Shutdown, Acknowledge, Reconcile, Message, Request
]
_CALL_PAYLOADS = (Subscribe, Accept, Decline, Revive, Kill, Shutdown, Acknowledge, Reconcile, Message, Request)

CallOption = Callable[["Call"], "Call"]


@dataclass(frozen=True)
class Call:
    """A scheduler call. ``type`` is derived from the payload variant."""

    payload: CallPayload
    framework_id: str | None = None

    def __post_init__(self) -> None:
        if not isinstance(self.payload, _CALL_PAYLOADS):
            raise MalformedCallError(f"unknown call payload {type(self.payload).__name__}")

    @property
    def type(self) -> CallKind:
        return self.payload.kind

    def with_framework_id(self, framework_id: str) -> Call:
        return replace(self, framework_id=framework_id)

    def with_filters(self, filters: Filters | None) -> Call:
        if isinstance(self.payload, (Accept, Decline)):
            return replace(self, payload=replace(self.payload, filters=filters))
        raise UnsupportedFiltersError(self.type.value)

    def with_options(self, *options: CallOption) -> Call:
        call = self
        for option in options:
            call = option(call)
        return call
