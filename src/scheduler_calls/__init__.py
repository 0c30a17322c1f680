from .accept import (
    AcceptBuilder,
    offer_with_operations,
    op_create,
    op_destroy,
    op_launch,
    op_reserve,
    op_unreserve,
)
from .calls import (
    accept,
    acknowledge,
    decline,
    filters,
    framework,
    kill,
    message,
    reconcile,
    request,
    revive,
    shutdown,
    subscribe,
)
from .domain_types import (
    ALL_TASKS,
    Call,
    CallKind,
    CommandInfo,
    Filters,
    FrameworkInfo,
    OfferOperation,
    OperationKind,
    ReconcileTask,
    Resource,
    ResourceRequest,
    TaskInfo,
    ValueRange,
)
from .config import build_client
from .errors import MalformedCallError, SchedulerCallError, UnsupportedFiltersError
from .http_scheduler_client import HttpSchedulerClient
from .reconcile import reconcile_tasks
from .scheduler_client import FakeSchedulerClient, SchedulerAck, SchedulerClient
from .wire import decode_call, encode_call, validate_wire_call

__all__ = [
    "ALL_TASKS",
    "AcceptBuilder",
    "Call",
    "CallKind",
    "CommandInfo",
    "FakeSchedulerClient",
    "Filters",
    "FrameworkInfo",
    "HttpSchedulerClient",
    "MalformedCallError",
    "OfferOperation",
    "OperationKind",
    "ReconcileTask",
    "Resource",
    "ResourceRequest",
    "SchedulerAck",
    "SchedulerCallError",
    "SchedulerClient",
    "TaskInfo",
    "UnsupportedFiltersError",
    "ValueRange",
    "accept",
    "acknowledge",
    "build_client",
    "decline",
    "decode_call",
    "encode_call",
    "filters",
    "framework",
    "kill",
    "message",
    "offer_with_operations",
    "op_create",
    "op_destroy",
    "op_launch",
    "op_reserve",
    "op_unreserve",
    "reconcile",
    "reconcile_tasks",
    "request",
    "revive",
    "shutdown",
    "subscribe",
    "validate_wire_call",
]
