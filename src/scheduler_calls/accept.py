from __future__ import annotations

from typing import Callable

from .domain_types import (
    Accept,
    Create,
    Destroy,
    Launch,
    OfferOperation,
    Reserve,
    Resource,
    TaskInfo,
    Unreserve,
)

OperationBuilder = Callable[[], OfferOperation]


class AcceptBuilder:
    """Accumulates offer ids and operations for a single ACCEPT call.

    Offer ids are de-duplicated and kept in the order they were first attached.
    Operations are kept exactly in the order supplied. A builder must not be
    shared between calls.
    """

    def __init__(self) -> None:
        self._offer_ids: dict[str, None] = {}
        self._operations: list[OfferOperation] = []

    def offer(self, offer_id: str, *operations: OperationBuilder) -> AcceptBuilder:
        self._offer_ids.setdefault(offer_id, None)
        for build_operation in operations:
            self._operations.append(build_operation())
        return self

    def build(self) -> Accept:
        return Accept(offer_ids=tuple(self._offer_ids), operations=tuple(self._operations))


AcceptOption = Callable[[AcceptBuilder], None]


def offer_with_operations(offer_id: str, *operations: OperationBuilder) -> AcceptOption:
    def apply(builder: AcceptBuilder) -> None:
        builder.offer(offer_id, *operations)

    return apply


def op_launch(*task_infos: TaskInfo) -> OperationBuilder:
    return lambda: OfferOperation(Launch(task_infos=task_infos))


def op_reserve(*resources: Resource) -> OperationBuilder:
    return lambda: OfferOperation(Reserve(resources=resources))


def op_unreserve(*resources: Resource) -> OperationBuilder:
    return lambda: OfferOperation(Unreserve(resources=resources))


def op_create(*volumes: Resource) -> OperationBuilder:
    return lambda: OfferOperation(Create(volumes=volumes))


def op_destroy(*volumes: Resource) -> OperationBuilder:
    return lambda: OfferOperation(Destroy(volumes=volumes))
