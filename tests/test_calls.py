from __future__ import annotations

import pytest

from scheduler_calls import (
    ALL_TASKS,
    AcceptBuilder,
    Call,
    CallKind,
    Filters,
    FrameworkInfo,
    MalformedCallError,
    OperationKind,
    ReconcileTask,
    Resource,
    ResourceRequest,
    TaskInfo,
    UnsupportedFiltersError,
    accept,
    acknowledge,
    decline,
    filters,
    framework,
    kill,
    message,
    offer_with_operations,
    op_create,
    op_destroy,
    op_launch,
    op_reserve,
    op_unreserve,
    reconcile,
    reconcile_tasks,
    request,
    revive,
    shutdown,
    subscribe,
)
from scheduler_calls.domain_types import (
    Accept,
    Acknowledge,
    Decline,
    Kill,
    Message,
    Reconcile,
    Request,
    Revive,
    Shutdown,
    Subscribe,
)

CPUS = Resource(name="cpus", scalar=0.5, role="web")
VOLUME = Resource(name="disk", scalar=64.0, role="web", persistence_id="vol-1", container_path="data")
TASK = TaskInfo(name="web-1", task_id="t1", agent_id="a1", resources=(CPUS,))


def _every_kind() -> list[tuple[Call, CallKind, type]]:
    return [
        (subscribe(False, FrameworkInfo(user="root", name="fw")), CallKind.SUBSCRIBE, Subscribe),
        (accept(offer_with_operations("o1", op_launch(TASK))), CallKind.ACCEPT, Accept),
        (decline("o1"), CallKind.DECLINE, Decline),
        (revive(), CallKind.REVIVE, Revive),
        (kill("t1"), CallKind.KILL, Kill),
        (shutdown("e1", "a1"), CallKind.SHUTDOWN, Shutdown),
        (acknowledge("a1", "t1", b"\x01\x02"), CallKind.ACKNOWLEDGE, Acknowledge),
        (reconcile(), CallKind.RECONCILE, Reconcile),
        (message("a1", "e1", b"hello"), CallKind.MESSAGE, Message),
        (request(ResourceRequest(agent_id="a1", resources=(CPUS,))), CallKind.REQUEST, Request),
    ]


def test_every_constructor_tags_its_payload() -> None:
    calls = _every_kind()
    assert {kind for _, kind, _ in calls} == set(CallKind)
    for call, kind, payload_type in calls:
        assert call.type is kind
        assert type(call.payload) is payload_type


def test_call_rejects_foreign_payload() -> None:
    with pytest.raises(MalformedCallError):
        Call(payload=Filters())  # type: ignore[arg-type]


def test_subscribe_copies_framework_id() -> None:
    first = subscribe(True, FrameworkInfo(user="root", name="fw"))
    assert first.framework_id is None
    assert first.payload.force is True

    again = subscribe(False, FrameworkInfo(user="root", name="fw", id="fw-1"))
    assert again.framework_id == "fw-1"
    assert again.payload.framework_info.id == "fw-1"
    assert again.payload.force is False


def test_accept_leaves_framework_and_filters_unset() -> None:
    call = accept(offer_with_operations("o1"))
    assert call.framework_id is None
    assert call.payload.filters is None
    assert call.payload.offer_ids == ("o1",)
    assert call.payload.operations == ()


def test_accept_preserves_operation_order() -> None:
    call = accept(
        offer_with_operations("A", op_reserve(CPUS), op_launch(TASK)),
        offer_with_operations("B", op_create(VOLUME)),
    )
    kinds = [op.type for op in call.payload.operations]
    assert kinds == [OperationKind.RESERVE, OperationKind.LAUNCH, OperationKind.CREATE]
    assert set(call.payload.offer_ids) == {"A", "B"}


def test_accept_deduplicates_offer_ids_in_first_seen_order() -> None:
    call = accept(
        offer_with_operations("B", op_unreserve(CPUS)),
        offer_with_operations("A"),
        offer_with_operations("B", op_destroy(VOLUME)),
    )
    assert call.payload.offer_ids == ("B", "A")
    assert [op.type for op in call.payload.operations] == [OperationKind.UNRESERVE, OperationKind.DESTROY]


def test_accept_offer_set_ignores_attachment_order() -> None:
    one = accept(offer_with_operations("A"), offer_with_operations("B"), offer_with_operations("A"))
    two = accept(offer_with_operations("B"), offer_with_operations("A"))
    assert set(one.payload.offer_ids) == set(two.payload.offer_ids)


def test_accept_uses_a_fresh_accumulator_each_time() -> None:
    option = offer_with_operations("o1", op_launch(TASK))
    first = accept(option)
    second = accept(option)
    assert len(first.payload.operations) == 1
    assert len(second.payload.operations) == 1


def test_accept_builder_is_fluent() -> None:
    payload = AcceptBuilder().offer("o1", op_reserve(CPUS)).offer("o2", op_launch(TASK)).build()
    assert payload.offer_ids == ("o1", "o2")
    assert payload.operations[1].variant.task_infos == (TASK,)


def test_operation_builders_populate_one_variant() -> None:
    expected = {
        OperationKind.LAUNCH: ("task_infos", op_launch(TASK)),
        OperationKind.RESERVE: ("resources", op_reserve(CPUS)),
        OperationKind.UNRESERVE: ("resources", op_unreserve(CPUS)),
        OperationKind.CREATE: ("volumes", op_create(VOLUME)),
        OperationKind.DESTROY: ("volumes", op_destroy(VOLUME)),
    }
    for kind, (attr, build) in expected.items():
        operation = build()
        assert operation.type is kind
        assert len(getattr(operation.variant, attr)) == 1


def test_decline_allows_empty_offer_list() -> None:
    call = decline()
    assert call.type is CallKind.DECLINE
    assert call.payload.offer_ids == ()


def test_kill_normalizes_empty_agent_id() -> None:
    assert kill("t1", "").payload.agent_id is None
    assert kill("t1").payload.agent_id is None
    assert kill("t1", "agent-7").payload.agent_id == "agent-7"


def test_shutdown_keeps_both_ids() -> None:
    call = shutdown("", "")
    assert call.payload.executor_id == ""
    assert call.payload.agent_id == ""


def test_acknowledge_and_message_pass_bytes_through() -> None:
    assert acknowledge("a1", "t1", b"not-a-uuid").payload.uuid == b"not-a-uuid"
    assert message("a1", "e1", b"\x00\xff").payload.data == b"\x00\xff"


def test_reconcile_tasks_mapping() -> None:
    call = reconcile(reconcile_tasks({"t1": "a1", "t2": ""}))
    assert len(call.payload.tasks) == 2
    assert set(call.payload.tasks) == {ReconcileTask("t1", "a1"), ReconcileTask("t2", None)}


def test_reconcile_empty_mapping_means_all_tasks() -> None:
    call = reconcile(reconcile_tasks({}))
    assert call.payload.tasks is ALL_TASKS
    assert call.payload.all_tasks
    assert reconcile().payload.all_tasks


def test_reconcile_all_differs_from_emptied_list() -> None:
    emptied = Reconcile(tasks=())
    assert not emptied.all_tasks
    assert emptied != reconcile(reconcile_tasks({})).payload


def test_reconcile_options_apply_in_order() -> None:
    call = reconcile(reconcile_tasks({"t1": "a1"}), reconcile_tasks({}))
    assert call.payload.all_tasks


def test_filters_on_accept_and_decline() -> None:
    accepted = accept(offer_with_operations("o1")).with_options(filters(refuse_seconds=5.0))
    declined = decline("o1").with_options(filters(Filters(refuse_seconds=1.5)))
    assert accepted.payload.filters == Filters(refuse_seconds=5.0)
    assert declined.payload.filters == Filters(refuse_seconds=1.5)


@pytest.mark.parametrize(
    "call",
    [
        subscribe(False, FrameworkInfo(user="root", name="fw")),
        revive(),
        kill("t1"),
        reconcile(),
    ],
)
def test_filters_on_other_kinds_is_a_usage_error(call: Call) -> None:
    with pytest.raises(UnsupportedFiltersError, match="filters not supported for type"):
        call.with_options(filters(refuse_seconds=1.0))


def test_framework_option_overwrites_any_kind() -> None:
    sub = subscribe(False, FrameworkInfo(user="root", name="fw", id="old"))
    assert sub.with_options(framework("new")).framework_id == "new"
    assert revive().with_options(framework("fw-1")).framework_id == "fw-1"


def test_options_return_new_values_in_order() -> None:
    original = decline("o1")
    updated = original.with_options(framework("a"), filters(refuse_seconds=2.0), framework("b"))
    assert original.framework_id is None
    assert original.payload.filters is None
    assert updated.framework_id == "b"
    assert updated.payload.filters.refuse_seconds == 2.0
