from __future__ import annotations

from dataclasses import replace
from typing import Callable, Mapping

from .domain_types import ALL_TASKS, Reconcile, ReconcileTask

ReconcileOption = Callable[[Reconcile], Reconcile]


def optional_agent_id(agent_id: str | None) -> str | None:
    return agent_id or None


def reconcile_tasks(tasks: Mapping[str, str]) -> ReconcileOption:
    """Reconcile the given ``{task_id: agent_id}`` pairs.

    Task ids must be non-empty; an empty agent id means "any agent". An empty
    mapping asks about every known task.
    """

    def apply(reconcile: Reconcile) -> Reconcile:
        if not tasks:
            return replace(reconcile, tasks=ALL_TASKS)
        return replace(
            reconcile,
            tasks=tuple(
                ReconcileTask(task_id=task_id, agent_id=optional_agent_id(agent_id))
                for task_id, agent_id in tasks.items()
            ),
        )

    return apply
