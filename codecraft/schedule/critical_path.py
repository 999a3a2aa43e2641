"""
Critical Path Method (CPM) over the tasks of a project.

A task's duration is its PERT weighted average in minutes. An edge runs from a
predecessor to the tasks that list it in ``predecessor_task_ids``.

Forward pass:  ES = max(EF of predecessors, 0), EF = ES + duration
Backward pass: LF = min(LS of successors, project_duration), LS = LF - duration
Slack = LS - ES. A task is on the critical path when its slack is exactly zero.
The passes use exact fractions. Decimal division by 6 leaves rounded durations,
and adding one to a much larger start time would drop its low digits.

Predecessor ids that don't match any task are ignored.

Cycles make the earliest/latest times meaningless. ``analyze_schedule`` checks for
cycles before computing anything. ``calculate_critical_path`` assumes an acyclic
graph and raises ``CyclicDependencyError`` when it finds out otherwise.

Both passes walk a topological order (Kahn), so deep dependency chains don't hit
the recursion limit.

PROMPT> python -m codecraft.schedule.critical_path
"""
import logging
from collections import deque
from dataclasses import dataclass, field
from decimal import Decimal
from fractions import Fraction
from typing import Dict, List, Optional, Sequence
from codecraft.estimate.decimal_util import ZERO, decimal_to_plain_string
from codecraft.model.project_model import Task

logger = logging.getLogger(__name__)

class CyclicDependencyError(ValueError):
    def __init__(self, task_ids: List[str]):
        self.task_ids = task_ids
        super().__init__(f"Cycle detected involving: {', '.join(task_ids)}")

@dataclass
class TaskSchedule:
    task_id: str
    duration: Decimal
    earliest_start: Decimal
    earliest_finish: Decimal
    latest_start: Decimal
    latest_finish: Decimal
    slack: Decimal
    on_critical_path: bool

    def to_dict(self) -> dict:
        return {
            "taskId": self.task_id,
            "duration": str(self.duration),
            "earliestStart": str(self.earliest_start),
            "earliestFinish": str(self.earliest_finish),
            "latestStart": str(self.latest_start),
            "latestFinish": str(self.latest_finish),
            "slack": str(self.slack),
            "onCriticalPath": self.on_critical_path,
        }

@dataclass
class CriticalPathAnalysis:
    project_duration: Decimal
    tasks: List[TaskSchedule] = field(default_factory=list)
    critical_path_task_ids: List[str] = field(default_factory=list)

    def get_schedule(self, task_id: str) -> Optional[TaskSchedule]:
        for item in self.tasks:
            if item.task_id == task_id:
                return item
        return None

    def to_dict(self) -> dict:
        return {
            "projectDuration": str(self.project_duration),
            "tasks": [item.to_dict() for item in self.tasks],
            "criticalPathTaskIds": list(self.critical_path_task_ids),
        }

    def to_csv(self, *, sep: str = ";") -> str:
        """
        Deterministic line oriented rendering, in the order the tasks were given.

        Columns: Task, Duration, ES, EF, LS, LF, Slack, Critical
        """
        header = sep.join(("Task", "Duration", "ES", "EF", "LS", "LF", "Slack", "Critical"))
        rows = [
            sep.join((
                item.task_id,
                decimal_to_plain_string(item.duration),
                decimal_to_plain_string(item.earliest_start),
                decimal_to_plain_string(item.earliest_finish),
                decimal_to_plain_string(item.latest_start),
                decimal_to_plain_string(item.latest_finish),
                decimal_to_plain_string(item.slack),
                "yes" if item.on_critical_path else "no",
            ))
            for item in self.tasks
        ]
        return "\n".join([header, *rows])

    def __str__(self) -> str:
        return self.to_csv()

@dataclass
class ScheduleReport:
    is_valid: bool
    cycle: List[str] = field(default_factory=list)
    analysis: Optional[CriticalPathAnalysis] = None

    def to_dict(self) -> dict:
        return {
            "isValid": self.is_valid,
            "cycle": list(self.cycle),
            "analysis": None if self.analysis is None else self.analysis.to_dict(),
        }

# ────────────────────────────────────────────────────────────────────────────────
#  Adjacency, built on demand from the predecessor lists
# ----------------------------------------------------------------------------
def _predecessor_map(tasks: Sequence[Task]) -> Dict[str, List[str]]:
    """Map each task id to its known predecessor ids, de-duplicated, in listed order."""
    task_ids = [task.id for task in tasks]
    if len(set(task_ids)) != len(task_ids):
        raise ValueError("Task ids must be unique.")
    known = set(task_ids)

    result: Dict[str, List[str]] = {}
    for task in tasks:
        predecessor_ids: List[str] = []
        for predecessor_id in task.predecessor_task_ids:
            if predecessor_id not in known:
                logger.warning(f"Task {task.id!r} references unknown predecessor {predecessor_id!r}. Ignoring it.")
                continue
            if predecessor_id not in predecessor_ids:
                predecessor_ids.append(predecessor_id)
        result[task.id] = predecessor_ids
    return result

def _successor_map(predecessors: Dict[str, List[str]]) -> Dict[str, List[str]]:
    result: Dict[str, List[str]] = {task_id: [] for task_id in predecessors}
    for task_id, predecessor_ids in predecessors.items():
        for predecessor_id in predecessor_ids:
            result[predecessor_id].append(task_id)
    return result

# ────────────────────────────────────────────────────────────────────────────────
#  Cycle detection
# ----------------------------------------------------------------------------
def find_dependency_cycle(tasks: Sequence[Task]) -> Optional[List[str]]:
    """
    Depth first search with an on-stack marker.

    Returns the ids of the first cycle found, following the predecessor links,
    or None when the dependencies are acyclic. A task that lists itself as
    predecessor is a cycle of one.
    """
    predecessors = _predecessor_map(tasks)
    visited: set[str] = set()
    on_stack: set[str] = set()

    for root in predecessors:
        if root in visited:
            continue
        path: List[str] = [root]
        stack = [iter(predecessors[root])]
        visited.add(root)
        on_stack.add(root)
        while stack:
            next_id = next(stack[-1], None)
            if next_id is None:
                stack.pop()
                on_stack.discard(path.pop())
                continue
            if next_id in on_stack:
                return path[path.index(next_id):]
            if next_id in visited:
                continue
            visited.add(next_id)
            on_stack.add(next_id)
            path.append(next_id)
            stack.append(iter(predecessors[next_id]))
    return None

def has_cyclic_dependencies(tasks: Sequence[Task]) -> bool:
    return find_dependency_cycle(tasks) is not None

# ────────────────────────────────────────────────────────────────────────────────
#  Topological ordering (Kahn)
# ----------------------------------------------------------------------------
def _topological_order(predecessors: Dict[str, List[str]], successors: Dict[str, List[str]]) -> List[str]:
    in_deg = {task_id: len(predecessor_ids) for task_id, predecessor_ids in predecessors.items()}
    queue = deque([task_id for task_id, deg in in_deg.items() if deg == 0])
    order: List[str] = []

    while queue:
        task_id = queue.popleft()
        order.append(task_id)
        for successor_id in successors[task_id]:
            in_deg[successor_id] -= 1
            if in_deg[successor_id] == 0:
                queue.append(successor_id)

    if len(order) != len(predecessors):
        remaining = [task_id for task_id, deg in in_deg.items() if deg > 0]
        raise CyclicDependencyError(remaining)
    return order

# ────────────────────────────────────────────────────────────────────────────────
#  CPM calculation (forward & backward pass)
# ----------------------------------------------------------------------------
def _to_decimal(value: Fraction) -> Decimal:
    if value.denominator == 1:
        return Decimal(value.numerator)
    return Decimal(value.numerator) / Decimal(value.denominator)

def calculate_critical_path(tasks: Sequence[Task]) -> CriticalPathAnalysis:
    if not tasks:
        return CriticalPathAnalysis(project_duration=ZERO)

    predecessors = _predecessor_map(tasks)
    successors = _successor_map(predecessors)
    order = _topological_order(predecessors, successors)
    durations = {task.id: task.weighted_average_time_in_minutes for task in tasks}
    duration = {task_id: Fraction(minutes) for task_id, minutes in durations.items()}

    # ── Forward pass ────────────────────────────────────────────
    es: Dict[str, Fraction] = {}
    ef: Dict[str, Fraction] = {}
    for task_id in order:
        start = Fraction(0)
        for predecessor_id in predecessors[task_id]:
            start = max(start, ef[predecessor_id])
        es[task_id] = start
        ef[task_id] = start + duration[task_id]

    project_duration = max(ef.values())

    # ── Backward pass ───────────────────────────────────────────
    ls: Dict[str, Fraction] = {}
    lf: Dict[str, Fraction] = {}
    for task_id in reversed(order):
        finish = project_duration
        for successor_id in successors[task_id]:
            finish = min(finish, ls[successor_id])
        lf[task_id] = finish
        ls[task_id] = finish - duration[task_id]

    schedules: List[TaskSchedule] = []
    for task in tasks:
        slack = ls[task.id] - es[task.id]
        schedules.append(TaskSchedule(
            task_id=task.id,
            duration=durations[task.id],
            earliest_start=_to_decimal(es[task.id]),
            earliest_finish=_to_decimal(ef[task.id]),
            latest_start=_to_decimal(ls[task.id]),
            latest_finish=_to_decimal(lf[task.id]),
            slack=_to_decimal(slack),
            on_critical_path=(slack == 0),
        ))

    return CriticalPathAnalysis(
        project_duration=_to_decimal(project_duration),
        tasks=schedules,
        critical_path_task_ids=[item.task_id for item in schedules if item.on_critical_path],
    )

def analyze_schedule(tasks: Sequence[Task]) -> ScheduleReport:
    """Cycle check first. Only an acyclic task graph gets a CPM analysis."""
    cycle = find_dependency_cycle(tasks)
    if cycle is not None:
        logger.warning(f"Cyclic dependencies between tasks: {' -> '.join(cycle)}")
        return ScheduleReport(is_valid=False, cycle=cycle)
    return ScheduleReport(is_valid=True, analysis=calculate_critical_path(tasks))

if __name__ == "__main__":
    from codecraft.estimate.time_units import TimeUnit
    logging.basicConfig(level=logging.DEBUG)

    def make_task(task_id: str, minutes: int, predecessors: List[str]) -> Task:
        return Task(id=task_id, description=task_id, optimistic_time=minutes, most_likely_time=minutes, pessimistic_time=minutes, time_unit=TimeUnit.minutes, predecessor_task_ids=predecessors)

    tasks = [
        make_task("A", 60, []),
        make_task("B", 90, ["A"]),
        make_task("C", 30, ["B"]),
        make_task("D", 20, []),
    ]
    report = analyze_schedule(tasks)
    print(report.analysis.to_csv())
    print(analyze_schedule([make_task("X", 10, ["Y"]), make_task("Y", 10, ["X"])]))
