"""
Task progress tracking.

A task's status cycles pending -> in-progress -> completed -> pending.
Status is bookkeeping only, it never changes the estimates or the schedule.

PROMPT> python -m codecraft.estimate.progress
"""
from dataclasses import dataclass, field
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, List
from codecraft.estimate.decimal_util import ZERO
from codecraft.model.project_model import Module, Task, TaskStatus

_NEXT_STATUS: dict[TaskStatus, TaskStatus] = {
    TaskStatus.pending: TaskStatus.in_progress,
    TaskStatus.in_progress: TaskStatus.completed,
    TaskStatus.completed: TaskStatus.pending,
}

def next_status(status: TaskStatus) -> TaskStatus:
    return _NEXT_STATUS[TaskStatus(status)]

def completion_percentage(completed: int, total: int) -> int:
    """Share of completed tasks, rounded half up to a whole percent. Zero tasks is 0%."""
    if total <= 0:
        return 0
    ratio = Decimal(completed) * 100 / Decimal(total)
    return int(ratio.quantize(Decimal("1"), rounding=ROUND_HALF_UP))

@dataclass
class StatusBreakdown:
    task_count: dict[TaskStatus, int] = field(default_factory=lambda: {status: 0 for status in TaskStatus})
    minutes: dict[TaskStatus, Decimal] = field(default_factory=lambda: {status: ZERO for status in TaskStatus})

    def add(self, task: Task) -> None:
        self.task_count[task.status] += 1
        self.minutes[task.status] += task.weighted_average_time_in_minutes

    @property
    def total_tasks(self) -> int:
        return sum(self.task_count.values())

    @property
    def completed_tasks(self) -> int:
        return self.task_count[TaskStatus.completed]

    @property
    def completion_percentage(self) -> int:
        return completion_percentage(self.completed_tasks, self.total_tasks)

    def to_dict(self) -> dict:
        return {
            "totalTasks": self.total_tasks,
            "taskCount": {status.value: count for status, count in self.task_count.items()},
            "minutes": {status.value: str(minutes) for status, minutes in self.minutes.items()},
            "completionPercentage": self.completion_percentage,
        }

@dataclass
class ModuleProgress:
    module_id: str
    name: str
    breakdown: StatusBreakdown

    def to_dict(self) -> dict:
        return {"moduleId": self.module_id, "name": self.name, **self.breakdown.to_dict()}

@dataclass
class ProgressStats:
    overall: StatusBreakdown
    modules: List[ModuleProgress]

    @property
    def completion_percentage(self) -> int:
        return self.overall.completion_percentage

    def to_dict(self) -> dict:
        return {
            **self.overall.to_dict(),
            "modules": [item.to_dict() for item in self.modules],
        }

def compute_progress(modules: Iterable[Module]) -> ProgressStats:
    overall = StatusBreakdown()
    module_stats: List[ModuleProgress] = []
    for module in modules:
        breakdown = StatusBreakdown()
        for task in module.tasks:
            breakdown.add(task)
            overall.add(task)
        module_stats.append(ModuleProgress(module_id=module.id, name=module.name, breakdown=breakdown))
    return ProgressStats(overall=overall, modules=module_stats)

if __name__ == "__main__":
    tasks = [
        Task(description="Setup repo", optimistic_time=1, most_likely_time=1, pessimistic_time=2, status=TaskStatus.completed),
        Task(description="Build API", optimistic_time=4, most_likely_time=8, pessimistic_time=16, status=TaskStatus.in_progress),
        Task(description="Deploy", optimistic_time=1, most_likely_time=2, pessimistic_time=4),
    ]
    stats = compute_progress([Module(name="Backend", tasks=tasks)])
    print(stats.to_dict())
    print(next_status(TaskStatus.completed))
