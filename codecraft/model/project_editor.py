"""
Edit operations on a project.

Every function takes a project and returns an edited copy. The input is never modified,
so a caller can keep the previous version around, e.g. for undo.

Task estimates are validated here, where user input enters the system. The estimation
engine itself accepts any numbers.

PROMPT> python -m codecraft.model.project_editor
"""
import logging
from decimal import Decimal
from typing import Any, Iterable, Optional, Sequence, Union
from codecraft.estimate.aggregation import compute_totals_for_project
from codecraft.estimate.pert import Rejected, estimate_task_time, require_task_time
from codecraft.estimate.progress import next_status
from codecraft.estimate.time_units import TimeUnit
from codecraft.model.project_model import (
    DependencySuggestion, Module, Project, Risk, RiskLevel, Task, TaskCategory, TaskStatus
)

logger = logging.getLogger(__name__)

class ProjectEditError(ValueError):
    """The edit refers to something that doesn't exist in the project."""
    pass

class DependencyError(ProjectEditError):
    """The dependency can't be added, e.g. a task depending on itself."""
    pass

TASK_EDITABLE_FIELDS = {
    "description", "optimistic_time", "most_likely_time", "pessimistic_time",
    "time_unit", "category", "status",
}

def _copy(project: Project) -> Project:
    return project.model_copy(deep=True)

def _find_module(project: Project, module_id: str) -> Module:
    for module in project.modules:
        if module.id == module_id:
            return module
    raise ProjectEditError(f"Module not found: {module_id!r}")

def _find_task(project: Project, task_id: str) -> Task:
    for task in project.all_tasks():
        if task.id == task_id:
            return task
    raise ProjectEditError(f"Task not found: {task_id!r}")

def _remove_predecessor_references(project: Project, removed_task_ids: set[str]) -> None:
    for task in project.all_tasks():
        task.predecessor_task_ids = [
            predecessor_id for predecessor_id in task.predecessor_task_ids
            if predecessor_id not in removed_task_ids
        ]

# ────────────────────────────────────────────────────────────────────────────────
#  Modules
# ----------------------------------------------------------------------------
def add_module(project: Project, name: str) -> Project:
    if not name.strip():
        raise ValueError("Module name must not be empty.")
    result = _copy(project)
    result.modules.append(Module(name=name.strip()))
    return result

def rename_module(project: Project, module_id: str, name: str) -> Project:
    if not name.strip():
        raise ValueError("Module name must not be empty.")
    result = _copy(project)
    _find_module(result, module_id).name = name.strip()
    return result

def delete_module(project: Project, module_id: str) -> Project:
    """Remove the module with its tasks. Other tasks stop depending on the removed tasks."""
    result = _copy(project)
    module = _find_module(result, module_id)
    removed_task_ids = {task.id for task in module.tasks}
    result.modules = [item for item in result.modules if item.id != module_id]
    _remove_predecessor_references(result, removed_task_ids)
    return result

# ────────────────────────────────────────────────────────────────────────────────
#  Tasks
# ----------------------------------------------------------------------------
def add_task(
    project: Project,
    module_id: str,
    description: str,
    optimistic_time: Any,
    most_likely_time: Any,
    pessimistic_time: Any,
    time_unit: Union[TimeUnit, str] = TimeUnit.hours,
    category: Optional[TaskCategory] = None,
) -> Project:
    """
    Append a task to a module.

    Raises TaskValidationError when the estimate is incomplete or out of order.
    """
    if not description.strip():
        raise ValueError("Task description must not be empty.")
    require_task_time(optimistic_time, most_likely_time, pessimistic_time, time_unit)
    task = Task(
        description=description.strip(),
        optimistic_time=optimistic_time,
        most_likely_time=most_likely_time,
        pessimistic_time=pessimistic_time,
        time_unit=time_unit,
        category=category,
    )
    result = _copy(project)
    _find_module(result, module_id).tasks.append(task)
    return result

def update_task(project: Project, task_id: str, **changes: Any) -> Project:
    unknown = set(changes) - TASK_EDITABLE_FIELDS
    if unknown:
        raise ValueError(f"Can't update task fields: {', '.join(sorted(unknown))}")

    result = _copy(project)
    task = _find_task(result, task_id)
    merged = task.model_dump()
    merged.pop("weighted_average_time_in_minutes", None)
    merged.update(changes)
    require_task_time(merged["optimistic_time"], merged["most_likely_time"], merged["pessimistic_time"], merged["time_unit"])
    updated = Task.model_validate(merged)

    for module in result.modules:
        module.tasks = [updated if item.id == task_id else item for item in module.tasks]
    return result

def delete_task(project: Project, task_id: str) -> Project:
    """Remove the task, and remove its id from every predecessor list."""
    result = _copy(project)
    _find_task(result, task_id)
    for module in result.modules:
        module.tasks = [item for item in module.tasks if item.id != task_id]
    _remove_predecessor_references(result, {task_id})
    return result

def set_task_status(project: Project, task_id: str, status: TaskStatus) -> Project:
    result = _copy(project)
    _find_task(result, task_id).status = TaskStatus(status)
    return result

def cycle_task_status(project: Project, task_id: str) -> Project:
    task = _find_task(project, task_id)
    return set_task_status(project, task_id, next_status(task.status))

# ────────────────────────────────────────────────────────────────────────────────
#  Dependencies
# ----------------------------------------------------------------------------
def add_dependency(project: Project, task_id: str, predecessor_task_id: str) -> Project:
    if task_id == predecessor_task_id:
        raise DependencyError(f"Task {task_id!r} can't depend on itself.")
    result = _copy(project)
    try:
        task = _find_task(result, task_id)
        _find_task(result, predecessor_task_id)
    except ProjectEditError as e:
        raise DependencyError(str(e)) from e
    if predecessor_task_id not in task.predecessor_task_ids:
        task.predecessor_task_ids.append(predecessor_task_id)
    return result

def remove_dependency(project: Project, task_id: str, predecessor_task_id: str) -> Project:
    result = _copy(project)
    task = _find_task(result, task_id)
    task.predecessor_task_ids = [item for item in task.predecessor_task_ids if item != predecessor_task_id]
    return result

def apply_dependency_suggestions(project: Project, suggestions: Iterable[DependencySuggestion]) -> Project:
    """
    Merge suggested predecessors into the existing ones.

    Existing predecessors are kept, duplicates are dropped. Suggestions that mention
    unknown task ids, or a task depending on itself, are skipped.
    """
    result = _copy(project)
    tasks_by_id = {task.id: task for task in result.all_tasks()}
    for suggestion in suggestions:
        task = tasks_by_id.get(suggestion.task_id)
        if task is None:
            logger.warning(f"Skipping dependency suggestion for unknown task {suggestion.task_id!r}.")
            continue
        for predecessor_id in suggestion.predecessor_task_ids:
            if predecessor_id == task.id:
                logger.warning(f"Skipping suggestion that task {task.id!r} depends on itself.")
                continue
            if predecessor_id not in tasks_by_id:
                logger.warning(f"Skipping unknown predecessor {predecessor_id!r} suggested for task {task.id!r}.")
                continue
            if predecessor_id not in task.predecessor_task_ids:
                task.predecessor_task_ids.append(predecessor_id)
    return result

# ────────────────────────────────────────────────────────────────────────────────
#  Risks
# ----------------------------------------------------------------------------
def add_risk(
    project: Project,
    description: str,
    time_estimate: Any,
    time_unit: Union[TimeUnit, str] = TimeUnit.hours,
    probability: RiskLevel = RiskLevel.medium,
    impact_severity: RiskLevel = RiskLevel.medium,
) -> Project:
    if not description.strip():
        raise ValueError("Risk description must not be empty.")
    risk = Risk(
        description=description.strip(),
        time_estimate=time_estimate,
        time_unit=time_unit,
        probability=probability,
        impact_severity=impact_severity,
    )
    result = _copy(project)
    result.risks.append(risk)
    return result

def delete_risk(project: Project, risk_id: str) -> Project:
    if not any(risk.id == risk_id for risk in project.risks):
        raise ProjectEditError(f"Risk not found: {risk_id!r}")
    result = _copy(project)
    result.risks = [risk for risk in result.risks if risk.id != risk_id]
    return result

# ────────────────────────────────────────────────────────────────────────────────
#  Generated plans and summary totals
# ----------------------------------------------------------------------------
def modules_from_generated_plan(plan_modules: Sequence[dict]) -> list[Module]:
    """
    Turn a generated plan into modules.

    Input shape: [{"name": ..., "tasks": [{"description", "optimisticTime",
    "mostLikelyTime", "pessimisticTime", "category"?}]}], times in hours.
    Every module and task gets a fresh id and tasks start out pending.
    Estimates that are out of order are kept as they are.
    """
    modules: list[Module] = []
    for plan_module in plan_modules:
        tasks: list[Task] = []
        for plan_task in plan_module.get("tasks") or []:
            optimistic = plan_task.get("optimisticTime")
            most_likely = plan_task.get("mostLikelyTime")
            pessimistic = plan_task.get("pessimisticTime")
            outcome = estimate_task_time(optimistic, most_likely, pessimistic, TimeUnit.hours)
            if isinstance(outcome, Rejected):
                logger.warning(f"Generated task {plan_task.get('description')!r}: {outcome.reason} Keeping it.")
            tasks.append(Task(
                description=plan_task.get("description") or "",
                optimistic_time=optimistic,
                most_likely_time=most_likely,
                pessimistic_time=pessimistic,
                time_unit=TimeUnit.hours,
                category=plan_task.get("category"),
                status=TaskStatus.pending,
            ))
        modules.append(Module(name=plan_module.get("name") or "Unnamed module", tasks=tasks))
    return modules

def recalculate_project(project: Project) -> Project:
    """Copy of the project with the stored summary totals refreshed from the live data."""
    totals = compute_totals_for_project(project)
    return project.model_copy(update={
        "total_base_time_in_minutes": totals.total_base_time,
        "total_adjusted_time_in_minutes": totals.total_adjusted_time,
        "total_project_cost": totals.total_cost,
    }, deep=True)

if __name__ == "__main__":
    logging.basicConfig(level=logging.DEBUG)
    project = add_module(Project(name="Demo"), "Backend")
    module_id = project.modules[0].id
    project = add_task(project, module_id, "Design schema", 2, 4, 8)
    project = add_task(project, module_id, "Implement API", Decimal("4"), Decimal("8"), Decimal("16"))
    first, second = project.modules[0].tasks
    project = add_dependency(project, second.id, first.id)
    project = recalculate_project(project)
    print(project.to_json_dict())
