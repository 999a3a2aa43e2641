"""
Sum up task and risk times, and derive the total duration and cost of a project.

    total_tasks_time    = sum of the weighted averages of all tasks in all modules
    total_risk_time     = sum of the risk times
    total_base_time     = total_tasks_time + total_risk_time
    total_adjusted_time = total_base_time * effort_multiplier
    total_cost          = total_adjusted_time / 60 * hourly_rate + fixed_costs

The hourly rate term is left out when the rate is zero or negative.

Every sum starts from Decimal zero and never passes through float.

PROMPT> python -m codecraft.estimate.aggregation
"""
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Iterable
from codecraft.estimate.decimal_util import ZERO, non_negative_or_zero
from codecraft.estimate.time_units import MINUTES_PER_HOUR
from codecraft.model.project_model import Module, Risk, Project

@dataclass(frozen=True)
class ProjectTotals:
    total_tasks_time: Decimal
    total_risk_time: Decimal
    total_base_time: Decimal
    total_adjusted_time: Decimal
    total_cost: Decimal

    def to_dict(self) -> dict[str, str]:
        return {
            "totalTasksTimeInMinutes": str(self.total_tasks_time),
            "totalRiskTimeInMinutes": str(self.total_risk_time),
            "totalBaseTimeInMinutes": str(self.total_base_time),
            "totalAdjustedTimeInMinutes": str(self.total_adjusted_time),
            "totalProjectCost": str(self.total_cost),
        }

def module_total_time(module: Module) -> Decimal:
    total = ZERO
    for task in module.tasks:
        total += task.weighted_average_time_in_minutes
    return total

def tasks_total_time(modules: Iterable[Module]) -> Decimal:
    total = ZERO
    for module in modules:
        total += module_total_time(module)
    return total

def risks_total_time(risks: Iterable[Risk]) -> Decimal:
    total = ZERO
    for risk in risks:
        total += risk.risk_time_in_minutes
    return total

def adjusted_time(base_time: Decimal, effort_multiplier: Any) -> Decimal:
    return base_time * non_negative_or_zero(effort_multiplier)

def total_cost(adjusted_time_in_minutes: Decimal, hourly_rate: Any, fixed_costs: Any) -> Decimal:
    rate = non_negative_or_zero(hourly_rate)
    labor_cost = ZERO
    if rate > ZERO:
        labor_cost = adjusted_time_in_minutes / MINUTES_PER_HOUR * rate
    return labor_cost + non_negative_or_zero(fixed_costs)

def compute_project_totals(
    modules: Iterable[Module],
    risks: Iterable[Risk],
    effort_multiplier: Any,
    hourly_rate: Any,
    fixed_costs: Any = ZERO,
) -> ProjectTotals:
    total_tasks_time = tasks_total_time(modules)
    total_risk_time = risks_total_time(risks)
    total_base_time = total_tasks_time + total_risk_time
    total_adjusted_time = adjusted_time(total_base_time, effort_multiplier)
    return ProjectTotals(
        total_tasks_time=total_tasks_time,
        total_risk_time=total_risk_time,
        total_base_time=total_base_time,
        total_adjusted_time=total_adjusted_time,
        total_cost=total_cost(total_adjusted_time, hourly_rate, fixed_costs),
    )

def compute_totals_for_project(project: Project) -> ProjectTotals:
    return compute_project_totals(
        modules=project.modules,
        risks=project.risks,
        effort_multiplier=project.effort_multiplier,
        hourly_rate=project.hourly_rate,
        fixed_costs=project.fixed_costs,
    )

if __name__ == "__main__":
    from codecraft.model.project_model import Task
    module = Module(name="Backend", tasks=[
        Task(description="API", optimistic_time=4, most_likely_time=6, pessimistic_time=10),
        Task(description="Database", optimistic_time=1, most_likely_time=2, pessimistic_time=3),
    ])
    risk = Risk(description="Scope creep", time_estimate=3)
    totals = compute_project_totals([module], [risk], Decimal("1.2"), 50, 100)
    print(totals)
