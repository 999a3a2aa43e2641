"""
Breakdowns of a project's estimated time, for charts and reports.

- Scenario totals: the whole project under optimistic, realistic and pessimistic assumptions.
- Module durations: the same three figures per module.
- Category distribution: where the realistic time goes, per task category.

Risks are counted in the realistic and pessimistic scenarios only, since the optimistic
scenario assumes none of them materialize.

PROMPT> python -m codecraft.estimate.analytics
"""
from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Iterable, List
from codecraft.estimate.aggregation import module_total_time, risks_total_time
from codecraft.estimate.decimal_util import ZERO, non_negative_or_zero
from codecraft.estimate.pert import optimistic_minutes, pessimistic_minutes
from codecraft.model.project_model import Module, Risk, Project

UNCATEGORIZED = "Uncategorized"

@dataclass(frozen=True)
class ScenarioTotals:
    optimistic: Decimal
    realistic: Decimal
    pessimistic: Decimal

    def to_dict(self) -> dict[str, str]:
        return {
            "optimistic": str(self.optimistic),
            "realistic": str(self.realistic),
            "pessimistic": str(self.pessimistic),
        }

@dataclass(frozen=True)
class ModuleDuration:
    module_id: str
    name: str
    optimistic: Decimal
    realistic: Decimal
    pessimistic: Decimal

    def to_dict(self) -> dict:
        return {
            "moduleId": self.module_id,
            "name": self.name,
            "optimistic": str(self.optimistic),
            "realistic": str(self.realistic),
            "pessimistic": str(self.pessimistic),
        }

@dataclass(frozen=True)
class CategoryShare:
    category: str
    minutes: Decimal
    percentage: Decimal

    def to_dict(self) -> dict:
        return {
            "category": self.category,
            "minutes": str(self.minutes),
            "percentage": str(self.percentage),
        }

def module_duration(module: Module) -> ModuleDuration:
    optimistic = ZERO
    pessimistic = ZERO
    for task in module.tasks:
        optimistic += optimistic_minutes(task.optimistic_time, task.time_unit)
        pessimistic += pessimistic_minutes(task.pessimistic_time, task.time_unit)
    return ModuleDuration(
        module_id=module.id,
        name=module.name,
        optimistic=optimistic,
        realistic=module_total_time(module),
        pessimistic=pessimistic,
    )

def module_durations(modules: Iterable[Module]) -> List[ModuleDuration]:
    return [module_duration(module) for module in modules]

def scenario_totals(modules: Iterable[Module], risks: Iterable[Risk], effort_multiplier: Any) -> ScenarioTotals:
    multiplier = non_negative_or_zero(effort_multiplier)
    optimistic = ZERO
    realistic = ZERO
    pessimistic = ZERO
    for item in module_durations(modules):
        optimistic += item.optimistic
        realistic += item.realistic
        pessimistic += item.pessimistic
    risk_time = risks_total_time(risks)
    return ScenarioTotals(
        optimistic=optimistic * multiplier,
        realistic=(realistic + risk_time) * multiplier,
        pessimistic=(pessimistic + risk_time) * multiplier,
    )

def category_distribution(modules: Iterable[Module]) -> List[CategoryShare]:
    """
    Realistic minutes per task category, largest first.

    Tasks without a category are counted as "Uncategorized". Categories with no
    time are left out. Percentages have one decimal and are relative to the
    sum of the listed categories.
    """
    minutes_by_category: dict[str, Decimal] = {}
    for module in modules:
        for task in module.tasks:
            name = task.category.value if task.category is not None else UNCATEGORIZED
            minutes_by_category[name] = minutes_by_category.get(name, ZERO) + task.weighted_average_time_in_minutes

    items = [(name, minutes) for name, minutes in minutes_by_category.items() if minutes > ZERO]
    items.sort(key=lambda item: item[1], reverse=True)
    total = sum((minutes for _, minutes in items), ZERO)

    result: List[CategoryShare] = []
    for name, minutes in items:
        percentage = (minutes * 100 / total).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP)
        result.append(CategoryShare(category=name, minutes=minutes, percentage=percentage))
    return result

@dataclass(frozen=True)
class ProjectAnalytics:
    scenarios: ScenarioTotals
    modules: List[ModuleDuration]
    categories: List[CategoryShare]

    def to_dict(self) -> dict:
        return {
            "scenarios": self.scenarios.to_dict(),
            "modules": [item.to_dict() for item in self.modules],
            "categories": [item.to_dict() for item in self.categories],
        }

def analyze_project(project: Project) -> ProjectAnalytics:
    return ProjectAnalytics(
        scenarios=scenario_totals(project.modules, project.risks, project.effort_multiplier),
        modules=module_durations(project.modules),
        categories=category_distribution(project.modules),
    )

if __name__ == "__main__":
    from codecraft.model.project_model import Task, TaskCategory
    module = Module(name="Frontend", tasks=[
        Task(description="Login page", optimistic_time=2, most_likely_time=4, pessimistic_time=6, category=TaskCategory.development_frontend),
        Task(description="Write tests", optimistic_time=1, most_likely_time=2, pessimistic_time=3, category=TaskCategory.testing_qa),
        Task(description="Misc", optimistic_time=1, most_likely_time=1, pessimistic_time=1),
    ])
    project = Project(modules=[module], risks=[Risk(description="Browser quirks", time_estimate=2)])
    print(analyze_project(project).to_dict())
