import unittest
from decimal import Decimal as D
from codecraft.estimate.aggregation import (
    adjusted_time, compute_project_totals, compute_totals_for_project, module_total_time, total_cost
)
from codecraft.estimate.time_units import TimeUnit
from codecraft.model.project_model import Module, Project, Risk, Task

def make_module() -> Module:
    return Module(name="Backend", tasks=[
        Task(description="API", optimistic_time=4, most_likely_time=6, pessimistic_time=10),
        Task(description="Database", optimistic_time=1, most_likely_time=2, pessimistic_time=3),
    ])

class TestAggregation(unittest.TestCase):
    def test_module_total(self):
        self.assertEqual(module_total_time(make_module()), D("500"))

    def test_project_totals(self):
        # Arrange
        modules = [make_module()]
        risks = [Risk(description="Scope creep", time_estimate=3)]

        # Act
        totals = compute_project_totals(modules, risks, D("1.2"), 50, 100)

        # Assert
        self.assertEqual(totals.total_tasks_time, D("500"))
        self.assertEqual(totals.total_risk_time, D("180"))
        self.assertEqual(totals.total_base_time, D("680"))
        self.assertEqual(totals.total_adjusted_time, D("816"))
        self.assertEqual(totals.total_cost, D("780"))

    def test_additivity_over_many_fractional_tasks(self):
        # Arrange
        modules = []
        for module_index in range(10):
            tasks = [
                Task(description=f"Task {i}", optimistic_time=D("0.25"), most_likely_time=D("0.25"), pessimistic_time=D("0.25"), time_unit=TimeUnit.minutes)
                for i in range(1000)
            ]
            modules.append(Module(name=f"Module {module_index}", tasks=tasks))

        # Act
        totals = compute_project_totals(modules, [], 1, 0)
        module_totals = [module_total_time(module) for module in modules]

        # Assert
        self.assertEqual(totals.total_tasks_time, D("2500"))
        self.assertEqual(sum(module_totals, D(0)), totals.total_tasks_time)
        for module_total in module_totals:
            self.assertEqual(module_total, D("250"))

    def test_repeated_computation_is_identical(self):
        modules = [make_module()]
        risks = [Risk(description="Vendor delay", time_estimate=D("0.3333"), time_unit=TimeUnit.days)]
        first = compute_project_totals(modules, risks, D("1.37"), D("47.5"), D("12.34"))
        second = compute_project_totals(modules, risks, D("1.37"), D("47.5"), D("12.34"))
        self.assertEqual(first, second)

    def test_rate_of_zero_leaves_only_fixed_costs(self):
        self.assertEqual(total_cost(D("600"), 0, D("250")), D("250"))

    def test_negative_rate_is_ignored(self):
        self.assertEqual(total_cost(D("600"), -5, 0), D("0"))

    def test_degenerate_multiplier_is_zero(self):
        self.assertEqual(adjusted_time(D("100"), float("nan")), D("0"))
        self.assertEqual(adjusted_time(D("100"), -1), D("0"))

    def test_empty_project(self):
        totals = compute_totals_for_project(Project())
        self.assertEqual(totals.total_base_time, D("0"))
        self.assertEqual(totals.total_cost, D("0"))

    def test_totals_for_project(self):
        # Arrange
        project = Project(modules=[make_module()], effort_multiplier=D("1.5"), hourly_rate=60, fixed_costs=0)

        # Act
        totals = compute_totals_for_project(project)

        # Assert
        self.assertEqual(totals.total_adjusted_time, D("750"))
        self.assertEqual(totals.total_cost, D("750"))
        self.assertEqual(totals.to_dict()["totalAdjustedTimeInMinutes"], "750.0")
