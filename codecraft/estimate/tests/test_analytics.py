import unittest
from decimal import Decimal as D
from codecraft.estimate.analytics import UNCATEGORIZED, analyze_project, category_distribution, module_duration, scenario_totals
from codecraft.model.project_model import Module, Project, Risk, Task, TaskCategory

def make_module() -> Module:
    return Module(name="Frontend", tasks=[
        Task(description="Login page", optimistic_time=2, most_likely_time=4, pessimistic_time=6, category=TaskCategory.development_frontend),
        Task(description="Write tests", optimistic_time=1, most_likely_time=2, pessimistic_time=3, category=TaskCategory.testing_qa),
        Task(description="Misc", optimistic_time=1, most_likely_time=1, pessimistic_time=1),
    ])

class TestModuleDuration(unittest.TestCase):
    def test_three_scenarios(self):
        item = module_duration(make_module())
        self.assertEqual(item.name, "Frontend")
        self.assertEqual(item.optimistic, D("240"))
        self.assertEqual(item.realistic, D("420"))
        self.assertEqual(item.pessimistic, D("600"))

    def test_empty_module(self):
        item = module_duration(Module(name="Empty"))
        self.assertEqual(item.optimistic, D("0"))
        self.assertEqual(item.realistic, D("0"))
        self.assertEqual(item.pessimistic, D("0"))

class TestScenarioTotals(unittest.TestCase):
    def test_risks_are_excluded_from_optimistic(self):
        # Arrange
        modules = [make_module()]
        risks = [Risk(description="Browser quirks", time_estimate=2)]

        # Act
        scenarios = scenario_totals(modules, risks, D("1.5"))

        # Assert
        self.assertEqual(scenarios.optimistic, D("360"))
        self.assertEqual(scenarios.realistic, D("810"))
        self.assertEqual(scenarios.pessimistic, D("1080"))

    def test_ordering_holds_for_valid_tasks(self):
        scenarios = scenario_totals([make_module()], [], 1)
        self.assertLessEqual(scenarios.optimistic, scenarios.realistic)
        self.assertLessEqual(scenarios.realistic, scenarios.pessimistic)

class TestCategoryDistribution(unittest.TestCase):
    def test_largest_first_with_percentages(self):
        # Act
        shares = category_distribution([make_module()])

        # Assert
        self.assertEqual([item.category for item in shares], ["Development (Frontend)", "Testing/QA", UNCATEGORIZED])
        self.assertEqual([item.minutes for item in shares], [D("240"), D("120"), D("60")])
        self.assertEqual([item.percentage for item in shares], [D("57.1"), D("28.6"), D("14.3")])

    def test_zero_time_categories_are_left_out(self):
        module = Module(name="M", tasks=[
            Task(description="Nothing", optimistic_time=0, most_likely_time=0, pessimistic_time=0, category=TaskCategory.research),
            Task(description="Docs", optimistic_time=1, most_likely_time=1, pessimistic_time=1, category=TaskCategory.documentation),
        ])
        shares = category_distribution([module])
        self.assertEqual(len(shares), 1)
        self.assertEqual(shares[0].category, "Documentation")
        self.assertEqual(shares[0].percentage, D("100.0"))

    def test_no_tasks(self):
        self.assertEqual(category_distribution([]), [])

class TestAnalyzeProject(unittest.TestCase):
    def test_to_dict(self):
        project = Project(modules=[make_module()], risks=[Risk(description="Browser quirks", time_estimate=2)], effort_multiplier=D("1.5"))
        result = analyze_project(project).to_dict()
        self.assertEqual(D(result["scenarios"]["realistic"]), D("810"))
        self.assertEqual(result["modules"][0]["name"], "Frontend")
        self.assertEqual(result["categories"][0]["percentage"], "57.1")
