import unittest
from decimal import Decimal as D
from codecraft.estimate.pert import TaskValidationError
from codecraft.estimate.time_units import TimeUnit
from codecraft.model.project_editor import (
    DependencyError, ProjectEditError, add_dependency, add_module, add_risk, add_task,
    apply_dependency_suggestions, cycle_task_status, delete_module, delete_risk, delete_task,
    modules_from_generated_plan, recalculate_project, remove_dependency, rename_module,
    set_task_status, update_task,
)
from codecraft.model.project_model import (
    DependencySuggestion, Module, Project, RiskLevel, Task, TaskCategory, TaskStatus
)

def make_task(task_id: str, predecessors: list[str] = None) -> Task:
    return Task(id=task_id, description=f"Task {task_id}", optimistic_time=1, most_likely_time=2, pessimistic_time=3, predecessor_task_ids=predecessors or [])

def make_project() -> Project:
    return Project(name="Demo", modules=[
        Module(id="m1", name="Backend", tasks=[make_task("a"), make_task("b", ["a"])]),
        Module(id="m2", name="Frontend", tasks=[make_task("c", ["a", "b"])]),
    ])

class TestModules(unittest.TestCase):
    def test_add_module_returns_copy(self):
        # Arrange
        project = Project(name="Demo")

        # Act
        result = add_module(project, "  Reporting ")

        # Assert
        self.assertEqual(project.modules, [])
        self.assertEqual([module.name for module in result.modules], ["Reporting"])

    def test_empty_name_is_rejected(self):
        with self.assertRaises(ValueError):
            add_module(Project(), "   ")

    def test_rename(self):
        result = rename_module(make_project(), "m2", "Web client")
        self.assertEqual(result.modules[1].name, "Web client")

    def test_unknown_module(self):
        with self.assertRaises(ProjectEditError):
            rename_module(make_project(), "nope", "x")

    def test_delete_module_removes_references(self):
        # Act
        result = delete_module(make_project(), "m1")

        # Assert
        self.assertEqual([module.id for module in result.modules], ["m2"])
        self.assertEqual(result.modules[0].tasks[0].predecessor_task_ids, [])

class TestTasks(unittest.TestCase):
    def test_add_task(self):
        # Act
        result = add_task(make_project(), "m2", "Login page", 2, 4, 6, TimeUnit.hours, TaskCategory.development_frontend)

        # Assert
        task = result.modules[1].tasks[-1]
        self.assertEqual(task.description, "Login page")
        self.assertEqual(task.weighted_average_time_in_minutes, D("240"))
        self.assertEqual(task.category, TaskCategory.development_frontend)
        self.assertEqual(task.status, TaskStatus.pending)

    def test_add_task_rejects_out_of_order(self):
        project = make_project()
        with self.assertRaises(TaskValidationError):
            add_task(project, "m1", "Bad", 6, 4, 2)
        self.assertEqual(len(project.modules[0].tasks), 2)

    def test_add_task_rejects_missing_values(self):
        with self.assertRaises(TaskValidationError):
            add_task(make_project(), "m1", "Bad", None, 4, 6)

    def test_update_task(self):
        result = update_task(make_project(), "b", pessimistic_time=D("9"), description="Rewritten")
        task = result.modules[0].tasks[1]
        self.assertEqual(task.description, "Rewritten")
        self.assertEqual(task.pessimistic_time, D("9"))
        self.assertEqual(task.predecessor_task_ids, ["a"])
        self.assertEqual(task.weighted_average_time_in_minutes, D("180"))

    def test_update_task_validates_merged_estimate(self):
        with self.assertRaises(TaskValidationError):
            update_task(make_project(), "b", optimistic_time=10)

    def test_update_task_rejects_unknown_field(self):
        with self.assertRaises(ValueError):
            update_task(make_project(), "b", id="other")

    def test_delete_task_removes_references(self):
        # Act
        result = delete_task(make_project(), "a")

        # Assert
        self.assertEqual([task.id for task in result.all_tasks()], ["b", "c"])
        self.assertEqual(result.modules[0].tasks[0].predecessor_task_ids, [])
        self.assertEqual(result.modules[1].tasks[0].predecessor_task_ids, ["b"])

    def test_delete_unknown_task(self):
        with self.assertRaises(ProjectEditError):
            delete_task(make_project(), "zzz")

    def test_status(self):
        project = set_task_status(make_project(), "a", TaskStatus.completed)
        self.assertEqual(project.modules[0].tasks[0].status, TaskStatus.completed)
        project = cycle_task_status(project, "a")
        self.assertEqual(project.modules[0].tasks[0].status, TaskStatus.pending)
        project = cycle_task_status(project, "a")
        self.assertEqual(project.modules[0].tasks[0].status, TaskStatus.in_progress)

class TestDependencies(unittest.TestCase):
    def test_add_dependency(self):
        result = add_dependency(make_project(), "c", "a")
        self.assertEqual(result.modules[1].tasks[0].predecessor_task_ids, ["a", "b"])
        result = add_dependency(make_project(), "a", "c")
        self.assertEqual(result.modules[0].tasks[0].predecessor_task_ids, ["c"])

    def test_self_dependency_is_rejected(self):
        with self.assertRaises(DependencyError):
            add_dependency(make_project(), "a", "a")

    def test_unknown_task(self):
        with self.assertRaises(DependencyError):
            add_dependency(make_project(), "a", "ghost")

    def test_remove_dependency(self):
        result = remove_dependency(make_project(), "c", "a")
        self.assertEqual(result.modules[1].tasks[0].predecessor_task_ids, ["b"])

    def test_apply_suggestions_unions(self):
        # Arrange
        suggestions = [
            DependencySuggestion(task_id="c", predecessor_task_ids=["b", "a"]),
            DependencySuggestion(task_id="b", predecessor_task_ids=["b", "ghost", "c"]),
            DependencySuggestion(task_id="ghost", predecessor_task_ids=["a"]),
        ]

        # Act
        with self.assertLogs("codecraft.model.project_editor", level="WARNING") as logs:
            result = apply_dependency_suggestions(make_project(), suggestions)

        # Assert
        self.assertEqual(len(logs.output), 3)
        self.assertEqual(result.modules[1].tasks[0].predecessor_task_ids, ["a", "b"])
        self.assertEqual(result.modules[0].tasks[1].predecessor_task_ids, ["a", "c"])

    def test_apply_suggestions_twice_is_a_no_op(self):
        suggestions = [DependencySuggestion(task_id="a", predecessor_task_ids=["c"])]
        once = apply_dependency_suggestions(make_project(), suggestions)
        twice = apply_dependency_suggestions(once, suggestions)
        self.assertEqual(twice, once)
        self.assertEqual(twice.modules[0].tasks[0].predecessor_task_ids, ["c"])

class TestRisks(unittest.TestCase):
    def test_add_and_delete(self):
        project = add_risk(Project(), "Key developer leaves", 2, TimeUnit.days, RiskLevel.low, RiskLevel.high)
        risk = project.risks[0]
        self.assertEqual(risk.risk_time_in_minutes, D("960"))
        self.assertEqual(risk.impact_severity, RiskLevel.high)
        self.assertEqual(delete_risk(project, risk.id).risks, [])

    def test_delete_unknown_risk(self):
        with self.assertRaises(ProjectEditError):
            delete_risk(Project(), "nope")

class TestGeneratedPlan(unittest.TestCase):
    def test_modules_from_generated_plan(self):
        # Arrange
        plan = [
            {"name": "FR1: User Authentication", "tasks": [
                {"description": "Design login UI", "optimisticTime": 4, "mostLikelyTime": 6, "pessimisticTime": 10, "category": "Design"},
                {"description": "Odd estimate", "optimisticTime": 5, "mostLikelyTime": 2, "pessimisticTime": 1},
            ]},
            {"tasks": []},
        ]

        # Act
        with self.assertLogs("codecraft.model.project_editor", level="WARNING"):
            modules = modules_from_generated_plan(plan)

        # Assert
        self.assertEqual([module.name for module in modules], ["FR1: User Authentication", "Unnamed module"])
        first, second = modules[0].tasks
        self.assertEqual(first.time_unit, TimeUnit.hours)
        self.assertEqual(first.category, TaskCategory.design)
        self.assertEqual(first.weighted_average_time_in_minutes, D("380"))
        self.assertEqual(second.optimistic_time, D("5"))
        self.assertNotEqual(modules[0].id, modules[1].id)

class TestRecalculate(unittest.TestCase):
    def test_totals(self):
        project = Project(modules=[Module(name="M", tasks=[make_task("a")])], hourly_rate=60, fixed_costs=10)
        result = recalculate_project(project)
        self.assertEqual(result.total_base_time_in_minutes, D("120"))
        self.assertEqual(result.total_adjusted_time_in_minutes, D("120"))
        self.assertEqual(result.total_project_cost, D("130"))
        self.assertEqual(project.total_project_cost, D("0"))
