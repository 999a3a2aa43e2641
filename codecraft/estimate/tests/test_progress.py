import unittest
from decimal import Decimal as D
from codecraft.estimate.progress import compute_progress, completion_percentage, next_status
from codecraft.model.project_model import Module, Task, TaskStatus

def make_tasks() -> list[Task]:
    return [
        Task(description="Setup repo", optimistic_time=1, most_likely_time=1, pessimistic_time=2, status=TaskStatus.completed),
        Task(description="Build API", optimistic_time=4, most_likely_time=8, pessimistic_time=16, status=TaskStatus.in_progress),
        Task(description="Deploy", optimistic_time=1, most_likely_time=2, pessimistic_time=4),
    ]

class TestNextStatus(unittest.TestCase):
    def test_cycle(self):
        self.assertEqual(next_status(TaskStatus.pending), TaskStatus.in_progress)
        self.assertEqual(next_status(TaskStatus.in_progress), TaskStatus.completed)
        self.assertEqual(next_status(TaskStatus.completed), TaskStatus.pending)

    def test_accepts_string_value(self):
        self.assertEqual(next_status("in-progress"), TaskStatus.completed)

class TestCompletionPercentage(unittest.TestCase):
    def test_rounding(self):
        self.assertEqual(completion_percentage(1, 3), 33)
        self.assertEqual(completion_percentage(2, 3), 67)
        self.assertEqual(completion_percentage(1, 8), 13)
        self.assertEqual(completion_percentage(3, 3), 100)

    def test_no_tasks(self):
        self.assertEqual(completion_percentage(0, 0), 0)

class TestComputeProgress(unittest.TestCase):
    def test_breakdown(self):
        # Arrange
        module = Module(name="Backend", tasks=make_tasks())

        # Act
        stats = compute_progress([module])

        # Assert
        overall = stats.overall
        self.assertEqual(overall.total_tasks, 3)
        self.assertEqual(overall.completed_tasks, 1)
        self.assertEqual(stats.completion_percentage, 33)
        self.assertEqual(overall.minutes[TaskStatus.completed], D("70"))
        self.assertEqual(overall.minutes[TaskStatus.in_progress], D("520"))
        self.assertEqual(overall.minutes[TaskStatus.pending], D("130"))

    def test_per_module(self):
        done = Task(description="Done", optimistic_time=1, most_likely_time=1, pessimistic_time=1, status=TaskStatus.completed)
        stats = compute_progress([Module(name="A", tasks=[done]), Module(name="B", tasks=make_tasks())])
        self.assertEqual([item.breakdown.completion_percentage for item in stats.modules], [100, 33])
        self.assertEqual(stats.completion_percentage, 50)

    def test_empty_project(self):
        stats = compute_progress([])
        self.assertEqual(stats.completion_percentage, 0)
        self.assertEqual(stats.to_dict()["totalTasks"], 0)
        self.assertEqual(stats.to_dict()["modules"], [])

    def test_to_dict_uses_status_values(self):
        data = compute_progress([Module(name="Backend", tasks=make_tasks())]).to_dict()
        self.assertEqual(data["taskCount"], {"pending": 1, "in-progress": 1, "completed": 1})
        self.assertEqual(data["modules"][0]["name"], "Backend")
