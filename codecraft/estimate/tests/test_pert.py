import unittest
from decimal import Decimal as D
from codecraft.estimate.pert import (
    Computed, Rejected, TaskValidationError, estimate_task_time, require_task_time, weighted_average
)
from codecraft.estimate.time_units import TimeUnit

ORDER_MESSAGE = "Pessimistic time must be >= Most Likely time, and Most Likely time must be >= Optimistic time."

class TestWeightedAverage(unittest.TestCase):
    def test_textbook_example_in_hours(self):
        # Arrange
        optimistic, most_likely, pessimistic = 4, 6, 10

        # Act
        minutes = weighted_average(optimistic, most_likely, pessimistic, TimeUnit.hours)

        # Assert
        self.assertEqual(minutes, D("380"))

    def test_fraction_is_exact_decimal(self):
        minutes = weighted_average(1, 1, 2, TimeUnit.minutes)
        self.assertEqual(minutes, D(7) / D(6))

    def test_out_of_order_still_computes(self):
        minutes = weighted_average(5, 2, 1, TimeUnit.hours)
        self.assertEqual(minutes, D("140"))

    def test_degenerate_input_gives_zero(self):
        self.assertEqual(weighted_average(-1, 2, 3, TimeUnit.hours), D("0"))
        self.assertEqual(weighted_average("abc", 2, 3, TimeUnit.hours), D("0"))
        self.assertEqual(weighted_average(1, float("nan"), 3, TimeUnit.hours), D("0"))

    def test_unknown_unit_gives_zero(self):
        self.assertEqual(weighted_average(1, 2, 3, "weeks"), D("0"))

class TestEstimateTaskTime(unittest.TestCase):
    def test_accepted(self):
        outcome = estimate_task_time(4, 6, 10, "hours")
        self.assertEqual(outcome, Computed(D("380")))

    def test_accepts_numeric_strings(self):
        outcome = estimate_task_time("4", "6", "10", "hours")
        self.assertEqual(outcome, Computed(D("380")))

    def test_equal_values_are_in_order(self):
        outcome = estimate_task_time(2, 2, 2, "days")
        self.assertEqual(outcome, Computed(D("960")))

    def test_rejects_missing_value(self):
        outcome = estimate_task_time(4, None, 10, "hours")
        self.assertIsInstance(outcome, Rejected)
        self.assertTrue(outcome.reason.startswith("Please fill all task fields"))

    def test_rejects_out_of_order(self):
        outcome = estimate_task_time(10, 6, 4, "hours")
        self.assertEqual(outcome, Rejected(ORDER_MESSAGE))

    def test_rejects_most_likely_below_optimistic(self):
        outcome = estimate_task_time(5, 4, 10, "hours")
        self.assertEqual(outcome, Rejected(ORDER_MESSAGE))

    def test_rejects_negative(self):
        outcome = estimate_task_time(-1, 2, 3, "hours")
        self.assertIsInstance(outcome, Rejected)
        self.assertIn("Optimistic", outcome.reason)

    def test_rejects_unknown_unit(self):
        outcome = estimate_task_time(1, 2, 3, "weeks")
        self.assertIsInstance(outcome, Rejected)
        self.assertIn("weeks", outcome.reason)

class TestRequireTaskTime(unittest.TestCase):
    def test_returns_minutes(self):
        self.assertEqual(require_task_time(1, 2, 3, "hours"), D("120"))

    def test_raises_on_rejection(self):
        with self.assertRaises(TaskValidationError) as context:
            require_task_time(3, 2, 1, "hours")
        self.assertEqual(str(context.exception), ORDER_MESSAGE)
