from __future__ import annotations

from datetime import date, datetime

import pytest

from studyplanner.model import CourseSpec, PlanSpec, Priority, Schedule, ScheduledBlock, SchedulingRules


def _block(course: str, day: int, start: str = "08:00", end: str = "10:00") -> ScheduledBlock:
    return ScheduledBlock(
        course_id=course,
        course_name=course,
        priority=Priority.MEDIUM,
        date=date(2025, 12, day),
        start_time=start,
        end_time=end,
        duration_minutes=120,
        reason=f"{course} block",
    )


def test_block_mutations_keep_score_consistent() -> None:
    schedule = Schedule(plan_name="P")
    first = _block("A", 8)
    second = _block("B", 9)

    schedule.add_block(first)
    assert schedule.score.interleave_score == 50.0
    schedule.add_block(second)
    assert schedule.score.interleave_score == 100.0
    assert schedule.score.total_scheduled_hours == 4.0

    assert schedule.remove_block(second) is True
    assert schedule.remove_block(second) is False
    assert schedule.score.total_scheduled_hours == 2.0

    schedule.clear_blocks()
    assert schedule.score.overall_score == 0.0


def test_remove_blocks_by_course_rescores() -> None:
    schedule = Schedule(plan_name="P")
    for block in (_block("A", 8), _block("B", 8, "10:15", "12:15"), _block("A", 9)):
        schedule.add_block(block)

    assert schedule.remove_blocks_by_course("A") == 2
    assert schedule.course_ids() == ["B"]
    assert schedule.score.total_scheduled_hours == 2.0


def test_queries() -> None:
    schedule = Schedule(plan_name="P")
    for block in (_block("A", 9, "10:15", "12:15"), _block("B", 9), _block("A", 8)):
        schedule.add_block(block)

    assert [b.start_time for b in schedule.blocks_for_date(date(2025, 12, 9))] == ["08:00", "10:15"]
    assert [b.date.day for b in schedule.blocks_for_course("A")] == [8, 9]
    assert schedule.scheduled_dates() == [date(2025, 12, 8), date(2025, 12, 9)]
    assert schedule.hours_by_date() == {date(2025, 12, 9): 4.0, date(2025, 12, 8): 2.0}
    assert schedule.completion_percentage("A", 8) == 50.0
    assert schedule.completion_percentage("A", 0) == 0.0

    summary = schedule.summary()
    assert (summary.total_blocks, summary.total_hours, summary.scheduled_days, summary.courses_count) == (3, 6.0, 2, 2)
    assert summary.average_hours_per_day == 3.0


def test_blank_explanations_are_ignored() -> None:
    schedule = Schedule(plan_name="P")
    schedule.add_explanations(["first", "", "   ", None, "second"])

    assert schedule.explanations == ["first", "second"]


def test_schedule_payload_uses_camel_case_and_survives_reload() -> None:
    schedule = Schedule(plan_name="P", start_date=date(2025, 12, 8), end_date=date(2025, 12, 9))
    schedule.generated_at = datetime(2025, 12, 1, 10, 30, 0)
    schedule.add_block(_block("A", 8))
    schedule.add_explanation("placed A")

    payload = schedule.to_dict()

    assert payload["generatedAt"] == "2025-12-01T10:30:00"
    assert payload["blocks"][0]["courseId"] == "A"
    assert payload["blocks"][0]["startTime"] == "08:00"
    assert payload["blocks"][0]["priority"] == "MEDIUM"
    assert Schedule.from_dict(payload) == schedule


def test_generated_at_is_excluded_from_equality() -> None:
    first = Schedule(plan_name="P", generated_at=datetime(2025, 1, 1))
    second = Schedule(plan_name="P", generated_at=datetime(2026, 1, 1))

    assert first == second


def test_plan_helpers() -> None:
    plan = PlanSpec()
    plan.add_course(CourseSpec(id="A", priority=Priority.HIGH, workload_hours=6))
    plan.add_course(CourseSpec(id="B", priority=Priority.LOW, workload_hours=4))
    plan.set_availability(date(2025, 12, 9), 3)
    plan.set_availability(date(2025, 12, 8), 2)
    plan.set_availability(date(2025, 12, 9), 4)

    assert plan.plan_name == "Untitled Plan"
    assert plan.available_dates() == [date(2025, 12, 8), date(2025, 12, 9)]
    assert plan.get_availability(date(2025, 12, 9)) == 4.0
    assert plan.get_availability(date(2025, 12, 20)) == 0.0
    assert plan.total_workload_hours() == 10
    assert plan.total_available_hours() == 6.0
    assert plan.shortfall_hours() == 4.0
    assert plan.has_shortfall()
    assert plan.get_course("B").workload_hours == 4
    assert plan.remove_course("B") is True
    assert plan.remove_course("B") is False
    assert plan.get_course("B") is None


def test_plan_snapshot_is_independent() -> None:
    plan = PlanSpec(plan_name="P")
    plan.add_course(CourseSpec(id="A", priority=Priority.HIGH, workload_hours=6))

    snapshot = plan.snapshot()
    plan.get_course("A").workload_hours = 1
    plan.clear_courses()

    assert snapshot.get_course("A").workload_hours == 6


def test_plan_round_trips_through_payload() -> None:
    plan = PlanSpec(plan_name="P", start_date=date(2025, 12, 8))
    course = CourseSpec(id="A", priority=Priority.MEDIUM, workload_hours=6, exam_date=date(2025, 12, 20))
    course.add_component("Essay", 2.5, date(2025, 12, 15))
    plan.add_course(course)
    plan.set_availability(date(2025, 12, 8), 3)

    payload = plan.to_dict()

    assert payload["courses"][0]["examDate"] == "2025-12-20"
    assert payload["availability"] == {"2025-12-08": 3.0}
    assert PlanSpec.from_dict(payload) == plan


def test_rule_derived_values() -> None:
    rules = SchedulingRules()

    assert rules.block_duration_hours == 1.5
    assert rules.break_duration_hours == 0.25
    assert rules.max_blocks_per_day == 4


@pytest.mark.parametrize(
    "payload",
    [
        {"blocks": [], "score": [1]},
        {"blocks": [], "metadata": "done"},
        {"blocks": {"courseId": "A"}},
        {"blocks": ["A"]},
        {"blocks": [], "explanations": "none"},
        {"blocks": [], "score": {"courseHours": [1, 2]}},
    ],
)
def test_malformed_schedule_payload_raises_value_error(payload: dict) -> None:
    with pytest.raises(ValueError):
        Schedule.from_dict(payload)
