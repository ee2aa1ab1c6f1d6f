from __future__ import annotations

from datetime import date, datetime

from studyplanner.engine import SHORTFALL_SUGGESTIONS, blocks_needed, generate_schedule, order_courses, split_horizon
from studyplanner.model import CourseSpec, PlanSpec, Priority, SchedulingRules


def _plan(courses: list[CourseSpec], availability: dict[int, float], month: int = 12) -> PlanSpec:
    plan = PlanSpec(plan_name="Test Plan")
    for course in courses:
        plan.add_course(course)
    for day, hours in availability.items():
        plan.set_availability(date(2025, month, day), hours)
    return plan


def _slots(schedule) -> list[tuple[str, str, str, str]]:
    return [(b.course_id, b.date.isoformat(), b.start_time, b.end_time) for b in schedule.blocks]


def test_blocks_needed_rounds_up_to_whole_blocks() -> None:
    assert blocks_needed(0.0) == 0
    assert blocks_needed(2.0) == 1
    assert blocks_needed(2.4) == 2
    assert blocks_needed(4.8) == 3
    assert blocks_needed(4 * 0.4) == 1


def test_split_horizon_gives_split_day_to_second_half() -> None:
    first, second = split_horizon(date(2025, 12, 8), date(2025, 12, 10))
    assert first == [date(2025, 12, 8)]
    assert second == [date(2025, 12, 9), date(2025, 12, 10)]

    first, second = split_horizon(date(2025, 12, 8), date(2025, 12, 11))
    assert first == [date(2025, 12, 8), date(2025, 12, 9)]
    assert second == [date(2025, 12, 10), date(2025, 12, 11)]

    first, second = split_horizon(date(2025, 12, 8), date(2025, 12, 8))
    assert first == []
    assert second == [date(2025, 12, 8)]


def test_order_courses_is_stable_descending_priority() -> None:
    courses = [
        CourseSpec(id="L1", priority=Priority.LOW, workload_hours=2),
        CourseSpec(id="H1", priority=Priority.HIGH, workload_hours=2),
        CourseSpec(id="M1", priority=Priority.MEDIUM, workload_hours=2),
        CourseSpec(id="H2", priority=Priority.HIGH, workload_hours=2),
        CourseSpec(id="L2", priority=Priority.LOW, workload_hours=2),
    ]

    assert [course.id for course in order_courses(courses)] == ["H1", "H2", "M1", "L1", "L2"]


def test_single_course_front_loaded_walkthrough() -> None:
    plan = _plan([CourseSpec(id="CS101", priority=Priority.HIGH, workload_hours=8)], {8: 5, 9: 5, 10: 5})

    schedule = generate_schedule(plan)

    assert _slots(schedule) == [
        ("CS101", "2025-12-08", "08:00", "10:00"),
        ("CS101", "2025-12-08", "10:15", "12:15"),
        ("CS101", "2025-12-09", "08:00", "10:00"),
        ("CS101", "2025-12-09", "10:15", "12:15"),
    ]
    assert schedule.blocks[0].reason == (
        "Phase 1 (first half): block 1 of 3 for CS101 (HIGH priority) on 2025-12-08 08:00-10:00"
    )
    assert schedule.blocks[2].reason.startswith("Phase 2 (second half): block 1 of 2 for CS101")
    assert "Phase 1 (first half): placed 2 of 3 blocks for CS101." in schedule.explanations
    assert not any(item.startswith("Shortfall") for item in schedule.explanations)
    assert schedule.start_date == date(2025, 12, 8)
    assert schedule.end_date == date(2025, 12, 10)
    assert schedule.total_scheduled_hours() == 8.0
    assert schedule.score.buffer_score == 100.0


def test_course_stops_once_workload_is_covered() -> None:
    plan = _plan(
        [
            CourseSpec(id="MATH", priority=Priority.HIGH, workload_hours=4),
            CourseSpec(id="PHYS", priority=Priority.LOW, workload_hours=4),
        ],
        {8: 8, 9: 8, 10: 8, 11: 8},
    )

    schedule = generate_schedule(plan)

    assert _slots(schedule) == [
        ("MATH", "2025-12-08", "08:00", "10:00"),
        ("MATH", "2025-12-08", "10:15", "12:15"),
        ("PHYS", "2025-12-08", "12:30", "14:30"),
        ("PHYS", "2025-12-10", "08:00", "10:00"),
    ]
    assert "Phase 2 (second half): placed 0 of 1 blocks for MATH." in schedule.explanations
    assert schedule.scheduled_hours_for_course("MATH") == 4.0
    assert schedule.scheduled_hours_for_course("PHYS") == 4.0


def test_high_priority_wins_scarce_capacity_regardless_of_input_order() -> None:
    plan = _plan(
        [
            CourseSpec(id="ELECTIVE", priority=Priority.LOW, workload_hours=4),
            CourseSpec(id="CORE", priority=Priority.HIGH, workload_hours=2),
        ],
        {8: 2},
    )

    schedule = generate_schedule(plan)

    assert [block.course_id for block in schedule.blocks] == ["CORE"]
    assert "Shortfall: ELECTIVE has 4.0 hours unscheduled (0.0 of 4.0 hours placed)." in schedule.explanations
    for suggestion in SHORTFALL_SUGGESTIONS:
        assert suggestion in schedule.explanations


def test_daily_capacity_is_clamped_to_eight_hours() -> None:
    plan = _plan([CourseSpec(id="BIG", priority=Priority.HIGH, workload_hours=20)], {8: 12})

    schedule = generate_schedule(plan)

    assert _slots(schedule) == [
        ("BIG", "2025-12-08", "08:00", "10:00"),
        ("BIG", "2025-12-08", "10:15", "12:15"),
        ("BIG", "2025-12-08", "12:30", "14:30"),
        ("BIG", "2025-12-08", "14:45", "16:45"),
    ]
    assert any(item.startswith("Shortfall: BIG has 12.0 hours unscheduled") for item in schedule.explanations)


def test_days_with_less_than_one_block_are_skipped() -> None:
    plan = _plan([CourseSpec(id="A", priority=Priority.MEDIUM, workload_hours=4)], {8: 1.5, 9: 0, 10: 3, 11: 2})

    schedule = generate_schedule(plan)

    assert {block.date for block in schedule.blocks} <= {date(2025, 12, 10), date(2025, 12, 11)}
    assert all(block.date != date(2025, 12, 8) for block in schedule.blocks)


def test_zero_hour_phase_adds_no_explanation() -> None:
    plan = _plan([CourseSpec(id="Z", priority=Priority.LOW, workload_hours=0)], {8: 4, 9: 4})

    schedule = generate_schedule(plan)

    assert schedule.blocks == []
    assert not any("for Z." in item for item in schedule.explanations)


def test_deadline_is_the_exam_date() -> None:
    exam = date(2025, 12, 12)
    plan = _plan([CourseSpec(id="X", priority=Priority.HIGH, workload_hours=2, exam_date=exam)], {8: 4, 9: 4})

    schedule = generate_schedule(plan)

    assert schedule.blocks
    assert all(block.deadline == exam for block in schedule.blocks)
    assert all(block.course_name == "X" and block.component_name is None for block in schedule.blocks)


def test_no_horizon_returns_empty_schedule_with_explanation() -> None:
    plan = PlanSpec(plan_name="Nothing")
    plan.add_course(CourseSpec(id="A", priority=Priority.HIGH, workload_hours=4))

    schedule = generate_schedule(plan)

    assert schedule.is_empty()
    assert len(schedule.explanations) == 1
    assert schedule.score.overall_score == 0.0


def test_engine_ignores_rule_block_duration() -> None:
    plan = _plan([CourseSpec(id="A", priority=Priority.HIGH, workload_hours=4)], {8: 8, 9: 8})
    plan.rules = SchedulingRules(block_duration_minutes=45, break_duration_minutes=5)

    schedule = generate_schedule(plan)

    assert {block.duration_minutes for block in schedule.blocks} == {120}
    assert schedule.blocks[1].start_time == "10:15"


def test_generation_is_deterministic() -> None:
    courses = [
        CourseSpec(id="A", priority=Priority.MEDIUM, workload_hours=7),
        CourseSpec(id="B", priority=Priority.HIGH, workload_hours=9),
        CourseSpec(id="C", priority=Priority.LOW, workload_hours=5),
    ]
    stamp = datetime(2025, 12, 1, 9, 0, 0)

    first = generate_schedule(_plan(courses, {8: 6, 9: 4, 10: 8, 11: 3, 12: 5}), generated_at=stamp)
    second = generate_schedule(_plan(courses, {8: 6, 9: 4, 10: 8, 11: 3, 12: 5}), generated_at=stamp)

    assert first == second
    assert first.to_dict() == second.to_dict()


def test_metadata_is_attached() -> None:
    plan = _plan([CourseSpec(id="CS101", priority=Priority.HIGH, workload_hours=8)], {8: 5, 9: 5, 10: 5})

    schedule = generate_schedule(plan)

    assert schedule.metadata.total_courses == 1
    assert schedule.metadata.total_blocks == 4
    assert schedule.metadata.study_period_days == 3
    assert schedule.metadata.completion_rate == 100.0
    assert round(schedule.metadata.utilization_rate, 2) == round(8 / 15 * 100, 2)
