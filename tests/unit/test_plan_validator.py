from __future__ import annotations

from datetime import date

from studyplanner.model import CourseSpec, PlanSpec, Priority, SchedulingRules
from studyplanner.validation import validate, validate_plan


def _valid_plan() -> PlanSpec:
    plan = PlanSpec(plan_name="Finals")
    plan.add_course(CourseSpec(id="CS101", priority=Priority.HIGH, workload_hours=8))
    for day in (8, 9, 10):
        plan.set_availability(date(2025, 12, day), 5)
    return plan


def test_valid_plan_has_no_errors_and_infers_date_range() -> None:
    plan = _valid_plan()

    report = validate_plan(plan)

    assert report.is_valid
    assert plan.start_date == date(2025, 12, 8)
    assert plan.end_date == date(2025, 12, 10)
    assert {info.code for info in report.infos} == {"INFO_START_DATE_INFERRED", "INFO_END_DATE_INFERRED"}


def test_explicit_dates_are_not_overwritten() -> None:
    plan = _valid_plan()
    plan.start_date = date(2025, 12, 1)
    plan.end_date = date(2025, 12, 31)

    report = validate_plan(plan)

    assert report.is_valid
    assert (plan.start_date, plan.end_date) == (date(2025, 12, 1), date(2025, 12, 31))
    assert report.infos == []


def test_empty_plan_collects_every_violation() -> None:
    plan = PlanSpec(plan_name="  ")

    errors = validate(plan)

    assert "Plan name cannot be empty" in errors
    assert "At least one course must be specified" in errors
    assert "No availability specified" in errors
    assert len(errors) == 3


def test_course_level_errors_are_aggregated() -> None:
    plan = _valid_plan()
    plan.add_course(CourseSpec(id="CS101", priority=None, workload_hours=0))
    plan.add_course(CourseSpec(id="", priority=Priority.LOW, workload_hours=2))

    report = validate_plan(plan)
    codes = [issue.code for issue in report.errors]

    assert "DUPLICATE_COURSE_ID" in codes
    assert "MISSING_PRIORITY" in codes
    assert "INVALID_WORKLOAD" in codes
    assert "EMPTY_COURSE_ID" in codes
    assert any("Duplicate course IDs found: CS101" in message for message in report.messages())


def test_component_rules() -> None:
    plan = _valid_plan()
    course = plan.get_course("CS101")
    course.add_component("", 1)
    course.add_component("Project", -2)
    course.add_component("Labs", 8)

    messages = validate(plan)

    assert any("Component name cannot be empty" in message for message in messages)
    assert any("Component hours must be positive" in message for message in messages)
    assert not any("Component hours exceed total workload" in message for message in messages)

    course.add_component("Reading", 2)
    messages = validate(plan)
    assert any("Component hours exceed total workload" in message for message in messages)


def test_exam_outside_explicit_horizon() -> None:
    plan = _valid_plan()
    plan.start_date = date(2025, 12, 8)
    plan.end_date = date(2025, 12, 10)
    plan.add_course(CourseSpec(id="EARLY", priority=Priority.LOW, workload_hours=1, exam_date=date(2025, 12, 1)))
    plan.add_course(CourseSpec(id="LATE", priority=Priority.LOW, workload_hours=1, exam_date=date(2026, 1, 5)))

    codes = [issue.code for issue in validate_plan(plan).errors]

    assert "EXAM_BEFORE_START" in codes
    assert "EXAM_AFTER_END" in codes


def test_availability_bounds() -> None:
    plan = _valid_plan()
    plan.set_availability(date(2025, 12, 11), -1)
    plan.set_availability(date(2025, 12, 12), 9)

    messages = validate(plan)

    assert any("Negative availability hours on 2025-12-11" in message for message in messages)
    assert any("exceeds max hours per day" in message for message in messages)


def test_start_after_end_is_reported() -> None:
    plan = _valid_plan()
    plan.start_date = date(2025, 12, 10)
    plan.end_date = date(2025, 12, 8)

    messages = validate(plan)

    assert "Start date 2025-12-10 is after end date 2025-12-08" in messages


def test_workload_shortfall_message_includes_magnitude() -> None:
    plan = PlanSpec(plan_name="Tight")
    plan.add_course(CourseSpec(id="BIG", priority=Priority.HIGH, workload_hours=20))
    plan.set_availability(date(2025, 12, 8), 5)

    report = validate_plan(plan)

    assert (
        "Total workload (20.0 hours) exceeds total availability (5.0 hours). Shortfall: 15.0 hours"
        in report.messages()
    )
    assert report.errors[-1].extra["shortfall_hours"] == 15.0


def test_rule_fields_are_checked() -> None:
    plan = _valid_plan()
    plan.rules = SchedulingRules(
        max_hours_per_day=0,
        block_duration_minutes=0,
        break_duration_minutes=-5,
        max_continuous_block_minutes=-1,
    )

    report = validate_plan(plan)
    rule_messages = [issue.message for issue in report.errors if issue.code == "INVALID_RULE"]

    assert "Max hours per day must be positive" in rule_messages
    assert "Block duration must be positive" in rule_messages
    assert "Break duration cannot be negative" in rule_messages
    assert any(message.startswith("Max continuous block minutes") for message in rule_messages)


def test_error_order_is_reproducible() -> None:
    def build() -> PlanSpec:
        plan = PlanSpec(plan_name="")
        plan.add_course(CourseSpec(id="A", priority=None, workload_hours=-1))
        plan.add_course(CourseSpec(id="A", priority=Priority.LOW, workload_hours=30))
        plan.set_availability(date(2025, 12, 8), -2)
        return plan

    first = validate(build())
    second = validate(build())

    assert first == second
    assert first[0] == "Plan name cannot be empty"
    assert first[1].startswith("Duplicate course IDs found")
