"""Semantic validation of a complete PlanSpec.

All rules are applied in one pass and every violation is reported. Rules run
in a fixed order so messages come out in a reproducible sequence:

plan name -> course list -> duplicate ids -> per-course checks -> availability
-> per-day capacity -> date-range inference -> start/end order -> aggregate
workload vs availability -> rule fields.

When ``start_date``/``end_date`` are unset they are inferred from the
availability map and written back onto the plan.
"""

from __future__ import annotations

from studyplanner.model.plan import CourseSpec, PlanSpec

from .errors import ValidationReport

COMPONENT_HOURS_TOLERANCE = 1.1


def validate_plan(plan: PlanSpec) -> ValidationReport:
    """Validate a plan and return the aggregated report."""
    report = ValidationReport()

    if not plan.plan_name or not plan.plan_name.strip():
        report.add_error(code="EMPTY_PLAN_NAME", message="Plan name cannot be empty", field_path="$.planName")

    if not plan.courses:
        report.add_error(
            code="NO_COURSES",
            message="At least one course must be specified",
            field_path="$.courses",
            suggested_fix='Add a subject, e.g. add subject "Math" hours 10 priority HIGH',
        )

    _check_duplicate_ids(plan, report)
    for idx, course in enumerate(plan.courses):
        _check_course(plan, course, idx, report)

    _check_availability(plan, report)
    _infer_date_range(plan, report)

    if plan.start_date is not None and plan.end_date is not None and plan.start_date > plan.end_date:
        report.add_error(
            code="INVALID_DATE_RANGE",
            message=(
                f"Start date {plan.start_date.isoformat()} is after end date {plan.end_date.isoformat()}"
            ),
            field_path="$.startDate",
            suggested_fix="Swap the dates or adjust the study window.",
        )

    _check_workload_fits(plan, report)
    _check_rules(plan, report)
    return report


def validate(plan: PlanSpec) -> list[str]:
    """Return every violated rule as a message; the plan is valid iff the list is empty."""
    return validate_plan(plan).messages()


def _course_label(course: CourseSpec, idx: int) -> str:
    return course.id if course.id and course.id.strip() else f"#{idx + 1}"


def _check_duplicate_ids(plan: PlanSpec, report: ValidationReport) -> None:
    seen: set[str] = set()
    duplicates: list[str] = []
    for course in plan.courses:
        if course.id in seen and course.id not in duplicates:
            duplicates.append(course.id)
        seen.add(course.id)
    if duplicates:
        report.add_error(
            code="DUPLICATE_COURSE_ID",
            message=f"Duplicate course IDs found: {', '.join(duplicates)}",
            field_path="$.courses",
        )


def _check_course(plan: PlanSpec, course: CourseSpec, idx: int, report: ValidationReport) -> None:
    path = f"$.courses[{idx}]"
    label = _course_label(course, idx)

    if not course.id or not course.id.strip():
        report.add_error(
            code="EMPTY_COURSE_ID",
            message=f"Course ID cannot be empty (course {label})",
            field_path=f"{path}.id",
        )

    if course.priority is None:
        report.add_error(
            code="MISSING_PRIORITY",
            message=f"Priority must be specified for course {label}",
            field_path=f"{path}.priority",
        )

    if course.workload_hours <= 0:
        report.add_error(
            code="INVALID_WORKLOAD",
            message=f"Workload hours must be positive for course {label} (got {course.workload_hours})",
            field_path=f"{path}.workloadHours",
        )

    for component_idx, component in enumerate(course.components):
        component_path = f"{path}.components[{component_idx}]"
        if not component.name or not component.name.strip():
            report.add_error(
                code="EMPTY_COMPONENT_NAME",
                message=f"Component name cannot be empty in course {label}",
                field_path=f"{component_path}.name",
            )
        if component.estimated_hours <= 0:
            report.add_error(
                code="INVALID_COMPONENT_HOURS",
                message=(
                    f"Component hours must be positive for component {component.name!r} "
                    f"in course {label} (got {component.estimated_hours})"
                ),
                field_path=f"{component_path}.estimatedHours",
            )

    component_total = course.component_total_hours()
    if course.components and course.workload_hours > 0 and (
        component_total > course.workload_hours * COMPONENT_HOURS_TOLERANCE
    ):
        report.add_error(
            code="COMPONENT_HOURS_EXCEED_WORKLOAD",
            message=(
                f"Component hours exceed total workload for course {label}: "
                f"{component_total:.1f} > {course.workload_hours:.1f}"
            ),
            field_path=f"{path}.components",
            suggested_fix="Reduce component estimates or raise the course workload.",
        )

    if course.exam_date is not None:
        if plan.start_date is not None and course.exam_date < plan.start_date:
            report.add_error(
                code="EXAM_BEFORE_START",
                message=(
                    f"Exam date {course.exam_date.isoformat()} for course {label} "
                    f"is before plan start date {plan.start_date.isoformat()}"
                ),
                field_path=f"{path}.examDate",
            )
        if plan.end_date is not None and course.exam_date > plan.end_date:
            report.add_error(
                code="EXAM_AFTER_END",
                message=(
                    f"Exam date {course.exam_date.isoformat()} for course {label} "
                    f"is after plan end date {plan.end_date.isoformat()}"
                ),
                field_path=f"{path}.examDate",
            )


def _check_availability(plan: PlanSpec, report: ValidationReport) -> None:
    if not plan.availability:
        report.add_error(
            code="NO_AVAILABILITY",
            message="No availability specified",
            field_path="$.availability",
            suggested_fix="Add a day, e.g. set availability on 2025-12-08 capacity 5 hours",
        )
        return

    max_hours = plan.rules.max_hours_per_day
    for day in plan.available_dates():
        hours = plan.availability[day]
        path = f"$.availability.{day.isoformat()}"
        if hours < 0:
            report.add_error(
                code="NEGATIVE_AVAILABILITY",
                message=f"Negative availability hours on {day.isoformat()}: {hours:.1f}",
                field_path=path,
            )
        elif hours > max_hours:
            report.add_error(
                code="AVAILABILITY_EXCEEDS_MAX",
                message=(
                    f"Availability on {day.isoformat()} ({hours:.1f} hours) "
                    f"exceeds max hours per day ({max_hours:.1f})"
                ),
                field_path=path,
            )


def _infer_date_range(plan: PlanSpec, report: ValidationReport) -> None:
    dates = plan.available_dates()
    if not dates:
        return
    if plan.start_date is None:
        plan.start_date = dates[0]
        report.add_info(
            code="INFO_START_DATE_INFERRED",
            message=f"Start date inferred from availability: {plan.start_date.isoformat()}",
            field_path="$.startDate",
        )
    if plan.end_date is None:
        plan.end_date = dates[-1]
        report.add_info(
            code="INFO_END_DATE_INFERRED",
            message=f"End date inferred from availability: {plan.end_date.isoformat()}",
            field_path="$.endDate",
        )


def _check_workload_fits(plan: PlanSpec, report: ValidationReport) -> None:
    if not plan.courses or not plan.availability:
        return
    total_workload = plan.total_workload_hours()
    total_available = plan.total_available_hours()
    if total_workload > total_available:
        shortfall = total_workload - total_available
        report.add_error(
            code="WORKLOAD_EXCEEDS_AVAILABILITY",
            message=(
                f"Total workload ({total_workload:.1f} hours) exceeds total availability "
                f"({total_available:.1f} hours). Shortfall: {shortfall:.1f} hours"
            ),
            field_path="$.availability",
            suggested_fix="Add availability, reduce workload or extend the planning horizon.",
            extra={"shortfall_hours": shortfall},
        )


def _check_rules(plan: PlanSpec, report: ValidationReport) -> None:
    rules = plan.rules
    if rules.max_hours_per_day <= 0:
        report.add_error(
            code="INVALID_RULE",
            message="Max hours per day must be positive",
            field_path="$.rules.maxHoursPerDay",
        )
    if rules.block_duration_minutes <= 0:
        report.add_error(
            code="INVALID_RULE",
            message="Block duration must be positive",
            field_path="$.rules.blockDurationMinutes",
        )
    if rules.break_duration_minutes < 0:
        report.add_error(
            code="INVALID_RULE",
            message="Break duration cannot be negative",
            field_path="$.rules.breakDurationMinutes",
        )
    if rules.max_continuous_block_minutes < rules.block_duration_minutes:
        report.add_error(
            code="INVALID_RULE",
            message=(
                f"Max continuous block minutes ({rules.max_continuous_block_minutes}) "
                f"must be >= block duration ({rules.block_duration_minutes})"
            ),
            field_path="$.rules.maxContinuousBlockMinutes",
        )
