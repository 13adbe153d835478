"""순수 도메인 규칙 단위 테스트 — DB 없이 실행.

Unit tests for the pure rules: coverage calculator, SLA clock,
task lifecycle and issue triage.
"""

from datetime import datetime, timedelta, timezone
from types import SimpleNamespace

import pytest

from app.utils.coverage import CoverageLevel, coverage_level, evaluate_shift, required_staff
from app.utils.exceptions import InvalidTransitionError, ValidationError
from app.utils.sla_clock import (
    countdown,
    is_sla_compliant,
    percent,
    sla_compliance_percent,
    task_countdown,
)
from app.utils.task_lifecycle import (
    TaskAction,
    TaskStatus,
    clean_evidence,
    completion_percent,
    next_status,
    plan_transition,
    status_counts,
)
from app.utils.triage import (
    emergency_count,
    is_active_emergency,
    is_high_severity,
    issue_countdown,
    plan_assign,
    plan_close,
    plan_merge,
)

T0 = datetime(2026, 3, 1, 8, 0, tzinfo=timezone.utc)


# ===== Coverage =====

class TestCoverage:
    """커버리지 계산 테스트."""

    @pytest.mark.parametrize("headcount, expected", [(0, 0), (1, 1), (8, 1), (9, 2), (40, 5), (41, 6)])
    def test_required_staff_is_ceiling(self, headcount, expected):
        assert required_staff(headcount) == expected

    def test_required_staff_custom_capacity(self):
        assert required_staff(25, capacity_per_staff=10) == 3

    def test_negative_headcount_rejected(self):
        with pytest.raises(ValidationError):
            required_staff(-1)

    def test_zero_required_is_green(self):
        assert coverage_level(0, 0) is CoverageLevel.GREEN

    def test_levels(self):
        assert coverage_level(5, 5) is CoverageLevel.GREEN
        assert coverage_level(6, 5) is CoverageLevel.GREEN
        assert coverage_level(3, 5) is CoverageLevel.ORANGE
        assert coverage_level(2, 5) is CoverageLevel.RED
        # 정확히 절반은 orange — exactly half is not red
        assert coverage_level(2, 4) is CoverageLevel.ORANGE
        assert coverage_level(1, 4) is CoverageLevel.RED

    def test_evaluate_missing_shift_counts_zero(self):
        zone = SimpleNamespace(id="z1", headcount=16)
        cell = evaluate_shift(zone, "red", None)
        assert cell.assigned == 0
        assert cell.required == 2
        assert cell.level is CoverageLevel.RED
        assert cell.shift_id is None

    def test_evaluate_existing_shift(self):
        zone = SimpleNamespace(id="z1", headcount=16)
        shift = SimpleNamespace(id="s1", assigned_staff_ids=["a"])
        cell = evaluate_shift(zone, "green", shift)
        assert cell.as_dict()["level"] == "orange"
        assert cell.shift_id == "s1"


# ===== SLA clock =====

class TestSlaClock:
    """SLA 카운트다운 테스트."""

    def test_countdown_label(self):
        cd = countdown(T0, 24, now=T0 + timedelta(hours=1, minutes=2, seconds=3))
        assert not cd.expired
        assert cd.label == "22h 57m 57s"

    def test_countdown_expired(self):
        cd = countdown(T0, 24, now=T0 + timedelta(hours=24))
        assert cd.expired
        assert cd.label == "Expired"
        assert cd.remaining is None

    def test_naive_timestamp_treated_as_utc(self):
        naive = T0.replace(tzinfo=None)
        cd = countdown(naive, 1, now=T0 + timedelta(minutes=30))
        assert cd.label == "0h 30m 0s"

    def test_non_positive_window_rejected(self):
        with pytest.raises(ValidationError):
            countdown(T0, 0)
        with pytest.raises(ValidationError):
            task_countdown(T0, -5)

    def test_task_countdown_uses_minutes(self):
        cd = task_countdown(T0, 90, now=T0 + timedelta(minutes=30))
        assert cd.as_dict()["remaining_seconds"] == 3600

    def test_compliance_boundary_is_inclusive(self):
        assert is_sla_compliant(T0, T0 + timedelta(minutes=60), 60)
        assert not is_sla_compliant(T0, T0 + timedelta(minutes=60, seconds=1), 60)
        assert not is_sla_compliant(T0, None, 60)

    def test_compliance_percent_over_verified_only(self):
        tasks = [
            SimpleNamespace(status="Verified", created_at=T0, completed_at=T0 + timedelta(minutes=10), sla_minutes=60),
            SimpleNamespace(status="Verified", created_at=T0, completed_at=T0 + timedelta(hours=3), sla_minutes=60),
            SimpleNamespace(status="Verified", created_at=T0, completed_at=T0 + timedelta(minutes=30), sla_minutes=60),
            SimpleNamespace(status="Done", created_at=T0, completed_at=T0 + timedelta(hours=9), sla_minutes=60),
        ]
        assert sla_compliance_percent(tasks) == 67
        assert sla_compliance_percent([]) == 0

    def test_percent_rounds_half_up(self):
        assert percent(1, 8) == 13  # 12.5
        assert percent(1, 3) == 33
        assert percent(0, 0) == 0


# ===== Task lifecycle =====

class TestTaskLifecycle:
    """업무 상태 머신 테스트."""

    def test_happy_path(self):
        assert next_status("Pending", TaskAction.START) is TaskStatus.IN_PROGRESS
        assert next_status("In Progress", TaskAction.MARK_DONE) is TaskStatus.DONE
        assert next_status("Done", TaskAction.VERIFY) is TaskStatus.VERIFIED
        assert next_status("Done", TaskAction.REJECT) is TaskStatus.IN_PROGRESS

    @pytest.mark.parametrize("status, action", [
        ("Pending", TaskAction.MARK_DONE),
        ("Pending", TaskAction.VERIFY),
        ("In Progress", TaskAction.START),
        ("Done", TaskAction.START),
        ("Verified", TaskAction.REJECT),
        ("Verified", TaskAction.START),
        ("Verified", TaskAction.MARK_DONE),
        ("Verified", TaskAction.VERIFY),
    ])
    def test_invalid_transitions(self, status, action):
        with pytest.raises(InvalidTransitionError):
            next_status(status, action)

    def test_start_sets_started_at(self):
        update = plan_transition("Pending", TaskAction.START, now=T0)
        assert update == {"status": "In Progress", "started_at": T0}

    def test_mark_done_requires_evidence(self):
        with pytest.raises(ValidationError):
            plan_transition("In Progress", TaskAction.MARK_DONE, [])
        with pytest.raises(ValidationError):
            plan_transition("In Progress", TaskAction.MARK_DONE, ["a.jpg", "  "])

    def test_mark_done_replaces_evidence(self):
        update = plan_transition("In Progress", TaskAction.MARK_DONE, ["a.jpg", "a.jpg", "b.jpg"], now=T0)
        assert update["photos_after"] == ["a.jpg", "b.jpg"]
        assert update["completed_at"] == T0

    def test_reject_keeps_evidence(self):
        assert plan_transition("Done", TaskAction.REJECT) == {"status": "In Progress"}

    def test_clean_evidence_strips(self):
        assert clean_evidence([" x.png "]) == ["x.png"]

    def test_completion_and_counts(self):
        tasks = [SimpleNamespace(status=s) for s in ["Verified", "Done", "Pending", "Verified"]]
        assert completion_percent(tasks) == 50
        assert completion_percent([]) == 0
        counts = status_counts(tasks)
        assert counts == {"Pending": 1, "In Progress": 0, "Done": 1, "Verified": 2}


# ===== Triage =====

class TestTriage:
    """이슈 트리아지 테스트."""

    def test_active_emergency(self):
        assert is_active_emergency(SimpleNamespace(severity="emergency", status="open"))
        assert is_active_emergency(SimpleNamespace(severity="emergency", status="merged"))
        assert not is_active_emergency(SimpleNamespace(severity="emergency", status="closed"))
        assert not is_active_emergency(SimpleNamespace(severity="high", status="open"))

    def test_emergency_count(self):
        issues = [
            SimpleNamespace(severity="emergency", status="open"),
            SimpleNamespace(severity="emergency", status="closed"),
            SimpleNamespace(severity="low", status="open"),
        ]
        assert emergency_count(issues) == 1

    def test_high_severity(self):
        assert is_high_severity(SimpleNamespace(severity="high"))
        assert is_high_severity(SimpleNamespace(severity="emergency"))
        assert not is_high_severity(SimpleNamespace(severity="medium"))

    def test_assign_requires_name(self):
        issue = SimpleNamespace(status="open")
        with pytest.raises(ValidationError):
            plan_assign(issue, "   ")
        assert plan_assign(issue, " Asha ") == {"assigned_to": "Asha", "status": "assigned"}

    def test_closed_is_terminal(self):
        closed = SimpleNamespace(status="closed")
        for plan in (plan_merge, plan_close):
            with pytest.raises(InvalidTransitionError):
                plan(closed)
        with pytest.raises(InvalidTransitionError):
            plan_assign(closed, "Asha")

    def test_free_movement_before_close(self):
        assert plan_merge(SimpleNamespace(status="assigned")) == {"status": "merged"}
        assert plan_assign(SimpleNamespace(status="merged"), "Ravi")["status"] == "assigned"

    def test_issue_countdown_fixed_window(self):
        issue = SimpleNamespace(reported_at=T0)
        cd = issue_countdown(issue, now=T0 + timedelta(hours=23), sla_hours=24)
        assert cd.label == "1h 0m 0s"
