"""
Unit tests for insight detectors.

Each rule is exercised in isolation with a synthetic snapshot engineered
to trigger (or narrowly miss) exactly that rule.
"""

from datetime import timedelta

import pytest

from creators_os.insights.config import InsightConfig
from creators_os.insights.detectors import (
    AgencyPerformanceUpDetector,
    CompanyConcentrationDetector,
    CompletionRateLowDetector,
    CreatorAtRiskDetector,
    HeavyDaysStreakDetector,
    NoEventsThisWeekDetector,
    OverdueTasksDetector,
)
from creators_os.insights.models import (
    CompanyRef,
    CreatorSnapshot,
    InsightKey,
    InsightScope,
    InsightSeverity,
    InsightSnapshot,
    TaskStatus,
)


# =============================================================================
# Overdue tasks
# =============================================================================


class TestOverdueTasksDetector:

    def test_fires_warning_for_recently_overdue(self, config, now, make_task, at):
        snapshot = InsightSnapshot(tasks=[make_task(due_date=at(-1)), make_task(due_date=at(-2))])

        candidates = OverdueTasksDetector(config).detect(snapshot, now)

        assert len(candidates) == 1
        assert candidates[0].insight_key == InsightKey.OVERDUE_TASKS
        assert candidates[0].severity == InsightSeverity.WARNING
        assert candidates[0].params["count"] == 2
        assert candidates[0].insight_id == "overdue_tasks"

    def test_long_overdue_task_escalates_to_risk(self, config, now, make_task, at):
        snapshot = InsightSnapshot(tasks=[make_task(due_date=at(-3)), make_task(due_date=at(-1))])

        candidate = OverdueTasksDetector(config).detect(snapshot, now)[0]

        assert candidate.severity == InsightSeverity.RISK
        assert candidate.params["variant"] == "long_overdue"
        assert candidate.params["long_overdue_count"] == 1

    def test_many_overdue_tasks_escalate_to_risk(self, config, now, make_task, at):
        snapshot = InsightSnapshot(tasks=[make_task(due_date=at(-1)) for _ in range(10)])

        candidate = OverdueTasksDetector(config).detect(snapshot, now)[0]

        assert candidate.severity == InsightSeverity.RISK
        assert candidate.params["count"] == 10

    def test_due_today_is_not_overdue(self, config, now, make_task, at):
        """Comparison is by calendar day, not by time of day."""
        snapshot = InsightSnapshot(tasks=[make_task(due_date=at(0, hour=8))])

        assert OverdueTasksDetector(config).detect(snapshot, now) == []

    def test_done_archived_and_undated_tasks_ignored(self, config, now, make_task, at):
        snapshot = InsightSnapshot(tasks=[
            make_task(status=TaskStatus.DONE, due_date=at(-4)),
            make_task(archived=True, due_date=at(-4)),
            make_task(due_date=None),
        ])

        assert OverdueTasksDetector(config).detect(snapshot, now) == []

    def test_accepts_plain_dates(self, config, now, today, make_task):
        snapshot = InsightSnapshot(tasks=[make_task(due_date=today - timedelta(days=1))])

        candidates = OverdueTasksDetector(config).detect(snapshot, now)

        assert len(candidates) == 1
        assert candidates[0].severity == InsightSeverity.WARNING

    def test_naive_due_date_treated_as_local(self, config, now, make_task, at):
        snapshot = InsightSnapshot(tasks=[make_task(due_date=at(-1).replace(tzinfo=None))])

        assert len(OverdueTasksDetector(config).detect(snapshot, now)) == 1


# =============================================================================
# Heavy-days streak
# =============================================================================


class TestHeavyDaysStreakDetector:

    def _events_on(self, make_event, at, days, per_day=5):
        return [make_event(at(d, hour=8 + i)) for d in days for i in range(per_day)]

    def test_fires_for_three_heavy_days_ending_today(self, config, now, make_event, at):
        snapshot = InsightSnapshot(events=self._events_on(make_event, at, [-2, -1, 0]))

        candidates = HeavyDaysStreakDetector(config).detect(snapshot, now)

        assert len(candidates) == 1
        assert candidates[0].severity == InsightSeverity.WARNING
        assert candidates[0].params["streak"] == 3

    def test_two_heavy_days_do_not_fire(self, config, now, make_event, at):
        snapshot = InsightSnapshot(events=self._events_on(make_event, at, [-1, 0]))

        assert HeavyDaysStreakDetector(config).detect(snapshot, now) == []

    def test_gap_breaks_the_streak(self, config, now, make_event, at):
        snapshot = InsightSnapshot(events=self._events_on(make_event, at, [-4, -3, -1, 0]))

        assert HeavyDaysStreakDetector(config).detect(snapshot, now) == []

    def test_busy_but_not_heavy_days_do_not_fire(self, config, now, make_event, at):
        snapshot = InsightSnapshot(events=self._events_on(make_event, at, [-2, -1, 0], per_day=4))

        assert HeavyDaysStreakDetector(config).detect(snapshot, now) == []

    def test_future_heavy_days_are_ignored(self, config, now, make_event, at):
        snapshot = InsightSnapshot(events=self._events_on(make_event, at, [1, 2, 3]))

        assert HeavyDaysStreakDetector(config).detect(snapshot, now) == []

    def test_heavy_days_outside_window_are_ignored(self, config, now, make_event, at):
        snapshot = InsightSnapshot(events=self._events_on(make_event, at, [-10, -9, -8]))

        assert HeavyDaysStreakDetector(config).detect(snapshot, now) == []

    def test_no_events_is_insufficient_data(self, config, now):
        assert HeavyDaysStreakDetector(config).detect(InsightSnapshot(), now) == []


# =============================================================================
# Company concentration
# =============================================================================


class TestCompanyConcentrationDetector:

    def test_fires_and_names_dominant_company(self, config, now, make_event, at, companies):
        events = [make_event(at(-1), company_id="acme") for _ in range(8)]
        events += [make_event(at(-1), company_id="globex") for _ in range(2)]
        snapshot = InsightSnapshot(events=events, companies=companies)

        candidates = CompanyConcentrationDetector(config).detect(snapshot, now)

        assert len(candidates) == 1
        assert candidates[0].params["company_name"] == "Acme"
        assert candidates[0].params["percentage"] == 80
        assert candidates[0].insight_id == "company_concentration:acme"

    def test_even_split_does_not_fire(self, config, now, make_task, companies):
        tasks = [make_task(company_id="acme") for _ in range(5)]
        tasks += [make_task(company_id="globex") for _ in range(5)]
        snapshot = InsightSnapshot(tasks=tasks, companies=companies)

        assert CompanyConcentrationDetector(config).detect(snapshot, now) == []

    def test_exactly_at_threshold_does_not_fire(self, config, now, make_task, companies):
        tasks = [make_task(company_id="acme") for _ in range(6)]
        tasks += [make_task(company_id="globex") for _ in range(4)]
        snapshot = InsightSnapshot(tasks=tasks, companies=companies)

        assert CompanyConcentrationDetector(config).detect(snapshot, now) == []

    def test_too_few_activities_do_not_fire(self, config, now, make_task, companies):
        snapshot = InsightSnapshot(
            tasks=[make_task(company_id="acme") for _ in range(4)],
            companies=companies,
        )

        assert CompanyConcentrationDetector(config).detect(snapshot, now) == []

    def test_archived_tasks_are_not_counted(self, config, now, make_task, companies):
        tasks = [make_task(company_id="acme") for _ in range(4)]
        tasks += [make_task(company_id="globex")]
        tasks += [make_task(company_id="globex", archived=True) for _ in range(5)]
        snapshot = InsightSnapshot(tasks=tasks, companies=companies)

        candidates = CompanyConcentrationDetector(config).detect(snapshot, now)

        assert len(candidates) == 1
        assert candidates[0].params["company_name"] == "Acme"

    def test_unknown_company_cannot_be_named(self, config, now, make_event, at, companies):
        events = [make_event(at(-1), company_id="ghost") for _ in range(8)]
        events += [make_event(at(-1), company_id="acme") for _ in range(2)]
        snapshot = InsightSnapshot(events=events, companies=companies)

        assert CompanyConcentrationDetector(config).detect(snapshot, now) == []

    def test_no_companies_does_not_fire(self, config, now, make_task):
        snapshot = InsightSnapshot(tasks=[make_task(company_id="acme") for _ in range(8)])

        assert CompanyConcentrationDetector(config).detect(snapshot, now) == []


# =============================================================================
# Completion rate
# =============================================================================


class TestCompletionRateLowDetector:

    def _tasks(self, make_task, at, done, todo, created_days_ago=5):
        created = at(-created_days_ago)
        return (
            [make_task(status=TaskStatus.DONE, created_at=created) for _ in range(done)]
            + [make_task(status=TaskStatus.TODO, created_at=created) for _ in range(todo)]
        )

    def test_fires_below_half(self, config, now, make_task, at):
        snapshot = InsightSnapshot(tasks=self._tasks(make_task, at, done=1, todo=4))

        candidates = CompletionRateLowDetector(config).detect(snapshot, now)

        assert len(candidates) == 1
        assert candidates[0].severity == InsightSeverity.WARNING
        assert candidates[0].params["rate"] == 20

    def test_exactly_half_does_not_fire(self, config, now, make_task, at):
        snapshot = InsightSnapshot(tasks=self._tasks(make_task, at, done=3, todo=3))

        assert CompletionRateLowDetector(config).detect(snapshot, now) == []

    def test_small_sample_does_not_fire(self, config, now, make_task, at):
        snapshot = InsightSnapshot(tasks=self._tasks(make_task, at, done=0, todo=4))

        assert CompletionRateLowDetector(config).detect(snapshot, now) == []

    def test_old_tasks_are_outside_window(self, config, now, make_task, at):
        snapshot = InsightSnapshot(tasks=self._tasks(make_task, at, done=0, todo=6, created_days_ago=40))

        assert CompletionRateLowDetector(config).detect(snapshot, now) == []

    def test_tasks_without_created_at_are_excluded(self, config, now, make_task):
        snapshot = InsightSnapshot(tasks=[make_task() for _ in range(6)])

        assert CompletionRateLowDetector(config).detect(snapshot, now) == []

    def test_doing_counts_as_active(self, config, now, make_task, at):
        tasks = [make_task(status=TaskStatus.DOING, created_at=at(-1)) for _ in range(5)]

        candidates = CompletionRateLowDetector(config).detect(InsightSnapshot(tasks=tasks), now)

        assert candidates[0].params["rate"] == 0


# =============================================================================
# No events this week
# =============================================================================


class TestNoEventsThisWeekDetector:

    def test_fires_with_history_and_empty_week(self, config, now, make_event, at):
        snapshot = InsightSnapshot(events=[make_event(at(-7))])

        candidates = NoEventsThisWeekDetector(config).detect(snapshot, now)

        assert len(candidates) == 1
        assert candidates[0].severity == InsightSeverity.INFO
        assert candidates[0].params["week_start"] == "2026-10-19"

    def test_event_later_this_week_suppresses(self, config, now, make_event, at):
        snapshot = InsightSnapshot(events=[make_event(at(-7)), make_event(at(1))])

        assert NoEventsThisWeekDetector(config).detect(snapshot, now) == []

    def test_event_on_monday_suppresses(self, config, now, make_event, at):
        snapshot = InsightSnapshot(events=[make_event(at(-7)), make_event(at(-2))])

        assert NoEventsThisWeekDetector(config).detect(snapshot, now) == []

    def test_brand_new_account_does_not_fire(self, config, now):
        assert NoEventsThisWeekDetector(config).detect(InsightSnapshot(), now) == []

    def test_only_future_events_do_not_fire(self, config, now, make_event, at):
        snapshot = InsightSnapshot(events=[make_event(at(10))])

        assert NoEventsThisWeekDetector(config).detect(snapshot, now) == []

    def test_week_start_day_is_configurable(self, now, make_event, at):
        sunday_event = InsightSnapshot(events=[make_event(at(-3))])

        monday_weeks = NoEventsThisWeekDetector(InsightConfig())
        sunday_weeks = NoEventsThisWeekDetector(InsightConfig(week_start_day=6))

        assert len(monday_weeks.detect(sunday_event, now)) == 1
        assert sunday_weeks.detect(sunday_event, now) == []


# =============================================================================
# Creator at risk
# =============================================================================


class TestCreatorAtRiskDetector:

    def test_fires_for_overdue_creator_with_no_completions(self, config, now, at_risk_creator):
        snapshot = at_risk_creator.to_snapshot()
        detector = CreatorAtRiskDetector(config)

        assert detector.applies_to(snapshot)
        candidates = detector.detect(snapshot, now)

        assert len(candidates) == 1
        assert candidates[0].severity == InsightSeverity.RISK
        assert candidates[0].creator_name == "Dana"
        assert candidates[0].params["signals"][:2] == ["overdue", "low_completion"]
        assert candidates[0].insight_id == "creator_at_risk:creator-1"

    def test_single_signal_does_not_fire(self, config, now, make_task, at):
        creator = CreatorSnapshot(
            id="creator-2",
            name="Noa",
            tasks=[make_task(due_date=at(-1))] + [make_task(status=TaskStatus.DONE) for _ in range(3)],
        )

        assert CreatorAtRiskDetector(config).detect(creator.to_snapshot(), now) == []

    def test_idle_and_low_completion_fire(self, config, now, make_task, make_event, at):
        creator = CreatorSnapshot(
            id="creator-3",
            name="Yael",
            tasks=[make_task() for _ in range(5)],
            events=[make_event(at(-20))],
        )

        candidates = CreatorAtRiskDetector(config).detect(creator.to_snapshot(), now)

        assert len(candidates) == 1
        assert candidates[0].params["signals"] == ["low_completion", "idle"]

    def test_low_completion_needs_minimum_sample(self, config, now, make_task, at):
        # One overdue task is also 0% completion, but too few tasks to rate
        creator = CreatorSnapshot(id="creator-4", name="Lior", tasks=[make_task(due_date=at(-1))])

        assert CreatorAtRiskDetector(config).detect(creator.to_snapshot(), now) == []

    def test_all_overdue_and_nothing_done_is_risk(self, config, now, make_task, at):
        creator = CreatorSnapshot(
            id="creator-5",
            name="Maya",
            tasks=[make_task(due_date=at(-1)) for _ in range(config.thresholds.completion_min_tasks)],
        )

        candidates = CreatorAtRiskDetector(config).detect(creator.to_snapshot(), now)

        assert candidates[0].severity == InsightSeverity.RISK
        assert candidates[0].params["completion_rate"] == 0
        assert candidates[0].creator_name == "Maya"

    def test_not_applicable_outside_agency_scope(self, config, at_risk_creator):
        detector = CreatorAtRiskDetector(config)
        creator_scope = InsightSnapshot(tasks=at_risk_creator.tasks)
        unnamed_agency = InsightSnapshot(tasks=at_risk_creator.tasks, scope=InsightScope.AGENCY)

        assert not detector.applies_to(creator_scope)
        assert not detector.applies_to(unnamed_agency)


# =============================================================================
# Agency performance
# =============================================================================


class TestAgencyPerformanceUpDetector:

    def _tasks(self, make_task, at, done, todo, created_days_ago):
        created = at(-created_days_ago)
        return (
            [make_task(status=TaskStatus.DONE, created_at=created) for _ in range(done)]
            + [make_task(created_at=created) for _ in range(todo)]
        )

    def _agency(self, tasks):
        return InsightSnapshot(tasks=tasks, scope=InsightScope.AGENCY)

    def test_fires_on_improvement(self, config, now, make_task, at):
        tasks = self._tasks(make_task, at, done=4, todo=1, created_days_ago=5)
        tasks += self._tasks(make_task, at, done=2, todo=3, created_days_ago=40)

        candidates = AgencyPerformanceUpDetector(config).detect(self._agency(tasks), now)

        assert len(candidates) == 1
        assert candidates[0].severity == InsightSeverity.INFO
        assert candidates[0].params["current_rate"] == 80
        assert candidates[0].params["previous_rate"] == 40

    def test_missing_prior_period_does_not_fire(self, config, now, make_task, at):
        tasks = self._tasks(make_task, at, done=5, todo=0, created_days_ago=5)
        tasks += self._tasks(make_task, at, done=0, todo=4, created_days_ago=40)

        assert AgencyPerformanceUpDetector(config).detect(self._agency(tasks), now) == []

    def test_flat_performance_does_not_fire(self, config, now, make_task, at):
        tasks = self._tasks(make_task, at, done=3, todo=2, created_days_ago=5)
        tasks += self._tasks(make_task, at, done=3, todo=2, created_days_ago=40)

        assert AgencyPerformanceUpDetector(config).detect(self._agency(tasks), now) == []

    def test_only_applies_to_agency_scope(self, config):
        detector = AgencyPerformanceUpDetector(config)

        assert detector.agency_wide
        assert not detector.applies_to(InsightSnapshot())
        assert detector.applies_to(InsightSnapshot(scope=InsightScope.AGENCY))


@pytest.mark.parametrize("detector_cls", [
    OverdueTasksDetector,
    HeavyDaysStreakDetector,
    CompanyConcentrationDetector,
    CompletionRateLowDetector,
    NoEventsThisWeekDetector,
    CreatorAtRiskDetector,
    AgencyPerformanceUpDetector,
])
def test_detectors_return_nothing_for_empty_snapshot(detector_cls, config, now):
    snapshot = InsightSnapshot(
        tasks=[],
        events=[],
        companies=[CompanyRef(id="acme", name="Acme")],
        scope=InsightScope.AGENCY,
        creator_name="Dana",
    )
    assert detector_cls(config).detect(snapshot, now) == []
