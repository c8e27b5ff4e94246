"""
Formula-focused unit tests for the analytics engines.

Each test checks one rule of the stats, coverage, weekly goal,
insights or progressive overload engine against hand-computed values.
Sessions are built directly from the dataclasses; no catalog or YAML
is involved.
"""

from datetime import datetime, timedelta

import pytest

from fitness_tracker.core.ascii_plot import create_weekly_volume_chart, render_bars
from fitness_tracker.core.config import COVERED_THRESHOLD, TARGET_SCORE_PER_REGION, clamp_rest_seconds
from fitness_tracker.core.coverage import build_report, keyword_region_roles
from fitness_tracker.core.insights import tips
from fitness_tracker.core.models import (
    Exercise,
    LoggedExercise,
    LoggedSet,
    MuscleGroup,
    MuscleMap,
    MuscleRegion,
    WorkoutSession,
    WorkoutType,
)
from fitness_tracker.core.overload import (
    estimate_one_rm,
    round_to_nearest_5,
    suggested_increment,
    suggestion,
    suggestion_from_history,
    working_set_history,
)
from fitness_tracker.core.stats import (
    consistency_last_7_days,
    estimated_one_rep_max,
    exercise_volume,
    round_half_away,
    split_distribution,
    strength_delta_this_week,
    today_volume,
    total_session_volume,
)
from fitness_tracker.core.weekly_goal import (
    WeeklyConsistencySummary,
    completed_sessions_this_week,
    remaining_sessions,
    week_interval,
    weekly_consistency,
)

# ---------------------------------------------------------------------------
# Shared helpers
# ---------------------------------------------------------------------------

NOW = datetime(2026, 2, 18, 12, 0)  # Wednesday


def _group(name: str, regions: list[str]) -> MuscleGroup:
    gid = name.lower()
    return MuscleGroup(
        id=gid,
        name=name,
        regions=[MuscleRegion(id=f"{gid}.{r.lower()}", name=r, group_id=gid) for r in regions],
    )


def _push_split() -> WorkoutType:
    return WorkoutType(
        id="push",
        name="Push",
        muscle_groups=[
            _group("Chest", ["Upper", "Mid", "Lower"]),
            _group("Triceps", ["Long", "Lateral", "Medial"]),
            _group("Shoulders", ["Anterior", "Lateral", "Posterior"]),
        ],
    )


def _exercise(name: str, category: str = "Chest", **roles: str) -> Exercise:
    """_exercise("Bench", chest_mid="primary") maps region 'chest.mid'."""
    maps = [MuscleMap(region_id=k.replace("_", "."), role=v) for k, v in roles.items()]
    return Exercise(id=name.lower().replace(" ", "_"), name=name, category=category, muscle_maps=maps)


def _sets(pairs: list[tuple[int, float]], warmup: int = 0, start: datetime = NOW) -> list[LoggedSet]:
    out = [LoggedSet(reps=10, weight=20.0, is_warmup=True, created_at=start) for _ in range(warmup)]
    for i, (reps, weight) in enumerate(pairs):
        out.append(LoggedSet(reps=reps, weight=weight, created_at=start + timedelta(minutes=i + 1)))
    return out


def _session(
    started_at: datetime,
    entries: list[tuple[Exercise, list[LoggedSet]]] = (),
    split: WorkoutType | None = None,
    ended: bool = True,
) -> WorkoutSession:
    return WorkoutSession(
        started_at=started_at,
        ended_at=started_at + timedelta(hours=1) if ended else None,
        workout_type=split,
        logged_exercises=[
            LoggedExercise(order_index=i, exercise=ex, sets=sets) for i, (ex, sets) in enumerate(entries)
        ],
    )


BENCH = _exercise(
    "Barbell Bench Press",
    chest_mid="primary",
    chest_upper="secondary",
    shoulders_anterior="secondary",
    triceps_lateral="secondary",
)
LATERAL_RAISE = _exercise("Lateral Raise", category="Shoulders", shoulders_lateral="primary")
SQUAT = _exercise("Back Squat", category="Legs", legs_quads="primary")


def _region(report, region_id: str):
    for g in report.groups:
        for r in g.regions:
            if r.id == region_id:
                return r
    raise KeyError(region_id)


# ===========================================================================
# Stats
# ===========================================================================


class TestStats:
    def test_epley(self):
        assert estimated_one_rep_max(100, 10) == pytest.approx(133.3333, rel=1e-4)
        assert estimated_one_rep_max(135, 1) == pytest.approx(139.5)

    def test_epley_zero_reps(self):
        assert estimated_one_rep_max(100, 0) == 0.0

    def test_volume_ignores_warmups(self):
        logged = LoggedExercise(order_index=0, exercise=BENCH, sets=_sets([(8, 100), (6, 100)], warmup=2))
        assert exercise_volume(logged) == 1400

    def test_session_volume(self):
        s = _session(NOW, [(BENCH, _sets([(10, 100)])), (LATERAL_RAISE, _sets([(12, 10)]))])
        assert total_session_volume(s) == 1120

    def test_session_volume_empty(self):
        assert total_session_volume(_session(NOW)) == 0.0

    def test_round_half_away(self):
        assert round_half_away(2.5) == 3
        assert round_half_away(3.5) == 4
        assert round_half_away(-2.5) == -3
        assert round_half_away(2.4) == 2

    def test_today_volume(self):
        sessions = [
            _session(NOW.replace(hour=8), [(BENCH, _sets([(10, 100)]))]),
            _session(NOW - timedelta(days=1), [(BENCH, _sets([(10, 200)]))]),
        ]
        assert today_volume(sessions, NOW) == 1000

    def test_split_distribution_ties_by_name(self):
        push = _push_split()
        pull = WorkoutType(id="pull", name="Pull")
        sessions = [
            _session(NOW - timedelta(days=3), split=push),
            _session(NOW - timedelta(days=2), split=pull),
            _session(NOW - timedelta(days=1), split=push),
            _session(NOW, split=pull),
        ]
        assert split_distribution(sessions) == [("Pull", 2), ("Push", 2)]

    def test_split_distribution_limit(self):
        push = _push_split()
        pull = WorkoutType(id="pull", name="Pull")
        sessions = [_session(NOW - timedelta(days=10), split=pull)] + [
            _session(NOW - timedelta(days=i), split=push) for i in range(2)
        ]
        assert split_distribution(sessions, limit=2) == [("Push", 2)]

    def test_strength_delta(self):
        sessions = [
            _session(NOW - timedelta(days=10), [(BENCH, _sets([(10, 100)]))]),
            _session(NOW - timedelta(days=1), [(BENCH, _sets([(10, 110)]))]),
        ]
        assert strength_delta_this_week(sessions, NOW) == pytest.approx(10.0)

    def test_strength_delta_not_enough_data(self):
        assert strength_delta_this_week([_session(NOW, [(BENCH, _sets([(5, 100)]))])], NOW) == 0.0

    def test_consistency_last_7_days(self):
        sessions = [_session(NOW), _session(NOW - timedelta(days=3))]
        assert consistency_last_7_days(sessions, NOW) == [False, False, False, True, False, False, True]


# ===========================================================================
# Coverage
# ===========================================================================


class TestCoverage:
    def test_empty_session_all_zero(self):
        report = build_report(_session(NOW), _push_split())
        assert [g.name for g in report.groups] == ["Chest", "Triceps", "Shoulders"]
        assert all(r.progress == 0.0 and not r.touched for g in report.groups for r in g.regions)
        assert report.overall_progress == 0.0

    def test_warmups_only_score_zero(self):
        s = _session(NOW, [(BENCH, _sets([], warmup=5))])
        report = build_report(s, _push_split())
        assert _region(report, "chest.mid").score == 0.0
        assert not _region(report, "chest.mid").touched
        assert all(g.touched_regions == 0 for g in report.groups)

    def test_primary_set_weight(self):
        s = _session(NOW, [(BENCH, _sets([(8, 100)] * 2))])
        region = _region(build_report(s, _push_split()), "chest.mid")
        assert region.score == 2.0
        assert region.working_set_count == 2
        assert region.progress == pytest.approx(2.0 / TARGET_SCORE_PER_REGION)

    def test_secondary_set_weight(self):
        s = _session(NOW, [(BENCH, _sets([(8, 100)] * 2))])
        region = _region(build_report(s, _push_split()), "chest.upper")
        assert region.score == 1.0
        assert region.progress == pytest.approx(0.25)
        assert region.contributing_exercises == ["Barbell Bench Press"]

    def test_progress_clamped(self):
        s = _session(NOW, [(BENCH, _sets([(8, 100)] * 10))])
        region = _region(build_report(s, _push_split()), "chest.mid")
        assert region.score == 10.0
        assert region.progress == 1.0

    def test_covered_threshold(self):
        three = _session(NOW, [(BENCH, _sets([(8, 100)] * 3))])
        two = _session(NOW, [(BENCH, _sets([(8, 100)] * 2))])
        assert _region(build_report(three, _push_split()), "chest.mid").progress == COVERED_THRESHOLD
        assert _region(build_report(three, _push_split()), "chest.mid").is_covered
        assert not _region(build_report(two, _push_split()), "chest.mid").is_covered

    def test_group_progress_is_mean(self):
        s = _session(NOW, [(BENCH, _sets([(8, 100)] * 4))])
        chest = build_report(s, _push_split()).groups[0]
        # mid 1.0, upper 4*0.5/4 = 0.5, lower 0
        assert chest.progress == pytest.approx(0.5)
        assert chest.touched_regions == 1
        assert chest.total_regions == 3

    def test_region_outside_split_ignored(self):
        s = _session(NOW, [(SQUAT, _sets([(5, 200)] * 5))])
        report = build_report(s, _push_split())
        assert report.overall_progress == 0.0

    def test_adding_set_never_decreases(self):
        split = _push_split()
        logged = LoggedExercise(order_index=0, exercise=BENCH)
        s = WorkoutSession(started_at=NOW, workout_type=split, logged_exercises=[logged])
        previous = {r.id: 0.0 for g in split.muscle_groups for r in g.regions}
        for i in range(8):
            logged.sets.append(LoggedSet(reps=8, weight=100, created_at=NOW + timedelta(minutes=i)))
            report = build_report(s, split)
            for g in report.groups:
                for r in g.regions:
                    assert r.progress >= previous[r.id]
                    previous[r.id] = r.progress

    def test_same_exercise_twice_counts_both(self):
        s = _session(NOW, [(BENCH, _sets([(8, 100)])), (BENCH, _sets([(8, 100)]))])
        assert _region(build_report(s, _push_split()), "chest.mid").score == 2.0

    def test_keyword_fallback_off_by_default(self):
        unmapped = Exercise(id="cable_lateral_raise", name="Cable Lateral Raise")
        s = _session(NOW, [(unmapped, _sets([(12, 10)] * 4))])
        assert not _region(build_report(s, _push_split()), "shoulders.lateral").touched

    def test_keyword_fallback(self):
        unmapped = Exercise(id="cable_lateral_raise", name="Cable Lateral Raise")
        s = _session(NOW, [(unmapped, _sets([(12, 10)] * 4))])
        report = build_report(s, _push_split(), use_keyword_fallback=True)
        assert _region(report, "shoulders.lateral").progress == 1.0
        assert _region(report, "chest.mid").score == 0.0

    def test_keyword_fallback_not_used_for_mapped(self):
        # Curated map wins even when the name would match other regions.
        roles = keyword_region_roles(LATERAL_RAISE, _push_split())
        assert "triceps.lateral" in roles
        s = _session(NOW, [(LATERAL_RAISE, _sets([(12, 10)] * 4))])
        report = build_report(s, _push_split(), use_keyword_fallback=True)
        assert _region(report, "triceps.lateral").score == 0.0


# ===========================================================================
# Weekly goal
# ===========================================================================


class TestWeeklyGoal:
    def test_week_interval_monday(self):
        start, end = week_interval(NOW, first_weekday=0)
        assert start == datetime(2026, 2, 16)
        assert end == datetime(2026, 2, 23)

    def test_week_interval_sunday(self):
        start, _ = week_interval(NOW, first_weekday=6)
        assert start == datetime(2026, 2, 15)

    def test_week_interval_invalid(self):
        with pytest.raises(ValueError):
            week_interval(NOW, first_weekday=7)

    def test_completed_this_week(self):
        sessions = [
            _session(datetime(2026, 2, 15, 10)),          # Sunday
            _session(datetime(2026, 2, 16, 8)),           # Monday
            _session(datetime(2026, 2, 18, 9), ended=False),
            _session(datetime(2026, 2, 23, 0)),           # next Monday
        ]
        assert completed_sessions_this_week(sessions, NOW, first_weekday=0) == 2
        assert completed_sessions_this_week(sessions, NOW, first_weekday=6) == 3

    def test_remaining(self):
        assert remaining_sessions(4, 1) == 3
        assert remaining_sessions(4, 6) == 0
        assert remaining_sessions(3, 5) == 0
        assert remaining_sessions(5, 2) == 3

    def test_progress_clamped(self):
        assert WeeklyConsistencySummary(completed=6, target=4).progress == 1.0
        assert WeeklyConsistencySummary(completed=1, target=4).progress == 0.25

    def test_target_zero(self):
        summary = weekly_consistency([_session(NOW)], target=0, reference_date=NOW)
        assert summary.progress == 0.0
        assert summary.remaining == 0


# ===========================================================================
# Insights
# ===========================================================================


class TestInsights:
    def test_empty_history_baseline_only(self):
        items = tips([], reference_date=NOW)
        assert [t.title for t in items] == ["Start Your Baseline"]

    def test_consistency_opportunity(self):
        items = tips([_session(NOW, [(BENCH, _sets([(10, 100)]))])], target=4, reference_date=NOW)
        assert [t.kind for t in items] == ["consistency", "volume"]
        assert items[0].title == "Consistency Opportunity"
        assert "1/4" in items[0].message

    def test_consistency_strong(self):
        items = tips([_session(NOW)], target=1, reference_date=NOW)
        assert items[0].title == "Consistency Strong"

    def test_no_volume_tip_without_working_sets(self):
        items = tips([_session(NOW, [(BENCH, _sets([], warmup=3))])], target=4, reference_date=NOW)
        assert [t.kind for t in items] == ["consistency"]

    def test_volume_average_rounded_half_up(self):
        sessions = [
            _session(NOW - timedelta(days=1), [(BENCH, _sets([(1, 100)]))]),
            _session(NOW, [(BENCH, _sets([(1, 101)]))]),
        ]
        volume_tip = [t for t in tips(sessions, reference_date=NOW) if t.kind == "volume"][0]
        assert "is 101." in volume_tip.message

    def test_volume_uses_last_four_sessions(self):
        sessions = [_session(NOW - timedelta(days=10), [(BENCH, _sets([(1, 1000)]))])] + [
            _session(NOW - timedelta(hours=i), [(BENCH, _sets([(1, 100)]))]) for i in range(4)
        ]
        volume_tip = [t for t in tips(sessions, reference_date=NOW) if t.kind == "volume"][0]
        assert "is 100." in volume_tip.message

    def test_hygiene_last(self):
        sessions = [_session(NOW - timedelta(days=1)), _session(NOW, ended=False)]
        items = tips(sessions, reference_date=NOW)
        assert items[-1].kind == "hygiene"
        assert items[-1].title == "Session Hygiene"


# ===========================================================================
# Progressive overload
# ===========================================================================


class TestOverload:
    def test_below_rep_goal_add_reps(self):
        latest = LoggedSet(reps=8, weight=135)
        result = suggestion(BENCH, latest)
        assert result.action == "add_reps"
        assert result.target_reps == 9
        assert result.target_weight == 135
        assert result.message == (
            "Last set was 8x135. Keep the same weight and aim for 9 reps next set."
        )

    def test_at_rep_goal_add_weight(self):
        latest = LoggedSet(reps=12, weight=135)
        result = suggestion(BENCH, latest)
        assert result.action == "add_weight"
        assert result.target_weight == 140
        assert result.target_reps is None
        assert result.message == (
            "You hit 12 reps at 135. Increase to ~140 and work back up from 6-8 reps."
        )

    def test_legs_use_large_increment(self):
        assert suggestion(SQUAT, LoggedSet(reps=10, weight=135)).target_weight == 145

    def test_increment_by_category(self):
        assert suggested_increment(SQUAT) == 10
        assert suggested_increment(_exercise("Row", category="Upper Back")) == 10
        assert suggested_increment(LATERAL_RAISE) == 5
        assert suggested_increment(None) == 5

    def test_no_history_no_suggestion(self):
        assert suggestion(BENCH, None) is None

    def test_round_to_nearest_5(self):
        assert round_to_nearest_5(132.4) == 130
        assert round_to_nearest_5(137.5) == 140
        assert round_to_nearest_5(142.6) == 145

    def test_round_to_nearest_5_idempotent(self):
        for value in (0.0, 12.3, 97.5, 133.3, 401.0):
            once = round_to_nearest_5(value)
            assert round_to_nearest_5(once) == once

    def test_estimate_one_rm_skips_invalid(self):
        sets = [
            LoggedSet(reps=10, weight=200, is_warmup=True),
            LoggedSet(reps=10, weight=0),
            LoggedSet(reps=0, weight=200),
            LoggedSet(reps=10, weight=100),
        ]
        assert estimate_one_rm(sets) == pytest.approx(133.3333, rel=1e-4)
        assert estimate_one_rm(sets[:3]) is None

    def test_recommendations(self):
        result = suggestion(BENCH, LoggedSet(reps=10, weight=100))
        # e1RM 133.33 → 5: 114.3 → 115, 8: 105.3 → 105, 10: 100
        assert [(r.reps, r.weight) for r in result.recommendations] == [(5, 115), (8, 105), (10, 100)]

    def test_recommendations_use_best_recent_set(self):
        result = suggestion(BENCH, LoggedSet(reps=5, weight=80), [LoggedSet(reps=10, weight=100)])
        assert result.estimated_one_rm == pytest.approx(133.3333, rel=1e-4)
        assert result.target_reps == 6

    def test_working_set_history_order_and_limit(self):
        old = _session(NOW - timedelta(days=2), [(BENCH, _sets([(5, 90), (5, 95)], start=NOW - timedelta(days=2)))])
        new = _session(NOW, [(BENCH, _sets([(6, 100)], warmup=1)), (LATERAL_RAISE, _sets([(12, 10)]))])
        history = working_set_history([new, old], BENCH.id, limit=2)
        assert [(s.reps, s.weight) for s in history] == [(5, 95), (6, 100)]

    def test_suggestion_from_history(self):
        sessions = [_session(NOW, [(BENCH, _sets([(10, 100), (8, 100)]))])]
        result = suggestion_from_history(BENCH, sessions)
        assert result.target_reps == 9
        assert result.estimated_one_rm == pytest.approx(133.3333, rel=1e-4)

    def test_suggestion_from_empty_history(self):
        assert suggestion_from_history(BENCH, []) is None


class TestRestTimer:
    def test_clamp(self):
        assert clamp_rest_seconds(10) == 30
        assert clamp_rest_seconds(90) == 90
        assert clamp_rest_seconds(1000) == 300


# ===========================================================================
# Charts
# ===========================================================================


class TestCharts:
    def test_render_bars_scales_to_peak(self):
        chart = render_bars([("a", 50.0), ("bb", 100.0), ("c", 0.0)], width=10, title="Volume")
        lines = chart.splitlines()
        assert lines[:2] == ["Volume", "======"]
        assert lines[2] == "a  | █████ 50"
        assert lines[3] == "bb | ██████████ 100"
        assert lines[4] == "c  |  0"

    def test_render_bars_empty(self):
        assert render_bars([], empty_message="nothing") == "nothing"

    def test_render_bars_fractional_values(self):
        assert render_bars([("x", 102.5)], width=4) == "x | ████ 102.5"

    def test_weekly_volume_uses_calendar_weeks(self):
        sessions = [
            _session(datetime(2026, 2, 9, 0), [(BENCH, _sets([(10, 10)]))]),    # Monday, last week
            _session(datetime(2026, 2, 15, 10), [(BENCH, _sets([(5, 100)]))]),  # Sunday, last week
            _session(datetime(2026, 2, 16, 8), [(BENCH, _sets([(10, 100)]))]),  # Monday, this week
            _session(datetime(2026, 2, 23, 9), [(BENCH, _sets([(10, 500)]))]),  # next week
        ]
        lines = create_weekly_volume_chart(sessions, weeks=3, now=NOW).splitlines()
        assert lines[2].startswith("2 weeks ago") and lines[2].endswith(" 0")
        assert lines[3].startswith("Last week") and lines[3].endswith(" 600")
        assert lines[4].startswith("This week") and lines[4].endswith(" 1,000")

    def test_weekly_volume_first_weekday(self):
        sessions = [
            _session(datetime(2026, 2, 9, 0), [(BENCH, _sets([(10, 10)]))]),
            _session(datetime(2026, 2, 15, 10), [(BENCH, _sets([(5, 100)]))]),
            _session(datetime(2026, 2, 16, 8), [(BENCH, _sets([(10, 100)]))]),
        ]
        lines = create_weekly_volume_chart(sessions, weeks=2, now=NOW, first_weekday=6).splitlines()
        assert lines[2].startswith("Last week") and lines[2].endswith(" 100")
        assert lines[3].startswith("This week") and lines[3].endswith(" 1,500")

    def test_weekly_volume_no_history(self):
        assert create_weekly_volume_chart([], now=NOW) == "No training history."
