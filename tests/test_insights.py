import pytest

from clarity.analytics.insights import (
    analyze_caffeine,
    analyze_chronotype,
    analyze_factor,
    analyze_paired_factors,
    analyze_sleep,
    analyze_stress,
)
from clarity.analytics.engine import is_poor_sleep
from clarity.schemas.analytics import BaselineComparisonData, InsightType, SleepImpactData

from conftest import make_ema, make_session


def sleep_data(diff, enough=True):
    return SleepImpactData(performance_difference=diff, has_enough_data=enough)


def stress_data(diff, enough=True):
    return BaselineComparisonData(performance_difference=diff, has_enough_data=enough)


class TestSummaryAnalyzers:

    def test_sleep_power(self):
        insight = analyze_sleep(sleep_data(12.4))
        assert insight.title == "Sleep Power"
        assert insight.type == InsightType.POSITIVE
        assert "~12% better" in insight.description
        assert insight.score == pytest.approx(0.124)

    def test_sleep_consistency_band(self):
        assert analyze_sleep(sleep_data(5.0)).title == "Sleep Consistency"
        assert analyze_sleep(sleep_data(-5.0)).type == InsightType.NEUTRAL

    def test_sleep_inverse_and_insufficient(self):
        assert analyze_sleep(sleep_data(-5.1)) is None
        assert analyze_sleep(sleep_data(30.0, enough=False)) is None

    @pytest.mark.parametrize("hour, title", [
        (5, "Morning Lark"), (11, "Morning Lark"), (12, "Afternoon Peak"),
        (17, "Afternoon Peak"), (18, "Night Owl"), (4, "Night Owl"),
    ])
    def test_chronotype(self, hour, title):
        assert analyze_chronotype(hour).title == title

    def test_chronotype_needs_peak(self):
        assert analyze_chronotype(None) is None

    def test_stress(self):
        assert analyze_stress(stress_data(10.5)).type == InsightType.WARNING
        assert analyze_stress(stress_data(10.0)) is None
        assert analyze_stress(stress_data(-6.0)).title == "Pressure Performer"
        assert analyze_stress(stress_data(-5.0)) is None
        assert analyze_stress(stress_data(50.0, enough=False)) is None


def _pairs(ema, scores, **session_fields):
    return [(make_session(ema_id=ema.id, score=s, **session_fields), ema) for s in scores]


class TestPairedAnalyzers:

    def test_factor_impact(self):
        rested, tired = make_ema(sleep_hours=8.0), make_ema(sleep_hours=5.0)
        pairs = _pairs(rested, [80, 80]) + _pairs(tired, [60, 60])

        insight = analyze_factor(pairs, "Sleep", is_poor_sleep, "rested", "tired")

        assert insight.title == "Sleep Impacts Performance"
        assert insight.description.startswith("You perform 25% better when you are rested")

    def test_factor_surprising_pattern(self):
        rested, tired = make_ema(sleep_hours=8.0), make_ema(sleep_hours=5.0)
        pairs = _pairs(rested, [50, 50]) + _pairs(tired, [70, 70])

        insight = analyze_factor(pairs, "Sleep", is_poor_sleep, "rested", "tired")

        assert insight.title == "Surprising Sleep Pattern"
        assert "40% better when tired" in insight.description

    def test_factor_needs_two_each_and_a_real_gap(self):
        rested, tired = make_ema(sleep_hours=8.0), make_ema(sleep_hours=5.0)
        assert analyze_factor(_pairs(rested, [80, 80]) + _pairs(tired, [10]), "Sleep", is_poor_sleep, "a", "b") is None
        assert analyze_factor(_pairs(rested, [80, 80]) + _pairs(tired, [75, 75]), "Sleep", is_poor_sleep, "a", "b") is None

    def test_caffeine_boost(self):
        coffee, plain = make_ema(caffeine_recent=True), make_ema(caffeine_recent=False)
        pairs = _pairs(coffee, [70, 70], reaction_time_ms=360) + _pairs(plain, [70, 70], reaction_time_ms=400)

        insight = analyze_caffeine(pairs)

        assert insight.title == "Caffeine Boost"
        assert "10.0% faster" in insight.description

    def test_caffeine_without_reaction_times(self):
        coffee, plain = make_ema(caffeine_recent=True), make_ema(caffeine_recent=False)
        pairs = _pairs(coffee, [70, 70]) + _pairs(plain, [70, 70], reaction_time_ms=400)
        assert analyze_caffeine(pairs) is None

    def test_paired_factors_collects_all(self):
        calm_coffee = make_ema(sleep_hours=8.0, caffeine_recent=True)
        stressed_tired = make_ema(sleep_hours=5.0, anxiety=5)
        pairs = (
            _pairs(calm_coffee, [90, 90], reaction_time_ms=300)
            + _pairs(stressed_tired, [50, 50], reaction_time_ms=400)
        )
        titles = [insight.title for insight in analyze_paired_factors(pairs)]
        assert titles == ["Sleep Impacts Performance", "Stress Impacts Performance", "Caffeine Boost"]
