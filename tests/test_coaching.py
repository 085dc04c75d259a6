import pytest

from clarity.analytics.coaching import coach_insight_generator, format_hour
from clarity.schemas.report import CircadianProfile, ErrorAnalysis, MoodStats, SleepStats


def sleep_stats(avg_hours=6.5, avg_quality=3.0, impact=0.0):
    return SleepStats(
        avg_hours=avg_hours, min_hours=avg_hours, max_hours=avg_hours,
        avg_quality=avg_quality, impact_on_performance=impact,
        quality_interpretation="Good sleep quality",
    )


def mood_stats(anxiety=2.0, sadness=2.0):
    return MoodStats(
        avg_happiness=3.0, avg_anxiety=anxiety, avg_sadness=sadness, avg_anger=1.0,
        interpretation="Stable neutral mood",
    )


def circadian(peak_hour=14):
    return CircadianProfile(
        peak_hour=peak_hour, peak_accuracy=90.0, lowest_hour=8, lowest_accuracy=60.0,
        recommendation="",
    )


def errors(omission=0, commission=0):
    return ErrorAnalysis(
        total_omission_errors=omission, total_commission_errors=commission,
        omission_when_tired=omission, commission_when_stressed=commission,
        omission_trend="", commission_trend="",
    )


def generate(**overrides):
    args = dict(
        sleep_stats=sleep_stats(),
        mood_stats=mood_stats(),
        circadian_profile=circadian(),
        error_analysis=errors(),
        improvement_percent=0.0,
        weakest_game=None,
        fatigue_detected=False,
    )
    args.update(overrides)
    return coach_insight_generator.generate(**args)


@pytest.mark.parametrize("hour, label", [
    (0, "12 AM"), (1, "1 AM"), (11, "11 AM"), (12, "12 PM"), (13, "1 PM"),
    (23, "11 PM"), (24, "12 AM"), (-1, "11 PM"),
])
def test_format_hour(hour, label):
    assert format_hour(hour) == label


class TestSleepRule:

    def test_short_sleep_scales_with_deficit(self):
        messages = generate(sleep_stats=sleep_stats(avg_hours=4.5))
        assert messages[0] == "💤 Sleep opportunity: Getting 7-8 hours could improve performance by ~5%"

    def test_great_sleep_needs_hours_and_quality(self):
        messages = generate(sleep_stats=sleep_stats(avg_hours=7.0, avg_quality=3.5))
        assert messages[0] == "✅ Great sleep habits! Your 7h average supports optimal cognitive function"

        messages = generate(sleep_stats=sleep_stats(avg_hours=7.0, avg_quality=3.4))
        assert not messages[0].startswith("✅")

    def test_middle_band_has_no_sleep_message(self):
        messages = generate(sleep_stats=sleep_stats(avg_hours=6.0))
        assert messages[0].startswith("☀️")


class TestPeakTimeRule:

    def test_morning(self):
        assert generate(circadian_profile=circadian(6))[0] == (
            "🌅 Morning person detected! Schedule important tasks between 5 AM - 8 AM"
        )
        assert "10 AM - 1 PM" in generate(circadian_profile=circadian(11))[0]

    def test_afternoon(self):
        assert generate(circadian_profile=circadian(12))[0] == (
            "☀️ Afternoon peak: Your best performance is around 12 PM. Plan challenging work then"
        )

    def test_evening_and_night(self):
        assert generate(circadian_profile=circadian(18))[0].startswith("🌙 Evening performer: You're sharpest around 6 PM")
        assert "12 AM" in generate(circadian_profile=circadian(0))[0]


class TestStressRule:

    def test_anxiety_threshold(self):
        messages = generate(mood_stats=mood_stats(anxiety=3.5), sleep_stats=sleep_stats(impact=-12.4))
        assert "🧘 Elevated stress detected (12% performance impact). Deep breathing before sessions may help" in messages

    def test_sadness_threshold(self):
        assert any(m.startswith("🧘") for m in generate(mood_stats=mood_stats(sadness=3.5)))

    def test_below_threshold(self):
        assert not any(m.startswith("🧘") for m in generate(mood_stats=mood_stats(anxiety=3.49, sadness=3.49)))


class TestImprovementRule:

    @pytest.mark.parametrize("percent, prefix", [
        (10.0, "🚀 Outstanding progress! 10% improvement"),
        (9.99, "📈 Great momentum! 10% improvement"),
        (5.0, "📈 Great momentum! 5% improvement"),
        (-5.01, "💡 Recent dip in scores"),
    ])
    def test_message_bands(self, percent, prefix):
        assert any(m.startswith(prefix) for m in generate(improvement_percent=percent))

    @pytest.mark.parametrize("percent", [4.99, 0.0, -5.0])
    def test_quiet_band(self, percent):
        messages = generate(improvement_percent=percent)
        assert not any(m[0] in "🚀📈💡" for m in messages)


class TestErrorRules:

    def test_more_than_three_required(self):
        assert len(generate(error_analysis=errors(omission=3, commission=3))) == 1

        messages = generate(error_analysis=errors(omission=4, commission=4))
        assert messages[-2].startswith("😴 Omission errors increase when tired")
        assert messages[-1].startswith("⚡ Impulsive errors rise with stress")


def test_fixed_order_and_truncation_to_six():
    messages = generate(
        sleep_stats=sleep_stats(avg_hours=5.0),
        mood_stats=mood_stats(anxiety=4.0),
        circadian_profile=circadian(9),
        error_analysis=errors(omission=10, commission=10),
        improvement_percent=12.0,
        weakest_game="VISUAL SEARCH",
        fatigue_detected=True,
    )

    assert len(messages) == 6
    assert [m.split(" ")[0] for m in messages] == ["💤", "🌅", "⚠️", "🧘", "🚀", "🎯"]
    assert messages[5] == (
        "🎯 Growth opportunity: Focus on VISUAL SEARCH to build a more balanced cognitive profile"
    )


def test_only_peak_time_message_by_default():
    assert generate() == [
        "☀️ Afternoon peak: Your best performance is around 2 PM. Plan challenging work then"
    ]
