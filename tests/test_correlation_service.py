# tests for correlation service — pattern labels, per-day joins, weekly trends

import pytest
from datetime import date

from journaling_app.services import correlation_service as cs


def _entry(created_at, content, **extra):
    return {"id": f"e-{created_at}", "content": content, "created_at": created_at, **extra}


def _check_in(created_at, mood="😊", energy=8, hours=8, minutes=0):
    return {"mood": mood, "energy": energy, "sleep_hours": hours, "sleep_minutes": minutes, "created_at": created_at}


LONG = "word " * 120  # 600 characters
SHORT = "short day"


class TestLabels:
    """threshold-based pattern names"""

    def test_mood_patterns(self):
        assert cs.mood_writing_pattern(8, 600) == "high_mood_long_writing"
        assert cs.mood_writing_pattern(3, 100) == "low_mood_short_writing"
        assert cs.mood_writing_pattern(8, 100) == "high_mood_concise"
        assert cs.mood_writing_pattern(3, 600) == "low_mood_detailed"
        assert cs.mood_writing_pattern(5, 300) == "balanced"

    def test_energy_patterns(self):
        assert cs.energy_writing_pattern(9, 600) == "high_energy_detailed"
        assert cs.energy_writing_pattern(2, 50) == "low_energy_brief"
        assert cs.energy_writing_pattern(9, 50) == "high_energy_focused"
        assert cs.energy_writing_pattern(2, 600) == "low_energy_rambling"

    def test_sleep_quality(self):
        assert cs.sleep_quality(8) == "excellent"
        assert cs.sleep_quality(7.5) == "good"
        assert cs.sleep_quality(6) == "fair"
        assert cs.sleep_quality(4) == "poor"

    def test_sleep_patterns(self):
        assert cs.sleep_writing_pattern(8, 500, 20) == "well_rested_detailed"
        assert cs.sleep_writing_pattern(5, 100, 20) == "tired_brief"
        assert cs.sleep_writing_pattern(8, 300, 9) == "well_rested_morning"
        assert cs.sleep_writing_pattern(5, 300, 23) == "tired_late_night"

    def test_content_sentiment_and_themes(self):
        text = "Great day at work, happy to see a friend"
        assert cs.content_sentiment(text) == "positive"
        assert cs.content_sentiment("So much stress and anxiety") == "negative"
        assert cs.content_sentiment("We met") == "neutral"
        assert cs.content_themes(text) == ["work", "relationships"]

    def test_week_start_is_sunday(self):
        assert cs.week_start(date(2025, 6, 4)) == date(2025, 6, 1)
        assert cs.week_start(date(2025, 6, 1)) == date(2025, 6, 1)
        assert cs.week_start(date(2025, 6, 7)) == date(2025, 6, 1)


class TestCorrelations:
    """entries joined to check-ins"""

    def test_mood_same_day(self):
        entries = [_entry("2025-06-02T20:00:00+00:00", LONG, processing_status="completed")]
        check_ins = [_check_in("2025-06-02T08:00:00+00:00"), _check_in("2025-06-02T12:00:00+00:00", mood="😊")]
        result = cs.mood_correlations(entries, check_ins)
        assert len(result) == 1
        assert result[0].mood == 9
        assert result[0].dominant_mood == "😊"
        assert result[0].has_analysis is True
        assert result[0].correlation.high_mood_long_entries is True

    def test_entry_without_check_in_skipped(self):
        entries = [_entry("2025-06-02T20:00:00+00:00", LONG)]
        assert cs.mood_correlations(entries, [_check_in("2025-06-03T08:00:00+00:00")]) == []

    def test_energy_range(self):
        entries = [_entry("2025-06-02T20:00:00+00:00", LONG, processing_type="full-analysis")]
        check_ins = [_check_in("2025-06-02T08:00:00+00:00", energy=7), _check_in("2025-06-02T18:00:00+00:00", energy=10)]
        result = cs.energy_correlations(entries, check_ins)
        assert result[0].energy == 8.5
        assert (result[0].energy_range.min, result[0].energy_range.max) == (7, 10)
        assert result[0].correlation.high_energy_full_analysis is True

    def test_sleep_uses_previous_day(self):
        entries = [_entry("2025-06-02T23:30:00+00:00", SHORT)]
        check_ins = [
            _check_in("2025-06-01T07:00:00+00:00", hours=5, minutes=30),
            _check_in("2025-06-02T07:00:00+00:00", hours=9),
        ]
        result = cs.sleep_correlations(entries, check_ins)
        assert result[0].previous_day_sleep == 5.5
        assert result[0].sleep_quality == "poor"
        assert result[0].entry_time == 23
        assert result[0].correlation.sleep_writing_pattern == "tired_brief"

    def test_content_patterns(self):
        entries = [_entry("2025-06-02T20:00:00+00:00", "Good chat with family after work")]
        result = cs.content_patterns(entries, [_check_in("2025-06-02T08:00:00+00:00", mood="🙂", energy=6)])
        pattern = result[0]
        assert pattern.word_count == 6
        assert pattern.sentiment == "positive"
        assert pattern.themes == ["work", "relationships"]
        assert pattern.patterns.work_content is True
        assert pattern.patterns.personal_content is True
        assert pattern.mood == 7


class TestWeeklyTrends:
    """check-in weeks and their trend against the week before"""

    def test_trend_direction(self):
        check_ins = [
            _check_in("2025-06-02T08:00:00+00:00", mood="😞"),
            _check_in("2025-06-09T08:00:00+00:00", mood="😊"),
            _check_in("2025-06-16T08:00:00+00:00", mood="😊"),
            _check_in("2025-06-23T08:00:00+00:00", mood="😢"),
        ]
        entries = [_entry("2025-06-10T20:00:00+00:00", SHORT), _entry("2025-06-30T20:00:00+00:00", SHORT)]
        trends = cs.weekly_trends(entries, check_ins)
        assert [t.period for t in trends] == ["2025-06-01", "2025-06-08", "2025-06-15", "2025-06-22"]
        assert [t.metrics.trend for t in trends] == ["stable", "improving", "stable", "declining"]
        # the entry of 2025-06-30 falls in a week without check-ins
        assert [t.metrics.journal_frequency for t in trends] == [0, 1, 0, 0]
        assert trends[1].metrics.average_entry_length == len(SHORT)


class TestAnalyzeCorrelations:
    """full analysis and insight summary"""

    def _data(self):
        entries = [
            _entry("2025-06-02T20:00:00+00:00", LONG, processing_type="full-analysis"),
            _entry("2025-06-03T20:00:00+00:00", LONG, processing_type="full-analysis"),
        ]
        check_ins = [
            _check_in("2025-06-01T07:00:00+00:00", hours=5),
            _check_in("2025-06-02T07:00:00+00:00", hours=5),
            _check_in("2025-06-03T07:00:00+00:00", hours=5),
        ]
        return entries, check_ins

    def test_all(self):
        analysis = cs.analyze_correlations(*self._data())
        assert len(analysis.mood_correlations) == 2
        assert len(analysis.sleep_correlations) == 2
        titles = [i.title for i in analysis.insights]
        assert titles == ["Positive Mood Trend", "Good Energy Levels", "Sleep Quality Impact"]

    def test_single_type(self):
        analysis = cs.analyze_correlations(*self._data(), analysis_type="sleep")
        assert analysis.mood_correlations == []
        assert analysis.energy_correlations == []
        assert len(analysis.sleep_correlations) == 2
        assert analysis.trends
        assert [i.type for i in analysis.insights] == ["sleep_trend"]

    def test_unknown_type_means_all(self):
        analysis = cs.analyze_correlations(*self._data(), analysis_type="weather")
        assert analysis.content_patterns

    def test_low_mood_insight(self):
        entries = [_entry("2025-06-02T20:00:00+00:00", SHORT)]
        analysis = cs.analyze_correlations(entries, [_check_in("2025-06-02T07:00:00+00:00", mood="😢", energy=2)])
        assert analysis.insights[0].title == "Mood Improvement Opportunity"
        assert analysis.insights[0].priority == "high"

    def test_empty(self):
        analysis = cs.analyze_correlations([], [])
        assert analysis.trends == []
        assert analysis.insights == []
