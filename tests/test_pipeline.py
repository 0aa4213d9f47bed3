"""End-to-end tests for the forecast pipeline."""

from __future__ import annotations

import pytest

from herring_forecast.analysis.normalize import (
    INVALID_START_DATE,
    MISSING_COORDINATES,
    OUTSIDE_WINDOW,
    InputDataError,
)
from herring_forecast.analysis.pipeline import run_forecast
from herring_forecast.schemas import ForecastConfig

CONFIG = ForecastConfig(target_year=2026)


def _row(code: str, start: str, understory: str = "0", **overrides: str) -> dict[str, str]:
    row = {
        "LocationCode": code,
        "LocationName": f"Location {code}",
        "Latitude": "49.25",
        "Longitude": "-124.80",
        "StartDate": start,
        "EndDate": "",
        "Year": start[:4],
        "Understory": understory,
        "Macrocystis": "NA",
        "Surface": "0",
    }
    row.update(overrides)
    return row


SURVEY_ROWS = [
    # A: three measured spawns, most recent last season
    _row("A", "2023-03-01", "10"),
    _row("A", "2024-03-01", "20"),
    _row("A", "2025-03-01", "30"),
    # B: spawn recorded but never quantified
    _row("B", "2020-03-05"),
    _row("B", "2021-03-05"),
    # C: a single measured spawn among zeros
    _row("C", "2018-02-20", "7"),
    _row("C", "2019-02-20"),
    _row("C", "2020-02-20"),
    _row("C", "2021-02-20"),
    # D: two identical measurements
    _row("D", "2021-03-10", "50"),
    _row("D", "2024-03-10", "50"),
    # Dropped rows
    _row("A", "unknown", "5"),
    _row("A", "2024-03-02", "5", Latitude=""),
    _row("A", "2010-03-01", "5"),
]


class TestRunForecast:
    """Test run_forecast over a small survey."""

    def test_report_counts(self) -> None:
        report = run_forecast(SURVEY_ROWS, CONFIG).report

        assert report.rows_read == 14
        assert report.rows_excluded == 3
        assert report.excluded_by_reason[INVALID_START_DATE] == 1
        assert report.excluded_by_reason[MISSING_COORDINATES] == 1
        assert report.excluded_by_reason[OUTSIDE_WINDOW] == 1
        assert report.events_retained == 11
        assert report.locations_considered == 4
        assert report.locations_retained == 3
        assert report.locations_sufficient == 2
        assert report.locations_forecast == 2

    def test_only_sufficient_locations_forecast(self) -> None:
        run = run_forecast(SURVEY_ROWS, CONFIG)

        assert [p.location_code for p in run.predictions] == ["A", "D"]
        assert [s.location_code for s in run.summaries] == ["A", "D"]

    def test_location_a(self) -> None:
        run = run_forecast(SURVEY_ROWS, CONFIG)
        a = run.predictions[0]

        assert a.summary.measured_event_count == 3
        assert a.summary.avg_biomass == 20.0
        assert a.summary.years_since_last_spawn == 0
        assert a.predicted_biomass == 20.0
        assert a.biomass_ci95.lower == pytest.approx(0.4)
        assert a.biomass_ci95.upper == pytest.approx(39.6)
        assert a.spawn_probability == pytest.approx(0.5548, abs=1e-4)

    def test_location_d_zero_variance(self) -> None:
        """Identical measurements give full consistency and a log-scale interval."""
        d = run_forecast(SURVEY_ROWS, CONFIG).predictions[1]

        assert d.summary.sd_biomass == 0.0
        assert d.consistency_score == 1.0
        assert d.recency_score == 0.8
        assert d.biomass_ci95.lower < 50.0 < d.biomass_ci95.upper
        assert d.spawn_probability == pytest.approx(0.1 + 0.24 + 0.2)

    def test_probabilities_in_unit_interval(self) -> None:
        for prediction in run_forecast(SURVEY_ROWS, CONFIG).predictions:
            assert 0.0 <= prediction.spawn_probability <= 1.0
            assert prediction.biomass_ci95.lower >= 0.0
            timing = prediction.timing_ci95
            assert 1 <= timing.lower <= prediction.predicted_doy <= timing.upper <= 365

    def test_deterministic(self) -> None:
        first = run_forecast(SURVEY_ROWS, CONFIG)
        second = run_forecast(list(reversed(SURVEY_ROWS)), CONFIG)

        assert [p.location_code for p in first.predictions] == [
            p.location_code for p in second.predictions
        ]
        assert first.predictions[0].spawn_probability == second.predictions[0].spawn_probability

    def test_higher_threshold(self) -> None:
        config = ForecastConfig(target_year=2026, min_measured_events=3)
        run = run_forecast(SURVEY_ROWS, config)

        assert [p.location_code for p in run.predictions] == ["A"]

    def test_nothing_sufficient_gives_empty_forecast(self) -> None:
        run = run_forecast(SURVEY_ROWS[3:9], CONFIG)

        assert run.predictions == ()
        assert run.report.locations_retained == 1
        assert run.report.locations_forecast == 0

    def test_empty_input_raises(self) -> None:
        with pytest.raises(InputDataError):
            run_forecast([], CONFIG)

    def test_config_carried(self) -> None:
        assert run_forecast(SURVEY_ROWS, CONFIG).config is CONFIG


class TestPipelineReport:
    """Test the human-readable audit report."""

    def test_summary_lines(self) -> None:
        lines = run_forecast(SURVEY_ROWS, CONFIG).report.summary_lines()

        assert lines[0] == "Rows read: 14"
        assert lines[1] == "Rows excluded: 3"
        assert "  invalid start date: 1" in lines
        assert "  missing location: 0" not in lines
        assert "Locations forecast: 2" in lines
