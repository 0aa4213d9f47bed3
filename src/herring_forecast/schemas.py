"""
Forecast configuration models.

Pydantic models for the tunable constants of the forecasting pipeline.
Everything the pipeline treats as policy (analysis window, evidence
threshold, recency breakpoints, score weights) is a named, validated field
here rather than a literal in the analysis code.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field, model_validator

# =============================================================================
# Defaults
# =============================================================================

DEFAULT_WINDOW_YEARS = 10
DEFAULT_MIN_MEASURED_EVENTS = 2
DEFAULT_LOG_SD = 0.5
CI95_Z = 1.96


class RecencyStep(BaseModel):
    """One breakpoint of the recency schedule: ``years <= max_years`` scores ``score``."""

    model_config = {"frozen": True}

    max_years: int = Field(..., ge=0)
    score: float = Field(..., ge=0.0, le=1.0)


# Spawned last season -> 1.0, one season gap -> 0.8, two -> 0.5, three to five -> 0.4.
DEFAULT_RECENCY_SCHEDULE: tuple[RecencyStep, ...] = (
    RecencyStep(max_years=0, score=1.0),
    RecencyStep(max_years=1, score=0.8),
    RecencyStep(max_years=2, score=0.5),
    RecencyStep(max_years=5, score=0.4),
)
DEFAULT_RECENCY_FLOOR = 0.2


class ScoreWeights(BaseModel):
    """Weights of the composite spawn-probability score."""

    model_config = {"frozen": True}

    frequency: float = Field(default=0.5, ge=0.0)
    recency: float = Field(default=0.3, ge=0.0)
    consistency: float = Field(default=0.2, ge=0.0)


# =============================================================================
# Forecast configuration
# =============================================================================


class ForecastConfig(BaseModel):
    """All constants the pipeline needs for one forecast run.

    The analysis window defaults to the ``DEFAULT_WINDOW_YEARS`` complete
    years preceding ``target_year`` (inclusive bounds).
    """

    model_config = {"frozen": True}

    target_year: int = Field(..., ge=1, le=9998)
    window_start_year: int = Field(..., ge=1)
    window_end_year: int = Field(..., ge=1)
    min_measured_events: int = Field(default=DEFAULT_MIN_MEASURED_EVENTS, ge=2)
    default_log_sd: float = Field(default=DEFAULT_LOG_SD, gt=0.0)
    recency_schedule: tuple[RecencyStep, ...] = DEFAULT_RECENCY_SCHEDULE
    recency_floor: float = Field(default=DEFAULT_RECENCY_FLOOR, ge=0.0, le=1.0)
    weights: ScoreWeights = Field(default_factory=ScoreWeights)
    ci_z: float = Field(default=CI95_Z, gt=0.0)

    @model_validator(mode="before")
    @classmethod
    def _default_window(cls, data: Any) -> Any:
        if not isinstance(data, dict) or data.get("target_year") is None:
            return data
        data = dict(data)
        target = int(data["target_year"])
        if data.get("window_end_year") is None:
            data["window_end_year"] = target - 1
        if data.get("window_start_year") is None:
            data["window_start_year"] = int(data["window_end_year"]) - DEFAULT_WINDOW_YEARS + 1
        return data

    @model_validator(mode="after")
    def _check_consistency(self) -> ForecastConfig:
        if self.window_start_year > self.window_end_year:
            msg = (
                f"Analysis window is inverted: {self.window_start_year} > {self.window_end_year}"
            )
            raise ValueError(msg)
        if self.target_year <= self.window_end_year:
            msg = (
                f"Target year {self.target_year} must come after the analysis window "
                f"({self.window_start_year}-{self.window_end_year})"
            )
            raise ValueError(msg)

        previous: RecencyStep | None = None
        for step in self.recency_schedule:
            if previous is not None:
                if step.max_years <= previous.max_years:
                    msg = "Recency schedule breakpoints must be strictly increasing"
                    raise ValueError(msg)
                if step.score > previous.score:
                    msg = "Recency scores must not increase with age"
                    raise ValueError(msg)
            previous = step
        if previous is not None and self.recency_floor > previous.score:
            msg = "Recency floor must not exceed the last scheduled score"
            raise ValueError(msg)
        return self

    @classmethod
    def for_target_year(
        cls,
        target_year: int,
        window_years: int = DEFAULT_WINDOW_YEARS,
        **overrides: Any,
    ) -> ForecastConfig:
        """Config for ``target_year`` using the ``window_years`` years before it.

        ``None`` values in ``overrides`` are ignored, so CLI flags that were
        not given fall through to the defaults.
        """
        values: dict[str, Any] = {
            "target_year": target_year,
            "window_start_year": target_year - window_years,
            "window_end_year": target_year - 1,
        }
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)

    @property
    def window_years(self) -> int:
        """Number of years in the analysis window."""
        return self.window_end_year - self.window_start_year + 1

    @property
    def window_label(self) -> str:
        """Human-readable window, e.g. ``2016\u20132025``."""
        return f"{self.window_start_year}\u2013{self.window_end_year}"

    def in_window(self, year: int) -> bool:
        """Whether ``year`` falls inside the inclusive analysis window."""
        return self.window_start_year <= year <= self.window_end_year
