"""Leaflet map renderer for spawn forecasts.

One circle marker per forecast location: radius from predicted biomass,
color from spawn probability. Popups are rendered server-side from a Jinja2
template so every value is HTML-escaped before it reaches the page.
"""

from __future__ import annotations

import json
import math
from collections.abc import Sequence
from typing import TYPE_CHECKING, Any

from herring_forecast.renderers import render_template
from herring_forecast.renderers.palette import legend_entries, probability_color

if TYPE_CHECKING:
    from herring_forecast.analysis.models import Prediction
    from herring_forecast.schemas import ForecastConfig

# Marker radius in pixels is sqrt(biomass) / RADIUS_DIVISOR, never below MIN_RADIUS_PX.
RADIUS_DIVISOR = 5.0
MIN_RADIUS_PX = 2.0


def marker_radius(predicted_biomass: float) -> float:
    """Circle radius (px) for a predicted biomass in tons."""
    return max(MIN_RADIUS_PX, math.sqrt(max(0.0, predicted_biomass)) / RADIUS_DIVISOR)


def hover_label(prediction: Prediction) -> str:
    """Short tooltip text, e.g. ``Fulford Harbour (62% probability)``."""
    return f"{prediction.location_name} ({prediction.spawn_probability * 100:.0f}% probability)"


def build_popup_html(prediction: Prediction, config: ForecastConfig) -> str:
    """Popup body with the forecast and the location's history."""
    summary = prediction.summary
    sd_doy = summary.sd_start_doy or 0.0
    return render_template(
        "spawn_popup.html.j2",
        name=prediction.location_name,
        code=prediction.location_code,
        target_year=prediction.target_year,
        probability_pct=f"{prediction.spawn_probability * 100:.1f}",
        predicted_date=prediction.predicted_date.strftime("%B %d"),
        date_lower=prediction.predicted_date_lower.strftime("%b %d"),
        date_upper=prediction.predicted_date_upper.strftime("%b %d"),
        biomass=f"{prediction.predicted_biomass:.1f}",
        biomass_lower=f"{prediction.biomass_ci95.lower:.1f}",
        biomass_upper=f"{prediction.biomass_ci95.upper:.1f}",
        window_label=config.window_label,
        measured_events=summary.measured_event_count,
        avg_biomass=f"{summary.avg_biomass or 0.0:.1f}",
        max_biomass=f"{summary.max_biomass or 0.0:.1f}",
        avg_doy=round(summary.avg_start_doy),
        sd_doy=f"{sd_doy:.1f}",
        last_spawn=summary.most_recent_year,
    )


def _script_json(value: Any) -> str:
    """JSON for embedding in a <script> block (no premature ``</script>``)."""
    return json.dumps(value).replace("</", "<\\/")


def build_spawn_map_html(
    predictions: Sequence[Prediction],
    config: ForecastConfig,
) -> tuple[str, str]:
    """Build an interactive Leaflet map of spawn forecasts.

    Returns a (map_div_html, map_script_js) tuple. With no predictions the
    div explains why and the script is empty.
    """
    if not predictions:
        return (
            f"<h2>Spawn Forecast Map &mdash; {config.target_year}</h2>"
            "<p>No locations had enough measured spawns to forecast.</p>",
            "",
        )

    probabilities = [p.spawn_probability for p in predictions]
    lower, upper = min(probabilities), max(probabilities)

    markers = [
        {
            "lat": p.latitude,
            "lon": p.longitude,
            "radius": round(marker_radius(p.predicted_biomass), 2),
            "color": probability_color(p.spawn_probability, lower, upper),
            "label": hover_label(p),
            "popup": build_popup_html(p, config),
        }
        for p in predictions
    ]
    legend = [{"label": e.label, "color": e.color} for e in legend_entries(lower, upper)]

    map_div = render_template(
        "spawn_map.html.j2",
        target_year=config.target_year,
        window_label=config.window_label,
        location_count=len(predictions),
    )
    map_script = render_template(
        "spawn_map_script.html.j2",
        markers_json=_script_json(markers),
        legend_json=_script_json(legend),
        legend_title=f"Spawn Probability {config.target_year}",
    )
    return (map_div, map_script)
