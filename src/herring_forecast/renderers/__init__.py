"""Pure rendering functions: forecast results -> HTML strings.

All renderers follow the same pattern:
  - Input: Predictions / ForecastConfig from analysis/
  - Output: str (HTML fragment, not a full page)
  - No side effects, no I/O, no Prefect decorators

Used by flows/build.py, which renders ``base.html.j2`` around the fragments.

Public API:
  - spawn_map: build_spawn_map_html, build_popup_html, marker_radius
  - palette: probability_color, legend_entries

Adding a renderer
-----------------
1. Create ``renderers/{name}.py`` with a ``build_{name}_html`` function that
   calls ``render_template("{name}.html.j2", ...)``.
2. Add the template under ``templates/``. Templates produce fragments;
   page chrome and CSS live in ``base.html.j2``.
3. Call it from ``flows/build.py:build_html`` and add a placeholder in
   ``base.html.j2``.
4. Add tests asserting the returned HTML contains the expected content.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import jinja2

# Shared Jinja2 environment for all renderers
_TEMPLATE_DIR = Path(__file__).resolve().parent.parent / "templates"
_jinja_env = jinja2.Environment(
    loader=jinja2.FileSystemLoader(str(_TEMPLATE_DIR)),
    autoescape=True,
)


def render_template(template_name: str, **kwargs: Any) -> str:
    """Render a Jinja2 template by name."""
    return _jinja_env.get_template(template_name).render(**kwargs)
