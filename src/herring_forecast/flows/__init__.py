"""
Prefect flows for the forecast pipeline.

Flows:
- fetch: Download (or import) the spawn index CSV into the store
- build: Run the forecast and render predictions JSON + the static map site

Usage (local):
    python -m herring_forecast.flows.fetch
    python -m herring_forecast.flows.build

Usage (CLI):
    herring-forecast refresh [--csv path/to/spawn_index.csv]
"""
