"""External data source integrations.

Each subdirectory is one data source:

    datasources/{name}/
    ├── __init__.py       # Public API re-exports
    ├── client.py         # URLs, download functions
    ├── models.py         # Column names / record types
    └── records.py        # Parsing raw payloads into row dicts

Sources hand back raw rows; typing and validation happen in
``analysis.normalize``.

Current sources:
  - spawn_index: DFO Pacific herring spawn index (CSV)
"""
