"""
spawn_catalog.reporting: flat-file export of a built catalog.

Modules:
  export - catalog record flattening and JSON / CSV / Parquet writers.
"""
