"""Parts Search ETL Package.

This package contains the stages of the parts search pipeline:
- source_extractor: Fetches paginated search results from the parts API
- projector: Filters results, extracts columns and renders JSON / CSV
- config: Loads the YAML search configuration
- main: Command-line entry point
"""

__version__ = "0.1.0"
