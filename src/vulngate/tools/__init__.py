"""Remote tool wrappers.

Provides:
- SnykClient for the Snyk Maven test API
"""

from .snyk import SnykClient, parse_scan_result

__all__ = ["SnykClient", "parse_scan_result"]
