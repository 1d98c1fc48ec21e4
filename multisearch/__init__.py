# Multi Search Package
"""
Search everywhere, all at once.

Keeps a personal list of search engines and opens one browser tab per
enabled engine for a single query.

Modules:
  - services: Engine store and persistence adapters
  - search: Engine model and query dispatch
  - panels: Toolkit-free management flow for front ends
"""

__version__ = "0.1.0-dev"
