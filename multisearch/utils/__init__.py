# Multi Search Utilities Package
"""
Shared utility functions and helpers for Multi Search.
"""

from .helpers import data_dir, load_settings, load_seed_engines

__all__ = ["data_dir", "load_settings", "load_seed_engines"]
