# Multi Search Panels Package
"""
Presentation state shared by front ends.

Panels:
  - Manage: Engine grid clicks, bulk delete flow, add/edit drafts
"""

from .manage import DeleteMode, Draft, ManagePanel

__all__ = ["DeleteMode", "Draft", "ManagePanel"]
