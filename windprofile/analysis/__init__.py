"""
Analysis module for searching wind layers.
"""

from windprofile.analysis.search import search_winds, stability_penalty

__all__ = ["search_winds", "stability_penalty"]
