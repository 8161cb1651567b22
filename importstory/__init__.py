"""
importstory: a narrated chart story of rising and declining import suppliers.

Loads monthly country-level import figures, derives per-country series and
first-vs-last changes, and renders them as a step-through D3 story.
"""

__version__ = "0.1.0"
