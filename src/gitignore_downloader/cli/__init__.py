"""CLI helpers exposed for other modules."""

from .ui import choose_template, fuzzy_filter

__all__ = ["choose_template", "fuzzy_filter"]
