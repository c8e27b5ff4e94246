"""
Reference data for fitness-tracker.

Muscle taxonomy, splits and the exercise library, loaded from the
bundled seed YAML files plus optional user overrides.
"""

from .base import Catalog, slugify
from .loader import load_catalog

__all__ = [
    "Catalog",
    "load_catalog",
    "slugify",
]
