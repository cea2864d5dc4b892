"""Presentation: sorting, display surfaces, and the view controller."""

from .controller import ViewController, ViewState
from .sorting import SORT_KEYS, SortController
from .surface import ConsoleSurface, DisplaySurface

__all__ = [
    "ConsoleSurface",
    "DisplaySurface",
    "SORT_KEYS",
    "SortController",
    "ViewController",
    "ViewState",
]
