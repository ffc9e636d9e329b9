"""Display front ends for Honest Pitch."""

from .adapters import UIAdapter, UICommand, PygameAdapter, CursesAdapter

__all__ = ["UIAdapter", "UICommand", "PygameAdapter", "CursesAdapter"]
