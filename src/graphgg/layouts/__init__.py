"""Graph layouts: map network topology to 2D coordinates."""

from .algorithms import list_layouts, register_layout
from .layout import Layout, create_layout

__all__ = ["Layout", "create_layout", "list_layouts", "register_layout"]
