"""
Rendering Package

Grid and table presentation variants driven by one RenderCoordinator.
"""

from .actions import ActionType, RenderAction, resolve_action
from .coordinator import RenderCoordinator
from .formatters import ProductFormatter
from .target import RenderTarget, SnapshotRenderTarget
from .variants import GridVariant, RenderVariant, TableVariant

__all__ = [
    "ActionType",
    "RenderAction",
    "resolve_action",
    "RenderCoordinator",
    "ProductFormatter",
    "RenderTarget",
    "SnapshotRenderTarget",
    "GridVariant",
    "RenderVariant",
    "TableVariant",
]
