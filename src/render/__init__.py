"""Render module for income and savings output display."""

from render.renderers import (
    BaseRenderer,
    SummaryRenderer,
    CalendarRenderer,
    GoalsRenderer,
    RENDERER_REGISTRY,
)

__all__ = [
    'BaseRenderer',
    'SummaryRenderer',
    'CalendarRenderer',
    'GoalsRenderer',
    'RENDERER_REGISTRY',
]
