from .planner import plan_pagination

__all__ = ["plan_pagination"]
