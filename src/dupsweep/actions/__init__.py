"""Output actions applied to canonical and duplicate files."""

from .executor import ActionExecutor
from .flatten import FlattenNamer, plan_flatten, split_name

__all__ = ["ActionExecutor", "FlattenNamer", "plan_flatten", "split_name"]
