"""Operators that apply planned actions to the host."""

from edsctl.operators.executor import ActionExecutor, CategoryError

__all__ = ["ActionExecutor", "CategoryError"]
