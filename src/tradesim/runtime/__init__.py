"""Runtime metadata."""

from tradesim.runtime.context import RunContext, create_run_context

__all__ = ["RunContext", "create_run_context"]
