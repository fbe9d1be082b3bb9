"""Exception types raised by the renderer.

Invalid user input (material ranges, camera parameters, resolutions, budgets)
raises the builtin ValueError or TypeError. The classes below are reserved for
internal invariant violations that signal a bug or a broken collaborator
rather than a recoverable condition.
"""


class MarchtraceError(Exception):
    """Base class for renderer-specific errors."""


class SamplingError(MarchtraceError, RuntimeError):
    """Rejection sampling failed to accept a point within its attempt cap.

    Under a working uniform random source this is effectively impossible, so
    it indicates a broken generator.
    """


class BudgetError(MarchtraceError, RuntimeError):
    """A recursive shading call tried to grow its bounce or sample budget."""
