"""
Custom exceptions for the grid search engine.

This module defines the hierarchy of exceptions used throughout the package.
Each exception type corresponds to a category of error that may occur while
building a grid or driving a search run:

- ConfigurationError: bad input reported synchronously, no state mutated
- ResourceNotFoundError: lookups of cells that do not exist
- InvalidOperationError: engine used out of order
- InvariantViolationError: a broken cost model; fatal, never recovered
"""


class WaypointError(Exception):
    """Base class for all errors raised by the package."""


class ConfigurationError(WaypointError):
    """
    Raised when caller-supplied configuration is invalid.

    Configuration errors are raised before any state is changed, so the
    caller may simply retry with different arguments.

    Examples:
        * Empty or ragged terrain matrix
        * Start or goal cell that is blocked or outside the grid
        * Missing grid when initializing a search
    """

    def __str__(self) -> str:
        """Format configuration error message."""
        return f"Configuration Error: {super().__str__()}"


class InvalidDimensionError(ConfigurationError):
    """Raised when a terrain matrix is empty or not rectangular."""


class InvalidTerrainError(ConfigurationError):
    """Raised when a terrain matrix holds a value with no terrain type."""


class InvalidEndpointError(ConfigurationError):
    """
    Raised when a search endpoint cannot be used.

    Examples:
        * Start or goal is None
        * Coordinates outside the grid
        * Cell is Blocked
        * Cell belongs to a different grid
    """


class MissingGraphError(ConfigurationError):
    """Raised when a search is initialized without a grid."""


class InvalidConfigError(ConfigurationError):
    """Raised when SearchConfig values are out of range."""


class ResourceNotFoundError(WaypointError):
    """
    Raised when a requested resource is not found.

    This exception is raised when attempting to access a resource that
    does not exist.
    """


class CellNotFoundError(ResourceNotFoundError):
    """Raised when coordinates fall outside the grid."""


class InvalidOperationError(WaypointError):
    """
    Raised when an operation is invalid in the current context.

    Examples:
        * Stepping an engine that was never initialized
        * Re-initializing an engine while its run loop is active
    """


class InvariantViolationError(WaypointError):
    """
    Raised when the cost model is broken.

    This signals a programming error rather than bad input: a negative
    edge weight or a NaN/non-numeric priority means the search can no
    longer be trusted, so it is never caught inside the engine.
    """


class EmptyQueueError(InvariantViolationError, IndexError):
    """Raised when dequeuing or peeking an empty priority queue."""
