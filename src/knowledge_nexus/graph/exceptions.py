"""Graph-engine exceptions."""


class GraphError(Exception):
    """Base exception for all graph-related errors."""

    def __init__(self, message: str, original_error: Exception | None = None):
        super().__init__(message)
        self.original_error = original_error


class GraphImportError(GraphError):
    """Raised when an imported payload fails the graph shape check."""

    pass


class EmptyGraphError(GraphError):
    """Raised when an operation needs a graph but none is loaded."""

    def __init__(self, operation: str):
        self.operation = operation
        super().__init__(f"No graph loaded; cannot {operation}")


class ExtractionError(GraphError):
    """Raised when the extraction capability fails to produce a graph."""

    pass


class UnificationError(GraphError):
    """Raised when bridging fails; the graph being unified is left untouched."""

    pass


class StaleGraphError(GraphError):
    """Raised when a result belongs to a graph generation that was discarded."""

    def __init__(self, expected_generation: int, current_generation: int):
        self.expected_generation = expected_generation
        self.current_generation = current_generation
        super().__init__(
            f"Result for generation {expected_generation} discarded; "
            f"current generation is {current_generation}"
        )


class RefinementInProgressError(GraphError):
    """Raised when a refinement is requested while another is outstanding."""

    pass
