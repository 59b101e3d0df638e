class LineBufferError(Exception):
    """Base class for errors raised by the buffer analysis engine."""

    pass


class ConstructionError(LineBufferError, TypeError):
    """Raised when an analyzer is given an index it cannot query."""

    pass


class ValidationError(LineBufferError, ValueError):
    """Raised when analysis arguments are rejected before any query runs."""

    pass
