"""Exceptions raised by the engine."""


class InvalidCoordinateError(ValueError):
    """A coordinate is missing, malformed, out of range or the (0, 0) sentinel."""


class TrackingStateError(RuntimeError):
    """A tracking call was made with arguments that contradict the stored slot."""
