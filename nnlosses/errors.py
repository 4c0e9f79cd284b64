class LossError(Exception):
    """Base class for every error raised by nnlosses."""


class ShapeMismatchError(LossError, ValueError):
    pass


class InvalidHyperparameterError(LossError, ValueError):
    pass


class SerializationError(LossError, ValueError):
    pass


class InvalidOutputError(LossError, TypeError):
    """Gradient buffer is not an ndarray or cannot hold the gradient's dtype."""
