import dataclasses
import logging

import numpy as np

from .errors import (
    InvalidHyperparameterError,
    InvalidOutputError,
    SerializationError,
    ShapeMismatchError,
)
from .utils import as_float_array, check_same_shape

logger = logging.getLogger(__name__)

# name -> loss class, filled as subclasses are defined
_REGISTRY = {}


class Loss:
    """
    Common interface for loss classes.

    Subclasses are frozen dataclasses whose fields are the hyperparameters.
    forward() returns a float, backward() the gradient w.r.t. the prediction.
    """
    NAME = None
    VERSION = 1

    def __init_subclass__(cls, **kwargs):
        super().__init_subclass__(**kwargs)
        if cls.NAME is not None:
            _REGISTRY[cls.NAME] = cls

    def forward(self, y_pred, y_true):
        raise NotImplementedError

    def backward(self, y_pred, y_true, out=None):
        raise NotImplementedError

    # ---------- shared helpers ----------
    @staticmethod
    def _inputs(y_pred, y_true):
        y_pred = as_float_array(y_pred)
        y_true = as_float_array(y_true)
        check_same_shape(y_pred, y_true)
        return y_pred, y_true, np.result_type(y_pred, y_true)

    def _reduce(self, total, count):
        if self.reduction:
            return float(total)
        return float(total) / max(count, 1)

    def _grad(self, grad, count, dtype, out):
        if not self.reduction:
            grad = grad / max(count, 1)
        if out is None:
            return np.asarray(grad, dtype=dtype)
        if not isinstance(out, np.ndarray):
            raise InvalidOutputError(f"Gradient buffer must be a numpy array, got {type(out).__name__}")
        if out.shape != grad.shape:
            raise ShapeMismatchError(
                f"Gradient buffer has shape {out.shape}, expected {grad.shape}"
            )
        if not np.can_cast(grad.dtype, out.dtype, casting="same_kind"):
            raise InvalidOutputError(
                f"Cannot write a {grad.dtype} gradient into a {out.dtype} buffer"
            )
        np.copyto(out, grad, casting="same_kind")
        return out

    @staticmethod
    def _check_flag(name, value):
        if not isinstance(value, (bool, np.bool_)):
            raise InvalidHyperparameterError(f"'{name}' must be a bool, got {value!r}")
        return bool(value)

    @staticmethod
    def _check_real(name, value):
        if isinstance(value, (bool, np.bool_)) or not isinstance(value, (int, float, np.number)):
            raise InvalidHyperparameterError(f"'{name}' must be a real number, got {value!r}")
        if not np.isfinite(value):
            raise InvalidHyperparameterError(f"'{name}' must be finite, got {value!r}")
        return float(value)

    # ---------- persistence ----------
    def serialize(self):
        """Named hyperparameter fields plus the loss name and version tag."""
        state = {"name": self.NAME, "version": self.VERSION}
        state.update(dataclasses.asdict(self))
        return state

    @classmethod
    def deserialize(cls, state):
        state = dict(state)
        name = state.pop("name", cls.NAME)
        if name not in _REGISTRY:
            raise SerializationError(f"Unknown loss name in state: {name!r}")
        target_cls = _REGISTRY[name]
        if cls is not Loss and target_cls is not cls:
            raise SerializationError(f"State is for {name!r}, not {cls.NAME!r}")

        version = state.pop("version", None)
        if version != target_cls.VERSION:
            raise SerializationError(
                f"Unsupported version {version!r} for {name!r} (expected {target_cls.VERSION})"
            )

        expected = {f.name for f in dataclasses.fields(target_cls)}
        missing = expected - set(state)
        unknown = set(state) - expected
        if missing or unknown:
            raise SerializationError(
                f"Fields do not match {name!r}: missing {sorted(missing)}, unknown {sorted(unknown)}"
            )
        return target_cls(**state)
