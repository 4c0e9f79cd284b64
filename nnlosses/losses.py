import logging
from dataclasses import dataclass

import numpy as np

from .base import Loss
from .errors import InvalidHyperparameterError
from .utils import cosine_distance, normalize

logger = logging.getLogger(__name__)


def _as_batch(x):
    """View x as (batch, dim) with vectors along the last axis."""
    cols = x.shape[-1] if x.ndim else 1
    return x.reshape(-1, cols)


def _log_cosh(x):
    # log(cosh(x)) without overflowing cosh for large |x|
    x = np.abs(x)
    return x + np.log1p(np.exp(-2.0 * x)) - np.log(2.0)


@dataclass(frozen=True)
class CosineEmbeddingLoss(Loss):
    """
    Cosine embedding loss over a batch of vectors laid out along the last axis.

    similarity=True treats each (prediction, target) pair as similar and
    accumulates 1 - cosDist; otherwise max(0, cosDist - margin) is added.
    reduction=True returns the sum over the batch, False the batch mean.
    """
    NAME = "cosine_embedding"

    margin: float = 0.0
    similarity: bool = True
    reduction: bool = True

    def __post_init__(self):
        object.__setattr__(self, "margin", self._check_real("margin", self.margin))
        object.__setattr__(self, "similarity", self._check_flag("similarity", self.similarity))
        object.__setattr__(self, "reduction", self._check_flag("reduction", self.reduction))
        logger.debug(f"Created {self!r}")

    def forward(self, y_pred, y_true):
        y_pred, y_true, _ = self._inputs(y_pred, y_true)
        if y_pred.size == 0:
            return 0.0
        p, t = _as_batch(y_pred), _as_batch(y_true)
        dist = cosine_distance(p, t)
        if self.similarity:
            total = np.sum(1.0 - dist)
        else:
            total = np.sum(np.maximum(dist - self.margin, 0.0))
        return self._reduce(total, p.shape[0])

    def backward(self, y_pred, y_true, out=None):
        y_pred, y_true, dtype = self._inputs(y_pred, y_true)
        if y_pred.size == 0:
            return self._grad(np.zeros_like(y_pred), 1, dtype, out)
        p, t = _as_batch(y_pred), _as_batch(y_true)
        dist = cosine_distance(p, t)

        sign = 1.0 if self.similarity else -1.0
        norm_p = np.linalg.norm(p, axis=1, keepdims=True)
        grad = -sign * (normalize(t) - dist[:, None] * normalize(p)) / norm_p
        if not self.similarity:
            grad[dist < self.margin] = 0.0

        return self._grad(grad.reshape(y_pred.shape), p.shape[0], dtype, out)


@dataclass(frozen=True)
class EarthMoverDistance(Loss):
    """Earth mover distance, -sum(target * prediction), a quantity to maximise."""
    NAME = "earth_mover"

    reduction: bool = True

    def __post_init__(self):
        object.__setattr__(self, "reduction", self._check_flag("reduction", self.reduction))
        logger.debug(f"Created {self!r}")

    def forward(self, y_pred, y_true):
        y_pred, y_true, _ = self._inputs(y_pred, y_true)
        return self._reduce(-np.sum(y_true * y_pred), y_true.size)

    def backward(self, y_pred, y_true, out=None):
        y_pred, y_true, dtype = self._inputs(y_pred, y_true)
        return self._grad(-y_true, y_true.size, dtype, out)


@dataclass(frozen=True)
class HingeEmbeddingLoss(Loss):
    """
    Hinge embedding loss, (1 - target) / 2 + prediction * target per element.

    The gradient is the target itself and does not depend on the prediction.
    """
    NAME = "hinge_embedding"

    reduction: bool = True

    def __post_init__(self):
        object.__setattr__(self, "reduction", self._check_flag("reduction", self.reduction))
        logger.debug(f"Created {self!r}")

    def forward(self, y_pred, y_true):
        y_pred, y_true, _ = self._inputs(y_pred, y_true)
        loss = (1.0 - y_true) / 2.0 + y_pred * y_true
        return self._reduce(np.sum(loss), y_true.size)

    def backward(self, y_pred, y_true, out=None):
        y_pred, y_true, dtype = self._inputs(y_pred, y_true)
        return self._grad(y_true.copy(), y_true.size, dtype, out)


@dataclass(frozen=True)
class KLDivergence(Loss):
    """
    Kullback-Leibler divergence of the target distribution from the prediction.

    The prediction is expected in log-probability space, the target as
    probabilities: loss = target * (log(target) - prediction).
    """
    NAME = "kl_divergence"

    reduction: bool = True

    def __post_init__(self):
        object.__setattr__(self, "reduction", self._check_flag("reduction", self.reduction))
        logger.debug(f"Created {self!r}")

    def forward(self, y_pred, y_true):
        y_pred, y_true, _ = self._inputs(y_pred, y_true)
        loss = y_true * (np.log(y_true) - y_pred)
        return self._reduce(np.sum(loss), y_true.size)

    def backward(self, y_pred, y_true, out=None):
        y_pred, y_true, dtype = self._inputs(y_pred, y_true)
        return self._grad(-y_true, y_true.size, dtype, out)


@dataclass(frozen=True)
class LogCoshLoss(Loss):
    """
    Log-hyperbolic-cosine loss, sum(log(cosh(a * (target - prediction)))) / a.

    Larger a makes the loss closer to absolute error, smaller a closer to
    squared error. a must be strictly positive.
    """
    NAME = "log_cosh"

    a: float = 1.0
    reduction: bool = True

    def __post_init__(self):
        a = self._check_real("a", self.a)
        if not a > 0:
            raise InvalidHyperparameterError(f"Hyper-parameter 'a' must be positive, got {a}")
        object.__setattr__(self, "a", a)
        object.__setattr__(self, "reduction", self._check_flag("reduction", self.reduction))
        logger.debug(f"Created {self!r}")

    def forward(self, y_pred, y_true):
        y_pred, y_true, _ = self._inputs(y_pred, y_true)
        total = np.sum(_log_cosh(self.a * (y_true - y_pred))) / self.a
        return self._reduce(total, y_true.size)

    def backward(self, y_pred, y_true, out=None):
        y_pred, y_true, dtype = self._inputs(y_pred, y_true)
        return self._grad(np.tanh(self.a * (y_true - y_pred)), y_true.size, dtype, out)
