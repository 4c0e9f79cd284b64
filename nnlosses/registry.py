import json
import logging
import os
from typing import Any, Dict, Union

from .base import _REGISTRY, Loss
from .errors import InvalidHyperparameterError, SerializationError
from . import losses  # noqa: F401  (registers the loss classes)

logger = logging.getLogger(__name__)

LOSSES = _REGISTRY


def get_loss(config: Union[str, Dict[str, Any]]) -> Loss:
    """
    Instantiates a loss from a registry name or a config dictionary.

    Args:
        config: Either a name such as "log_cosh", or a dict like
                {"name": "log_cosh", "a": 2.0, "reduction": False}.
                A "version" key, if present, must match the loss version.

    Returns:
        Loss: The constructed loss instance.
    """
    if isinstance(config, str):
        config = {"name": config}
    params = dict(config)
    name = params.pop("name", None)
    if name not in LOSSES:
        raise InvalidHyperparameterError(
            f"Unsupported loss function: {name!r}. Available: {sorted(LOSSES)}"
        )
    cls = LOSSES[name]

    version = params.pop("version", cls.VERSION)
    if version != cls.VERSION:
        raise InvalidHyperparameterError(
            f"Unsupported version {version!r} for {name!r} (expected {cls.VERSION})"
        )

    try:
        loss = cls(**params)
    except TypeError as e:
        raise InvalidHyperparameterError(f"Bad hyperparameters for {name!r}: {e}") from e
    logger.info(f"Instantiated loss: {loss!r}")
    return loss


def save_to(loss: Loss, path: str) -> str:
    """Write the loss's serialized hyperparameters to a JSON file."""
    parent = os.path.dirname(path)
    if parent:
        os.makedirs(parent, exist_ok=True)
    with open(path, "w") as f:
        json.dump(loss.serialize(), f, indent=2)
    logger.info(f"Saved {loss.NAME} state to {path}")
    return path


def load_from(path: str) -> Loss:
    with open(path) as f:
        try:
            state = json.load(f)
        except json.JSONDecodeError as e:
            raise SerializationError(f"Could not parse loss state in {path}: {e}") from e
    if not isinstance(state, dict):
        raise SerializationError(f"Expected a JSON object in {path}, got {type(state).__name__}")
    loss = Loss.deserialize(state)
    logger.info(f"Loaded {loss!r} from {path}")
    return loss
