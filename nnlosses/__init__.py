from .errors import LossError, ShapeMismatchError, InvalidHyperparameterError, InvalidOutputError, SerializationError
from .base import Loss
from .losses import CosineEmbeddingLoss, EarthMoverDistance, HingeEmbeddingLoss, KLDivergence, LogCoshLoss
from .registry import LOSSES, get_loss, save_to, load_from
from .utils import cosine_distance, normalize, check_same_shape
