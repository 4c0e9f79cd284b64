import logging
import os
import sys

import numpy as np

from .errors import ShapeMismatchError

# Directory for log files written by setup_logging
OUTPUT_DIR = "output"


def setup_logging(log_file_name: str = "run.log", output_dir: str = OUTPUT_DIR):
    """
    Configures logging to write to a file in output_dir and to the console.

    Args:
        log_file_name (str): The name of the log file to create (e.g., "train.log")
        output_dir (str): Directory the log file is written to
    """
    logger = logging.getLogger()
    logger.setLevel(logging.INFO)

    # Clear existing handlers (re-running in notebooks)
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)

    os.makedirs(output_dir, exist_ok=True)
    log_file_path = os.path.join(output_dir, log_file_name)

    file_handler = logging.FileHandler(log_file_path, mode='w')
    file_handler.setFormatter(logging.Formatter('%(asctime)s - %(levelname)s - %(message)s'))

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(logging.Formatter('%(message)s'))

    logger.addHandler(file_handler)
    logger.addHandler(console_handler)

    logging.info(f"Logging configured. Output will be saved to {log_file_path}")
    return log_file_path


def as_float_array(x):
    """Coerce x to a floating ndarray; ints and bools become float64."""
    x = np.asarray(x)
    if not np.issubdtype(x.dtype, np.floating):
        x = x.astype(np.float64)
    return x


def check_same_shape(prediction, target):
    if prediction.shape != target.shape:
        raise ShapeMismatchError(
            f"Input tensors must have same dimensions: "
            f"prediction {prediction.shape} vs target {target.shape}"
        )


def normalize(x, axis=-1):
    """Scale x to unit L2 norm along axis."""
    x = as_float_array(x)
    return x / np.linalg.norm(x, axis=axis, keepdims=True)


def cosine_distance(a, b, axis=-1):
    """
    1 - cosine similarity between a and b along axis.

    For two vectors this is a scalar; for (batch, dim) inputs one distance per row.
    """
    a = as_float_array(a)
    b = as_float_array(b)
    check_same_shape(a, b)
    dot = np.sum(a * b, axis=axis)
    return 1.0 - dot / (np.linalg.norm(a, axis=axis) * np.linalg.norm(b, axis=axis))
