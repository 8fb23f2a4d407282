"""Shared primitives: timestamps and sensor.yaml loading."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import numpy as np
import yaml

from .errors import CalibrationError

NSECS_PER_SEC = 1_000_000_000


class Timestamp(int):
    """Nanosecond timestamp as used throughout EuRoC (e.g. 1403636579763555584).

    Behaves exactly like an ``int`` (ordering, hashing, arithmetic, bisect),
    with a few unit helpers on top.
    """

    __slots__ = ()

    @classmethod
    def from_secs(cls, secs: float) -> Timestamp:
        """Create a timestamp from seconds."""
        return cls(round(secs * NSECS_PER_SEC))

    @property
    def nsecs(self) -> int:
        """Timestamp in nanoseconds as a plain int."""
        return int(self)

    @property
    def secs(self) -> float:
        """Timestamp in seconds."""
        return int(self) / NSECS_PER_SEC

    def __repr__(self) -> str:
        return f"Timestamp({int(self)})"


def load_yaml(path: str | Path) -> dict[str, Any]:
    """Load a sensor.yaml file into a dict.

    Raises:
        FileNotFoundError: If the file doesn't exist
        CalibrationError: If the file is not a YAML mapping
    """
    path = Path(path)
    if not path.is_file():
        raise FileNotFoundError(f"Sensor calibration not found: {path}")

    with open(path, "r") as f:
        try:
            data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise CalibrationError(f"Invalid YAML in {path}: {e}") from e

    if not isinstance(data, dict):
        raise CalibrationError(f"Expected a mapping at top level of {path}")
    return data


def require(data: dict[str, Any], key: str, source: str | Path) -> Any:
    """Return ``data[key]`` or raise CalibrationError naming the file."""
    if key not in data or data[key] is None:
        raise CalibrationError(f"Missing '{key}' in {source}")
    return data[key]


def parse_float_list(
    data: dict[str, Any], key: str, length: int, source: str | Path
) -> list[float]:
    """Read a fixed-length list of numbers from a calibration mapping."""
    values = require(data, key, source)
    if not isinstance(values, (list, tuple)) or len(values) != length:
        raise CalibrationError(
            f"Expected {length} values for '{key}' in {source}, got {values!r}"
        )
    try:
        return [float(v) for v in values]
    except (TypeError, ValueError) as e:
        raise CalibrationError(f"Non-numeric value in '{key}' in {source}") from e


def parse_transform(data: dict[str, Any], source: str | Path, key: str = "T_BS") -> np.ndarray:
    """Parse a 4x4 row-major homogeneous transform block.

    EuRoC stores extrinsics as::

        T_BS:
          cols: 4
          rows: 4
          data: [1.0, 0.0, 0.0, 0.0, ...]

    Returns:
        (4, 4) float64 matrix
    """
    block = require(data, key, source)
    if not isinstance(block, dict):
        raise CalibrationError(f"'{key}' in {source} must be a matrix block")

    rows = block.get("rows", 4)
    cols = block.get("cols", 4)
    if (rows, cols) != (4, 4):
        raise CalibrationError(f"'{key}' in {source} must be 4x4, got {rows}x{cols}")

    values = parse_float_list(block, "data", 16, source)
    return np.array(values, dtype=np.float64).reshape(4, 4)
