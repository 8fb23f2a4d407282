"""Common reader for one EuRoC sensor directory (data.csv + sensor.yaml)."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, ClassVar, Generic, Iterator, TypeVar

import numpy as np

from ..common import Timestamp, load_yaml, parse_transform
from ..config import DATA_CSV, SENSOR_YAML, ReaderConfig
from ..errors import RecordParseError
from ..pose import SE3

logger = logging.getLogger(__name__)

RecordT = TypeVar("RecordT")


@dataclass(frozen=True, eq=False)
class SensorCalibration:
    """Fields every EuRoC sensor.yaml carries.

    Attributes:
        sensor_type: Value of ``sensor_type`` (e.g. "camera", "imu"), may be empty
        comment: Free-form ``comment`` field, may be empty
        T_BS: 4x4 transform from sensor frame to body frame
        rate_hz: Nominal sampling rate, None when the file doesn't state it
    """

    sensor_type: str
    comment: str
    T_BS: np.ndarray
    rate_hz: float | None = None


def parse_vector(fields: list[str], start: int) -> np.ndarray:
    """Parse three consecutive CSV fields into a (3,) float64 array."""
    return np.array([float(v) for v in fields[start : start + 3]], dtype=np.float64)


class SensorData(Generic[RecordT]):
    """Base reader bound to a sensor directory such as ``mav0/imu0``.

    Subclasses set ``kind``/``num_columns`` and implement ``_parse_row``.
    Records are read lazily: every call to ``records()`` opens data.csv
    again and yields one record per data row in file order.
    """

    kind: ClassVar[str] = "sensor"
    num_columns: ClassVar[int] = 1
    required_dirs: ClassVar[tuple[str, ...]] = ()

    def __init__(self, path: str | Path, config: ReaderConfig | None = None) -> None:
        """Bind the reader to a sensor directory.

        Args:
            path: Sensor directory (e.g. ``mav0/imu0``)
            config: Row handling options, strict by default

        Raises:
            FileNotFoundError: If the directory, data.csv or sensor.yaml is missing
        """
        self.path = Path(path)
        self._config = config or ReaderConfig()
        self._sensor_yaml: dict[str, Any] | None = None
        self._validate_paths()

    def _validate_paths(self) -> None:
        if not self.path.is_dir():
            raise FileNotFoundError(f"{self.kind} directory not found: {self.path}")

        for name in self.required_dirs:
            if not (self.path / name).is_dir():
                raise FileNotFoundError(
                    f"{self.path.name}/{name} directory not found: {self.path / name}"
                )

        for name in (DATA_CSV, SENSOR_YAML):
            if not (self.path / name).is_file():
                raise FileNotFoundError(
                    f"{self.path.name}/{name} not found: {self.path / name}"
                )

    @property
    def name(self) -> str:
        """Sensor name, i.e. the directory name (cam0, imu0, ...)."""
        return self.path.name

    @property
    def csv_path(self) -> Path:
        """Path to data.csv."""
        return self.path / DATA_CSV

    @property
    def yaml_path(self) -> Path:
        """Path to sensor.yaml."""
        return self.path / SENSOR_YAML

    def sensor_yaml(self) -> dict[str, Any]:
        """Return the parsed sensor.yaml (loaded once, then cached)."""
        if self._sensor_yaml is None:
            self._sensor_yaml = load_yaml(self.yaml_path)
        return self._sensor_yaml

    def calibration(self) -> SensorCalibration:
        """Parse the fields every sensor.yaml carries.

        Returns:
            SensorCalibration with sensor type, comment, T_BS and rate

        Raises:
            CalibrationError: If T_BS is missing or malformed
        """
        data = self.sensor_yaml()
        rate = data.get("rate_hz")
        return SensorCalibration(
            sensor_type=str(data.get("sensor_type") or ""),
            comment=str(data.get("comment") or ""),
            T_BS=parse_transform(data, self.yaml_path),
            rate_hz=float(rate) if rate is not None else None,
        )

    def extrinsics(self) -> np.ndarray:
        """Return extrinsics wrt. the body frame (T_BS) as a 4x4 matrix."""
        return parse_transform(self.sensor_yaml(), self.yaml_path)

    def body_to_sensor(self) -> SE3:
        """Return T_BS as an SE3 (maps sensor-frame points into the body frame)."""
        return SE3.from_matrix(self.extrinsics())

    def _parse_row(self, fields: list[str]) -> RecordT:
        raise NotImplementedError

    def _rows(self) -> Iterator[tuple[int, str, list[str]]]:
        """Yield (line_number, line, fields) for every data row of data.csv.

        CSV format (header and comment lines start with '#'):
            #timestamp [ns],w_RS_S_x [rad s^-1],...
            1403636579758555392,-0.099134701513277898,...
        """
        logger.debug("Opening %s", self.csv_path)
        with open(self.csv_path, "r") as f:
            for line_number, raw in enumerate(f, start=1):
                line = raw.strip()
                if not line or line.startswith("#"):
                    continue
                yield line_number, line, [field.strip() for field in line.split(",")]
        logger.debug("Closed %s", self.csv_path)

    def records(self) -> Iterator[RecordT]:
        """Iterate over all records in file order.

        Raises:
            RecordParseError: On a malformed row or a non-increasing timestamp
                (only in strict mode; otherwise the row is logged and skipped)
        """
        last_timestamp: int | None = None

        for line_number, line, fields in self._rows():
            try:
                if len(fields) < self.num_columns:
                    raise ValueError(
                        f"expected {self.num_columns} columns, got {len(fields)}"
                    )
                record = self._parse_row(fields)
                timestamp = record.timestamp  # type: ignore[attr-defined]
                if (
                    self._config.check_monotonic
                    and last_timestamp is not None
                    and timestamp <= last_timestamp
                ):
                    raise ValueError(
                        f"timestamp {timestamp} does not follow {last_timestamp}"
                    )
            except ValueError as e:
                error = RecordParseError(self.csv_path, line_number, line, str(e))
                if self._config.strict:
                    raise error from e
                logger.warning("Skipping row: %s", error)
                continue

            last_timestamp = timestamp
            yield record

    def timestamps(self) -> np.ndarray:
        """Return all record timestamps as an int64 array."""
        return np.fromiter(
            (int(r.timestamp) for r in self.records()),  # type: ignore[attr-defined]
            dtype=np.int64,
        )

    def __iter__(self) -> Iterator[RecordT]:
        return self.records()

    def __len__(self) -> int:
        """Number of data rows in data.csv."""
        return sum(1 for _ in self._rows())

    def __repr__(self) -> str:
        return f"{type(self).__name__}(path='{self.path}')"


def parse_timestamp(field: str) -> Timestamp:
    """Parse a nanosecond timestamp field.

    Only plain decimal digits are accepted, so signs, floats and
    underscore separators are rejected.
    """
    if not (field.isascii() and field.isdigit()):
        raise ValueError(f"invalid timestamp '{field}'")
    return Timestamp(int(field))
