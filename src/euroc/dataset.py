"""Dataset index: the mav0 root of one EuRoC sequence and its manifest."""

from __future__ import annotations

import logging
from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from pathlib import Path

from .common import Timestamp, load_yaml
from .config import (
    CAM0,
    CAM1,
    DATA_CSV,
    GROUND_TRUTH,
    IMU0,
    LEICA0,
    SENSOR_YAML,
    ReaderConfig,
    default_dataset_path,
)
from .errors import CalibrationError
from .io import CameraData, GroundTruthData, ImuData, PositionData, SensorData, StereoRig

logger = logging.getLogger(__name__)

# Reader class per sensor kind
READERS: dict[str, type[SensorData]] = {
    "camera": CameraData,
    "imu": ImuData,
    "position": PositionData,
    "ground_truth": GroundTruthData,
}


def sensor_kind(path: Path) -> str | None:
    """Guess the kind of a sensor directory.

    Directory names follow the ASL convention (cam*, imu*, leica*,
    state_groundtruth_estimate*); other directories fall back to the
    ``sensor_type`` key in their sensor.yaml.
    """
    name = path.name
    if name.startswith("cam"):
        return "camera"
    if name.startswith("imu"):
        return "imu"
    if name.startswith("leica"):
        return "position"
    if name.startswith("state_groundtruth_estimate"):
        return "ground_truth"

    try:
        sensor_type = str(load_yaml(path / SENSOR_YAML).get("sensor_type", "")).lower()
    except (FileNotFoundError, CalibrationError):
        return None
    return sensor_type if sensor_type in READERS else None


@dataclass(frozen=True)
class StreamInfo:
    """Summary of one sensor stream.

    Attributes:
        name: Sensor directory name (unique within a sequence)
        kind: "camera", "imu", "position" or "ground_truth"
        path: Sensor directory
        num_records: Number of data rows in data.csv
        start_timestamp: First timestamp, None for an empty stream
        end_timestamp: Last timestamp, None for an empty stream
    """

    name: str
    kind: str
    path: Path
    num_records: int
    start_timestamp: Timestamp | None
    end_timestamp: Timestamp | None

    @property
    def duration_s(self) -> float:
        if self.start_timestamp is None or self.end_timestamp is None:
            return 0.0
        return (self.end_timestamp - self.start_timestamp) / 1e9


class DatasetManifest(Mapping[str, StreamInfo]):
    """Streams available in a sequence, keyed by sensor name."""

    def __init__(self, root: Path, streams: list[StreamInfo]) -> None:
        self.root = root
        self._streams: dict[str, StreamInfo] = {}
        for info in sorted(streams, key=lambda s: s.name):
            if info.name in self._streams:
                raise ValueError(f"Duplicate sensor name in manifest: {info.name}")
            self._streams[info.name] = info

    def __getitem__(self, name: str) -> StreamInfo:
        return self._streams[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._streams)

    def __len__(self) -> int:
        return len(self._streams)

    def by_kind(self, kind: str) -> list[StreamInfo]:
        """Return the streams of one kind, sorted by name."""
        return [info for info in self._streams.values() if info.kind == kind]

    @property
    def start_timestamp(self) -> Timestamp | None:
        """Earliest timestamp over all streams."""
        starts = [s.start_timestamp for s in self._streams.values() if s.start_timestamp is not None]
        return min(starts) if starts else None

    @property
    def end_timestamp(self) -> Timestamp | None:
        """Latest timestamp over all streams."""
        ends = [s.end_timestamp for s in self._streams.values() if s.end_timestamp is not None]
        return max(ends) if ends else None


class EuRoC:
    """Root of one EuRoC sequence (the ``mav0`` directory).

    Example usage:
        dataset = EuRoC("data/euroc/MH_01_easy/mav0")
        imu = dataset.imu()
        for record in imu.records():
            print(record.timestamp, record.gyro, record.accel)
    """

    def __init__(
        self, root: str | Path | None = None, config: ReaderConfig | None = None
    ) -> None:
        """Open a sequence.

        Args:
            root: Path to the mav0 directory; defaults to $EUROC_DATASET or
                data/euroc/MH_01_easy/mav0
            config: Row handling options passed to every stream reader

        Raises:
            FileNotFoundError: If the root directory doesn't exist
        """
        self.root = Path(root) if root is not None else default_dataset_path()
        self._config = config or ReaderConfig()

        if not self.root.is_dir():
            raise FileNotFoundError(f"Dataset path does not exist: {self.root}")

    def left_camera(self) -> CameraData:
        return CameraData(self.root / CAM0, self._config)

    def right_camera(self) -> CameraData:
        return CameraData(self.root / CAM1, self._config)

    def stereo_rig(self) -> StereoRig:
        return StereoRig(self.left_camera(), self.right_camera())

    def imu(self) -> ImuData:
        return ImuData(self.root / IMU0, self._config)

    def position(self) -> PositionData:
        """Leica positions; only the Machine Hall sequences ship leica0."""
        return PositionData(self.root / LEICA0, self._config)

    def ground_truth(self) -> GroundTruthData:
        return GroundTruthData(self.root / GROUND_TRUTH, self._config)

    def has_sensor(self, name: str) -> bool:
        """Return True if ``name`` is a complete sensor directory.

        Besides data.csv and sensor.yaml, the directories its reader needs
        (``data/`` for cameras) must exist too.
        """
        path = self.root / name
        if not ((path / DATA_CSV).is_file() and (path / SENSOR_YAML).is_file()):
            return False
        reader = READERS.get(sensor_kind(path) or "")
        required_dirs = reader.required_dirs if reader is not None else ()
        return all((path / dir_name).is_dir() for dir_name in required_dirs)

    def sensor(self, name: str) -> SensorData:
        """Open any sensor directory by name with the matching reader.

        Raises:
            FileNotFoundError: If the directory is missing or incomplete
            ValueError: If the sensor kind cannot be determined
        """
        path = self.root / name
        if not path.is_dir():
            raise FileNotFoundError(f"Sensor directory not found: {path}")
        kind = sensor_kind(path)
        if kind is None:
            raise ValueError(f"Unknown sensor kind for {path}")
        return READERS[kind](path, self._config)

    def manifest(self) -> DatasetManifest:
        """Scan the sequence and summarize every readable sensor stream.

        Directories without data.csv/sensor.yaml (e.g. body.yaml siblings)
        and unknown sensor kinds (e.g. pointcloud0) are skipped.
        """
        streams: list[StreamInfo] = []
        for path in sorted(p for p in self.root.iterdir() if p.is_dir()):
            if not self.has_sensor(path.name):
                logger.debug("Skipping %s: incomplete sensor directory", path)
                continue

            kind = sensor_kind(path)
            if kind is None:
                logger.warning("Skipping %s: unknown sensor kind", path)
                continue

            try:
                reader = READERS[kind](path, self._config)
            except FileNotFoundError as e:
                logger.warning("Skipping %s: %s", path, e)
                continue

            timestamps = reader.timestamps()
            streams.append(
                StreamInfo(
                    name=path.name,
                    kind=kind,
                    path=path,
                    num_records=len(timestamps),
                    start_timestamp=Timestamp(timestamps[0]) if len(timestamps) else None,
                    end_timestamp=Timestamp(timestamps[-1]) if len(timestamps) else None,
                )
            )

        manifest = DatasetManifest(self.root, streams)
        logger.info("Indexed %d streams in %s", len(manifest), self.root)
        return manifest

    def __repr__(self) -> str:
        return f"EuRoC(root='{self.root}')"
