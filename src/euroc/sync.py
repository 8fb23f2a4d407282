"""Time alignment of EuRoC sensor streams.

All helpers assume each input stream is sorted by timestamp, which the
stream readers guarantee in their default (monotonic) mode. Streams are
consumed lazily unless noted otherwise.
"""

from __future__ import annotations

import bisect
import heapq
import itertools
import logging
from dataclasses import dataclass, field, replace
from typing import Any, Generic, Iterable, Iterator, TypeVar

import numpy as np

from .common import Timestamp
from .config import CAM1, GROUND_TRUTH, IMU0, SyncConfig
from .dataset import EuRoC
from .io import ImageRecord, ImuRecord, Trajectory
from .pose import SE3

logger = logging.getLogger(__name__)

R = TypeVar("R")
L = TypeVar("L")


class TimeIndex(Generic[R]):
    """In-memory, timestamp-sorted view of a stream with binary-search lookups.

    Example usage:
        imu = TimeIndex(dataset.imu().records())
        samples = imu.between(t_prev_frame, t_frame)
    """

    def __init__(self, records: Iterable[R]) -> None:
        self._records: list[R] = list(records)
        self._timestamps: list[int] = [int(r.timestamp) for r in self._records]  # type: ignore[attr-defined]

        if any(b < a for a, b in zip(self._timestamps, self._timestamps[1:])):
            raise ValueError("TimeIndex records must be sorted by timestamp")

    def at(self, timestamp_ns: int) -> R | None:
        """Return the record with exactly this timestamp, if any."""
        idx = bisect.bisect_left(self._timestamps, timestamp_ns)
        if idx < len(self._timestamps) and self._timestamps[idx] == timestamp_ns:
            return self._records[idx]
        return None

    def nearest(self, timestamp_ns: int, tolerance_ns: int | None = None) -> R | None:
        """Return the record closest in time to ``timestamp_ns``.

        Args:
            timestamp_ns: Query timestamp in nanoseconds
            tolerance_ns: Maximum allowed offset; None accepts any offset

        Returns:
            Closest record (the earlier one on a tie), or None if the index
            is empty or the closest record is farther than the tolerance
        """
        if not self._timestamps:
            return None

        idx = bisect.bisect_left(self._timestamps, timestamp_ns)
        if idx == 0:
            best = 0
        elif idx >= len(self._timestamps):
            best = len(self._timestamps) - 1
        elif timestamp_ns - self._timestamps[idx - 1] <= self._timestamps[idx] - timestamp_ns:
            best = idx - 1
        else:
            best = idx

        if tolerance_ns is not None and abs(self._timestamps[best] - timestamp_ns) > tolerance_ns:
            return None
        return self._records[best]

    def between(self, start_ns: int, end_ns: int) -> list[R]:
        """Return records with start_ns <= timestamp < end_ns."""
        start_idx = bisect.bisect_left(self._timestamps, start_ns)
        end_idx = bisect.bisect_left(self._timestamps, end_ns)
        return self._records[start_idx:end_idx]

    @property
    def start_timestamp(self) -> Timestamp | None:
        return Timestamp(self._timestamps[0]) if self._timestamps else None

    @property
    def end_timestamp(self) -> Timestamp | None:
        return Timestamp(self._timestamps[-1]) if self._timestamps else None

    def __iter__(self) -> Iterator[R]:
        return iter(self._records)

    def __len__(self) -> int:
        return len(self._records)


def _tagged(name: str, records: Iterable[Any]) -> Iterator[tuple[str, Any]]:
    for record in records:
        yield name, record


def merge_streams(**streams: Iterable[Any]) -> Iterator[tuple[str, Any]]:
    """Interleave several streams into one chronological stream.

    Example:
        for name, record in merge_streams(imu=imu.records(), cam0=cam.records()):
            ...

    Records with equal timestamps come out in the order the streams were
    passed.

    Yields:
        (stream_name, record) tuples with non-decreasing timestamps
    """
    tagged = [_tagged(name, records) for name, records in streams.items()]
    return heapq.merge(*tagged, key=lambda item: item[1].timestamp)


def match_nearest(
    reference: Iterable[R], other: Iterable[L], tolerance_ns: int | None = None
) -> Iterator[tuple[R, L | None]]:
    """Pair every reference record with the nearest record of another stream.

    ``other`` is loaded into a TimeIndex; ``reference`` stays lazy.

    Yields:
        (reference_record, nearest_other_record or None if out of tolerance)
    """
    index = TimeIndex(other)
    for record in reference:
        yield record, index.nearest(record.timestamp, tolerance_ns)  # type: ignore[attr-defined]


def stereo_pairs(
    left: Iterable[ImageRecord], right: Iterable[ImageRecord], tolerance_ns: int = 1_000_000
) -> Iterator[tuple[ImageRecord, ImageRecord]]:
    """Pair left and right frames whose timestamps agree within tolerance.

    Both streams are walked once in lockstep. Each right frame is used at
    most once and goes to the nearer of two neighbouring left frames (the
    earlier one on a tie). Frames without a partner are dropped.
    """
    left_iter = iter(left)
    right_iter = iter(right)
    left_record = next(left_iter, None)
    candidate = next(right_iter, None)

    while left_record is not None:
        next_left = next(left_iter, None)
        while candidate is not None and candidate.timestamp < left_record.timestamp - tolerance_ns:
            logger.debug("Dropping unmatched right frame %d", candidate.timestamp)
            candidate = next(right_iter, None)

        if candidate is None or abs(candidate.timestamp - left_record.timestamp) > tolerance_ns:
            logger.debug("Dropping unmatched left frame %d", left_record.timestamp)
        elif next_left is not None and abs(candidate.timestamp - next_left.timestamp) < abs(
            candidate.timestamp - left_record.timestamp
        ):
            logger.debug(
                "Dropping left frame %d, right frame %d is nearer the next one",
                left_record.timestamp,
                candidate.timestamp,
            )
        else:
            yield left_record, candidate
            candidate = next(right_iter, None)

        left_record = next_left


def imu_intervals(
    frames: Iterable[R], imu: Iterable[ImuRecord]
) -> Iterator[tuple[R, list[ImuRecord]]]:
    """Attach to each frame the IMU samples since the previous frame.

    Frame k receives samples with t_{k-1} <= t < t_k; the first frame
    receives every sample before it. Samples after the last frame are
    not returned.
    """
    imu_iter = iter(imu)
    pending = next(imu_iter, None)

    for frame in frames:
        timestamp = frame.timestamp  # type: ignore[attr-defined]
        batch: list[ImuRecord] = []
        while pending is not None and pending.timestamp < timestamp:
            batch.append(pending)
            pending = next(imu_iter, None)
        yield frame, batch


@dataclass
class SyncFrame:
    """One camera frame with everything aligned to it.

    Attributes:
        timestamp: Left camera timestamp in nanoseconds
        left: Left camera record
        right: Matched right camera record, None when stereo is disabled
        imu: IMU samples since the previous frame
        ground_truth: Interpolated body pose T_W_B, None when unavailable
    """

    timestamp: Timestamp
    left: ImageRecord
    right: ImageRecord | None = None
    imu: list[ImuRecord] = field(default_factory=list)
    ground_truth: SE3 | None = None

    def load_images(self) -> tuple[np.ndarray, np.ndarray | None]:
        """Read (left, right) images from disk; right is None for mono frames."""
        right = self.right.load() if self.right is not None else None
        return self.left.load(), right


class Synchronizer:
    """Iterate a sequence frame by frame with all streams aligned.

    Example usage:
        sync = Synchronizer(EuRoC("data/euroc/MH_01_easy/mav0"))
        for frame in sync:
            left, right = frame.load_images()
            for sample in frame.imu:
                ...
    """

    def __init__(self, dataset: EuRoC, config: SyncConfig | None = None) -> None:
        """Initialize the synchronizer.

        Args:
            dataset: An opened EuRoC sequence
            config: Which streams to attach and the stereo tolerance
        """
        self._dataset = dataset
        self._config = config or SyncConfig()
        self._trajectory: Trajectory | None = None

    def _frames(self) -> Iterator[SyncFrame]:
        left = self._dataset.left_camera()

        if self._config.stereo and self._dataset.has_sensor(CAM1):
            right = self._dataset.right_camera()
            for left_record, right_record in stereo_pairs(
                left.records(), right.records(), self._config.stereo_tolerance_ns
            ):
                yield SyncFrame(
                    timestamp=left_record.timestamp, left=left_record, right=right_record
                )
        else:
            for left_record in left.records():
                yield SyncFrame(timestamp=left_record.timestamp, left=left_record)

    def trajectory(self) -> Trajectory | None:
        """Ground truth trajectory, loaded on first use; None if the sequence has none."""
        if self._trajectory is None and self._dataset.has_sensor(GROUND_TRUTH):
            self._trajectory = self._dataset.ground_truth().trajectory()
        return self._trajectory

    def __iter__(self) -> Iterator[SyncFrame]:
        frames: Iterator[SyncFrame] = self._frames()

        if self._config.imu and self._dataset.has_sensor(IMU0):
            frames = (
                replace(frame, imu=samples)
                for frame, samples in imu_intervals(frames, self._dataset.imu().records())
            )

        trajectory = self.trajectory() if self._config.ground_truth else None
        if trajectory is not None:
            frames = (
                replace(frame, ground_truth=trajectory.pose_at(frame.timestamp))
                for frame in frames
            )

        if self._config.max_frames is not None:
            frames = itertools.islice(frames, self._config.max_frames)

        return frames
