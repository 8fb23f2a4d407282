"""Stereo image pair iterator for EuRoC sequences."""

from __future__ import annotations

from pathlib import Path
from typing import Iterator

import numpy as np

from .config import SyncConfig
from .dataset import EuRoC
from .io import ImageRecord
from .sync import stereo_pairs


class DatasetReader:
    """Iterate over synchronized (left, right, timestamp_ns) stereo frames.

    Frames are paired by timestamp, not by filename, so sequences where
    cam1 drops a frame still line up.
    """

    def __init__(
        self,
        dataset_path: str | Path | None = None,
        config: SyncConfig | None = None,
    ) -> None:
        """Initialize reader with path to dataset.

        Args:
            dataset_path: Path to mav0 directory
            config: Stereo pairing tolerance

        Raises:
            FileNotFoundError: If dataset path or camera directories don't exist
            ValueError: If no stereo pair can be formed from cam0/cam1
        """
        self.dataset = EuRoC(dataset_path)
        self.dataset_path = self.dataset.root
        self._config = config or SyncConfig()

        left = self.dataset.left_camera()
        right = self.dataset.right_camera()

        # Pair records up front; images are read one frame at a time
        self._pairs: list[tuple[ImageRecord, ImageRecord]] = list(
            stereo_pairs(left.records(), right.records(), self._config.stereo_tolerance_ns)
        )

        if not self._pairs:
            raise ValueError(f"No stereo pairs found in {left.csv_path} / {right.csv_path}")

        self._current_idx = 0

    @staticmethod
    def _load_image_pair(
        left: ImageRecord, right: ImageRecord
    ) -> tuple[np.ndarray, np.ndarray]:
        if not left.path.exists():
            raise FileNotFoundError(f"Left camera image not found: {left.path}")
        if not right.path.exists():
            raise FileNotFoundError(f"Right camera image not found: {right.path}")
        return left.load(), right.load()

    def get_next_stereo_pair(self) -> tuple[np.ndarray, np.ndarray, int] | None:
        """Get next synchronized stereo image pair.

        Returns:
            Tuple of (left_image, right_image, timestamp_ns) with grayscale
            images, or None when the sequence is exhausted.

        Example:
            >>> reader = DatasetReader('data/euroc/MH_01_easy/mav0')
            >>> while (pair := reader.get_next_stereo_pair()) is not None:
            ...     left, right, timestamp = pair
        """
        if self._current_idx >= len(self._pairs):
            return None

        left_record, right_record = self._pairs[self._current_idx]
        left, right = self._load_image_pair(left_record, right_record)

        self._current_idx += 1
        return left, right, int(left_record.timestamp)

    @property
    def timestamps(self) -> list[int]:
        """Left camera timestamps of all stereo pairs."""
        return [int(left.timestamp) for left, _ in self._pairs]

    def reset(self) -> None:
        """Reset iterator to beginning of dataset."""
        self._current_idx = 0

    def __len__(self) -> int:
        """Return total number of stereo pairs in dataset."""
        return len(self._pairs)

    def __iter__(self) -> Iterator[tuple[np.ndarray, np.ndarray, int]]:
        self.reset()
        return self

    def __next__(self) -> tuple[np.ndarray, np.ndarray, int]:
        pair = self.get_next_stereo_pair()
        if pair is None:
            raise StopIteration
        return pair
