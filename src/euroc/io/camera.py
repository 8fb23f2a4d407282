"""EuRoC camera streams (cam0 / cam1) and their calibration."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Iterator

import cv2
import numpy as np

from ..common import Timestamp, parse_float_list, parse_transform, require
from ..config import DATA_DIR
from ..errors import CalibrationError
from ..pose import SE3
from .sensor import SensorData, parse_timestamp


@dataclass(frozen=True)
class CameraIntrinsics:
    """Pinhole intrinsics as stored in sensor.yaml ``intrinsics: [fu, fv, cu, cv]``."""

    fu: float  # Focal length x (pixels)
    fv: float  # Focal length y (pixels)
    cu: float  # Principal point x (pixels)
    cv: float  # Principal point y (pixels)

    def to_matrix(self) -> np.ndarray:
        """Return the 3x3 camera matrix K."""
        return np.array(
            [[self.fu, 0.0, self.cu], [0.0, self.fv, self.cv], [0.0, 0.0, 1.0]],
            dtype=np.float64,
        )

    def as_tuple(self) -> tuple[float, float, float, float]:
        return (self.fu, self.fv, self.cu, self.cv)


@dataclass(frozen=True, eq=False)
class CameraCalibration:
    """Full contents of a camera sensor.yaml.

    Attributes:
        resolution: Image size as (width, height)
        intrinsics: Pinhole intrinsics
        distortion: Distortion coefficients, (k1, k2, p1, p2) for radtan
        camera_model: e.g. "pinhole"
        distortion_model: e.g. "radial-tangential"
        rate_hz: Frame rate
        T_BS: 4x4 camera-to-body transform
    """

    resolution: tuple[int, int]
    intrinsics: CameraIntrinsics
    distortion: np.ndarray
    camera_model: str
    distortion_model: str
    rate_hz: float | None
    T_BS: np.ndarray


@dataclass(frozen=True)
class ImageRecord:
    """One row of cam*/data.csv. The image itself is read on demand."""

    timestamp: Timestamp
    filename: str
    path: Path

    def load(self, flags: int = cv2.IMREAD_GRAYSCALE) -> np.ndarray:
        """Read the image from disk.

        Args:
            flags: OpenCV imread flags, grayscale by default (EuRoC images
                are 8-bit monochrome)

        Raises:
            FileNotFoundError: If the image file doesn't exist
            ValueError: If OpenCV cannot decode it
        """
        if not self.path.is_file():
            raise FileNotFoundError(f"Camera image not found: {self.path}")

        image = cv2.imread(str(self.path), flags)
        if image is None:
            raise ValueError(f"Failed to load image: {self.path}")
        return image


class CameraData(SensorData[ImageRecord]):
    """Reader for one camera directory.

    Example usage:
        camera = CameraData("data/euroc/MH_01_easy/mav0/cam0")
        K = camera.camera_matrix()
        for record in camera.records():
            image = record.load()
    """

    kind = "camera"
    num_columns = 2
    required_dirs = (DATA_DIR,)

    @property
    def data_path(self) -> Path:
        """Directory holding the image files."""
        return self.path / DATA_DIR

    def calibration(self) -> CameraCalibration:
        """Parse the camera sensor.yaml.

        Returns:
            CameraCalibration with resolution, intrinsics, distortion and T_BS

        Raises:
            CalibrationError: If a required key is missing or malformed
        """
        data = self.sensor_yaml()
        source = self.yaml_path

        resolution = require(data, "resolution", source)
        if not isinstance(resolution, (list, tuple)) or len(resolution) != 2:
            raise CalibrationError(f"Expected [width, height] resolution in {source}")

        rate = data.get("rate_hz")
        return CameraCalibration(
            resolution=(int(resolution[0]), int(resolution[1])),
            intrinsics=CameraIntrinsics(*parse_float_list(data, "intrinsics", 4, source)),
            distortion=np.array(
                parse_float_list(data, "distortion_coefficients", 4, source),
                dtype=np.float64,
            ),
            camera_model=str(data.get("camera_model", "pinhole")),
            distortion_model=str(data.get("distortion_model", "radial-tangential")),
            rate_hz=float(rate) if rate is not None else None,
            T_BS=parse_transform(data, source),
        )

    def image_size(self) -> tuple[int, int]:
        """Return image size (width, height)."""
        return self.calibration().resolution

    def intrinsics(self) -> tuple[float, float, float, float]:
        """Return intrinsics (fu, fv, cu, cv)."""
        return self.calibration().intrinsics.as_tuple()

    def camera_matrix(self) -> np.ndarray:
        """Return the 3x3 camera matrix K built from the intrinsics."""
        return self.calibration().intrinsics.to_matrix()

    def distortion_coeff(self) -> np.ndarray:
        """Return distortion coefficients (k1, k2, p1, p2)."""
        return self.calibration().distortion.copy()

    def undistort(self, image: np.ndarray) -> np.ndarray:
        """Remove lens distortion, keeping the original camera matrix."""
        calibration = self.calibration()
        return cv2.undistort(
            image, calibration.intrinsics.to_matrix(), calibration.distortion
        )

    def _parse_row(self, fields: list[str]) -> ImageRecord:
        filename = fields[1]
        if not filename:
            raise ValueError("empty image filename")
        return ImageRecord(
            timestamp=parse_timestamp(fields[0]),
            filename=filename,
            path=self.data_path / filename,
        )

    def images(self, flags: int = cv2.IMREAD_GRAYSCALE) -> Iterator[tuple[Timestamp, np.ndarray]]:
        """Iterate over (timestamp, image) with images loaded one at a time."""
        for record in self.records():
            yield record.timestamp, record.load(flags)


class StereoRig:
    """Relative geometry of a left/right camera pair.

    The relative pose T_right_left maps points from the left camera frame
    into the right camera frame:

        T_right_left = inv(T_BS_right) @ T_BS_left
    """

    def __init__(self, left: CameraData, right: CameraData) -> None:
        self.left = left
        self.right = right
        T_BS_left = left.body_to_sensor()
        T_BS_right = right.body_to_sensor()
        self._T_right_left = T_BS_right.inverse() @ T_BS_left

    @property
    def T_right_left(self) -> SE3:
        """Relative pose mapping left camera points into the right camera frame."""
        return self._T_right_left

    @property
    def baseline(self) -> float:
        """Distance between the camera centres in metres."""
        return float(np.linalg.norm(self._T_right_left.translation))
