#!/usr/bin/env python3
"""Print the streams and calibration of one EuRoC sequence.

Usage:
    uv run python examples/manifest_demo.py
    uv run python examples/manifest_demo.py --dataset data/euroc/V1_01_easy/mav0

Requirements:
    - EuRoC dataset downloaded to data/euroc/MH_01_easy/mav0/ (or $EUROC_DATASET)
"""

import argparse
import logging

import numpy as np

from euroc import EuRoC, default_dataset_path


def main() -> None:
    """Run the manifest demo."""
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("--dataset", default=str(default_dataset_path()), help="Path to mav0")
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    dataset = EuRoC(args.dataset)
    manifest = dataset.manifest()

    print(f"{'Sensor':<30} {'Kind':<14} {'Records':>8} {'Duration':>10}")
    print("-" * 66)
    for name, info in manifest.items():
        print(f"{name:<30} {info.kind:<14} {info.num_records:8d} {info.duration_s:9.2f}s")
    print()

    left = dataset.left_camera()
    fu, fv, cu, cv = left.intrinsics()
    print(f"cam0 resolution:  {left.image_size()}")
    print(f"cam0 intrinsics:  fu={fu:.3f} fv={fv:.3f} cu={cu:.3f} cv={cv:.3f}")
    print(f"cam0 distortion:  {np.array2string(left.distortion_coeff(), precision=6)}")

    if dataset.has_sensor("cam1"):
        print(f"Stereo baseline:  {dataset.stereo_rig().baseline:.4f} m")

    imu = dataset.imu().calibration()
    print(f"IMU rate:         {imu.rate_hz:.0f} Hz")
    print(f"Gyro noise:       {imu.gyro_noise_density:.4e} rad/s/sqrt(Hz)")
    print(f"Accel noise:      {imu.accel_noise_density:.4e} m/s^2/sqrt(Hz)")


if __name__ == "__main__":
    main()
