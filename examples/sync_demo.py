#!/usr/bin/env python3
"""Walk a EuRoC sequence frame by frame with IMU and ground truth attached.

For every stereo frame this prints the number of IMU samples since the
previous frame, the mean gyro rate over them and the interpolated ground
truth position.

Usage:
    uv run python examples/sync_demo.py
    uv run python examples/sync_demo.py --max-frames 200 --every 10

Requirements:
    - EuRoC dataset downloaded to data/euroc/MH_01_easy/mav0/ (or $EUROC_DATASET)
"""

import argparse
import logging

import numpy as np

from euroc import EuRoC, SyncConfig, Synchronizer, default_dataset_path


def main() -> None:
    """Run the synchronization demo."""
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("--dataset", default=str(default_dataset_path()), help="Path to mav0")
    parser.add_argument("--max-frames", type=int, default=None, help="Stop after N frames")
    parser.add_argument("--every", type=int, default=50, help="Print every Nth frame")
    parser.add_argument("--verbose", action="store_true", help="Log dropped frames")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    dataset = EuRoC(args.dataset)
    sync = Synchronizer(dataset, SyncConfig(max_frames=args.max_frames))

    print(f"{'Frame':>6} {'Time':>9} {'IMU#':>5} | {'Mean gyro [rad/s]':^30} | {'GT position':^30}")
    print("-" * 90)

    start = None
    total_imu = 0
    frames_with_gt = 0
    n_frames = 0

    for i, frame in enumerate(sync):
        n_frames += 1
        if start is None:
            start = frame.timestamp
        total_imu += len(frame.imu)
        if frame.ground_truth is not None:
            frames_with_gt += 1

        if i % args.every != 0:
            continue

        if frame.imu:
            gyro = np.mean([sample.gyro for sample in frame.imu], axis=0)
            gyro_str = f"[{gyro[0]:8.3f}, {gyro[1]:8.3f}, {gyro[2]:8.3f}]"
        else:
            gyro_str = "[       N/A       ]"

        if frame.ground_truth is not None:
            pos = frame.ground_truth.translation
            gt_str = f"[{pos[0]:8.3f}, {pos[1]:8.3f}, {pos[2]:8.3f}]"
        else:
            gt_str = "[       N/A       ]"

        elapsed = (frame.timestamp - start) / 1e9
        print(f"{i:6d} {elapsed:8.2f}s {len(frame.imu):5d} | {gyro_str:^30} | {gt_str:^30}")

    print()
    print(f"Frames:               {n_frames}")
    print(f"IMU samples attached: {total_imu}")
    print(f"Frames with GT pose:  {frames_with_gt}")


if __name__ == "__main__":
    main()
