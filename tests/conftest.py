"""Shared fixtures: a small on-disk EuRoC sequence with real MH_01 calibration."""

from pathlib import Path

import cv2
import numpy as np
import pytest

CAM_TIMESTAMPS = [
    1403636579763555584,
    1403636579813555456,
    1403636579863555584,
    1403636579913555456,
    1403636579963555584,
]

IMU_ROWS = [
    "1403636579758555392,-0.099134701513277898,0.14730578886832138,0.02722713633111154,8.1476917083333333,-0.37592158333333331,-2.4026292499999999",
    "1403636579763555584,-0.099134701513277898,0.14032447186034408,0.029321531433504733,8.033280791666666,-0.40861041666666664,-2.4026292499999999",
    "1403636579768555520,-0.098436569812480182,0.12775810124598494,0.037699111843077518,7.8861810416666662,-0.42495483333333334,-2.4353180833333332",
    "1403636579773555456,-0.10262536001726656,0.11588986233242347,0.045378560551852569,7.8289755833333334,-0.42495483333333334,-2.4843513333333332",
    "1403636579778555392,-0.10891854139227049,0.10960667684743013,0.048869218958361147,7.7554257291666662,-0.44129924999999997,-2.4516624999999999",
]

LEICA_ROWS = [
    "1403636578922881280,4.7806634389403671,-1.8131987471468398,0.87460735439034291",
    "1403636578972881280,4.7807089456357123,-1.8131959013402366,0.87461513212541934",
    "1403636579022881280,4.7807530761485442,-1.8131922179613229,0.87462386853895402",
    "1403636579072881280,4.7807932412001156,-1.8131884320141271,0.87463244580119733",
    "1403636579122881280,4.7808351930114451,-1.8131851073342982,0.87464102919447823",
]

GROUND_TRUTH_ROWS = [
    "1403636580838555648,4.688319,-1.786938,0.783338,0.534108,-0.153029,-0.827383,-0.082152,-0.027876,0.033207,0.800006,-0.002229,0.020700,0.076350,-0.025480,0.136244,0.077163",
    "1403636580843555328,4.688177,-1.786770,0.787350,0.534640,-0.152990,-0.826976,-0.082863,-0.029272,0.033992,0.804168,-0.002675,0.020984,0.077491,-0.025374,0.136454,0.076339",
    "1403636580848555520,4.688028,-1.786598,0.791382,0.535178,-0.152945,-0.826562,-0.083605,-0.030043,0.034999,0.808240,-0.003172,0.021267,0.078502,-0.025266,0.136696,0.075593",
    "1403636580853555456,4.687878,-1.786421,0.795429,0.535715,-0.152884,-0.826146,-0.084356,-0.030240,0.035995,0.812221,-0.003702,0.021537,0.079356,-0.025153,0.136941,0.074906",
    "1403636580858555648,4.687727,-1.786238,0.799495,0.536244,-0.152799,-0.825738,-0.085090,-0.030076,0.036951,0.816084,-0.004248,0.021800,0.080048,-0.025043,0.137187,0.074293",
]

CAM0_YAML = """\
# General sensor definitions.
sensor_type: camera
comment: VI-Sensor cam0 (MT9M034)

# Sensor extrinsics wrt. the body-frame.
T_BS:
  cols: 4
  rows: 4
  data: [0.0148655429818, -0.999880929698, 0.00414029679422, -0.0216401454975,
         0.999557249008, 0.0149672133247, 0.025715529948, -0.064676986768,
        -0.0257744366974, 0.00375618835797, 0.999660727178, 0.00981073058949,
         0.0, 0.0, 0.0, 1.0]

# Camera specific definitions.
rate_hz: 20
resolution: [752, 480]
camera_model: pinhole
intrinsics: [458.654, 457.296, 367.215, 248.375] #fu, fv, cu, cv
distortion_model: radial-tangential
distortion_coefficients: [-0.28340811, 0.07395907, 0.00019359, 1.76187114e-05]
"""

CAM1_YAML = """\
# General sensor definitions.
sensor_type: camera
comment: VI-Sensor cam1 (MT9M034)

# Sensor extrinsics wrt. the body-frame.
T_BS:
  cols: 4
  rows: 4
  data: [0.0125552670891, -0.999755099723, 0.0182237714554, -0.0198435579556,
         0.999598781151, 0.0130119051815, 0.0251588363115, 0.0453689425024,
        -0.0253898008918, 0.0179005838253, 0.999517347078, 0.00786212447038,
         0.0, 0.0, 0.0, 1.0]

# Camera specific definitions.
rate_hz: 20
resolution: [752, 480]
camera_model: pinhole
intrinsics: [457.587, 456.134, 379.999, 255.238] #fu, fv, cu, cv
distortion_model: radial-tangential
distortion_coefficients: [-0.28368365,  0.07451284, -0.00010473, -3.55590700e-05]
"""

IMU0_YAML = """\
#Default imu sensor yaml file
sensor_type: imu
comment: VI-Sensor IMU (ADIS16448)

# Sensor extrinsics wrt. the body-frame.
T_BS:
  cols: 4
  rows: 4
  data: [1.0, 0.0, 0.0, 0.0,
         0.0, 1.0, 0.0, 0.0,
         0.0, 0.0, 1.0, 0.0,
         0.0, 0.0, 0.0, 1.0]
rate_hz: 200

# inertial sensor noise model parameters (static)
gyroscope_noise_density: 1.6968e-04     # [ rad / s / sqrt(Hz) ]   ( gyro "white noise" )
gyroscope_random_walk: 1.9393e-05       # [ rad / s^2 / sqrt(Hz) ] ( gyro bias diffusion )
accelerometer_noise_density: 2.0000e-3  # [ m / s^2 / sqrt(Hz) ]   ( accel "white noise" )
accelerometer_random_walk: 3.0000e-3    # [ m / s^3 / sqrt(Hz) ].  ( accel bias diffusion )
"""

LEICA0_YAML = """\
# General sensor definitions.
sensor_type: position
comment: Position measurement from a Leica Nova MS50.

# Sensor extrinsics wrt. the body-frame. This is the transformation of the
# tracking prima to the body frame.
T_BS:
  cols: 4
  rows: 4
  data: [1.0, 0.0, 0.0,  7.48903e-02,
         0.0, 1.0, 0.0, -1.84772e-02,
         0.0, 0.0, 1.0, -1.20209e-01,
         0.0, 0.0, 0.0,  1.0]
"""

GROUND_TRUTH_YAML = """\
# Sensor extrinsics wrt. the body-frame.
sensor_type: visual-inertial
comment: The nonlinear least-squares batch solution over the Vicon pose and IMU measurements including time offset estimation.
T_BS:
  cols: 4
  rows: 4
  data: [1.0, 0.0, 0.0, 0.0,
         0.0, 1.0, 0.0, 0.0,
         0.0, 0.0, 1.0, 0.0,
         0.0, 0.0, 0.0, 1.0]
"""

CAM_HEADER = "#timestamp [ns],filename"
IMU_HEADER = (
    "#timestamp [ns],w_RS_S_x [rad s^-1],w_RS_S_y [rad s^-1],w_RS_S_z [rad s^-1],"
    "a_RS_S_x [m s^-2],a_RS_S_y [m s^-2],a_RS_S_z [m s^-2]"
)
LEICA_HEADER = "#timestamp [ns], p_RS_R_x [m], p_RS_R_y [m], p_RS_R_z [m]"
GROUND_TRUTH_HEADER = (
    "#timestamp, p_RS_R_x [m], p_RS_R_y [m], p_RS_R_z [m], q_RS_w [], q_RS_x [], q_RS_y [], "
    "q_RS_z [], v_RS_R_x [m s^-1], v_RS_R_y [m s^-1], v_RS_R_z [m s^-1], b_w_RS_S_x [rad s^-1], "
    "b_w_RS_S_y [rad s^-1], b_w_RS_S_z [rad s^-1], b_a_RS_S_x [m s^-2], b_a_RS_S_y [m s^-2], "
    "b_a_RS_S_z [m s^-2]"
)


def write_csv(path: Path, header: str, rows: list[str]) -> None:
    """Write a EuRoC data.csv with Windows line endings like the originals."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text("\r\n".join([header, *rows]) + "\r\n")


def write_camera(
    sensor_dir: Path,
    sensor_yaml: str,
    timestamps: list[int],
    base_value: int = 0,
    size: tuple[int, int] = (752, 480),
) -> None:
    """Create a camera directory with one flat grayscale PNG per timestamp.

    Image i is filled with ``base_value + 10 * i`` so tests can tell frames apart.
    """
    data_dir = sensor_dir / "data"
    data_dir.mkdir(parents=True, exist_ok=True)
    width, height = size

    for i, timestamp in enumerate(timestamps):
        image = np.full((height, width), base_value + 10 * i, dtype=np.uint8)
        cv2.imwrite(str(data_dir / f"{timestamp}.png"), image)

    write_csv(sensor_dir / "data.csv", CAM_HEADER, [f"{t},{t}.png" for t in timestamps])
    (sensor_dir / "sensor.yaml").write_text(sensor_yaml)


def write_sensor(sensor_dir: Path, sensor_yaml: str, header: str, rows: list[str]) -> None:
    write_csv(sensor_dir / "data.csv", header, rows)
    (sensor_dir / "sensor.yaml").write_text(sensor_yaml)


@pytest.fixture
def mav0(tmp_path: Path) -> Path:
    """Create a mock EuRoC sequence (first rows of MH_01_easy) under tmp_path.

    Returns:
        Path to mock mav0 directory
    """
    root = tmp_path / "mav0"
    write_camera(root / "cam0", CAM0_YAML, CAM_TIMESTAMPS, base_value=0)
    write_camera(root / "cam1", CAM1_YAML, CAM_TIMESTAMPS, base_value=5)
    write_sensor(root / "imu0", IMU0_YAML, IMU_HEADER, IMU_ROWS)
    write_sensor(root / "leica0", LEICA0_YAML, LEICA_HEADER, LEICA_ROWS)
    write_sensor(
        root / "state_groundtruth_estimate0",
        GROUND_TRUTH_YAML,
        GROUND_TRUTH_HEADER,
        GROUND_TRUTH_ROWS,
    )
    (root / "body.yaml").write_text("comment: 'The nominal body frame.'\n")
    return root


@pytest.fixture
def aligned_mav0(tmp_path: Path) -> Path:
    """Create a small sequence whose streams overlap in time.

    Cameras tick every 50 ms from t0, IMU and ground truth every 10 ms from
    t0 - 20 ms to t0 + 220 ms. Ground truth moves along x at 1 m/s with
    identity orientation.
    """
    t0 = 1_403_636_579_763_555_584
    ms = 1_000_000
    root = tmp_path / "aligned" / "mav0"

    cam_timestamps = [t0 + k * 50 * ms for k in range(5)]
    write_camera(root / "cam0", CAM0_YAML, cam_timestamps, size=(64, 48))
    # Right camera lags by 0.5 ms and misses the fourth frame
    right_timestamps = [t + ms // 2 for i, t in enumerate(cam_timestamps) if i != 3]
    write_camera(root / "cam1", CAM1_YAML, right_timestamps, base_value=5, size=(64, 48))

    sample_times = [t0 + k * 10 * ms for k in range(-2, 23)]
    imu_rows = [f"{t},0.0,0.0,0.1,0.0,0.0,9.81" for t in sample_times]
    write_sensor(root / "imu0", IMU0_YAML, IMU_HEADER, imu_rows)

    gt_rows = [
        f"{t},{(t - t0) / 1e9:.6f},0.0,0.0,1.0,0.0,0.0,0.0,1.0,0.0,0.0,0,0,0,0,0,0"
        for t in sample_times
    ]
    write_sensor(
        root / "state_groundtruth_estimate0", GROUND_TRUTH_YAML, GROUND_TRUTH_HEADER, gt_rows
    )
    return root
