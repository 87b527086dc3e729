"""Example of a tracking problem."""
from dataclasses import dataclass
import numpy as np
from scipy._lib._util import check_random_state
from . import models
from .config import UKFConfig
from .util import normalize_angle
from ._common import Measurement, SensorType


@dataclass
class TrackingProblemExample:
    """Example of a tracking problem with laser and radar measurements.

    Parameters
    ----------
    measurements : list of Measurement
        Measurements sorted by timestamp.
    Xt : ndarray, shape (n_epochs, 5)
        True state at each measurement.
    config : UKFConfig
        Noise parameters used for simulation.
    """
    measurements : list
    Xt : np.ndarray
    config : UKFConfig


def generate_ctrv_track(
    n_epochs=500,
    time_step=0.05,
    X0=np.array([10.0, 5.0, 3.0, 0.5, 0.1]),
    config=None,
    t0_us=0,
    rng=0,
):
    """Generate data for an example of an object moving with a turn.

    The object moves according to the CTRV model (see `ctrvukf.models.ctrv_process`)
    with random longitudinal and yaw accelerations, which are constant over each
    time step. Laser and radar measurements alternate, starting with laser.

    Parameters
    ----------
    n_epochs : int
        Number of measurements.
    time_step : float
        Interval between measurements in seconds.
    X0 : array_like, shape (5,)
        Initial true state.
    config : UKFConfig or None
        Noise parameters for simulation. If None (default), the default
        `UKFConfig` is used. The sensor switches are ignored.
    t0_us : int
        Timestamp of the first measurement in microseconds.
    rng : None, int or `numpy.random.RandomState`
        Seed to create or already created RandomState. None (default) corresponds to
        nondeterministic seeding.

    Returns
    -------
    TrackingProblemExample
    """
    rng = check_random_state(rng)
    if config is None:
        config = UKFConfig()

    Q = config.process_noise_covariance()
    R_laser = config.laser_noise_covariance()
    R_radar = config.radar_noise_covariance()

    X = np.asarray(X0, dtype=float)
    Xt = np.empty((n_epochs, len(X)))
    measurements = []

    for k in range(n_epochs):
        Xt[k] = X
        timestamp = t0_us + int(round(k * time_step * 1e6))
        if k % 2 == 0:
            z = models.laser_measurement(X) + rng.multivariate_normal(
                np.zeros(len(R_laser)), R_laser)
            measurements.append(Measurement(SensorType.LASER, timestamp, z))
        else:
            z = models.radar_measurement(X) + rng.multivariate_normal(
                np.zeros(len(R_radar)), R_radar)
            z[1] = normalize_angle(z[1])
            measurements.append(Measurement(SensorType.RADAR, timestamp, z))

        if k + 1 < n_epochs:
            W = rng.multivariate_normal(np.zeros(len(Q)), Q)
            X = models.ctrv_process(X, W, time_step)

    return TrackingProblemExample(measurements, Xt, config)
