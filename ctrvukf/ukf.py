"""Unscented Kalman Filter."""
import logging
import numpy as np
from scipy import linalg
from . import models
from .config import UKFConfig
from .util import Bunch, normalize_angle
from ._common import SensorType, check_measurement, check_reading


logger = logging.getLogger(__name__)

N_STATES = 5
N_AUGMENTED = 7
YAW_INDEX = 3
BEARING_INDEX = 1


class FilterDivergenceError(linalg.LinAlgError):
    """Covariance matrix is not positive definite or contains non-finite values.

    The filter can't continue from such a state, the usual remedy is to call
    `UnscentedKalmanFilter.reset` and initialize from the next measurement.
    """


def compute_weights(n, lamb):
    """Compute weights of ``2 * n + 1`` sigma-points.

    Parameters
    ----------
    n : int
        Dimension of the sampled vector.
    lamb : float
        Spreading parameter.

    Returns
    -------
    weights : ndarray, shape (2 * n + 1,)
        Weights of the central point followed by equal weights of the others.
        They sum to 1, the central weight is negative for ``lamb < 0``.
    """
    weights = np.full(2 * n + 1, 0.5 / (lamb + n))
    weights[0] = lamb / (lamb + n)
    return weights


def generate_sigma_points(x, P, lamb):
    """Generate sigma-points which represent a given mean and covariance.

    The points are ``x`` and ``x +- (lamb + n)**0.5 * L[:, i]``, where ``L`` is the
    lower Cholesky factor of `P`. Unlike the eigen decomposition, the Cholesky
    decomposition fails for indefinite matrices, which is reported as
    `FilterDivergenceError`.

    Parameters
    ----------
    x : ndarray, shape (n,)
        Mean.
    P : ndarray, shape (n, n)
        Covariance matrix, must be positive definite.
    lamb : float
        Spreading parameter.

    Returns
    -------
    sigma_points : ndarray, shape (2 * n + 1, n)
        Generated sigma-points, one per row, the mean goes first.
    """
    try:
        L = linalg.cholesky(P, lower=True)
    except (linalg.LinAlgError, ValueError) as e:
        logger.error("Cholesky decomposition failed for covariance\n%s", P)
        raise FilterDivergenceError(
            "Covariance matrix is not positive definite") from e
    offsets = (lamb + len(x)) ** 0.5 * L.T
    return np.vstack((x, x + offsets, x - offsets))


def _cho_factor(S):
    try:
        return linalg.cho_factor(S)
    except (linalg.LinAlgError, ValueError) as e:
        logger.error("Innovation covariance is singular\n%s", S)
        raise FilterDivergenceError(
            "Innovation covariance is not positive definite") from e


def _weighted_covariance(weights, D1, D2=None):
    if D2 is None:
        D2 = D1
    return (weights * D1.T) @ D2


def _symmetrize(P):
    return 0.5 * (P + P.T)


class UnscentedKalmanFilter:
    """Unscented Kalman Filter for the CTRV model with laser and radar sensors.

    The state vector is ``[px, py, v, yaw, yaw_rate]``. The process noise enters
    the model nonlinearly, so it is included into the augmented state and sampled
    with sigma-points along with the state, see [1]_. The sigma-points predicted
    for the last time update are reused by the radar update.

    The filter is initialized from the first processed measurement. After that
    each measurement runs the prediction to its timestamp followed by the update
    specific to the sensor. Measurements from a disabled sensor are discarded
    without changing the estimate.

    Parameters
    ----------
    config : UKFConfig or None, optional
        Noise parameters and sensor switches. If None (default), the default
        `UKFConfig` is used.

    Attributes
    ----------
    x : ndarray, shape (5,)
        State estimate.
    P : ndarray, shape (5, 5)
        Error covariance.
    sigma_points_pred : ndarray, shape (15, 5) or None
        Sigma-points of the last prediction, None before the first one.
    weights : ndarray, shape (15,)
        Weights of the sigma-points.
    nis_laser, nis_radar : float
        Normalized innovation squared of the last update of each sensor.
        Set to 0 when a measurement of a disabled sensor is discarded.
    time_us : int
        Timestamp of the estimate in microseconds.
    is_initialized : bool
        Whether the first measurement was processed.

    References
    ----------
    .. [1] E. A. Wan, R. van der Merwe, "The Unscented Kalman Filter for Nonlinear
       Estimation", Adaptive Systems for Signal Processing, Communications, and
       Control Symposium, 2000
    """
    def __init__(self, config=None):
        if config is None:
            config = UKFConfig()
        self.config = config
        self.lamb = 3 - N_AUGMENTED
        self.weights = compute_weights(N_AUGMENTED, self.lamb)
        self.Q = config.process_noise_covariance()
        self.R_laser = config.laser_noise_covariance()
        self.R_radar = config.radar_noise_covariance()
        self.reset()

    def reset(self):
        """Return the filter to the uninitialized state."""
        self.x = np.zeros(N_STATES)
        self.P = np.zeros((N_STATES, N_STATES))
        self.sigma_points_pred = None
        self.nis_laser = 0.0
        self.nis_radar = 0.0
        self.time_us = 0
        self.is_initialized = False
        logger.debug("Filter reset")

    def is_enabled(self, sensor):
        """Check whether measurements of `sensor` are used after initialization."""
        if sensor is SensorType.LASER:
            return self.config.use_laser
        return self.config.use_radar

    def initialize(self, measurement):
        """Initialize the estimate from a single measurement.

        Velocity, heading and yaw rate are not observable from one reading and
        get fixed prior values. The position variance for a radar reading is a
        coarse heuristic: a half of the range variance along each axis.
        """
        z = check_measurement(measurement)
        x = np.array([0.0, 0.0, 3.0, 0.0, 0.1])
        P = np.identity(N_STATES)
        P[2, 2] = 1.0
        P[3, 3] = np.pi ** 2 / 64
        P[4, 4] = P[3, 3] / 10

        if measurement.sensor is SensorType.RADAR:
            rho, phi = z[0], z[1]
            x[0] = rho * np.cos(phi)
            x[1] = rho * np.sin(phi)
            P[0, 0] = 0.5 * self.config.sigma_radar_range ** 2
            P[1, 1] = 0.5 * self.config.sigma_radar_range ** 2
            self.nis_radar = 0.0
        else:
            x[:2] = z
            P[0, 0] = self.config.sigma_laser_px ** 2
            P[1, 1] = self.config.sigma_laser_py ** 2
            self.nis_laser = 0.0

        self.x = x
        self.P = P
        self.time_us = measurement.timestamp
        self.is_initialized = True
        logger.debug("Initialized from %s measurement at %d us: x=%s",
                     measurement.sensor.value, measurement.timestamp, x)

    def process_measurement(self, measurement):
        """Process a single measurement.

        Parameters
        ----------
        measurement : Measurement
            Measurement with a timestamp not less than the one of the current
            estimate.
        """
        if not self.is_initialized:
            self.initialize(measurement)
            return

        z = check_measurement(measurement)

        if not self.is_enabled(measurement.sensor):
            self._discard(measurement.sensor)
            return

        dt = (measurement.timestamp - self.time_us) / 1e6
        self.time_us = measurement.timestamp
        self.predict(dt)

        if measurement.sensor is SensorType.LASER:
            self.update_laser(z)
        else:
            self.update_radar(z)

    def _discard(self, sensor):
        if sensor is SensorType.LASER:
            self.nis_laser = 0.0
        else:
            self.nis_radar = 0.0
        logger.debug("Discarded %s measurement, sensor is disabled", sensor.value)

    def predict(self, dt):
        """Predict the estimate forward in time.

        Parameters
        ----------
        dt : float
            Time interval in seconds, must be non-negative.
        """
        x_aug = np.hstack((self.x, np.zeros(N_AUGMENTED - N_STATES)))
        P_aug = linalg.block_diag(self.P, self.Q)
        sigma_points = generate_sigma_points(x_aug, P_aug, self.lamb)

        X_pred = models.ctrv_process(sigma_points[:, :N_STATES],
                                     sigma_points[:, N_STATES:], dt)
        x = self.weights @ X_pred
        X_diff = X_pred - x
        X_diff[:, YAW_INDEX] = normalize_angle(X_diff[:, YAW_INDEX])

        self.x = x
        self.P = _symmetrize(_weighted_covariance(self.weights, X_diff))
        self.sigma_points_pred = X_pred

    def update_laser(self, z):
        """Update the estimate with a laser measurement ``[px, py]``.

        The measurement model is linear, so the ordinary Kalman update is used.
        """
        if not self.config.use_laser:
            self._discard(SensorType.LASER)
            return

        z = check_reading(z, SensorType.LASER)
        H = models.LASER_H
        HP = H @ self.P
        S = HP @ H.T + self.R_laser
        S_factor = _cho_factor(S)
        K = linalg.cho_solve(S_factor, HP).T
        e = z - H @ self.x

        x = self.x + K @ e
        P = _symmetrize(self.P - K @ HP)
        nis = float(e @ linalg.cho_solve(S_factor, e))
        self.x, self.P, self.nis_laser = x, P, nis

    def update_radar(self, z):
        """Update the estimate with a radar measurement.

        The predicted sigma-points are transformed to the measurement space
        ``[range, bearing, range_rate]``. Bearing and heading differences are
        normalized wherever they are formed.

        The predicted bearing is a circular mean: the bearing of the central
        sigma-point plus the weighted sum of normalized offsets from it. It equals
        the plain weighted sum unless the points straddle +-pi.
        """
        if not self.config.use_radar:
            self._discard(SensorType.RADAR)
            return
        if self.sigma_points_pred is None:
            raise RuntimeError("Radar update requires a preceding prediction")

        z = check_reading(z, SensorType.RADAR)
        X_pred = self.sigma_points_pred
        Z_pred = models.radar_measurement(X_pred)
        z_pred = self.weights @ Z_pred
        # Bearings are averaged as offsets from the central point, a plain
        # average breaks when the points straddle +-pi.
        bearing_offsets = normalize_angle(Z_pred[:, BEARING_INDEX]
                                          - Z_pred[0, BEARING_INDEX])
        z_pred[BEARING_INDEX] = normalize_angle(
            Z_pred[0, BEARING_INDEX] + self.weights @ bearing_offsets)

        Z_diff = Z_pred - z_pred
        Z_diff[:, BEARING_INDEX] = normalize_angle(Z_diff[:, BEARING_INDEX])
        X_diff = X_pred - self.x
        X_diff[:, YAW_INDEX] = normalize_angle(X_diff[:, YAW_INDEX])

        S = _weighted_covariance(self.weights, Z_diff) + self.R_radar
        Tc = _weighted_covariance(self.weights, X_diff, Z_diff)
        S_factor = _cho_factor(S)
        K = linalg.cho_solve(S_factor, Tc.T).T

        e = z - z_pred
        e[BEARING_INDEX] = normalize_angle(e[BEARING_INDEX])

        x = self.x + K @ e
        P = _symmetrize(self.P - Tc @ K.T)
        nis = float(e @ linalg.cho_solve(S_factor, e))
        self.x, self.P, self.nis_radar = x, P, nis


def run_ukf(measurements, config=None):
    """Run Unscented Kalman Filter over a sequence of measurements.

    Parameters
    ----------
    measurements : iterable of Measurement
        Measurements sorted by timestamp.
    config : UKFConfig or None, optional
        Filter configuration. If None (default), the default `UKFConfig` is used.

    Returns
    -------
    Bunch with the following fields:

        t : ndarray, shape (n,)
            Time in seconds relative to the first measurement.
        X : ndarray, shape (n, 5)
            State estimates after each measurement.
        P : ndarray, shape (n, 5, 5)
            Error covariance estimates after each measurement.
        nis : ndarray, shape (n,)
            NIS of each measurement. Zero for the initializing measurement and
            for measurements of disabled sensors.
        sensor : list of SensorType
            Sensor of each measurement.
    """
    measurements = list(measurements)
    n = len(measurements)
    ukf = UnscentedKalmanFilter(config)

    t = np.empty(n)
    X = np.empty((n, N_STATES))
    P = np.empty((n, N_STATES, N_STATES))
    nis = np.empty(n)
    sensor = []

    for i, measurement in enumerate(measurements):
        ukf.process_measurement(measurement)
        t[i] = (measurement.timestamp - measurements[0].timestamp) / 1e6
        X[i] = ukf.x
        P[i] = ukf.P
        if measurement.sensor is SensorType.LASER:
            nis[i] = ukf.nis_laser
        else:
            nis[i] = ukf.nis_radar
        sensor.append(measurement.sensor)

    return Bunch(t=t, X=X, P=P, nis=nis, sensor=sensor)
