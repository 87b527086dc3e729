"""Process and measurement models.

The state vector is ``[px, py, v, yaw, yaw_rate]``. The process noise vector is
``[nu_a, nu_yawdd]``: longitudinal and yaw accelerations held constant over a
prediction interval.

All functions accept a single vector or a stack of vectors with the components
along the last axis, so that a whole set of sigma points is transformed with a
single call.
"""
import numpy as np


YAW_RATE_THRESHOLD = 1e-3
MIN_RANGE = 1e-3

LASER_H = np.array([
    [1.0, 0.0, 0.0, 0.0, 0.0],
    [0.0, 1.0, 0.0, 0.0, 0.0],
])


def ctrv_process(X, W, dt):
    """Propagate states with the constant turn rate and velocity model.

    The continuous model::

        dpx / dt = v * cos(yaw)
        dpy / dt = v * sin(yaw)
        dv / dt = nu_a
        dyaw / dt = yaw_rate
        dyaw_rate / dt = nu_yawdd

    is integrated analytically over `dt`. When ``|yaw_rate|`` does not exceed
    `YAW_RATE_THRESHOLD` the position is advanced along a straight line to avoid
    division by a vanishing yaw rate. The contribution of the noise to the
    position is approximated by a straight-line acceleration along the initial
    heading.

    Parameters
    ----------
    X : array_like, shape (..., 5)
        State vectors.
    W : array_like, shape (..., 2) or None
        Noise vectors. None corresponds to zero noise.
    dt : float
        Time interval in seconds.

    Returns
    -------
    X_next : ndarray, shape (..., 5)
        Propagated state vectors.
    """
    X = np.asarray(X, dtype=float)
    px, py, v, yaw, yaw_rate = np.moveaxis(X, -1, 0)
    if W is None:
        nu_a = nu_yawdd = np.zeros_like(px)
    else:
        nu_a, nu_yawdd = np.moveaxis(np.asarray(W, dtype=float), -1, 0)

    turning = np.abs(yaw_rate) > YAW_RATE_THRESHOLD
    yaw_rate_safe = np.where(turning, yaw_rate, 1.0)
    yaw_next = yaw + yaw_rate * dt

    px_next = np.where(
        turning,
        px + v / yaw_rate_safe * (np.sin(yaw_next) - np.sin(yaw)),
        px + v * dt * np.cos(yaw))
    py_next = np.where(
        turning,
        py + v / yaw_rate_safe * (np.cos(yaw) - np.cos(yaw_next)),
        py + v * dt * np.sin(yaw))

    half_dt2 = 0.5 * dt ** 2
    return np.stack([
        px_next + half_dt2 * np.cos(yaw) * nu_a,
        py_next + half_dt2 * np.sin(yaw) * nu_a,
        v + dt * nu_a,
        yaw_next + half_dt2 * nu_yawdd,
        yaw_rate + dt * nu_yawdd,
    ], axis=-1)


def radar_measurement(X):
    """Compute radar readings ``[range, bearing, range_rate]``.

    Below `MIN_RANGE` the range is replaced by `MIN_RANGE` and the bearing is set
    to zero, because the direction to a point at the origin is undefined.

    Parameters
    ----------
    X : array_like, shape (..., 5)
        State vectors.

    Returns
    -------
    Z : ndarray, shape (..., 3)
        Radar readings.
    """
    X = np.asarray(X, dtype=float)
    px, py, v, yaw, _ = np.moveaxis(X, -1, 0)

    rho = np.hypot(px, py)
    degenerate = rho < MIN_RANGE
    rho = np.where(degenerate, MIN_RANGE, rho)
    phi = np.where(degenerate, 0.0, np.arctan2(py, px))
    rho_dot = (px * v * np.cos(yaw) + py * v * np.sin(yaw)) / rho

    return np.stack([rho, phi, rho_dot], axis=-1)


def laser_measurement(X):
    """Compute laser readings ``[px, py]``."""
    return np.asarray(X, dtype=float) @ LASER_H.T
