"""ctrvukf: Tracking of a moving object with Unscented Kalman Filter.

The package estimates the state of an object moving in a plane from asynchronous
laser and radar measurements. The state vector is::

    X = [px, py, v, yaw, yaw_rate]

Where

    - px, py   - position in m
    - v        - speed along the heading in m/s
    - yaw      - heading in rad
    - yaw_rate - heading rate in rad/s

The motion is described by the constant turn rate and velocity (CTRV) model driven
by random longitudinal and yaw accelerations. Laser measures the position
``[px, py]`` directly, radar measures ``[range, bearing, range_rate]`` with
respect to the origin.

The estimator is `UnscentedKalmanFilter`, it consumes `Measurement` objects one by
one. `run_ukf` runs it over a whole sequence. Refer to `ctrvukf.examples` for a
simulated problem.

References
----------
.. [1] S. J. Julier, J. K. Uhlmann, "A New Extension of the Kalman Filter to
   Nonlinear Systems", Proc. SPIE 3068, 1997
.. [2] E. A. Wan, R. van der Merwe, "The Unscented Kalman Filter for Nonlinear
   Estimation", Adaptive Systems for Signal Processing, Communications, and
   Control Symposium, 2000
"""
from . import examples, models, util
from ._common import Measurement, SensorType
from .config import UKFConfig
from .ukf import FilterDivergenceError, UnscentedKalmanFilter, run_ukf
