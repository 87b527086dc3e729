"""Filter configuration."""
from dataclasses import dataclass
import numpy as np


@dataclass(frozen=True)
class UKFConfig:
    """Noise parameters and sensor switches of the filter.

    The configuration is fixed for the lifetime of a filter. To try other values
    build a new instance with `dataclasses.replace`.

    Parameters
    ----------
    use_laser : bool
        Whether laser measurements are used after initialization.
    use_radar : bool
        Whether radar measurements are used after initialization.
    sigma_accel : float
        Standard deviation of longitudinal acceleration in m/s^2.
    sigma_yaw_accel : float
        Standard deviation of yaw acceleration in rad/s^2.
    sigma_laser_px, sigma_laser_py : float
        Accuracy of laser position measurements in m.
    sigma_radar_range : float
        Accuracy of radar range measurements in m.
    sigma_radar_bearing : float
        Accuracy of radar bearing measurements in rad.
    sigma_radar_range_rate : float
        Accuracy of radar range rate measurements in m/s.
    """
    use_laser : bool = True
    use_radar : bool = True
    sigma_accel : float = 1.0
    sigma_yaw_accel : float = 1.0
    sigma_laser_px : float = 0.15
    sigma_laser_py : float = 0.15
    sigma_radar_range : float = 0.3
    sigma_radar_bearing : float = 0.03
    sigma_radar_range_rate : float = 0.3

    def process_noise_covariance(self):
        return np.diag([self.sigma_accel ** 2, self.sigma_yaw_accel ** 2])

    def laser_noise_covariance(self):
        return np.diag([self.sigma_laser_px ** 2, self.sigma_laser_py ** 2])

    def radar_noise_covariance(self):
        return np.diag([self.sigma_radar_range ** 2, self.sigma_radar_bearing ** 2,
                        self.sigma_radar_range_rate ** 2])
