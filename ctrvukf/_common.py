from dataclasses import dataclass
from enum import Enum
import numpy as np


class SensorType(Enum):
    LASER = "laser"
    RADAR = "radar"


MEASUREMENT_SIZES = {SensorType.LASER: 2, SensorType.RADAR: 3}


@dataclass(frozen=True)
class Measurement:
    """Single sensor reading.

    Parameters
    ----------
    sensor : SensorType
        Sensor which produced the reading.
    timestamp : int
        Time of the reading in microseconds.
    z : ndarray, shape (2,) or (3,)
        Laser readings ``(px, py)`` or radar readings
        ``(range, bearing, range_rate)``.
    """
    sensor : SensorType
    timestamp : int
    z : np.ndarray


def check_reading(z, sensor):
    z = np.asarray(z, dtype=float)
    n = MEASUREMENT_SIZES[sensor]
    if z.shape != (n,):
        raise ValueError("Inconsistent measurement shape {} for {} sensor"
                         .format(z.shape, sensor.value))
    if not np.all(np.isfinite(z)):
        raise ValueError("Inconsistent non-finite measurement {} for {} sensor"
                         .format(z, sensor.value))
    return z


def check_measurement(measurement):
    if measurement.sensor not in MEASUREMENT_SIZES:
        raise ValueError("Unknown sensor type {!r}".format(measurement.sensor))
    return check_reading(measurement.z, measurement.sensor)
