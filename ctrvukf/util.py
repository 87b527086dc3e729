"""Utility functions."""
import numpy as np
from scipy.stats import chi2


class Bunch(dict):
    def __getattr__(self, name):
        try:
            return self[name]
        except KeyError:
            raise AttributeError(name)

    __setattr__ = dict.__setitem__
    __delattr__ = dict.__delitem__

    def __repr__(self):
        if self.keys():
            m = max(map(len, list(self.keys()))) + 1
            return '\n'.join(['{}: {}'.format(k.rjust(m), type(v))
                              for k, v in self.items()])
        else:
            return self.__class__.__name__ + "()"

    def __dir__(self):
        return list(self.keys())


def normalize_angle(angle):
    """Normalize angle into the half-open interval (-pi, pi].

    Parameters
    ----------
    angle : float or array_like
        Angle or array of angles in radians, any real value.

    Returns
    -------
    float or ndarray
        Equivalent angle in (-pi, pi]. Odd multiples of pi are mapped to pi.
    """
    return np.pi - np.remainder(np.pi - np.asarray(angle, dtype=float), 2 * np.pi)


def compute_rms(data):
    """Compute root-mean-square of data along 0 axis."""
    return np.mean(np.square(data), axis=0) ** 0.5


def compute_nis_consistency(nis, dof, probability=0.95):
    """Compute fraction of NIS values exceeding the chi-square quantile.

    For a consistent filter NIS follows the chi-square distribution with `dof`
    degrees of freedom, so the returned fraction should be close to
    ``1 - probability``.

    Parameters
    ----------
    nis : array_like, shape (n,)
        Normalized innovation squared values.
    dof : int
        Degrees of freedom, i.e. the measurement dimension.
    probability : float, optional
        Probability level of the quantile. Default is 0.95.

    Returns
    -------
    fraction : float
        Fraction of `nis` values above the threshold.
    threshold : float
        The chi-square quantile used.
    """
    nis = np.asarray(nis)
    threshold = chi2.ppf(probability, dof)
    if nis.size == 0:
        return 0.0, threshold
    return np.count_nonzero(nis > threshold) / nis.size, threshold
