import numpy as np
from numpy.testing import assert_allclose
import ctrvukf


def test_normalize_angle():
    assert_allclose(ctrvukf.util.normalize_angle(3 * np.pi), np.pi, rtol=1e-15)
    assert_allclose(ctrvukf.util.normalize_angle(-3 * np.pi), np.pi, rtol=1e-15)
    assert_allclose(ctrvukf.util.normalize_angle(-np.pi), np.pi, rtol=1e-15)
    assert_allclose(ctrvukf.util.normalize_angle(np.pi), np.pi, rtol=1e-15)
    assert_allclose(ctrvukf.util.normalize_angle(0.0), 0.0, atol=1e-15)

    angles = np.array([0.5, 2 * np.pi + 0.5, -1.5 * np.pi, 10.0, -10.0])
    expected = np.array([0.5, 0.5, 0.5 * np.pi, 10.0 - 4 * np.pi, -10.0 + 4 * np.pi])
    normalized = ctrvukf.util.normalize_angle(angles)
    assert normalized.shape == angles.shape
    assert_allclose(normalized, expected, rtol=1e-12)
    assert np.all(normalized > -np.pi)
    assert np.all(normalized <= np.pi)


def test_compute_rms():
    data = np.array([[1.0, -2.0], [-1.0, 2.0], [1.0, 2.0]])
    assert_allclose(ctrvukf.util.compute_rms(data), [1.0, 2.0])


def test_compute_nis_consistency():
    fraction, threshold = ctrvukf.util.compute_nis_consistency([1.0, 2.0, 7.0, 10.0], 2)
    assert_allclose(threshold, 5.991464547107979)
    assert fraction == 0.5

    fraction, threshold = ctrvukf.util.compute_nis_consistency([1.0, 7.0, 10.0], 3)
    assert_allclose(threshold, 7.814727903251178)
    assert_allclose(fraction, 1 / 3)

    fraction, _ = ctrvukf.util.compute_nis_consistency([], 3)
    assert fraction == 0.0


def test_bunch():
    bunch = ctrvukf.util.Bunch(x=1)
    bunch.y = 2
    assert bunch["y"] == 2
    assert bunch.x == 1
    try:
        bunch.z
    except AttributeError:
        pass
    else:
        assert False
