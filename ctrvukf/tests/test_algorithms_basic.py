from dataclasses import replace
import numpy as np
import ctrvukf


N_SKIP = 50


def compute_errors(result, Xt):
    error = result.X - Xt
    error[:, 3] = ctrvukf.util.normalize_angle(error[:, 3])
    return error


def test_generate_ctrv_track():
    p = ctrvukf.examples.generate_ctrv_track(n_epochs=10, t0_us=1000)
    assert len(p.measurements) == 10
    assert p.Xt.shape == (10, 5)
    assert p.measurements[0].sensor is ctrvukf.SensorType.LASER
    assert p.measurements[1].sensor is ctrvukf.SensorType.RADAR
    assert p.measurements[0].timestamp == 1000
    assert p.measurements[9].timestamp == 1000 + 9 * 50000
    assert len(p.measurements[1].z) == 3
    assert np.all(np.abs(p.Xt[1:, 2] - p.Xt[:-1, 2]) < 1.0)


def test_ukf():
    p = ctrvukf.examples.generate_ctrv_track()
    result = ctrvukf.run_ukf(p.measurements, p.config)

    n = len(p.measurements)
    assert result.X.shape == (n, 5)
    assert result.P.shape == (n, 5, 5)
    assert result.t[0] == 0
    assert result.nis[0] == 0

    error = compute_errors(result, p.Xt)[N_SKIP:]
    rms = ctrvukf.util.compute_rms(error)
    assert np.all(rms[:2] < 0.2)

    en = error / np.diagonal(result.P[N_SKIP:], axis1=1, axis2=2) ** 0.5
    en_rms = ctrvukf.util.compute_rms(en)
    assert np.all(en_rms[:2] > 0.5)
    assert np.all(en_rms[:2] < 1.5)

    laser = np.array([s is ctrvukf.SensorType.LASER for s in result.sensor])
    nis_laser = result.nis[N_SKIP:][laser[N_SKIP:]]
    nis_radar = result.nis[N_SKIP:][~laser[N_SKIP:]]
    assert 1.0 < np.mean(nis_laser) < 3.5
    assert 1.5 < np.mean(nis_radar) < 5.0

    for nis, dof in [(nis_laser, 2), (nis_radar, 3)]:
        fraction, _ = ctrvukf.util.compute_nis_consistency(nis, dof)
        assert fraction < 0.15


def test_ukf_single_sensor():
    p = ctrvukf.examples.generate_ctrv_track()
    for config in [replace(p.config, use_radar=False),
                   replace(p.config, use_laser=False)]:
        result = ctrvukf.run_ukf(p.measurements, config)
        laser = np.array([s is ctrvukf.SensorType.LASER for s in result.sensor])
        disabled = ~laser if not config.use_radar else laser
        assert np.all(result.nis[disabled] == 0)
        assert np.all(result.nis[~disabled][N_SKIP // 2:] > 0)

        error = compute_errors(result, p.Xt)[N_SKIP:]
        bound = 2.0 if config.use_radar else 0.3
        assert np.all(ctrvukf.util.compute_rms(error)[:2] < bound)

        P = result.P[N_SKIP:]
        assert np.all(np.abs(P - np.swapaxes(P, 1, 2)) < 1e-12)


def test_ukf_empty():
    result = ctrvukf.run_ukf([])
    assert result.X.shape == (0, 5)
    assert result.sensor == []
