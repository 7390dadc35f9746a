from concurrent.futures import ThreadPoolExecutor

import pytest

from bmp390.compensation import (
    CompensatedReading,
    compensate,
    compensate_pressure,
    compensate_temperature,
)

MID_SCALE = 8388608
ADC_MAX = 16777215


def _vendor_reference(raw_t, raw_p):
    """Straight transcription of the vendor floating point example."""
    t1 = 26827 / 0.00390625
    t2 = 26216 / 1073741824.0
    t3 = 3 / 281474976710656.0
    p1 = (-16663 - 16384.0) / 1048576.0
    p2 = (-10895 - 16384.0) / 536870912.0
    p3 = 7 / 4294967296.0
    p4 = 5 / 137438953472.0
    p5 = 40959 / 0.125
    p6 = 40959 / 64.0
    p7 = 15 / 256.0
    p8 = -2 / 32768.0
    p9 = -8192 / 281474976710656.0
    p10 = -32 / 281474976710656.0
    p11 = -21 / 36893488147419103232.0

    pd1 = raw_t - t1
    pd2 = pd1 * t2
    t_lin = pd2 + (pd1 * pd1) * t3

    out1 = p5 + p6 * t_lin + p7 * t_lin ** 2 + p8 * t_lin ** 3
    out2 = raw_p * (p1 + p2 * t_lin + p3 * t_lin ** 2 + p4 * t_lin ** 3)
    pd4 = raw_p ** 2 * (p9 + p10 * t_lin) + raw_p ** 3 * p11
    return t_lin, out1 + out2 + pd4


@pytest.mark.parametrize("raw_t, raw_p", [
    (MID_SCALE, MID_SCALE),
    (8450000, 8200000),
    (8500000, 8200000),
])
def test_matches_vendor_reference(reference_calib, raw_t, raw_p):
    exp_t, exp_p = _vendor_reference(raw_t, raw_p)
    reading = compensate(raw_t, raw_p, reference_calib)
    assert reading.temperature_c == pytest.approx(exp_t, rel=1e-6)
    assert reading.pressure_pa == pytest.approx(exp_p, rel=1e-6)


def test_mid_scale_reading(reference_calib):
    reading = compensate(MID_SCALE, MID_SCALE, reference_calib)
    assert isinstance(reading, CompensatedReading)
    assert reading.temperature_c == pytest.approx(37.158, abs=0.01)
    assert reading.pressure_pa == pytest.approx(68669.0, rel=2e-3)


def test_temperature_returns_t_lin(reference_calib):
    temp_c, t_lin = compensate_temperature(MID_SCALE, reference_calib)
    assert temp_c == t_lin


def test_raw_temp_equal_to_t1_is_zero(reference_calib):
    temp_c, _ = compensate_temperature(int(reference_calib.t1), reference_calib)
    assert temp_c == 0.0


def test_compensate_threads_t_lin(reference_calib):
    _, t_lin = compensate_temperature(8450000, reference_calib)
    expected = compensate_pressure(8200000, reference_calib, t_lin)
    assert compensate(8450000, 8200000, reference_calib).pressure_pa == expected


def test_pressure_depends_on_t_lin(reference_calib):
    assert (compensate_pressure(MID_SCALE, reference_calib, 10.0) !=
            compensate_pressure(MID_SCALE, reference_calib, 30.0))


def test_deterministic(reference_calib):
    a = compensate(8450000, 8200000, reference_calib)
    b = compensate(8450000, 8200000, reference_calib)
    assert a == b
    assert a.temperature_c.hex() == b.temperature_c.hex()
    assert a.pressure_pa.hex() == b.pressure_pa.hex()


def test_temperature_strictly_increasing_over_24_bits(reference_calib):
    raws = list(range(0, ADC_MAX, 4099)) + [ADC_MAX]
    temps = [compensate_temperature(r, reference_calib)[0] for r in raws]
    assert all(b > a for a, b in zip(temps, temps[1:]))


def test_reference_pressure_falls_with_raw_value(reference_calib):
    # With this calibration p1 is negative: pressure decreases as the raw
    # value grows, which the bisection search does not handle.
    _, t_lin = compensate_temperature(MID_SCALE, reference_calib)
    samples = [compensate_pressure(r, reference_calib, t_lin)
               for r in (0, MID_SCALE, ADC_MAX)]
    assert samples[0] > samples[1] > samples[2]


def test_out_of_range_values_do_not_raise(reference_calib):
    reading = compensate(0, 2 ** 32 - 1, reference_calib)
    assert reading.temperature_c < -100.0


def test_concurrent_calls_with_different_calibrations(
        reference_calib, rising_calib):
    jobs = [(8000000 + i * 1000, 8200000 + i * 500,
             reference_calib if i % 2 else rising_calib) for i in range(64)]
    serial = [compensate(*job) for job in jobs]

    with ThreadPoolExecutor(max_workers=8) as pool:
        parallel = list(pool.map(lambda job: compensate(*job), jobs))

    assert parallel == serial
