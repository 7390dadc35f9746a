"""This module converts raw BMP390 ADC values into physical units.

Temperature has to be compensated first: it yields the linearized
temperature `t_lin` that the pressure polynomial is evaluated at. The
value is returned to the caller and passed back in explicitly, so one
calibration set can serve any number of concurrent readings.

"""
from collections import namedtuple


class CompensatedReading(namedtuple(
        'CompensatedReading', ('temperature_c', 'pressure_pa'))):
    """Compensated temperature (degree-C) and pressure (Pa)."""

    __slots__ = ()


def compensate_temperature(raw_temp, calib):
    """Convert raw temperature ADC value into degree-C.

    Args:
    - raw_temp: (unsigned int) Raw temperature value from ADC.
    - calib: `CalibrationCoefficients` of the sensor.

    Returns a tuple of format: (<temperature-degree-C>, <t_lin>).

    Out of range ADC values are not rejected; they simply produce
    non-physical temperatures.

    """
    d1 = float(raw_temp) - calib.t1
    d2 = d1 * calib.t2
    t_lin = d2 + (d1 * d1) * calib.t3

    # With pre-scaled coefficients t_lin is already in degree-C.
    return t_lin, t_lin


def compensate_pressure(raw_press, calib, t_lin):
    """Convert raw pressure ADC value into Pa.

    Args:
    - raw_press: (unsigned int) Raw pressure value from ADC.
    - calib: `CalibrationCoefficients` of the sensor.
    - t_lin: (float) Linearized temperature returned by
      `compensate_temperature` for the same calibration set. A stale or
      foreign value silently yields a wrong pressure.

    Returns pressure in Pa.

    """
    t = t_lin
    t2 = t * t
    t3 = t2 * t
    p = float(raw_press)
    p2 = p * p
    p3 = p2 * p

    # Offset.
    out1 = calib.p5 + calib.p6 * t + calib.p7 * t2 + calib.p8 * t3

    # Sensitivity.
    out2 = p * (calib.p1 + calib.p2 * t + calib.p3 * t2 + calib.p4 * t3)

    # Second and third order non-linearity.
    out3 = p2 * (calib.p9 + calib.p10 * t) + p3 * calib.p11

    return out1 + out2 + out3


def compensate(raw_temp, raw_press, calib):
    """Compensate a raw (temperature, pressure) pair.

    Returns a `CompensatedReading`.

    """
    temp_c, t_lin = compensate_temperature(raw_temp, calib)
    press_pa = compensate_pressure(raw_press, calib, t_lin)
    return CompensatedReading(temp_c, press_pa)
