"""This module recovers raw ADC values from desired physical readings.

The compensation polynomials have no closed form inverse, so the raw
value is searched for by bisection over the ADC range, using the forward
compensation as an oracle.

The search assumes the forward function is non-decreasing over the
bounds. This is NOT verified. With a decreasing or non-monotonic forward
function the search still terminates, but it drifts towards one end of
the range instead of the root. Pressure is the usual victim: depending
on the sign of `p1` the pressure polynomial may fall with raw ADC value.
Always check the returned `InversionReport` before trusting a result.

"""
from collections import namedtuple
from functools import partial
import logging

from bmp390.compensation import compensate_pressure, compensate_temperature
from bmp390.errors import InvalidDomain


logger = logging.getLogger(__name__)

DEFAULT_TEMPERATURE_TOLERANCE = 0.01  # degree-C
DEFAULT_PRESSURE_TOLERANCE = 10.0  # Pa
DEFAULT_ADC_BITS = 24

_MIN_ADC_BITS = 16
_MAX_ADC_BITS = 32


class SearchBounds(namedtuple('SearchBounds', ('low', 'high'))):
    """Inclusive integer range of raw ADC values to search."""

    __slots__ = ()

    def __new__(cls, low, high):
        low = int(low)
        high = int(high)
        if low < 0 or high < low:
            raise InvalidDomain(
                "invalid search bounds [{}, {}]".format(low, high))
        return super().__new__(cls, low, high)

    @classmethod
    def for_bits(cls, bits):
        """Return bounds covering an ADC of `bits` bit width."""
        if not _MIN_ADC_BITS <= bits <= _MAX_ADC_BITS:
            raise InvalidDomain("unsupported ADC width: {}".format(bits))
        return cls(0, (1 << bits) - 1)

    def __contains__(self, value):
        """Return `True` if `value` lies within the inclusive range."""
        return self.low <= value <= self.high


ADC_24BIT_BOUNDS = SearchBounds.for_bits(DEFAULT_ADC_BITS)


class InversionReport(namedtuple(
        'InversionReport', ('adc', 'target', 'achieved', 'absolute_error'))):
    """Result of re-running the forward compensation on an inverted value."""

    __slots__ = ()

    def within(self, tolerance):
        """Return `True` if the residual error is below `tolerance`."""
        return self.absolute_error < tolerance


def invert(target, bounds, tolerance, forward):
    """Find a raw value `x` in `bounds` with `forward(x)` close to `target`.

    Args:
    - target: (float) Desired physical value.
    - bounds: `SearchBounds` to search in.
    - tolerance: (float) Return early once `|forward(x) - target|` drops
      below this value.
    - forward: Callable mapping a raw ADC integer to a physical value.
      Must be non-decreasing over `bounds`.

    Returns the raw ADC value. Never fails: if no value within tolerance
    is met, the last probed midpoint of the final bracket is returned,
    which for an unreachable target is next to one of the bound ends.

    """
    low, high = bounds
    mid = low
    n_iter = 0

    while high - low > 1:
        mid = (low + high) // 2
        value = forward(mid)
        n_iter += 1

        if abs(value - target) < tolerance:
            logger.debug(
                "Bisection hit %r at adc=%d after %d steps.",
                target, mid, n_iter)
            return mid

        if value < target:
            low = mid
        else:
            high = mid

    logger.debug(
        "Bisection exhausted bracket [%d, %d] for %r after %d steps.",
        low, high, target, n_iter)
    return mid


def verify(adc, target, forward):
    """Run `forward` on `adc` and report the residual error."""
    achieved = forward(adc)
    return InversionReport(adc, target, achieved, abs(achieved - target))


def _temperature_forward(calib, raw_temp):
    return compensate_temperature(raw_temp, calib)[0]


def invert_temperature(
        target_temp_c,
        calib,
        bounds=ADC_24BIT_BOUNDS,
        tolerance=DEFAULT_TEMPERATURE_TOLERANCE):
    """Return raw temperature ADC value approximating `target_temp_c`."""
    return invert(
        target_temp_c, bounds, tolerance,
        partial(_temperature_forward, calib))


def invert_pressure(
        target_press_pa,
        calib,
        t_lin,
        bounds=ADC_24BIT_BOUNDS,
        tolerance=DEFAULT_PRESSURE_TOLERANCE):
    """Return raw pressure ADC value approximating `target_press_pa`.

    `t_lin` is the linearized temperature the pressure is measured at.

    """
    return invert(
        target_press_pa, bounds, tolerance,
        partial(compensate_pressure, calib=calib, t_lin=t_lin))


class BMP390Inverter(object):
    """Invert temperature and pressure readings for one calibration set."""

    def __init__(
            self,
            calib,
            temperature_tolerance=DEFAULT_TEMPERATURE_TOLERANCE,
            pressure_tolerance=DEFAULT_PRESSURE_TOLERANCE,
            bounds=ADC_24BIT_BOUNDS):
        """Instantiate BMP390Inverter class.

        Args:
        - calib: `CalibrationCoefficients` of the sensor.
        - temperature_tolerance: (float) Early exit tolerance in degree-C.
        - pressure_tolerance: (float) Early exit tolerance in Pa.
        - bounds: `SearchBounds` shared by both channels.

        """
        if temperature_tolerance <= 0 or pressure_tolerance <= 0:
            raise InvalidDomain("tolerances must be positive")

        self._calib = calib
        self._temp_tol = float(temperature_tolerance)
        self._press_tol = float(pressure_tolerance)
        self._bounds = bounds

    @property
    def bounds(self):
        """`SearchBounds` used for both channels."""
        return self._bounds

    def invert_temperature(self, target_temp_c):
        """Returns (<raw-temp-adc>, <InversionReport>)."""
        forward = partial(_temperature_forward, self._calib)
        adc = invert(target_temp_c, self._bounds, self._temp_tol, forward)
        report = verify(adc, target_temp_c, forward)
        self._check(report, self._temp_tol, "temperature")
        return adc, report

    def invert_pressure(self, target_press_pa, t_lin):
        """Returns (<raw-press-adc>, <InversionReport>)."""
        forward = partial(compensate_pressure, calib=self._calib, t_lin=t_lin)
        adc = invert(target_press_pa, self._bounds, self._press_tol, forward)
        report = verify(adc, target_press_pa, forward)
        self._check(report, self._press_tol, "pressure")
        return adc, report

    def invert(self, target_temp_c, target_press_pa):
        """Find a raw (temperature, pressure) pair for the given targets.

        Pressure is searched at the linearized temperature of the raw
        temperature value actually found, not at the target temperature.

        Returns a tuple of format:
          (<temp-adc>, <press-adc>, <temp-report>, <press-report>)

        """
        temp_adc, temp_report = self.invert_temperature(target_temp_c)
        _, t_lin = compensate_temperature(temp_adc, self._calib)
        press_adc, press_report = self.invert_pressure(target_press_pa, t_lin)
        return temp_adc, press_adc, temp_report, press_report

    def _check(self, report, tolerance, channel):
        if report.within(tolerance):
            logger.debug(
                "Inverted %s %r -> adc=%d (error %.6g).",
                channel, report.target, report.adc, report.absolute_error)
        else:
            logger.warning(
                "Inverted %s %r -> adc=%d misses target by %.6g "
                "(tolerance %g).",
                channel, report.target, report.adc,
                report.absolute_error, tolerance)
