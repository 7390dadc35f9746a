"""This module contains a simulated BMP390 sensor.

The simulator stands in for the bus transport: raw ADC values are either
injected directly or derived from desired physical readings by inverting
the compensation formulas.

"""
import asyncio

from bmp390.base import BMP390SensorBase
from bmp390.errors import InvalidDomain
from bmp390.inversion import (
    DEFAULT_ADC_BITS,
    DEFAULT_PRESSURE_TOLERANCE,
    DEFAULT_TEMPERATURE_TOLERANCE,
    BMP390Inverter,
)

# Mid-scale of a 24-bit ADC.
_DEFAULT_RAW = 1 << 23


class SimulatedBMP390(BMP390SensorBase):
    """Class to simulate a BMP390 sensor from raw or target values."""

    def __init__(
            self,
            calibration,
            adc_bits=DEFAULT_ADC_BITS,
            raw_temp=_DEFAULT_RAW,
            raw_press=_DEFAULT_RAW,
            temperature_tolerance=DEFAULT_TEMPERATURE_TOLERANCE,
            pressure_tolerance=DEFAULT_PRESSURE_TOLERANCE,
            conversion_delay_s=0.0):
        """Instantiate SimulatedBMP390 class.

        Args:
        - calibration: `CalibrationCoefficients` or raw calibration bytes.
        - adc_bits: (int) Width of the simulated ADC.
        - raw_temp: (int) Initial raw temperature ADC value.
        - raw_press: (int) Initial raw pressure ADC value.
        - temperature_tolerance: (float) Inversion tolerance in degree-C.
        - pressure_tolerance: (float) Inversion tolerance in Pa.
        - conversion_delay_s: (float) Simulated ADC conversion time awaited
          by `async_read_raw`.

        """
        super().__init__(calibration, adc_bits=adc_bits)

        self._inverter = BMP390Inverter(
            self._calib,
            temperature_tolerance=temperature_tolerance,
            pressure_tolerance=pressure_tolerance,
            bounds=self._adc_bounds)
        self._conversion_delay_s = conversion_delay_s

        self._raw_t = 0
        self._raw_p = 0
        self.set_raw(raw_temp, raw_press)

    def set_raw(self, raw_temp, raw_press):
        """Set the raw ADC values returned by subsequent reads.

        Raises `InvalidDomain` unless both values are integral numbers
        within the ADC range.

        """
        raw_t = self._check_raw('temperature', raw_temp)
        raw_p = self._check_raw('pressure', raw_press)
        self._raw_t = raw_t
        self._raw_p = raw_p

    def _check_raw(self, name, value):
        """Return `value` as an int if it is a valid raw ADC value."""
        try:
            raw = int(value)
        except (TypeError, ValueError, OverflowError):
            raise InvalidDomain(
                "raw {} value {!r} is not a number".format(name, value))

        if isinstance(value, (str, bytes)) or raw != value:
            raise InvalidDomain(
                "raw {} value {!r} is not an integer".format(name, value))

        if raw not in self._adc_bounds:
            raise InvalidDomain(
                "raw {} value {} outside ADC range [{}, {}]".format(
                    name, raw, *self._adc_bounds))

        return raw

    def set_target(self, temperature_c, pressure_pa):
        """Make subsequent reads approximate the given physical values.

        Returns the `(<temp-report>, <press-report>)` verification pair.
        Inspect it: targets the polynomial cannot reach, or a pressure
        channel that falls with raw value, leave a large residual.

        """
        temp_adc, press_adc, temp_report, press_report = (
            self._inverter.invert(temperature_c, pressure_pa))
        self.set_raw(temp_adc, press_adc)
        return temp_report, press_report

    def read_raw(self):
        return (self._raw_p, self._raw_t)

    async def async_read_raw(self):
        await asyncio.sleep(self._conversion_delay_s)
        return self.read_raw()
