"""This module implements a base class to read data from BMP390 sensors.

Transports (I2C, SPI, simulation) differ only in how they obtain the raw
ADC values. Everything after that, compensation included, lives here.

"""
import logging

from bmp390.calibration import CalibrationCoefficients, parse_calibration
from bmp390.compensation import compensate
from bmp390.inversion import DEFAULT_ADC_BITS, SearchBounds


logger = logging.getLogger(__name__)


class BMP390SensorBase(object):
    """Class to produce compensated readings from a BMP390 sensor."""

    def __init__(self, calibration, adc_bits=DEFAULT_ADC_BITS):
        """Instantiate BMP390SensorBase class.

        Args:
        - calibration: Either a `CalibrationCoefficients` instance or the
          raw calibration register bytes.
        - adc_bits: (int) Width of the sensor ADC in bits.

        """
        if isinstance(calibration, CalibrationCoefficients):
            self._calib = calibration
        else:
            self._calib = parse_calibration(calibration)

        self._adc_bounds = SearchBounds.for_bits(adc_bits)

    @property
    def calibration(self):
        """`CalibrationCoefficients` of this sensor."""
        return self._calib

    @property
    def adc_bounds(self):
        """`SearchBounds` of valid raw ADC values."""
        return self._adc_bounds

    def read_raw(self):
        """Read raw pressure and temperature ADC values from sensor.

        Returns a tuple of format: (<pressure>, <temperature>).

        """
        raise NotImplementedError()

    async def async_read_raw(self):
        """Asynchronous version of `read_raw` function."""
        return self.read_raw()

    def _calc_pressure_temp(self, raw_p, raw_t):
        """Convert raw pressure and temperature into a `CompensatedReading`."""
        reading = compensate(raw_t, raw_p, self._calib)
        logger.debug(
            "raw (p=%d, t=%d) -> %.2f Pa, %.2f C",
            raw_p, raw_t, reading.pressure_pa, reading.temperature_c)
        return reading

    def read(self):
        """Read temperature and pressure in physical units.

        Returns a `CompensatedReading`.

        """
        p_raw, t_raw = self.read_raw()
        return self._calc_pressure_temp(p_raw, t_raw)

    async def async_read(self):
        """Asynchronously read temperature and pressure.

        This is the asynchronous version of `read` method.

        """
        p_raw, t_raw = await self.async_read_raw()
        return self._calc_pressure_temp(p_raw, t_raw)

