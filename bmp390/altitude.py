"""This module contains classes to estimate altitude using a BMP390 sensor."""
import math

from bmp390.errors import InvalidDomain

SEA_LEVEL_PRESSURE_PA = 101325.0

# International barometric formula constants.
_ALTITUDE_SCALE_M = 44330.0
_ALTITUDE_EXPONENT = 0.1903


def altitude_from_pressure(pressure_pa, sea_level_pressure=SEA_LEVEL_PRESSURE_PA):
    """Altitude in meters for a pressure in Pa. `nan` for `pressure_pa <= 0`."""
    if not (pressure_pa > 0 and sea_level_pressure > 0):
        return math.nan

    ratio = pressure_pa / sea_level_pressure
    return _ALTITUDE_SCALE_M * (1.0 - ratio ** _ALTITUDE_EXPONENT)


def pressure_from_altitude(altitude_m, sea_level_pressure=SEA_LEVEL_PRESSURE_PA):
    """Inverse of `altitude_from_pressure`."""
    base = 1.0 - altitude_m / _ALTITUDE_SCALE_M
    if not base > 0:
        return math.nan

    return sea_level_pressure * base ** (1.0 / _ALTITUDE_EXPONENT)


def checked_altitude(pressure_pa, sea_level_pressure=SEA_LEVEL_PRESSURE_PA):
    """Like `altitude_from_pressure`, but raises `InvalidDomain` instead of nan."""
    if not pressure_pa > 0:
        raise InvalidDomain(
            "altitude undefined for pressure {!r} Pa".format(pressure_pa))
    if not sea_level_pressure > 0:
        raise InvalidDomain(
            "invalid reference pressure {!r} Pa".format(sea_level_pressure))

    return altitude_from_pressure(pressure_pa, sea_level_pressure)


class AltitudeEstimator(object):
    """Class to estimate altitude by reading data from a BMP390 sensor."""

    def __init__(self, sensor_obj, sea_level_pressure=SEA_LEVEL_PRESSURE_PA):
        """Instantiate AltitudeEstimator class.

        Args:
        - sensor_obj: An instance of a `BMP390SensorBase` subclass.
        - sea_level_pressure: (optional) Reference pressure in Pa.
        """
        self._sensor = sensor_obj
        self._p_ref = float(sea_level_pressure)

    @property
    def ref_pressure(self):
        return self._p_ref

    def set_ref_pressure(self, n_measurements=10):
        """Set reference pressure in Pa from measurements by the sensor.

        Altitudes read afterwards are relative to the current position.

        """
        if n_measurements < 1:
            raise ValueError("n_measurements must be at least 1")

        s = 0.0
        for _ in range(n_measurements):
            s += self._sensor.read().pressure_pa

        ref = s / n_measurements
        if not ref > 0:
            raise InvalidDomain(
                "sensor reported non-positive reference pressure {!r} Pa"
                .format(ref))
        self._p_ref = ref

        return ref

    def _calc_altitude_m(self, abs_pressure):
        """Calculate altitude in meters from given absolute pressure."""
        return checked_altitude(abs_pressure, self._p_ref)

    def read_altitude(self):
        """Read altitude in meters from the sensor."""
        return self._calc_altitude_m(self._sensor.read().pressure_pa)

    async def async_read_altitude(self):
        """Asynchronously read altitude in meters from the sensor."""
        reading = await self._sensor.async_read()
        return self._calc_altitude_m(reading.pressure_pa)
