"""Exceptions raised by the bmp390 package."""


class BMP390Error(Exception):
    """Exception related to BMP390 compensation."""


class MalformedCalibration(BMP390Error):
    """Calibration data is too short or unreadable."""


class InvalidDomain(BMP390Error, ValueError):
    """Value is outside the domain an operation is defined on."""
