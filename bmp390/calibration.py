"""This module parses and quantizes BMP390 calibration (NVM) data.

The sensor stores 14 trimming parameters in registers 0x31 to 0x45. Each
one is a fixed-point number whose exponent is only documented by the
vendor, so parsing is two steps: unpack the raw sub-words, then rescale
every one into a floating point coefficient.

"""
from collections import namedtuple
import logging
import struct

from bmp390.errors import MalformedCalibration


logger = logging.getLogger(__name__)

# Number of bytes in the calibration register block.
CALIB_DATA_SIZE = 21

# Little-endian layout of the register block, in field order:
#
#   t1 t2 t3 p1 p2 p3 p4 p5 p6 p7 p8 p9 p10 p11
#   H  H  b  h  h  b  b  H  H  b  b  h  b   b
#
_CALIB_FORMAT = '<HHbhhbbHHbbhbb'

# Calibration dump of the example sensor used throughout the project.
REFERENCE_CALIBRATION_BYTES = bytes((
    0xCB, 0x68,  # t1
    0x68, 0x66,  # t2
    0x03,        # t3
    0xE9, 0xBE,  # p1
    0x71, 0xD5,  # p2
    0x07,        # p3
    0x05,        # p4
    0xFF, 0x9F,  # p5
    0xFF, 0x9F,  # p6
    0x0F,        # p7
    0xFE,        # p8
    0x00, 0xE0,  # p9
    0xE0,        # p10
    0xEB,        # p11
))

_FIELDS = (
    't1', 't2', 't3',
    'p1', 'p2', 'p3', 'p4', 'p5', 'p6', 'p7', 'p8', 'p9', 'p10', 'p11',
)

# (offset, divisor) per field. The coefficient is (raw - offset) / divisor.
_QUANTIZATION = {
    't1': (0.0, 2.0 ** -8),
    't2': (0.0, 2.0 ** 30),
    't3': (0.0, 2.0 ** 48),
    'p1': (16384.0, 2.0 ** 20),
    'p2': (16384.0, 2.0 ** 29),
    'p3': (0.0, 2.0 ** 32),
    'p4': (0.0, 2.0 ** 37),
    'p5': (0.0, 2.0 ** -3),
    'p6': (0.0, 2.0 ** 6),
    'p7': (0.0, 2.0 ** 8),
    'p8': (0.0, 2.0 ** 15),
    'p9': (0.0, 2.0 ** 48),
    'p10': (0.0, 2.0 ** 48),
    'p11': (0.0, 2.0 ** 65),
}


class CalibrationCoefficients(namedtuple('CalibrationCoefficients', _FIELDS)):
    """Quantized calibration coefficients of one sensor.

    Instances are immutable, so a single set may be shared freely between
    concurrent compensation and inversion calls.

    """

    __slots__ = ()

    def as_dict(self):
        """Return coefficients as an ordered `{name: value}` dict."""
        return dict(zip(self._fields, self))


def unpack_calibration(raw_bytes):
    """Unpack raw register bytes into a tuple of integer sub-words.

    Bytes after the first `CALIB_DATA_SIZE` are ignored.

    """
    if len(raw_bytes) < CALIB_DATA_SIZE:
        raise MalformedCalibration(
            "expected {} calibration bytes, got {}".format(
                CALIB_DATA_SIZE, len(raw_bytes)))

    return struct.unpack_from(_CALIB_FORMAT, bytes(raw_bytes[:CALIB_DATA_SIZE]))


def quantize(raw_values):
    """Rescale raw integer sub-words into floating point coefficients."""
    coefs = []
    for name, value in zip(_FIELDS, raw_values):
        offset, divisor = _QUANTIZATION[name]
        coefs.append((float(value) - offset) / divisor)

    return CalibrationCoefficients(*coefs)


def parse_calibration(raw_bytes):
    """Parse a calibration register dump.

    Args:
    - raw_bytes: (bytes-like) At least 21 bytes read from register 0x31
      onwards.

    Returns a `CalibrationCoefficients` instance.

    Raises `MalformedCalibration` if fewer than 21 bytes are given.

    """
    raw = unpack_calibration(raw_bytes)
    calib = quantize(raw)
    logger.debug("Parsed calibration: %s", dict(zip(_FIELDS, raw)))
    return calib


def parse_hex(text):
    """Parse calibration bytes written as hex, e.g. "cb 68 68 ..."."""
    cleaned = text.replace(',', ' ').replace('0x', '').replace('0X', '')
    try:
        return bytes.fromhex(''.join(cleaned.split()))
    except ValueError as exc:
        raise MalformedCalibration(
            "invalid calibration hex string: {}".format(exc)) from exc
