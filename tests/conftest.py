import pytest

from bmp390.calibration import REFERENCE_CALIBRATION_BYTES, parse_calibration


# Same temperature trimming as the reference sensor, but a purely linear
# pressure channel: P = raw * 16383 / 2**20, rising with raw value.
RISING_CALIBRATION_BYTES = bytes((
    0xCB, 0x68, 0x68, 0x66, 0x03,
    0xFF, 0x7F,  # p1 = 32767
    0x00, 0x40,  # p2 = 16384
    0x00, 0x00,
    0x00, 0x00, 0x00, 0x00,
    0x00, 0x00,
    0x00, 0x00, 0x00, 0x00,
))


@pytest.fixture
def reference_calib():
    return parse_calibration(REFERENCE_CALIBRATION_BYTES)


@pytest.fixture
def rising_calib():
    return parse_calibration(RISING_CALIBRATION_BYTES)
