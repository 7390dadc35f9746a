"""Unit conversions used when displaying readings."""

_FEET_PER_METER = 3.28084


def celsius_to_fahrenheit(temp_c):
    """Convert degree-C to degree-F."""
    return temp_c * 1.8 + 32.0


def pa_to_hpa(pressure_pa):
    """Convert Pa to hPa (mBar)."""
    return pressure_pa / 100.0


def meters_to_feet(meters):
    """Convert meters to feet."""
    return meters * _FEET_PER_METER
