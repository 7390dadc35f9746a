"""Command line front-end for BMP390 compensation and inversion."""
import argparse
import logging
import os
import sys

from bmp390.altitude import SEA_LEVEL_PRESSURE_PA, checked_altitude
from bmp390.calibration import REFERENCE_CALIBRATION_BYTES, parse_calibration, parse_hex
from bmp390.compensation import compensate
from bmp390.errors import BMP390Error, InvalidDomain
from bmp390.inversion import (
    DEFAULT_ADC_BITS,
    DEFAULT_PRESSURE_TOLERANCE,
    DEFAULT_TEMPERATURE_TOLERANCE,
    BMP390Inverter,
    SearchBounds,
)
from bmp390.units import celsius_to_fahrenheit, meters_to_feet, pa_to_hpa

_LOG_LEVEL_ENV = "BMP390_LOG_LEVEL"
_RULE = "=" * 40


def _setup_logging(verbose):
    default = "DEBUG" if verbose else "WARNING"
    level_name = os.getenv(_LOG_LEVEL_ENV, default).upper()
    logging.basicConfig(
        level=getattr(logging, level_name, logging.WARNING),
        format="[%(levelname)s] %(message)s")


def _load_calibration(args):
    if args.calib is None:
        raw = REFERENCE_CALIBRATION_BYTES
    else:
        raw = parse_hex(args.calib)
    return parse_calibration(raw)


def cmd_calib(args, out):
    """Print the quantized calibration coefficients."""
    calib = _load_calibration(args)
    print(_RULE, file=out)
    print("Quantized Calibration Coefficients:", file=out)
    print(_RULE, file=out)
    for name, value in calib.as_dict().items():
        print(f"par_{name}: {value:.10e}", file=out)
    print(_RULE, file=out)


def cmd_compensate(args, out):
    """Print compensated temperature, pressure and altitude for raw values.

    Altitude is reported as undefined for non-positive pressure.

    """
    calib = _load_calibration(args)
    reading = compensate(args.raw_temp, args.raw_press, calib)
    t = reading.temperature_c
    p = reading.pressure_pa

    print(f"Raw ADC:     T={args.raw_temp}, P={args.raw_press}", file=out)
    print(f"Temperature: {t:.2f} C ({celsius_to_fahrenheit(t):.2f} F)", file=out)
    print(f"Pressure:    {p:.2f} Pa ({pa_to_hpa(p):.2f} hPa)", file=out)
    try:
        alt = checked_altitude(p, args.sea_level)
    except InvalidDomain as exc:
        print(f"Altitude:    undefined ({exc})", file=out)
    else:
        print(f"Altitude:    {alt:.2f} m ({meters_to_feet(alt):.2f} ft)", file=out)


def cmd_invert(args, out):
    """Print raw ADC values approximating the target readings."""
    calib = _load_calibration(args)
    inverter = BMP390Inverter(
        calib,
        temperature_tolerance=args.temp_tolerance,
        pressure_tolerance=args.press_tolerance,
        bounds=SearchBounds.for_bits(args.adc_bits))
    temp_adc, press_adc, t_rep, p_rep = inverter.invert(
        args.temp_c, args.press_pa)

    print(f"Target:          T={args.temp_c:.2f} C, P={args.press_pa:.2f} Pa",
          file=out)
    print(f"Temperature ADC: {temp_adc} (0x{temp_adc:06X})", file=out)
    print(f"Pressure ADC:    {press_adc} (0x{press_adc:06X})", file=out)
    print(f"Achieved Temp:   {t_rep.achieved:.2f} C "
          f"(error: {t_rep.absolute_error:.4f} C)", file=out)
    print(f"Achieved Press:  {p_rep.achieved:.2f} Pa "
          f"(error: {p_rep.absolute_error:.2f} Pa)", file=out)


def build_parser():
    """Build the `bmp390-tool` argument parser."""
    parser = argparse.ArgumentParser(
        prog="bmp390-tool",
        description="BMP390 compensation and raw value inversion.")
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="enable debug logging")
    parser.add_argument(
        "--calib",
        help="calibration bytes as hex (default: reference sensor dump)")
    sub = parser.add_subparsers(dest="command", required=True)

    p_calib = sub.add_parser("calib", help="print quantized coefficients")
    p_calib.set_defaults(func=cmd_calib)

    p_comp = sub.add_parser("compensate", help="raw ADC values -> C, Pa")
    p_comp.add_argument("raw_temp", type=int)
    p_comp.add_argument("raw_press", type=int)
    p_comp.add_argument(
        "--sea-level", type=float, default=SEA_LEVEL_PRESSURE_PA,
        help="reference pressure for altitude in Pa")
    p_comp.set_defaults(func=cmd_compensate)

    p_inv = sub.add_parser("invert", help="C, Pa -> raw ADC values")
    p_inv.add_argument("temp_c", type=float)
    p_inv.add_argument("press_pa", type=float)
    p_inv.add_argument(
        "--adc-bits", type=int, default=DEFAULT_ADC_BITS)
    p_inv.add_argument(
        "--temp-tolerance", type=float, default=DEFAULT_TEMPERATURE_TOLERANCE)
    p_inv.add_argument(
        "--press-tolerance", type=float, default=DEFAULT_PRESSURE_TOLERANCE)
    p_inv.set_defaults(func=cmd_invert)

    return parser


def main(argv=None, out=None):
    """Run the command line tool. Returns the process exit status."""
    args = build_parser().parse_args(argv)
    _setup_logging(args.verbose)
    out = sys.stdout if out is None else out

    try:
        args.func(args, out)
    except BMP390Error as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2

    return 0


if __name__ == "__main__":
    sys.exit(main())
