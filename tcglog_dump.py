#!/usr/bin/env python3
import sys
from pathlib import Path
import argparse
import re

from tcglog import (
    DEFAULT_LOG_PATH,
    DecodeOptions,
    EFIVariableData,
    LogFormatError,
    UnsupportedAlgorithmError,
    algorithm_name,
    parse_algorithm,
    parse_log,
)
import tcglog.logging as logging
from tcglog.util import hexdump, to_hex

logger = logging.getLogger("tcglog_dump")


_PCRS_MAX_NUM = 24


def validate_pcrlist(pcr_list: str) -> list[int]:
    if re.fullmatch(r"\d+(,\d+)*", pcr_list) is None:
        raise argparse.ArgumentTypeError("PCR list must have format '<num>,<num>,...'")

    pcrs = sorted(set(map(int, pcr_list.split(","))))
    if not all(x < _PCRS_MAX_NUM for x in pcrs):
        raise argparse.ArgumentTypeError(f"Max index for PCR is {_PCRS_MAX_NUM-1}")
    return pcrs


def validate_alg(name: str):
    try:
        return parse_algorithm(name)
    except UnsupportedAlgorithmError as e:
        raise argparse.ArgumentTypeError(str(e))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="tcglog-dump", description="Dump the contents of a TCG event log")
    parser.add_argument("log_path", nargs="?", type=Path, default=DEFAULT_LOG_PATH,
                        help="event log to read (default: %(default)s)")
    parser.add_argument("--alg", type=validate_alg, default="sha1",
                        help="name of the hash algorithm to display")
    parser.add_argument("-v", "--verbose", action="store_true", help="display details of event data")
    parser.add_argument("-x", "--hexdump", action="store_true", help="display hexdump of event data")
    parser.add_argument("--vardatahexdump", action="store_true", help="display hexdump of EFI variable data")
    parser.add_argument("--extract-data", metavar="PREFIX",
                        help="extract event data to individual files named <prefix>-<pcr>-<num>")
    parser.add_argument("--extract-vardata", metavar="PREFIX",
                        help="extract EFI variable data to individual files named <prefix>-<pcr>-<num>")
    parser.add_argument("--with-grub", action="store_true",
                        help="interpret measurements made by GRUB to PCRs 8 and 9")
    parser.add_argument("--with-systemd-efi-stub", action="store_true",
                        help="interpret measurements made by systemd's EFI stub Linux loader")
    parser.add_argument("--systemd-efi-stub-pcr", type=int, default=8, metavar="PCR",
                        help="PCR that systemd's EFI stub Linux loader measures to (default: %(default)s)")
    parser.add_argument("--pcrs", type=validate_pcrlist, action="append", default=[],
                        help="only display events for the specified PCRs, can be given multiple times")
    parser.add_argument("-d", "--debug", help="Print lots of debugging statements", action="store_const",
                        dest="loglevel", const=logging.DEBUG, default=logging.INFO)
    return parser


def postprocess_args(args: argparse.Namespace) -> argparse.Namespace:
    args.pcrs = {pcr for pcrs in args.pcrs for pcr in pcrs}

    logging.getLogger().setLevel(args.loglevel)

    return args


def format_event(event, args) -> str:
    line = "%2d %s %s" % (event.pcr_idx, to_hex(event.digests.get(args.alg, b"")), event.type)
    if args.verbose or args.hexdump:
        text = event.data.display_text()
        if text:
            line += " [ %s ]" % text

    if args.hexdump:
        line += "\n  Event data:\n  " + "\n  ".join(hexdump(event.data.raw_bytes()))

    if args.vardatahexdump and isinstance(event.data, EFIVariableData):
        line += "\n  EFI variable data:\n  " + "\n  ".join(hexdump(event.data.variable_data))

    return line


def extract(event, args):
    if args.extract_data:
        with open(f"{args.extract_data}-{event.pcr_idx}-{event.index}", "wb") as fh:
            fh.write(event.data.raw_bytes())

    if args.extract_vardata and isinstance(event.data, EFIVariableData):
        with open(f"{args.extract_vardata}-{event.pcr_idx}-{event.index}", "wb") as fh:
            fh.write(event.data.variable_data)


def main(argv=None) -> int:
    logging.basicConfig(stream=sys.stderr, level=logging.INFO)

    parser = build_parser()
    args = postprocess_args(parser.parse_args(argv))

    options = DecodeOptions(enable_grub=args.with_grub,
                            enable_systemd_efi_stub=args.with_systemd_efi_stub,
                            systemd_efi_stub_pcr=args.systemd_efi_stub_pcr)

    try:
        log = parse_log(args.log_path, options)
    except OSError as e:
        logger.error("Failed to open log file: %s", e)
        return 1
    except LogFormatError as e:
        logger.error("Failed to parse log file: %s", e)
        return 1

    if args.alg not in log.algorithms:
        logger.error("The log doesn't contain entries for the %s digest algorithm", algorithm_name(args.alg))
        return 1

    for event in log.events:
        if args.pcrs and event.pcr_idx not in args.pcrs:
            continue

        print(format_event(event, args))
        extract(event, args)

    return 0


if __name__ == "__main__":
    sys.exit(main())
