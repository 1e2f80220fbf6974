"""
Command line interface

    bencodec decode file.torrent
    bencodec check --strict file.torrent
    bencodec encode metainfo.json -o file.torrent
"""
import argparse
import json
import logging
import pprint
import sys
from typing import List, Optional

from bencodec.bencoding import DecodeError, EncodeError, decode_from, encode_to, \
                               nesting_depth, to_value
from bencodec.config import DEFAULT_MAX_DEPTH

module_logger = logging.getLogger(__name__)

LOG_FORMAT = "[%(asctime)s] %(levelname)s [%(name)s.%(funcName)s:%(lineno)d] %(message)s"


def _max_depth(s: str) -> Optional[int]:
    """Parse the argument of --max-depth: a non-negative integer or 'none'"""
    if s.lower() == "none":
        return None
    try:
        depth = int(s)
    except ValueError:
        raise argparse.ArgumentTypeError("invalid depth: {!r}".format(s)) from None
    if depth < 0:
        raise argparse.ArgumentTypeError("depth must be >= 0")
    return depth


def _input(path: str):
    if path == "-":
        return sys.stdin.buffer
    return path


def _decode(args) -> int:
    value = decode_from(_input(args.file), max_depth=args.max_depth, strict=args.strict)
    print(pprint.pformat(value))
    return 0


def _check(args) -> int:
    value = decode_from(_input(args.file), max_depth=args.max_depth, strict=args.strict)
    if value is None:
        print("OK: empty input")
    else:
        print("OK: {} (depth {})".format(type(value).__name__, nesting_depth(value)))
    return 0


def _encode(args) -> int:
    if args.file == "-":
        document = json.load(sys.stdin)
    else:
        with open(args.file, "r", encoding="utf-8") as f:
            document = json.load(f)

    value = to_value(document)
    if args.output is None:
        encode_to(value, sys.stdout.buffer, sort_keys=args.sort_keys)
        sys.stdout.buffer.flush()
    else:
        encode_to(value, args.output, sort_keys=args.sort_keys)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="bencodec", description="Bencode codec")
    parser.add_argument("-v", "--verbose", help="debug log", action="store_true")
    parser.add_argument("-l", "--log-file", help="log file")
    subparsers = parser.add_subparsers(dest="command")
    subparsers.required = True

    for name, handler, description in [("decode", _decode, "print the decoded value"),
                                       ("check", _check, "validate a bencoded file")]:
        p = subparsers.add_parser(name, help=description)
        p.add_argument("file", help="bencoded file ('-' for stdin)")
        p.add_argument("--max-depth", type=_max_depth, default=DEFAULT_MAX_DEPTH,
                       help="maximum nesting depth, 'none' for no limit "
                            "(default: {})".format(DEFAULT_MAX_DEPTH))
        p.add_argument("--strict", action="store_true",
                       help="reject non canonical encodings")
        p.set_defaults(handler=handler)

    p = subparsers.add_parser("encode", help="encode a JSON document")
    p.add_argument("file", help="JSON file ('-' for stdin)")
    p.add_argument("-o", "--output", help="output file (default: stdout)")
    p.add_argument("--sort-keys", action="store_true", help="sort dictionary keys")
    p.set_defaults(handler=_encode)

    return parser


def main(argv: Optional[List[str]]=None) -> int:
    args = build_parser().parse_args(argv)

    level = logging.DEBUG if args.verbose else logging.WARNING
    if args.log_file:
        logging.basicConfig(level=level, format=LOG_FORMAT, datefmt="%H:%M:%S",
                            filename=args.log_file, filemode="a")
    else:
        logging.basicConfig(level=level, format=LOG_FORMAT, datefmt="%H:%M:%S")

    try:
        return args.handler(args)
    except DecodeError as e:
        module_logger.error("{}: invalid Bencode: {}".format(args.file, e))
    except EncodeError as e:
        module_logger.error("{}: cannot encode: {}".format(args.file, e))
    except (OSError, ValueError) as e:
        module_logger.error("{}: {}".format(args.file, e))
    return 1


if __name__ == '__main__':
    sys.exit(main())
