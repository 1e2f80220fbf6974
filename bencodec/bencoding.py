""" Translate Python objects to and from bencoded bytestrings.

Specification: https://wiki.theory.org/index.php/BitTorrentSpecification#Bencoding

    decode(b"d3:cow3:moo4:spaml1:a1:bee") --> {b"cow": b"moo", b"spam": [b"a", b"b"]}
    encode({b"cow": b"moo", b"spam": [b"a", b"b"]}) --> b"d3:cow3:moo4:spaml1:a1:bee"

decode_from() and encode_to() read and write files or binary streams.
"""
import logging
import os
from typing import BinaryIO, Optional, Union

from bencodec.config import DEFAULT_MAX_DEPTH, USE_DEFAULT, get_max_depth, set_max_depth
from bencodec.decoder import Decoder, decode
from bencodec.encoder import Encoder, encode
from bencodec.errors import DecodeError, EncodeError
from bencodec.value import Value, nesting_depth, to_value

__all__ = [
    "DEFAULT_MAX_DEPTH",
    "Decoder",
    "DecodeError",
    "Encoder",
    "EncodeError",
    "Value",
    "bdecode",
    "bencode",
    "decode",
    "decode_from",
    "encode",
    "encode_to",
    "get_max_depth",
    "nesting_depth",
    "set_max_depth",
    "to_value",
]

module_logger = logging.getLogger(__name__)

Source = Union[str, bytes, os.PathLike, BinaryIO]

bdecode = decode
bencode = encode


def _is_path(source) -> bool:
    return isinstance(source, (str, bytes, os.PathLike))


def _describe(source) -> str:
    if _is_path(source):
        return os.fsdecode(source)
    return getattr(source, "name", repr(source))


def decode_from(source: Source, max_depth=USE_DEFAULT, strict: bool=False) -> Optional[Value]:
    """Read the whole content of source and decode it

    'source' is either the path of a file or a binary stream open for reading. A file
    opened from a path is closed before returning, a stream is left open."""
    if _is_path(source):
        with open(source, "rb") as f:
            data = f.read()
    else:
        data = source.read()
    module_logger.debug("read {} bytes from {}".format(len(data), _describe(source)))
    return decode(data, max_depth=max_depth, strict=strict)


def encode_to(o, target: Source, sort_keys: bool=False) -> int:
    """Encode the object and write the result to target

    'target' is either the path of a file (created or truncated) or a binary stream
    open for writing. Return the number of bytes written.

    Nothing is written if the object cannot be encoded."""
    data = encode(o, sort_keys=sort_keys)
    if _is_path(target):
        with open(target, "wb") as f:
            f.write(data)
    else:
        target.write(data)
    module_logger.debug("wrote {} bytes to {}".format(len(data), _describe(target)))
    return len(data)
