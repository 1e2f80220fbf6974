"""
Bencode decoder

Specification: https://wiki.theory.org/index.php/BitTorrentSpecification#Bencoding

The decoder reads the input once, from left to right. Nested lists and
dictionaries are tracked with an explicit stack of frames instead of recursive
calls: the depth of the input is only bounded by the configured depth limit,
never by the interpreter's recursion limit.
"""
import re
from typing import List, Optional

from bencodec import config
from bencodec.errors import DecodeError
from bencodec.value import Value

_INTEGER = ord("i")
_LIST = ord("l")
_DICT = ord("d")
_END = ord("e")
_MINUS = ord("-")
_COLON = ord(":")
_ZERO = ord("0")
_NINE = ord("9")

_DIGITS = re.compile(rb"[0-9]*")


class _Frame:
    """A list or dictionary being decoded"""
    __slots__ = ("kind", "container", "key", "last_key")

    def __init__(self, token: int):
        if token == _DICT:
            self.kind = "dictionary"
            self.container = {}
        else:
            self.kind = "list"
            self.container = []
        # Key waiting for its value (dictionaries only)
        self.key = None
        # Previous key, used to check key ordering in strict mode
        self.last_key = None

    @property
    def expects_key(self) -> bool:
        return self.kind == "dictionary" and self.key is None

    def add(self, value: Value):
        if self.kind == "dictionary":
            self.container[self.key] = value
            self.key = None
        else:
            self.container.append(value)


class Decoder:
    """Decode one bencoded value stored in a bytes-like object

    max_depth: maximum number of nested lists and dictionaries (None for no limit,
               process-wide default from bencodec.config when not given)
    strict: reject non canonical encodings (leading zeros, negative zero, unsorted or
            duplicate dictionary keys)"""
    def __init__(self, data, max_depth=config.USE_DEFAULT, strict: bool=False):
        if isinstance(data, (bytearray, memoryview)):
            data = bytes(data)
        elif not isinstance(data, bytes):
            raise TypeError("bytes-like object expected, not {}".format(type(data).__name__))
        self._data = data
        self._size = len(data)
        self._position = 0
        self._max_depth = config.resolve_max_depth(max_depth)
        self._strict = strict

    def decode(self) -> Optional[Value]:
        """Return the value stored in the input, None if the input is empty

        DecodeError is raised if the input is not exactly one valid bencoded value"""
        if self._size == 0:
            return None

        value = self._decode_value()
        if self._position != self._size:
            raise DecodeError("Trailing garbage after the end of the value", self._position)
        return value

    def _decode_value(self) -> Value:
        stack = []  # type: List[_Frame]
        while True:
            frame = stack[-1] if stack else None
            if frame is not None and self._position >= self._size:
                raise DecodeError("Unexpected {} end".format(frame.kind), self._position)

            start = self._position
            if frame is not None and frame.key is None and self._data[start] == _END:
                # End of the current list or dictionary
                self._position += 1
                stack.pop()
                value = frame.container
            elif self._data[start] in (_LIST, _DICT):
                if frame is not None and frame.expects_key:
                    raise DecodeError("Dictionary key is not a string", start)
                if self._max_depth is not None and len(stack) >= self._max_depth:
                    raise DecodeError("Structure is too deep", start)
                stack.append(_Frame(self._data[start]))
                self._position += 1
                continue
            else:
                value = self._decode_scalar()
                if frame is not None and frame.expects_key:
                    self._check_key(frame, value, start)
                    frame.key = value
                    continue

            if not stack:
                return value
            stack[-1].add(value)

    def _check_key(self, frame: _Frame, key: Value, offset: int):
        if not isinstance(key, bytes):
            raise DecodeError("Dictionary key is not a string", offset)
        if self._strict and frame.last_key is not None:
            if key == frame.last_key:
                raise DecodeError("Duplicate dictionary key {!r}".format(key), offset)
            if key < frame.last_key:
                raise DecodeError("Dictionary keys are not sorted", offset)
        frame.last_key = key

    def _decode_scalar(self) -> Value:
        token = self._data[self._position]
        if token == _INTEGER:
            return self._decode_integer()
        elif _ZERO <= token <= _NINE:
            return self._decode_bytestring()
        raise DecodeError("Unknown element type {!r}".format(bytes([token])), self._position)

    def _read_digits(self) -> int:
        """Advance past a run of ASCII digits and return the index of the first digit"""
        start = self._position
        self._position = _DIGITS.match(self._data, start).end()
        return start

    def _to_int(self, start: int, reason: str) -> int:
        try:
            return int(self._data[start:self._position])
        except ValueError:
            # Longer than the interpreter's integer string conversion limit
            raise DecodeError(reason, start) from None

    def _decode_integer(self) -> int:
        """Integer:
            - "i42e" --> 42
            - "i-42e" --> -42
        """
        self._position += 1
        negative = self._position < self._size and self._data[self._position] == _MINUS
        if negative:
            self._position += 1

        start = self._read_digits()
        if self._position >= self._size:
            raise DecodeError("Unexpected integer end", self._position)
        if self._data[self._position] != _END or self._position == start:
            raise DecodeError("Malformed integer ({!r})"
                              .format(self._data[self._position:self._position + 1]),
                              self._position)

        number = self._to_int(start, "Integer is too large")
        if self._strict:
            if self._data[start] == _ZERO and self._position - start > 1:
                raise DecodeError("Integer with leading zero", start)
            if negative and number == 0:
                raise DecodeError("Negative zero", start)

        self._position += 1
        return -number if negative else number

    def _decode_bytestring(self) -> bytes:
        """String:
            - "4:spam" --> b"spam"
        """
        start = self._read_digits()
        if self._position < self._size and self._data[self._position] != _COLON:
            raise DecodeError("Invalid string length specification ({!r})"
                              .format(self._data[self._position:self._position + 1]),
                              self._position)
        if self._strict and self._data[start] == _ZERO and self._position - start > 1:
            raise DecodeError("String length with leading zero", start)

        length = self._to_int(start, "Invalid string length specification")
        if self._size - self._position < length + 1:
            raise DecodeError("Unexpected string end", self._position)

        begin = self._position + 1
        self._position = begin + length
        return self._data[begin:self._position]


def decode(data, max_depth=config.USE_DEFAULT, strict: bool=False) -> Optional[Value]:
    """Decode the bencoded value stored in data

    When max_depth is not given, the process-wide default from bencodec.config is used.
    An empty input returns None. DecodeError is raised if data is not exactly one valid
    bencoded value, TypeError if data is not a bytes-like object"""
    return Decoder(data, max_depth, strict).decode()
