"""
Bencode encoder

Values are encoded by walking the tree with an explicit stack. There is no
depth limit on this side: the tree is built by the caller and is finite, and
not relying on recursion means even very deep trees can be encoded.
"""
from collections.abc import Mapping
from typing import Iterator, List, Tuple

from bencodec.errors import EncodeError
from bencodec.value import as_bytestring, is_integer


def _type_name(o) -> str:
    return type(o).__name__


class Encoder:
    """Encode Python objects to Bencode

    Dictionary entries are written in iteration order, unless sort_keys is True in
    which case they are written in the byte order of their keys, as mandated by the
    BitTorrent specification"""
    def __init__(self, sort_keys: bool=False):
        self.sort_keys = sort_keys

    def encode(self, o) -> bytes:
        """Return the Bencoded representation of the object

        EncodeError is raised if the object, or an object it contains, cannot be encoded"""
        output = bytearray()
        # Each item of the stack is an iterator over the children of an open container,
        # together with the id() of the container
        stack = [(iter((o,)), None)]  # type: List[Tuple[Iterator, int]]
        active = set()
        while stack:
            children, container_id = stack[-1]
            try:
                child = next(children)
            except StopIteration:
                stack.pop()
                if container_id is not None:
                    active.discard(container_id)
                    output += b"e"
                continue

            if is_integer(child):
                try:
                    output += b"i%de" % int(child)
                except ValueError:
                    # Longer than the interpreter's integer string conversion limit
                    raise EncodeError("Integer is too large", "int") from None
                continue

            b = as_bytestring(child)
            if b is not None:
                output += b"%d:%s" % (len(b), b)
                continue

            if isinstance(child, (list, tuple)):
                output += b"l"
                grandchildren = iter(child)
            elif isinstance(child, Mapping):
                output += b"d"
                grandchildren = self._dict_items(child)
            else:
                raise EncodeError("Don't know how to encode {}".format(_type_name(child)),
                                  _type_name(child))

            if id(child) in active:
                raise EncodeError("Circular reference found in {}".format(_type_name(child)),
                                  _type_name(child))
            active.add(id(child))
            stack.append((grandchildren, id(child)))

        return bytes(output)

    def _dict_items(self, d: Mapping) -> Iterator:
        """Yield keys (as byte strings) and values of the dictionary, alternately"""
        if not self.sort_keys:
            for key, value in d.items():
                yield self._key(key)
                yield value
            return

        items = sorted(((self._key(key), value) for key, value in d.items()),
                       key=lambda item: item[0])
        for i, (key, value) in enumerate(items):
            if i > 0 and items[i - 1][0] == key:
                raise EncodeError("Duplicate dictionary key {!r}".format(key), _type_name(key))
            yield key
            yield value

    @staticmethod
    def _key(key) -> bytes:
        b = as_bytestring(key)
        if b is None:
            raise EncodeError("Keys must be strings, not {}".format(_type_name(key)),
                              _type_name(key))
        return b


def encode(o, sort_keys: bool=False) -> bytes:
    """Return the Bencoded representation of the object

    Integers, byte strings, text (encoded in UTF-8), lists, tuples and mappings with
    string keys can be encoded. EncodeError is raised for any other object."""
    return Encoder(sort_keys).encode(o)
