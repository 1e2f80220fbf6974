"""
Values representable in Bencode

Bencode only knows four kinds of values, mapped to four Python types:
    - integers      --> int (bool excluded)
    - byte strings  --> bytes
    - lists         --> list
    - dictionaries  --> dict with bytes keys

to_value() converts other host objects (text, tuples, mappings...) to these
four types and is the place where unsupported objects are rejected.
"""
from collections.abc import Mapping
from typing import Dict, Iterator, List, Optional, Tuple, Union

from bencodec.errors import EncodeError

Value = Union[int, bytes, List['Value'], Dict[bytes, 'Value']]

BYTESTRING_TYPES = (bytes, bytearray, memoryview, str)


def as_bytestring(o) -> Optional[bytes]:
    """Return the byte string corresponding to o, None if o is not string-like

    Text is encoded in UTF-8"""
    if isinstance(o, bytes):
        return o
    elif isinstance(o, str):
        return o.encode("utf-8")
    elif isinstance(o, (bytearray, memoryview)):
        return bytes(o)
    return None


def is_integer(o) -> bool:
    return isinstance(o, int) and not isinstance(o, bool)


def to_value(o) -> Value:
    """Convert a host object to a Value tree

    EncodeError is raised if o, or any object nested in o, cannot be converted, or if
    a list or mapping contains itself"""
    root = []
    # Each item of the stack is an iterator over the (key, child) pairs of an open
    # container, the converted container and the id() of the original container
    stack = [(iter([(None, o)]), root, None)]  # type: List[Tuple[Iterator, Value, int]]
    active = set()
    while stack:
        children, target, container_id = stack[-1]
        try:
            key, child = next(children)
        except StopIteration:
            stack.pop()
            active.discard(container_id)
            continue

        if isinstance(target, dict):
            k = as_bytestring(key)
            if k is None:
                raise EncodeError("Dictionary keys must be strings, not {}"
                                  .format(type(key).__name__), type(key).__name__)

        b = as_bytestring(child)
        if is_integer(child):
            converted = int(child)
        elif b is not None:
            converted = b
        elif isinstance(child, (list, tuple, Mapping)):
            if id(child) in active:
                raise EncodeError("Circular reference found in {}".format(type(child).__name__),
                                  type(child).__name__)
            active.add(id(child))
            if isinstance(child, Mapping):
                converted = {}
                stack.append((iter(child.items()), converted, id(child)))
            else:
                converted = []
                stack.append((((None, item) for item in child), converted, id(child)))
        else:
            raise EncodeError("Cannot convert {} to a Bencode value".format(type(child).__name__),
                              type(child).__name__)

        if isinstance(target, dict):
            target[k] = converted
        else:
            target.append(converted)

    return root[0]


def nesting_depth(value: Value) -> int:
    """Return the number of nested containers in the value

        nesting_depth(1) = 0
        nesting_depth([1, {b'a': []}]) = 3
    """
    deepest = 0
    stack = [(value, 0)]
    while stack:
        v, depth = stack.pop()
        if isinstance(v, dict):
            children = v.values()
        elif isinstance(v, list):
            children = v
        else:
            continue
        depth += 1
        deepest = max(deepest, depth)
        stack.extend((child, depth) for child in children)
    return deepest
