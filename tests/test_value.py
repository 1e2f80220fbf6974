import io
import unittest
from collections import OrderedDict

from bencodec.errors import EncodeError
from bencodec.value import nesting_depth, to_value


class TestToValue(unittest.TestCase):
    def test_to_value(self):
        """Check to_value() output against a few handmade cases"""
        cases = [
            (42, 42),
            ("text", b"text"),
            (bytearray(b"\x00\x01"), b"\x00\x01"),
            ((1, "a"), [1, b"a"]),
            ({"announce": "http://example.com", "info": {"length": 1, "files": ("a", "b")}},
             {b"announce": b"http://example.com", b"info": {b"length": 1, b"files": [b"a", b"b"]}}),
            (OrderedDict([("z", 1), ("a", 2)]), {b"z": 1, b"a": 2}),
        ]
        for obj, expected in cases:
            with self.subTest(obj=obj):
                value = to_value(obj)
                self.assertEqual(value, expected)
                self.assertEqual(type(value), type(expected))

    def test_to_value_keeps_order(self):
        self.assertEqual(list(to_value({"z": 1, "a": 2})), [b"z", b"a"])

    def test_to_value_deep(self):
        depth = 100000
        obj = []
        for _ in range(depth - 1):
            obj = (obj,)
        value = to_value(obj)
        self.assertEqual(nesting_depth(value), depth)
        for _ in range(depth - 1):
            self.assertIsInstance(value, list)
            value = value[0]
        self.assertEqual(value, [])

    def test_to_value_shared_reference(self):
        shared = ["a"]
        self.assertEqual(to_value({"x": shared, "y": shared}), {b"x": [b"a"], b"y": [b"a"]})

    def test_to_value_failure(self):
        l = [1]
        l.append(l)
        d = {}
        d["self"] = [d]
        failure_test_cases = [
            (l, "list"),
            (d, "dict"),
            (1.0, "float"),
            (None, "NoneType"),
            (True, "bool"),
            ({"a": [None]}, "NoneType"),
            ({1: "a"}, "int"),
            (io.BytesIO(), "BytesIO"),
        ]
        for obj, type_name in failure_test_cases:
            with self.subTest(obj=obj):
                with self.assertRaises(EncodeError) as cm:
                    to_value(obj)
                self.assertEqual(cm.exception.type_name, type_name)


class TestNestingDepth(unittest.TestCase):
    def test_nesting_depth(self):
        cases = [
            (1, 0),
            (b"spam", 0),
            ([], 1),
            ({}, 1),
            ([1, [2]], 2),
            ([1, {b"a": []}], 3),
            ({b"a": [], b"b": [[{}]]}, 4),
        ]
        for value, depth in cases:
            with self.subTest(value=value):
                self.assertEqual(nesting_depth(value), depth)


if __name__ == '__main__':
    unittest.main()
