import enum
import sys
import unittest
from collections import OrderedDict

from bencodec.encoder import Encoder, encode
from bencodec.errors import EncodeError


class Color(enum.IntEnum):
    RED = 1


class TestEncoder(unittest.TestCase):
    def test_scalars(self):
        cases = [
            (0, b"i0e"),
            (-42, b"i-42e"),
            (2 ** 70, b"i1180591620717411303424e"),
            (Color.RED, b"i1e"),
            (b"", b"0:"),
            (bytearray(b"abc"), b"3:abc"),
            (memoryview(b"abc"), b"3:abc"),
            # Length in bytes, not characters
            ("été", b"5:\xc3\xa9t\xc3\xa9"),
        ]
        for value, expected in cases:
            with self.subTest(value=value):
                self.assertEqual(encode(value), expected)

    def test_containers(self):
        self.assertEqual(encode((1, (b"a", []))), b"li1el1:aleee")
        self.assertEqual(encode(OrderedDict([(b"b", 1), (b"a", 2)])), b"d1:bi1e1:ai2ee")
        self.assertEqual(encode({b"k": {}}), b"d1:kdee")

    def test_insertion_order(self):
        self.assertEqual(encode({"b": 1, "a": 2}), b"d1:bi1e1:ai2ee")

    def test_sort_keys(self):
        value = {"b": 1, "a": {"z": 0, "Z": 1}}
        self.assertEqual(encode(value, sort_keys=True), b"d1:ad1:Zi1e1:zi0ee1:bi1ee")
        self.assertEqual(Encoder(sort_keys=True).encode(value), encode(value, sort_keys=True))

    def test_sort_keys_duplicates(self):
        with self.assertRaises(EncodeError):
            encode({"a": 1, b"a": 2}, sort_keys=True)

    def test_input_not_modified(self):
        value = {"b": [1, 2], "a": {"c": b"d"}}
        encode(value, sort_keys=True)
        self.assertEqual(value, {"b": [1, 2], "a": {"c": b"d"}})
        self.assertEqual(list(value), ["b", "a"])

    def test_unencodable(self):
        cases = [
            (1.5, "float"),
            (None, "NoneType"),
            (False, "bool"),
            ([1, [2, [3.0]]], "float"),
            ({b"key": {b"nested": None}}, "NoneType"),
            ({(1, 2): b"tuple key"}, "tuple"),
            ({1: b"int key"}, "int"),
        ]
        for value, type_name in cases:
            with self.subTest(value=value):
                with self.assertRaises(EncodeError) as cm:
                    encode(value)
                self.assertEqual(cm.exception.type_name, type_name)
                self.assertIn(type_name, str(cm.exception))

    @unittest.skipUnless(hasattr(sys, "get_int_max_str_digits"),
                         "no integer string conversion limit")
    def test_too_many_digits(self):
        limit = sys.get_int_max_str_digits()
        if limit == 0:
            self.skipTest("integer string conversion limit disabled")
        for value in [10 ** limit, [1, {b"n": -10 ** limit}]]:
            with self.subTest(digits=limit + 1):
                with self.assertRaises(EncodeError) as cm:
                    encode(value)
                self.assertEqual(cm.exception.type_name, "int")
                self.assertIn("too large", str(cm.exception))

    def test_stream_not_encodable(self):
        with self.assertRaises(EncodeError):
            encode(sys.stderr)

    def test_circular_reference(self):
        l = [1]
        l.append(l)
        with self.assertRaises(EncodeError):
            encode(l)

        d = {}
        d[b"self"] = [d]
        with self.assertRaises(EncodeError):
            encode(d)

    def test_shared_reference(self):
        """The same object may appear several times in a tree as long as there is no cycle"""
        shared = [1]
        self.assertEqual(encode([shared, shared]), b"lli1eeli1eee")


if __name__ == '__main__':
    unittest.main()
