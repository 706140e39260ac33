import enum
import io
import unittest
from dataclasses import dataclass, field
from typing import Dict, List

from dotline.decoder import deserialize
from dotline.encoder import build_tree, flatten, serialize, serialize_to
from dotline.exceptions import InvalidSegmentError, UnsupportedConstructError
from dotline.schema import MapOf, Str, Struct
from dotline.tree import TreeBuilder
from dotline.values import Keyed, Scalar, Sequence, Variant


@dataclass
class Converter:
    version: int


@dataclass
class Property:
    version: int


@dataclass
class A3daMetadata:
    converter: Converter
    file_name: str
    property: Property


@dataclass
class A3daFile:
    metadata: A3daMetadata = field(metadata={"rename": "_"})


@dataclass
class Empty:
    pass


@dataclass
class Tags:
    name: str
    tags: Dict[str, int]
    extra: Empty


@dataclass
class Items:
    items: List[Empty]


class Color(enum.Enum):
    RED = "r"
    GREEN = "g"
    BLUE = "b"


class TestSerialize(unittest.TestCase):

    def test_sequence(self):
        """Tests that a sequence writes its elements by index followed by its length."""
        self.assertEqual(serialize([39.39, 420.69]), "0=39.39\n1=420.69\nlength=2\n")

    def test_nested_struct_with_rename(self):
        """Tests the exact output for nested dataclasses with a renamed field."""
        a3da = A3daFile(A3daMetadata(
            converter=Converter(20050823),
            file_name="CAMPV001_BASE.a3da",
            property=Property(20050706),
        ))
        expected = (
            "_.converter.version=20050823\n"
            "_.file_name=CAMPV001_BASE.a3da\n"
            "_.property.version=20050706\n"
        )
        self.assertEqual(serialize(a3da), expected)

    def test_order_is_preserved(self):
        """Tests that lines follow the order fields were visited, not sorted order."""
        data = {"z": 1, "a": {"y": 2, "b": 3}, "m": [4]}
        self.assertEqual(serialize(data), "z=1\na.y=2\na.b=3\nm.0=4\nm.length=1\n")

    def test_nested_sequences(self):
        data = {"grid": [[1, 2], []]}
        expected = (
            "grid.0.0=1\n"
            "grid.0.1=2\n"
            "grid.0.length=2\n"
            "grid.1.length=0\n"
            "grid.length=2\n"
        )
        self.assertEqual(serialize(data), expected)

    def test_empty_structures(self):
        """Tests that empty structures produce an empty document, except a sequence's length."""
        self.assertEqual(serialize({}), "")
        self.assertEqual(serialize([]), "length=0\n")
        self.assertEqual(flatten(TreeBuilder().build()), [])

    def test_empty_struct_field_is_omitted(self):
        """Tests that an empty struct field writes nothing and decodes back to its empty value."""
        holder = Tags(name="x", tags={}, extra=Empty())
        text = serialize(holder)
        self.assertEqual(text, "name=x\n")
        self.assertEqual(deserialize(text, Struct.from_dataclass(Tags)), holder)
        self.assertEqual(serialize({"v": Variant(0, {"inner": {}})}), "v.type=0\n")

    def test_empty_entries_that_cannot_be_read_back(self):
        """Tests that empty map entries and sequence elements fail instead of vanishing."""
        for bad in ({"a": {}}, {"a": {"b": {}}}, Items([Empty(), Empty()]), [{}], {"m": {"k": Empty()}}):
            with self.subTest(bad=bad):
                with self.assertRaises(UnsupportedConstructError):
                    serialize(bad)

    def test_primitives(self):
        data = {"flag": True, "off": False, "count": -7, "ratio": 0.5, "name": "a b=c", "color": Color.BLUE}
        expected = "flag=true\noff=false\ncount=-7\nratio=0.5\nname=a b=c\ncolor=2\n"
        self.assertEqual(serialize(data), expected)

    def test_mapping_keys(self):
        """Tests that scalar-like mapping keys become segments."""
        self.assertEqual(serialize({"m": {1: "a", 2: "b"}}), "m.1=a\nm.2=b\n")
        self.assertEqual(serialize({"m": {Color.GREEN: "g", False: "f"}}), "m.1=g\nm.false=f\n")

    def test_tagged_variant(self):
        """Tests that a variant writes its discriminant before its payload."""
        data = {"shape": Variant(1, {"w": 2.0, "h": 3.0})}
        self.assertEqual(serialize(data), "shape.type=1\nshape.w=2.0\nshape.h=3.0\n")

    def test_value_model_directly(self):
        value = Keyed([("a", Sequence([Scalar("x")])), ("b", Variant(0, [("v", Scalar("1"))]))])
        self.assertEqual(serialize(value), "a.0=x\na.length=1\nb.type=0\nb.v=1\n")

    def test_value_model_scalars_are_checked(self):
        for bad in (Scalar("x "), Scalar("a\nb")):
            with self.subTest(bad=bad):
                with self.assertRaises(UnsupportedConstructError):
                    serialize(Keyed([("a", bad)]))

    def test_line_boundaries_inside_values(self):
        """Tests that characters Python treats as line breaks round-trip inside a value."""
        data = {"a": "x\x0cy", "b": "p\u2028q", "c": "\x1ez"}
        text = serialize(data)
        self.assertEqual(text, "a=x\x0cy\nb=p\u2028q\nc=\x1ez\n")
        self.assertEqual(deserialize(text, MapOf(Str())), data)

    def test_serialize_to_stream(self):
        stream = io.StringIO()
        serialize_to({"a": [1]}, stream)
        self.assertEqual(stream.getvalue(), "a.0=1\na.length=1\n")

    def test_unsupported_values(self):
        """Tests that values without a representation fail instead of being dropped."""
        for bad in ({"a": None}, {"a": b"raw"}, {"a": object()}, {"a": "two\nlines"}, {"a": "x "}, {"a": "   "}, {"a": "tab\t"}):
            with self.subTest(bad=bad):
                with self.assertRaises(UnsupportedConstructError):
                    serialize(bad)

    def test_top_level_scalar_is_rejected(self):
        with self.assertRaises(UnsupportedConstructError):
            serialize(5)

    def test_invalid_keys(self):
        with self.assertRaises(InvalidSegmentError):
            serialize({"a.b": 1})
        with self.assertRaises(InvalidSegmentError):
            serialize({"": 1})
        with self.assertRaises(UnsupportedConstructError):
            serialize({(1, 2): 1})

    def test_variant_field_named_type(self):
        with self.assertRaises(UnsupportedConstructError):
            serialize({"v": Variant(0, {"type": 1})})

    def test_duplicate_keys_in_value_model(self):
        with self.assertRaises(UnsupportedConstructError):
            serialize(Keyed([("a", Scalar("1")), ("a", Scalar("2"))]))

    def test_failed_encode_writes_nothing(self):
        stream = io.StringIO()
        with self.assertRaises(UnsupportedConstructError):
            serialize_to({"a": 1, "b": None}, stream)
        self.assertEqual(stream.getvalue(), "")


class TestBuildTree(unittest.TestCase):

    def test_tree_shape(self):
        tree = build_tree({"a": {"b": 1}, "c": [2]})
        self.assertEqual([child.label for child in tree.children], ["a", "c"])
        self.assertEqual([leaf.path() for leaf in tree.iter_leaves()], [("a", "b"), ("c", "0"), ("c", "length")])
        self.assertEqual([leaf.payload for leaf in tree.iter_leaves()], ["1", "2", "1"])


if __name__ == '__main__':
    unittest.main()
