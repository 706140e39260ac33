import unittest

from dotline.decoder import deserialize
from dotline.encoder import flatten
from dotline.exceptions import MalformedLineError, MergeConflictError, ShapeMismatchError
from dotline.merge import merge_documents, merge_trees, read_tree
from dotline.schema import Int, Seq, Struct


class TestReadTree(unittest.TestCase):

    def test_flattening_reproduces_document(self):
        lines = ["a.b=1", "a.c=2", "d.0=x", "d.length=1"]
        tree = read_tree("\n".join(lines) + "\n")
        self.assertEqual(flatten(tree), lines)
        self.assertEqual([child.label for child in tree.children], ["a", "d"])

    def test_empty_document(self):
        self.assertEqual(read_tree("").children, [])

    def test_conflicting_entries(self):
        """Tests that duplicate paths and value/group clashes are rejected."""
        for text in ("a=1\na=2\n", "a=1\na.b=2\n", "a.b=2\na=1\n"):
            with self.subTest(text=text):
                with self.assertRaises(ShapeMismatchError):
                    read_tree(text)

    def test_malformed_line(self):
        with self.assertRaises(MalformedLineError):
            read_tree("a=1\nnope\n")


class TestMerge(unittest.TestCase):

    def test_merge_documents(self):
        """Tests that the primary document wins and secondary-only entries are appended."""
        primary = "x.a=1\nx.b=2\n"
        secondary = "x.b=9\nx.c=3\ny=4\n"
        self.assertEqual(merge_documents(primary, secondary), "x.a=1\nx.b=2\nx.c=3\ny=4\n")

    def test_merge_with_empty_side(self):
        self.assertEqual(merge_documents("", "a=1\n"), "a=1\n")
        self.assertEqual(merge_documents("a=1\n", ""), "a=1\n")
        self.assertEqual(merge_documents("", ""), "")

    def test_deep_merge(self):
        primary = "_.converter.version=2\n"
        secondary = "_.converter.version=1\n_.converter.name=old\n_.file_name=f.a3da\n"
        expected = "_.converter.version=2\n_.converter.name=old\n_.file_name=f.a3da\n"
        self.assertEqual(merge_documents(primary, secondary), expected)

    def test_leaf_and_group_conflict(self):
        """Tests that a value on one side and nested fields on the other cannot be merged."""
        with self.assertRaises(MergeConflictError) as ctx:
            merge_documents("x.y=1\n", "x.y.z=2\n")
        self.assertEqual(ctx.exception.path, "x.y")
        with self.assertRaises(MergeConflictError):
            merge_documents("x.y.z=2\n", "x.y=1\n")

    def test_merged_sequences_are_renumbered(self):
        """Tests that merging two sequences yields a sequence the decoder accepts."""
        merged = merge_documents("xs.0=1\nxs.length=1\n", "xs.0=9\nxs.1=2\nxs.length=2\n")
        self.assertEqual(merged, "xs.0=1\nxs.1=2\nxs.length=2\n")
        self.assertEqual(deserialize(merged, Struct({"xs": Seq(Int())})), {"xs": [1, 2]})

    def test_shorter_secondary_sequence(self):
        merged = merge_documents("0.a=1\n1.a=2\nlength=2\n", "0.a=5\n0.b=6\nlength=1\n")
        self.assertEqual(merged, "0.a=1\n0.b=6\n1.a=2\nlength=2\n")

    def test_field_named_length_is_not_a_sequence(self):
        merged = merge_documents("x.length=5\nx.name=a\n", "x.width=2\n")
        self.assertEqual(merged, "x.length=5\nx.name=a\nx.width=2\n")

    def test_inputs_are_not_modified(self):
        primary = read_tree("a.b=1\n")
        secondary = read_tree("a.c=2\n")
        merged = merge_trees(primary, secondary)
        self.assertEqual(flatten(merged), ["a.b=1", "a.c=2"])
        self.assertEqual(flatten(primary), ["a.b=1"])
        self.assertEqual(flatten(secondary), ["a.c=2"])


if __name__ == '__main__':
    unittest.main()
