"""
Ordered string set behaviour.

Values keep the position they were first added at, re-adding is a
no-op, and enumeration is in first-insertion order.
"""

import unittest

from parallelid import OrderedStringSet


class TestOrderedStringSet(unittest.TestCase):

    def setUp(self):
        self.set = OrderedStringSet()

    def test_add_new_and_existing_items(self):
        self.assertEqual(len(self.set), 0)
        self.assertFalse(self.set.contains("hi"))
        self.assertEqual(self.set.index_of("not there"), (False, 0))

        self.assertEqual(self.set.add("one"), 0)
        self.assertEqual(len(self.set), 1)
        self.assertTrue(self.set.contains("one"))

        self.assertEqual(self.set.add("two"), 1)
        self.assertEqual(len(self.set), 2)

        # existing string keeps its index
        self.assertEqual(self.set.add("one"), 0)

        self.assertEqual(self.set.index_of("one"), (True, 0))
        self.assertEqual(self.set.at(0), "one")
        self.assertEqual(self.set.index_of("two"), (True, 1))
        self.assertEqual(self.set.at(1), "two")

    def test_values_are_deduplicated_in_first_seen_order(self):
        for value in ["one", "two", "one", "two", "three"]:
            self.set.add(value)
        self.assertEqual(self.set.values(), ["one", "two", "three"])

    def test_remove_keeps_order_and_reindexes(self):
        for value in ["a", "b", "c", "d"]:
            self.set.add(value)

        self.assertTrue(self.set.remove("b"))
        self.assertFalse(self.set.remove("b"))

        self.assertEqual(self.set.values(), ["a", "c", "d"])
        self.assertEqual(self.set.index_of("c"), (True, 1))
        self.assertEqual(self.set.index_of("d"), (True, 2))
        self.assertEqual(self.set.at(2), "d")

    def test_at_out_of_range(self):
        self.set.add("only")
        with self.assertRaises(IndexError):
            self.set.at(1)
        with self.assertRaises(IndexError):
            self.set.at(-1)

    def test_clear(self):
        self.set.add("one")
        self.set.add("two")
        self.set.clear()
        self.assertEqual(len(self.set), 0)
        self.assertEqual(self.set.values(), [])
        self.assertEqual(self.set.add("two"), 0)


if __name__ == "__main__":
    unittest.main()
