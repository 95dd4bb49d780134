import time
import unittest

from parallelid import ManualClock


class TestManualClock(unittest.TestCase):

    def test_defaults_to_current_time(self):
        before = int(time.time())
        clock = ManualClock()
        self.assertGreaterEqual(clock(), before)
        self.assertLessEqual(clock(), int(time.time()))
        self.assertIsInstance(ManualClock(None)(), int)

    def test_set_and_advance(self):
        clock = ManualClock(100)
        self.assertEqual(clock.advance(5), 105)
        clock.set(50)
        self.assertEqual(clock(), 50)
        with self.assertRaises(ValueError):
            clock.advance(-1)


if __name__ == "__main__":
    unittest.main()
