# --- START: tests/test_frame_scheduler.py ---
import unittest
from typing import List

import sys
if '.' not in sys.path:
	sys.path.append('.') # Add project root if needed

from core.frame_scheduler import ManualFrameScheduler


class TestManualFrameScheduler(unittest.TestCase):

	def setUp(self: 'TestManualFrameScheduler') -> None:
		self.scheduler = ManualFrameScheduler()
		self.calls: List[str] = []

	def test_runsInSchedulingOrder(self: 'TestManualFrameScheduler') -> None:
		self.scheduler.requestFrame(lambda: self.calls.append("a"))
		self.scheduler.requestFrame(lambda: self.calls.append("b"))
		self.assertEqual(self.scheduler.flush(), 2)
		self.assertEqual(self.calls, ["a", "b"])
		self.assertEqual(self.scheduler.pendingCount, 0)

	def test_cancelled(self: 'TestManualFrameScheduler') -> None:
		handle = self.scheduler.requestFrame(lambda: self.calls.append("a"))
		self.scheduler.cancelFrame(handle)
		self.scheduler.cancelFrame(handle)
		self.scheduler.cancelFrame(None)
		self.assertEqual(self.scheduler.flush(), 0)
		self.assertEqual(self.calls, [])

	def test_cancelledDuringFlushIsSkipped(self: 'TestManualFrameScheduler') -> None:
		second: List[int] = []
		self.scheduler.requestFrame(lambda: self.scheduler.cancelFrame(second[0]))
		second.append(self.scheduler.requestFrame(lambda: self.calls.append("b")))
		self.assertEqual(self.scheduler.flush(), 1)
		self.assertEqual(self.calls, [])

	def test_scheduledDuringFlushWaitsForNextFlush(self: 'TestManualFrameScheduler') -> None:
		self.scheduler.requestFrame(lambda: self.scheduler.requestFrame(lambda: self.calls.append("later")))
		self.assertEqual(self.scheduler.flush(), 1)
		self.assertEqual(self.calls, [])
		self.assertEqual(self.scheduler.flush(), 1)
		self.assertEqual(self.calls, ["later"])

	def test_handlesAreUnique(self: 'TestManualFrameScheduler') -> None:
		first = self.scheduler.requestFrame(lambda: None)
		self.scheduler.flush()
		second = self.scheduler.requestFrame(lambda: None)
		self.assertNotEqual(first, second)


if __name__ == '__main__':
	unittest.main()
# --- END: tests/test_frame_scheduler.py ---
