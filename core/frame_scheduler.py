# core/frame_scheduler.py
"""
Deferred "next frame" callbacks.

The scroll synchroniser and the connector painter defer work to the next
turn of the UI event loop. They depend only on this small contract so the
logic stays Qt-free and can be driven by a manual scheduler in tests; the
GUI supplies a QTimer-backed implementation (gui.gui_utils.QtFrameScheduler).
"""

from typing import Callable, Dict, Optional


FrameCallback = Callable[[], None]


class FrameScheduler:
	"""Interface: schedule a callback for the next frame, or cancel it."""

	def requestFrame(self: 'FrameScheduler', callback: FrameCallback) -> int:
		"""Schedules callback and returns a handle usable with cancelFrame."""
		raise NotImplementedError

	def cancelFrame(self: 'FrameScheduler', handle: Optional[int]) -> None:
		"""Cancels a pending callback. Unknown or already-run handles are ignored."""
		raise NotImplementedError


class ManualFrameScheduler(FrameScheduler):
	"""
	Scheduler that runs callbacks only when flush() is called.
	Used by tests and by headless callers that drive frames themselves.
	"""

	def __init__(self: 'ManualFrameScheduler') -> None:
		self._pending: Dict[int, FrameCallback] = {}
		self._nextHandle: int = 1

	def requestFrame(self: 'ManualFrameScheduler', callback: FrameCallback) -> int:
		handle = self._nextHandle
		self._nextHandle += 1
		self._pending[handle] = callback
		return handle

	def cancelFrame(self: 'ManualFrameScheduler', handle: Optional[int]) -> None:
		if handle is not None:
			self._pending.pop(handle, None)

	@property
	def pendingCount(self: 'ManualFrameScheduler') -> int:
		return len(self._pending)

	def flush(self: 'ManualFrameScheduler') -> int:
		"""
		Runs every callback pending at call time, in scheduling order.
		Callbacks scheduled while flushing wait for the next flush.

		Returns:
			int: Number of callbacks run.
		"""
		ran: int = 0
		for handle in sorted(self._pending):
			callback = self._pending.pop(handle, None)
			if callback is None:
				continue
			callback()
			ran += 1
		return ran
