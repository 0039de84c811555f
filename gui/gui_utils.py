# gui/gui_utils.py
"""
Qt helpers shared by the GUI modules: the logging handler that feeds the
"Application Log" tab, and the QTimer-backed frame scheduler used for
deferred scroll-lock release and connector repaints.
"""

import logging
import sys
from typing import Callable, Dict, Optional

from PySide6.QtCore import QObject, QTimer

from core.frame_scheduler import FrameCallback, FrameScheduler


class QtLogHandler(logging.Handler, QObject):
	"""
	Logging handler that passes formatted records to a Qt signal's emit method,
	so records produced anywhere end up on the GUI thread.
	"""

	def __init__(self: 'QtLogHandler', signal_emitter: Optional[Callable[[str], None]] = None, parent: Optional[QObject] = None) -> None:
		"""
		Args:
			signal_emitter (Optional[Callable[[str], None]]): Usually some_signal.emit.
			parent (Optional[QObject]): Parent QObject.
		"""
		logging.Handler.__init__(self)
		QObject.__init__(self, parent)
		self._signal_emitter: Optional[Callable[[str], None]] = signal_emitter

	def emit(self: 'QtLogHandler', record: logging.LogRecord) -> None:
		if not self._signal_emitter:
			print(f"QtLogHandler: no signal emitter configured. Dropped record: {record.getMessage()}", file=sys.stderr)
			return
		try:
			self._signal_emitter(self.format(record))
		except Exception:
			self.handleError(record)


class QtFrameScheduler(FrameScheduler):
	"""
	Runs callbacks on the next turn of the Qt event loop via single-shot
	zero-interval timers. Each pending callback owns one QTimer so it can be
	cancelled individually.
	"""

	def __init__(self: 'QtFrameScheduler', parent: Optional[QObject] = None) -> None:
		self._parent: Optional[QObject] = parent
		self._timers: Dict[int, QTimer] = {}
		self._nextHandle: int = 1

	def requestFrame(self: 'QtFrameScheduler', callback: FrameCallback) -> int:
		handle = self._nextHandle
		self._nextHandle += 1
		timer = QTimer(self._parent)
		timer.setSingleShot(True)
		timer.setInterval(0)

		def fire() -> None:
			self._timers.pop(handle, None)
			timer.deleteLater()
			callback()

		timer.timeout.connect(fire)
		self._timers[handle] = timer
		timer.start()
		return handle

	def cancelFrame(self: 'QtFrameScheduler', handle: Optional[int]) -> None:
		if handle is None:
			return
		timer = self._timers.pop(handle, None)
		if timer is not None:
			timer.stop()
			timer.deleteLater()

	def cancelAll(self: 'QtFrameScheduler') -> None:
		for handle in list(self._timers):
			self.cancelFrame(handle)
