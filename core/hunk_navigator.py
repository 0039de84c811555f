# core/hunk_navigator.py
"""
Next/previous navigation between change regions.

Hunks are positions in the modified pane (rightLines). Runs of added lines
start a hunk where they start; removal runs, which have no lines of their own
on the right, are anchored at the same index in the modified pane, clamped to
its last line. Jumping scrolls the modified pane only: the scroll synchroniser
brings the original pane into alignment.
"""

import logging
from typing import Callable, List, Optional, Sequence

from .frame_scheduler import FrameScheduler
from .models import DiffLine, LineKind

logger: logging.Logger = logging.getLogger(__name__)


def _runStarts(lines: Sequence[DiffLine], kind: LineKind) -> List[int]:
	starts: List[int] = []
	inRun = False
	for idx, line in enumerate(lines):
		if line.kind == kind:
			if not inRun:
				starts.append(idx)
				inRun = True
		else:
			inRun = False
	return starts


def computeHunks(leftLines: Sequence[DiffLine], rightLines: Sequence[DiffLine]) -> List[int]:
	"""
	Derives the ascending, de-duplicated hunk start positions.

	Args:
		leftLines (Sequence[DiffLine]): Original pane lines.
		rightLines (Sequence[DiffLine]): Modified pane lines.

	Returns:
		List[int]: Indices into rightLines.
	"""
	hunks: List[int] = _runStarts(rightLines, LineKind.ADDED)
	lastRight = max(len(rightLines) - 1, 0)
	for leftIdx in _runStarts(leftLines, LineKind.REMOVED):
		rightIdx = min(leftIdx, lastRight)
		if rightIdx not in hunks:
			hunks.append(rightIdx)
	return sorted(hunks)


class HunkNavigator:
	"""
	Tracks the current hunk and scrolls the modified pane to it.

	Args:
		scrollModifiedTo (Callable[[float], None]): Sets the modified pane's vertical offset.
		lineHeight (float): Height of one line in px.
		onCurrentChanged (Optional[Callable[[int, int], None]]): Called with
			(currentHunkIndex, hunkCount) whenever either changes.
	"""

	def __init__(
		self: 'HunkNavigator',
		scrollModifiedTo: Callable[[float], None],
		lineHeight: float,
		onCurrentChanged: Optional[Callable[[int, int], None]] = None
	) -> None:
		self._scrollModifiedTo = scrollModifiedTo
		self._lineHeight: float = lineHeight
		self._onCurrentChanged = onCurrentChanged
		self._hunks: List[int] = []
		self._currentIndex: int = -1
		self._mountHandle: Optional[int] = None
		self._scheduler: Optional[FrameScheduler] = None

	@property
	def hunks(self: 'HunkNavigator') -> List[int]:
		return list(self._hunks)

	@property
	def hunkCount(self: 'HunkNavigator') -> int:
		return len(self._hunks)

	@property
	def currentHunkIndex(self: 'HunkNavigator') -> int:
		return self._currentIndex

	@property
	def canGoPrev(self: 'HunkNavigator') -> bool:
		return self._currentIndex > 0

	@property
	def canGoNext(self: 'HunkNavigator') -> bool:
		return 0 <= self._currentIndex < len(self._hunks) - 1

	def setLineHeight(self: 'HunkNavigator', lineHeight: float) -> None:
		if lineHeight > 0:
			self._lineHeight = lineHeight

	def setLines(self: 'HunkNavigator', leftLines: Sequence[DiffLine], rightLines: Sequence[DiffLine]) -> None:
		"""Recomputes the hunk list for a new diff and resets the current index."""
		self._hunks = computeHunks(leftLines, rightLines)
		self._currentIndex = 0 if self._hunks else -1
		logger.debug(f"Hunk list recomputed: {self._hunks}")
		self._notify()

	def goTo(self: 'HunkNavigator', index: int) -> bool:
		"""
		Scrolls the modified pane to hunk `index`.

		Returns:
			bool: False (and no scrolling) if index is out of range.
		"""
		if index < 0 or index >= len(self._hunks):
			return False
		self._scrollModifiedTo(self._hunks[index] * self._lineHeight)
		self._currentIndex = index
		self._notify()
		return True

	def next(self: 'HunkNavigator') -> bool:
		if not self._hunks:
			return False
		return self.goTo(min(self._currentIndex + 1, len(self._hunks) - 1))

	def prev(self: 'HunkNavigator') -> bool:
		if not self._hunks:
			return False
		return self.goTo(max(self._currentIndex - 1, 0))

	def scheduleInitialJump(self: 'HunkNavigator', scheduler: FrameScheduler, afterJump: Optional[Callable[[], None]] = None) -> None:
		"""
		On mount: jump to the first hunk one frame later, once layout has settled,
		then run afterJump (the viewer's initial connector paint). No-op without hunks.
		"""
		self.cancelInitialJump()
		if not self._hunks:
			return
		self._scheduler = scheduler

		def jump() -> None:
			self._mountHandle = None
			self.goTo(0)
			if afterJump is not None:
				afterJump()

		self._mountHandle = scheduler.requestFrame(jump)

	def cancelInitialJump(self: 'HunkNavigator') -> None:
		if self._scheduler is not None and self._mountHandle is not None:
			self._scheduler.cancelFrame(self._mountHandle)
		self._mountHandle = None

	def _notify(self: 'HunkNavigator') -> None:
		if self._onCurrentChanged is not None:
			self._onCurrentChanged(self._currentIndex, len(self._hunks))
