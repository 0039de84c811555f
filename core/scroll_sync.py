# core/scroll_sync.py
"""
Scroll synchronisation between the original (left) and modified (right) panes.

The panes have different line counts, so vertical offsets are mapped through
the alignment checkpoints produced by the diff engine: the source offset is
located inside a checkpoint segment and linearly interpolated onto the
target's side of the same segment. Horizontal offsets are mirrored 1:1.

Writing the target pane's offset makes it emit its own scroll event. The
synchroniser is a two-state machine, idle or driving(source): while one pane
drives, events from the other pane are ignored, and the machine returns to
idle on the frame after the write, once the echo events have been delivered.
"""

import logging
from enum import Enum
from typing import Callable, Optional, Sequence

from .frame_scheduler import FrameScheduler
from .models import AlignmentPoint

logger: logging.Logger = logging.getLogger(__name__)


class PaneSide(str, Enum):
	LEFT = "left"
	RIGHT = "right"

	@property
	def other(self: 'PaneSide') -> 'PaneSide':
		return PaneSide.RIGHT if self is PaneSide.LEFT else PaneSide.LEFT


def calculateTargetScroll(
	sourceScrollTop: float,
	sourceScrollableHeight: float,
	targetScrollableHeight: float,
	alignmentPoints: Sequence[AlignmentPoint],
	lineHeight: float,
	sourceIsLeft: bool
) -> float:
	"""
	Maps a vertical scroll offset from one pane onto the other.

	Args:
		sourceScrollTop (float): Current offset of the pane that scrolled, in px.
		sourceScrollableHeight (float): Source content height minus viewport height.
		targetScrollableHeight (float): Same for the pane being driven.
		alignmentPoints (Sequence[AlignmentPoint]): Checkpoints from the diff engine.
		lineHeight (float): Height of one line in px, identical in both panes.
		sourceIsLeft (bool): True when the original pane is the source.

	Returns:
		float: The offset to apply to the target pane. Never raises; offsets
		outside every checkpoint segment map proportionally.
	"""
	if sourceScrollableHeight <= 0 or targetScrollableHeight <= 0 or lineHeight <= 0:
		return 0.0

	sourceLine: float = sourceScrollTop / lineHeight

	for prev, nxt in zip(alignmentPoints, alignmentPoints[1:]):
		prevSource, prevTarget = prev.sourceAndTarget(sourceIsLeft)
		nextSource, nextTarget = nxt.sourceAndTarget(sourceIsLeft)
		if prevSource <= sourceLine < nextSource:
			span = nextSource - prevSource
			if span == 0:
				return prevTarget * lineHeight
			t = (sourceLine - prevSource) / span
			return (prevTarget + t * (nextTarget - prevTarget)) * lineHeight

	ratio = sourceScrollTop / max(1.0, sourceScrollableHeight - 1)
	return ratio * targetScrollableHeight


class ScrollPane:
	"""
	What the synchroniser needs from a pane. The GUI adapts a Qt scroll area
	to this interface (gui.diff_viewer.QtScrollPane).
	"""

	def scrollTop(self: 'ScrollPane') -> float:
		raise NotImplementedError

	def setScrollTop(self: 'ScrollPane', value: float) -> None:
		raise NotImplementedError

	def scrollLeft(self: 'ScrollPane') -> float:
		raise NotImplementedError

	def setScrollLeft(self: 'ScrollPane', value: float) -> None:
		raise NotImplementedError

	def scrollableHeight(self: 'ScrollPane') -> float:
		raise NotImplementedError


class ScrollSynchronizer:
	"""
	Mediates scroll events between two panes.

	Call onScroll(side) from each pane's scroll notification. onSynchronized, if
	given, runs after every applied pass (the viewer uses it to schedule a
	connector repaint).
	"""

	def __init__(
		self: 'ScrollSynchronizer',
		left: ScrollPane,
		right: ScrollPane,
		scheduler: FrameScheduler,
		lineHeight: float,
		alignmentPoints: Sequence[AlignmentPoint] = (AlignmentPoint(0, 0),),
		onSynchronized: Optional[Callable[[], None]] = None
	) -> None:
		self._panes = {PaneSide.LEFT: left, PaneSide.RIGHT: right}
		self._scheduler: FrameScheduler = scheduler
		self._lineHeight: float = lineHeight
		self._alignmentPoints: Sequence[AlignmentPoint] = alignmentPoints
		self._onSynchronized: Optional[Callable[[], None]] = onSynchronized
		self._driver: Optional[PaneSide] = None
		self._releaseHandle: Optional[int] = None

	@property
	def driver(self: 'ScrollSynchronizer') -> Optional[PaneSide]:
		"""The pane driving the current pass, or None when idle."""
		return self._driver

	@property
	def isIdle(self: 'ScrollSynchronizer') -> bool:
		return self._driver is None

	def setAlignment(self: 'ScrollSynchronizer', alignmentPoints: Sequence[AlignmentPoint]) -> None:
		self._alignmentPoints = alignmentPoints

	def setLineHeight(self: 'ScrollSynchronizer', lineHeight: float) -> None:
		if lineHeight > 0:
			self._lineHeight = lineHeight

	def onScroll(self: 'ScrollSynchronizer', source: PaneSide) -> bool:
		"""
		Handles a scroll event from one pane.

		Args:
			source (PaneSide): The pane that scrolled.

		Returns:
			bool: True if the other pane was updated, False if the event was an
			echo of a pass driven by the other pane and was ignored.
		"""
		if self._driver is not None and self._driver is not source:
			return False
		self._driver = source
		self._scheduler.cancelFrame(self._releaseHandle)
		self._releaseHandle = None

		sourcePane = self._panes[source]
		targetPane = self._panes[source.other]

		targetPane.setScrollLeft(sourcePane.scrollLeft())
		targetTop = calculateTargetScroll(
			sourcePane.scrollTop(),
			sourcePane.scrollableHeight(),
			targetPane.scrollableHeight(),
			self._alignmentPoints,
			self._lineHeight,
			source is PaneSide.LEFT,
		)
		targetPane.setScrollTop(targetTop)

		if self._onSynchronized is not None:
			self._onSynchronized()

		self._releaseHandle = self._scheduler.requestFrame(self._release)
		return True

	def _release(self: 'ScrollSynchronizer') -> None:
		self._releaseHandle = None
		self._driver = None

	def dispose(self: 'ScrollSynchronizer') -> None:
		"""Cancels the pending release and returns to idle."""
		self._scheduler.cancelFrame(self._releaseHandle)
		self._releaseHandle = None
		self._driver = None
