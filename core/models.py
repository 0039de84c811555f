# core/models.py
"""
Immutable data structures produced by the diff engine and shared, read-only,
by the scroll synchroniser, the connector painter and the hunk navigator.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Tuple


class LineKind(str, Enum):
	"""Classification of a single line in one of the two panes."""
	UNCHANGED = "unchanged"
	ADDED = "added"
	REMOVED = "removed"


class BlockKind(str, Enum):
	"""Classification of a change block linking the two panes."""
	MODIFIED = "modified"
	ADDED = "added"
	REMOVED = "removed"


class Boundary(str, Enum):
	"""Marks the first/last line of a change block side within a pane."""
	TOP = "top"
	BOTTOM = "bottom"
	BOTH = "both"


@dataclass(frozen=True)
class DiffLine:
	"""
	One line of either pane.

	Attributes:
		num (int): 1-based line number in the document this line came from.
		text (str): Raw line text, without the line terminator.
		markup (str): HTML-safe highlighted markup for the text.
		kind (LineKind): unchanged, added or removed.
	"""
	num: int
	text: str
	markup: str
	kind: LineKind


@dataclass(frozen=True)
class AlignmentPoint:
	"""A checkpoint pairing a position in leftLines with one in rightLines."""
	leftIndex: int
	rightIndex: int

	def sourceAndTarget(self: 'AlignmentPoint', sourceIsLeft: bool) -> Tuple[int, int]:
		"""Returns (sourceCoordinate, targetCoordinate) for the given scroll direction."""
		if sourceIsLeft:
			return self.leftIndex, self.rightIndex
		return self.rightIndex, self.leftIndex


@dataclass(frozen=True)
class ChangeBlock:
	"""
	A maximal run of non-unchanged lines, with its extent on both sides.
	A side with a count of zero still has a start index: the position at
	which the change sits in that pane.
	"""
	leftStart: int
	leftCount: int
	rightStart: int
	rightCount: int
	kind: BlockKind


@dataclass(frozen=True)
class DiffStats:
	"""Added/removed line totals shown in the viewer header."""
	added: int = 0
	removed: int = 0


@dataclass(frozen=True)
class DiffResult:
	"""
	Everything derived from one (original, modified, language) triple.
	Recomputed from scratch when any of the three changes.
	"""
	leftLines: Tuple[DiffLine, ...] = ()
	rightLines: Tuple[DiffLine, ...] = ()
	alignmentPoints: Tuple[AlignmentPoint, ...] = (AlignmentPoint(0, 0),)
	changeBlocks: Tuple[ChangeBlock, ...] = ()
	stats: DiffStats = field(default_factory=DiffStats)

	@property
	def hasChanges(self: 'DiffResult') -> bool:
		return bool(self.changeBlocks)

	def boundaries(self: 'DiffResult') -> Tuple[Dict[int, Boundary], Dict[int, Boundary]]:
		"""
		Computes hunk boundary markers for both panes.

		Returns:
			Tuple[Dict[int, Boundary], Dict[int, Boundary]]: (left, right) maps from
			line index to the boundary marker drawn on that line.
		"""
		return _sideBoundaries(self.changeBlocks, True), _sideBoundaries(self.changeBlocks, False)


def _sideBoundaries(blocks: Tuple[ChangeBlock, ...], leftSide: bool) -> Dict[int, Boundary]:
	markers: Dict[int, Boundary] = {}
	for block in blocks:
		start, count = (block.leftStart, block.leftCount) if leftSide else (block.rightStart, block.rightCount)
		if count <= 0:
			continue
		topIdx: int = start
		bottomIdx: int = start + count - 1
		if topIdx == bottomIdx:
			markers[topIdx] = Boundary.BOTH
			continue
		markers[topIdx] = Boundary.BOTH if topIdx in markers else Boundary.TOP
		markers[bottomIdx] = Boundary.BOTH if bottomIdx in markers else Boundary.BOTTOM
	return markers


def linesOfKind(lines: List[DiffLine], kind: LineKind) -> List[DiffLine]:
	"""Filters a pane's lines down to one classification."""
	return [line for line in lines if line.kind == kind]
