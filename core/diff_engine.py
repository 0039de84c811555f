# core/diff_engine.py
"""
Line-level diff computation for the dual-pane view.

Builds a longest-common-subsequence table over the two documents (each line
is an opaque token compared by exact equality), backtracks it into an edit
script, and walks the script to produce the classified lines for both panes,
the alignment checkpoints used for scroll synchronisation, and the change
blocks painted in the connector gutter.

Backtracking tie-break: when a line does not match and both directions keep
the LCS length, the insertion is taken first. Because the script is built
from the end and then reversed, a change block therefore lists its
deletions before its insertions in document order. This is a fixed rule,
so identical inputs always yield identical blocks.
"""

import logging
from enum import Enum
from functools import lru_cache
from typing import List, Optional, Tuple

from .exceptions import DiffTooLargeError
from .highlighter import highlight
from .models import (
	AlignmentPoint, BlockKind, ChangeBlock, DiffLine, DiffResult, DiffStats, LineKind, linesOfKind
)

logger: logging.Logger = logging.getLogger(__name__)

# Budget for the O(m*n) table; above this computeDiff refuses to run
DEFAULT_MAX_DIFF_CELLS: int = 25_000_000

MARKDOWN_EXTENSIONS: Tuple[str, ...] = ('.md', '.mdx', '.markdown')


class EditOp(str, Enum):
	EQUAL = "equal"
	DELETE = "delete"
	INSERT = "insert"


# (op, originalIndex, modifiedIndex); the unused index is -1
EditStep = Tuple[EditOp, int, int]


def splitLines(content: Optional[str]) -> List[str]:
	"""
	Splits a document into lines on LF, CRLF or lone CR only. An empty document has
	no lines, and a trailing newline does not start an extra empty line.
	"""
	if not content:
		return []
	lines = content.replace('\r\n', '\n').replace('\r', '\n').split('\n')
	if lines[-1] == '':
		lines.pop()
	return lines


def isMarkdownFile(filename: Optional[str]) -> bool:
	if not filename or '.' not in filename:
		return False
	return filename[filename.rfind('.'):].lower() in MARKDOWN_EXTENSIONS


def buildLcsTable(original: List[str], modified: List[str]) -> List[List[int]]:
	"""
	Builds dp where dp[i][j] is the LCS length of original[:i] and modified[:j].
	"""
	m, n = len(original), len(modified)
	dp: List[List[int]] = [[0] * (n + 1) for _ in range(m + 1)]
	for i in range(1, m + 1):
		origLine = original[i - 1]
		row, prevRow = dp[i], dp[i - 1]
		for j in range(1, n + 1):
			if origLine == modified[j - 1]:
				row[j] = prevRow[j - 1] + 1
			else:
				row[j] = prevRow[j] if prevRow[j] >= row[j - 1] else row[j - 1]
	return dp


def backtrackEditScript(original: List[str], modified: List[str], dp: List[List[int]]) -> List[EditStep]:
	"""
	Walks dp from (m, n) back to (0, 0) and returns the edit script in
	original-to-modified order.
	"""
	steps: List[EditStep] = []
	i, j = len(original), len(modified)
	while i > 0 or j > 0:
		if i > 0 and j > 0 and original[i - 1] == modified[j - 1]:
			steps.append((EditOp.EQUAL, i - 1, j - 1))
			i -= 1
			j -= 1
		elif j > 0 and (i == 0 or dp[i][j - 1] >= dp[i - 1][j]):
			steps.append((EditOp.INSERT, -1, j - 1))
			j -= 1
		else:
			steps.append((EditOp.DELETE, i - 1, -1))
			i -= 1
	steps.reverse()
	return steps


class _PendingBlock:
	"""The change block currently being accumulated during the walk."""

	def __init__(self: '_PendingBlock') -> None:
		self.reset()

	def reset(self: '_PendingBlock') -> None:
		self.deleteStart: int = -1
		self.deleteCount: int = 0
		self.insertStart: int = -1
		self.insertCount: int = 0

	def flush(self: '_PendingBlock', leftLength: int, rightLength: int) -> Optional[ChangeBlock]:
		"""
		Closes the open runs into a ChangeBlock (None when nothing is open).
		An empty side is anchored at the pane's current length.
		"""
		if self.deleteCount == 0 and self.insertCount == 0:
			return None
		if self.deleteCount > 0 and self.insertCount > 0:
			kind = BlockKind.MODIFIED
		elif self.deleteCount > 0:
			kind = BlockKind.REMOVED
		else:
			kind = BlockKind.ADDED
		block = ChangeBlock(
			leftStart=self.deleteStart if self.deleteStart >= 0 else leftLength,
			leftCount=self.deleteCount,
			rightStart=self.insertStart if self.insertStart >= 0 else rightLength,
			rightCount=self.insertCount,
			kind=kind,
		)
		self.reset()
		return block


def computeDiffUncached(original: Optional[str], modified: Optional[str], language: Optional[str], maxCells: int = DEFAULT_MAX_DIFF_CELLS) -> DiffResult:
	"""
	Computes the full diff result for two documents.

	Args:
		original (Optional[str]): The original document (left pane).
		modified (Optional[str]): The modified document (right pane).
		language (Optional[str]): Grammar key handed to the highlighter.
		maxCells (int): Largest DP table (m*n) that will be built. Zero or less disables the check.

	Returns:
		DiffResult: Classified lines, alignment points, change blocks and stats.

	Raises:
		DiffTooLargeError: If len(original lines) * len(modified lines) exceeds maxCells.
	"""
	originalLines = splitLines(original)
	modifiedLines = splitLines(modified)
	m, n = len(originalLines), len(modifiedLines)
	if maxCells > 0 and m * n > maxCells:
		logger.warning(f"Refusing diff of {m} x {n} lines (limit {maxCells} cells).")
		raise DiffTooLargeError(m, n, maxCells)

	logger.debug(f"Computing diff: original={m} lines, modified={n} lines, language='{language}'.")
	steps = backtrackEditScript(originalLines, modifiedLines, buildLcsTable(originalLines, modifiedLines))

	leftLines: List[DiffLine] = []
	rightLines: List[DiffLine] = []
	alignmentPoints: List[AlignmentPoint] = [AlignmentPoint(0, 0)]
	changeBlocks: List[ChangeBlock] = []
	pending = _PendingBlock()

	def flushPending() -> None:
		block = pending.flush(len(leftLines), len(rightLines))
		if block is not None:
			changeBlocks.append(block)

	for op, origIdx, modIdx in steps:
		if op is EditOp.EQUAL:
			flushPending()
			text = originalLines[origIdx]
			markup = highlight(text, language)
			leftLines.append(DiffLine(origIdx + 1, text, markup, LineKind.UNCHANGED))
			rightLines.append(DiffLine(modIdx + 1, text, markup, LineKind.UNCHANGED))
			alignmentPoints.append(AlignmentPoint(len(leftLines), len(rightLines)))
		elif op is EditOp.DELETE:
			if pending.deleteStart < 0:
				pending.deleteStart = len(leftLines)
			pending.deleteCount += 1
			text = originalLines[origIdx]
			leftLines.append(DiffLine(origIdx + 1, text, highlight(text, language), LineKind.REMOVED))
		else:
			if pending.insertStart < 0:
				pending.insertStart = len(rightLines)
			pending.insertCount += 1
			text = modifiedLines[modIdx]
			rightLines.append(DiffLine(modIdx + 1, text, highlight(text, language), LineKind.ADDED))
	flushPending()

	endPoint = AlignmentPoint(len(leftLines), len(rightLines))
	if alignmentPoints[-1] != endPoint:
		alignmentPoints.append(endPoint)

	stats = DiffStats(
		added=len(linesOfKind(rightLines, LineKind.ADDED)),
		removed=len(linesOfKind(leftLines, LineKind.REMOVED)),
	)
	logger.debug(f"Diff computed: {len(changeBlocks)} change blocks, +{stats.added} -{stats.removed}.")
	return DiffResult(
		leftLines=tuple(leftLines),
		rightLines=tuple(rightLines),
		alignmentPoints=tuple(alignmentPoints),
		changeBlocks=tuple(changeBlocks),
		stats=stats,
	)


@lru_cache(maxsize=16)
def _computeDiffCached(original: str, modified: str, language: str, maxCells: int) -> DiffResult:
	return computeDiffUncached(original, modified, language, maxCells)


def computeDiff(original: Optional[str], modified: Optional[str], language: Optional[str], maxCells: int = DEFAULT_MAX_DIFF_CELLS) -> DiffResult:
	"""
	Memoised computeDiffUncached, keyed by (original, modified, language).
	DiffResult is immutable, so callers may share cached instances.
	"""
	return _computeDiffCached(original or "", modified or "", language or "", maxCells)


def clearDiffCache() -> None:
	_computeDiffCached.cache_clear()
