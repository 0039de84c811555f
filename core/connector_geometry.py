# core/connector_geometry.py
"""
Geometry for the connector overlay drawn in the gutter between the panes.

Each change block becomes a band whose left edge spans the block's lines in
the original pane and whose right edge spans its lines in the modified pane,
both in gutter coordinates at the panes' current scroll offsets.
"""

from dataclasses import dataclass
from typing import Dict, List, Sequence, Tuple

from .models import BlockKind, ChangeBlock

# Blocks with no lines on a side still get a sliver this many lines tall
MIN_VISIBLE_LINES: float = 0.5

# Extra room below the viewport before a block counts as off-screen
CULL_MARGIN_PX: float = 20.0

Rgba = Tuple[int, int, int, float]

# kind -> (fill, stroke)
CONNECTOR_PALETTE: Dict[BlockKind, Tuple[Rgba, Rgba]] = {
	BlockKind.MODIFIED: ((90, 130, 180, 0.2), (90, 130, 180, 0.45)),
	BlockKind.REMOVED: ((200, 90, 90, 0.2), (200, 90, 90, 0.45)),
	BlockKind.ADDED: ((92, 184, 138, 0.2), (92, 184, 138, 0.45)),
}


@dataclass(frozen=True)
class PaneViewport:
	"""
	Where a pane's content sits relative to the gutter, and how far it is scrolled.

	Attributes:
		offsetY (float): Top of the pane's content area below the gutter's top (header height).
		scrollTop (float): The pane's vertical scroll offset.
		viewHeight (float): Visible height of the content area.
	"""
	offsetY: float
	scrollTop: float
	viewHeight: float


@dataclass(frozen=True)
class ConnectorShape:
	kind: BlockKind
	leftTop: float
	leftBottom: float
	rightTop: float
	rightBottom: float


def blockEdges(start: int, count: int, lineHeight: float, pane: PaneViewport) -> Tuple[float, float]:
	"""Returns (top, bottom) of one side of a block in gutter coordinates."""
	top = pane.offsetY + start * lineHeight - pane.scrollTop
	bottom = pane.offsetY + (start + max(count, MIN_VISIBLE_LINES)) * lineHeight - pane.scrollTop
	return top, bottom


def computeConnectorShapes(
	blocks: Sequence[ChangeBlock],
	lineHeight: float,
	left: PaneViewport,
	right: PaneViewport
) -> List[ConnectorShape]:
	"""
	Computes the visible connector bands.

	Blocks entirely above both viewports, or entirely below both, are culled.
	"""
	shapes: List[ConnectorShape] = []
	for block in blocks:
		leftTop, leftBottom = blockEdges(block.leftStart, block.leftCount, lineHeight, left)
		rightTop, rightBottom = blockEdges(block.rightStart, block.rightCount, lineHeight, right)

		if leftBottom < left.offsetY and rightBottom < right.offsetY:
			continue
		if (leftTop > left.offsetY + left.viewHeight + CULL_MARGIN_PX
				and rightTop > right.offsetY + right.viewHeight + CULL_MARGIN_PX):
			continue
		shapes.append(ConnectorShape(block.kind, leftTop, leftBottom, rightTop, rightBottom))
	return shapes
