# gui/diff_pane.py
"""
One side of the dual-pane diff: a read-only text view that shows one diff line
per text block, every block exactly one line height tall, so that a vertical
scroll offset divided by the line height is a line index. Hunk boundaries are
drawn as horizontal rules over the viewport.
"""

import html
import logging
from typing import Dict, Optional, Sequence

from PySide6.QtCore import QPointF
from PySide6.QtGui import QColor, QPainter, QPaintEvent, QPen, QTextBlockFormat, QTextCursor
from PySide6.QtWidgets import QTextEdit, QWidget

from core.models import Boundary, DiffLine, LineKind

logger: logging.Logger = logging.getLogger(__name__)

# --- Style Constants ---
HTML_COLOR_ADDED_BG: str = "#e6ffed"
HTML_COLOR_REMOVED_BG: str = "#ffeef0"
HTML_COLOR_UNCHANGED_BG: str = "#ffffff"
HTML_COLOR_LINE_NUM: str = "#6c757d"
HTML_COLOR_TEXT: str = "#212529"
BOUNDARY_COLOR: QColor = QColor(130, 130, 130, 110)

LINE_BACKGROUNDS: Dict[LineKind, str] = {
	LineKind.UNCHANGED: HTML_COLOR_UNCHANGED_BG,
	LineKind.ADDED: HTML_COLOR_ADDED_BG,
	LineKind.REMOVED: HTML_COLOR_REMOVED_BG,
}


def format_line_html(line: DiffLine, num_width: int) -> str:
	"""Formats one diff line as a paragraph: padded line number, then the markup."""
	num = str(line.num).rjust(num_width).replace(" ", "&nbsp;")
	content = line.markup or "&nbsp;"
	background = LINE_BACKGROUNDS.get(line.kind, HTML_COLOR_UNCHANGED_BG)
	return (
		f'<p style="margin:0; white-space:pre; background-color:{background};">'
		f'<span style="color:{HTML_COLOR_LINE_NUM};">{num}&nbsp;</span>{content}</p>'
	)


def build_pane_html(lines: Sequence[DiffLine]) -> str:
	num_width = len(str(max((line.num for line in lines), default=0)))
	body = "".join(format_line_html(line, num_width) for line in lines)
	return f'<html><body style="color:{HTML_COLOR_TEXT};">{body}</body></html>'


class DiffPane(QTextEdit):
	"""Read-only pane rendering a sequence of DiffLine."""

	def __init__(self: 'DiffPane', parent: Optional[QWidget] = None) -> None:
		super().__init__(parent)
		self.setReadOnly(True)
		self.setLineWrapMode(QTextEdit.LineWrapMode.NoWrap)
		self.document().setDocumentMargin(0)
		self._boundaries: Dict[int, Boundary] = {}
		self._line_height: float = 0.0

	@property
	def line_height(self: 'DiffPane') -> float:
		return self._line_height

	def set_lines(self: 'DiffPane', lines: Sequence[DiffLine], line_height: int, boundaries: Optional[Dict[int, Boundary]] = None) -> float:
		"""
		Replaces the pane content.

		Args:
			lines (Sequence[DiffLine]): Lines to show, in order.
			line_height (int): Requested height of every line in px.
			boundaries (Optional[Dict[int, Boundary]]): Hunk boundary markers by line index.

		Returns:
			float: The line height the layout actually produced (falls back to
			line_height if it cannot be measured).
		"""
		self._boundaries = dict(boundaries or {})
		self.setHtml(build_pane_html(lines))
		self._apply_fixed_line_height(line_height)
		self._line_height = self._measure_line_height(line_height)
		self.viewport().update()
		return self._line_height

	def set_plain_notice(self: 'DiffPane', text: str, line_height: int) -> None:
		"""Shows plain, unhighlighted text (used when the diff cannot be computed)."""
		self._boundaries = {}
		self.setHtml(f'<p style="margin:0; white-space:pre;">{html.escape(text)}</p>')
		self._apply_fixed_line_height(line_height)
		self._line_height = float(line_height)

	def _apply_fixed_line_height(self: 'DiffPane', line_height: int) -> None:
		block_format = QTextBlockFormat()
		block_format.setLineHeight(float(line_height), QTextBlockFormat.LineHeightTypes.FixedHeight.value)
		block_format.setTopMargin(0)
		block_format.setBottomMargin(0)
		cursor = QTextCursor(self.document())
		cursor.select(QTextCursor.SelectionType.Document)
		cursor.mergeBlockFormat(block_format)

	def _measure_line_height(self: 'DiffPane', fallback: int) -> float:
		document = self.document()
		first = document.firstBlock()
		if not first.isValid() or document.isEmpty():
			return float(fallback)
		height = document.documentLayout().blockBoundingRect(first).height()
		return height if height > 0 else float(fallback)

	def paintEvent(self: 'DiffPane', event: QPaintEvent) -> None:
		super().paintEvent(event)
		if not self._boundaries or self._line_height <= 0:
			return
		painter = QPainter(self.viewport())
		try:
			painter.setPen(QPen(BOUNDARY_COLOR, 1))
			scroll_top = self.verticalScrollBar().value()
			scroll_left = self.horizontalScrollBar().value()
			width = float(max(self.viewport().width(), self.document().size().width()))
			visible_first = int(scroll_top // self._line_height)
			visible_last = int((scroll_top + self.viewport().height()) // self._line_height) + 1
			for index, marker in self._boundaries.items():
				if index < visible_first or index > visible_last:
					continue
				top = index * self._line_height - scroll_top
				bottom = top + self._line_height - 1
				if marker in (Boundary.TOP, Boundary.BOTH):
					painter.drawLine(QPointF(-scroll_left, top), QPointF(width, top))
				if marker in (Boundary.BOTTOM, Boundary.BOTH):
					painter.drawLine(QPointF(-scroll_left, bottom), QPointF(width, bottom))
		finally:
			painter.end()
