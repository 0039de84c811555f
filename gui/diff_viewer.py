# gui/diff_viewer.py
"""
The dual-pane diff viewer widget.

Computes the diff for (original, modified, language), renders the original
and modified panes, keeps their scroll positions aligned through the
ScrollSynchronizer, paints change connectors in the gutter, and offers
next/previous hunk navigation. Results are exposed to the host through Qt
signals rather than shared globals.
"""

import logging
from typing import Optional, Tuple

from PySide6.QtCore import QMimeData, QTimer, Signal
from PySide6.QtGui import QGuiApplication
from PySide6.QtWidgets import QPushButton, QTextEdit, QWidget

from core.config_manager import DiffViewSettings
from core.diff_engine import computeDiff, isMarkdownFile
from core.exceptions import DiffTooLargeError
from core.hunk_navigator import HunkNavigator
from core.models import DiffResult, DiffStats
from core.scroll_sync import PaneSide, ScrollPane, ScrollSynchronizer

from . import signal_connections
from . import ui_setup
from .connector_gutter import ConnectorRenderer
from .gui_utils import QtFrameScheduler

logger: logging.Logger = logging.getLogger(__name__)

COPY_STATUS_RESET_MS: int = 2000


class QtScrollPane(ScrollPane):
	"""Adapts a QTextEdit's scroll bars to the synchroniser's pane interface."""

	def __init__(self: 'QtScrollPane', text_edit: QTextEdit) -> None:
		self._text_edit = text_edit

	def scrollTop(self: 'QtScrollPane') -> float:
		return float(self._text_edit.verticalScrollBar().value())

	def setScrollTop(self: 'QtScrollPane', value: float) -> None:
		self._text_edit.verticalScrollBar().setValue(int(round(value)))

	def scrollLeft(self: 'QtScrollPane') -> float:
		return float(self._text_edit.horizontalScrollBar().value())

	def setScrollLeft(self: 'QtScrollPane', value: float) -> None:
		self._text_edit.horizontalScrollBar().setValue(int(round(value)))

	def scrollableHeight(self: 'QtScrollPane') -> float:
		return float(self._text_edit.verticalScrollBar().maximum())


class DiffViewerWidget(QWidget):
	"""
	Side-by-side diff of two documents.

	Signals:
		hunkChanged(int, int): (currentHunkIndex, hunkCount) after navigation or a new diff.
		diffComputed(int, int): (added, removed) line totals for a new diff.
		copyFinished(str, bool): (action, success) after a clipboard action.
	"""

	hunkChanged: Signal = Signal(int, int)
	diffComputed: Signal = Signal(int, int)
	copyFinished: Signal = Signal(str, bool)

	def __init__(self: 'DiffViewerWidget', settings: Optional[DiffViewSettings] = None, parent: Optional[QWidget] = None) -> None:
		super().__init__(parent)
		self._settings: DiffViewSettings = settings or DiffViewSettings()
		self._inputs: Optional[Tuple[str, str, str]] = None
		self._original: str = ""
		self._modified: str = ""
		self._filename: str = ""
		self._language: str = self._settings.defaultLanguage
		self._result: DiffResult = DiffResult()
		self._line_height: float = float(self._settings.lineHeight)
		self._modified_only: bool = False

		ui_setup.setup_diff_viewer_ui(self)

		self._scheduler = QtFrameScheduler(parent=self)
		self._connector = ConnectorRenderer(
			self._connectorCanvas, self._originalPane, self._modifiedPane,
			self._scheduler, lambda: self._line_height, parent=self
		)
		self._synchronizer = ScrollSynchronizer(
			QtScrollPane(self._originalPane), QtScrollPane(self._modifiedPane),
			self._scheduler, self._line_height,
			onSynchronized=self._connector.schedulePaint
		)
		self._modifiedScroll = QtScrollPane(self._modifiedPane)
		self._navigator = HunkNavigator(
			self._modifiedScroll.setScrollTop,
			self._line_height,
			onCurrentChanged=self._on_hunk_changed
		)

		signal_connections.connect_viewer_signals(self)
		self._update_stats(DiffStats())

	# --- Read-only accessors for the host ---
	@property
	def result(self: 'DiffViewerWidget') -> DiffResult:
		return self._result

	@property
	def navigator(self: 'DiffViewerWidget') -> HunkNavigator:
		return self._navigator

	@property
	def synchronizer(self: 'DiffViewerWidget') -> ScrollSynchronizer:
		return self._synchronizer

	@property
	def connector(self: 'DiffViewerWidget') -> ConnectorRenderer:
		return self._connector

	@property
	def is_markdown(self: 'DiffViewerWidget') -> bool:
		return isMarkdownFile(self._filename)

	@property
	def modified_only(self: 'DiffViewerWidget') -> bool:
		return self._modified_only

	# --- Content ---
	def set_content(self: 'DiffViewerWidget', original: str, modified: str, filename: str = "", language: Optional[str] = None) -> None:
		"""
		Shows the diff of two documents. Recomputes only when the
		(original, modified, language) triple changes.
		"""
		language = language or self._settings.defaultLanguage
		self._filename = filename
		self._filenameLabel.setText(filename)
		self._update_copy_buttons()
		inputs = (original, modified, language)
		if inputs == self._inputs:
			logger.debug("Diff inputs unchanged; skipping recomputation.")
			return
		self._inputs = inputs
		self._original, self._modified, self._language = inputs

		try:
			result = computeDiff(original, modified, language, self._settings.maxDiffCells)
		except DiffTooLargeError as e:
			logger.warning(f"{e} Showing the modified document without a diff.")
			self._show_too_large(e)
			return
		self._apply_result(result)

	def _apply_result(self: 'DiffViewerWidget', result: DiffResult) -> None:
		self._result = result
		left_boundaries, right_boundaries = result.boundaries()
		self._synchronizer.dispose()
		previously_blocked = self._set_scroll_signals_blocked(True)
		try:
			self._line_height = self._originalPane.set_lines(result.leftLines, self._settings.lineHeight, left_boundaries)
			self._modifiedPane.set_lines(result.rightLines, self._settings.lineHeight, right_boundaries)
		finally:
			self._set_scroll_signals_blocked(previously_blocked)
		self._synchronizer.setLineHeight(self._line_height)
		self._synchronizer.setAlignment(result.alignmentPoints)
		self._navigator.setLineHeight(self._line_height)
		self._navigator.setLines(result.leftLines, result.rightLines)
		self._connector.set_blocks(result.changeBlocks)
		self._update_stats(result.stats)
		if self._modified_only:
			self._show_markdown_if_needed()
		self.diffComputed.emit(result.stats.added, result.stats.removed)

		if self._settings.jumpToFirstHunk:
			self._navigator.scheduleInitialJump(self._scheduler, self._connector.schedulePaint)
		else:
			self._connector.schedulePaint()

	def _show_too_large(self: 'DiffViewerWidget', error: DiffTooLargeError) -> None:
		self._result = DiffResult()
		self._synchronizer.dispose()
		self._synchronizer.setAlignment(self._result.alignmentPoints)
		previously_blocked = self._set_scroll_signals_blocked(True)
		try:
			self._originalPane.set_plain_notice(str(error), self._settings.lineHeight)
			self._modifiedPane.set_plain_notice(self._modified, self._settings.lineHeight)
		finally:
			self._set_scroll_signals_blocked(previously_blocked)
		self._navigator.setLines((), ())
		self._connector.set_blocks(())
		self._update_stats(DiffStats())

	def _set_scroll_signals_blocked(self: 'DiffViewerWidget', blocked: bool) -> bool:
		"""Blocks/unblocks all four pane scroll bars. Returns the previous state."""
		previous = self._originalPane.verticalScrollBar().signalsBlocked()
		for pane in (self._originalPane, self._modifiedPane):
			pane.verticalScrollBar().blockSignals(blocked)
			pane.horizontalScrollBar().blockSignals(blocked)
		return previous

	# --- Scroll / navigation ---
	def handle_scroll(self: 'DiffViewerWidget', side: PaneSide) -> None:
		if self._modified_only:
			return
		self._synchronizer.onScroll(side)

	def go_to_next_hunk(self: 'DiffViewerWidget') -> None:
		self._navigator.next()

	def go_to_prev_hunk(self: 'DiffViewerWidget') -> None:
		self._navigator.prev()

	def _on_hunk_changed(self: 'DiffViewerWidget', index: int, count: int) -> None:
		self._navWidget.setVisible(count > 0)
		self._hunkCounterLabel.setText(f"{index + 1} / {count}" if count > 0 else "")
		self._prevHunkButton.setEnabled(index > 0)
		self._nextHunkButton.setEnabled(0 <= index < count - 1)
		self.hunkChanged.emit(index, count)

	def _update_stats(self: 'DiffViewerWidget', stats: DiffStats) -> None:
		self._addedStatLabel.setText(f"+{stats.added}")
		self._addedStatLabel.setVisible(stats.added > 0)
		self._removedStatLabel.setText(f"-{stats.removed}")
		self._removedStatLabel.setVisible(stats.removed > 0)

	# --- Modified-only mode ---
	def set_modified_only(self: 'DiffViewerWidget', enabled: bool) -> None:
		"""Hides the original pane and gutter; renders markdown files as markdown."""
		self._modified_only = enabled
		if self._modifiedOnlyButton.isChecked() != enabled:
			self._modifiedOnlyButton.setChecked(enabled)
		self._modifiedOnlyButton.setText(ui_setup.LABEL_SHOW_DIFF if enabled else ui_setup.LABEL_MODIFIED_ONLY_TOGGLE)
		self._modifiedOnlyButton.setToolTip("Show diff view" if enabled else "View only modified")
		self._originalPanel.setVisible(not enabled)
		self._connectorCanvas.setVisible(not enabled)
		self._modifiedPanel.header.setText(ui_setup.LABEL_MODIFIED_ONLY if enabled else ui_setup.LABEL_MODIFIED)
		self._connector.set_suspended(enabled)
		if enabled:
			self._show_markdown_if_needed()
		else:
			self._modifiedStack.setCurrentWidget(self._modifiedPane)
			# Realign the original pane with wherever the modified pane was left
			self._synchronizer.onScroll(PaneSide.RIGHT)
		self._update_copy_buttons()

	def _show_markdown_if_needed(self: 'DiffViewerWidget') -> None:
		if self.is_markdown:
			self._markdownView.setMarkdown(self._modified)
			self._modifiedStack.setCurrentWidget(self._markdownView)
		else:
			self._modifiedStack.setCurrentWidget(self._modifiedPane)

	def _rich_copy_active(self: 'DiffViewerWidget') -> bool:
		return self._modified_only and self.is_markdown

	def _update_copy_buttons(self: 'DiffViewerWidget') -> None:
		rich = self._rich_copy_active()
		self._copyButton.setText(ui_setup.LABEL_COPY_RICH if rich else ui_setup.LABEL_COPY)
		self._copyButton.setToolTip("Copy as rich text" if rich else "Copy modified content")
		self._copyHtmlButton.setText(ui_setup.LABEL_COPY_HTML)
		self._copyHtmlButton.setVisible(rich)

	# --- Clipboard ---
	def copy_modified(self: 'DiffViewerWidget') -> bool:
		"""
		Copies the modified document: rich text (HTML + plain) for rendered
		markdown, plain text otherwise.
		"""
		clipboard = QGuiApplication.clipboard()
		success = False
		if clipboard is None:
			logger.warning("Clipboard unavailable; copy skipped.")
		elif self._rich_copy_active():
			mime = QMimeData()
			mime.setHtml(self._markdownView.toHtml())
			mime.setText(self._markdownView.toPlainText())
			clipboard.setMimeData(mime)
			success = True
		else:
			clipboard.setText(self._modified)
			success = True
		self._flash_copy_status(self._copyButton, success)
		self.copyFinished.emit("copy", success)
		return success

	def copy_as_html(self: 'DiffViewerWidget') -> bool:
		"""Copies the rendered markdown's HTML source as plain text."""
		clipboard = QGuiApplication.clipboard()
		success = clipboard is not None and self._rich_copy_active()
		if success:
			clipboard.setText(self._markdownView.toHtml())
		else:
			logger.warning("Copy as HTML unavailable (no clipboard or no rendered markdown).")
		self._flash_copy_status(self._copyHtmlButton, success)
		self.copyFinished.emit("copy_html", success)
		return success

	def _flash_copy_status(self: 'DiffViewerWidget', button: QPushButton, success: bool) -> None:
		button.setText("✓ Copied" if success else "✗ Copy failed")
		QTimer.singleShot(COPY_STATUS_RESET_MS, self._update_copy_buttons)

	# --- Lifecycle ---
	def dispose(self: 'DiffViewerWidget') -> None:
		"""Releases deferred callbacks and detaches the connector watcher."""
		self._navigator.cancelInitialJump()
		self._synchronizer.dispose()
		self._connector.dispose()
		self._scheduler.cancelAll()

	def showEvent(self: 'DiffViewerWidget', event) -> None:
		super().showEvent(event)
		# Paint once layout has settled after mounting
		self._connector.schedulePaint()

	def closeEvent(self: 'DiffViewerWidget', event) -> None:
		self.dispose()
		super().closeEvent(event)
