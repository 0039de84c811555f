# gui/signal_connections.py
"""
Connects widget signals to their handlers for the diff viewer and the main window.
"""

import logging
from typing import TYPE_CHECKING

from PySide6.QtGui import QKeySequence, QShortcut

from core.scroll_sync import PaneSide

if TYPE_CHECKING:
	from .diff_viewer import DiffViewerWidget
	from .main_window import MainWindow

logger: logging.Logger = logging.getLogger(__name__)


def connect_viewer_signals(viewer: 'DiffViewerWidget') -> None:
	"""
	Wires the viewer: pane scroll bars to the synchroniser, header buttons and
	shortcuts to navigation and clipboard actions.
	"""
	logger.debug("Connecting diff viewer signals.")

	# Vertical and horizontal movement both start a synchronisation pass
	for pane, side in ((viewer._originalPane, PaneSide.LEFT), (viewer._modifiedPane, PaneSide.RIGHT)):
		pane.verticalScrollBar().valueChanged.connect(lambda _value, s=side: viewer.handle_scroll(s))
		pane.horizontalScrollBar().valueChanged.connect(lambda _value, s=side: viewer.handle_scroll(s))

	viewer._prevHunkButton.clicked.connect(viewer.go_to_prev_hunk)
	viewer._nextHunkButton.clicked.connect(viewer.go_to_next_hunk)
	viewer._modifiedOnlyButton.toggled.connect(viewer.set_modified_only)
	viewer._copyButton.clicked.connect(viewer.copy_modified)
	viewer._copyHtmlButton.clicked.connect(viewer.copy_as_html)

	viewer._prevHunkShortcut = QShortcut(QKeySequence("Alt+Up"), viewer)
	viewer._prevHunkShortcut.activated.connect(viewer.go_to_prev_hunk)
	viewer._nextHunkShortcut = QShortcut(QKeySequence("Alt+Down"), viewer)
	viewer._nextHunkShortcut.activated.connect(viewer.go_to_next_hunk)

	logger.debug("Diff viewer signal connections established.")


def connect_main_window_signals(window: 'MainWindow') -> None:
	"""Wires menu actions, viewer notifications and the GUI log sink."""
	logger.debug("Connecting main window signals.")
	window.signalLogMessage.connect(window._appendLogMessage)

	window._openOriginalAction.triggered.connect(lambda: window.choose_file(original=True))
	window._openModifiedAction.triggered.connect(lambda: window.choose_file(original=False))
	window._quitAction.triggered.connect(window.close)

	window._diffViewer.diffComputed.connect(window._on_diff_computed)
	window._diffViewer.hunkChanged.connect(window._on_hunk_changed)
	window._diffViewer.copyFinished.connect(window._on_copy_finished)
	logger.debug("Main window signal connections established.")
