# gui/ui_setup.py
"""
Creates and lays out the widgets of the diff viewer and of the main window.
Widgets are attached to the owning object as private attributes; behaviour is
wired separately in signal_connections.py.
"""

import logging
from typing import TYPE_CHECKING

from PySide6.QtCore import Qt
from PySide6.QtGui import QFont
from PySide6.QtWidgets import (
	QHBoxLayout, QLabel, QPushButton, QStackedWidget, QStatusBar,
	QTabWidget, QTextBrowser, QTextEdit, QVBoxLayout, QWidget
)

from .connector_gutter import ConnectorCanvas
from .diff_pane import DiffPane

if TYPE_CHECKING:
	from .diff_viewer import DiffViewerWidget
	from .main_window import MainWindow

logger: logging.Logger = logging.getLogger(__name__)

LABEL_ORIGINAL: str = "Original"
LABEL_MODIFIED: str = "Modified"
LABEL_MODIFIED_ONLY: str = "Modified content"
LABEL_SHOW_DIFF: str = "Show diff"
LABEL_MODIFIED_ONLY_TOGGLE: str = "Modified only"
LABEL_COPY: str = "Copy"
LABEL_COPY_RICH: str = "Copy rich text"
LABEL_COPY_HTML: str = "Copy HTML"


def _code_font(family: str, point_size: int) -> QFont:
	font = QFont(family)
	font.setStyleHint(QFont.StyleHint.Monospace)
	font.setPointSize(point_size if point_size > 0 else 10)
	return font


def _panel(title: str, body: QWidget) -> QWidget:
	container = QWidget()
	layout = QVBoxLayout(container)
	layout.setContentsMargins(0, 0, 0, 0)
	layout.setSpacing(0)
	header = QLabel(title)
	header.setObjectName("diffPanelHeader")
	header.setContentsMargins(6, 3, 6, 3)
	layout.addWidget(header)
	layout.addWidget(body, 1)
	container.header = header
	return container


def setup_diff_viewer_ui(viewer: 'DiffViewerWidget') -> None:
	"""
	Builds the header bar (filename, hunk navigation, stats, actions) and the
	two panes with the connector gutter between them.
	"""
	settings = viewer._settings
	root = QVBoxLayout(viewer)
	root.setContentsMargins(0, 0, 0, 0)
	root.setSpacing(2)

	# --- Header ---
	header = QHBoxLayout()
	viewer._filenameLabel = QLabel("")
	viewer._filenameLabel.setObjectName("diffFilename")
	viewer._filenameLabel.setTextInteractionFlags(Qt.TextInteractionFlag.TextSelectableByMouse)
	header.addWidget(viewer._filenameLabel, 1)

	viewer._navWidget = QWidget()
	navLayout = QHBoxLayout(viewer._navWidget)
	navLayout.setContentsMargins(0, 0, 0, 0)
	viewer._prevHunkButton = QPushButton("↑")
	viewer._prevHunkButton.setToolTip("Previous change (Alt+Up)")
	viewer._prevHunkButton.setFixedWidth(28)
	viewer._hunkCounterLabel = QLabel("")
	viewer._hunkCounterLabel.setObjectName("diffNavCounter")
	viewer._nextHunkButton = QPushButton("↓")
	viewer._nextHunkButton.setToolTip("Next change (Alt+Down)")
	viewer._nextHunkButton.setFixedWidth(28)
	navLayout.addWidget(viewer._prevHunkButton)
	navLayout.addWidget(viewer._hunkCounterLabel)
	navLayout.addWidget(viewer._nextHunkButton)
	viewer._navWidget.setVisible(False)
	header.addWidget(viewer._navWidget)

	viewer._addedStatLabel = QLabel("")
	viewer._addedStatLabel.setStyleSheet("color: #2da44e; font-weight: bold;")
	viewer._removedStatLabel = QLabel("")
	viewer._removedStatLabel.setStyleSheet("color: #cf222e; font-weight: bold;")
	header.addWidget(viewer._addedStatLabel)
	header.addWidget(viewer._removedStatLabel)

	viewer._modifiedOnlyButton = QPushButton(LABEL_MODIFIED_ONLY_TOGGLE)
	viewer._modifiedOnlyButton.setCheckable(True)
	viewer._modifiedOnlyButton.setToolTip("View only modified")
	viewer._copyButton = QPushButton(LABEL_COPY)
	viewer._copyButton.setToolTip("Copy modified content")
	viewer._copyHtmlButton = QPushButton(LABEL_COPY_HTML)
	viewer._copyHtmlButton.setToolTip("Copy as HTML tags (for HTML editors)")
	viewer._copyHtmlButton.setVisible(False)
	header.addWidget(viewer._modifiedOnlyButton)
	header.addWidget(viewer._copyButton)
	header.addWidget(viewer._copyHtmlButton)
	root.addLayout(header)

	# --- Panels ---
	codeFont = _code_font(settings.fontFamily, settings.fontSize)
	panels = QHBoxLayout()
	panels.setContentsMargins(0, 0, 0, 0)
	panels.setSpacing(0)

	viewer._originalPane = DiffPane()
	viewer._originalPane.setFont(codeFont)
	viewer._originalPane.setObjectName("originalPane")
	viewer._originalPanel = _panel(LABEL_ORIGINAL, viewer._originalPane)
	panels.addWidget(viewer._originalPanel, 1)

	viewer._connectorCanvas = ConnectorCanvas()
	panels.addWidget(viewer._connectorCanvas)

	viewer._modifiedPane = DiffPane()
	viewer._modifiedPane.setFont(codeFont)
	viewer._modifiedPane.setObjectName("modifiedPane")
	viewer._markdownView = QTextBrowser()
	viewer._markdownView.setOpenExternalLinks(True)
	viewer._markdownView.setObjectName("markdownView")
	viewer._modifiedStack = QStackedWidget()
	viewer._modifiedStack.addWidget(viewer._modifiedPane)
	viewer._modifiedStack.addWidget(viewer._markdownView)
	viewer._modifiedPanel = _panel(LABEL_MODIFIED, viewer._modifiedStack)
	panels.addWidget(viewer._modifiedPanel, 1)

	root.addLayout(panels, 1)
	logger.debug("Diff viewer UI setup complete.")


def setup_main_window_ui(window: 'MainWindow') -> None:
	"""Builds the main window: diff viewer tab, application log tab and status bar."""
	from .diff_viewer import DiffViewerWidget

	window._tabWidget = QTabWidget()
	window.setCentralWidget(window._tabWidget)

	window._diffViewer = DiffViewerWidget(window._settings, parent=window)
	window._tabWidget.addTab(window._diffViewer, "Side-by-Side Diff")

	window._appLogArea = QTextEdit()
	window._appLogArea.setReadOnly(True)
	window._appLogArea.setLineWrapMode(QTextEdit.LineWrapMode.NoWrap)
	logFont = QFont("monospace")
	logFont.setPointSize(10)
	window._appLogArea.setFont(logFont)
	window._tabWidget.addTab(window._appLogArea, "Application Log")

	fileMenu = window.menuBar().addMenu("&File")
	window._openOriginalAction = fileMenu.addAction("Open &Original...")
	window._openModifiedAction = fileMenu.addAction("Open &Modified...")
	fileMenu.addSeparator()
	window._quitAction = fileMenu.addAction("&Quit")

	window._statusBar = QStatusBar()
	window.setStatusBar(window._statusBar)
	logger.debug("Main window UI setup complete.")
