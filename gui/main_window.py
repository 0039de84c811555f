# gui/main_window.py
"""
Main application window.

Hosts the dual-pane diff viewer and an application log tab, loads the two
documents (from the command line or the File menu), and reports diff stats
and navigation state in the status bar.
"""

import logging
import os
from typing import Optional

from PySide6.QtCore import Signal, Slot
from PySide6.QtGui import QCloseEvent
from PySide6.QtWidgets import QFileDialog, QMainWindow, QMessageBox, QWidget

from core.config_manager import ConfigManager, DiffViewSettings
from core.exceptions import ConfigurationError, FileProcessingError
from core.highlighter import guessGrammar
from gui.gui_utils import QtLogHandler
from utils.logger_setup import parseLogLevel

from . import signal_connections
from . import ui_setup

logger: logging.Logger = logging.getLogger(__name__)

STATUS_TIMEOUT_MS: int = 5000


def read_document(path: str) -> str:
	"""
	Reads a text document for comparison. Undecodable bytes are replaced.

	Raises:
		FileProcessingError: If the file cannot be read.
	"""
	try:
		with open(path, 'r', encoding='utf-8', errors='replace') as f:
			return f.read()
	except OSError as e:
		logger.error(f"Error reading '{path}': {e}", exc_info=True)
		raise FileProcessingError(f"Could not read '{path}': {e}") from e


class MainWindow(QMainWindow):
	"""Top-level window around a DiffViewerWidget."""

	# Formatted log records for the "Application Log" tab
	signalLogMessage: Signal = Signal(str)

	def __init__(self: 'MainWindow', configManager: ConfigManager, parent: Optional[QWidget] = None) -> None:
		"""
		Args:
			configManager (ConfigManager): Loaded application configuration.
			parent (Optional[QWidget]): Optional parent widget.
		"""
		super().__init__(parent)
		logger.info("Initialising MainWindow...")
		self._configManager: ConfigManager = configManager
		self._settings: DiffViewSettings = configManager.getDiffViewSettings()
		self._originalPath: Optional[str] = None
		self._modifiedPath: Optional[str] = None
		self._originalContent: str = ""
		self._modifiedContent: str = ""
		self._languageOverride: Optional[str] = None
		self._displayName: Optional[str] = None

		ui_setup.setup_main_window_ui(self)
		signal_connections.connect_main_window_signals(self)
		self._setupGuiLogging()
		self.setWindowTitle("DualDiff")
		logger.info("MainWindow initialisation complete.")

	@property
	def diff_viewer(self: 'MainWindow'):
		return self._diffViewer

	def _setupGuiLogging(self: 'MainWindow') -> None:
		"""Adds a QtLogHandler feeding the log tab to the root logger."""
		try:
			guiHandler = QtLogHandler(signal_emitter=self.signalLogMessage.emit, parent=self)
			guiLevelName: str = self._configManager.getConfigValue('Logging', 'GuiLogLevel', fallback='INFO')
			guiHandler.setLevel(parseLogLevel(guiLevelName, logging.INFO))
			guiHandler.setFormatter(logging.Formatter('%(asctime)s - %(levelname)s - %(message)s', datefmt='%H:%M:%S'))
			logging.getLogger().addHandler(guiHandler)
			self._guiLogHandler: Optional[QtLogHandler] = guiHandler
		except ConfigurationError as e:
			self._guiLogHandler = None
			logger.error(f"Configuration error setting up GUI logging: {e}")

	@Slot(str)
	def _appendLogMessage(self: 'MainWindow', message: str) -> None:
		self._appLogArea.append(message)

	# --- Documents ---
	def load_documents(self: 'MainWindow', originalPath: Optional[str], modifiedPath: Optional[str], language: Optional[str] = None, displayName: Optional[str] = None) -> None:
		"""
		Loads either or both documents and refreshes the diff.

		Raises:
			FileProcessingError: If a given path cannot be read.
		"""
		if language:
			self._languageOverride = language
		if displayName:
			self._displayName = displayName
		if originalPath:
			self._originalContent = read_document(originalPath)
			self._originalPath = originalPath
		if modifiedPath:
			self._modifiedContent = read_document(modifiedPath)
			self._modifiedPath = modifiedPath
		self.refresh_diff()

	def refresh_diff(self: 'MainWindow') -> None:
		filename = self._displayName or os.path.basename(self._modifiedPath or self._originalPath or "")
		language = self._languageOverride or guessGrammar(filename, self._settings.defaultLanguage)
		logger.info(f"Showing diff for '{filename}' (language: {language}).")
		self._diffViewer.set_content(self._originalContent, self._modifiedContent, filename, language)

	def choose_file(self: 'MainWindow', original: bool) -> None:
		"""Asks for a document via a file dialog and loads it into one side."""
		startDir: str = self._configManager.getConfigValue('General', 'LastDirectory', fallback='') or ''
		title = "Open Original Document" if original else "Open Modified Document"
		path, _ = QFileDialog.getOpenFileName(self, title, startDir)
		if not path:
			return
		try:
			if original:
				self.load_documents(path, None)
			else:
				self.load_documents(None, path)
		except FileProcessingError as e:
			QMessageBox.warning(self, "Open Failed", str(e))
			return
		self._saveLastDirectory(os.path.dirname(path))

	def _saveLastDirectory(self: 'MainWindow', directory: str) -> None:
		try:
			self._configManager.setConfigValue('General', 'LastDirectory', directory)
			self._configManager.saveConfig()
		except ConfigurationError as e:
			logger.warning(f"Could not remember last directory: {e}")

	# --- Viewer notifications ---
	@Slot(int, int)
	def _on_diff_computed(self: 'MainWindow', added: int, removed: int) -> None:
		self._statusBar.showMessage(f"+{added} -{removed} lines", STATUS_TIMEOUT_MS)

	@Slot(int, int)
	def _on_hunk_changed(self: 'MainWindow', index: int, count: int) -> None:
		if count > 0:
			self._statusBar.showMessage(f"Change {index + 1} of {count}", STATUS_TIMEOUT_MS)

	@Slot(str, bool)
	def _on_copy_finished(self: 'MainWindow', action: str, success: bool) -> None:
		message = "Copied to clipboard." if success else "Copy failed."
		self._statusBar.showMessage(message, STATUS_TIMEOUT_MS)

	def closeEvent(self: 'MainWindow', event: QCloseEvent) -> None:
		self._diffViewer.dispose()
		if self._guiLogHandler is not None:
			logging.getLogger().removeHandler(self._guiLogHandler)
		super().closeEvent(event)
