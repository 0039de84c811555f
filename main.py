# main.py
"""
Application entry point.
Initialises logging and configuration, loads the two documents to compare,
shows the main window and starts the Qt event loop.

Usage: python main.py [ORIGINAL] [MODIFIED] [--language L] [--filename NAME]
"""
import argparse
import logging
import sys
from typing import List, Optional

from PySide6.QtWidgets import QApplication, QMessageBox

from core.config_manager import ENV_LOG_LEVEL, ConfigManager
from core.exceptions import ConfigurationError, FileProcessingError
from gui.main_window import MainWindow
from utils.logger_setup import parseLogLevel, setupLogging

CONFIG_FILE_PATH: str = 'config.ini'
ENV_FILE_PATH: str = '.env'


def parse_args(argv: List[str]) -> argparse.Namespace:
	parser = argparse.ArgumentParser(description="Side-by-side diff of two text documents.")
	parser.add_argument('original', nargs='?', help="Original document (left pane).")
	parser.add_argument('modified', nargs='?', help="Modified document (right pane).")
	parser.add_argument('--language', help="Grammar used for highlighting (default: guessed from the file name).")
	parser.add_argument('--filename', help="Name shown in the header and used for markdown detection.")
	# Qt consumes its own options (e.g. -platform); leave them in place
	args, _unknown = parser.parse_known_args(argv)
	return args


def configure_logging(configManager: ConfigManager) -> logging.Logger:
	"""Reconfigures logging from the [Logging] section and the environment override."""
	fileLevel = parseLogLevel(configManager.getConfigValue('Logging', 'FileLogLevel', fallback='DEBUG'))
	consoleLevel = parseLogLevel(configManager.getEnvVar(ENV_LOG_LEVEL), logging.INFO)
	return setupLogging(
		logToConsole=True,
		consoleLevel=consoleLevel,
		logToFile=True,
		logFileLevel=fileLevel,
		logDir=configManager.getConfigValue('Logging', 'LogDirectory', fallback='logs'),
		logFileName=configManager.getConfigValue('Logging', 'LogFileName', fallback='dualdiff.log'),
	)


def _fatal(title: str, message: str) -> None:
	app: Optional[QApplication] = QApplication.instance()
	if not app:
		app = QApplication(sys.argv)
	QMessageBox.critical(None, title, message)
	sys.exit(1)


def main() -> None:
	logger: logging.Logger = setupLogging(logToConsole=True, logToFile=False, consoleLevel=logging.INFO)
	logger.info("================ DualDiff Starting ================")
	args = parse_args(sys.argv[1:])

	configManager = ConfigManager(CONFIG_FILE_PATH, ENV_FILE_PATH)
	try:
		configManager.loadEnv()
		configManager.loadConfig()
		logger = configure_logging(configManager)
		logger.info("Configuration loaded. Logger reconfigured.")
	except ConfigurationError as e:
		errorMessage = f"Fatal Configuration Error: {e}\nPlease check '{ENV_FILE_PATH}' and '{CONFIG_FILE_PATH}'."
		logger.critical(errorMessage, exc_info=True)
		_fatal("Configuration Error", errorMessage)

	app: Optional[QApplication] = QApplication.instance()
	if not app:
		app = QApplication(sys.argv)

	try:
		mainWindow = MainWindow(configManager)
		width = configManager.getConfigValueInt('GUI', 'WindowWidth', fallback=1200)
		height = configManager.getConfigValueInt('GUI', 'WindowHeight', fallback=800)
		mainWindow.resize(width, height)
		if args.original or args.modified:
			mainWindow.load_documents(args.original, args.modified, language=args.language, displayName=args.filename)
		mainWindow.show()
	except (ConfigurationError, FileProcessingError) as e:
		errorMessage = f"Failed to start: {e}"
		logger.critical(errorMessage, exc_info=True)
		_fatal("Startup Error", errorMessage)

	logger.info("Main window displayed. Starting Qt event loop.")
	exitCode: int = app.exec()
	logger.info(f"Application finished with exit code: {exitCode}")
	sys.exit(exitCode)


if __name__ == "__main__":
	main()
