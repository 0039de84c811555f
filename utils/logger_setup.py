# utils/logger_setup.py
"""
Configures the root logger for the diff viewer: a console handler on stderr
and a size-rotated log file. Safe to call again after the configuration has
been loaded; previous handlers are replaced rather than duplicated.
"""

import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from typing import List, Optional

DEFAULT_LOG_FORMAT: str = '%(asctime)s - %(name)s - %(levelname)s - %(module)s:%(lineno)d - %(message)s'
DEFAULT_DATE_FORMAT: str = '%Y-%m-%d %H:%M:%S'


def parseLogLevel(levelName: Optional[str], default: int = logging.DEBUG) -> int:
	"""Maps a level name such as 'info' to its logging constant, or default if unknown."""
	if not levelName:
		return default
	level = logging.getLevelName(levelName.strip().upper())
	return level if isinstance(level, int) else default


def setupLogging(
	logLevel: int = logging.DEBUG,
	logToConsole: bool = True,
	consoleLevel: Optional[int] = None,
	logToFile: bool = True,
	logFileName: str = 'dualdiff.log',
	logFileLevel: int = logging.DEBUG,
	logDir: str = 'logs',
	maxBytes: int = 10 * 1024 * 1024,
	backupCount: int = 5,
	logFormat: str = DEFAULT_LOG_FORMAT,
	dateFormat: str = DEFAULT_DATE_FORMAT
) -> logging.Logger:
	"""
	Configures the root logger.

	Args:
		logLevel (int): Minimum level accepted by the root logger.
		logToConsole (bool): Attach a stderr handler.
		consoleLevel (Optional[int]): Level for the stderr handler; None inherits logLevel.
		logToFile (bool): Attach a rotating file handler.
		logFileName (str): Log file name inside logDir.
		logFileLevel (int): Level for the file handler.
		logDir (str): Directory for the log file, created if missing.
		maxBytes (int): Size at which the log file rotates.
		backupCount (int): Number of rotated files kept.
		logFormat (str): Format string shared by all handlers.
		dateFormat (str): Date format shared by all handlers.

	Returns:
		logging.Logger: The configured root logger.
	"""
	handlers: List[logging.Handler] = []
	formatter = logging.Formatter(logFormat, datefmt=dateFormat)

	if logToConsole:
		consoleHandler = logging.StreamHandler(sys.stderr)
		consoleHandler.setFormatter(formatter)
		if consoleLevel is not None:
			consoleHandler.setLevel(consoleLevel)
		handlers.append(consoleHandler)

	logFilePath: str = os.path.join(logDir, logFileName)
	if logToFile:
		try:
			os.makedirs(os.path.abspath(logDir), exist_ok=True)
			fileHandler = RotatingFileHandler(logFilePath, maxBytes=maxBytes, backupCount=backupCount, encoding='utf-8')
			fileHandler.setFormatter(formatter)
			fileHandler.setLevel(logFileLevel)
			handlers.append(fileHandler)
		except OSError as e:
			# Continue with console logging only
			print(f"ERROR: Failed to configure file logging to '{logFilePath}': {e}", file=sys.stderr)

	rootLogger = logging.getLogger()
	rootLogger.setLevel(logLevel)
	for handler in rootLogger.handlers[:]:
		rootLogger.removeHandler(handler)
		handler.close()
	for handler in handlers:
		rootLogger.addHandler(handler)

	if handlers:
		rootLogger.info(
			f"Logging initialised (root: {logging.getLevelName(rootLogger.level)}, console: {logToConsole}, "
			f"file: {logToFile} at {logging.getLevelName(logFileLevel)} in '{logFilePath}')."
		)
	else:
		print("WARNING: Logging initialised without any handlers.", file=sys.stderr)
	return rootLogger
