# core/config_manager.py
"""
Loads and exposes the diff viewer's configuration.
Non-sensitive settings (window size, fonts, line height, diff limits) live in
an .ini file; environment overrides come from a .env file via python-dotenv.
Changes made at runtime (e.g. the last opened directory) can be saved back.
"""

import configparser
import logging
import os
from dataclasses import dataclass
from typing import Any, List, Optional

from dotenv import load_dotenv

from .exceptions import ConfigurationError

logger: logging.Logger = logging.getLogger(__name__)

# Defaults used when the .ini file or a key is missing
DEFAULT_LINE_HEIGHT: int = 20
DEFAULT_MAX_DIFF_CELLS: int = 25_000_000
DEFAULT_LANGUAGE: str = 'text'
DEFAULT_FONT_FAMILY: str = 'Courier New'
DEFAULT_FONT_SIZE: int = 10

ENV_LOG_LEVEL: str = 'DUALDIFF_LOG_LEVEL'


@dataclass(frozen=True)
class DiffViewSettings:
	"""Settings consumed by the dual-pane viewer."""
	lineHeight: int = DEFAULT_LINE_HEIGHT
	maxDiffCells: int = DEFAULT_MAX_DIFF_CELLS
	defaultLanguage: str = DEFAULT_LANGUAGE
	jumpToFirstHunk: bool = True
	fontFamily: str = DEFAULT_FONT_FAMILY
	fontSize: int = DEFAULT_FONT_SIZE


def _stripInlineComment(value: str) -> str:
	for marker in ('#', ';'):
		if marker in value:
			value = value.split(marker, 1)[0]
	return value.strip()


class ConfigManager:
	"""
	Reads settings from an .ini file and environment variables (optionally
	seeded from a .env file). Missing files are not an error; unreadable or
	malformed ones are.
	"""

	def __init__(self: 'ConfigManager', configFilePath: Optional[str] = 'config.ini', envFilePath: Optional[str] = '.env') -> None:
		"""
		Args:
			configFilePath (Optional[str]): Path to the .ini file, or None to use defaults only.
			envFilePath (Optional[str]): Path to the .env file, or None to skip it.
		"""
		self._config: configparser.ConfigParser = configparser.ConfigParser(interpolation=None)
		self._configFilePath: Optional[str] = configFilePath
		self._envFilePath: Optional[str] = envFilePath
		self._envLoaded: bool = False
		self._configLoaded: bool = False
		self._configLoadError: Optional[Exception] = None
		logger.debug(f"ConfigManager initialised (config: '{configFilePath}', env: '{envFilePath}').")

	def loadEnv(self: 'ConfigManager', override: bool = False) -> bool:
		"""
		Loads variables from the .env file into the process environment.

		Args:
			override (bool): Whether .env values replace variables already set.

		Returns:
			bool: True if the file was found and loaded.

		Raises:
			ConfigurationError: If the file exists but cannot be processed.
		"""
		if not self._envFilePath:
			logger.info("No .env file path specified. Skipping .env loading.")
			return False
		try:
			if not os.path.exists(self._envFilePath):
				logger.debug(f".env file not found at '{self._envFilePath}'. Skipping.")
				return False
			self._envLoaded = load_dotenv(dotenv_path=self._envFilePath, override=override)
			if not self._envLoaded:
				logger.warning(f".env file '{self._envFilePath}' was found but nothing was loaded from it.")
			return self._envLoaded
		except Exception as e:
			logger.error(f"Failed to load .env file '{self._envFilePath}': {e}", exc_info=True)
			raise ConfigurationError(f"Error processing .env file '{self._envFilePath}': {e}") from e

	def loadConfig(self: 'ConfigManager') -> None:
		"""
		Loads the .ini file. A missing file leaves the defaults in place.

		Raises:
			ConfigurationError: If the file exists but cannot be read or parsed.
		"""
		self._configLoaded = False
		self._configLoadError = None
		if not self._configFilePath:
			logger.info("No configuration file specified. Using defaults.")
			return
		if not os.path.exists(self._configFilePath):
			logger.warning(f"Configuration file not found: {self._configFilePath}. Using defaults.")
			return
		try:
			self._config = configparser.ConfigParser(interpolation=None)
			readFiles: List[str] = self._config.read(self._configFilePath, encoding='utf-8')
		except (configparser.Error, OSError, UnicodeDecodeError) as e:
			logger.error(f"Failed to parse configuration file '{self._configFilePath}': {e}", exc_info=True)
			self._configLoadError = e
			raise ConfigurationError(f"Error parsing config file '{self._configFilePath}': {e}") from e
		if not readFiles:
			self._configLoadError = ConfigurationError(f"Config file '{self._configFilePath}' could not be read.")
			logger.error(str(self._configLoadError))
			raise self._configLoadError
		self._configLoaded = True
		logger.info(f"Loaded configuration from {self._configFilePath}")

	def getEnvVar(self: 'ConfigManager', varName: str, defaultValue: Optional[str] = None, required: bool = False) -> Optional[str]:
		"""
		Returns an environment variable, or defaultValue when unset.

		Raises:
			ConfigurationError: If required and the variable is unset.
		"""
		value = os.getenv(varName)
		if value is None:
			if required:
				errMsg = f"Required environment variable '{varName}' is not set."
				logger.error(errMsg)
				raise ConfigurationError(errMsg)
			return defaultValue
		return value

	def getConfigValue(self: 'ConfigManager', section: str, key: str, fallback: Optional[Any] = None, required: bool = False) -> Optional[Any]:
		"""
		Returns the raw string value of section/key, with inline comments removed.

		Raises:
			ConfigurationError: If the config failed to load, or the key is required and missing.
		"""
		if self._configLoadError is not None:
			raise ConfigurationError(f"Cannot read '{section}/{key}': configuration file '{self._configFilePath}' failed to load.") from self._configLoadError
		if self._configLoaded and self._config.has_option(section, key):
			value = _stripInlineComment(self._config.get(section, key, raw=True))
			logger.debug(f"Config value '{section}/{key}' = '{value}'")
			return value
		if required:
			errMsg = f"Required configuration value '{key}' not found in section '{section}'."
			logger.error(errMsg)
			raise ConfigurationError(errMsg)
		return fallback

	def getConfigValueInt(self: 'ConfigManager', section: str, key: str, fallback: Optional[int] = None, required: bool = False) -> Optional[int]:
		valueStr = self.getConfigValue(section, key, fallback=None, required=required)
		if valueStr is None:
			return fallback
		try:
			return int(valueStr)
		except (ValueError, TypeError) as e:
			errMsg = f"Configuration value '{section}/{key}' ('{valueStr}') is not a valid integer."
			logger.error(errMsg)
			raise ConfigurationError(errMsg) from e

	def getConfigValueBool(self: 'ConfigManager', section: str, key: str, fallback: Optional[bool] = None, required: bool = False) -> Optional[bool]:
		valueStr = self.getConfigValue(section, key, fallback=None, required=required)
		if valueStr is None:
			return fallback
		valueLower = valueStr.strip().lower()
		if valueLower in ('true', 'yes', 'on', '1'):
			return True
		if valueLower in ('false', 'no', 'off', '0'):
			return False
		errMsg = f"Configuration value '{section}/{key}' ('{valueStr}') is not a valid boolean (use 1/yes/true/on or 0/no/false/off)."
		logger.error(errMsg)
		raise ConfigurationError(errMsg)

	def getDiffViewSettings(self: 'ConfigManager') -> DiffViewSettings:
		"""
		Collects the [Diff] and [GUI] settings used by the viewer.

		Raises:
			ConfigurationError: If a value is malformed or LineHeight is not positive.
		"""
		lineHeight = self.getConfigValueInt('Diff', 'LineHeight', fallback=DEFAULT_LINE_HEIGHT)
		if lineHeight <= 0:
			raise ConfigurationError(f"Configuration value 'Diff/LineHeight' must be positive, got {lineHeight}.")
		return DiffViewSettings(
			lineHeight=lineHeight,
			maxDiffCells=self.getConfigValueInt('Diff', 'MaxDiffCells', fallback=DEFAULT_MAX_DIFF_CELLS),
			defaultLanguage=self.getConfigValue('Diff', 'DefaultLanguage', fallback=DEFAULT_LANGUAGE),
			jumpToFirstHunk=self.getConfigValueBool('Diff', 'JumpToFirstHunk', fallback=True),
			fontFamily=self.getConfigValue('GUI', 'FontFamily', fallback=DEFAULT_FONT_FAMILY),
			fontSize=self.getConfigValueInt('GUI', 'FontSize', fallback=DEFAULT_FONT_SIZE),
		)

	def setConfigValue(self: 'ConfigManager', section: str, key: str, value: str) -> None:
		"""
		Sets a value in memory only; call saveConfig() to persist it.

		Raises:
			ConfigurationError: If the config file failed to load earlier.
		"""
		if self._configLoadError is not None:
			raise ConfigurationError(f"Cannot set '{section}/{key}': configuration file '{self._configFilePath}' failed to load.") from self._configLoadError
		if not self._config.has_section(section):
			self._config.add_section(section)
		self._config.set(section, key, value)
		self._configLoaded = True
		logger.debug(f"Set in-memory config value [{section}] {key} = {value}")

	def saveConfig(self: 'ConfigManager') -> None:
		"""
		Writes the in-memory configuration back to the .ini file.

		Raises:
			ConfigurationError: If no path was given or the file cannot be written.
		"""
		if not self._configFilePath:
			raise ConfigurationError("Cannot save configuration: no configuration file path was specified.")
		try:
			configDir = os.path.dirname(self._configFilePath)
			if configDir:
				os.makedirs(configDir, exist_ok=True)
			with open(self._configFilePath, 'w', encoding='utf-8') as configFile:
				self._config.write(configFile)
			logger.info(f"Saved configuration to {self._configFilePath}")
		except OSError as e:
			errMsg = f"Failed to write configuration file '{self._configFilePath}': {e}"
			logger.error(errMsg, exc_info=True)
			raise ConfigurationError(errMsg) from e

	@property
	def isEnvLoaded(self: 'ConfigManager') -> bool:
		return self._envLoaded

	@property
	def isConfigLoaded(self: 'ConfigManager') -> bool:
		return self._configLoaded
