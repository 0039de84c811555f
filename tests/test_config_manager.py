# --- START: tests/test_config_manager.py ---
import unittest
import os
import shutil
import tempfile
from unittest.mock import patch, MagicMock
from typing import Optional, List

# Ensure imports work correctly assuming tests are run from the project root
import sys
if '.' not in sys.path:
	sys.path.append('.') # Add project root if needed

from core.config_manager import (
	DEFAULT_LINE_HEIGHT, DEFAULT_MAX_DIFF_CELLS, ConfigManager, DiffViewSettings
)
from core.exceptions import ConfigurationError

SAMPLE_INI: str = """
[Logging]
FileLogLevel = INFO

[GUI]
WindowWidth = 1400
FontFamily = Fira Code ; monospace
FontSize = 12

[Diff]
LineHeight = 22
MaxDiffCells = 1000000   # lower than default
DefaultLanguage = python
JumpToFirstHunk = no
"""


# Test Suite for ConfigManager
class TestConfigManager(unittest.TestCase):
	"""
	Unit tests for the ConfigManager class.
	Uses a temporary directory for .ini/.env files and patches python-dotenv where needed.
	"""

	def setUp(self: 'TestConfigManager') -> None:
		"""Set up test environment; called before each test method."""
		self._tmpDir: str = tempfile.mkdtemp()
		self._iniPath: str = os.path.join(self._tmpDir, 'config.ini')
		self._envPath: str = os.path.join(self._tmpDir, '.env')
		self._envVarsToClear: List[str] = ['TEST_ENV_VAR', 'REQUIRED_ENV_VAR', 'DUALDIFF_LOG_LEVEL']
		self._originalEnvValues: dict[str, Optional[str]] = {}
		for var in self._envVarsToClear:
			self._originalEnvValues[var] = os.environ.pop(var, None)

		# Patch logger to suppress output during tests
		self.patcher = patch('core.config_manager.logger', MagicMock())
		self.mock_logger = self.patcher.start()

	def tearDown(self: 'TestConfigManager') -> None:
		"""Clean up test environment; called after each test method."""
		self.patcher.stop()
		for var, value in self._originalEnvValues.items():
			if value is None:
				os.environ.pop(var, None)
			else:
				os.environ[var] = value
		shutil.rmtree(self._tmpDir, ignore_errors=True)

	def _writeIni(self: 'TestConfigManager', content: str = SAMPLE_INI) -> None:
		with open(self._iniPath, 'w', encoding='utf-8') as f:
			f.write(content)

	# --- Test .env Loading ---

	@patch('core.config_manager.load_dotenv', return_value=True)
	def test_loadEnv_success(self: 'TestConfigManager', mock_load_dotenv: MagicMock) -> None:
		with open(self._envPath, 'w', encoding='utf-8') as f:
			f.write("TEST_ENV_VAR=value\n")
		cm = ConfigManager(configFilePath=None, envFilePath=self._envPath)
		self.assertTrue(cm.loadEnv())
		self.assertTrue(cm.isEnvLoaded)
		mock_load_dotenv.assert_called_once_with(dotenv_path=self._envPath, override=False)

	def test_loadEnv_realFileSetsVariable(self: 'TestConfigManager') -> None:
		with open(self._envPath, 'w', encoding='utf-8') as f:
			f.write("DUALDIFF_LOG_LEVEL=warning\n")
		cm = ConfigManager(configFilePath=None, envFilePath=self._envPath)
		cm.loadEnv()
		self.assertEqual(cm.getEnvVar('DUALDIFF_LOG_LEVEL'), 'warning')

	@patch('core.config_manager.load_dotenv')
	def test_loadEnv_fileNotFound(self: 'TestConfigManager', mock_load_dotenv: MagicMock) -> None:
		cm = ConfigManager(envFilePath=self._envPath)
		self.assertFalse(cm.loadEnv())
		self.assertFalse(cm.isEnvLoaded)
		mock_load_dotenv.assert_not_called()

	@patch('core.config_manager.load_dotenv')
	def test_loadEnv_noPathSpecified(self: 'TestConfigManager', mock_load_dotenv: MagicMock) -> None:
		cm = ConfigManager(envFilePath=None)
		self.assertFalse(cm.loadEnv())
		mock_load_dotenv.assert_not_called()
		self.mock_logger.info.assert_called_with("No .env file path specified. Skipping .env loading.")

	@patch('core.config_manager.load_dotenv', side_effect=OSError("Permission denied"))
	def test_loadEnv_errorRaisesConfigurationError(self: 'TestConfigManager', mock_load_dotenv: MagicMock) -> None:
		with open(self._envPath, 'w', encoding='utf-8') as f:
			f.write("X=1\n")
		cm = ConfigManager(envFilePath=self._envPath)
		with self.assertRaisesRegex(ConfigurationError, "Error processing .env file.*Permission denied"):
			cm.loadEnv()
		self.mock_logger.error.assert_called()

	# --- Test .ini Loading ---

	def test_loadConfig_success(self: 'TestConfigManager') -> None:
		self._writeIni()
		cm = ConfigManager(configFilePath=self._iniPath, envFilePath=None)
		cm.loadConfig()
		self.assertTrue(cm.isConfigLoaded)

	def test_loadConfig_fileNotFound(self: 'TestConfigManager') -> None:
		cm = ConfigManager(configFilePath=self._iniPath)
		cm.loadConfig() # Should not raise error, just log warning
		self.assertFalse(cm.isConfigLoaded)
		self.mock_logger.warning.assert_called()
		self.assertEqual(cm.getDiffViewSettings(), DiffViewSettings())

	def test_loadConfig_parseError(self: 'TestConfigManager') -> None:
		self._writeIni("this line has no section header\n")
		cm = ConfigManager(configFilePath=self._iniPath)
		with self.assertRaisesRegex(ConfigurationError, "Error parsing config file"):
			cm.loadConfig()
		self.assertFalse(cm.isConfigLoaded)
		# Later reads report the failed load instead of silently using defaults
		with self.assertRaisesRegex(ConfigurationError, "failed to load"):
			cm.getConfigValue('Diff', 'LineHeight')

	def test_loadConfig_noPathSpecified(self: 'TestConfigManager') -> None:
		cm = ConfigManager(configFilePath=None)
		cm.loadConfig()
		self.assertFalse(cm.isConfigLoaded)
		self.mock_logger.info.assert_called_with("No configuration file specified. Using defaults.")

	# --- Test Variable Retrieval ---

	def test_getEnvVar(self: 'TestConfigManager') -> None:
		os.environ['TEST_ENV_VAR'] = 'test_value'
		cm = ConfigManager()
		self.assertEqual(cm.getEnvVar('TEST_ENV_VAR'), 'test_value')
		self.assertEqual(cm.getEnvVar('MISSING_ENV_VAR', defaultValue='default'), 'default')

	def test_getEnvVar_required(self: 'TestConfigManager') -> None:
		cm = ConfigManager()
		with self.assertRaisesRegex(ConfigurationError, "Required environment variable 'REQUIRED_ENV_VAR' is not set"):
			cm.getEnvVar('REQUIRED_ENV_VAR', defaultValue='ignored_default', required=True)
		self.mock_logger.error.assert_called_with("Required environment variable 'REQUIRED_ENV_VAR' is not set.")

	def test_getConfigValue_stripsInlineComments(self: 'TestConfigManager') -> None:
		self._writeIni()
		cm = ConfigManager(configFilePath=self._iniPath)
		cm.loadConfig()
		self.assertEqual(cm.getConfigValue('GUI', 'FontFamily'), 'Fira Code')
		self.assertEqual(cm.getConfigValueInt('Diff', 'MaxDiffCells'), 1000000)

	def test_getConfigValue_missing(self: 'TestConfigManager') -> None:
		self._writeIni()
		cm = ConfigManager(configFilePath=self._iniPath)
		cm.loadConfig()
		self.assertEqual(cm.getConfigValue('GUI', 'Missing', fallback='x'), 'x')
		with self.assertRaisesRegex(ConfigurationError, "Required configuration value 'Missing' not found in section 'GUI'"):
			cm.getConfigValue('GUI', 'Missing', required=True)

	# --- Test Typed Retrieval ---

	@patch.object(ConfigManager, 'getConfigValue', return_value='not-an-int')
	def test_getConfigValueInt_invalid(self: 'TestConfigManager', mock_getConfigValue: MagicMock) -> None:
		cm = ConfigManager()
		with self.assertRaisesRegex(ConfigurationError, r"Configuration value 'Section/IntKey' \('not-an-int'\) is not a valid integer\."):
			cm.getConfigValueInt('Section', 'IntKey')
		mock_getConfigValue.assert_called_once_with('Section', 'IntKey', fallback=None, required=False)

	@patch.object(ConfigManager, 'getConfigValue', return_value=None)
	def test_getConfigValueInt_fallback(self: 'TestConfigManager', mock_getConfigValue: MagicMock) -> None:
		cm = ConfigManager()
		self.assertEqual(cm.getConfigValueInt('Section', 'MissingInt', fallback=999), 999)

	def test_getConfigValueBool(self: 'TestConfigManager') -> None:
		cm = ConfigManager()
		for raw, expected in (('true', True), ('On', True), ('1', True), ('no', False), ('0', False)):
			with self.subTest(raw=raw):
				with patch.object(ConfigManager, 'getConfigValue', return_value=raw):
					self.assertEqual(cm.getConfigValueBool('Section', 'BoolKey'), expected)

	@patch.object(ConfigManager, 'getConfigValue', return_value='maybe')
	def test_getConfigValueBool_invalid(self: 'TestConfigManager', mock_getConfigValue: MagicMock) -> None:
		cm = ConfigManager()
		expected_regex = r"Configuration value 'Section/BoolKey' \('maybe'\) is not a valid boolean"
		with self.assertRaisesRegex(ConfigurationError, expected_regex):
			cm.getConfigValueBool('Section', 'BoolKey')
		self.mock_logger.error.assert_called()

	# --- Test Diff View Settings ---

	def test_getDiffViewSettings_fromFile(self: 'TestConfigManager') -> None:
		self._writeIni()
		cm = ConfigManager(configFilePath=self._iniPath)
		cm.loadConfig()
		settings = cm.getDiffViewSettings()
		self.assertEqual(settings.lineHeight, 22)
		self.assertEqual(settings.maxDiffCells, 1000000)
		self.assertEqual(settings.defaultLanguage, 'python')
		self.assertFalse(settings.jumpToFirstHunk)
		self.assertEqual(settings.fontFamily, 'Fira Code')
		self.assertEqual(settings.fontSize, 12)

	def test_getDiffViewSettings_defaults(self: 'TestConfigManager') -> None:
		settings = ConfigManager(configFilePath=None).getDiffViewSettings()
		self.assertEqual(settings.lineHeight, DEFAULT_LINE_HEIGHT)
		self.assertEqual(settings.maxDiffCells, DEFAULT_MAX_DIFF_CELLS)
		self.assertTrue(settings.jumpToFirstHunk)

	def test_getDiffViewSettings_rejectsNonPositiveLineHeight(self: 'TestConfigManager') -> None:
		self._writeIni("[Diff]\nLineHeight = 0\n")
		cm = ConfigManager(configFilePath=self._iniPath)
		cm.loadConfig()
		with self.assertRaisesRegex(ConfigurationError, "LineHeight' must be positive"):
			cm.getDiffViewSettings()

	# --- Test Saving ---

	def test_setAndSaveConfig(self: 'TestConfigManager') -> None:
		self._writeIni()
		cm = ConfigManager(configFilePath=self._iniPath)
		cm.loadConfig()
		cm.setConfigValue('General', 'LastDirectory', '/tmp/docs')
		cm.saveConfig()

		reloaded = ConfigManager(configFilePath=self._iniPath)
		reloaded.loadConfig()
		self.assertEqual(reloaded.getConfigValue('General', 'LastDirectory'), '/tmp/docs')
		self.assertEqual(reloaded.getConfigValueInt('Diff', 'LineHeight'), 22)

	def test_saveConfig_noPath(self: 'TestConfigManager') -> None:
		cm = ConfigManager(configFilePath=None)
		cm.setConfigValue('General', 'LastDirectory', '/tmp')
		with self.assertRaisesRegex(ConfigurationError, "no configuration file path"):
			cm.saveConfig()


if __name__ == '__main__':
	unittest.main()
# --- END: tests/test_config_manager.py ---
