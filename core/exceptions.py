# core/exceptions.py
"""
Defines custom exception classes for the diff viewer.
Only configuration, input loading and oversized diffs raise; highlighting,
scroll synchronisation and connector painting degrade silently instead.
"""


class BaseApplicationError(Exception):
	"""
	Base class for all application-specific exceptions.
	"""
	def __init__(self: 'BaseApplicationError', message: str = "An application error occurred.") -> None:
		super().__init__(message)


class ConfigurationError(BaseApplicationError):
	"""
	Raised when the .ini or .env configuration cannot be loaded, or a value
	has the wrong type (e.g. a non-integer LineHeight).
	"""
	def __init__(self: 'ConfigurationError', message: str = "Configuration error.") -> None:
		super().__init__(message)


class FileProcessingError(BaseApplicationError):
	"""
	Raised when one of the documents to compare cannot be read from disk.
	"""
	def __init__(self: 'FileProcessingError', message: str = "File processing error.") -> None:
		super().__init__(message)


class DiffTooLargeError(BaseApplicationError):
	"""
	Raised when the LCS table for two documents would exceed the configured
	cell budget. Carries the offending dimensions so the view can report them.
	"""
	def __init__(self: 'DiffTooLargeError', originalLineCount: int, modifiedLineCount: int, maxCells: int) -> None:
		"""
		Args:
			originalLineCount (int): Number of lines in the original document.
			modifiedLineCount (int): Number of lines in the modified document.
			maxCells (int): The configured DP-table budget that was exceeded.
		"""
		self.originalLineCount: int = originalLineCount
		self.modifiedLineCount: int = modifiedLineCount
		self.maxCells: int = maxCells
		super().__init__(
			f"Diff too large: {originalLineCount} x {modifiedLineCount} lines exceeds the limit of {maxCells} table cells."
		)
