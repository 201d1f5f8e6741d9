from __future__ import annotations
from typing import Optional


class BhashaGuardError(Exception):
	"""Base class for every error raised by the pipeline."""


class ConfigurationError(BhashaGuardError):
	"""Required credentials or settings are missing."""


class InputValidationError(BhashaGuardError):
	"""Caller input was rejected before any external call was made."""


class LanguageMismatchError(InputValidationError):
	def __init__(self, message: str, *, detected_language: str, extracted_text: str) -> None:
		super().__init__(message)
		self.detected_language = detected_language
		self.extracted_text = extracted_text


class ModelError(BhashaGuardError):
	"""The completion service failed or returned output that does not fit the schema.

	``status_code`` is set when the service answered with an HTTP error.
	"""

	def __init__(self, message: str, *, status_code: Optional[int] = None) -> None:
		super().__init__(message)
		self.status_code = status_code


class FetchError(BhashaGuardError):
	def __init__(self, message: str, *, status_code: Optional[int] = None) -> None:
		super().__init__(message)
		self.status_code = status_code


class ExtractionError(BhashaGuardError):
	"""A page was fetched but no usable document could be extracted from it."""
