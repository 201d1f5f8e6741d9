"""Language-specific spelling and grammar correction.

The model is only trusted as far as its output is internally consistent: a
proposed correction whose ``original`` and ``corrected`` are the same text
after Unicode normalization is a no-op and is dropped. When any item had to be
dropped, the model's rewritten text is discarded for the whole unit and the
caller's text is returned instead, alongside the corrections that survived.

English content is checked with the word-level English spelling prompt in the
article and bulk flows. Other languages get their own correction prompt plus
that English pass, run side by side; a pass that fails contributes nothing and
only a failure of every pass is an error.
"""
from __future__ import annotations

import asyncio
import logging
import unicodedata
from typing import Awaitable, List, Optional, Tuple, TypeVar

from .domain import (
	CorrectionOutcome,
	EnglishSpellingCorrection,
	LanguageCorrection,
	to_correction_items,
	unique_by_original,
)
from .exceptions import ModelError
from .gemini_client import CompletionClient
from .prompts import build_correction_request, build_english_spelling_request, require_supported_language
from .schemas import CorrectionItem, CorrectionOutput, CorrectionResult, EnglishSpellingOutput, LanguageCode

logger = logging.getLogger(__name__)

T = TypeVar("T")


def normalize_term(value: str, *, fold_case: bool = False) -> str:
	normalized = unicodedata.normalize("NFC", value or "").strip()
	return normalized.casefold() if fold_case else normalized


def is_noop(original: str, corrected: str, *, fold_case: bool = False) -> bool:
	return normalize_term(original, fold_case=fold_case) == normalize_term(corrected, fold_case=fold_case)


def repair_correction_output(text: str, output: CorrectionOutput) -> CorrectionResult:
	valid = [item for item in output.corrections if not is_noop(item.original, item.corrected)]
	if len(valid) != len(output.corrections):
		logger.warning(
			"Dropped %d no-op correction(s); returning the original text",
			len(output.corrections) - len(valid),
		)
		return CorrectionResult(corrected_text=text, corrections=valid)
	return CorrectionResult(corrected_text=output.corrected_text, corrections=valid)


async def settle(label: str, check: Awaitable[T], fallback: T) -> Tuple[T, Optional[Exception]]:
	"""Await one correction pass, turning its failure into ``fallback`` plus the error."""
	try:
		return await check, None
	except Exception as err:
		logger.warning("%s pass failed: %s", label, err)
		return fallback, err


def raise_if_all_failed(errors: List[Optional[Exception]]) -> None:
	if errors and all(err is not None for err in errors):
		raise errors[0]


class CorrectionEngine:
	def __init__(self, client: CompletionClient) -> None:
		self.client = client

	async def correct(self, text: str, language: LanguageCode) -> CorrectionResult:
		"""Correct ``text`` in ``language``, falling back to the input on any model failure."""
		language = require_supported_language(language)
		try:
			return await self.run(text, language)
		except ModelError as err:
			logger.error("%s correction failed, returning original text: %s", language.value, err)
			return CorrectionResult(corrected_text=text, corrections=[])

	async def run(self, text: str, language: LanguageCode) -> CorrectionResult:
		"""Like :meth:`correct` but lets ``ModelError`` propagate."""
		if not text.strip():
			return CorrectionResult(corrected_text=text, corrections=[])
		request = build_correction_request(text, language)
		output = await self.client.complete(request)
		if not isinstance(output, CorrectionOutput):
			raise ModelError(f"{request.name}: unexpected output type {type(output).__name__}")
		return repair_correction_output(text, output)

	async def check_english_spelling(self, text: str) -> EnglishSpellingCorrection:
		if not text.strip():
			return EnglishSpellingCorrection()
		request = build_english_spelling_request(text)
		output = await self.client.complete(request)
		if not isinstance(output, EnglishSpellingOutput):
			raise ModelError(f"{request.name}: unexpected output type {type(output).__name__}")
		return EnglishSpellingCorrection(
			items=[
				(error.word, error.suggestion)
				for error in output.errors_found
				if not is_noop(error.word, error.suggestion, fold_case=True)
			]
		)

	async def check_with_english_pass(self, text: str, language: LanguageCode) -> Tuple[CorrectionResult, List[CorrectionItem]]:
		"""Correction for an article body plus the English spelling errors found in it.

		English text is checked once, by the spelling prompt, and its findings are
		the primary result. For other languages both passes run in parallel and
		both settle before this returns. ``ModelError`` propagates only when every
		pass failed.
		"""
		language = require_supported_language(language)
		if language is LanguageCode.english:
			spelling = await self.check_english_spelling(text)
			return CorrectionResult(corrected_text=text, corrections=to_correction_items(spelling)), []
		(primary, primary_error), (english, english_error) = await asyncio.gather(
			settle(language.value, self.run(text, language), CorrectionResult(corrected_text=text, corrections=[])),
			settle("English spelling", self.check_english_spelling(text), EnglishSpellingCorrection()),
		)
		raise_if_all_failed([primary_error, english_error])
		return primary, to_correction_items(english)

	async def collect_corrections(self, text: str, language: LanguageCode) -> List[CorrectionItem]:
		"""Merged, de-duplicated correction items for ``text`` from every applicable pass."""
		language = require_supported_language(language)
		checks = [settle(language.value, self._language_outcome(text, language), LanguageCorrection())]
		if language is not LanguageCode.english:
			checks.append(settle("English spelling", self.check_english_spelling(text), EnglishSpellingCorrection()))
		settled = await asyncio.gather(*checks)
		raise_if_all_failed([err for _, err in settled])
		merged: List[CorrectionItem] = []
		for outcome, _ in settled:
			merged.extend(to_correction_items(outcome))
		return unique_by_original(merged)

	async def _language_outcome(self, text: str, language: LanguageCode) -> CorrectionOutcome:
		if language is LanguageCode.english:
			return await self.check_english_spelling(text)
		result = await self.run(text, language)
		return LanguageCorrection(items=result.corrections)
