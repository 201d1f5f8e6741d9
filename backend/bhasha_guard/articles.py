"""Published-article checks: extract a page, confirm its language, then correct it."""
from __future__ import annotations

import logging

from .classifiers import LanguageDetector
from .correction import CorrectionEngine
from .exceptions import LanguageMismatchError, ModelError
from .extraction import ContentExtractor
from .prompts import require_supported_language
from .schemas import ArticleCheckResult, LanguageCode, LanguageDetectionOutput
from .translation import ChunkedTranslator

logger = logging.getLogger(__name__)


class ArticleChecker:
	def __init__(
		self,
		extractor: ContentExtractor,
		detector: LanguageDetector,
		engine: CorrectionEngine,
		translator: ChunkedTranslator,
	) -> None:
		self.extractor = extractor
		self.detector = detector
		self.engine = engine
		self.translator = translator

	async def check_url(self, url: str, expected_language: LanguageCode) -> ArticleCheckResult:
		expected_language = require_supported_language(expected_language)
		document = await self.extractor.extract(url)
		try:
			detection = await self.detector.detect(document.text)
		except ModelError as err:
			logger.warning("Language detection failed for %s, skipping the language check: %s", url, err)
			detection = LanguageDetectionOutput(detected_language=LanguageCode.other, is_confident=False)
		logger.info(
			"Language detection for %s: detected %s, confident=%s",
			url,
			detection.detected_language.value,
			detection.is_confident,
		)
		if (
			detection.is_confident
			and detection.detected_language is not LanguageCode.other
			and detection.detected_language is not expected_language
		):
			raise LanguageMismatchError(
				f"The article appears to be in {detection.detected_language.display_name}. "
				f"You selected {expected_language.display_name}. Please select the correct language.",
				detected_language=detection.detected_language.value,
				extracted_text=document.text,
			)
		correction, english_errors = await self.engine.check_with_english_pass(document.text, expected_language)
		return ArticleCheckResult(
			url=document.source_url,
			detected_language=detection.detected_language,
			extracted_text=document.text,
			correction=correction,
			english_errors=english_errors,
		)

	async def translate_url(self, url: str, target_language: LanguageCode) -> str:
		document = await self.extractor.extract(url)
		return await self.translator.translate_and_correct(document.text, target_language)
