"""Structured classification calls: language detection, policy checks and fact checks.

The policy and fact-check results each carry a fallback message that is only
meaningful when their item list is empty. The list is always settled first and
the message is then set (or cleared) locally, whatever the model returned.
"""
from __future__ import annotations

import asyncio
import logging
from typing import Dict, List, Optional, Type, TypeVar

from pydantic import BaseModel

from .exceptions import ModelError
from .gemini_client import CompletionClient
from .news_search import NewsSearch
from .prompts import (
	CompletionRequest,
	build_content_policy_request,
	build_fact_check_request,
	build_image_policy_request,
	build_language_detection_request,
)
from .schemas import (
	Confidence,
	ContentPolicyOutput,
	FactCheckOutput,
	FactCheckResult,
	ImagePolicyOutput,
	LanguageCode,
	LanguageDetectionOutput,
	NewsArticle,
)
from .translation import ChunkedTranslator

logger = logging.getLogger(__name__)

OutputT = TypeVar("OutputT", bound=BaseModel)

MIN_DETECTION_CHARS = 50
MIN_FACT_CHECK_CHARS = 5

NO_CONTENT_VIOLATION_MESSAGE = (
	"✅ No known policy violation detected. However, the final decision lies with platform moderators."
)
NO_IMAGE_VIOLATION_MESSAGE = (
	"✅ No visual policy violations detected. However, the final decision lies with platform moderators."
)
STATEMENT_TOO_SHORT_MESSAGE = "The statement is too short to be effectively fact-checked."
NO_RESULTS_MESSAGE = "No relevant information could be found online to verify this claim."

# SerpApi hl/gl per statement language
SEARCH_LOCALES = {
	LanguageCode.malayalam: ("ml", "in"),
	LanguageCode.tamil: ("ta", "in"),
	LanguageCode.kannada: ("kn", "in"),
	LanguageCode.hindi: ("hi", "in"),
}
DEFAULT_SEARCH_LOCALE = ("en", "in")
ENGLISH_SEARCH_LOCALE = ("en", "us")


async def _complete_as(client: CompletionClient, request: CompletionRequest, model: Type[OutputT]) -> OutputT:
	output = await client.complete(request)
	if not isinstance(output, model):
		raise ModelError(f"{request.name}: unexpected output type {type(output).__name__}")
	return output


class LanguageDetector:
	def __init__(self, client: CompletionClient) -> None:
		self.client = client

	async def detect(self, text: str) -> LanguageDetectionOutput:
		if len((text or "").strip()) < MIN_DETECTION_CHARS:
			return LanguageDetectionOutput(detected_language=LanguageCode.other, is_confident=False)
		return await _complete_as(self.client, build_language_detection_request(text), LanguageDetectionOutput)


def settle_content_policy(output: ContentPolicyOutput) -> ContentPolicyOutput:
	if output.violations or output.visual_concerns:
		return output.model_copy(update={"no_violation_message": None})
	return output.model_copy(update={"no_violation_message": output.no_violation_message or NO_CONTENT_VIOLATION_MESSAGE})


def settle_image_policy(output: ImagePolicyOutput) -> ImagePolicyOutput:
	if output.violations:
		return output.model_copy(update={"no_violation_message": None})
	return output.model_copy(update={"no_violation_message": output.no_violation_message or NO_IMAGE_VIOLATION_MESSAGE})


class PolicyClassifier:
	def __init__(self, client: CompletionClient) -> None:
		self.client = client

	async def check_content(self, text: str, language: LanguageCode) -> ContentPolicyOutput:
		request = build_content_policy_request(text, LanguageCode(language).display_name)
		output = await _complete_as(self.client, request, ContentPolicyOutput)
		logger.info("Content policy check found %d violation(s)", len(output.violations))
		return settle_content_policy(output)

	async def check_image(self, image_data_uri: str) -> ImagePolicyOutput:
		output = await _complete_as(self.client, build_image_policy_request(image_data_uri), ImagePolicyOutput)
		logger.info("Image policy check found %d violation(s)", len(output.violations))
		return settle_image_policy(output)


def merge_articles(*groups: List[NewsArticle]) -> List[NewsArticle]:
	seen: Dict[str, NewsArticle] = {}
	for group in groups:
		for article in group:
			seen.setdefault(article.link, article)
	return list(seen.values())


class FactChecker:
	def __init__(
		self,
		client: CompletionClient,
		search: NewsSearch,
		translator: Optional[ChunkedTranslator] = None,
	) -> None:
		self.client = client
		self.search = search
		self.translator = translator or ChunkedTranslator(client)

	async def check(self, statement: str, language: LanguageCode = LanguageCode.english) -> FactCheckResult:
		statement = (statement or "").strip()
		if len(statement) < MIN_FACT_CHECK_CHARS:
			return self._unverifiable(statement, STATEMENT_TOO_SHORT_MESSAGE)

		language = LanguageCode(language)
		logger.info("Fact check in %s: %r", language.value, statement)
		hl, gl = SEARCH_LOCALES.get(language, DEFAULT_SEARCH_LOCALE)
		searches = [self.search.search(statement, hl=hl, gl=gl)]
		if language is not LanguageCode.english:
			searches.append(self._english_search(statement))
		evidence = merge_articles(*await asyncio.gather(*searches))

		request = build_fact_check_request(statement, evidence)
		if not evidence:
			logger.warning("Fact check search returned no results; summarizing without sources")
			try:
				output = await _complete_as(self.client, request, FactCheckOutput)
				explanation = output.explanation
			except ModelError as err:
				logger.error("No-results summary failed: %s", err)
				explanation = NO_RESULTS_MESSAGE
			return self._unverifiable(statement, explanation or NO_RESULTS_MESSAGE)

		logger.info("Fact check found %d unique article(s)", len(evidence))
		output = await _complete_as(self.client, request, FactCheckOutput)
		return FactCheckResult(
			statement=statement,
			is_factually_correct=output.is_factually_correct,
			explanation=output.explanation,
			confidence=output.confidence,
			evidence=evidence,
			unverifiable_message=None,
		)

	async def _english_search(self, statement: str) -> List[NewsArticle]:
		english = await self.translator.translate_and_correct(statement, LanguageCode.english)
		hl, gl = ENGLISH_SEARCH_LOCALE
		return await self.search.search(english, hl=hl, gl=gl)

	@staticmethod
	def _unverifiable(statement: str, message: str) -> FactCheckResult:
		return FactCheckResult(
			statement=statement,
			is_factually_correct=False,
			explanation=message,
			confidence=Confidence.low,
			evidence=[],
			unverifiable_message=message,
		)
