from __future__ import annotations

import pytest

from bhasha_guard.classifiers import (
	NO_CONTENT_VIOLATION_MESSAGE,
	NO_IMAGE_VIOLATION_MESSAGE,
	NO_RESULTS_MESSAGE,
	STATEMENT_TOO_SHORT_MESSAGE,
	FactChecker,
	LanguageDetector,
	PolicyClassifier,
)
from bhasha_guard.exceptions import InputValidationError, ModelError
from bhasha_guard.schemas import (
	Confidence,
	ContentPolicyOutput,
	FactCheckOutput,
	ImagePolicyOutput,
	ImageViolation,
	LanguageCode,
	LanguageDetectionOutput,
	NewsArticle,
	PolicyPlatform,
	Severity,
	TranslationOutput,
	Violation,
	VisualConcern,
)

IMAGE = "data:image/png;base64,iVBORw0KGgo="


def violation() -> Violation:
	return Violation(
		platform=PolicyPlatform.youtube,
		flagged_segment="idiots",
		original_sentence="They are all idiots.",
		policy_category="Harassment",
		severity=Severity.medium,
		suggestion="They are all mistaken.",
	)


def article(link: str, title: str = "Headline") -> NewsArticle:
	return NewsArticle(title=title, link=link, source="Example News", snippet="snippet")


class StubSearch:
	def __init__(self, results=None):
		self.results = results or {}
		self.queries = []

	async def search(self, query, *, hl=None, gl=None):
		self.queries.append((query, hl, gl))
		return list(self.results.get((hl, gl), []))


@pytest.mark.asyncio
async def test_short_text_is_not_sent_for_detection(fake_client):
	result = await LanguageDetector(fake_client).detect("short text")
	assert result == LanguageDetectionOutput(detected_language=LanguageCode.other, is_confident=False)
	assert fake_client.count() == 0


@pytest.mark.asyncio
async def test_detection_uses_the_model_for_long_text(fake_client):
	fake_client.script(
		"detect_article_language",
		LanguageDetectionOutput(detected_language=LanguageCode.hindi, is_confident=True),
	)
	result = await LanguageDetector(fake_client).detect("यह एक लंबा वाक्य है " * 5)
	assert result.detected_language is LanguageCode.hindi
	assert fake_client.calls[0].temperature == 0.1


@pytest.mark.asyncio
async def test_violations_clear_the_no_violation_message(fake_client):
	fake_client.script(
		"check_content_policy",
		ContentPolicyOutput(violations=[violation()], no_violation_message="All clear!"),
	)
	result = await PolicyClassifier(fake_client).check_content("They are all idiots, every one of them.", LanguageCode.english)
	assert len(result.violations) == 1
	assert result.no_violation_message is None


@pytest.mark.asyncio
async def test_visual_concerns_alone_count_as_findings(fake_client):
	fake_client.script(
		"check_content_policy",
		ContentPolicyOutput(
			visual_concerns=[VisualConcern(description="graphic injury thumbnail", suggestion="blur it")],
			no_violation_message="All clear!",
		),
	)
	result = await PolicyClassifier(fake_client).check_content("Thumbnail shows the accident up close.", LanguageCode.english)
	assert result.no_violation_message is None


@pytest.mark.asyncio
async def test_clean_content_always_has_a_message(fake_client):
	fake_client.script("check_content_policy", ContentPolicyOutput())
	result = await PolicyClassifier(fake_client).check_content("A calm video about cooking rice.", LanguageCode.malayalam)
	assert result.violations == []
	assert result.no_violation_message == NO_CONTENT_VIOLATION_MESSAGE
	assert fake_client.calls[0].inputs["language"] == "Malayalam"


@pytest.mark.asyncio
async def test_short_content_is_rejected(fake_client):
	with pytest.raises(InputValidationError):
		await PolicyClassifier(fake_client).check_content("too short", LanguageCode.english)
	assert fake_client.count() == 0


@pytest.mark.asyncio
async def test_image_policy_sends_the_image_inline(fake_client):
	fake_client.script("check_image_policy", ImagePolicyOutput())
	result = await PolicyClassifier(fake_client).check_image(IMAGE)
	assert result.no_violation_message == NO_IMAGE_VIOLATION_MESSAGE
	[media] = fake_client.calls[0].media
	assert media.mime_type == "image/png"
	assert media.data == "iVBORw0KGgo="


@pytest.mark.asyncio
async def test_image_violations_clear_the_message(fake_client):
	fake_client.script(
		"check_image_policy",
		ImagePolicyOutput(
			violations=[
				ImageViolation(
					platform=PolicyPlatform.meta,
					violation_description="weapon for sale",
					policy_category="Regulated Goods",
					severity=Severity.high,
					suggestion="remove the price tag",
				)
			],
			no_violation_message="fine",
		),
	)
	result = await PolicyClassifier(fake_client).check_image(IMAGE)
	assert result.no_violation_message is None


@pytest.mark.asyncio
async def test_bad_image_uri_is_rejected(fake_client):
	with pytest.raises(InputValidationError):
		await PolicyClassifier(fake_client).check_image("https://example.com/cat.png")


@pytest.mark.asyncio
async def test_policy_model_error_propagates(fake_client):
	fake_client.script("check_content_policy", ModelError("bad json"))
	with pytest.raises(ModelError):
		await PolicyClassifier(fake_client).check_content("A long enough script to be checked.", LanguageCode.english)


@pytest.mark.asyncio
async def test_too_short_statement_is_unverifiable(fake_client):
	result = await FactChecker(fake_client, StubSearch()).check("abc", LanguageCode.english)
	assert result.is_factually_correct is False
	assert result.confidence is Confidence.low
	assert result.evidence == []
	assert result.unverifiable_message == STATEMENT_TOO_SHORT_MESSAGE
	assert fake_client.count() == 0


@pytest.mark.asyncio
async def test_english_statement_searches_once_with_indian_locale(fake_client):
	search = StubSearch({("en", "in"): [article("https://a")]})
	fake_client.script(
		"fact_check_with_sources",
		FactCheckOutput(is_factually_correct=True, explanation="Confirmed.", confidence=Confidence.high),
	)
	result = await FactChecker(fake_client, search).check("The bridge opened in 2020.", LanguageCode.english)
	assert search.queries == [("The bridge opened in 2020.", "en", "in")]
	assert result.is_factually_correct is True
	assert [a.link for a in result.evidence] == ["https://a"]
	assert result.unverifiable_message is None


@pytest.mark.asyncio
async def test_regional_and_translated_results_are_merged_by_link(fake_client):
	search = StubSearch(
		{
			("ml", "in"): [article("https://a", "regional"), article("https://b")],
			("en", "us"): [article("https://a", "english"), article("https://c")],
		}
	)
	fake_client.script("translate_and_correct_chunk", TranslationOutput(converted_text="The dam is full."))
	fake_client.script(
		"fact_check_with_sources",
		FactCheckOutput(is_factually_correct=False, explanation="Sources disagree.", confidence=Confidence.low),
	)
	result = await FactChecker(fake_client, search).check("അണക്കെട്ട് നിറഞ്ഞു.", LanguageCode.malayalam)
	assert ("The dam is full.", "en", "us") in search.queries
	assert [a.link for a in result.evidence] == ["https://a", "https://b", "https://c"]
	assert result.evidence[0].title == "regional"
	prompt = fake_client.calls[-1].inputs["sources"]
	assert "regional" in prompt


@pytest.mark.asyncio
async def test_no_results_gives_unverifiable_result(fake_client):
	fake_client.script(
		"fact_check_no_results",
		FactCheckOutput(is_factually_correct=True, explanation="Nothing online about this.", confidence=Confidence.high),
	)
	result = await FactChecker(fake_client, StubSearch()).check("A claim nobody wrote about.", LanguageCode.english)
	assert result.evidence == []
	assert result.unverifiable_message == "Nothing online about this."
	assert result.is_factually_correct is False
	assert result.confidence is Confidence.low


@pytest.mark.asyncio
async def test_no_results_survives_a_model_failure(fake_client):
	fake_client.script("fact_check_no_results", ModelError("quota"))
	result = await FactChecker(fake_client, StubSearch()).check("A claim nobody wrote about.", LanguageCode.english)
	assert result.unverifiable_message == NO_RESULTS_MESSAGE


@pytest.mark.asyncio
async def test_verdict_model_error_propagates_when_evidence_exists(fake_client):
	fake_client.script("fact_check_with_sources", ModelError("quota"))
	search = StubSearch({("en", "in"): [article("https://a")]})
	with pytest.raises(ModelError):
		await FactChecker(fake_client, search).check("The bridge opened in 2020.", LanguageCode.english)
