"""Pydantic models shared by the engines, the completion client and the routers.

Models suffixed with ``Output`` describe what the completion service must return;
everything else is what the service hands back to its callers.
"""
from __future__ import annotations

from enum import Enum
from typing import List, Optional, Union

from pydantic import BaseModel, Field


class LanguageCode(str, Enum):
	english = "english"
	malayalam = "malayalam"
	tamil = "tamil"
	kannada = "kannada"
	hindi = "hindi"
	other = "other"

	@property
	def display_name(self) -> str:
		return self.value.capitalize()


SUPPORTED_LANGUAGES = tuple(code for code in LanguageCode if code is not LanguageCode.other)


class CorrectionKind(str, Enum):
	spelling = "spelling"
	grammar = "grammar"


class CorrectionItem(BaseModel):
	original: str = Field(description="The original incorrect word or phrase.")
	corrected: str = Field(description="The suggested correction for the word or phrase.")
	description: str = Field(default="", description="A brief description of the correction, e.g. 'Misspelled word'.")
	kind: CorrectionKind = Field(default=CorrectionKind.spelling, description="'spelling' or 'grammar'.")


class CorrectionOutput(BaseModel):
	corrected_text: str = Field(description="The full text with all spelling and grammar corrections applied.")
	corrections: List[CorrectionItem] = Field(description="Every change made. Empty when nothing was changed.")


class CorrectionResult(BaseModel):
	corrected_text: str
	corrections: List[CorrectionItem] = Field(default_factory=list)


class SpellingError(BaseModel):
	word: str = Field(description="The misspelled word.")
	suggestion: str = Field(description="The suggested correction for the word.")


class EnglishSpellingOutput(BaseModel):
	errors_found: List[SpellingError] = Field(description="Identified spelling errors. Empty when none are found.")


class TranslationOutput(BaseModel):
	converted_text: str = Field(description="The chunk translated to the target language and then proofread.")


class LanguageDetectionOutput(BaseModel):
	detected_language: LanguageCode
	is_confident: bool


class Platform(str, Enum):
	youtube = "youtube"
	meta = "meta"


class BulkStatus(str, Enum):
	ok = "Checked - OK"
	errors_found = "Checked - Errors Found"
	fetch_error = "Fetch Error"


class BulkCheckResult(BaseModel):
	url: str
	title: Optional[str] = None
	status: BulkStatus
	details: Union[str, List[CorrectionItem]]


class ArticleCheckResult(BaseModel):
	url: str
	detected_language: LanguageCode
	extracted_text: str
	correction: CorrectionResult
	english_errors: List[CorrectionItem] = Field(default_factory=list)


class PolicyPlatform(str, Enum):
	youtube = "YouTube"
	meta = "Meta"


class Severity(str, Enum):
	high = "High"
	medium = "Medium"
	low = "Low"


class Violation(BaseModel):
	platform: PolicyPlatform
	flagged_segment: str = Field(description="The exact word or phrase that is problematic.")
	original_sentence: str = Field(description="The full, verbatim sentence containing the flagged segment.")
	policy_category: str = Field(description="e.g. 'Hate Speech', 'Misinformation'.")
	severity: Severity
	suggestion: str = Field(description="A concrete way to make the sentence compliant.")


class VisualConcern(BaseModel):
	description: str
	suggestion: str


class ContentPolicyOutput(BaseModel):
	violations: List[Violation] = Field(default_factory=list)
	visual_concerns: List[VisualConcern] = Field(default_factory=list)
	no_violation_message: Optional[str] = Field(
		default=None, description="Only when there are no violations and no visual concerns."
	)


class ImageViolation(BaseModel):
	platform: PolicyPlatform
	violation_description: str
	policy_category: str
	severity: Severity
	suggestion: str


class ImagePolicyOutput(BaseModel):
	violations: List[ImageViolation] = Field(default_factory=list)
	no_violation_message: Optional[str] = Field(default=None, description="Only when there are no violations.")


class Confidence(str, Enum):
	high = "High"
	medium = "Medium"
	low = "Low"


class NewsArticle(BaseModel):
	title: str
	link: str
	source: str
	date: Optional[str] = None
	snippet: Optional[str] = None


class FactCheckOutput(BaseModel):
	is_factually_correct: bool = Field(description="False when the claim is wrong, uncertain or unverifiable.")
	explanation: str = Field(description="A neutral 2-3 sentence explanation for a general audience.")
	confidence: Confidence


class FactCheckResult(BaseModel):
	statement: str
	is_factually_correct: bool
	explanation: str
	confidence: Confidence
	evidence: List[NewsArticle] = Field(default_factory=list)
	unverifiable_message: Optional[str] = None


class SummaryOutput(BaseModel):
	summary: str


class SocialPlatform(str, Enum):
	facebook = "Facebook"
	instagram = "Instagram"
	twitter = "Twitter"
	linkedin = "LinkedIn"
	youtube = "YouTube"


class SocialPostOutput(BaseModel):
	social_post: str


class RewriteOutput(BaseModel):
	rewritten_sentence: str


class ImageTextOutput(BaseModel):
	extracted_text: str = Field(description="All text found in the image, or an empty string.")


class GrammarOptionsOutput(BaseModel):
	options: List[str] = Field(
		description="3-5 alternative phrasings of the whole input, each a complete sentence in the input's language."
	)


class ContentIdeasOutput(BaseModel):
	social_hashtags: List[str] = Field(
		min_length=6,
		max_length=6,
		description="Exactly 6 related, well-established English hashtags, each starting with #.",
	)
	youtube_keywords: List[str] = Field(
		min_length=3,
		max_length=10,
		description="3 to 10 English YouTube search keywords and phrases, short-tail and long-tail.",
	)


class ScriptPlatform(str, Enum):
	youtube = "YouTube"
	instagram = "Instagram"
	facebook = "Facebook"
	linkedin = "LinkedIn"


class ScriptDuration(str, Enum):
	sec_15 = "15s"
	sec_30 = "30s"
	sec_60 = "60s"
	sec_90 = "90s"
	min_2 = "2min"
	min_8 = "8min"


class ScriptOutput(BaseModel):
	generated_script: str = Field(
		description='The script, with generic speaker labels such as "Narrator:" where needed.'
	)


class EnhancedScriptOutput(BaseModel):
	enhanced_script: str
