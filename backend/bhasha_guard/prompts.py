"""Prompt templates and the typed request builders that fill them.

Templates are plain configuration: the engines never branch on their wording.
A builder validates its inputs and returns a ``CompletionRequest`` that the
completion client renders and sends.
"""
from __future__ import annotations

import json
import re
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple, Type

from pydantic import BaseModel

from .exceptions import InputValidationError
from .schemas import (
	ContentIdeasOutput,
	ContentPolicyOutput,
	CorrectionOutput,
	EnhancedScriptOutput,
	EnglishSpellingOutput,
	FactCheckOutput,
	GrammarOptionsOutput,
	ImagePolicyOutput,
	ImageTextOutput,
	LanguageCode,
	LanguageDetectionOutput,
	NewsArticle,
	PolicyPlatform,
	RewriteOutput,
	ScriptDuration,
	ScriptOutput,
	ScriptPlatform,
	SocialPlatform,
	SocialPostOutput,
	SummaryOutput,
	SUPPORTED_LANGUAGES,
	TranslationOutput,
)

DATA_URI_PATTERN = re.compile(r"^data:(?P<mime>[\w.+-]+/[\w.+-]+);base64,(?P<data>\S+)$", re.DOTALL)


@dataclass(frozen=True)
class PromptTemplate:
	name: str
	template: str
	output_model: Type[BaseModel]
	temperature: float


@dataclass(frozen=True)
class InlineMedia:
	mime_type: str
	data: str


@dataclass(frozen=True)
class CompletionRequest:
	template: PromptTemplate
	inputs: Dict[str, str] = field(default_factory=dict)
	media: Tuple[InlineMedia, ...] = ()

	@property
	def name(self) -> str:
		return self.template.name

	@property
	def temperature(self) -> float:
		return self.template.temperature

	@property
	def output_model(self) -> Type[BaseModel]:
		return self.template.output_model

	def render(self) -> str:
		schema = json.dumps(self.template.output_model.model_json_schema(), ensure_ascii=False)
		return (
			self.template.template.format(**self.inputs)
			+ "\n\nReturn ONLY a JSON object that conforms to this JSON schema. No markdown, no extra commentary.\n"
			+ schema
		)


def parse_data_uri(data_uri: str) -> InlineMedia:
	match = DATA_URI_PATTERN.match((data_uri or "").strip())
	if not match:
		raise InputValidationError("Image must be a data URI of the form 'data:<mimetype>;base64,<encoded_data>'.")
	return InlineMedia(mime_type=match.group("mime"), data=match.group("data"))


def _require_min_length(value: str, minimum: int, label: str) -> None:
	if len((value or "").strip()) < minimum:
		raise InputValidationError(f"{label} must be at least {minimum} characters.")


# ---------------------------------------------------------------------------
# Correction
# ---------------------------------------------------------------------------

_CORRECTION_TEMPLATE = (
	"You are a language expert for {language_name}. Your task is to correct spelling and grammar errors in the provided text.\n\n"
	"- Only correct clear, undeniable errors.\n"
	"- Do not change correctly spelled words. Your \"corrected\" and \"original\" fields must not be identical.\n"
	"- Do not change proper nouns, brand names, or transliterated words.\n"
	"- Provide the fully corrected text in 'corrected_text'.\n"
	"- List every change you made in the 'corrections' array, one item per change, with kind 'spelling' or 'grammar'. "
	"If you made no changes, this array must be empty.\n\n"
	"Input Text:\n\"{text}\""
)

CORRECTION_PROMPTS: Dict[LanguageCode, PromptTemplate] = {
	language: PromptTemplate(
		name=f"correct_{language.value}",
		template=_CORRECTION_TEMPLATE,
		output_model=CorrectionOutput,
		temperature=0.0,
	)
	for language in SUPPORTED_LANGUAGES
}

ENGLISH_SPELLING_PROMPT = PromptTemplate(
	name="check_english_spelling",
	template=(
		"You are an expert English proofreader. Your task is to identify spelling errors in the provided text.\n"
		"- Only flag clear spelling mistakes.\n"
		"- Do not flag proper nouns, brand names, or technical terms.\n"
		"- Do not change correctly spelled words. The 'word' and 'suggestion' fields must not be identical.\n"
		"- If no errors are found, return an empty 'errors_found' array.\n\n"
		"Text to Analyze:\n\"{text}\""
	),
	output_model=EnglishSpellingOutput,
	temperature=0.0,
)


def require_supported_language(language: LanguageCode) -> LanguageCode:
	language = LanguageCode(language)
	if language is LanguageCode.other:
		raise InputValidationError("Language 'other' cannot be used as a correction or translation target.")
	return language


def build_correction_request(text: str, language: LanguageCode) -> CompletionRequest:
	language = require_supported_language(language)
	return CompletionRequest(
		template=CORRECTION_PROMPTS[language],
		inputs={"language_name": language.display_name, "text": text},
	)


def build_english_spelling_request(text: str) -> CompletionRequest:
	return CompletionRequest(template=ENGLISH_SPELLING_PROMPT, inputs={"text": text})


# ---------------------------------------------------------------------------
# Translation
# ---------------------------------------------------------------------------

TRANSLATE_CHUNK_PROMPT = PromptTemplate(
	name="translate_and_correct_chunk",
	template=(
		"You are an expert linguist specializing in high-fidelity translation and proofreading. "
		"Your task is to perform a two-step process on the provided \"Text Chunk\":\n"
		"1. First, translate the ENTIRE text chunk into {target_language}.\n"
		"2. Second, meticulously proofread the translated text for any spelling or grammatical errors and correct them.\n\n"
		"CRITICAL RULES:\n"
		"1. COMPLETE CONVERSION: It is a CRITICAL FAILURE to summarize, shorten, or omit any part of the original text. "
		"Process from the very first word to the very last.\n"
		"2. PRESERVE STRUCTURE: The chunk may contain multiple paragraphs separated by blank lines. "
		"Preserve this structure exactly in your output.\n"
		"3. ONLY OUTPUT FINAL TEXT: Put only the translated and corrected text in 'converted_text'. "
		"No explanations, apologies, or conversational text.\n\n"
		"Text Chunk to Convert:\n\"{text}\"\n\n"
		"Target Language: {target_language}"
	),
	output_model=TranslationOutput,
	temperature=0.2,
)


def build_translation_request(chunk: str, target_language: LanguageCode) -> CompletionRequest:
	target_language = require_supported_language(target_language)
	return CompletionRequest(
		template=TRANSLATE_CHUNK_PROMPT,
		inputs={"text": chunk, "target_language": target_language.display_name},
	)


# ---------------------------------------------------------------------------
# Classification
# ---------------------------------------------------------------------------

DETECT_LANGUAGE_PROMPT = PromptTemplate(
	name="detect_article_language",
	template=(
		"Analyze the following text and determine its primary language.\n"
		"Focus on identifying if the language is English, Malayalam, Tamil, Kannada, or Hindi.\n"
		"If it's clearly one of these, set 'detected_language' to \"english\", \"malayalam\", \"tamil\", \"kannada\", "
		"or \"hindi\" respectively and 'is_confident' to true.\n"
		"If the text is too short, a mix of languages, or a language other than these five, set 'detected_language' "
		"to \"other\" and 'is_confident' to false.\n"
		"If you are somewhat sure but not entirely, you can still pick one of the five languages and set 'is_confident' to false.\n\n"
		"Text:\n\"{text}\""
	),
	output_model=LanguageDetectionOutput,
	temperature=0.1,
)

CONTENT_POLICY_PROMPT = PromptTemplate(
	name="check_content_policy",
	template=(
		"You are an expert AI policy checker for social media platforms. Analyze the provided script against the "
		"community guidelines of YouTube and Meta (Facebook/Instagram).\n\n"
		"Script to Analyze (Language: {language}):\n\"{text}\"\n\n"
		"CRITICAL INSTRUCTIONS:\n"
		"1. Analyze the entire script. If it is not in English, account for the original language's nuances.\n"
		"2. Check against BOTH YouTube and Meta policies and list each violation separately per platform.\n"
		"3. If the script describes visual elements (thumbnails, reels, nudity, graphic injuries, controversial symbols) "
		"that could violate visual policies, list them in 'visual_concerns'.\n"
		"4. For each violation give the platform, the exact flagged segment, the verbatim original sentence, the policy "
		"category, the severity ('High' for clear violations likely to cause removal, 'Medium' for borderline cases, "
		"'Low' for minor infractions) and an actionable suggestion.\n"
		"5. Only when you find ZERO violations and ZERO visual concerns, return empty arrays and set "
		"'no_violation_message'. Do not use that field otherwise.\n\n"
		"Be strict, accurate, and helpful."
	),
	output_model=ContentPolicyOutput,
	temperature=0.1,
)

IMAGE_POLICY_PROMPT = PromptTemplate(
	name="check_image_policy",
	template=(
		"You are an expert AI policy checker for social media platforms, specializing in visual content. Analyze the "
		"attached image against the visual community guidelines of YouTube and Meta (Facebook/Instagram).\n\n"
		"Look for nudity and sexual content, violent or graphic content, hate symbols, harassment, sale of regulated "
		"goods, self-harm promotion and misinformation in infographics or text overlays.\n"
		"List each violation separately per platform with a description of what is problematic, the policy category, "
		"the severity ('High', 'Medium' or 'Low') and an actionable suggestion.\n"
		"Only when you find ZERO violations, return an empty 'violations' array and set 'no_violation_message'. "
		"Do not use that field otherwise."
	),
	output_model=ImagePolicyOutput,
	temperature=0.1,
)

FACT_CHECK_PROMPT = PromptTemplate(
	name="fact_check_with_sources",
	template=(
		"You are a meticulous, impartial fact-checker. Analyze the user's claim based ONLY on the provided web search "
		"result snippets.\n\n"
		"Claim to Verify:\n\"{statement}\"\n\n"
		"Source Information (Web Search Snippets):\n{sources}\n\n"
		"CRITICAL INSTRUCTIONS:\n"
		"1. Based only on the sources, decide whether the claim is true. If the sources prove it false, are "
		"contradictory, or are insufficient, set 'is_factually_correct' to false.\n"
		"2. Write a brief, 2-3 sentence explanation in a neutral, journalistic tone. Do not mention the tools or the "
		"process. Mention conflicting information if you found any.\n"
		"3. Set 'confidence' to 'High', 'Medium' or 'Low'. Use 'Low' if sources are scarce or conflicting."
	),
	output_model=FactCheckOutput,
	temperature=0.1,
)

FACT_CHECK_NO_RESULTS_PROMPT = PromptTemplate(
	name="fact_check_no_results",
	template=(
		"You are a fact-checking assistant. You were asked to verify the following claim, but an automated web search "
		"returned no relevant results.\n\n"
		"Claim: \"{statement}\"\n\n"
		"Write a simple, 1-2 sentence 'explanation' stating that no relevant online information could be found to "
		"verify the claim. Do not use technical jargon. 'is_factually_correct' must be false and 'confidence' must be 'Low'."
	),
	output_model=FactCheckOutput,
	temperature=0.1,
)


def build_language_detection_request(text: str) -> CompletionRequest:
	return CompletionRequest(template=DETECT_LANGUAGE_PROMPT, inputs={"text": text})


def build_content_policy_request(text: str, language: str) -> CompletionRequest:
	_require_min_length(text, 20, "Content to check")
	return CompletionRequest(template=CONTENT_POLICY_PROMPT, inputs={"text": text, "language": language})


def build_image_policy_request(image_data_uri: str) -> CompletionRequest:
	return CompletionRequest(template=IMAGE_POLICY_PROMPT, media=(parse_data_uri(image_data_uri),))


def _format_sources(articles: List[NewsArticle]) -> str:
	if not articles:
		return "No relevant web search results were found."
	return "\n".join(
		f"- {article.title} (Source: {article.source}): \"{article.snippet or ''}\"" for article in articles
	)


def build_fact_check_request(statement: str, articles: List[NewsArticle]) -> CompletionRequest:
	if not articles:
		return CompletionRequest(template=FACT_CHECK_NO_RESULTS_PROMPT, inputs={"statement": statement})
	return CompletionRequest(
		template=FACT_CHECK_PROMPT,
		inputs={"statement": statement, "sources": _format_sources(articles)},
	)


# ---------------------------------------------------------------------------
# Generation
# ---------------------------------------------------------------------------

SUMMARIZE_PROMPT = PromptTemplate(
	name="summarize_text",
	template=(
		"You are an expert at creating concise, high-quality summaries. Summarize the following text.\n\n"
		"CRITICAL INSTRUCTIONS:\n"
		"1. The summary MUST be written in {language}.\n"
		"2. It must be significantly shorter than the original but retain all key information, main points, and conclusions.\n"
		"3. Do not add new information or misinterpret the original text.\n"
		"4. The summary should be clear, well-written, and easy to understand.\n\n"
		"Text to Summarize:\n\"{text}\""
	),
	output_model=SummaryOutput,
	temperature=0.3,
)

SOCIAL_POST_PROMPT = PromptTemplate(
	name="generate_social_post",
	template=(
		"You are an expert social media manager. Create a compelling, platform-appropriate post from the source text.\n\n"
		"CRITICAL INSTRUCTIONS:\n"
		"1. The post MUST be optimized for {platform}.\n"
		"   - Facebook: engaging, slightly longer, can include questions to spark discussion.\n"
		"   - Instagram: visually driven caption, effective emojis, a strong hook.\n"
		"   - Twitter (X): concise, impactful, under 280 characters, strategic hashtags.\n"
		"   - LinkedIn: professional tone, insights, data, or professional value.\n"
		"   - YouTube: a line starting with \"Title: \" (factual, under 70 characters) followed by a line starting with "
		"\"Description: \" that summarizes the text and ends with 3-5 hashtags.\n"
		"2. The entire post, including hashtags, MUST be in {language}.\n"
		"3. The post must accurately reflect the core message of the source text.\n"
		"4. For platforms other than YouTube, end with 2-4 relevant, language-appropriate hashtags.\n\n"
		"Source Text:\n\"{text}\""
	),
	output_model=SocialPostOutput,
	temperature=0.7,
)

REWRITE_SENTENCE_PROMPT = PromptTemplate(
	name="rewrite_flagged_sentence",
	template=(
		"You are an expert content editor specializing in social media policy compliance. Rewrite a single sentence "
		"so it complies with platform guidelines while preserving its original intent.\n\n"
		"Platform: {platform}\n"
		"Language: {language}\n"
		"Policy Violated: {policy_category}\n"
		"Flagged Word/Phrase: \"{flagged_segment}\"\n\n"
		"Original Sentence to Fix:\n\"{original_sentence}\"\n\n"
		"Replace or rephrase the flagged phrase and its immediate context, keep the core meaning, and make the "
		"sentence sound natural in the specified language. Return only the rewritten sentence."
	),
	output_model=RewriteOutput,
	temperature=0.5,
)

IMAGE_TEXT_PROMPT = PromptTemplate(
	name="extract_text_from_image",
	template=(
		"You are an Optical Character Recognition (OCR) expert. Accurately extract all text from the attached image, "
		"whatever its format, style, font, size, color or orientation.\n"
		"Preserve line breaks and paragraph structure as best as you can.\n"
		"If no text is found, return an empty string for 'extracted_text'. Do not describe the image."
	),
	output_model=ImageTextOutput,
	temperature=0.1,
)


def build_summary_request(text: str, language: str) -> CompletionRequest:
	_require_min_length(text, 50, "Text to summarize")
	return CompletionRequest(template=SUMMARIZE_PROMPT, inputs={"text": text, "language": language})


def build_social_post_request(text: str, language: str, platform: SocialPlatform) -> CompletionRequest:
	_require_min_length(text, 50, "Source text")
	return CompletionRequest(
		template=SOCIAL_POST_PROMPT,
		inputs={"text": text, "language": language, "platform": SocialPlatform(platform).value},
	)


def build_rewrite_request(
	original_sentence: str,
	flagged_segment: str,
	policy_category: str,
	platform: PolicyPlatform,
	language: str,
) -> CompletionRequest:
	_require_min_length(original_sentence, 1, "Original sentence")
	return CompletionRequest(
		template=REWRITE_SENTENCE_PROMPT,
		inputs={
			"original_sentence": original_sentence,
			"flagged_segment": flagged_segment,
			"policy_category": policy_category,
			"platform": PolicyPlatform(platform).value,
			"language": language,
		},
	)


def build_image_text_request(image_data_uri: str) -> CompletionRequest:
	return CompletionRequest(template=IMAGE_TEXT_PROMPT, media=(parse_data_uri(image_data_uri),))


GRAMMAR_OPTIONS_PROMPT = PromptTemplate(
	name="get_malayalam_grammar_options",
	template=(
		"You are an expert Malayalam language editor, known for sentences that are grammatically perfect and read "
		"with a natural, human flow. Transform the given Malayalam text into 3-5 alternative phrasings suitable for "
		"YouTube titles or news headlines.\n\n"
		"Input Text:\n\"{text}\"\n\n"
		"CRITICAL RULE: DO NOT SHORTEN OR OMIT INFORMATION.\n"
		"Rephrase, do not summarize. Every option must keep all the facts, details and intent of the input, and "
		"should be about as long as the input.\n\n"
		"Generate options that are:\n"
		"1. Naturally phrased and fluent, as if written by a skilled native Malayalam writer.\n"
		"2. Grammatically impeccable.\n"
		"3. Stylistically polished, professional in tone but clearly human.\n"
		"4. Complete and faithful rephrasings of the entire input.\n"
		"5. Genuinely distinct from one another in structure or emphasis.\n\n"
		"Work names, places and organizations into the options naturally.\n\n"
		"Avoid:\n"
		"- Shortening the text or dropping any part of it.\n"
		"- Clickbait or sensational language.\n"
		"- Slang or overly informal expressions.\n"
		"- Ambiguous or awkward sentences.\n\n"
		"Return the options as Malayalam strings without any English prefixes or labels."
	),
	output_model=GrammarOptionsOutput,
	temperature=0.1,
)

CONTENT_IDEAS_PROMPT = PromptTemplate(
	name="generate_social_content_ideas",
	template=(
		"You are an expert social media strategist and SEO specialist for Instagram, Facebook and YouTube.\n\n"
		"Topic: \"{topic}\"\n\n"
		"Generate clean, strictly English content ideas:\n"
		"1. 'social_hashtags': exactly 6 relevant, well-established or trending hashtags. Each MUST start with '#'. "
		"All MUST be in English, with no mixed languages such as Manglish or Hinglish. Mix broad and niche tags.\n"
		"2. 'youtube_keywords': between 3 and 10 English search terms a real viewer would type into YouTube for this "
		"topic, mixing short-tail (\"AI tools\") and long-tail (\"best AI tools for content creators\") phrases.\n\n"
		"Everything must be in English, spelled correctly and properly formatted. No conversational text."
	),
	output_model=ContentIdeasOutput,
	temperature=0.2,
)

SCRIPT_WORD_RANGES: Dict[ScriptDuration, Tuple[int, int]] = {
	ScriptDuration.sec_15: (35, 45),
	ScriptDuration.sec_30: (75, 90),
	ScriptDuration.sec_60: (150, 180),
	ScriptDuration.sec_90: (225, 270),
	ScriptDuration.min_2: (300, 360),
	ScriptDuration.min_8: (1200, 1440),
}

GENERATE_SCRIPT_PROMPT = PromptTemplate(
	name="generate_script",
	template=(
		"You are an expert scriptwriter and researcher who writes in-depth explainer video scripts for {platform}.\n\n"
		"MANDATORY WORD COUNT: the script is for a {duration} video and MUST be {min_words} to {max_words} words "
		"long, a pace of 150 to 180 words per minute. Going over the maximum is as bad as falling short.\n\n"
		"CONTENT AND RESEARCH:\n"
		"1. The source material below is the primary information for the script. When it is present, base the "
		"script on it.\n"
		"2. When there is no source material, use the research results and your general knowledge of the topic.\n"
		"3. Elaborate on the facts to reach the word count: explain the why and the how behind them.\n\n"
		"STRUCTURE:\n"
		"- Hook (first 5 seconds): a compelling question or striking fact. No generic greetings.\n"
		"- Introduction (about 10%): what the topic is and what the viewer will learn.\n"
		"- Main body (about 80%): logical sub-sections with explanations, examples and analysis, using generic "
		"speaker labels like \"Narrator:\" or \"Anchor:\".\n"
		"- Conclusion and call to action (about 10%): key takeaways and a CTA suited to the platform. No generic "
		"\"like and subscribe\" pleas.\n\n"
		"PLATFORM STYLE:\n"
		"- YouTube: in-depth, well structured, clear explanations.\n"
		"- Instagram/Facebook: fast paced, high energy, strong hook.\n"
		"- LinkedIn: professional, data driven, focused on industry implications.\n\n"
		"The entire script MUST be written in {language}. If the topic is too vague to write about, ask for more "
		"information in 'generated_script' instead.\n\n"
		"Topic: {topic}\n"
		"Source material:\n{details}\n\n"
		"Research results:\n{research}\n\n"
		"Before answering, count the words and rewrite until the count is within {min_words} to {max_words}."
	),
	output_model=ScriptOutput,
	temperature=0.6,
)

ENHANCE_SCRIPT_PROMPT = PromptTemplate(
	name="enhance_script",
	template=(
		"You are an expert script editor and social media content strategist. Turn the existing script into a "
		"polished, production-ready piece.\n\n"
		"1. Target platform: {platform}\n"
		"2. Target language: the entire output MUST be in {language}.\n"
		"3. Target duration: adjust pacing and length to fit {duration}. Condense a long script without losing the "
		"core message; expand a short one with relevant elaboration but no new core facts.\n"
		"4. Correct every spelling, grammar and punctuation error and replace awkward phrasing with fluent language.\n"
		"5. Match the tone to the platform, add on-screen text cues only where they help, and make sure there is a "
		"strong opening hook and a clear call to action.\n"
		"6. Never change the facts, intent or core message of the original.\n\n"
		"Existing script:\n\"{existing_script}\"\n\n"
		"Put only the final script in 'enhanced_script'."
	),
	output_model=EnhancedScriptOutput,
	temperature=0.4,
)


def build_grammar_options_request(text: str) -> CompletionRequest:
	_require_min_length(text, 1, "Text")
	return CompletionRequest(template=GRAMMAR_OPTIONS_PROMPT, inputs={"text": text})


def build_content_ideas_request(topic: str) -> CompletionRequest:
	if not (topic or "").strip():
		raise InputValidationError("Topic cannot be empty.")
	return CompletionRequest(template=CONTENT_IDEAS_PROMPT, inputs={"topic": topic.strip()})


def build_script_request(
	topic: str,
	platform: ScriptPlatform,
	duration: ScriptDuration,
	language: str,
	details: str = "",
	research: Optional[List[NewsArticle]] = None,
) -> CompletionRequest:
	_require_min_length(topic, 3, "Topic")
	duration = ScriptDuration(duration)
	min_words, max_words = SCRIPT_WORD_RANGES[duration]
	return CompletionRequest(
		template=GENERATE_SCRIPT_PROMPT,
		inputs={
			"topic": topic.strip(),
			"platform": ScriptPlatform(platform).value,
			"duration": duration.value,
			"language": language,
			"min_words": str(min_words),
			"max_words": str(max_words),
			"details": (details or "").strip() or "None provided.",
			"research": _format_sources(research) if research else "None.",
		},
	)


def build_enhance_script_request(
	existing_script: str,
	platform: ScriptPlatform,
	duration: ScriptDuration,
	language: str,
) -> CompletionRequest:
	_require_min_length(existing_script, 10, "Script to enhance")
	return CompletionRequest(
		template=ENHANCE_SCRIPT_PROMPT,
		inputs={
			"existing_script": existing_script,
			"platform": ScriptPlatform(platform).value,
			"duration": ScriptDuration(duration).value,
			"language": language,
		},
	)
