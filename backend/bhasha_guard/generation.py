"""Free-form generation tasks.

Summaries, social posts, policy rewrites, OCR, headline phrasings, hashtag and
keyword ideas, and video scripts. Script generation can pull web search results
in as research when the caller supplies no source material.
"""
from __future__ import annotations

import logging
from typing import List, Optional

from .exceptions import ModelError
from .gemini_client import CompletionClient
from .news_search import NewsSearch
from .prompts import (
	build_content_ideas_request,
	build_enhance_script_request,
	build_grammar_options_request,
	build_image_text_request,
	build_rewrite_request,
	build_script_request,
	build_social_post_request,
	build_summary_request,
)
from .schemas import (
	ContentIdeasOutput,
	EnhancedScriptOutput,
	GrammarOptionsOutput,
	ImageTextOutput,
	LanguageCode,
	PolicyPlatform,
	RewriteOutput,
	ScriptDuration,
	ScriptOutput,
	ScriptPlatform,
	SocialPlatform,
	SocialPostOutput,
	SummaryOutput,
)

logger = logging.getLogger(__name__)


class ContentGenerator:
	def __init__(self, client: CompletionClient, news: Optional[NewsSearch] = None) -> None:
		self.client = client
		self.news = news

	async def summarize(self, text: str, language: LanguageCode) -> str:
		output = await self.client.complete(build_summary_request(text, LanguageCode(language).display_name))
		if not isinstance(output, SummaryOutput) or not output.summary.strip():
			raise ModelError("The AI model failed to generate a summary.")
		return output.summary

	async def social_post(self, text: str, language: LanguageCode, platform: SocialPlatform) -> str:
		request = build_social_post_request(text, LanguageCode(language).display_name, platform)
		output = await self.client.complete(request)
		if not isinstance(output, SocialPostOutput) or not output.social_post.strip():
			raise ModelError("The AI model failed to generate a social media post.")
		return output.social_post

	async def rewrite_sentence(
		self,
		original_sentence: str,
		flagged_segment: str,
		policy_category: str,
		platform: PolicyPlatform,
		language: LanguageCode,
	) -> str:
		request = build_rewrite_request(
			original_sentence,
			flagged_segment,
			policy_category,
			platform,
			LanguageCode(language).display_name,
		)
		output = await self.client.complete(request)
		if not isinstance(output, RewriteOutput) or not output.rewritten_sentence.strip():
			raise ModelError("The AI model failed to rewrite the sentence.")
		return output.rewritten_sentence

	async def extract_image_text(self, image_data_uri: str) -> str:
		"""Text found in the image; an empty string when there is none."""
		output = await self.client.complete(build_image_text_request(image_data_uri))
		if not isinstance(output, ImageTextOutput):
			raise ModelError(f"extract_text_from_image: unexpected output type {type(output).__name__}")
		logger.info("Extracted %d characters of text from image", len(output.extracted_text))
		return output.extracted_text

	async def grammar_options(self, text: str) -> List[str]:
		"""Alternative Malayalam phrasings of ``text`` for titles and headlines."""
		output = await self.client.complete(build_grammar_options_request(text))
		if not isinstance(output, GrammarOptionsOutput):
			raise ModelError(f"get_malayalam_grammar_options: unexpected output type {type(output).__name__}")
		options = [option.strip() for option in output.options if option.strip()]
		if not options:
			raise ModelError("The AI model did not suggest any alternative phrasings.")
		return options

	async def content_ideas(self, topic: str) -> ContentIdeasOutput:
		output = await self.client.complete(build_content_ideas_request(topic))
		if not isinstance(output, ContentIdeasOutput):
			raise ModelError(f"generate_social_content_ideas: unexpected output type {type(output).__name__}")
		hashtags = [tag.strip() for tag in output.social_hashtags]
		return ContentIdeasOutput(
			social_hashtags=[tag if tag.startswith("#") else f"#{tag}" for tag in hashtags],
			youtube_keywords=[keyword.strip() for keyword in output.youtube_keywords],
		)

	async def generate_script(
		self,
		topic: str,
		platform: ScriptPlatform,
		duration: ScriptDuration,
		language: LanguageCode,
		details: Optional[str] = None,
	) -> str:
		language_name = LanguageCode(language).display_name
		request = build_script_request(topic, platform, duration, language_name, details=details or "")
		if not (details or "").strip() and self.news is not None:
			research = await self.news.search(topic)
			logger.info("Found %d search results to research script topic %r", len(research), topic)
			request = build_script_request(topic, platform, duration, language_name, research=research)
		output = await self.client.complete(request)
		if not isinstance(output, ScriptOutput) or not output.generated_script.strip():
			raise ModelError(
				"The AI model failed to return a valid script. "
				"Please try again with a more specific topic or different sources."
			)
		return output.generated_script

	async def enhance_script(
		self,
		existing_script: str,
		platform: ScriptPlatform,
		duration: ScriptDuration,
		language: LanguageCode,
	) -> str:
		request = build_enhance_script_request(existing_script, platform, duration, LanguageCode(language).display_name)
		output = await self.client.complete(request)
		if not isinstance(output, EnhancedScriptOutput) or not output.enhanced_script.strip():
			raise ModelError("The AI model failed to enhance the script.")
		return output.enhanced_script
