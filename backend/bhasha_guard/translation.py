"""Chunked translate-then-proofread pipeline.

Each chunk is translated by its own completion call. A chunk whose call fails
keeps its original text, so the document always comes back whole and in order.
"""
from __future__ import annotations

import asyncio
import logging
from typing import List, Optional

from .chunking import DEFAULT_MAX_CHUNK_CHARS, join_chunks, split_into_chunks
from .domain import ChunkTranslationOutcome, TextChunk
from .exceptions import InputValidationError, ModelError
from .gemini_client import CompletionClient
from .prompts import build_translation_request, require_supported_language
from .schemas import LanguageCode, TranslationOutput

logger = logging.getLogger(__name__)


class ChunkedTranslator:
	def __init__(
		self,
		client: CompletionClient,
		*,
		max_chunk_chars: int = DEFAULT_MAX_CHUNK_CHARS,
		max_concurrency: Optional[int] = None,
	) -> None:
		self.client = client
		self.max_chunk_chars = max_chunk_chars
		self.max_concurrency = max_concurrency

	async def translate_and_correct(self, text: str, target_language: LanguageCode) -> str:
		target_language = require_supported_language(target_language)
		if not (text or "").strip():
			raise InputValidationError("Original article text cannot be empty.")
		chunks = split_into_chunks(text, self.max_chunk_chars)
		logger.info("Split article of %d chars into %d chunks.", len(text), len(chunks))
		outcomes = await self.translate_chunks(chunks, target_language)
		failed = [outcome.index + 1 for outcome in outcomes if outcome.failed]
		if failed:
			logger.warning("Chunks %s kept their original text after translation failures", failed)
		return join_chunks([outcome.text for outcome in outcomes])

	async def translate_chunks(self, chunks: List[TextChunk], target_language: LanguageCode) -> List[ChunkTranslationOutcome]:
		semaphore = asyncio.Semaphore(self.max_concurrency) if self.max_concurrency else None

		async def limited(chunk: TextChunk) -> ChunkTranslationOutcome:
			if semaphore is None:
				return await self._translate_chunk(chunk, target_language, len(chunks))
			async with semaphore:
				return await self._translate_chunk(chunk, target_language, len(chunks))

		gathered = await asyncio.gather(*[limited(chunk) for chunk in chunks], return_exceptions=True)
		outcomes: List[ChunkTranslationOutcome] = []
		for chunk, result in zip(chunks, gathered):
			if isinstance(result, BaseException):
				logger.error("Unexpected error translating chunk %d: %r", chunk.index + 1, result)
				outcomes.append(ChunkTranslationOutcome(index=chunk.index, text=chunk.content, failed=True))
			else:
				outcomes.append(result)
		return outcomes

	async def _translate_chunk(self, chunk: TextChunk, target_language: LanguageCode, total: int) -> ChunkTranslationOutcome:
		logger.info("Translating chunk %d/%d (%d chars)...", chunk.index + 1, total, len(chunk.content))
		try:
			output = await self.client.complete(build_translation_request(chunk.content, target_language))
		except ModelError as err:
			logger.error("Error translating chunk %d. Returning original text for this chunk: %s", chunk.index + 1, err)
			return ChunkTranslationOutcome(index=chunk.index, text=chunk.content, failed=True)
		text = output.converted_text if isinstance(output, TranslationOutput) else ""
		if not text.strip():
			logger.warning("Translation for chunk %d was empty. Returning original chunk.", chunk.index + 1)
			return ChunkTranslationOutcome(index=chunk.index, text=chunk.content, failed=True)
		return ChunkTranslationOutcome(index=chunk.index, text=text)
