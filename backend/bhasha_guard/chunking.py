"""Paragraph-aligned chunking for long documents."""
from __future__ import annotations

import re
from typing import List

from .domain import TextChunk

PARAGRAPH_BREAK = re.compile(r"\n\s*\n")
CHUNK_SEPARATOR = "\n\n"
DEFAULT_MAX_CHUNK_CHARS = 2500


def split_paragraphs(text: str) -> List[str]:
	return [paragraph for paragraph in PARAGRAPH_BREAK.split(text or "") if paragraph.strip()]


def split_into_chunks(text: str, max_chars: int = DEFAULT_MAX_CHUNK_CHARS) -> List[TextChunk]:
	"""Greedily pack whole paragraphs into chunks of at most ``max_chars`` characters.

	A paragraph is never split: one longer than ``max_chars`` becomes its own
	oversized chunk.
	"""
	if max_chars < 1:
		raise ValueError("max_chars must be positive")
	packed: List[str] = []
	current = ""
	for paragraph in split_paragraphs(text):
		if current and len(current) + len(CHUNK_SEPARATOR) + len(paragraph) > max_chars:
			packed.append(current)
			current = ""
		current = f"{current}{CHUNK_SEPARATOR}{paragraph}" if current else paragraph
	if current:
		packed.append(current)
	return [TextChunk(index=index, content=content) for index, content in enumerate(packed)]


def join_chunks(texts: List[str]) -> str:
	return CHUNK_SEPARATOR.join(texts)
