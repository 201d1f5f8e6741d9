from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Tuple, Union

from .schemas import CorrectionItem, CorrectionKind


@dataclass(frozen=True)
class TextChunk:
	index: int
	content: str


@dataclass(frozen=True)
class ChunkTranslationOutcome:
	index: int
	text: str
	failed: bool = False


@dataclass(frozen=True)
class ExtractedDocument:
	text: str
	source_url: str


@dataclass(frozen=True)
class LanguageCorrection:
	items: List[CorrectionItem] = field(default_factory=list)


@dataclass(frozen=True)
class EnglishSpellingCorrection:
	# (word, suggestion) pairs as reported by the English spell check
	items: List[Tuple[str, str]] = field(default_factory=list)


CorrectionOutcome = Union[LanguageCorrection, EnglishSpellingCorrection]


def to_correction_items(outcome: CorrectionOutcome) -> List[CorrectionItem]:
	if isinstance(outcome, LanguageCorrection):
		return list(outcome.items)
	return [
		CorrectionItem(original=word, corrected=suggestion, description="English spelling", kind=CorrectionKind.spelling)
		for word, suggestion in outcome.items
	]


def unique_by_original(items: List[CorrectionItem]) -> List[CorrectionItem]:
	"""Drop repeated corrections of the same original term, keeping the first one."""
	seen: Dict[str, CorrectionItem] = {}
	for item in items:
		seen.setdefault(item.original, item)
	return list(seen.values())
