"""Fetch a web page and reduce it to the plain text of its main article."""
from __future__ import annotations

import logging
import re
from typing import List, Optional
from urllib.parse import urlparse

import httpx
from bs4 import BeautifulSoup, Tag

from .domain import ExtractedDocument
from .exceptions import ExtractionError, FetchError, InputValidationError

logger = logging.getLogger(__name__)

BROWSER_HEADERS = {
	"User-Agent": (
		"Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) "
		"Chrome/124.0.0.0 Safari/537.36"
	),
	"Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
	"Accept-Language": "en-US,en;q=0.5",
	"Cache-Control": "no-cache",
	"Pragma": "no-cache",
}

# First selector with any match wins
CONTENT_SELECTORS = (
	"article",
	"main",
	'[role="main"]',
	".main-content",
	".story-body",
	".article-body",
	"#content",
	"#main",
	"#story",
)

NOISE_SELECTORS = (
	"script, style, noscript, header, footer, nav, aside, "
	".sidebar, .comments, #comments, .related-posts, .ad-container"
)

DEFAULT_MIN_CHARS = 100
WHITESPACE = re.compile(r"\s+")


def validate_url(url: str) -> str:
	candidate = (url or "").strip()
	parsed = urlparse(candidate)
	if parsed.scheme not in ("http", "https") or not parsed.netloc:
		raise InputValidationError(f'The provided URL "{url}" is not valid. Please check and try again.')
	return candidate


def _outermost(elements: List[Tag]) -> List[Tag]:
	chosen = set(map(id, elements))
	return [el for el in elements if not any(id(parent) in chosen for parent in el.parents)]


def select_main_content(soup: BeautifulSoup) -> List[Tag]:
	for selector in CONTENT_SELECTORS:
		matches = soup.select(selector)
		if matches:
			return _outermost(matches)
	return [soup.body or soup]


def extract_text(html: str) -> str:
	soup = BeautifulSoup(html, "lxml")
	parts: List[str] = []
	for container in select_main_content(soup):
		for noise in container.select(NOISE_SELECTORS):
			noise.decompose()
		parts.append(container.get_text(" "))
	return WHITESPACE.sub(" ", " ".join(parts)).strip()


class ContentExtractor:
	def __init__(
		self,
		http_client: Optional[httpx.AsyncClient] = None,
		*,
		min_chars: int = DEFAULT_MIN_CHARS,
		timeout: float = 20.0,
	) -> None:
		self._client = http_client or httpx.AsyncClient(timeout=timeout, follow_redirects=True)
		self._owns_client = http_client is None
		self.min_chars = min_chars

	async def aclose(self) -> None:
		if self._owns_client:
			await self._client.aclose()

	async def fetch_html(self, url: str) -> str:
		url = validate_url(url)
		try:
			response = await self._client.get(url, headers=BROWSER_HEADERS)
		except httpx.HTTPError as err:
			logger.error("Error fetching %s: %s", url, err)
			raise FetchError(f"Error fetching URL: {err}") from err
		if not response.is_success:
			logger.error("Failed to fetch URL %s: %s %s", url, response.status_code, response.reason_phrase)
			raise FetchError(
				f"Failed to fetch URL: {response.status_code} {response.reason_phrase}. "
				"The website may be blocking automated access.",
				status_code=response.status_code,
			)
		return response.text

	async def extract(self, url: str) -> ExtractedDocument:
		html = await self.fetch_html(url)
		text = extract_text(html)
		if len(text) <= self.min_chars:
			raise ExtractionError(
				"Could not extract a significant amount of article content from the page. It might be structured "
				"in a way the extractor cannot parse, or it may be behind a paywall."
			)
		logger.info("Extracted %d chars from %s", len(text), url)
		return ExtractedDocument(text=text, source_url=url.strip())
