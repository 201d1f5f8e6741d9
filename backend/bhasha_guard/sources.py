"""Social platform content lookups used by the bulk checker."""
from __future__ import annotations

import logging
import re
from typing import Optional

import httpx
from bs4 import BeautifulSoup

from .exceptions import FetchError
from .extraction import BROWSER_HEADERS
from .schemas import Platform

logger = logging.getLogger(__name__)

YOUTUBE_OEMBED_URL = "https://www.youtube.com/oembed"

OEMBED_ERRORS = {
	404: "Video not found. It may be private, deleted, or the URL is incorrect.",
	401: "This video is private or embedding is disabled; its title cannot be fetched.",
	403: "This video is private or embedding is disabled; its title cannot be fetched.",
	429: "Too Many Requests. Please wait a moment before trying again.",
}

# "<likes>, <comments> - <user> on <date>: ‘<caption>’@..." style descriptions
QUOTED_CAPTION = re.compile(r": ‘(.*?)(?<!\\)’@", re.DOTALL)
QUOTE_PAIRS = (('"', '"'), ("“", "”"))


def clean_instagram_caption(description: str) -> str:
	match = QUOTED_CAPTION.search(description)
	if match and match.group(1).strip():
		return match.group(1).strip()
	parts = description.split(" on Instagram:")
	if len(parts) > 1:
		last = parts[-1].strip()
		for opening, closing in QUOTE_PAIRS:
			if len(last) >= 2 and last.startswith(opening) and last.endswith(closing):
				return last[1:-1]
		return last
	return description.strip()


class PlatformSourceFetcher:
	def __init__(self, http_client: Optional[httpx.AsyncClient] = None, *, timeout: float = 20.0) -> None:
		self._client = http_client or httpx.AsyncClient(timeout=timeout, follow_redirects=True)
		self._owns_client = http_client is None

	async def aclose(self) -> None:
		if self._owns_client:
			await self._client.aclose()

	async def fetch(self, url: str, platform: Platform) -> str:
		if Platform(platform) is Platform.youtube:
			return await self.fetch_youtube_title(url)
		return await self.fetch_instagram_caption(url)

	async def fetch_youtube_title(self, url: str) -> str:
		if "youtube.com/" not in url and "youtu.be/" not in url:
			raise FetchError("Please enter a valid YouTube video URL.")
		try:
			response = await self._client.get(
				YOUTUBE_OEMBED_URL,
				params={"url": url, "format": "json"},
				headers={"Accept": "application/json", "Cache-Control": "no-cache"},
			)
		except httpx.HTTPError as err:
			logger.error("Error fetching YouTube title via oEmbed for %s: %s", url, err)
			raise FetchError(f"Error fetching YouTube data: {err}") from err
		if not response.is_success:
			message = OEMBED_ERRORS.get(
				response.status_code,
				f"Failed to fetch YouTube data: {response.status_code} {response.reason_phrase}",
			)
			raise FetchError(message, status_code=response.status_code)
		try:
			title = response.json().get("title")
		except ValueError:
			title = None
		if not title:
			raise FetchError("Could not extract title from YouTube API response.")
		return title

	async def fetch_instagram_caption(self, url: str) -> str:
		if "instagram.com/p/" not in url and "instagram.com/reel/" not in url:
			raise FetchError("Please provide a valid, direct Instagram post URL (e.g., .../p/...)")
		try:
			response = await self._client.get(url, headers=BROWSER_HEADERS)
		except httpx.HTTPError as err:
			logger.error("Error fetching Instagram post %s: %s", url, err)
			raise FetchError(f"Error fetching or parsing Instagram post: {err}") from err
		if not response.is_success:
			raise FetchError(
				f"Failed to fetch URL: {response.status_code} {response.reason_phrase}. "
				"The website may be blocking automated access or the post is private.",
				status_code=response.status_code,
			)
		soup = BeautifulSoup(response.text, "lxml")
		meta = soup.find("meta", attrs={"property": "og:description"})
		description = meta.get("content") if meta else None
		if not description:
			raise FetchError(
				"Could not find the caption (og:description meta tag) on the page. "
				"The post may be private or its structure has changed."
			)
		return clean_instagram_caption(description)
