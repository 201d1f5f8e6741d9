"""Google results through SerpApi, used as evidence by the fact checker.

Search is best effort: a missing key, a failed request or an error payload all
come back as an empty list.
"""
from __future__ import annotations

import logging
from typing import List, Optional

import httpx

from .schemas import NewsArticle

logger = logging.getLogger(__name__)

SERPAPI_SEARCH_URL = "https://serpapi.com/search.json"
MAX_RESULTS = 5


class NewsSearch:
	def __init__(
		self,
		api_key: Optional[str],
		http_client: Optional[httpx.AsyncClient] = None,
		*,
		timeout: float = 20.0,
		base_url: str = SERPAPI_SEARCH_URL,
	) -> None:
		self.api_key = api_key
		self.base_url = base_url
		self._client = http_client or httpx.AsyncClient(timeout=timeout)
		self._owns_client = http_client is None

	async def aclose(self) -> None:
		if self._owns_client:
			await self._client.aclose()

	async def search(self, query: str, *, hl: Optional[str] = None, gl: Optional[str] = None) -> List[NewsArticle]:
		if not self.api_key:
			logger.warning("SERPAPI_API_KEY is not set; fact checks will run without search results")
			return []
		params = {"engine": "google", "q": query, "api_key": self.api_key, "num": MAX_RESULTS}
		if hl:
			params["hl"] = hl
		if gl:
			params["gl"] = gl
		logger.info("Searching SerpApi (hl=%s, gl=%s) for %r", hl, gl, query)
		try:
			response = await self._client.get(self.base_url, params=params, headers={"Accept": "application/json"})
		except httpx.HTTPError as err:
			logger.error("SerpApi request failed: %s", self._redact(str(err)))
			return []
		if not response.is_success:
			logger.error("SerpApi request failed with status %s: %s", response.status_code, self._redact(response.text[:500]))
			return []
		try:
			data = response.json()
		except ValueError:
			logger.error("SerpApi returned a non-JSON body")
			return []
		if not isinstance(data, dict):
			return []
		if data.get("error"):
			logger.error("SerpApi returned an error: %s", data["error"])
			return []

		articles: List[NewsArticle] = []
		for result in (data.get("organic_results") or [])[:MAX_RESULTS]:
			if not isinstance(result, dict):
				continue
			articles.append(
				NewsArticle(
					title=result.get("title") or "No title",
					link=result.get("link") or "No link",
					source=result.get("source") or result.get("displayed_link") or "Unknown source",
					date=result.get("date"),
					snippet=result.get("snippet"),
				)
			)
		return articles

	def _redact(self, value: str) -> str:
		return value.replace(self.api_key, "REDACTED_API_KEY") if self.api_key else value
