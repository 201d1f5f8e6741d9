from __future__ import annotations

import logging

import httpx
import pytest

from bhasha_guard.news_search import NewsSearch

from conftest import mock_http_client


def organic(n: int) -> dict:
	return {
		"organic_results": [
			{"title": f"t{i}", "link": f"https://example.com/{i}", "displayed_link": "example.com", "snippet": "s"}
			for i in range(n)
		]
	}


@pytest.mark.asyncio
async def test_missing_key_returns_no_results_without_a_request():
	requests = []

	def handler(request):
		requests.append(request)
		return httpx.Response(200, json=organic(1))

	assert await NewsSearch(None, mock_http_client(handler)).search("anything") == []
	assert requests == []


@pytest.mark.asyncio
async def test_results_are_capped_and_mapped():
	seen = []

	def handler(request):
		seen.append(request)
		return httpx.Response(200, json=organic(8))

	articles = await NewsSearch("secret-key", mock_http_client(handler)).search("query", hl="ml", gl="in")
	assert len(articles) == 5
	assert articles[0].source == "example.com"
	params = seen[0].url.params
	assert params["engine"] == "google"
	assert params["hl"] == "ml"
	assert params["gl"] == "in"


@pytest.mark.asyncio
async def test_error_status_is_logged_without_the_key(caplog):
	def handler(request):
		return httpx.Response(401, text="Invalid API key secret-key")

	with caplog.at_level(logging.ERROR, logger="bhasha_guard.news_search"):
		articles = await NewsSearch("secret-key", mock_http_client(handler)).search("query")
	assert articles == []
	assert "secret-key" not in caplog.text
	assert "REDACTED_API_KEY" in caplog.text


@pytest.mark.asyncio
async def test_error_payload_returns_no_results():
	def handler(request):
		return httpx.Response(200, json={"error": "Your account has run out of searches."})

	assert await NewsSearch("k", mock_http_client(handler)).search("query") == []


@pytest.mark.asyncio
async def test_network_error_returns_no_results():
	def handler(request):
		raise httpx.ConnectTimeout("timed out", request=request)

	assert await NewsSearch("k", mock_http_client(handler)).search("query") == []
