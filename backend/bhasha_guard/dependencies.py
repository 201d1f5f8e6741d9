"""FastAPI dependencies that hand the shared clients and engines to the routers."""
from __future__ import annotations

from fastapi import HTTPException, Request

from .articles import ArticleChecker
from .bulk import BulkAggregator
from .classifiers import FactChecker, LanguageDetector
from .correction import CorrectionEngine
from .extraction import ContentExtractor
from .gemini_client import CompletionClient
from .news_search import NewsSearch
from .settings import settings
from .sources import PlatformSourceFetcher
from .translation import ChunkedTranslator


def get_completion_client(request: Request) -> CompletionClient:
	client = getattr(request.app.state, "completion_client", None)
	if client is None:
		raise HTTPException(status_code=503, detail="The AI service is not configured. Set GOOGLE_API_KEY.")
	return client


def get_extractor(request: Request) -> ContentExtractor:
	return request.app.state.extractor


def get_source_fetcher(request: Request) -> PlatformSourceFetcher:
	return request.app.state.source_fetcher


def get_news_search(request: Request) -> NewsSearch:
	return request.app.state.news_search


def build_translator(client: CompletionClient) -> ChunkedTranslator:
	return ChunkedTranslator(
		client,
		max_chunk_chars=settings.translation_chunk_max_chars,
		max_concurrency=settings.max_concurrent_requests,
	)


def build_article_checker(client: CompletionClient, extractor: ContentExtractor) -> ArticleChecker:
	return ArticleChecker(extractor, LanguageDetector(client), CorrectionEngine(client), build_translator(client))


def build_bulk_aggregator(client: CompletionClient, sources: PlatformSourceFetcher) -> BulkAggregator:
	return BulkAggregator(CorrectionEngine(client), sources, max_concurrency=settings.max_concurrent_requests)


def build_fact_checker(client: CompletionClient, search: NewsSearch) -> FactChecker:
	return FactChecker(client, search, build_translator(client))
