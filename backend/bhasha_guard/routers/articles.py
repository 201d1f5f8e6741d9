from __future__ import annotations
from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field
from typing import List
from ..dependencies import build_article_checker, build_bulk_aggregator, get_completion_client, get_extractor, get_source_fetcher
from ..extraction import ContentExtractor
from ..gemini_client import CompletionClient
from ..schemas import ArticleCheckResult, BulkCheckResult, LanguageCode, Platform
from ..sources import PlatformSourceFetcher

router = APIRouter(tags=["articles"])


class ArticleCheckRequest(BaseModel):
	url: str
	language: LanguageCode


class BulkCheckRequest(BaseModel):
	urls: List[str] = Field(min_length=1)
	language: LanguageCode


def _clean_urls(urls: List[str]) -> List[str]:
	return [url.strip() for url in urls]


@router.post("/articles/check", response_model=ArticleCheckResult)
async def check_article(
	req: ArticleCheckRequest,
	client: CompletionClient = Depends(get_completion_client),
	extractor: ContentExtractor = Depends(get_extractor),
):
	return await build_article_checker(client, extractor).check_url(req.url, req.language)


@router.post("/bulk/youtube", response_model=List[BulkCheckResult])
async def bulk_youtube(
	req: BulkCheckRequest,
	client: CompletionClient = Depends(get_completion_client),
	sources: PlatformSourceFetcher = Depends(get_source_fetcher),
):
	return await build_bulk_aggregator(client, sources).bulk_check(_clean_urls(req.urls), req.language, Platform.youtube)


@router.post("/bulk/meta", response_model=List[BulkCheckResult])
async def bulk_meta(
	req: BulkCheckRequest,
	client: CompletionClient = Depends(get_completion_client),
	sources: PlatformSourceFetcher = Depends(get_source_fetcher),
):
	return await build_bulk_aggregator(client, sources).bulk_check(_clean_urls(req.urls), req.language, Platform.meta)
