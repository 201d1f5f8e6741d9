"""Fan-out spelling/grammar checks over many social media URLs.

Every URL is handled by its own guarded task; a failure anywhere in one URL's
fetch or check becomes a ``Fetch Error`` row for that URL only.
"""
from __future__ import annotations

import asyncio
import logging
from typing import List, Optional

from .correction import CorrectionEngine
from .exceptions import BhashaGuardError, FetchError
from .prompts import require_supported_language
from .schemas import BulkCheckResult, BulkStatus, LanguageCode, Platform
from .sources import PlatformSourceFetcher

logger = logging.getLogger(__name__)

NO_ERRORS_MESSAGE = "No errors found."
EMPTY_URL_MESSAGE = "URL is empty."


class BulkAggregator:
	def __init__(
		self,
		engine: CorrectionEngine,
		sources: PlatformSourceFetcher,
		*,
		max_concurrency: Optional[int] = None,
	) -> None:
		self.engine = engine
		self.sources = sources
		self.max_concurrency = max_concurrency

	async def bulk_check(self, urls: List[str], language: LanguageCode, platform: Platform) -> List[BulkCheckResult]:
		language = require_supported_language(language)
		platform = Platform(platform)
		semaphore = asyncio.Semaphore(self.max_concurrency) if self.max_concurrency else None

		async def limited(url: str) -> BulkCheckResult:
			if semaphore is None:
				return await self._check_url(url, language, platform)
			async with semaphore:
				return await self._check_url(url, language, platform)

		gathered = await asyncio.gather(*[limited(url) for url in urls], return_exceptions=True)
		results: List[BulkCheckResult] = []
		for url, result in zip(urls, gathered):
			if isinstance(result, BaseException):
				logger.error("Unexpected error checking %s: %r", url, result)
				results.append(
					BulkCheckResult(url=url, title=None, status=BulkStatus.fetch_error, details=f"Unexpected error: {result}")
				)
			else:
				results.append(result)
		logger.info(
			"Bulk %s check finished: %d urls, %d with errors, %d failed",
			platform.value,
			len(results),
			sum(1 for r in results if r.status is BulkStatus.errors_found),
			sum(1 for r in results if r.status is BulkStatus.fetch_error),
		)
		return results

	async def _check_url(self, url: str, language: LanguageCode, platform: Platform) -> BulkCheckResult:
		if not url.strip():
			return BulkCheckResult(url=url, title=None, status=BulkStatus.fetch_error, details=EMPTY_URL_MESSAGE)
		try:
			content = await self.sources.fetch(url, platform)
		except FetchError as err:
			logger.warning("Could not fetch %s: %s", url, err)
			return BulkCheckResult(url=url, title=None, status=BulkStatus.fetch_error, details=str(err))

		try:
			corrections = await self.engine.collect_corrections(content, language)
		except BhashaGuardError as err:
			logger.error("Check failed for %s: %s", url, err)
			return BulkCheckResult(
				url=url,
				title=content,
				status=BulkStatus.fetch_error,
				details=str(err) or f"Failed to perform check in {language.value}.",
			)

		if corrections:
			return BulkCheckResult(url=url, title=content, status=BulkStatus.errors_found, details=corrections)
		return BulkCheckResult(url=url, title=content, status=BulkStatus.ok, details=NO_ERRORS_MESSAGE)
