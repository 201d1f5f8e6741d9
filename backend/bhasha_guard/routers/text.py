from __future__ import annotations
from fastapi import APIRouter, Depends
from pydantic import BaseModel
from typing import List
from ..classifiers import LanguageDetector
from ..correction import CorrectionEngine
from ..dependencies import build_article_checker, build_translator, get_completion_client, get_extractor
from ..domain import to_correction_items
from ..extraction import ContentExtractor
from ..gemini_client import CompletionClient
from ..schemas import CorrectionItem, CorrectionResult, LanguageCode, LanguageDetectionOutput

router = APIRouter(tags=["text"])


class CorrectRequest(BaseModel):
	text: str
	language: LanguageCode


class TextRequest(BaseModel):
	text: str


class EnglishSpellingResponse(BaseModel):
	corrections: List[CorrectionItem]


class TranslateRequest(BaseModel):
	text: str
	target_language: LanguageCode


class TranslateUrlRequest(BaseModel):
	url: str
	target_language: LanguageCode


class TranslateResponse(BaseModel):
	converted_text: str


class ExtractRequest(BaseModel):
	url: str


class ExtractResponse(BaseModel):
	url: str
	extracted_text: str


@router.post("/correct", response_model=CorrectionResult)
async def correct(req: CorrectRequest, client: CompletionClient = Depends(get_completion_client)):
	return await CorrectionEngine(client).correct(req.text, req.language)


@router.post("/correct/english", response_model=EnglishSpellingResponse)
async def correct_english(req: TextRequest, client: CompletionClient = Depends(get_completion_client)):
	outcome = await CorrectionEngine(client).check_english_spelling(req.text)
	return EnglishSpellingResponse(corrections=to_correction_items(outcome))


@router.post("/detect-language", response_model=LanguageDetectionOutput)
async def detect_language(req: TextRequest, client: CompletionClient = Depends(get_completion_client)):
	return await LanguageDetector(client).detect(req.text)


@router.post("/translate", response_model=TranslateResponse)
async def translate(req: TranslateRequest, client: CompletionClient = Depends(get_completion_client)):
	text = await build_translator(client).translate_and_correct(req.text, req.target_language)
	return TranslateResponse(converted_text=text)


@router.post("/translate/url", response_model=TranslateResponse)
async def translate_url(
	req: TranslateUrlRequest,
	client: CompletionClient = Depends(get_completion_client),
	extractor: ContentExtractor = Depends(get_extractor),
):
	text = await build_article_checker(client, extractor).translate_url(req.url, req.target_language)
	return TranslateResponse(converted_text=text)


@router.post("/extract", response_model=ExtractResponse)
async def extract(req: ExtractRequest, extractor: ContentExtractor = Depends(get_extractor)):
	document = await extractor.extract(req.url)
	return ExtractResponse(url=document.source_url, extracted_text=document.text)
