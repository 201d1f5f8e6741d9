from __future__ import annotations
from fastapi import APIRouter, Depends, HTTPException
from typing import List, Optional
from pydantic import BaseModel
from ..gemini_client import CompletionClient
from ..dependencies import get_completion_client, get_news_search
from ..generation import ContentGenerator
from ..news_search import NewsSearch
from ..schemas import ContentIdeasOutput, LanguageCode, ScriptDuration, ScriptPlatform, SocialPlatform

router = APIRouter(tags=["content"])


class SummarizeRequest(BaseModel):
	text: str
	language: LanguageCode = LanguageCode.english


class SummarizeResponse(BaseModel):
	summary: str


class SocialPostRequest(BaseModel):
	text: str
	language: LanguageCode = LanguageCode.english
	platform: SocialPlatform


class SocialPostResponse(BaseModel):
	social_post: str


class OcrRequest(BaseModel):
	image_data_uri: str


class OcrResponse(BaseModel):
	extracted_text: str


class GrammarOptionsRequest(BaseModel):
	text: str


class GrammarOptionsResponse(BaseModel):
	options: List[str]


class ContentIdeasRequest(BaseModel):
	topic: str


class GenerateScriptRequest(BaseModel):
	topic: str
	platform: ScriptPlatform
	duration: ScriptDuration
	language: LanguageCode = LanguageCode.malayalam
	# source material, e.g. article text fetched from a URL
	details: Optional[str] = None


class GenerateScriptResponse(BaseModel):
	generated_script: str


class EnhanceScriptRequest(BaseModel):
	existing_script: str
	platform: ScriptPlatform
	duration: ScriptDuration
	language: LanguageCode = LanguageCode.malayalam


class EnhanceScriptResponse(BaseModel):
	enhanced_script: str


@router.post("/summarize", response_model=SummarizeResponse)
async def summarize(req: SummarizeRequest, client: CompletionClient = Depends(get_completion_client)):
	return SummarizeResponse(summary=await ContentGenerator(client).summarize(req.text, req.language))


@router.post("/social-post", response_model=SocialPostResponse)
async def social_post(req: SocialPostRequest, client: CompletionClient = Depends(get_completion_client)):
	post = await ContentGenerator(client).social_post(req.text, req.language, req.platform)
	return SocialPostResponse(social_post=post)


@router.post("/ocr", response_model=OcrResponse)
async def ocr(req: OcrRequest, client: CompletionClient = Depends(get_completion_client)):
	text = await ContentGenerator(client).extract_image_text(req.image_data_uri)
	if not text.strip():
		raise HTTPException(status_code=422, detail="No text could be extracted from the image.")
	return OcrResponse(extracted_text=text)


@router.post("/grammar-options", response_model=GrammarOptionsResponse)
async def grammar_options(req: GrammarOptionsRequest, client: CompletionClient = Depends(get_completion_client)):
	return GrammarOptionsResponse(options=await ContentGenerator(client).grammar_options(req.text))


@router.post("/content-ideas", response_model=ContentIdeasOutput)
async def content_ideas(req: ContentIdeasRequest, client: CompletionClient = Depends(get_completion_client)):
	return await ContentGenerator(client).content_ideas(req.topic)


@router.post("/script/generate", response_model=GenerateScriptResponse)
async def generate_script(
	req: GenerateScriptRequest,
	client: CompletionClient = Depends(get_completion_client),
	search: NewsSearch = Depends(get_news_search),
):
	script = await ContentGenerator(client, search).generate_script(
		req.topic, req.platform, req.duration, req.language, req.details
	)
	return GenerateScriptResponse(generated_script=script)


@router.post("/script/enhance", response_model=EnhanceScriptResponse)
async def enhance_script(req: EnhanceScriptRequest, client: CompletionClient = Depends(get_completion_client)):
	script = await ContentGenerator(client).enhance_script(req.existing_script, req.platform, req.duration, req.language)
	return EnhanceScriptResponse(enhanced_script=script)
