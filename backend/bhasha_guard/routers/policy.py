from __future__ import annotations
from fastapi import APIRouter, Depends
from pydantic import BaseModel
from ..classifiers import PolicyClassifier
from ..dependencies import build_fact_checker, get_completion_client, get_news_search
from ..gemini_client import CompletionClient
from ..generation import ContentGenerator
from ..news_search import NewsSearch
from ..schemas import ContentPolicyOutput, FactCheckResult, ImagePolicyOutput, LanguageCode, PolicyPlatform

router = APIRouter(tags=["policy"])


class ContentPolicyRequest(BaseModel):
	text: str
	language: LanguageCode = LanguageCode.english


class ImagePolicyRequest(BaseModel):
	# data:<mime>;base64,<data>
	image_data_uri: str


class RewriteRequest(BaseModel):
	original_sentence: str
	flagged_segment: str
	policy_category: str
	platform: PolicyPlatform
	language: LanguageCode = LanguageCode.english


class RewriteResponse(BaseModel):
	rewritten_sentence: str


class FactCheckRequest(BaseModel):
	statement: str
	language: LanguageCode = LanguageCode.english


@router.post("/policy/content", response_model=ContentPolicyOutput)
async def check_content_policy(req: ContentPolicyRequest, client: CompletionClient = Depends(get_completion_client)):
	return await PolicyClassifier(client).check_content(req.text, req.language)


@router.post("/policy/image", response_model=ImagePolicyOutput)
async def check_image_policy(req: ImagePolicyRequest, client: CompletionClient = Depends(get_completion_client)):
	return await PolicyClassifier(client).check_image(req.image_data_uri)


@router.post("/policy/rewrite", response_model=RewriteResponse)
async def rewrite_flagged_sentence(req: RewriteRequest, client: CompletionClient = Depends(get_completion_client)):
	sentence = await ContentGenerator(client).rewrite_sentence(
		req.original_sentence,
		req.flagged_segment,
		req.policy_category,
		req.platform,
		req.language,
	)
	return RewriteResponse(rewritten_sentence=sentence)


@router.post("/fact-check", response_model=FactCheckResult)
async def fact_check(
	req: FactCheckRequest,
	client: CompletionClient = Depends(get_completion_client),
	search: NewsSearch = Depends(get_news_search),
):
	return await build_fact_checker(client, search).check(req.statement, req.language)
