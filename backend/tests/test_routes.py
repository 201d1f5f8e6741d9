from __future__ import annotations

import httpx
import pytest

from bhasha_guard.dependencies import get_completion_client
from bhasha_guard.exceptions import ModelError
from bhasha_guard.schemas import (
	ContentIdeasOutput,
	ContentPolicyOutput,
	CorrectionItem,
	CorrectionOutput,
	EnglishSpellingOutput,
	GrammarOptionsOutput,
	ImageTextOutput,
	LanguageCode,
	LanguageDetectionOutput,
	ScriptOutput,
	SocialPostOutput,
	SummaryOutput,
	TranslationOutput,
)
from bhasha_guard.settings import settings

LONG_TEXT = "Kerala received heavy rainfall this week, and several districts remain on alert. " * 2


def test_health_reports_key_preview(api, monkeypatch):
	monkeypatch.setattr(settings, "gemini_api_key", "AIzaSyExampleKey9876")
	response = api.get("/health")
	assert response.status_code == 200
	assert response.json()["key_preview"] == "AIzaSy...9876"


def test_health_fails_with_short_key(api, monkeypatch):
	monkeypatch.setattr(settings, "gemini_api_key", "short")
	assert api.get("/health").status_code == 500


def test_correct_round_trip(api, fake_client):
	fake_client.script(
		"correct_english",
		CorrectionOutput(corrected_text="I have it.", corrections=[CorrectionItem(original="hav", corrected="have")]),
	)
	response = api.post("/correct", json={"text": "I hav it.", "language": "english"})
	assert response.status_code == 200
	assert response.json()["corrected_text"] == "I have it."
	assert response.json()["corrections"][0]["original"] == "hav"


def test_correct_rejects_other_language(api):
	response = api.post("/correct", json={"text": "hello", "language": "other"})
	assert response.status_code == 400


def test_unknown_language_fails_request_validation(api):
	assert api.post("/correct", json={"text": "hello", "language": "klingon"}).status_code == 422


def test_missing_client_gives_503(api):
	from bhasha_guard.main import app

	del app.dependency_overrides[get_completion_client]
	app.state.completion_client = None
	response = api.post("/correct", json={"text": "hello", "language": "english"})
	assert response.status_code == 503


def test_translate(api, fake_client):
	fake_client.script("translate_and_correct_chunk", TranslationOutput(converted_text="നമസ്കാരം"))
	response = api.post("/translate", json={"text": "Hello", "target_language": "malayalam"})
	assert response.json() == {"converted_text": "നമസ്കാരം"}


def test_translate_rejects_empty_text(api):
	response = api.post("/translate", json={"text": "   ", "target_language": "malayalam"})
	assert response.status_code == 400
	assert response.json()["detail"] == "Original article text cannot be empty."


def test_extract_maps_fetch_errors_to_422(api, http_routes):
	http_routes["blocked.example.com"] = lambda request: httpx.Response(403, text="nope")
	response = api.post("/extract", json={"url": "https://blocked.example.com/story"})
	assert response.status_code == 422
	assert "403" in response.json()["detail"]


def test_extract_returns_text(api, http_routes):
	body = "<html><body><article>" + "word " * 40 + "</article></body></html>"
	http_routes["news.example.com"] = lambda request: httpx.Response(200, text=body)
	response = api.post("/extract", json={"url": "https://news.example.com/story"})
	assert response.status_code == 200
	assert response.json()["extracted_text"].startswith("word word")


def test_article_language_mismatch_carries_detection(api, fake_client, http_routes):
	body = "<html><body><article>" + "ഇത് ഒരു വാർത്തയാണ്. " * 10 + "</article></body></html>"
	http_routes["news.example.com"] = lambda request: httpx.Response(200, text=body)
	fake_client.script(
		"detect_article_language",
		LanguageDetectionOutput(detected_language=LanguageCode.malayalam, is_confident=True),
	)
	response = api.post("/articles/check", json={"url": "https://news.example.com/a", "language": "hindi"})
	assert response.status_code == 400
	data = response.json()
	assert data["detected_language"] == "malayalam"
	assert data["extracted_text"].startswith("ഇത്")


def test_bulk_youtube_keeps_order_and_isolates_failures(api, fake_client, http_routes):
	def oembed(request):
		if request.url.params["url"].endswith("missing"):
			return httpx.Response(404)
		return httpx.Response(200, json={"title": "Clean title"})

	http_routes["www.youtube.com"] = oembed
	fake_client.script("check_english_spelling", EnglishSpellingOutput(errors_found=[]))
	urls = ["https://youtu.be/one", "https://youtu.be/missing", "https://youtu.be/three"]
	response = api.post("/bulk/youtube", json={"urls": urls, "language": "english"})
	assert response.status_code == 200
	data = response.json()
	assert [row["url"] for row in data] == urls
	assert [row["status"] for row in data] == ["Checked - OK", "Fetch Error", "Checked - OK"]
	assert data[1]["details"].startswith("Video not found")


def test_bulk_keeps_a_row_for_every_submitted_url(api, fake_client, http_routes):
	http_routes["www.youtube.com"] = lambda request: httpx.Response(200, json={"title": "Clean title"})
	fake_client.script("check_english_spelling", EnglishSpellingOutput(errors_found=[]))
	urls = ["https://youtu.be/one", "  ", "https://youtu.be/two"]
	response = api.post("/bulk/youtube", json={"urls": urls, "language": "english"})
	assert response.status_code == 200
	data = response.json()
	assert len(data) == 3
	assert [row["status"] for row in data] == ["Checked - OK", "Fetch Error", "Checked - OK"]
	assert data[1]["details"] == "URL is empty."


def test_article_check_survives_a_failed_english_pass(api, fake_client, http_routes):
	body = "<html><body><article>" + "ഇത് ഒരു വാർത്തയാണ്. " * 10 + "</article></body></html>"
	http_routes["news.example.com"] = lambda request: httpx.Response(200, text=body)
	fake_client.script(
		"detect_article_language",
		LanguageDetectionOutput(detected_language=LanguageCode.malayalam, is_confident=True),
	)
	fake_client.script("correct_malayalam", CorrectionOutput(corrected_text="fixed", corrections=[]))
	fake_client.script("check_english_spelling", ModelError("english pass down"))
	response = api.post("/articles/check", json={"url": "https://news.example.com/a", "language": "malayalam"})
	assert response.status_code == 200
	assert response.json()["correction"]["corrected_text"] == "fixed"
	assert response.json()["english_errors"] == []


def test_policy_content(api, fake_client):
	fake_client.script("check_content_policy", ContentPolicyOutput())
	response = api.post("/policy/content", json={"text": LONG_TEXT, "language": "english"})
	assert response.status_code == 200
	assert response.json()["no_violation_message"].startswith("✅")


def test_policy_model_error_is_502(api, fake_client):
	fake_client.script("check_content_policy", ModelError("bad"))
	response = api.post("/policy/content", json={"text": LONG_TEXT})
	assert response.status_code == 502


def test_fact_check_without_search_key_is_unverifiable(api, fake_client):
	fake_client.script("fact_check_no_results", ModelError("quota"))
	response = api.post("/fact-check", json={"statement": "The river flooded in 2018.", "language": "english"})
	assert response.status_code == 200
	data = response.json()
	assert data["evidence"] == []
	assert data["unverifiable_message"]
	assert data["confidence"] == "Low"


def test_summarize_rejects_short_text(api):
	assert api.post("/summarize", json={"text": "too short"}).status_code == 400


def test_summarize_and_social_post(api, fake_client):
	fake_client.script("summarize_text", SummaryOutput(summary="Heavy rain in Kerala."))
	fake_client.script("generate_social_post", SocialPostOutput(social_post="Stay safe! #KeralaRains"))
	assert api.post("/summarize", json={"text": LONG_TEXT}).json() == {"summary": "Heavy rain in Kerala."}
	response = api.post("/social-post", json={"text": LONG_TEXT, "platform": "Twitter"})
	assert response.json() == {"social_post": "Stay safe! #KeralaRains"}
	assert fake_client.calls[-1].temperature == 0.7


def test_ocr_with_no_text_is_an_error(api, fake_client):
	fake_client.script("extract_text_from_image", ImageTextOutput(extracted_text=""))
	response = api.post("/ocr", json={"image_data_uri": "data:image/png;base64,AAAA"})
	assert response.status_code == 422


@pytest.mark.parametrize("uri", ["not-a-data-uri", "data:image/png,AAAA"])
def test_ocr_rejects_malformed_image(api, uri):
	assert api.post("/ocr", json={"image_data_uri": uri}).status_code == 400


def test_grammar_options(api, fake_client):
	fake_client.script("get_malayalam_grammar_options", GrammarOptionsOutput(options=["ഒന്ന്", "രണ്ട്", "മൂന്ന്"]))
	response = api.post("/grammar-options", json={"text": "മഴ തുടരുന്നു"})
	assert response.status_code == 200
	assert response.json() == {"options": ["ഒന്ന്", "രണ്ട്", "മൂന്ന്"]}


def test_content_ideas(api, fake_client):
	ideas = ContentIdeasOutput(
		social_hashtags=["#a", "#b", "#c", "#d", "#e", "#f"],
		youtube_keywords=["one", "two", "three"],
	)
	fake_client.script("generate_social_content_ideas", ideas)
	response = api.post("/content-ideas", json={"topic": "Onam recipes"})
	assert response.status_code == 200
	assert response.json()["social_hashtags"][0] == "#a"
	assert api.post("/content-ideas", json={"topic": ""}).status_code == 400


def test_content_ideas_model_error_is_502(api, fake_client):
	fake_client.script("generate_social_content_ideas", ModelError("generate_social_content_ideas: output does not match schema"))
	assert api.post("/content-ideas", json={"topic": "Onam recipes"}).status_code == 502


def test_generate_script_without_search_key(api, fake_client):
	fake_client.script("generate_script", ScriptOutput(generated_script="Narrator: Hello."))
	response = api.post(
		"/script/generate",
		json={"topic": "Onam festival", "platform": "YouTube", "duration": "2min", "language": "english"},
	)
	assert response.status_code == 200
	assert response.json() == {"generated_script": "Narrator: Hello."}
	assert "Research results:\nNone." in fake_client.calls[0].render()


def test_script_routes_validate_input(api):
	bad_duration = {"topic": "Onam festival", "platform": "YouTube", "duration": "5min"}
	assert api.post("/script/generate", json=bad_duration).status_code == 422
	short_script = {"existing_script": "short", "platform": "LinkedIn", "duration": "60s"}
	assert api.post("/script/enhance", json=short_script).status_code == 400
