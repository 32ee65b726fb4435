import json

import pytest
import requests

from pantry_chef_core.detector import CONFIDENCE_THRESHOLD, IngredientDetector, filter_confident
from pantry_chef_core.domain_models import DetectedIngredient
from pantry_chef_core.errors import DetectionError
from pantry_chef_core.prompts import INGREDIENT_DETECTION_PROMPT

from conftest import FakeHttp, FakeOpenAI, make_response

IMAGE_URL = "https://fake.supabase.co/storage/v1/object/public/images/ingredient-photos/1.png"


def _detector(openai, http=None):
    if http is None:
        http = FakeHttp({IMAGE_URL: make_response(IMAGE_URL, content=b"png-bytes", content_type="image/png")})
    return IngredientDetector(openai, model="gpt-4o-mini", max_tokens=500, session_factory=lambda: http)


def test_threshold_is_fixed():
    assert CONFIDENCE_THRESHOLD == 0.3


def test_filter_confident_excludes_boundary():
    items = [
        DetectedIngredient(name="tomato", confidence=0.95),
        DetectedIngredient(name="onion", confidence=0.3),
        DetectedIngredient(name="garlic", confidence=0.30001),
        DetectedIngredient(name="crumb", confidence=0.0),
    ]
    assert [i.name for i in filter_confident(items)] == ["tomato", "garlic"]


def test_detect_sends_image_and_filters():
    reply = "I can see these:\n" + json.dumps(
        [
            {"name": "tomato", "confidence": 0.95},
            {"name": "red onion", "confidence": 0.87},
            {"name": "shadow", "confidence": 0.2},
            {"name": "maybe basil", "confidence": 0.3},
        ]
    )
    openai = FakeOpenAI(reply)

    ingredients = _detector(openai).detect(IMAGE_URL)

    assert [(i.name, i.confidence) for i in ingredients] == [("tomato", 0.95), ("red onion", 0.87)]

    call = openai.calls[0]
    assert call["model"] == "gpt-4o-mini"
    assert call["max_tokens"] == 500
    content = call["messages"][-1]["content"]
    assert content[0]["image_url"]["url"] == "data:image/png;base64,cG5nLWJ5dGVz"
    assert content[1]["text"] == INGREDIENT_DETECTION_PROMPT


def test_detect_bad_url_is_generic_failure_and_skips_model():
    openai = FakeOpenAI("[]")

    with pytest.raises(DetectionError) as excinfo:
        _detector(openai, FakeHttp()).detect("http://bad.example/404.jpg")

    assert str(excinfo.value) == "Failed to detect ingredients"
    assert isinstance(excinfo.value.__cause__, requests.HTTPError)
    assert openai.calls == []


def test_detect_network_error():
    http = FakeHttp(error=requests.ConnectionError("dns failure"))
    with pytest.raises(DetectionError):
        _detector(FakeOpenAI("[]"), http).detect(IMAGE_URL)


@pytest.mark.parametrize(
    "reply",
    [
        "Sorry, I cannot identify anything.",
        '[{"name": "tomato", "confidence": ]',
        '[{"label": "tomato"}]',
        "",
        None,
    ],
)
def test_detect_unparseable_reply(reply):
    with pytest.raises(DetectionError):
        _detector(FakeOpenAI(reply)).detect(IMAGE_URL)


def test_detect_model_error_is_collapsed():
    with pytest.raises(DetectionError):
        _detector(FakeOpenAI(RuntimeError("rate limited"))).detect(IMAGE_URL)


def test_each_detection_uses_its_own_session():
    sessions = []

    def new_session():
        http = FakeHttp({IMAGE_URL: make_response(IMAGE_URL, content=b"png-bytes", content_type="image/png")})
        sessions.append(http)
        return http

    detector = IngredientDetector(FakeOpenAI("[]"), model="m", session_factory=new_session)
    detector.detect(IMAGE_URL)
    detector.detect(IMAGE_URL)

    assert len(sessions) == 2
    assert [(s.opened, s.closed) for s in sessions] == [(1, 1), (1, 1)]


def test_session_closed_when_fetch_fails():
    http = FakeHttp(error=requests.ConnectionError("reset"))
    with pytest.raises(DetectionError):
        _detector(FakeOpenAI("[]"), http).detect(IMAGE_URL)
    assert http.closed == 1
