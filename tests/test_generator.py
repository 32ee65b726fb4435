import json

import pytest

from pantry_chef_core.errors import GenerationError, MissingInputError
from pantry_chef_core.generator import RecipeGenerator
from pantry_chef_core.domain_models import RECIPE_CATEGORIES
from pantry_chef_core.prompts import RECIPE_SYSTEM_PROMPT, build_recipe_user_prompt

from conftest import FakeOpenAI

RECIPES = [
    {
        "title": "Tomato Omelette",
        "description": "Fluffy eggs",
        "ingredients": ["3 eggs", "1 tomato"],
        "steps": ["Beat", "Cook"],
        "category": "main dish",
        "estimatedTime": "15 minutes",
        "servings": 2,
    },
    {
        "title": "Shakshuka",
        "description": "Eggs in tomato sauce",
        "ingredients": ["4 eggs", "3 tomatoes", "1 onion"],
        "steps": ["Saute onion", "Add tomatoes", "Crack eggs", "Cover"],
        "category": "main dish",
        "estimatedTime": "30 minutes",
        "servings": 3,
    },
]


def test_generate_builds_prompts_and_parses():
    openai = FakeOpenAI("Here are some ideas:\n" + json.dumps(RECIPES))
    generator = RecipeGenerator(openai, model="gpt-4.1-mini", max_tokens=1500)

    recipes = generator.generate(["eggs", "tomato", "onion"])

    assert [r.title for r in recipes] == ["Tomato Omelette", "Shakshuka"]
    assert recipes[1].steps == ["Saute onion", "Add tomatoes", "Crack eggs", "Cover"]
    assert recipes[1].estimated_time == "30 minutes"

    call = openai.calls[0]
    assert call["messages"][0] == {"role": "system", "content": RECIPE_SYSTEM_PROMPT}
    assert "eggs, tomato, onion" in call["messages"][1]["content"]
    assert '"estimatedTime"' in call["messages"][1]["content"]
    assert "exactly 3" in RECIPE_SYSTEM_PROMPT
    assert "pantry staples" in RECIPE_SYSTEM_PROMPT


def test_generate_does_not_enforce_recipe_count():
    openai = FakeOpenAI(json.dumps(RECIPES[:1]))
    assert len(RecipeGenerator(openai, model="m").generate(["eggs"])) == 1


def test_generate_without_array_fails():
    generator = RecipeGenerator(FakeOpenAI("I need more ingredients."), model="m")
    with pytest.raises(GenerationError) as excinfo:
        generator.generate(["eggs"])
    assert str(excinfo.value) == "Failed to generate recipes"


def test_generate_missing_fields_fails_whole_batch():
    broken = [dict(RECIPES[0]), {"title": "Half a recipe"}]
    generator = RecipeGenerator(FakeOpenAI(json.dumps(broken)), model="m")
    with pytest.raises(GenerationError):
        generator.generate(["eggs"])


def test_generate_requires_ingredients():
    openai = FakeOpenAI("[]")
    with pytest.raises(MissingInputError):
        RecipeGenerator(openai, model="m").generate(["  ", ""])
    assert openai.calls == []


def test_user_prompt_offers_every_category():
    prompt = build_recipe_user_prompt(["eggs", "tomato"])
    assert prompt.startswith("Create recipes using these ingredients: eggs, tomato")
    assert '"category": "' + "|".join(RECIPE_CATEGORIES) + '"' in prompt
