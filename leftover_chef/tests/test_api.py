from __future__ import annotations

from unittest.mock import patch

from fastapi.testclient import TestClient

from leftover_chef.app import app
from leftover_chef.catalog.saved import clear_saved
from leftover_chef.llm.groq_client import GenerationUnavailableError
from leftover_chef.matching.models import Recipe

client = TestClient(app)

TOFU_BOWL = {
    "id": "my-tofu-bowl",
    "title": "Tofu Rice Bowl",
    "required_tokens": ["tofu", "rice"],
    "difficulty": "Easy",
    "prep_time_minutes": 10,
    "rating": 5.0,
}


def _ids(body):
    return [item["recipe"]["id"] for item in body["results"]]


def test_health():
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok"}


def test_metadata():
    body = client.get("/metadata").json()
    assert body["difficulties"] == ["Easy", "Medium", "Hard"]
    assert body["dietary_restrictions"] == ["vegan", "vegetarian"]
    assert "ground beef" in body["catalog_ingredients"]
    assert "Rice" in body["common_ingredients"]


def test_list_and_get_recipes():
    resp = client.get("/recipes")
    assert resp.status_code == 200
    assert len(resp.json()) == 8

    resp = client.get("/recipes/recipe-1")
    assert resp.status_code == 200
    assert resp.json()["required_tokens"] == ["rice", "eggs", "onion", "garlic"]


def test_unknown_recipe_is_404():
    resp = client.get("/recipes/does-not-exist")
    assert resp.status_code == 404


def test_match_ranks_by_overlap_then_rating():
    resp = client.post("/recipes/match", json={"ingredients": ["Rice", "eggs"]})
    assert resp.status_code == 200
    body = resp.json()
    assert body["ingredients"] == ["rice", "eggs"]
    assert _ids(body) == ["recipe-1", "recipe-7", "recipe-5", "recipe-4"]
    assert body["total_candidates"] == 4
    first = body["results"][0]
    assert first["match_count"] == 2
    assert first["matched_ingredients"] == ["rice", "eggs"]
    assert first["missing_ingredients"] == ["onion", "garlic"]


def test_match_respects_limit():
    body = client.post("/recipes/match", json={"ingredients": ["rice", "eggs"], "limit": 2}).json()
    assert len(body["results"]) == 2
    assert body["total_candidates"] == 4


def test_match_filters_by_difficulty():
    body = client.post("/recipes/match", json={"ingredients": ["rice", "eggs"], "difficulty": "Medium"}).json()
    assert _ids(body) == ["recipe-7", "recipe-5"]
    for item in body["results"]:
        assert item["recipe"]["difficulty"] == "Medium"


def test_match_filters_by_prep_time():
    body = client.post("/recipes/match", json={"ingredients": ["rice", "eggs"], "max_prep_time": 20}).json()
    assert _ids(body) == ["recipe-1", "recipe-4"]
    for item in body["results"]:
        assert item["recipe"]["prep_time_minutes"] <= 20


def test_match_vegan_screens_out_eggs_and_cheese():
    body = client.post("/recipes/match", json={"ingredients": ["rice", "eggs"], "dietary": ["vegan"]}).json()
    assert body["results"] == []
    assert body["total_candidates"] == 0


def test_match_no_results_is_not_an_error():
    resp = client.post("/recipes/match", json={"ingredients": ["tofu"]})
    assert resp.status_code == 200
    assert resp.json()["results"] == []


def test_match_requires_ingredients():
    resp = client.post("/recipes/match", json={"ingredients": []})
    assert resp.status_code == 400
    resp = client.post("/recipes/match", json={"ingredients": ["  "]})
    assert resp.status_code == 400


def test_match_validation_rejects_bad_constraints():
    assert client.post("/recipes/match", json={"ingredients": ["rice"], "difficulty": "Expert"}).status_code == 422
    assert client.post("/recipes/match", json={"ingredients": ["rice"], "difficulty": ""}).status_code == 422
    assert client.post("/recipes/match", json={"ingredients": ["rice"], "max_prep_time": -1}).status_code == 422
    assert client.post("/recipes/match", json={"ingredients": ["rice"], "dietary": ["keto"]}).status_code == 422
    assert client.post("/recipes/match", json={"ingredients": ["rice"], "limit": 0}).status_code == 422


def test_saved_recipe_joins_snapshot_on_request():
    clear_saved()
    resp = client.post("/recipes/saved", json=TOFU_BOWL)
    assert resp.status_code == 200
    assert resp.json() == {"status": "saved", "total_saved": 1}

    body = client.post("/recipes/match", json={"ingredients": ["tofu"]}).json()
    assert body["results"] == []

    body = client.post("/recipes/match", json={"ingredients": ["tofu"], "include_saved": True}).json()
    assert _ids(body) == ["my-tofu-bowl"]

    assert client.get("/recipes/my-tofu-bowl").json()["title"] == "Tofu Rice Bowl"
    assert [r["id"] for r in client.get("/recipes/saved").json()] == ["my-tofu-bowl"]
    clear_saved()


def test_saving_duplicate_id_conflicts():
    clear_saved()
    assert client.post("/recipes/saved", json=TOFU_BOWL).status_code == 200
    assert client.post("/recipes/saved", json=TOFU_BOWL).status_code == 409
    assert client.post("/recipes/saved", json={**TOFU_BOWL, "id": "recipe-1"}).status_code == 409
    clear_saved()


def test_saving_invalid_recipe_is_rejected():
    resp = client.post("/recipes/saved", json={**TOFU_BOWL, "prep_time_minutes": 0})
    assert resp.status_code == 422


@patch("leftover_chef.app.generate_recipe")
def test_generate_returns_recipe(mock_generate):
    mock_generate.return_value = Recipe(
        id="generated-abc123",
        title="Leftover rice Creation",
        required_tokens=("rice",),
        prep_time_minutes=30,
    )
    resp = client.post("/recipes/generate", json={"ingredients": ["rice"], "dietary": ["vegan"]})
    assert resp.status_code == 200
    assert resp.json()["id"] == "generated-abc123"
    assert mock_generate.call_args.kwargs["dietary_restrictions"] == ["vegan"]


@patch("leftover_chef.app.generate_recipe", side_effect=GenerationUnavailableError("off"))
def test_generate_unavailable(mock_generate):
    resp = client.post("/recipes/generate", json={"ingredients": ["rice"]})
    assert resp.status_code == 503


def test_generate_requires_ingredients():
    resp = client.post("/recipes/generate", json={"ingredients": []})
    assert resp.status_code == 400
