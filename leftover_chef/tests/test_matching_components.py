from leftover_chef.matching.config import DEFAULT_DIETARY_EXCLUSIONS
from leftover_chef.matching.filters import excluded_tokens, is_excluded_by_diet, passes
from leftover_chef.matching.matcher import match_count, matched_tokens
from leftover_chef.matching.models import ANY_DIFFICULTY, Difficulty, MatchQuery, MatchResult, Recipe
from leftover_chef.matching.normalize import normalize_token, normalize_tokens
from leftover_chef.matching.ranker import rank


def _recipe(recipe_id="r-1", tokens=("rice", "eggs"), difficulty="Easy", minutes=15, rating=4.0):
    return Recipe(
        id=recipe_id,
        title=f"Recipe {recipe_id}",
        required_tokens=tokens,
        difficulty=difficulty,
        prep_time_minutes=minutes,
        rating=rating,
    )


def _result(recipe, count):
    return MatchResult(recipe=recipe, match_count=count)


# ── Normalizer ───────────────────────────────────────────────────────────


def test_normalize_token_lowercases_and_trims():
    assert normalize_token("  Bell Peppers \n") == "bell peppers"


def test_normalize_token_is_idempotent():
    for raw in ["  Eggs", "ONION ", "", "ground beef"]:
        once = normalize_token(raw)
        assert normalize_token(once) == once


def test_normalize_tokens_drops_blanks_and_duplicates():
    assert normalize_tokens(["Eggs", " eggs", "", "   ", "Rice"]) == ("eggs", "rice")


def test_recipe_normalizes_required_tokens():
    recipe = _recipe(tokens=(" Rice", "EGGS", "rice"))
    assert recipe.required_tokens == ("rice", "eggs")


def test_recipe_accepts_lowercase_difficulty():
    assert _recipe(difficulty="medium").difficulty == Difficulty.medium


# ── Matcher ──────────────────────────────────────────────────────────────


def test_user_token_containing_required_token_matches():
    recipe = _recipe(tokens=("onion", "garlic"))
    assert matched_tokens(recipe, ("onions",)) == ("onion",)


def test_required_token_containing_user_token_matches():
    recipe = _recipe(tokens=("bell peppers", "rice"))
    assert matched_tokens(recipe, ("peppers",)) == ("bell peppers",)


def test_match_count_counts_required_tokens_not_user_tokens():
    recipe = _recipe(tokens=("rice", "eggs", "onion"))
    # two user tokens hit the same required token once
    assert match_count(recipe, ("onion", "onions")) == 1
    assert match_count(recipe, ("rice", "eggs", "onion")) == 3


def test_no_overlap_gives_zero():
    assert match_count(_recipe(tokens=("rice", "eggs")), ("tofu",)) == 0


def test_recipe_without_tokens_never_matches():
    recipe = _recipe(tokens=())
    assert match_count(recipe, ("rice", "eggs")) == 0


# ── Filters ──────────────────────────────────────────────────────────────


def test_duration_ceiling_is_inclusive():
    recipe = _recipe(minutes=20)
    assert passes(recipe, MatchQuery(user_tokens=("rice",), max_prep_time_minutes=20))
    assert not passes(recipe, MatchQuery(user_tokens=("rice",), max_prep_time_minutes=19))


def test_difficulty_is_exact_not_a_ceiling():
    recipe = _recipe(difficulty="Easy")
    assert passes(recipe, MatchQuery(user_tokens=("rice",), difficulty=Difficulty.easy))
    assert not passes(recipe, MatchQuery(user_tokens=("rice",), difficulty=Difficulty.medium))


def test_any_or_absent_difficulty_passes():
    recipe = _recipe(difficulty="Hard")
    assert passes(recipe, MatchQuery(user_tokens=("rice",), difficulty=ANY_DIFFICULTY))
    assert passes(recipe, MatchQuery(user_tokens=("rice",)))


def test_vegan_excludes_vegetarian_tokens_too():
    vegan = excluded_tokens(["vegan"], DEFAULT_DIETARY_EXCLUSIONS)
    vegetarian = excluded_tokens(["Vegetarian"], DEFAULT_DIETARY_EXCLUSIONS)
    assert vegetarian < vegan
    assert {"cheese", "eggs"} <= vegan


def test_dietary_exclusion_is_exact_token_match():
    excluded = excluded_tokens(["vegan"], DEFAULT_DIETARY_EXCLUSIONS)
    assert is_excluded_by_diet(_recipe(tokens=("eggs", "rice")), excluded)
    assert not is_excluded_by_diet(_recipe(tokens=("eggplant", "rice")), excluded)


def test_dietary_filter_rejects_recipe():
    excluded = excluded_tokens(["vegetarian"], DEFAULT_DIETARY_EXCLUSIONS)
    recipe = _recipe(tokens=("chicken", "rice"))
    assert not passes(recipe, MatchQuery(user_tokens=("rice",)), excluded)


# ── Ranker ───────────────────────────────────────────────────────────────


def test_rank_prefers_match_count_over_rating():
    weak = _result(_recipe("a", rating=5.0), 1)
    strong = _result(_recipe("b", rating=1.0), 2)
    assert [r.recipe.id for r in rank([weak, strong])] == ["b", "a"]


def test_rank_breaks_count_ties_by_rating():
    low = _result(_recipe("a", rating=4.5), 1)
    high = _result(_recipe("b", rating=4.6), 1)
    assert [r.recipe.id for r in rank([low, high])] == ["b", "a"]


def test_rank_treats_missing_rating_as_lowest():
    unrated = _result(_recipe("a", rating=None), 1)
    rated = _result(_recipe("b", rating=0.1), 1)
    assert [r.recipe.id for r in rank([unrated, rated])] == ["b", "a"]


def test_rank_breaks_full_ties_by_id():
    results = [_result(_recipe(i, rating=4.0), 1) for i in ("c", "a", "b")]
    assert [r.recipe.id for r in rank(results)] == ["a", "b", "c"]
    assert [r.recipe.id for r in rank(reversed(results))] == ["a", "b", "c"]


def test_rank_of_nothing_is_empty():
    assert rank([]) == ()
