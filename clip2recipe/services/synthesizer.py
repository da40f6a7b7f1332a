"""
Heuristic recipe synthesis.

Turns the free text around a cooking video (its description and caption
transcript) into a structured Recipe. Everything here is a pure function of
its string inputs; the patterns live in module-level tables so each rule can
be exercised on its own.
"""
from __future__ import annotations

import re
from enum import Enum
from fractions import Fraction
from typing import Callable, Optional

from clip2recipe.app.domain.models import Ingredient, Number, Recipe, RecipeTime, Step
from clip2recipe.services.text import normalize_whitespace

DEFAULT_TITLE = "Recipe"
DEFAULT_SERVINGS = 4
MAX_INGREDIENTS = 50
MAX_STEPS = 12
REVIEW_SOURCE_STEP = "Review ingredients and steps from the video."
FOLLOW_VIDEO_STEP = "Follow the video steps."

# =============================================================================
# Pattern table
# =============================================================================
INGREDIENTS_HEADER = re.compile(r"^(ingredients|ingredientes)\b", re.IGNORECASE)
INSTRUCTIONS_HEADER = re.compile(
    r"^(instructions|method|directions|instrucciones|preparaci[oó]n|elaboraci[oó]n)\b",
    re.IGNORECASE,
)
SEPARATOR_LINE = re.compile(r"^\s*-{2,}\s*$")
BULLET_PREFIX = re.compile(r"^[\-•*]\s*")
QUANTITY_LINE = re.compile(
    r"^(?P<qty>\d+\s+\d+/\d+|\d+/\d+|\d+(?:\.\d+)?)\s*(?P<rest>.+)$"
)
UNIT_AND_ITEM = re.compile(r"^(?P<unit>[^\W\d_]+\.?)\s+(?P<item>.+)$")

UNITS = frozenset(
    {
        # volume
        "c", "cup", "cups", "tbsp", "tbsps", "tbs", "tablespoon", "tablespoons",
        "tsp", "tsps", "teaspoon", "teaspoons", "ml", "l", "dl", "cl", "liter",
        "liters", "litre", "litres", "pint", "pints", "pt", "quart", "quarts",
        "qt", "gallon", "gallons", "fl",
        # weight
        "g", "gr", "gram", "grams", "kg", "kilogram", "kilograms", "mg", "oz",
        "ounce", "ounces", "lb", "lbs", "pound", "pounds",
        # counts and loose measures
        "pinch", "pinches", "dash", "dashes", "clove", "cloves", "can", "cans",
        "stick", "sticks", "slice", "slices", "piece", "pieces", "sprig",
        "sprigs", "bunch", "bunches", "handful", "handfuls", "package",
        "packages", "pkg",
        # spanish
        "taza", "tazas", "cucharada", "cucharadas", "cucharadita", "cucharaditas",
        "cda", "cdas", "cdta", "cdtas", "gramos", "kilo", "kilos", "litro",
        "litros", "pizca", "pizcas", "diente", "dientes", "lata", "latas",
        "unidad", "unidades", "rebanada", "rebanadas", "sobre", "sobres",
    }
)

CUE_WORDS = (
    "add", "mix", "stir", "combine", "cook", "bake", "boil", "simmer", "fry",
    "heat", "season", "chop", "slice", "blend", "pour", "spread", "press",
    "marinate", "assemble", "serve",
)
# word-initial so "stirring" counts and "preheat" does not
CUE_PATTERN = re.compile(r"\b(?:" + "|".join(CUE_WORDS) + r")", re.IGNORECASE)
SENTENCE_BOUNDARY = re.compile(r"(?<=[.!?])\s+")
STEP_NUMBER_PREFIX = re.compile(r"^\d+[:.)]\s*")
TIME_HINT = re.compile(
    r"\b\d+(?:\s*(?:-|to)\s*\d+)?\s*(?:minutes?|mins?|hours?|hrs?|seconds?|secs?)\b",
    re.IGNORECASE,
)


# =============================================================================
# Ingredients
# =============================================================================
class LineKind(str, Enum):
    SKIP = "skip"
    STOP = "stop"
    INGREDIENT = "ingredient"


def _has_letter(line: str) -> bool:
    return any(ch.isalpha() for ch in line)


# Checked in order; first match wins.
LINE_RULES: tuple[tuple[Callable[[str], bool], LineKind], ...] = (
    (lambda line: bool(SEPARATOR_LINE.match(line)), LineKind.SKIP),
    (lambda line: bool(INSTRUCTIONS_HEADER.match(line)), LineKind.STOP),
    (lambda line: not _has_letter(line), LineKind.SKIP),
)


def classify_line(line: str) -> LineKind:
    for predicate, kind in LINE_RULES:
        if predicate(line):
            return kind
    return LineKind.INGREDIENT


def parse_quantity(raw: str) -> Number:
    """Parse ``2``, ``1.5``, ``1/2`` or ``1 1/2``; integral values stay ints."""
    total = sum((Fraction(part) for part in raw.split()), Fraction(0))
    if total.denominator == 1:
        return int(total)
    return float(total)


def parse_ingredient_line(line: str) -> Ingredient:
    text = BULLET_PREFIX.sub("", line.strip(), count=1)
    match = QUANTITY_LINE.match(text)
    if not match:
        return Ingredient(item=text)

    try:
        quantity = parse_quantity(match.group("qty"))
    except (ZeroDivisionError, ValueError):
        return Ingredient(item=text)
    rest = match.group("rest").strip()
    unit_match = UNIT_AND_ITEM.match(rest)
    if unit_match and unit_match.group("unit").rstrip(".").lower() in UNITS:
        return Ingredient(
            item=unit_match.group("item").strip(),
            quantity=quantity,
            unit=unit_match.group("unit"),
        )
    return Ingredient(item=rest, quantity=quantity)


def _candidate_lines(description: str) -> list[str]:
    lines = [line.strip() for line in (description or "").splitlines()]
    lines = [line for line in lines if line]
    for idx, line in enumerate(lines):
        if INGREDIENTS_HEADER.match(line):
            return lines[idx + 1:]
    return lines


def extract_ingredients(description: str) -> list[Ingredient]:
    items: list[Ingredient] = []
    for line in _candidate_lines(description):
        kind = classify_line(line)
        if kind is LineKind.STOP:
            break
        if kind is LineKind.SKIP:
            continue
        items.append(parse_ingredient_line(line))
        if len(items) >= MAX_INGREDIENTS:
            break
    return items


# =============================================================================
# Steps
# =============================================================================
def split_sentences(text: str) -> list[str]:
    normalized = normalize_whitespace(text or "")
    if not normalized:
        return []
    return [s.strip() for s in SENTENCE_BOUNDARY.split(normalized) if s.strip()]


def has_cue(sentence: str) -> bool:
    return bool(CUE_PATTERN.search(sentence))


def _strip_number_prefix(sentence: str) -> str:
    return STEP_NUMBER_PREFIX.sub("", sentence, count=1)


def _capitalize_first(sentence: str) -> str:
    return sentence[:1].upper() + sentence[1:]


STEP_CLEANUPS: tuple[Callable[[str], str], ...] = (_strip_number_prefix, _capitalize_first)


def clean_step(sentence: str) -> str:
    for cleanup in STEP_CLEANUPS:
        sentence = cleanup(sentence)
    return sentence


def extract_step_texts(transcript: str, description: str = "") -> list[str]:
    source = transcript if (transcript or "").strip() else description
    if not (source or "").strip():
        return [REVIEW_SOURCE_STEP]

    sentences = split_sentences(source)
    picked: list[str] = []
    for sentence in sentences:
        if has_cue(sentence):
            picked.append(clean_step(sentence))
        if len(picked) >= MAX_STEPS:
            break

    if not picked:
        picked.append(sentences[0] if sentences else FOLLOW_VIDEO_STEP)
    return picked


def find_time_hint(text: str) -> Optional[str]:
    match = TIME_HINT.search(text)
    return match.group(0) if match else None


def number_steps(texts: list[str]) -> list[Step]:
    return [Step(n=idx, text=text, time_hint=find_time_hint(text)) for idx, text in enumerate(texts, start=1)]


# =============================================================================
# Assembly
# =============================================================================
def understand(description: str, transcript: str) -> tuple[list[Ingredient], list[Step]]:
    """Parse ingredients from the description and steps from the transcript."""
    return extract_ingredients(description), number_steps(extract_step_texts(transcript, description))


def assemble(title: str, ingredients: list[Ingredient], steps: list[Step]) -> Recipe:
    return Recipe(
        title=(title or "").strip() or DEFAULT_TITLE,
        servings=DEFAULT_SERVINGS,
        time=RecipeTime(),
        ingredients=tuple(ingredients),
        steps=tuple(steps),
    )


def synthesize(title: str, description: str, transcript: str) -> Recipe:
    ingredients, steps = understand(description, transcript)
    return assemble(title, ingredients, steps)


def check_recipe(recipe: Recipe) -> None:
    """Raise ValueError if ``recipe`` breaks a structural invariant."""
    if not recipe.title:
        raise ValueError("recipe title is empty")
    if recipe.servings < 1:
        raise ValueError(f"invalid servings: {recipe.servings}")
    for position, step in enumerate(recipe.steps, start=1):
        if step.n != position:
            raise ValueError(f"step {step.n} found at position {position}")
    if len(recipe.ingredients) > MAX_INGREDIENTS or len(recipe.steps) > MAX_STEPS:
        raise ValueError("recipe exceeds ingredient or step limits")


def fallback_recipe(message: str) -> Recipe:
    """Recipe-shaped placeholder whose only step carries ``message``."""
    return Recipe(title=DEFAULT_TITLE, servings=2, steps=(Step(n=1, text=message),))
