from __future__ import annotations

from clip2recipe.app.domain.models import Ingredient, Recipe, Step


def format_quantity(quantity: int | float | None) -> str:
    if quantity is None:
        return ""
    if isinstance(quantity, float) and quantity.is_integer():
        return str(int(quantity))
    return str(quantity)


def format_ingredient(ingredient: Ingredient) -> str:
    parts = [format_quantity(ingredient.quantity), ingredient.unit or "", ingredient.item]
    return "- " + " ".join(p for p in parts if p)


def format_step(step: Step) -> str:
    return f"{step.n}. {step.text}"


def _ingredient_block(recipe: Recipe) -> str:
    return "\n".join(format_ingredient(i) for i in recipe.ingredients)


def _step_block(recipe: Recipe) -> str:
    return "\n".join(format_step(s) for s in recipe.steps)


def to_markdown(recipe: Recipe) -> str:
    return (
        f"# {recipe.title}\n\n"
        f"**Servings:** {recipe.servings}\n\n"
        f"## Ingredients\n{_ingredient_block(recipe)}\n\n"
        f"## Instructions\n{_step_block(recipe)}\n"
    )


def to_plain_text(recipe: Recipe) -> str:
    return (
        f"{recipe.title}\n"
        f"Servings: {recipe.servings}\n\n"
        f"Ingredients\n{_ingredient_block(recipe)}\n\n"
        f"Instructions\n{_step_block(recipe)}\n"
    )
