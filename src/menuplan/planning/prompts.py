"""
Menuplan - Prompt templates.

Structure:
- PLAN_PROMPT: full weekly plan for one person (chef pool)
- RECIPE_PROMPT: step-by-step recipe narrative for one meal (chef pool)

Plans are requested as raw JSON; the output is still treated as untrusted
and goes through parsing and repair.
"""

import json
from datetime import date

from menuplan.models import Offer, PersonPlanRequest, Person

MONTHS_IT = [
    "gennaio", "febbraio", "marzo", "aprile", "maggio", "giugno",
    "luglio", "agosto", "settembre", "ottobre", "novembre", "dicembre",
]

# =============================================================================
# Weekly plan
# =============================================================================

PLAN_PROMPT = """You are a strict nutrition assistant. Build a 7-day meal plan for {person} using ONLY the catalog below.

## Catalog (binding)
{catalog}

## Current offers (optional)
{offers}

## Pantry (use first when it fits)
{pantry}

## Seasonal produce ({season}) - pick from these lists
Fruit: {fruit}
Vegetables: {veg}

## Rules
1. Every slot holds the `id` of a catalog entry whose `owners` include {person} or is empty.
2. Monday-Friday: no special-occasion entries (`occasion` set). Saturday-Sunday: at most one
   "relatives" lunch and one "social" dinner in the whole weekend.
3. Dinners (every day) and weekend lunches are eaten together: prefer shared entries or dishes
   whose `variant_group` also has a version for the other person.
4. Training: {training_rule}
5. Be specific. For every meal with fruit or vegetables name ONE item from the seasonal lists in
   `specificFruit` / `specificVeg`. If a protein is on offer, put it in `specificProtein`.
   Vary carbohydrates and write substitutions in `specificCarb`.
6. For special-occasion entries write a short, friendly healthy-choice tip in `recipe`.
7. Always fill the `<slot>_details` objects with real, appetizing dish names.

## Output
Return ONLY the raw JSON object, no commentary:
{{
  "Monday": {{
    "breakfast": "id", "breakfast_details": {{"name": "...", "recipe": "...", "specificFruit": "..."}},
    "snack_am": "id", "snack_am_details": {{"name": "...", "recipe": "..."}},
    "lunch": "id", "lunch_details": {{"name": "...", "recipe": "...", "specificVeg": "...", "specificProtein": "...", "specificCarb": "..."}},
    "snack_pm": "id", "snack_pm_details": {{"name": "...", "recipe": "..."}},
    "dinner": "id", "dinner_details": {{"name": "...", "recipe": "...", "specificVeg": "...", "specificProtein": "..."}},
    "training": false
  }},
  "...": "same for Tuesday to Sunday"
}}
"""


def _training_rule(person: Person, training_days: list[str]) -> str:
    if training_days:
        days = " and ".join(training_days)
        return f"{person.value} trains ONLY on {days}; set `training` true on those days and false otherwise."
    return f"{person.value} follows no fixed training schedule; set `training` false."


def build_plan_prompt(request: PersonPlanRequest, training_days: list[str]) -> str:
    catalog = [option.model_dump(mode="json", exclude_defaults=True) for option in request.catalog]
    return PLAN_PROMPT.format(
        person=request.person.value,
        catalog=json.dumps(catalog, ensure_ascii=False),
        offers=json.dumps([offer.model_dump(exclude_none=True) for offer in request.offers], ensure_ascii=False),
        pantry=", ".join(request.pantry) or "(empty)",
        season=request.season.value,
        fruit=", ".join(request.seasonal_fruit),
        veg=", ".join(request.seasonal_veg),
        training_rule=_training_rule(request.person, training_days),
    )


# =============================================================================
# Recipe narrative
# =============================================================================

RECIPE_PROMPT = """You are a top Italian home chef who makes diet dishes delicious. Answer in Italian.
User: {person}. Month: {month}.
Current offers: {offers}

RECIPE FOR: "{name}"
INGREDIENTS AND AMOUNTS (from the diet): "{description}"

Rules:
1. Use ONLY the listed ingredients.
2. No oil during cooking.
3. Markdown: a `##` title, `###` sections for ingredients and method, bullet list for
   ingredients, numbered steps. Leave a blank line between every paragraph or step.
4. Put timings up front and a short chef's tip at the end.
5. Mark ingredients that are on offer with 🏷️.
"""

RECIPE_FALLBACK_TEXT = "Non sono riuscito a trovare una ricetta. Ricorda: niente olio in cottura!"


def build_recipe_prompt(
    name: str,
    description: str,
    person: Person,
    offers: list[Offer],
    today: date | None = None,
) -> str:
    today = today or date.today()
    return RECIPE_PROMPT.format(
        person=person.value,
        month=MONTHS_IT[today.month - 1],
        offers=json.dumps([offer.model_dump(exclude_none=True) for offer in offers], ensure_ascii=False),
        name=name,
        description=description,
    )
