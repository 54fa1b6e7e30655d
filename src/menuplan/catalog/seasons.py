"""Season helpers and the seasonal produce lists offered to prompts."""

from datetime import date

from menuplan.models import Season

SEASONAL_PRODUCE: dict[Season, dict[str, list[str]]] = {
    Season.WINTER: {
        "fruit": ["Arance", "Mandarini", "Mele", "Pere", "Kiwi"],
        "veg": ["Broccoli", "Cavolfiore", "Finocchi", "Spinaci", "Bietole", "Radicchio"],
    },
    Season.SPRING: {
        "fruit": ["Fragole", "Ciliegie", "Nespole", "Kiwi"],
        "veg": ["Asparagi", "Carciofi", "Piselli", "Fave", "Zucchine"],
    },
    Season.SUMMER: {
        "fruit": ["Pesche", "Albicocche", "Melone", "Anguria", "Susine", "Fichi"],
        "veg": ["Pomodori", "Peperoni", "Melanzane", "Zucchine", "Cetrioli", "Fagiolini"],
    },
    Season.AUTUMN: {
        "fruit": ["Uva", "Melograno", "Mele", "Pere", "Cachi"],
        "veg": ["Zucca", "Funghi", "Cavolo Nero", "Spinaci", "Porri"],
    },
}


def current_season(today: date | None = None) -> Season:
    """Meteorological season for the given date (defaults to today)."""
    month = (today or date.today()).month
    if 3 <= month <= 5:
        return Season.SPRING
    if 6 <= month <= 8:
        return Season.SUMMER
    if 9 <= month <= 11:
        return Season.AUTUMN
    return Season.WINTER


def seasonal_fruit(season: Season) -> list[str]:
    return SEASONAL_PRODUCE.get(season, SEASONAL_PRODUCE[Season.SUMMER])["fruit"]


def seasonal_veg(season: Season) -> list[str]:
    return SEASONAL_PRODUCE.get(season, SEASONAL_PRODUCE[Season.SUMMER])["veg"]
