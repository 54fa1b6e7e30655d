"""Menuplan - Data models."""

from menuplan.models.entities import (
    DAYS,
    SLOTS,
    WEEKDAYS,
    WEEKEND,
    AppState,
    Condition,
    DailyPlan,
    FlyerInfo,
    Ingredient,
    LogEntry,
    MealDetails,
    MealOption,
    Occasion,
    Offer,
    Person,
    PersonPlanRequest,
    RecipeCacheItem,
    RecipeReference,
    Season,
    SlotType,
    SyncState,
    SyncStatus,
    UserProfile,
    WeeklyPlan,
)

__all__ = [
    "DAYS",
    "SLOTS",
    "WEEKDAYS",
    "WEEKEND",
    "AppState",
    "Condition",
    "DailyPlan",
    "FlyerInfo",
    "Ingredient",
    "LogEntry",
    "MealDetails",
    "MealOption",
    "Occasion",
    "Offer",
    "Person",
    "PersonPlanRequest",
    "RecipeCacheItem",
    "RecipeReference",
    "Season",
    "SlotType",
    "SyncState",
    "SyncStatus",
    "UserProfile",
    "WeeklyPlan",
]
