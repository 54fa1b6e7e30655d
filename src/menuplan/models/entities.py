"""
Menuplan - Data Models.

These models describe the persisted state document and the structures
exchanged between the generation pipeline and the API:
- Catalog entries (MealOption) - static configuration
- Plans (DailyPlan / WeeklyPlan) - one per person
- Offers, flyers, recipe cache and the sync status record
"""

from datetime import datetime
from enum import Enum
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


# =============================================================================
# Enumerations
# =============================================================================


class Person(str, Enum):
    """The two members of the household."""

    MICHAEL = "Michael"
    JESSICA = "Jessica"

    @property
    def marker(self) -> str:
        """Id marker used by catalogs that encode the owner in the id."""
        return "m" if self is Person.MICHAEL else "j"

    @property
    def other(self) -> "Person":
        return Person.JESSICA if self is Person.MICHAEL else Person.MICHAEL


class SlotType(str, Enum):
    """The five meal positions of a day, in display order."""

    BREAKFAST = "breakfast"
    SNACK_AM = "snack_am"
    LUNCH = "lunch"
    SNACK_PM = "snack_pm"
    DINNER = "dinner"


class Condition(str, Enum):
    TRAINING = "training"
    REST = "rest"
    ALWAYS = "always"


class Season(str, Enum):
    WINTER = "winter"
    SPRING = "spring"
    SUMMER = "summer"
    AUTUMN = "autumn"
    ALWAYS = "always"


class Occasion(str, Enum):
    """Special-occasion entries, allowed on weekends only."""

    RELATIVES = "relatives"
    SOCIAL = "social"


class SyncState(str, Enum):
    IDLE = "idle"
    RUNNING = "running"
    SUCCESS = "success"
    ERROR = "error"


DAYS: list[str] = ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"]
WEEKDAYS: list[str] = DAYS[:5]
WEEKEND: list[str] = DAYS[5:]
SLOTS: list[SlotType] = list(SlotType)


# =============================================================================
# Catalog
# =============================================================================


class Ingredient(BaseModel):
    name: str
    amount: float = 0
    unit: str = ""


class MealOption(BaseModel):
    """
    Immutable catalog entry.

    `owners` empty means the option is shared by both persons.
    `variant_group` ties together per-person portion variants of one dish.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str
    name: str
    description: str = ""
    ingredients: tuple[Ingredient, ...] = ()
    type: SlotType
    condition: Condition = Condition.ALWAYS
    season: Season = Season.ALWAYS
    owners: tuple[Person, ...] = ()
    variant_group: str | None = None
    occasion: Occasion | None = None

    def is_owned_by(self, person: Person) -> bool:
        return not self.owners or person in self.owners

    @property
    def is_shared(self) -> bool:
        return not self.owners or set(self.owners) == set(Person)

    def fits(self, training: bool, season: Season) -> bool:
        """True when the option is allowed on a day with this training flag and season."""
        if self.season not in (Season.ALWAYS, season):
            return False
        if self.condition == Condition.TRAINING and not training:
            return False
        if self.condition == Condition.REST and training:
            return False
        return True


# =============================================================================
# Plans
# =============================================================================


class MealDetails(BaseModel):
    """Display side-record attached to a planned slot."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    name: str = ""
    recipe: str = ""
    recipe_url: str | None = None
    image_url: str | None = None
    specific_fruit: str | None = None
    specific_veg: str | None = None
    specific_protein: str | None = None
    specific_carb: str | None = None
    eaten: bool = False
    rating: Literal["up", "down"] | None = None
    photo_url: str | None = None


class DailyPlan(BaseModel):
    """One day of a person's plan: five slot ids plus their details."""

    model_config = ConfigDict(populate_by_name=True)

    breakfast: str = ""
    breakfast_details: MealDetails | None = None
    snack_am: str = ""
    snack_am_details: MealDetails | None = None
    lunch: str = ""
    lunch_details: MealDetails | None = None
    snack_pm: str = ""
    snack_pm_details: MealDetails | None = None
    dinner: str = ""
    dinner_details: MealDetails | None = None
    training: bool = False

    def get_slot(self, slot: SlotType) -> str:
        return getattr(self, slot.value)

    def set_slot(self, slot: SlotType, meal_id: str) -> None:
        setattr(self, slot.value, meal_id)

    def get_details(self, slot: SlotType) -> MealDetails | None:
        return getattr(self, f"{slot.value}_details")

    def set_details(self, slot: SlotType, details: MealDetails | None) -> None:
        setattr(self, f"{slot.value}_details", details)


WeeklyPlan = dict[str, DailyPlan]


class PersonPlanRequest(BaseModel):
    """Unit of work for generating one person's week."""

    person: Person
    catalog: list[MealOption]
    pantry: list[str] = Field(default_factory=list)
    offers: list["Offer"] = Field(default_factory=list)
    season: Season
    seasonal_fruit: list[str] = Field(default_factory=list)
    seasonal_veg: list[str] = Field(default_factory=list)


# =============================================================================
# Offers & recipes
# =============================================================================


class Offer(BaseModel):
    """A promotional offer extracted from a flyer. Field names follow the flyer language."""

    model_config = ConfigDict(extra="ignore")

    categoria: str = ""
    prodotto: str
    prezzo: str = ""
    unita: str = ""
    note: str | None = None
    sconto: str | None = None
    negozio: str | None = None

    @field_validator("prezzo", "unita", "categoria", mode="before")
    @classmethod
    def _stringify(cls, value: Any) -> str:
        return "" if value is None else str(value)


class FlyerInfo(BaseModel):
    url: str
    last_sync: str = ""
    label: str | None = None
    store_id: str | None = None


class RecipeCacheItem(BaseModel):
    url: str
    image_url: str | None = None
    last_checked: str = Field(default_factory=lambda: datetime.now().isoformat())


class RecipeReference(BaseModel):
    """Result of a live recipe search."""

    url: str
    title: str = ""
    image_url: str | None = None


# =============================================================================
# Application state
# =============================================================================


class SyncStatus(BaseModel):
    """Persisted status of the background offer sync job."""

    state: SyncState = SyncState.IDLE
    message: str = ""
    last_update: float = 0.0


class LogEntry(BaseModel):
    date: str
    weight: float | None = None
    notes: str | None = None
    completed: bool | None = None


class UserProfile(BaseModel):
    model_config = ConfigDict(extra="allow")

    start_weight: float = 0
    current_weight: float = 0
    target_weight: float = 0
    height: float = 0
    plan: WeeklyPlan = Field(default_factory=dict)
    logs: list[LogEntry] = Field(default_factory=list)


class AppState(BaseModel):
    """
    The whole persisted document.

    Read and written wholesale; unknown keys are preserved so that data
    owned by other parts of the application survives a round trip.
    """

    model_config = ConfigDict(extra="allow")

    current_user: Person = Person.MICHAEL
    users: dict[Person, UserProfile] = Field(default_factory=dict)
    pantry_items: list[str] = Field(default_factory=list)
    flyers: list[FlyerInfo] = Field(default_factory=list)
    active_offers: list[Offer] = Field(default_factory=list)
    last_offer_update: str | None = None
    recipes: dict[str, RecipeCacheItem] = Field(default_factory=dict)
    sync_status: SyncStatus = Field(default_factory=SyncStatus)

    def profile(self, person: Person) -> UserProfile:
        if person not in self.users:
            self.users[person] = UserProfile()
        return self.users[person]


PersonPlanRequest.model_rebuild()
