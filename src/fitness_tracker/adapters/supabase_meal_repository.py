"""Supabase repository for meal records."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from supabase import Client

from fitness_tracker.domain.errors import ConflictRetryable
from fitness_tracker.domain.nutrition import (
    NUTRIENT_FIELDS,
    FoodItem,
    FoodUnit,
    MealRecord,
    MealSlot,
    NutrientProfile,
)
from fitness_tracker.services.meals import MealRepository

TABLE = "meals"


@dataclass
class SupabaseMealRepository(MealRepository):
    """Supabase implementation for meals with versioned updates."""

    client: Client

    def create_meal(self, meal: MealRecord) -> MealRecord:
        """Insert a meal row and return the stored meal."""
        response = self.client.table(TABLE).insert(_to_row(meal)).execute()
        if not response.data:
            raise RuntimeError("Failed to create meal")
        return _parse_row(response.data[0])

    def get_meal(self, meal_id: UUID) -> MealRecord | None:
        """Return a meal by id."""
        response = (
            self.client.table(TABLE)
            .select("*")
            .eq("id", str(meal_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_row(response.data[0])

    def update_meal(self, meal: MealRecord) -> MealRecord:
        """Write the meal only if the stored version still matches."""
        payload = _to_row(meal)
        payload["version"] = meal.version + 1
        response = (
            self.client.table(TABLE)
            .update(payload)
            .eq("id", str(meal.id))
            .eq("version", meal.version)
            .execute()
        )
        if not response.data:
            raise ConflictRetryable("meal", meal.id)
        return _parse_row(response.data[0])

    def list_meals(
        self, owner_id: UUID, start: datetime, end: datetime
    ) -> list[MealRecord]:
        """Return meals logged within the inclusive range."""
        response = (
            self.client.table(TABLE)
            .select("*")
            .eq("owner_id", str(owner_id))
            .gte("logged_at", start.isoformat())
            .lte("logged_at", end.isoformat())
            .execute()
        )
        return [_parse_row(row) for row in response.data or []]


def _to_row(meal: MealRecord) -> dict[str, object]:
    row: dict[str, object] = {
        "id": str(meal.id),
        "owner_id": str(meal.owner_id),
        "logged_at": meal.logged_at.isoformat(),
        "slot": meal.slot.value,
        "foods": [_food_to_json(food) for food in meal.foods],
        "micronutrient_totals": meal.micronutrient_totals,
        "notes": meal.notes,
        "version": meal.version,
    }
    for name in NUTRIENT_FIELDS:
        row[f"total_{name}"] = getattr(meal.totals, name)
    return row


def _food_to_json(food: FoodItem) -> dict[str, object]:
    return {
        "name": food.name,
        "quantity": food.quantity,
        "unit": food.unit.value,
        "per_unit": _profile_to_json(food.per_unit),
        "micronutrients": food.micronutrients,
        "totals": _profile_to_json(food.totals),
        "micronutrient_totals": food.micronutrient_totals,
        "brand": food.brand,
        "notes": food.notes,
    }


def _profile_to_json(profile: NutrientProfile) -> dict[str, float]:
    return {name: getattr(profile, name) for name in NUTRIENT_FIELDS}


def _profile_from_json(raw: object) -> NutrientProfile:
    values = raw if isinstance(raw, dict) else {}
    return NutrientProfile(
        **{name: float(values.get(name) or 0.0) for name in NUTRIENT_FIELDS}
    )


def _food_from_json(raw: dict[str, object]) -> FoodItem:
    return FoodItem(
        name=str(raw.get("name", "")),
        quantity=float(raw.get("quantity", 0.0)),
        unit=FoodUnit(raw.get("unit", FoodUnit.SERVING.value)),
        per_unit=_profile_from_json(raw.get("per_unit")),
        micronutrients=_float_map(raw.get("micronutrients")),
        totals=_profile_from_json(raw.get("totals")),
        micronutrient_totals=_float_map(raw.get("micronutrient_totals")),
        brand=raw.get("brand"),
        notes=raw.get("notes"),
    )


def _float_map(raw: object) -> dict[str, float]:
    if not isinstance(raw, dict):
        return {}
    return {str(key): float(value) for key, value in raw.items()}


def _parse_row(row: dict[str, object]) -> MealRecord:
    return MealRecord(
        id=UUID(row["id"]),
        owner_id=UUID(row["owner_id"]),
        logged_at=datetime.fromisoformat(row["logged_at"]),
        slot=MealSlot(row["slot"]),
        foods=tuple(_food_from_json(food) for food in row.get("foods") or []),
        totals=NutrientProfile(
            **{
                name: float(row.get(f"total_{name}") or 0.0)
                for name in NUTRIENT_FIELDS
            }
        ),
        micronutrient_totals=_float_map(row.get("micronutrient_totals")),
        notes=row.get("notes"),
        version=int(row.get("version", 0)),
    )
