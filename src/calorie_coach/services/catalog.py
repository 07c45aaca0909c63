"""Read-only food catalog keyed by meal slot."""

import json
import logging
from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from pathlib import Path
from types import MappingProxyType

from calorie_coach.domain.errors import CatalogUnavailable
from calorie_coach.domain.meals import MEAL_SLOTS, FoodItem

DEFAULT_CATALOG_PATH = Path(__file__).resolve().parents[1] / "data" / "thai_foods.json"

_logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FoodCatalog(Mapping[str, tuple[FoodItem, ...]]):
    """Immutable mapping from meal slot to its catalog items."""

    slots: Mapping[str, tuple[FoodItem, ...]]

    @classmethod
    def from_items(cls, items: Mapping[str, list[FoodItem]]) -> "FoodCatalog":
        """Build a catalog, freezing every slot's item list."""
        frozen = {slot: tuple(items.get(slot, ())) for slot in MEAL_SLOTS}
        return cls(slots=MappingProxyType(frozen))

    def __getitem__(self, slot: str) -> tuple[FoodItem, ...]:
        return self.slots[slot]

    def __iter__(self) -> Iterator[str]:
        return iter(self.slots)

    def __len__(self) -> int:
        return len(self.slots)


def load_catalog(path: str | Path | None = None) -> FoodCatalog:
    """Load a catalog JSON document, defaulting to the packaged Thai foods."""
    resolved = Path(path) if path else DEFAULT_CATALOG_PATH
    try:
        raw = json.loads(resolved.read_text(encoding="utf-8"))
    except (OSError, ValueError) as exc:
        raise CatalogUnavailable(f"Food catalog could not be read: {resolved}") from exc
    catalog = parse_catalog(raw)
    _logger.info(
        "Food catalog loaded: path=%s items=%s",
        resolved,
        sum(len(items) for items in catalog.values()),
    )
    return catalog


def parse_catalog(raw: object) -> FoodCatalog:
    """Validate a decoded catalog document and build a FoodCatalog."""
    if not isinstance(raw, dict):
        raise CatalogUnavailable("Food catalog must be an object keyed by meal slot.")
    missing = [slot for slot in MEAL_SLOTS if not isinstance(raw.get(slot), list)]
    if missing:
        raise CatalogUnavailable(
            "Food catalog is missing meal slots.", details=missing
        )
    try:
        items = {
            slot: [_parse_item(entry) for entry in raw[slot]] for slot in MEAL_SLOTS
        }
    except (AttributeError, KeyError, TypeError, ValueError) as exc:
        raise CatalogUnavailable(f"Food catalog entry is malformed: {exc}") from exc
    return FoodCatalog.from_items(items)


def _parse_item(entry: dict[str, object]) -> FoodItem:
    return FoodItem(
        name=str(entry["name"]),
        portion=str(entry.get("portion", "")),
        calories=int(entry["calories"]),
        protein=float(entry.get("protein", 0.0)),
        carbs=float(entry.get("carbs", 0.0)),
        fat=float(entry.get("fat", 0.0)),
        tags=tuple(str(tag) for tag in entry.get("tags", [])),
    )
