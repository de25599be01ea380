# System categories and their Google Places types.
# bizimport/core/categories.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Tuple


@dataclass(frozen=True)
class CategoryProfile:
    """A system category and the Google Places types that approximate it."""
    key: str
    display_name: str
    google_types: Tuple[str, ...]


def _profile(key: str, display_name: str, *google_types: str) -> CategoryProfile:
    return CategoryProfile(key=key, display_name=display_name, google_types=tuple(google_types))


# Types Google's (new) Places API rejects are left out on purpose, e.g.
# portuguese_restaurant, tattoo_shop, piercing_studio.
CATEGORY_MAPPING: Dict[str, CategoryProfile] = {
    p.key: p
    for p in (
        _profile(
            "restaurant",
            "Restaurant",
            "restaurant",
            "pizza_restaurant",
            "italian_restaurant",
            "french_restaurant",
            "spanish_restaurant",
            "greek_restaurant",
            "turkish_restaurant",
            "chinese_restaurant",
            "japanese_restaurant",
            "thai_restaurant",
            "indian_restaurant",
            "vietnamese_restaurant",
            "korean_restaurant",
            "middle_eastern_restaurant",
            "lebanese_restaurant",
            "mediterranean_restaurant",
            "mexican_restaurant",
            "brazilian_restaurant",
            "american_restaurant",
            "seafood_restaurant",
            "steak_house",
            "sushi_restaurant",
            "ramen_restaurant",
            "hamburger_restaurant",
            "vegan_restaurant",
            "vegetarian_restaurant",
            "brunch_restaurant",
            "breakfast_restaurant",
            "fine_dining_restaurant",
            "bistro",
        ),
        _profile("cafe", "Cafe / Coffee Shop", "cafe", "coffee_shop"),
        _profile("bakery", "Bakery / Patisserie", "bakery"),
        _profile(
            "bar",
            "Bar / Wine Bar",
            "bar",
            "night_club",
            "wine_bar",
            "cocktail_bar",
            "sports_bar",
            "dive_bar",
            "lounge",
        ),
        _profile("pub", "Pub / Gastropub", "pub", "gastropub"),
        _profile("dessert", "Dessert / Ice Cream", "ice_cream_shop", "dessert_shop"),
        _profile("takeaway", "Takeaway / Street Food", "meal_takeaway"),
        _profile("fast_food", "Fast Food", "fast_food_restaurant"),
        _profile("salon", "Salon / Spa", "beauty_salon", "spa", "nail_salon"),
        _profile("barber", "Hairdresser / Barber", "hair_care", "hair_salon", "barber_shop"),
        # No tattoo-specific type exists; results need manual filtering.
        _profile("tattoo", "Tattoo / Piercing", "beauty_salon"),
        _profile(
            "wellness",
            "Wellness / Therapy",
            "physiotherapist",
            "massage_spa",
            "wellness_center",
            "acupuncture",
            "osteopath",
            "chiropractor",
        ),
        _profile(
            "retail",
            "Retail",
            "clothing_store",
            "shoe_store",
            "jewelry_store",
            "gift_shop",
            "souvenir_store",
            "store",
            "shopping_mall",
        ),
        _profile("fitness", "Fitness / Gym", "gym", "fitness_center", "yoga_studio", "pilates_studio"),
        _profile("sports", "Sports / Outdoors", "sporting_goods_store", "sports_club", "sports_complex"),
        _profile("hotel", "Hotel / BnB", "lodging", "hotel", "motel", "bed_and_breakfast"),
        _profile(
            "venue",
            "Venue / Event Space",
            "event_venue",
            "banquet_hall",
            "wedding_venue",
            "conference_center",
        ),
        _profile(
            "entertainment",
            "Entertainment / Attractions",
            "tourist_attraction",
            "amusement_park",
            "museum",
            "art_gallery",
            "movie_theater",
            "bowling_alley",
            "amusement_center",
        ),
        _profile(
            "professional",
            "Professional Services",
            "lawyer",
            "accounting",
            "accountant",
            "real_estate_agency",
            "insurance_agency",
            "consultant",
        ),
        _profile("other", "Other", "establishment", "point_of_interest"),
    )
}

# Reverse lookup. The first category listing a type owns it (beauty_salon -> salon).
GOOGLE_TYPE_TO_CATEGORY: Dict[str, str] = {}
for _key, _profile in CATEGORY_MAPPING.items():
    for _t in _profile.google_types:
        GOOGLE_TYPE_TO_CATEGORY.setdefault(_t, _key)

# Checked in order, most specific first.
_CLASSIFY_RULES: List[Tuple[str, Tuple[str, ...]]] = [
    ("cafe", ("cafe", "coffee_shop")),
    ("bakery", ("bakery",)),
    ("pub", ("pub", "gastropub")),
    ("bar", ("bar", "night_club", "wine_bar", "cocktail_bar", "sports_bar", "dive_bar", "lounge")),
    ("dessert", ("ice_cream_shop", "dessert_shop")),
    ("fast_food", ("fast_food_restaurant",)),
    ("takeaway", ("meal_takeaway",)),
    ("restaurant", CATEGORY_MAPPING["restaurant"].google_types),
    ("barber", ("barber_shop", "hair_salon", "hair_care")),
    ("salon", ("beauty_salon", "spa", "nail_salon")),
    ("wellness", CATEGORY_MAPPING["wellness"].google_types),
    ("fitness", CATEGORY_MAPPING["fitness"].google_types),
    ("sports", CATEGORY_MAPPING["sports"].google_types),
    ("hotel", CATEGORY_MAPPING["hotel"].google_types),
    ("venue", CATEGORY_MAPPING["venue"].google_types),
    ("entertainment", CATEGORY_MAPPING["entertainment"].google_types),
    ("professional", CATEGORY_MAPPING["professional"].google_types),
    ("retail", CATEGORY_MAPPING["retail"].google_types),
]


def _normalize_key(key: Optional[str]) -> str:
    return (key or "").strip().lower()


def get_category(key: Optional[str]) -> Optional[CategoryProfile]:
    return CATEGORY_MAPPING.get(_normalize_key(key))


def is_valid_category(key: Optional[str]) -> bool:
    return _normalize_key(key) in CATEGORY_MAPPING


def list_categories() -> List[CategoryProfile]:
    return list(CATEGORY_MAPPING.values())


def classify_google_types(types: Iterable[str]) -> str:
    """
    Maps a raw Places type list to a system category.
    Falls back to "other" when nothing matches.
    """
    present = {str(t).lower() for t in types or []}
    for key, candidates in _CLASSIFY_RULES:
        if present.intersection(candidates):
            return key
    return "other"
