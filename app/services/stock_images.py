"""
Stock photo fallback for the image chain.

Picks an Unsplash photo by keyword-matching the prompt against known
exercise and food categories.
"""
import random
import re
from dataclasses import dataclass
from typing import Optional

_UNSPLASH = "https://images.unsplash.com/photo-{}?w=400&h=300&fit=crop"


def _photos(*ids: str) -> list[str]:
    return [_UNSPLASH.format(photo_id) for photo_id in ids]


# (category, keywords, candidate urls); first match wins
EXERCISE_CATEGORIES = [
    ("squat", ("squat", "leg"), _photos(
        "1571019613454-1cb2f99b2d8b", "1566241440091-ec10de8db2e1", "1549060279-7e168fcee0c2",
        "1574680096145-d05b474e2155", "1583500178690-f7fd1d14489b")),
    ("push", ("push", "chest"), _photos(
        "1534438327276-14e5300c3a48", "1571019614242-c5c5dee9f50b", "1594737625785-a6cbdabd333c",
        "1581009146145-b5ef050c2e1e", "1538805060514-97d9cc17730c")),
    ("cardio", ("run", "cardio"), _photos(
        "1544367567-0f2fcb009e0b", "1599901860904-17e6ed7083a0", "1538805060514-97d9cc17730c")),
    ("yoga", ("yoga", "stretch"), _photos("1506629905607-d405d7d2b0a8")),
    ("core", ("plank", "core"), _photos("1594737625785-a6cbdabd333c")),
    ("lunge", ("lunge",), _photos("1566241440091-ec10de8db2e1")),
    ("glute", ("bridge", "glute"), _photos("1549060279-7e168fcee0c2")),
    ("bicep", ("bicep", "curl"), _photos("1581009146145-b5ef050c2e1e")),
    ("tricep", ("tricep", "dip"), _photos("1571019614242-c5c5dee9f50b")),
    ("shoulder", ("shoulder", "press"), _photos("1538805060514-97d9cc17730c")),
    ("deadlift", ("deadlift", "lift"), _photos("1588286840104-8957b019727f")),
    ("plyometric", ("burpee", "jump"), _photos("1599901860904-17e6ed7083a0")),
    ("mountain-climber", ("mountain", "climber"), _photos("1571019614242-c5c5dee9f50b")),
    ("calf", ("calf", "raise"), _photos("1581009146145-b5ef050c2e1e")),
]

# Protein is checked before salad so that e.g. "grilled chicken salad" is a protein dish
MEAL_CATEGORIES = [
    ("protein", ("chicken", "meat", "protein"), _photos(
        "1546554137-f86b9593a222", "1532550907401-a500c9a57435", "1525351484163-7529414344d8")),
    ("salad", ("salad", "vegetable"), _photos(
        "1512621776951-a57141f2eefd", "1559181567-c3190ca9959b", "1540420773420-3366772f4999")),
    ("breakfast", ("breakfast", "oatmeal", "cereal"), _photos("1490645935967-10de6ba17061")),
    ("smoothie", ("smoothie", "drink", "juice"), _photos("1553530666-ba11a7da3888")),
    ("snack", ("snack", "nuts", "fruit"), _photos("1559181567-c3190ca9959b")),
    ("carbs", ("pasta", "rice", "carb"), _photos("1551782450-a2132b4ba21d")),
    ("fish", ("fish", "salmon"), _photos("1532550907401-a500c9a57435")),
    ("soup", ("soup", "broth"), _photos("1504674900247-0877df9cc836")),
    ("sandwich", ("sandwich", "wrap"), _photos("1540420773420-3366772f4999")),
    ("egg", ("egg", "omelet"), _photos("1525351484163-7529414344d8")),
    ("yogurt", ("yogurt", "parfait"), _photos("1571771894821-ce9b6c11b08e")),
    ("bread", ("pizza", "bread"), _photos("1473093295043-cdd812d0e601")),
    ("berry", ("berry",), _photos("1610832958506-aa56368176cf")),
]

CURATED_EXERCISE = _photos(
    "1571019613454-1cb2f99b2d8b", "1534438327276-14e5300c3a48", "1544367567-0f2fcb009e0b",
    "1506629905607-d405d7d2b0a8", "1594737625785-a6cbdabd333c", "1566241440091-ec10de8db2e1",
    "1549060279-7e168fcee0c2", "1581009146145-b5ef050c2e1e", "1571019614242-c5c5dee9f50b",
    "1538805060514-97d9cc17730c",
)

CURATED_MEAL = _photos(
    "1512621776951-a57141f2eefd", "1546554137-f86b9593a222", "1490645935967-10de6ba17061",
    "1553530666-ba11a7da3888", "1559181567-c3190ca9959b", "1551782450-a2132b4ba21d",
    "1532550907401-a500c9a57435", "1504674900247-0877df9cc836", "1540420773420-3366772f4999",
    "1525351484163-7529414344d8",
)


@dataclass
class StockImage:
    url: str
    category: str
    description: str
    variety: int


def clean_prompt(prompt: str) -> str:
    return re.sub(r"[^a-zA-Z0-9\s]", "", prompt).lower()


def match_category(prompt: str, kind: str) -> Optional[tuple[str, list[str]]]:
    """Return (category, candidate urls) for the first keyword hit, or None."""
    cleaned = clean_prompt(prompt)
    categories = EXERCISE_CATEGORIES if kind == "exercise" else MEAL_CATEGORIES
    for category, keywords, urls in categories:
        if any(keyword in cleaned for keyword in keywords):
            return category, urls
    return None


def variety_index(prompt: str, rng: random.Random = None) -> int:
    """Character-code sum of the prompt plus a random 0-999 component, mod 10."""
    rng = rng or random
    seed = sum(ord(ch) for ch in prompt)
    return (seed + rng.randrange(1000)) % 10


def select_stock_image(prompt: str, kind: str, rng: random.Random = None) -> StockImage:
    """Pick a stock photo for a prompt; never fails."""
    prompt = prompt or kind
    variety = variety_index(prompt, rng)

    matched = match_category(prompt, kind)
    if matched:
        category, urls = matched
    else:
        category = "general"
        urls = CURATED_EXERCISE if kind == "exercise" else CURATED_MEAL

    if kind == "exercise":
        description = (f"Exercise demonstration: {prompt}. This exercise helps improve "
                       "strength, flexibility, and overall fitness.")
    else:
        description = f"Nutritious meal: {prompt}. This meal provides essential nutrients and energy."

    return StockImage(
        url=urls[variety % len(urls)],
        category=category,
        description=description,
        variety=variety,
    )
