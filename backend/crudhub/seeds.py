"""
CrudHub Backend — Seed Data
=============================

What:  Initial items for the built-in resources.
When:  Memory resources are seeded at construction (SEED_MEMORY_RESOURCES);
       document resources are seeded on startup only while their collection is
       empty (SEED_DOCUMENT_RESOURCES).

Resources without an entry here simply start empty.
"""

from typing import Dict, List

from crudhub.collections.base import Item

TEAS: List[Item] = [
    {"name": "Early Grey", "brand": "Twinings"},
    {"name": "Irish Breakfast", "brand": "Barry's Tea"},
    {"name": "Lemon and Ginger", "brand": "Lipton"},
    {"name": "Rooibos", "brand": "Tick Tock"},
    {"name": "Green", "brand": "Clipper"},
]

BISCUITS: List[Item] = [
    {"name": "Digestive", "brand": "McVitie's"},
    {"name": "Hobnob", "brand": "McVitie's"},
    {"name": "Custard Cream", "brand": "Crawford's"},
]

GAMES: List[Item] = [
    {"name": "Chess", "genre": "Strategy", "players": 2},
    {"name": "Catan", "genre": "Strategy", "players": 4},
    {"name": "Dixit", "genre": "Party", "players": 6},
]

SEED_DATA: Dict[str, List[Item]] = {
    "teas": TEAS,
    "biscuits": BISCUITS,
    "games": GAMES,
}
