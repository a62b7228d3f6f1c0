"""Static restaurant menu.

Each column is a category header followed by its items. Breakfast, lunch and
dinner are the `food` choices of an order.
"""

from __future__ import annotations

MENU: dict[str, list[str]] = {
    "Breakfast": ["Omelette", "Huevos rancheros", "Pancakes", "Toast"],
    "Lunch": ["Chicken milanesa", "Caesar salad", "Hamburger", "Enchiladas"],
    "Dinner": ["Pizza", "Pasta bolognese", "Lasagna", "Fish fillet"],
    "Drinks": ["Soda", "Orange juice", "Lemonade", "Coffee"],
    "Desserts": ["Oreo ice cream", "Neapolitan ice cream", "Triple chocolate ice cream", "Vanilla ice cream"],
}

FOOD_CATEGORIES = ("Breakfast", "Lunch", "Dinner")

COLUMN_WIDTH = 28
RULE = "-" * (COLUMN_WIDTH * len(MENU))


def render_menu(menu: dict[str, list[str]] | None = None, *, width: int = COLUMN_WIDTH) -> str:
    """Render the menu as a right-aligned fixed-width table."""
    menu = menu or MENU
    columns = [[header, *items] for header, items in menu.items()]
    depth = max(len(col) for col in columns)

    lines = [RULE, "Menu:"]
    for row in range(depth):
        cells = [col[row] if row < len(col) else "" for col in columns]
        lines.append("".join(f"{cell:>{width}}" for cell in cells))
    lines.append(RULE)
    return "\n".join(lines)
