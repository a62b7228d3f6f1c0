from __future__ import annotations

# Order intake.
#
# Three sources produce the finite, ordered order sequence that the dispatcher
# consumes once:
# - interactive console prompts (the restaurant front desk)
# - a CSV file with a `customer_name,food,drink,dessert` header
# - a seeded random generator drawing from the menu (demos / load tests)

import csv
import random
from pathlib import Path
from typing import Callable, Iterator

from .menu import FOOD_CATEGORIES, MENU
from .order import Order

CSV_FIELDS = ("customer_name", "food", "drink", "dessert")


def read_orders_interactive(
    *,
    input_fn: Callable[[str], str] = input,
    out: Callable[[str], None] = print,
) -> list[Order]:
    """Prompt for an order count, then the fields of each order."""
    count = _prompt_count(input_fn=input_fn, out=out)

    orders: list[Order] = []
    for _ in range(count):
        food = input_fn(f"Food ({', '.join(c.upper() for c in FOOD_CATEGORIES)}): ").strip()
        drink = input_fn("Drink: ").strip()
        dessert = input_fn("Dessert: ").strip()
        name = input_fn("Customer name: ").strip()
        orders.append(Order(customer_name=name, food=food, drink=drink, dessert=dessert))
    return orders


def _prompt_count(*, input_fn: Callable[[str], str], out: Callable[[str], None]) -> int:
    while True:
        raw = input_fn("Number of orders: ").strip()
        try:
            count = int(raw)
        except ValueError:
            out(f"not a number: {raw!r}")
            continue
        if count < 0:
            out("number of orders must be >= 0")
            continue
        return count


def load_orders(path: str | Path) -> list[Order]:
    """Load orders from a CSV file, in file order."""
    with open(path, newline="", encoding="utf-8") as fh:
        reader = csv.DictReader(fh)
        missing = [f for f in CSV_FIELDS if f not in (reader.fieldnames or [])]
        if missing:
            raise ValueError(f"{path}: missing column(s) {', '.join(missing)}")
        orders: list[Order] = []
        for row in reader:
            # DictReader fills the columns of a short row with None.
            short = [f for f in CSV_FIELDS if row.get(f) is None]
            if short:
                raise ValueError(f"{path}:{reader.line_num}: missing value(s) for {', '.join(short)}")
            orders.append(
                Order(
                    customer_name=row["customer_name"].strip(),
                    food=row["food"].strip(),
                    drink=row["drink"].strip(),
                    dessert=row["dessert"].strip(),
                )
            )
        return orders


def generate_orders(
    count: int,
    *,
    name_prefix: str = "Cust",
    rng: random.Random | None = None,
) -> Iterator[Order]:
    """Yield `count` random orders picked from the menu.

    Args:
        count: number of orders (>= 0).
        rng: optional RNG; pass a seeded one for reproducible runs.
    """
    if count < 0:
        raise ValueError("count must be >= 0")

    r = rng or random
    for i in range(1, count + 1):
        category = r.choice(FOOD_CATEGORIES)
        yield Order(
            customer_name=f"{name_prefix}{i}",
            food=f"{category}: {r.choice(MENU[category])}",
            drink=r.choice(MENU["Drinks"]),
            dessert=r.choice(MENU["Desserts"]),
        )
