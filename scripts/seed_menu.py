#!/usr/bin/env python3
"""
Seed a starter menu and the default location for local/dev.
Rows already present (same external_id) are left untouched.
Run after migrations: python -m scripts.seed_menu
"""
from __future__ import annotations

import asyncio
import sys
from decimal import Decimal
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

# (external_id, collection, collection_order, product_name, price, size, description_hr)
MENU = [
    ("classic-velika", "CLASSIC KEBAB", 1, "Classic kebab - VELIKA", "7.50", "VELIKA", "Teletina, luk, rajčica, umak"),
    ("classic-mala", "CLASSIC KEBAB", 2, "Classic kebab - MALA", "5.50", "MALA", "Teletina, luk, rajčica, umak"),
    ("classic-menu", "CLASSIC KEBAB MENU", 3, "Classic kebab menu", "9.50", None, "Kebab, pomfrit i piće"),
    ("chicken-velika", "CHICKEN KEBAB", 4, "Chicken kebab - VELIKA", "7.00", "VELIKA", "Piletina, kupus, umak od češnjaka"),
    ("chicken-mala", "CHICKEN KEBAB", 5, "Chicken kebab - MALA", "5.00", "MALA", "Piletina, kupus, umak od češnjaka"),
    ("steak-kebab", "STEAK KEBAB", 6, "Steak kebab", "8.50", None, "Junetina s roštilja"),
    ("mix-kebab", "MIX KEBAB", 7, "Mix kebab", "8.00", None, "Teletina i piletina"),
    ("nuggets-6", "NUGGETS", 8, "Nuggets 6 kom", "4.50", None, None),
    ("falafel", "FALAFEL", 9, "Falafel", "6.00", None, "Slanutak, tahini"),
    ("pomfrit", "PRILOZI", 10, "Pomfrit", "2.50", None, None),
    ("baklava", "DESERT", 11, "Baklava", "3.00", None, None),
    ("ayran", "NAPITCI", 12, "Ayran", "2.00", None, None),
]

LOCATION = ("Ali Kebaba Centar", "Ilica 1, Zagreb")


async def seed() -> None:
    from jelovnik.db import db_transaction
    from jelovnik.models.location import DEFAULT_HOURS, Location
    from jelovnik.repositories.location_repo import LocationRepository
    from jelovnik.repositories.menu_repo import MenuItemRepository
    from jelovnik.schemas.menu import MenuItemSchema

    async with db_transaction() as session:
        repo = MenuItemRepository(session)
        rows = []
        for external_id, collection, order, name, price, size, description in MENU:
            if await repo.get(external_id) is not None:
                continue
            rows.append(
                MenuItemSchema(
                    external_id=external_id,
                    collection=collection,
                    collection_order=order,
                    product_name=name,
                    price=Decimal(price),
                    size=size,
                    description_hr=description,
                )
            )
        await repo.insert(rows)
        if not await LocationRepository(session).get_all():
            lokacija, adresa = LOCATION
            session.add(Location(lokacija=lokacija, adresa=adresa, aktivna=True, radno_vrijeme=DEFAULT_HOURS))
    print(f"Menu seeded ({len(rows)} new rows).")


def main() -> None:
    asyncio.run(seed())


if __name__ == "__main__":
    main()
