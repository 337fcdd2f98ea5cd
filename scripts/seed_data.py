"""Seed the database with sample rank items.

Usage: uv run python scripts/seed_data.py
"""

import asyncio
import sys
from pathlib import Path

# Ensure project root is on sys.path
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from sqlalchemy import select

from app.config import Settings
from app.database import Database
from app.models.rank_item import RankItem, utcnow
from app.schemas.rank_item import validate_rank_item


SEED_ITEMS = [
    {
        "siteName": "Acme Bet",
        "logo": "https://example.com/logos/acme-bet.png",
        "advantages": ["Fast payouts", "Live streaming", "24/7 support"],
        "welcomeBonus": "100% up to 200 EUR",
        "payments": ["Visa", "Mastercard", "PayPal"],
        "promoCode": "ACME100",
        "rank": 1,
        "createAccountUrl": "https://example.com/acme-bet/register",
        "downloadAppUrl": "https://example.com/acme-bet/app",
    },
    {
        "siteName": "Golden Odds",
        "logo": "https://example.com/logos/golden-odds.png",
        "advantages": ["Boosted odds every day", "Cash-out on every market"],
        "welcomeBonus": "Free bet of 50 EUR",
        "payments": ["Visa", "Skrill", "Neteller"],
        "promoCode": "GOLD50",
        "rank": 2,
        "createAccountUrl": "https://example.com/golden-odds/register",
    },
    {
        "siteName": "Pitch Side",
        "logo": "https://example.com/logos/pitch-side.png",
        "advantages": ["Large football coverage"],
        "welcomeBonus": "150% up to 100 EUR",
        "payments": ["Mastercard", "Bank transfer"],
        "promoCode": "PITCH150",
        "rank": 3,
    },
]


async def seed() -> None:
    settings = Settings.from_env()
    settings.DATA_DIR.mkdir(parents=True, exist_ok=True)
    database = Database(settings.require_database_url())

    # Create tables
    await database.init_db()
    print("Database tables created.")

    async with database.session_factory() as session:
        for raw in SEED_ITEMS:
            checked = validate_rank_item(raw)
            if not checked.ok:
                print(f"  Skipped invalid seed {raw['siteName']}: {checked.errors}")
                continue
            data = checked.value.model_dump()

            # Check if item already exists (idempotent)
            result = await session.execute(
                select(RankItem).where(RankItem.site_name == data["site_name"])
            )
            existing = result.scalar_one_or_none()
            if existing:
                # Update existing item
                for key, value in data.items():
                    setattr(existing, key, value)
                existing.updated_at = utcnow()
                print(f"  Updated: #{data['rank']} - {data['site_name']}")
            else:
                session.add(RankItem(**data))
                print(f"  Inserted: #{data['rank']} - {data['site_name']}")

        await session.commit()

    await database.dispose()
    print("Seed data complete.")


if __name__ == "__main__":
    asyncio.run(seed())
