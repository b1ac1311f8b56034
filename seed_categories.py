#!/usr/bin/env python3
"""
Standalone script to create the system default categories
Usage: python seed_categories.py
"""

import asyncio
from app.core.database import AsyncSessionLocal, create_db_and_tables, engine
from app.crud.category import seed_system_categories

async def seed():
    print("Seeding system categories...")
    await create_db_and_tables()

    async with AsyncSessionLocal() as session:
        try:
            created = await seed_system_categories(session)
            if created:
                print(f"✅ Created {len(created)} categories")
                for category in created:
                    print(f"   {category.category_type.value:<8} {category.category_name}")
            else:
                print("System categories already present")
        finally:
            await session.close()
            await engine.dispose()

if __name__ == "__main__":
    asyncio.run(seed())
