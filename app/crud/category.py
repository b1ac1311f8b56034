# app/crud/category.py
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from sqlalchemy import and_, func, or_, update
from typing import Dict, List, Optional
import logging

from app.models.category import Category, CategoryType
from app.models.transaction import Transaction
from app.schemas.category import CategoryCreate, CategoryUpdate

logger = logging.getLogger(__name__)

# Shared categories available to every user (user_id is NULL, is_custom is False)
SYSTEM_CATEGORIES: List[dict] = [
    {"category_name": "Rent", "category_type": CategoryType.EXPENSE},
    {"category_name": "Utilities", "category_type": CategoryType.EXPENSE},
    {"category_name": "Supplies", "category_type": CategoryType.EXPENSE},
    {"category_name": "Marketing", "category_type": CategoryType.EXPENSE},
    {"category_name": "Salaries", "category_type": CategoryType.EXPENSE},
    {"category_name": "Travel", "category_type": CategoryType.EXPENSE},
    {"category_name": "Office Equipment", "category_type": CategoryType.EXPENSE},
    {"category_name": "Insurance", "category_type": CategoryType.EXPENSE},
    {"category_name": "Miscellaneous", "category_type": CategoryType.EXPENSE},
    {"category_name": "Sales Revenue", "category_type": CategoryType.INCOME},
    {"category_name": "Investment Income", "category_type": CategoryType.INCOME},
    {"category_name": "Service Fee", "category_type": CategoryType.INCOME},
    {"category_name": "Other Income", "category_type": CategoryType.INCOME},
]


def _visible_to(user_id: int):
    """Categories a user can see: the system defaults plus their own."""
    return or_(Category.user_id == user_id, and_(Category.user_id.is_(None), Category.is_custom.is_(False)))


async def get_categories_for_user(
    user_id: int,
    db: AsyncSession,
    category_type: Optional[CategoryType] = None,
) -> List[Category]:
    query = select(Category).where(_visible_to(user_id))
    if category_type is not None:
        query = query.where(Category.category_type == category_type)
    query = query.order_by(Category.category_type, Category.category_name)
    result = await db.execute(query)
    return list(result.scalars().all())

async def get_category_by_id(category_id: int, user_id: int, db: AsyncSession) -> Optional[Category]:
    """Look up a category the user can see, including system defaults."""
    result = await db.execute(
        select(Category).where(Category.id == category_id, _visible_to(user_id))
    )
    return result.scalar_one_or_none()

async def get_transaction_counts_by_category(user_id: int, db: AsyncSession) -> Dict[int, int]:
    """Number of the user's transactions per category id."""
    result = await db.execute(
        select(Transaction.category_id, func.count(Transaction.id))
        .where(Transaction.user_id == user_id)
        .group_by(Transaction.category_id)
    )
    return {category_id: count for category_id, count in result.all()}

async def count_category_transactions(category_id: int, db: AsyncSession) -> int:
    result = await db.execute(
        select(func.count(Transaction.id)).where(Transaction.category_id == category_id)
    )
    return result.scalar_one()

async def create_category_for_user(user_id: int, cat_in: CategoryCreate, db: AsyncSession) -> Category:
    new_cat = Category(**cat_in.model_dump(), user_id=user_id, is_custom=True)
    db.add(new_cat)
    await db.commit()
    await db.refresh(new_cat)
    return new_cat

async def update_category(category: Category, cat_in: CategoryUpdate, db: AsyncSession) -> Category:
    changes = cat_in.model_dump(exclude_unset=True)
    for field, value in changes.items():
        # parent_category_id may be cleared; the other columns may not
        if value is None and field != "parent_category_id":
            continue
        setattr(category, field, value)
    db.add(category)
    await db.commit()
    await db.refresh(category)
    return category

async def delete_category(category: Category, db: AsyncSession) -> None:
    # Children become top-level categories
    await db.execute(
        update(Category)
        .where(Category.parent_category_id == category.id)
        .values(parent_category_id=None)
    )
    await db.delete(category)
    await db.commit()


async def seed_system_categories(db: AsyncSession) -> List[Category]:
    """Ensure the system default categories exist; create missing ones.

    Returns the list of categories that were created (empty if none were needed).
    """
    result = await db.execute(
        select(Category.category_name, Category.category_type).where(Category.user_id.is_(None))
    )
    existing = {(name.lower(), category_type) for name, category_type in result.all()}

    categories_to_create: List[Category] = []
    for cat in SYSTEM_CATEGORIES:
        if (cat["category_name"].lower(), cat["category_type"]) not in existing:
            categories_to_create.append(
                Category(
                    user_id=None,
                    category_name=cat["category_name"],
                    category_type=cat["category_type"],
                    is_custom=False,
                )
            )

    if categories_to_create:
        db.add_all(categories_to_create)
        await db.commit()
        for c in categories_to_create:
            await db.refresh(c)
        logger.info(f"Seeded {len(categories_to_create)} system categories")

    return categories_to_create
