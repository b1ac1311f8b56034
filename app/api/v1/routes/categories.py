# app/api/v1/routes/categories.py
import logging
from collections import defaultdict
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import SQLAlchemyError
from typing import List, Optional

from app.schemas.category import CategoryCreate, CategoryRead, CategoryUpdate, CategoryWithChildren
from app.crud.category import (
    count_category_transactions,
    create_category_for_user,
    delete_category,
    get_categories_for_user,
    get_category_by_id,
    get_transaction_counts_by_category,
    update_category,
)
from app.core.database import get_async_session
from app.models.category import Category, CategoryType
from app.models.user import User
from app.api.deps import get_current_user
from app.utils.reports import parse_transaction_type

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/categories", tags=["categories"])


async def _check_parent(
    parent_id: Optional[int],
    category_type: CategoryType,
    user_id: int,
    db: AsyncSession,
    category_id: Optional[int] = None,
) -> None:
    """A parent must be visible, of the same type, and must not sit below the category itself."""
    if parent_id is None:
        return
    if category_id is not None and parent_id == category_id:
        raise HTTPException(status.HTTP_400_BAD_REQUEST, detail="A category cannot be its own parent")
    parent = await get_category_by_id(parent_id, user_id, db)
    if not parent:
        raise HTTPException(status.HTTP_400_BAD_REQUEST, detail="Parent category not found")
    if parent.category_type != category_type:
        raise HTTPException(status.HTTP_400_BAD_REQUEST, detail="Parent category must have the same type")

    if category_id is None:
        return
    # Walk up from the new parent; reaching the category would close a loop
    seen = {parent.id}
    ancestor_id = parent.parent_category_id
    while ancestor_id is not None and ancestor_id not in seen:
        if ancestor_id == category_id:
            raise HTTPException(status.HTTP_400_BAD_REQUEST, detail="Parent category cannot be one of its descendants")
        seen.add(ancestor_id)
        ancestor = await get_category_by_id(ancestor_id, user_id, db)
        ancestor_id = ancestor.parent_category_id if ancestor else None


@router.get("", response_model=List[CategoryWithChildren])
async def read_categories(
    type: Optional[str] = Query(None, description="INCOME or EXPENSE; other values are ignored"),
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(get_current_user),
):
    wanted = parse_transaction_type(type)
    category_type = CategoryType(wanted.value) if wanted else None
    categories = await get_categories_for_user(user.id, db, category_type=category_type)
    counts = await get_transaction_counts_by_category(user.id, db)

    # One grouping pass builds the nested view from the flat table
    children = defaultdict(list)
    for category in categories:
        if category.parent_category_id is not None:
            children[category.parent_category_id].append(category)

    return [
        CategoryWithChildren(
            **CategoryRead.model_validate(category).model_dump(),
            sub_categories=[CategoryRead.model_validate(child) for child in children.get(category.id, [])],
            transaction_count=counts.get(category.id, 0),
        )
        for category in categories
    ]


@router.post("", response_model=CategoryRead, status_code=status.HTTP_201_CREATED)
async def create_category(
    cat_in: CategoryCreate,
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(get_current_user),
):
    await _check_parent(cat_in.parent_category_id, cat_in.category_type, user.id, db)
    try:
        return await create_category_for_user(user.id, cat_in, db)
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error(f"Create category error: {str(e)}")
        raise HTTPException(status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to create category")


async def _get_editable_category(category_id: int, user: User, db: AsyncSession, action: str) -> Category:
    category = await get_category_by_id(category_id, user.id, db)
    if not category:
        raise HTTPException(status.HTTP_404_NOT_FOUND, detail="Category not found")
    if category.is_system_default:
        logger.warning(f"User {user.id} tried to {action} system category {category.id}")
        raise HTTPException(status.HTTP_403_FORBIDDEN, detail=f"Cannot {action} system default categories")
    return category


@router.put("/{category_id}", response_model=CategoryRead)
async def update_category_endpoint(
    category_id: int,
    cat_in: CategoryUpdate,
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(get_current_user),
):
    category = await _get_editable_category(category_id, user, db, "modify")

    if cat_in.category_type is not None and cat_in.category_type != category.category_type:
        raise HTTPException(status.HTTP_400_BAD_REQUEST, detail="Category type cannot be changed")
    await _check_parent(cat_in.parent_category_id, category.category_type, user.id, db, category_id=category.id)

    try:
        return await update_category(category, cat_in, db)
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error(f"Update category error: {str(e)}")
        raise HTTPException(status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to update category")


@router.delete("/{category_id}", status_code=status.HTTP_200_OK)
async def delete_category_endpoint(
    category_id: int,
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(get_current_user),
):
    category = await _get_editable_category(category_id, user, db, "delete")

    transaction_count = await count_category_transactions(category.id, db)
    if transaction_count > 0:
        raise HTTPException(
            status.HTTP_400_BAD_REQUEST,
            detail=f"Cannot delete: {transaction_count} transaction(s) use this category",
        )

    try:
        await delete_category(category, db)
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error(f"Delete category error: {str(e)}")
        raise HTTPException(status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to delete category")
    return {"message": "Category deleted"}
