from decimal import Decimal
from typing import Optional

import structlog
from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.exceptions import ConflictError, NotFoundError, StorefrontError
from app.core.redis import CATEGORY_TREE_KEY, redis_client
from app.models.category import Category, SecondSubcategory, Subcategory
from app.models.service import ServiceItem
from app.schemas.category import Category as CategorySchema
from app.schemas.category import CategoryBase, CategoryCreate, CategoryUpdate
from app.utils.validation import slugify_node_id

logger = structlog.get_logger(__name__)


def _node_id(explicit_id: Optional[str], label: str) -> str:
    node_id = (explicit_id or "").strip() or slugify_node_id(label)
    if not node_id:
        raise StorefrontError(f"Cannot derive an id from label '{label}'")
    return node_id


class CategoryTreeService:
    """Three-level category tree: Category -> Subcategory -> SecondSubcategory."""

    @staticmethod
    async def get_categories(db: AsyncSession) -> list[Category]:
        """Get all categories ordered for display, children included."""
        stmt = select(Category).order_by(Category.order, Category.id)
        result = await db.execute(stmt)
        return list(result.scalars().all())

    @staticmethod
    async def get_category_tree(db: AsyncSession) -> list[CategorySchema]:
        """Serialized tree, served from the Redis cache when available."""
        cached = await redis_client.get(CATEGORY_TREE_KEY)
        if cached:
            return [CategorySchema.model_validate(item) for item in cached]

        categories = await CategoryTreeService.get_categories(db)
        tree = [CategorySchema.model_validate(category) for category in categories]
        await redis_client.set(
            CATEGORY_TREE_KEY,
            [node.model_dump(mode="json") for node in tree],
            expire=settings.CATEGORY_CACHE_TTL_SECONDS,
        )
        return tree

    @staticmethod
    async def get_category(db: AsyncSession, category_id: str) -> Optional[Category]:
        """Get a single category with its subtree."""
        stmt = (
            select(Category)
            .where(Category.id == category_id)
            .execution_options(populate_existing=True)
        )
        result = await db.execute(stmt)
        return result.scalar_one_or_none()

    @staticmethod
    async def get_subcategory(
        db: AsyncSession, subcategory_id: str
    ) -> Optional[Subcategory]:
        result = await db.execute(
            select(Subcategory).where(Subcategory.id == subcategory_id)
        )
        return result.scalar_one_or_none()

    @staticmethod
    async def get_second_subcategory(
        db: AsyncSession, second_subcategory_id: str
    ) -> Optional[SecondSubcategory]:
        result = await db.execute(
            select(SecondSubcategory).where(
                SecondSubcategory.id == second_subcategory_id
            )
        )
        return result.scalar_one_or_none()

    @staticmethod
    async def resolve_fee(
        db: AsyncSession,
        subcategory_id: Optional[str],
        second_subcategory_id: Optional[str],
    ) -> Decimal:
        """Fee percentage of the deepest node that defines one."""
        if second_subcategory_id:
            leaf = await CategoryTreeService.get_second_subcategory(
                db, second_subcategory_id
            )
            if leaf and leaf.fee:
                return Decimal(leaf.fee)
        if subcategory_id:
            subcategory = await CategoryTreeService.get_subcategory(db, subcategory_id)
            if subcategory and subcategory.fee:
                return Decimal(subcategory.fee)
        return Decimal("0")

    @staticmethod
    async def create_category(
        db: AsyncSession, category_data: CategoryCreate
    ) -> Category:
        """Create a category together with its submitted subtree."""
        category_id = _node_id(category_data.id, category_data.label)

        if await db.get(Category, category_id):
            raise ConflictError(f"Category '{category_id}' already exists")

        await CategoryTreeService._check_child_ids(db, category_id, category_data)

        db_category = Category(id=category_id)
        CategoryTreeService._apply_tree(db_category, category_data)
        db.add(db_category)
        await db.commit()

        logger.info(
            "Category created",
            category_id=category_id,
            subcategories=len(category_data.subcategories),
        )
        await CategoryTreeService.invalidate_cache()
        return await CategoryTreeService.get_category(db, category_id)

    @staticmethod
    async def update_category(
        db: AsyncSession, category_id: str, category_data: CategoryUpdate
    ) -> Category:
        """Replace a category and its whole subtree.

        Children are synced by id: matching nodes are updated in place,
        new ones inserted and missing ones deleted.
        """
        db_category = await CategoryTreeService.get_category(db, category_id)
        if not db_category:
            raise NotFoundError("Category not found")

        await CategoryTreeService._check_child_ids(db, category_id, category_data)
        await CategoryTreeService._check_removed_nodes_unused(
            db, db_category, category_data
        )

        CategoryTreeService._apply_tree(db_category, category_data)
        await db.commit()

        logger.info("Category updated", category_id=category_id)
        await CategoryTreeService.invalidate_cache()
        return await CategoryTreeService.get_category(db, category_id)

    @staticmethod
    async def delete_category(db: AsyncSession, category_id: str) -> bool:
        """Delete a category and every descendant node."""
        db_category = await CategoryTreeService.get_category(db, category_id)
        if not db_category:
            raise NotFoundError("Category not found")

        services_stmt = select(ServiceItem.id).where(ServiceItem.category == category_id)
        services_result = await db.execute(services_stmt)
        if services_result.first():
            raise ConflictError("Cannot delete category with associated services")

        await db.delete(db_category)
        await db.commit()

        logger.info("Category deleted", category_id=category_id)
        await CategoryTreeService.invalidate_cache()
        return True

    @staticmethod
    async def invalidate_cache() -> None:
        await redis_client.delete(CATEGORY_TREE_KEY)

    @staticmethod
    def _apply_tree(db_category: Category, category_data: CategoryBase) -> None:
        top_level = category_data.model_dump(exclude={"id", "subcategories"})
        for field, value in top_level.items():
            setattr(db_category, field, value)

        existing_subs = {sub.id: sub for sub in db_category.subcategories}
        existing_leaves = {
            leaf.id: leaf
            for sub in db_category.subcategories
            for leaf in sub.second_subcategories
        }

        subcategories = []
        for sub_data in category_data.subcategories:
            sub_id = _node_id(sub_data.id, sub_data.label)
            sub = existing_subs.get(sub_id) or Subcategory(id=sub_id)
            for field, value in sub_data.model_dump(
                exclude={"id", "second_subcategories"}
            ).items():
                setattr(sub, field, value)

            leaves = []
            for leaf_data in sub_data.second_subcategories:
                leaf_id = _node_id(leaf_data.id, leaf_data.label)
                leaf = existing_leaves.get(leaf_id) or SecondSubcategory(id=leaf_id)
                for field, value in leaf_data.model_dump(exclude={"id"}).items():
                    setattr(leaf, field, value)
                leaves.append(leaf)

            sub.second_subcategories = leaves
            subcategories.append(sub)

        db_category.subcategories = subcategories

    @staticmethod
    async def _check_child_ids(
        db: AsyncSession, category_id: str, category_data: CategoryBase
    ) -> None:
        """Child ids must be unique in the submission and across other categories."""
        sub_ids = [_node_id(s.id, s.label) for s in category_data.subcategories]
        leaf_ids = [
            _node_id(leaf.id, leaf.label)
            for s in category_data.subcategories
            for leaf in s.second_subcategories
        ]

        for ids, kind in ((sub_ids, "Subcategory"), (leaf_ids, "Second subcategory")):
            duplicates = {node_id for node_id in ids if ids.count(node_id) > 1}
            if duplicates:
                raise ConflictError(
                    f"{kind} id submitted twice: {', '.join(sorted(duplicates))}"
                )

        if sub_ids:
            result = await db.execute(
                select(Subcategory.id).where(
                    Subcategory.id.in_(sub_ids),
                    Subcategory.category_id != category_id,
                )
            )
            taken = result.scalars().all()
            if taken:
                raise ConflictError(f"Subcategory id already in use: {', '.join(taken)}")

        if leaf_ids:
            result = await db.execute(
                select(SecondSubcategory.id)
                .join(Subcategory, SecondSubcategory.subcategory_id == Subcategory.id)
                .where(
                    SecondSubcategory.id.in_(leaf_ids),
                    Subcategory.category_id != category_id,
                )
            )
            taken = result.scalars().all()
            if taken:
                raise ConflictError(
                    f"Second subcategory id already in use: {', '.join(taken)}"
                )

    @staticmethod
    async def _check_removed_nodes_unused(
        db: AsyncSession, db_category: Category, category_data: CategoryBase
    ) -> None:
        """Nodes dropped or moved in the tree must not leave services pointing at them."""
        kept_subs = {_node_id(s.id, s.label) for s in category_data.subcategories}
        kept_leaves = {
            _node_id(leaf.id, leaf.label)
            for s in category_data.subcategories
            for leaf in s.second_subcategories
        }
        removed_subs = {s.id for s in db_category.subcategories} - kept_subs
        removed_leaves = {
            leaf.id for s in db_category.subcategories for leaf in s.second_subcategories
        } - kept_leaves

        if removed_subs or removed_leaves:
            result = await db.execute(
                select(ServiceItem.name).where(
                    or_(
                        ServiceItem.subcategory.in_(list(removed_subs)),
                        ServiceItem.second_subcategory_id.in_(list(removed_leaves)),
                    )
                )
            )
            in_use = result.scalars().all()
            if in_use:
                raise ConflictError(
                    "Cannot remove subcategories still used by services: "
                    + ", ".join(sorted(in_use))
                )

        # A kept leaf must stay under the same subcategory while services use it
        current_parent = {
            leaf.id: s.id for s in db_category.subcategories for leaf in s.second_subcategories
        }
        moved_leaves = set()
        for s in category_data.subcategories:
            sub_id = _node_id(s.id, s.label)
            for leaf in s.second_subcategories:
                leaf_id = _node_id(leaf.id, leaf.label)
                if current_parent.get(leaf_id, sub_id) != sub_id:
                    moved_leaves.add(leaf_id)
        if moved_leaves:
            result = await db.execute(
                select(ServiceItem.name).where(
                    ServiceItem.second_subcategory_id.in_(list(moved_leaves))
                )
            )
            in_use = result.scalars().all()
            if in_use:
                raise ConflictError(
                    "Cannot move second subcategories still used by services: "
                    + ", ".join(sorted(in_use))
                )
