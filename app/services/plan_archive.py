from typing import List, Optional

from sqlalchemy import and_, desc, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.exceptions import NotFoundError
from app.models.plan import Plan
from app.schemas.plan import GeneratedPlan
from app.utils.logger import plan_logger


class PlanArchive:
    """Saved plans of one user. Every lookup is scoped by ``(id, user_id)``."""

    @staticmethod
    async def create_plan(db: AsyncSession, user_id: str, generated: GeneratedPlan) -> Plan:
        """Store a generated plan for its owner."""
        plan = Plan(
            user_id=user_id,
            plan=generated.plan,
            parameters=generated.parameters.model_dump(mode="json", by_alias=True),
            user_info=generated.user_info.model_dump(mode="json", by_alias=True),
            created_at=generated.created_at,
        )

        db.add(plan)
        await db.commit()
        await db.refresh(plan)
        return plan

    @staticmethod
    async def list_plans(db: AsyncSession, user_id: str, limit: Optional[int] = None) -> List[Plan]:
        """Newest plans first, capped at ``PLAN_HISTORY_LIMIT``."""
        query = (
            select(Plan)
            .where(Plan.user_id == user_id)
            .order_by(desc(Plan.created_at))
            .limit(limit or settings.PLAN_HISTORY_LIMIT)
        )
        result = await db.execute(query)
        return list(result.scalars().all())

    @staticmethod
    async def get_plan(db: AsyncSession, user_id: str, plan_id: str) -> Plan:
        """Get a specific plan.

        A plan owned by someone else is reported exactly like a missing one.
        """
        result = await db.execute(
            select(Plan).where(and_(Plan.id == plan_id, Plan.user_id == user_id))
        )
        plan = result.scalar_one_or_none()

        if not plan:
            raise NotFoundError("Plan not found")
        return plan

    @staticmethod
    async def delete_plan(db: AsyncSession, user_id: str, plan_id: str) -> None:
        """Delete a plan owned by ``user_id``."""
        plan = await PlanArchive.get_plan(db, user_id, plan_id)

        await db.delete(plan)
        await db.commit()
        plan_logger.info("Plan deleted", "ARCHIVE", plan_id=plan_id, user_id=user_id)
