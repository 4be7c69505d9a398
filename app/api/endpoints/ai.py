from typing import Any

from fastapi import APIRouter, Depends
from fastapi.responses import PlainTextResponse
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_current_user
from app.db.async_session import get_async_db
from app.models.user import User
from app.schemas.base import MessageResponse
from app.schemas.plan import (
    DietSuggestionRequest,
    DietSuggestionResponse,
    GeneratePlanResponse,
    PlanListResponse,
    PlanOut,
    PlanRequest,
    PlanResponse,
)
from app.services.plan_archive import PlanArchive
from app.services.plan_generator import PlanGenerator

router = APIRouter()


@router.post("/trial", response_model=GeneratePlanResponse, response_model_exclude_none=True)
async def generate_trial_plan(
    plan_request: PlanRequest,
    db: AsyncSession = Depends(get_async_db),
) -> Any:
    """Generate a plan without an account. Nothing is saved."""
    generated = await PlanGenerator.generate(db, plan_request)
    return GeneratePlanResponse(data=generated)


@router.post("/generate-plan", response_model=GeneratePlanResponse, response_model_exclude_none=True)
async def generate_plan(
    plan_request: PlanRequest,
    db: AsyncSession = Depends(get_async_db),
    current_user: User = Depends(get_current_user),
) -> Any:
    """Generate a plan and save it to the user's history."""
    generated = await PlanGenerator.generate(db, plan_request, user_id=current_user.id)
    return GeneratePlanResponse(data=generated)


@router.post("/diet-suggestion", response_model=DietSuggestionResponse)
async def diet_suggestion(
    diet_request: DietSuggestionRequest,
    current_user: User = Depends(get_current_user),
) -> Any:
    """Get a single meal suggestion."""
    return DietSuggestionResponse(data=PlanGenerator.diet_suggestion(diet_request))


@router.get("/plans", response_model=PlanListResponse, response_model_exclude_none=True)
async def list_plans(
    db: AsyncSession = Depends(get_async_db),
    current_user: User = Depends(get_current_user),
) -> Any:
    """The user's most recent plans, newest first."""
    plans = await PlanArchive.list_plans(db, current_user.id)
    return PlanListResponse(data=[PlanOut.from_plan(plan) for plan in plans])


@router.get("/plans/{plan_id}", response_model=PlanResponse, response_model_exclude_none=True)
async def get_plan(
    plan_id: str,
    db: AsyncSession = Depends(get_async_db),
    current_user: User = Depends(get_current_user),
) -> Any:
    """Get one saved plan."""
    plan = await PlanArchive.get_plan(db, current_user.id, plan_id)
    return PlanResponse(data=PlanOut.from_plan(plan))


@router.get("/plans/{plan_id}/download", response_class=PlainTextResponse)
async def download_plan(
    plan_id: str,
    db: AsyncSession = Depends(get_async_db),
    current_user: User = Depends(get_current_user),
) -> PlainTextResponse:
    """Download a saved plan as a text file."""
    plan = await PlanArchive.get_plan(db, current_user.id, plan_id)
    filename = f"fitsphere-plan-{plan.created_at.strftime('%Y-%m-%d')}.txt"
    return PlainTextResponse(
        plan.plan,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.delete("/plans/{plan_id}", response_model=MessageResponse)
async def delete_plan(
    plan_id: str,
    db: AsyncSession = Depends(get_async_db),
    current_user: User = Depends(get_current_user),
) -> Any:
    """Delete one saved plan."""
    await PlanArchive.delete_plan(db, current_user.id, plan_id)
    return MessageResponse(message="Plan deleted successfully")
