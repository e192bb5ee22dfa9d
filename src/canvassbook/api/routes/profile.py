"""Profile and settings endpoints."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body, Depends, HTTPException
from pydantic import ValidationError

from canvassbook.api.deps import get_repository
from canvassbook.models.profile import UserProfile
from canvassbook.repository.reports import ReportRepository

router = APIRouter(tags=["profile"])


@router.get("/profile")
async def get_profile(repository: ReportRepository = Depends(get_repository)) -> dict:
    profile = await repository.profiles.get_user_profile()
    if profile is None:
        raise HTTPException(status_code=404, detail="No profile yet")
    return profile.to_json_dict()


@router.put("/profile")
async def save_profile(profile: UserProfile, repository: ReportRepository = Depends(get_repository)) -> dict:
    stored = await repository.profiles.save_user_profile(profile)
    await repository.profiles.set_first_use_date()
    return stored.to_json_dict()


@router.get("/settings")
async def get_settings(repository: ReportRepository = Depends(get_repository)) -> dict:
    settings = await repository.profiles.get_settings()
    return settings.to_json_dict()


@router.patch("/settings")
async def update_settings(
    changes: dict[str, Any] = Body(...),
    repository: ReportRepository = Depends(get_repository),
) -> dict:
    try:
        settings = await repository.profiles.update_settings(**changes)
    except ValidationError as exc:
        raise HTTPException(status_code=422, detail="Invalid settings") from exc
    return settings.to_json_dict()
