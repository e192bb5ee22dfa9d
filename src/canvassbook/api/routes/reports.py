"""Report endpoints: daily entry, weekly/monthly aggregates and calendar views."""

from __future__ import annotations

from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Path

from canvassbook.api.deps import get_repository
from canvassbook.models.reports import DailyReport
from canvassbook.repository.reports import ReportRepository

router = APIRouter(tags=["reports"])


@router.get("/daily")
async def list_daily(
    start: date | None = None,
    end: date | None = None,
    repository: ReportRepository = Depends(get_repository),
) -> list[dict]:
    if start is not None or end is not None:
        reports = await repository.list_daily_between(start or date.min, end or date.max)
    else:
        reports = await repository.list_daily()
    return [r.to_json_dict() for r in reports]


@router.put("/daily")
async def save_daily(report: DailyReport, repository: ReportRepository = Depends(get_repository)) -> dict:
    stored = await repository.save_daily(report)
    return stored.to_json_dict()


@router.get("/daily/{day}")
async def get_daily(day: date, repository: ReportRepository = Depends(get_repository)) -> dict:
    report = await repository.get_daily(day)
    if report is None:
        raise HTTPException(status_code=404, detail="No report for this date")
    return report.to_json_dict()


@router.delete("/daily/{day}", status_code=204)
async def delete_daily(day: date, repository: ReportRepository = Depends(get_repository)) -> None:
    if not await repository.delete_daily(day):
        raise HTTPException(status_code=404, detail="No report for this date")


@router.get("/weekly")
async def list_weekly(repository: ReportRepository = Depends(get_repository)) -> list[dict]:
    return [r.to_json_dict() for r in await repository.list_weekly()]


@router.post("/weekly/rebuild")
async def rebuild_weekly(repository: ReportRepository = Depends(get_repository)) -> list[dict]:
    return [r.to_json_dict() for r in await repository.rebuild_weekly()]


@router.get("/weekly/current")
async def current_week(repository: ReportRepository = Depends(get_repository)) -> dict:
    report = await repository.get_current_week()
    if report is None:
        raise HTTPException(status_code=404, detail="No report for the current week")
    return report.to_json_dict()


@router.get("/weekly/{week_id}")
async def get_weekly(week_id: str, repository: ReportRepository = Depends(get_repository)) -> dict:
    report = await repository.get_weekly(week_id)
    if report is None:
        raise HTTPException(status_code=404, detail="Week not found")
    return report.to_json_dict()


@router.get("/monthly")
async def list_monthly(repository: ReportRepository = Depends(get_repository)) -> list[dict]:
    return [r.to_json_dict() for r in await repository.list_monthly()]


@router.post("/monthly/{year}/{month}")
async def generate_monthly(
    year: int,
    month: int = Path(ge=1, le=12),
    repository: ReportRepository = Depends(get_repository),
) -> dict:
    report = await repository.generate_monthly(month, year)
    return report.to_json_dict()


@router.get("/missing-dates")
async def missing_dates(repository: ReportRepository = Depends(get_repository)) -> list[str]:
    return [day.isoformat() for day in await repository.missing_dates()]


@router.get("/current-week-dates")
async def current_week_dates(repository: ReportRepository = Depends(get_repository)) -> list[str]:
    return [day.isoformat() for day in repository.current_week_dates()]


@router.get("/week-summary")
async def week_summary(repository: ReportRepository = Depends(get_repository)) -> dict:
    summary = await repository.week_summary()
    return summary.to_json_dict()


@router.get("/performance")
async def performance(repository: ReportRepository = Depends(get_repository)) -> dict:
    result = await repository.weekly_performance()
    return result.to_json_dict()
