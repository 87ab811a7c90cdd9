from __future__ import annotations

from typing import List

from fastapi import APIRouter, HTTPException, Request

from healthnav.domain.schemas.profile import UserProfile
from healthnav.domain.schemas.report import ReportListItem, ReportRecord

from .deps import get_pipeline


router = APIRouter()


def _store(request: Request):
    return get_pipeline(request).store


@router.get("/profiles/{user_id}", response_model=UserProfile)
def get_profile(request: Request, user_id: str) -> UserProfile:
    try:
        profile = _store(request).get_profile(user_id)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    if profile is None:
        raise HTTPException(status_code=404, detail="profile not found")
    return profile


@router.put("/profiles/{user_id}", summary="Save questionnaire answers", response_model=UserProfile)
def put_profile(request: Request, user_id: str, profile: UserProfile) -> UserProfile:
    try:
        return _store(request).save_profile(user_id, profile)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e


@router.get("/profiles/{user_id}/reports", response_model=List[ReportListItem])
def list_reports(request: Request, user_id: str) -> List[ReportListItem]:
    try:
        records = _store(request).list_reports(user_id)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    return [ReportListItem.from_record(r) for r in records]


@router.get("/profiles/{user_id}/reports/{report_id}", response_model=ReportRecord)
def get_report(request: Request, user_id: str, report_id: str) -> ReportRecord:
    try:
        record = _store(request).get_report(user_id, report_id)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    if record is None:
        raise HTTPException(status_code=404, detail="report not found")
    return record
