"""
Deadline API Routes

Deadline entries are derived from events on every request.
"""
from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ..database import get_db
from ..auth import get_current_org
from ..services.deadlines import DeadlineEngine

router = APIRouter(prefix="/deadlines", tags=["deadlines"])


@router.get("", response_model=List[dict])
async def list_deadlines(db: Session = Depends(get_db), org: str = Depends(get_current_org)):
    """Deadlines the signed-in organization owns or oversees."""
    return [entry.to_dict() for entry in DeadlineEngine(db).for_viewer(org)]


@router.get("/today", response_model=List[dict])
async def deadlines_due_today(
    on: Optional[date] = Query(None, description="Day to check; defaults to today"),
    db: Session = Depends(get_db),
    org: str = Depends(get_current_org),
):
    return [entry.to_dict() for entry in DeadlineEngine(db).due_today(org, on)]


@router.get("/all", response_model=List[dict])
async def all_deadlines(db: Session = Depends(get_db), org: str = Depends(get_current_org)):
    """Every deadline across all organizations, for the calendar view."""
    return [entry.to_dict() for entry in DeadlineEngine(db).all_entries()]
