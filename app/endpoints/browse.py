from typing import Optional
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.schemas.browse import BrowseResponse
from app.services.browse import browse_service
from app.utils import deps

router = APIRouter()

@router.get("", response_model=BrowseResponse)
def browse_lessons(
    level: Optional[str] = None,
    subject: Optional[str] = None,
    grade: Optional[str] = None,
    db: Session = Depends(deps.get_db)
):
    """Published lessons grouped by placement, subject and chapter."""
    return browse_service.browse(db, level=level, subject=subject, grade=grade)
