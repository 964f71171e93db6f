from fastapi import APIRouter

from app.core.config import settings
from app.schemas.response import HealthResponse

router = APIRouter()

@router.get("", response_model=HealthResponse)
def health_check():
    return HealthResponse(version=settings.VERSION)
