from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from jackemate.database import get_db
from jackemate.models.user import User
from jackemate.schemas.stats import DashboardStats, PlatformStats
from jackemate.services import stats_service
from jackemate.utils.security import get_current_user

router = APIRouter(prefix="/estadisticas", tags=["Statistics"])


@router.get("", response_model=PlatformStats)
def platform_stats(db: Session = Depends(get_db)):
    return stats_service.get_platform_stats(db)


@router.get("/dashboard", response_model=DashboardStats)
def dashboard(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Admin and Interested roles only"""
    return stats_service.get_dashboard(db, current_user.id)
