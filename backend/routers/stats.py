from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from database import get_db
from crud.dashboard import get_dashboard_stats
from schemas.dashboard import DashboardStats
from utils.auth_utils import get_current_user

router = APIRouter(prefix="/api/stats", tags=["Stats"])

@router.get("/dashboard", response_model=DashboardStats)
def read_dashboard_stats(db: Session = Depends(get_db), user: dict = Depends(get_current_user)):
    return get_dashboard_stats(db)
