from fastapi import APIRouter, Depends

from campusvote.dashboard import admin_dashboard_stats
from campusvote.dependencies import get_storage, require_admin
from campusvote.schemas import DashboardStats
from campusvote.security import Identity
from campusvote.storage_mongo import MongoStorage

router = APIRouter(prefix="/api/dashboard", tags=["Dashboard"])


@router.get("/admin", response_model=DashboardStats)
def get_admin_stats(
    _: Identity = Depends(require_admin),
    storage: MongoStorage = Depends(get_storage),
):
    return admin_dashboard_stats(storage)
