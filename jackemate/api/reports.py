# jackemate/api/reports.py
"""
Reports API Router

Endpoints:
- GET /reportes - Paginated, filterable feed
- POST /reportes - Create a report (multipart form, optional photo)
- GET /reportes/recientes - Latest reports for the landing page
- GET /reportes/{report_id} - Report detail
- GET /reportes/{report_id}/historial - Status history
- DELETE /reportes/{report_id} - Soft-delete (author or admin)
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile, status
from sqlalchemy.orm import Session

from jackemate.database import get_db
from jackemate.models.user import User
from jackemate.schemas.report import (
    HistoryEntry,
    ReportCreated,
    ReportDeleted,
    ReportDetail,
    ReportPage,
    ReportSummary,
)
from jackemate.services import report_service, state_service
from jackemate.utils.security import get_current_user, get_current_user_optional

router = APIRouter(prefix="/reportes", tags=["Reports"])


# ======================
# FEED
# ======================
@router.get("", response_model=ReportPage)
def list_reports(
    offset: int = Query(0, description="Negative values are treated as 0"),
    limite: int = Query(report_service.DEFAULT_PAGE_SIZE, ge=1, le=report_service.MAX_PAGE_SIZE),
    search: Optional[str] = Query(None, description="Matches title or description"),
    categoria: Optional[str] = Query(None, description="Category name or 'all'"),
    estado: Optional[str] = Query(None, description="Status name or 'all'"),
    prioridad: Optional[str] = Query(None, description="Priority name or 'all'"),
    con_coordenadas: bool = Query(False, description="Only reports with coordinates"),
    db: Session = Depends(get_db)
):
    return report_service.list_reports(
        db,
        search=search,
        category=categoria,
        status=estado,
        priority=prioridad,
        with_coordinates=con_coordenadas,
        offset=offset,
        limit=limite,
    )


@router.get("/recientes", response_model=List[ReportSummary])
def recent_reports(
    limite: int = Query(3, ge=1, le=20),
    db: Session = Depends(get_db)
):
    return report_service.get_recent_reports(db, limite)


# ======================
# CREATE
# ======================
@router.post("", response_model=ReportCreated, status_code=status.HTTP_201_CREATED)
def create_report(
    titulo: str = Form(...),
    descripcion: str = Form(...),
    categoria_id: int = Form(...),
    prioridad_id: int = Form(...),
    lat: Optional[float] = Form(None),
    lon: Optional[float] = Form(None),
    foto: Optional[UploadFile] = File(None),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """
    Create a Pending report and award the author its creation points.

    A photo that cannot be stored does not fail the request; the response
    carries a ``warning`` instead.
    """
    has_photo = foto is not None and bool(foto.filename)
    return report_service.create_report(
        db,
        author_id=current_user.id,
        title=titulo,
        description=descripcion,
        category_id=categoria_id,
        priority_id=prioridad_id,
        lat=lat,
        lon=lon,
        photo=foto.file if has_photo else None,
        photo_filename=foto.filename if has_photo else None,
        photo_content_type=foto.content_type if has_photo else None,
    )


# ======================
# DETAIL
# ======================
@router.get("/{report_id}", response_model=ReportDetail)
def get_report(
    report_id: int,
    current_user: Optional[User] = Depends(get_current_user_optional),
    db: Session = Depends(get_db)
):
    viewer_id = current_user.id if current_user else None
    return report_service.get_report_detail(db, report_id, viewer_id)


@router.get("/{report_id}/historial", response_model=List[HistoryEntry])
def get_report_history(report_id: int, db: Session = Depends(get_db)):
    return state_service.get_history(db, report_id)


# ======================
# DELETE
# ======================
@router.delete("/{report_id}", response_model=ReportDeleted)
def delete_report(
    report_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    return report_service.delete_report(db, report_id, current_user.id)
