from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from jackemate.crud import catalog as catalog_crud
from jackemate.database import get_db
from jackemate.schemas.catalog import CatalogItem

router = APIRouter(tags=["Reference data"])


@router.get("/categorias", response_model=List[CatalogItem])
def list_categories(db: Session = Depends(get_db)):
    return catalog_crud.list_categories(db)


@router.get("/prioridades", response_model=List[CatalogItem])
def list_priorities(db: Session = Depends(get_db)):
    return catalog_crud.list_priorities(db)


@router.get("/estados", response_model=List[CatalogItem])
def list_statuses(db: Session = Depends(get_db)):
    return catalog_crud.list_statuses(db)
