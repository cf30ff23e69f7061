from typing import List

from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy.orm import Session

from placefinder.api.deps import unwrap
from placefinder.core.db import get_db
from placefinder.places.schemas import CategoryOut
from placefinder.places.services.categories import create_category_service

router = APIRouter()


class CategoryListResponse(BaseModel):
    data: List[CategoryOut]


@router.get("/categories", response_model=CategoryListResponse)
def list_categories(db: Session = Depends(get_db)):
    """All place categories ordered by name"""
    return CategoryListResponse(data=unwrap(create_category_service(db).list_categories()))
