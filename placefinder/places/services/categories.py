import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from placefinder.core.results import Ok, Result, ServiceUnavailable
from placefinder.places.repository import CategoryRepository
from placefinder.places.schemas import CategoryOut

logger = logging.getLogger(__name__)


class CategoryService:
    def __init__(self, categories: CategoryRepository):
        self.categories = categories

    def list_categories(self) -> Result:
        """All categories ordered by name"""
        try:
            categories = self.categories.list_all()
        except SQLAlchemyError:
            logger.exception("Error fetching categories")
            return ServiceUnavailable("Failed to retrieve categories")
        return Ok([CategoryOut.model_validate(c) for c in categories])


def create_category_service(db: Session) -> CategoryService:
    return CategoryService(CategoryRepository(db))
