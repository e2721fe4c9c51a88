"""Courses router: public catalog listing, course detail and categories."""
from __future__ import annotations
from typing import Optional

from fastapi import APIRouter, Depends

from edule.db.config import get_store
from edule.db.store import RecordStore
from edule.routers.deps import parse_record_id
from edule.services.catalog_service import CatalogService

router = APIRouter(tags=["Courses"])

# Helpers ------------------------------------------------------------------


def _get_service(store: RecordStore = Depends(get_store)) -> CatalogService:
    return CatalogService(store)

# Routes -------------------------------------------------------------------


@router.get("/courses")
async def list_courses(
    category: Optional[str] = None,
    search: Optional[str] = None,
    service: CatalogService = Depends(_get_service),
):
    """List courses, optionally filtered by category and a search term."""
    result = await service.list_courses(category=category, search=search)
    return {"success": True, **result}


@router.get("/courses/{course_id}")
async def get_course(
    course_id: str, service: CatalogService = Depends(_get_service)
):
    result = await service.get_course(parse_record_id(course_id, "Course"))
    return {"success": True, **result}


@router.get("/categories")
async def list_categories(service: CatalogService = Depends(_get_service)):
    return {"success": True, "categories": await service.list_categories()}
