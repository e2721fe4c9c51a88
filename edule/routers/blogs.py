"""Blogs router (read-only)."""
from __future__ import annotations

from fastapi import APIRouter, Depends

from edule.db.config import get_store
from edule.db.store import RecordStore
from edule.routers.deps import parse_record_id
from edule.services.catalog_service import CatalogService

router = APIRouter(prefix="/blogs", tags=["Blogs"])


def _get_service(store: RecordStore = Depends(get_store)) -> CatalogService:
    return CatalogService(store)


@router.get("")
async def list_blogs(service: CatalogService = Depends(_get_service)):
    return {"success": True, "blogs": await service.list_blogs()}


@router.get("/{blog_id}")
async def get_blog(blog_id: str, service: CatalogService = Depends(_get_service)):
    blog = await service.get_blog(parse_record_id(blog_id, "Blog"))
    return {"success": True, "blog": blog}
