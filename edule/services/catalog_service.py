"""Read-only storefront catalog: courses, categories and blog posts."""
from __future__ import annotations
from typing import Any, Dict, List, Optional

from edule.db.store import RecordStore
from edule.errors import NotFound
from edule.repositories.queries import (
    filter_courses,
    find_by_id,
    list_categories,
    related_courses,
)


class CatalogService:
    def __init__(self, store: RecordStore):
        self.store = store

    async def list_courses(
        self, category: Optional[str] = None, search: Optional[str] = None
    ) -> Dict[str, Any]:
        courses = await self.store.load("courses")
        matched = filter_courses(courses, category, search)
        return {"count": len(matched), "courses": matched}

    async def get_course(self, course_id: int) -> Dict[str, Any]:
        courses = await self.store.load("courses")
        course = find_by_id(courses, course_id)
        if course is None:
            raise NotFound("Course not found")
        return {
            "course": course,
            "relatedCourses": related_courses(courses, course),
        }

    async def list_categories(self) -> List[Any]:
        return list_categories(await self.store.load("courses"))

    async def list_blogs(self) -> List[dict]:
        return list(await self.store.load("blogs"))

    async def get_blog(self, blog_id: int) -> dict:
        blog = find_by_id(await self.store.load("blogs"), blog_id)
        if blog is None:
            raise NotFound("Blog not found")
        return blog
