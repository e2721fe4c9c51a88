"""Read-side lookups over loaded collection snapshots.

Pure functions: they never touch storage and never mutate their inputs, so
services can run them on whatever ``Collection`` (or plain list) they loaded.
"""
from __future__ import annotations
from typing import Any, Iterable, List, Optional


def find_by_id(records: Iterable[dict], record_id: int) -> Optional[dict]:
    for record in records:
        if record.get("id") == record_id:
            return record
    return None


def find_user_by_email(users: Iterable[dict], email: str) -> Optional[dict]:
    """Exact, case-sensitive email match."""
    for user in users:
        if user.get("email") == email:
            return user
    return None


def find_enrollment(
    enrollments: Iterable[dict], user_id: int, course_id: int
) -> Optional[dict]:
    for enrollment in enrollments:
        if (
            enrollment.get("userId") == user_id
            and enrollment.get("courseId") == course_id
        ):
            return enrollment
    return None


def enrollments_for_user(enrollments: Iterable[dict], user_id: int) -> List[dict]:
    return [e for e in enrollments if e.get("userId") == user_id]


def _matches_category(course: dict, category: Optional[str]) -> bool:
    if not category or category.lower() == "all":
        return True
    return str(course.get("category", "")).lower() == category.lower()


def _matches_search(course: dict, search: Optional[str]) -> bool:
    if not search:
        return True
    search_lower = search.lower()
    return (
        search_lower in str(course.get("title", "")).lower()
        # instructor match is case-sensitive, as the storefront always did
        or search in str(course.get("instructor", ""))
        or search_lower in str(course.get("category", "")).lower()
    )


def filter_courses(
    courses: Iterable[dict],
    category: Optional[str] = None,
    search: Optional[str] = None,
) -> List[dict]:
    """Catalog listing filter: category AND search, storage order kept."""
    return [
        c for c in courses
        if _matches_category(c, category) and _matches_search(c, search)
    ]


def related_courses(
    courses: Iterable[dict], course: dict, limit: int = 3
) -> List[dict]:
    related = [
        c for c in courses
        if c.get("category") == course.get("category")
        and c.get("id") != course.get("id")
    ]
    return related[:limit]


def list_categories(courses: Any) -> List[Any]:
    """Stored ``categories`` list if the catalog has one, else derived."""
    extras = getattr(courses, "extras", {})
    if "categories" in extras:
        return list(extras["categories"])
    seen: List[str] = []
    for course in courses:
        category = course.get("category")
        if category and category not in seen:
            seen.append(category)
    return seen


def count_distinct(records: Iterable[dict], field: str) -> int:
    return len({r.get(field) for r in records})
