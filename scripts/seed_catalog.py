"""
Catalog Seeding Script

Writes a demo course catalog, categories and blog posts into DATA_DIR for
development, and optionally creates (or promotes) an admin account.

Usage:
    python -m scripts.seed_catalog [--force] [--admin-email E --admin-password P]
"""
import argparse
import asyncio

from edule.db.config import create_store, get_password_hash_iterations
from edule.db.store import Collection
from edule.models.entities import build_record
from edule.repositories.queries import find_user_by_email
from edule.utils.security import hash_password
from edule.utils.timestamps import utcnow_iso


SEED_CATEGORIES = [
    {"id": "all", "name": "All Courses"},
    {"id": "development", "name": "Development"},
    {"id": "design", "name": "Design"},
    {"id": "business", "name": "Business"},
    {"id": "marketing", "name": "Marketing"},
]

SEED_COURSES = [
    {
        "title": "Complete Web Development Bootcamp",
        "category": "development",
        "instructor": "Sarah Johnson",
        "price": 89.99,
        "rating": 4.8,
        "badge": "Bestseller",
        "students": 15420,
        "duration": "42 hours",
        "level": "Beginner",
        "image": "images/courses/web-dev.jpg",
    },
    {
        "title": "Python for Data Science",
        "category": "development",
        "instructor": "Michael Chen",
        "price": 79.99,
        "rating": 4.7,
        "badge": "Popular",
        "students": 9870,
        "duration": "36 hours",
        "level": "Intermediate",
        "image": "images/courses/python-ds.jpg",
    },
    {
        "title": "Advanced JavaScript Patterns",
        "category": "development",
        "instructor": "Sarah Johnson",
        "price": 69.99,
        "rating": 4.6,
        "badge": "New",
        "students": 4310,
        "duration": "18 hours",
        "level": "Advanced",
        "image": "images/courses/js-patterns.jpg",
    },
    {
        "title": "UI/UX Design Fundamentals",
        "category": "design",
        "instructor": "Emma Davis",
        "price": 59.99,
        "rating": 4.9,
        "badge": "Top Rated",
        "students": 7630,
        "duration": "24 hours",
        "level": "Beginner",
        "image": "images/courses/uiux.jpg",
    },
    {
        "title": "Brand Identity Design",
        "category": "design",
        "instructor": "Emma Davis",
        "price": 49.99,
        "rating": 4.5,
        "badge": "Popular",
        "students": 3120,
        "duration": "15 hours",
        "level": "Intermediate",
        "image": "images/courses/branding.jpg",
    },
    {
        "title": "Startup Business Strategy",
        "category": "business",
        "instructor": "David Wilson",
        "price": 99.99,
        "rating": 4.6,
        "badge": "Bestseller",
        "students": 5210,
        "duration": "20 hours",
        "level": "All Levels",
        "image": "images/courses/startup.jpg",
    },
    {
        "title": "Digital Marketing Masterclass",
        "category": "marketing",
        "instructor": "Lisa Anderson",
        "price": 74.99,
        "rating": 4.7,
        "badge": "Popular",
        "students": 8800,
        "duration": "28 hours",
        "level": "Beginner",
        "image": "images/courses/marketing.jpg",
    },
]

SEED_BLOGS = [
    {
        "title": "10 Tips to Learn Programming Faster",
        "author": "Sarah Johnson",
        "date": "2025-01-15",
        "category": "development",
        "image": "images/blog/learn-faster.jpg",
        "excerpt": "Practical habits that make new concepts stick.",
        "content": "Consistency beats intensity. Code a little every day...",
    },
    {
        "title": "Why Design Systems Matter",
        "author": "Emma Davis",
        "date": "2025-02-03",
        "category": "design",
        "image": "images/blog/design-systems.jpg",
        "excerpt": "Shared components keep products consistent as teams grow.",
        "content": "A design system is a contract between design and code...",
    },
]


async def seed_catalog(force: bool = False, admin_email=None, admin_password=None):
    """Create seed documents in the configured data directory."""
    store = create_store()
    print(f"Seeding data directory: {store.data_dir}")

    for name in ("users", "enrollments"):
        await store.ensure(name)

    if force or not store.path_for("courses").exists():
        now = utcnow_iso()
        courses = Collection("courses", extras={"categories": SEED_CATEGORIES})
        for course in SEED_COURSES:
            courses.insert(build_record("courses", **course, createdAt=now))
        await store.save("courses", courses)
        print(f"Seeded {len(courses)} courses")
    else:
        print("Courses already exist (use --force to overwrite)")

    if force or not store.path_for("blogs").exists():
        blogs = Collection("blogs")
        for blog in SEED_BLOGS:
            blogs.insert(build_record("blogs", **blog))
        await store.save("blogs", blogs)
        print(f"Seeded {len(blogs)} blog posts")
    else:
        print("Blogs already exist (use --force to overwrite)")

    if admin_email and admin_password:
        password_hash = hash_password(admin_password, get_password_hash_iterations())
        async with store.transaction("users") as users:
            user = find_user_by_email(users, admin_email)
            if user:
                user["isAdmin"] = True
                print(f"Promoted existing user {user['id']} to admin")
            else:
                user = users.insert(
                    build_record(
                        "users",
                        name="Administrator",
                        email=admin_email,
                        password=password_hash,
                        isAdmin=True,
                        profileImage=None,
                        createdAt=utcnow_iso(),
                    )
                )
                print(f"Created admin user {user['id']}")


def main():
    parser = argparse.ArgumentParser(description="Seed the EduLe data directory")
    parser.add_argument("--force", action="store_true", help="Overwrite courses and blogs")
    parser.add_argument("--admin-email")
    parser.add_argument("--admin-password")
    args = parser.parse_args()
    asyncio.run(seed_catalog(args.force, args.admin_email, args.admin_password))


if __name__ == "__main__":
    main()
