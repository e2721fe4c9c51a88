"""
Pytest configuration and fixtures for backend testing
"""

import json
import os
import tempfile
from pathlib import Path

import pytest
from fastapi.testclient import TestClient
from httpx import ASGITransport, AsyncClient

# Set test environment before the app reads its configuration
_session_data_dir = tempfile.mkdtemp(prefix="edule-test-")
os.environ["ENVIRONMENT"] = "test"
os.environ["DATA_DIR"] = _session_data_dir
os.environ["PASSWORD_HASH_ITERATIONS"] = "1000"
os.environ["ADMIN_EMAILS"] = "admin@edule.test"

from edule.main import app  # noqa: E402
from edule.db.config import get_store  # noqa: E402
from edule.db.store import JsonFileRecordStore, MemoryRecordStore  # noqa: E402

ADMIN_EMAIL = "admin@edule.test"

SAMPLE_CATEGORIES = [
    {"id": "all", "name": "All Courses"},
    {"id": "development", "name": "Development"},
    {"id": "design", "name": "Design"},
    {"id": "marketing", "name": "Marketing"},
    {"id": "business", "name": "Business"},
]

SAMPLE_COURSES = [
    {"id": 1, "title": "Complete Web Development Bootcamp", "category": "development",
     "instructor": "Sarah Johnson", "price": 89.99, "rating": 4.8, "badge": "Bestseller"},
    {"id": 2, "title": "Python for Data Science", "category": "development",
     "instructor": "Michael Chen", "price": 79.99, "rating": 4.7, "badge": "Popular"},
    {"id": 3, "title": "Advanced JavaScript Patterns", "category": "development",
     "instructor": "Sarah Johnson", "price": 69.99, "rating": 4.6, "badge": "New"},
    {"id": 4, "title": "UI/UX Design Fundamentals", "category": "design",
     "instructor": "Emma Davis", "price": 59.99, "rating": 4.9, "badge": "Top Rated"},
    {"id": 5, "title": "Digital Marketing Masterclass", "category": "marketing",
     "instructor": "Lisa Anderson", "price": 74.99, "rating": 4.7, "badge": "Popular"},
    {"id": 6, "title": "Leading Development Teams", "category": "business",
     "instructor": "David Wilson", "price": 99.99, "rating": 4.5, "badge": "New"},
    {"id": 7, "title": "Mobile Apps with React Native", "category": "Development",
     "instructor": "Michael Chen", "price": 84.99, "rating": 4.4, "badge": "New"},
]

SAMPLE_BLOGS = [
    {"id": 1, "title": "10 Tips to Learn Programming Faster", "author": "Sarah Johnson",
     "content": "Code a little every day."},
    {"id": 2, "title": "Why Design Systems Matter", "author": "Emma Davis",
     "content": "Shared components keep products consistent."},
]


def catalog_documents():
    """Seed documents keyed by collection name"""
    return {
        "courses": {"courses": SAMPLE_COURSES, "categories": SAMPLE_CATEGORIES},
        "users": {"users": []},
        "enrollments": {"enrollments": []},
        "blogs": {"blogs": SAMPLE_BLOGS},
    }


def write_catalog(data_dir: Path):
    """Write the seed documents as JSON files the way the store names them"""
    store = JsonFileRecordStore(data_dir)
    for name, document in catalog_documents().items():
        with open(store.path_for(name), "w", encoding="utf-8") as f:
            json.dump(document, f, indent=2)
    return store


write_catalog(Path(_session_data_dir))


@pytest.fixture(scope="session")
def test_client():
    """Create a test client for FastAPI application (real startup, shared data dir)"""
    with TestClient(app) as client:
        yield client


@pytest.fixture
def file_store(tmp_path):
    """JSON-file store seeded with the sample catalog in a fresh directory"""
    return write_catalog(tmp_path)


@pytest.fixture
def memory_store():
    """In-memory store seeded with the sample catalog"""
    return MemoryRecordStore(catalog_documents())


@pytest.fixture
async def test_app(file_store):
    """App wired to an isolated per-test data directory"""
    app.dependency_overrides[get_store] = lambda: file_store
    yield app
    app.dependency_overrides.clear()


@pytest.fixture
async def client(test_app):
    transport = ASGITransport(app=test_app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c


# Helper functions for tests
async def register_and_login(client, name="Ann", email="a@x.com", password="pw1"):
    """Register a user, log in, and return (user, auth headers)"""
    r = await client.post(
        "/api/auth/register",
        json={"name": name, "email": email, "password": password},
    )
    assert r.status_code == 200, r.text
    r = await client.post(
        "/api/auth/login", json={"email": email, "password": password}
    )
    assert r.status_code == 200, r.text
    body = r.json()
    return body["user"], {"Authorization": f"Bearer {body['token']}"}


async def admin_headers(client):
    """Log in as the configured admin account, registering it on first use"""
    _, headers = await register_and_login(
        client, name="Admin", email=ADMIN_EMAIL, password="admin-pw"
    )
    return headers


def assert_response_success(response, expected_status=200):
    """Assert that response is successful"""
    assert response.status_code == expected_status, f"Expected {expected_status}, got {response.status_code}: {response.text}"
    assert response.json()["success"] is True


def assert_response_error(response, expected_status=400):
    """Assert that response is an error in the standard envelope"""
    assert response.status_code == expected_status, f"Expected error {expected_status}, got {response.status_code}: {response.text}"
    body = response.json()
    assert body["success"] is False
    assert body["message"]


def pytest_collection_modifyitems(config, items):
    """Add markers to tests based on their location"""
    for item in items:
        if "api" in str(item.fspath):
            item.add_marker(pytest.mark.integration)
        else:
            item.add_marker(pytest.mark.unit)
