"""Service operation tests against an in-memory store."""

import asyncio

import pytest

from edule.errors import Conflict, NotFound, Unauthorized, ValidationError
from edule.services.admin_service import AdminService
from edule.services.auth_service import AuthService
from edule.services.catalog_service import CatalogService
from edule.services.enrollment_service import EnrollmentService
from edule.services.message_service import MessageService


@pytest.fixture
def auth(memory_store):
    return AuthService(memory_store, hash_iterations=1000, admin_emails=["boss@x.com"])


@pytest.fixture
def enrollments(memory_store):
    return EnrollmentService(memory_store)


class TestAnnScenario:
    async def test_register_login_enroll_progress(self, auth, enrollments):
        user = await auth.register("Ann", "a@x.com", "pw1")
        assert user == {
            "id": 1, "name": "Ann", "email": "a@x.com",
            "isAdmin": False, "profileImage": None,
        }

        result = await auth.login("a@x.com", "pw1")
        assert result["user"]["id"] == 1
        assert result["token"]

        with pytest.raises(Unauthorized):
            await auth.login("a@x.com", "wrong")

        enrollment = await enrollments.enroll(1, 5)
        assert enrollment["id"] == 1
        assert enrollment["userId"] == 1
        assert enrollment["courseId"] == 5
        assert enrollment["progress"] == 0
        assert enrollment["completed"] is False
        assert enrollment["enrolledAt"]

        updated = await enrollments.update_progress(1, 5, 150)
        assert updated["progress"] == 100
        assert updated["completed"] is True


class TestAuthService:
    @pytest.mark.parametrize("fields", [
        ("", "a@x.com", "pw"), ("Ann", None, "pw"), ("Ann", "a@x.com", ""),
    ])
    async def test_register_requires_all_fields(self, auth, fields):
        with pytest.raises(ValidationError):
            await auth.register(*fields)

    async def test_duplicate_email_conflicts_without_growing(self, auth, memory_store):
        await auth.register("Ann", "a@x.com", "pw1")
        with pytest.raises(Conflict):
            await auth.register("Other Ann", "a@x.com", "pw2")
        assert len(await memory_store.load("users")) == 1

    async def test_password_stored_hashed(self, auth, memory_store):
        await auth.register("Ann", "a@x.com", "pw1")
        stored = (await memory_store.load("users")).get(1)
        assert stored["password"] != "pw1"
        assert stored["password"].startswith("pbkdf2:sha256:")

    async def test_configured_admin_email_registers_as_admin(self, auth):
        user = await auth.register("Boss", "boss@x.com", "pw")
        assert user["isAdmin"] is True

    async def test_login_requires_fields(self, auth):
        with pytest.raises(ValidationError):
            await auth.login("a@x.com", None)

    async def test_login_unknown_email(self, auth):
        with pytest.raises(Unauthorized):
            await auth.login("nobody@x.com", "pw")

    async def test_legacy_plaintext_password_upgraded_on_login(self, memory_store, auth):
        async with memory_store.transaction("users") as users:
            users.insert({
                "name": "Old", "email": "old@x.com", "password": "plain",
                "createdAt": "2024-01-01T00:00:00Z",
            })
        result = await auth.login("old@x.com", "plain")
        assert result["user"]["isAdmin"] is False
        stored = (await memory_store.load("users")).get(1)
        assert stored["password"].startswith("pbkdf2:sha256:")
        assert (await auth.login("old@x.com", "plain"))["user"]["id"] == 1

    async def test_overlapping_logins_during_legacy_upgrade(self, memory_store, auth):
        async with memory_store.transaction("users") as users:
            users.insert({"name": "Old", "email": "old@x.com", "password": "plain"})
        results = await asyncio.gather(
            auth.login("old@x.com", "plain"),
            auth.login("old@x.com", "plain"),
        )
        assert [r["user"]["id"] for r in results] == [1, 1]
        assert (await memory_store.load("users")).get(1)["password"].startswith(
            "pbkdf2:sha256:"
        )

    async def test_password_change_overlapping_legacy_upgrade(self, memory_store, auth):
        async with memory_store.transaction("users") as users:
            users.insert({"name": "Old", "email": "old@x.com", "password": "plain"})
        login, changed = await asyncio.gather(
            auth.login("old@x.com", "plain"),
            auth.change_password(1, "plain", "fresh"),
        )
        assert login["user"]["id"] == 1
        assert changed is None
        assert (await auth.login("old@x.com", "fresh"))["user"]["id"] == 1
        with pytest.raises(Unauthorized):
            await auth.login("old@x.com", "plain")

    async def test_session_token_authenticates_until_logout(self, auth):
        await auth.register("Ann", "a@x.com", "pw1")
        token = (await auth.login("a@x.com", "pw1"))["token"]
        assert (await auth.authenticate(token))["email"] == "a@x.com"
        await auth.logout(token)
        with pytest.raises(Unauthorized):
            await auth.authenticate(token)

    async def test_expired_session_rejected(self, memory_store):
        auth = AuthService(memory_store, session_ttl_hours=0, hash_iterations=1000)
        await auth.register("Ann", "a@x.com", "pw1")
        token = (await auth.login("a@x.com", "pw1"))["token"]
        with pytest.raises(Unauthorized):
            await auth.authenticate(token)

    async def test_authenticate_requires_token(self, auth):
        with pytest.raises(Unauthorized):
            await auth.authenticate(None)

    async def test_change_password(self, auth, memory_store):
        await auth.register("Ann", "a@x.com", "pw1")
        with pytest.raises(Unauthorized):
            await auth.change_password(1, "bad", "pw2")
        with pytest.raises(NotFound):
            await auth.change_password(99, "pw1", "pw2")
        with pytest.raises(ValidationError):
            await auth.change_password(1, "pw1", "")

        await auth.change_password(1, "pw1", "pw2")
        assert (await auth.login("a@x.com", "pw2"))["user"]["id"] == 1
        with pytest.raises(Unauthorized):
            await auth.login("a@x.com", "pw1")
        assert (await memory_store.load("users")).get(1)["passwordUpdatedAt"]

    async def test_update_profile_is_partial(self, auth):
        await auth.register("Ann", "a@x.com", "pw1")
        user = await auth.update_profile(1, profileImage="img.png")
        assert user["name"] == "Ann"
        assert user["profileImage"] == "img.png"

        user = await auth.update_profile(1, name="Annie")
        assert user["name"] == "Annie"
        assert user["profileImage"] == "img.png"

        user = await auth.update_profile(1, profileImage=None)
        assert user["profileImage"] is None

    async def test_update_profile_rejects_blank_name(self, auth):
        await auth.register("Ann", "a@x.com", "pw1")
        with pytest.raises(ValidationError):
            await auth.update_profile(1, name="   ")

    async def test_update_profile_missing_user(self, auth):
        with pytest.raises(NotFound):
            await auth.update_profile(42, name="Ghost")

    async def test_profile_missing_user(self, auth):
        with pytest.raises(NotFound):
            await auth.get_profile(42)

    async def test_concurrent_registrations_all_persist(self, auth, memory_store):
        await asyncio.gather(*(
            auth.register(f"User {i}", f"u{i}@x.com", "pw") for i in range(10)
        ))
        users = await memory_store.load("users")
        assert sorted(u["id"] for u in users) == list(range(1, 11))


class TestEnrollmentService:
    async def test_profile_after_completion(self, auth, enrollments):
        await auth.register("Ann", "a@x.com", "pw1")
        await enrollments.enroll(1, 4)
        await enrollments.update_progress(1, 4, 100)

        profile = await auth.get_profile(1)
        assert len(profile["enrolledCourses"]) == 1
        course = profile["enrolledCourses"][0]
        assert course["title"] == "UI/UX Design Fundamentals"
        assert course["completed"] is True
        assert course["progress"] == 100
        assert profile["stats"] == {"totalEnrolled": 1, "completed": 1, "inProgress": 0}
        assert "password" not in profile["user"]

    async def test_duplicate_enrollment_conflicts(self, auth, enrollments, memory_store):
        await auth.register("Ann", "a@x.com", "pw1")
        await enrollments.enroll(1, 2)
        with pytest.raises(Conflict):
            await enrollments.enroll(1, 2)
        stored = [
            e for e in await memory_store.load("enrollments")
            if e["userId"] == 1 and e["courseId"] == 2
        ]
        assert len(stored) == 1

    async def test_enroll_validation_and_lookups(self, auth, enrollments):
        await auth.register("Ann", "a@x.com", "pw1")
        with pytest.raises(ValidationError):
            await enrollments.enroll(None, 1)
        with pytest.raises(NotFound):
            await enrollments.enroll(1, 999)
        with pytest.raises(NotFound):
            await enrollments.enroll(77, 1)

    @pytest.mark.parametrize("given,stored,completed", [
        (-20, 0, False),
        (0, 0, False),
        (42, 42, False),
        (99.5, 99.5, False),
        (100, 100, True),
        (250, 100, True),
    ])
    async def test_progress_is_clamped(self, auth, enrollments, given, stored, completed):
        await auth.register("Ann", "a@x.com", "pw1")
        await enrollments.enroll(1, 1)
        enrollment = await enrollments.update_progress(1, 1, given)
        assert enrollment["progress"] == stored
        assert enrollment["completed"] is completed
        assert enrollment["lastUpdated"]

    async def test_progress_can_drop_after_completion(self, auth, enrollments):
        await auth.register("Ann", "a@x.com", "pw1")
        await enrollments.enroll(1, 1)
        await enrollments.update_progress(1, 1, 100)
        enrollment = await enrollments.update_progress(1, 1, 60)
        assert enrollment["completed"] is False

    async def test_progress_requires_values_and_enrollment(self, enrollments):
        with pytest.raises(ValidationError):
            await enrollments.update_progress(1, 1, None)
        with pytest.raises(ValidationError):
            await enrollments.update_progress(None, 1, 10)
        with pytest.raises(NotFound):
            await enrollments.update_progress(1, 1, 10)


class TestCatalogService:
    async def test_listing(self, memory_store):
        result = await CatalogService(memory_store).list_courses(category="design")
        assert result["count"] == 1
        assert result["courses"][0]["id"] == 4

    async def test_course_detail_and_missing(self, memory_store):
        catalog = CatalogService(memory_store)
        detail = await catalog.get_course(2)
        assert [c["id"] for c in detail["relatedCourses"]] == [1, 3]
        with pytest.raises(NotFound):
            await catalog.get_course(404)

    async def test_blogs(self, memory_store):
        catalog = CatalogService(memory_store)
        assert len(await catalog.list_blogs()) == 2
        assert (await catalog.get_blog(2))["title"] == "Why Design Systems Matter"
        with pytest.raises(NotFound):
            await catalog.get_blog(9)


class TestMessageService:
    async def test_contact_is_not_persisted(self, memory_store):
        messages = MessageService(memory_store)
        reply = await messages.submit_contact("Ann", "a@x.com", "Hi", "Hello")
        assert "Thank you" in reply
        assert await messages.list_messages() == []

    async def test_contact_requires_fields(self, memory_store):
        with pytest.raises(ValidationError):
            await MessageService(memory_store).submit_contact("Ann", "", None, "Hi")

    async def test_application_lifecycle(self, memory_store):
        messages = MessageService(memory_store)
        record = await messages.submit_instructor_application(
            "Bob", "b@x.com", phone="555", expertise="Go", experience="5y", message="Hire me"
        )
        assert record["status"] == "pending"
        assert record["type"] == "instructor_request"

        updated = await messages.set_status(record["id"], "accepted")
        assert updated["status"] == "accepted"
        with pytest.raises(ValidationError):
            await messages.set_status(record["id"], "maybe")
        with pytest.raises(NotFound):
            await messages.set_status(999, "rejected")

        await messages.delete_message(record["id"])
        assert await messages.list_messages() == []
        with pytest.raises(NotFound):
            await messages.delete_message(record["id"])


class TestAdminService:
    async def test_stats(self, auth, enrollments, memory_store):
        await auth.register("Ann", "a@x.com", "pw1")
        await enrollments.enroll(1, 1)
        stats = await AdminService(memory_store).stats()
        assert stats == {
            "totalUsers": 1, "totalCourses": 7,
            "totalEnrollments": 1, "totalInstructors": 5,
        }

    async def test_role_change(self, auth, memory_store):
        await auth.register("Ann", "a@x.com", "pw1")
        admin = AdminService(memory_store)
        assert (await admin.set_user_role(1, True))["isAdmin"] is True
        assert (await admin.list_users())[0]["isAdmin"] is True
        with pytest.raises(NotFound):
            await admin.set_user_role(9, True)
        with pytest.raises(ValidationError):
            await admin.set_user_role(1, None)

    async def test_add_course_round_trip(self, memory_store):
        admin = AdminService(memory_store)
        fields = {
            "title": "Rust in Practice", "category": "development",
            "instructor": "Ferris", "price": 39.5, "level": "Advanced",
        }
        course = await admin.add_course(fields)
        assert course["id"] == 8
        assert course["createdAt"]
        assert {k: v for k, v in course.items() if k not in ("id", "createdAt")} == fields

        detail = await CatalogService(memory_store).get_course(course["id"])
        assert detail["course"] == course

    async def test_add_course_requires_core_fields(self, memory_store):
        with pytest.raises(ValidationError):
            await AdminService(memory_store).add_course({"title": "No category"})

    async def test_delete_course_ids_not_reused(self, memory_store):
        admin = AdminService(memory_store)
        await admin.delete_course(7)
        with pytest.raises(NotFound):
            await admin.delete_course(7)
        course = await admin.add_course(
            {"title": "Fresh", "category": "design", "instructor": "New Person"}
        )
        assert course["id"] == 8
