"""Endpoint tests over the ASGI app."""

import pytest
from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from learnpath import main
from learnpath.models import Roadmap, User
from learnpath.services import user_service

PROFILE = {
    "interests": "websites",
    "educationLevel": "bachelor",
    "careerGoal": "Frontend Developer",
    "currentSkillLevel": "beginner",
    "learningStyle": "visual",
    "studyTime": 6,
}

HEADERS = {"x-user-id": "uid-1"}


class TestService:
    @pytest.mark.asyncio
    async def test_health(self, client: AsyncClient) -> None:
        response = await client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    @pytest.mark.asyncio
    async def test_unknown_route_uses_error_envelope(self, client: AsyncClient) -> None:
        response = await client.get("/api/does-not-exist")
        assert response.status_code == 404
        assert "error" in response.json()

    def test_run_serves_configured_host_and_port(self, monkeypatch: pytest.MonkeyPatch) -> None:
        calls = []
        monkeypatch.setattr(main.uvicorn, "run", lambda target, **kwargs: calls.append((target, kwargs)))

        main.run()

        target, kwargs = calls[0]
        assert target == "learnpath.main:app"
        assert kwargs["host"] == main.settings.HOST
        assert kwargs["port"] == main.settings.PORT


class TestUsersAndProfile:
    @pytest.mark.asyncio
    async def test_create_user(self, client: AsyncClient) -> None:
        response = await client.post(
            "/api/auth/create-user", json={"uid": "u-1", "email": "a@b.c", "name": "A"}
        )
        assert response.status_code == 200
        assert response.json() == {"success": True, "message": "User created successfully", "uid": "u-1"}

    @pytest.mark.asyncio
    async def test_create_user_missing_email(self, client: AsyncClient) -> None:
        response = await client.post("/api/auth/create-user", json={"uid": "u-1"})
        assert response.status_code == 400
        assert response.json()["error"] == "Missing required fields"

    @pytest.mark.asyncio
    async def test_create_user_email_owned_by_other_uid(
        self, client: AsyncClient, seed_user: User
    ) -> None:
        response = await client.post(
            "/api/auth/create-user",
            json={"uid": "someone-else", "email": seed_user.email, "name": "Other"},
        )
        assert response.status_code == 409
        assert response.json() == {"error": "Email already registered"}

    @pytest.mark.asyncio
    async def test_create_user_same_uid_updates(
        self, client: AsyncClient, test_session: AsyncSession, seed_user: User
    ) -> None:
        response = await client.post(
            "/api/auth/create-user",
            json={"uid": seed_user.id, "email": "new@example.com", "name": "Renamed"},
        )
        assert response.status_code == 200
        assert response.json()["uid"] == seed_user.id

        user = await user_service.get_user(test_session, seed_user.id)
        assert user.email == "new@example.com"
        assert user.name == "Renamed"

    @pytest.mark.asyncio
    async def test_profile_round_trip(self, client: AsyncClient) -> None:
        response = await client.get("/api/profile", params={"userId": "u-7"})
        assert response.json() == {"profile": None}

        response = await client.post(
            "/api/profile", json={"userId": "u-7", "email": "u7@x.io", "profileData": PROFILE}
        )
        assert response.json() == {"success": True}

        profile = (await client.get("/api/profile", params={"userId": "u-7"})).json()["profile"]
        assert profile["careerGoal"] == "Frontend Developer"
        assert profile["studyTime"] == "6"


class TestRoadmapEndpoints:
    @pytest.mark.asyncio
    async def test_generate_roadmap_falls_back_and_saves(self, client: AsyncClient) -> None:
        response = await client.post(
            "/api/generate-roadmap", json={"profile": PROFILE, "userId": "new-user"}
        )

        body = response.json()
        assert response.status_code == 200
        assert body["source"] == "template"
        assert body["saved"] is True
        assert body["roadmap"]["order"] == 1
        assert body["roadmap"]["careerPath"] == "Frontend Developer - Foundations"
        assert all(step["progress"] == 0 for step in body["roadmap"]["steps"])

        active = await client.get("/api/roadmap", params={"userId": "new-user"})
        assert active.status_code == 200
        assert active.json()["roadmap"]["id"] == body["roadmap"]["id"]
        assert active.headers["cache-control"] == "private, max-age=30"

    @pytest.mark.asyncio
    async def test_generate_roadmap_without_user_is_not_saved(self, client: AsyncClient) -> None:
        response = await client.post("/api/generate-roadmap", json={"profile": PROFILE})

        body = response.json()
        assert body["saved"] is False
        assert "id" not in body["roadmap"]
        assert body["roadmap"]["steps"]

    @pytest.mark.asyncio
    async def test_generate_next_roadmap(self, client: AsyncClient, seed_roadmap: Roadmap) -> None:
        response = await client.post(
            "/api/generate-next-roadmap",
            json={
                "profile": PROFILE,
                "userId": "uid-1",
                "completedRoadmap": {"id": seed_roadmap.id, "careerPath": "Web", "order": 1},
            },
        )

        body = response.json()
        assert body["saved"] is True
        assert body["roadmap"]["order"] == 2
        assert body["roadmap"]["careerPath"].endswith("Intermediate")

        history = (
            await client.get("/api/roadmap", params={"userId": "uid-1", "history": "true"})
        ).json()["roadmaps"]
        assert [r["order"] for r in history] == [1, 2]
        assert history[0]["completedAt"] is not None

        completed = await client.get(
            "/api/roadmap", params={"userId": "uid-1", "roadmapId": seed_roadmap.id}
        )
        assert completed.headers["cache-control"] == "private, max-age=3600"

        latest = (await client.get("/api/notifications", headers=HEADERS)).json()["notifications"][0]
        assert latest["type"] == "milestone"
        assert latest["title"] == "🎉 New Roadmap Unlocked!"
        assert latest["message"].startswith('Congratulations on completing "Web"!')

    @pytest.mark.asyncio
    async def test_roadmap_for_unknown_user(self, client: AsyncClient) -> None:
        response = await client.get("/api/roadmap", params={"userId": "ghost"})
        assert response.status_code == 404
        assert response.json() == {"error": "User not found in database"}

    @pytest.mark.asyncio
    async def test_roadmap_resolved_by_email(self, client: AsyncClient, seed_roadmap: Roadmap) -> None:
        response = await client.get(
            "/api/roadmap", params={"userId": "other-uid", "email": "learner@example.com"}
        )
        assert response.status_code == 200
        assert response.json()["roadmap"]["id"] == seed_roadmap.id

    @pytest.mark.asyncio
    async def test_no_roadmap(self, client: AsyncClient, seed_user: User) -> None:
        response = await client.get("/api/roadmap", params={"userId": seed_user.id})
        assert response.status_code == 404
        assert response.json() == {"error": "Roadmap not found"}


class TestProgressEndpoints:
    @pytest.mark.asyncio
    async def test_complete_step_by_id(self, client: AsyncClient, seed_roadmap: Roadmap) -> None:
        step_id = seed_roadmap.steps[0].id

        response = await client.put(
            "/api/complete-step", json={"userId": "uid-1", "stepId": step_id}
        )

        body = response.json()
        assert response.status_code == 200
        assert body["step"]["completed"] is True
        assert body["step"]["progress"] == 100
        assert body["progress"]["completedSteps"] == 1
        assert body["progress"]["percentage"] == 33

    @pytest.mark.asyncio
    async def test_complete_step_requires_reference(
        self, client: AsyncClient, seed_roadmap: Roadmap
    ) -> None:
        response = await client.put("/api/complete-step", json={"userId": "uid-1"})
        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_complete_step_not_found(self, client: AsyncClient, seed_roadmap: Roadmap) -> None:
        response = await client.put(
            "/api/complete-step", json={"userId": "uid-1", "stepTitle": "Quantum Computing"}
        )
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_patch_step(self, client: AsyncClient, seed_roadmap: Roadmap) -> None:
        step_id = seed_roadmap.steps[1].id

        response = await client.patch(
            f"/api/steps/{step_id}", json={"userId": "uid-1", "completed": True}
        )
        assert response.json()["step"]["progress"] == 100

        response = await client.patch(
            f"/api/steps/{step_id}", json={"userId": "uid-1", "completed": False}
        )
        body = response.json()
        assert body["step"]["progress"] == 0
        assert body["progress"]["completedSteps"] == 0

    @pytest.mark.asyncio
    async def test_mark_task_completed(self, client: AsyncClient, seed_roadmap: Roadmap) -> None:
        response = await client.post(
            "/api/mark-task-completed",
            json={
                "userId": "uid-1",
                "day": "monday",
                "taskIndex": 0,
                "focusArea": "React",
                "completedTasksCount": 1,
                "totalTasksCount": 8,
            },
        )

        body = response.json()
        assert response.status_code == 200
        assert body["progress"] == {"completedTasks": 1, "totalTasks": 8, "percentage": 13}
        assert body["notification"]["type"] == "task_completion"
        assert body["notification"]["metadata"]["focusArea"] == "React"

    @pytest.mark.asyncio
    async def test_mark_task_completed_rejects_zero_total(
        self, client: AsyncClient, seed_roadmap: Roadmap
    ) -> None:
        response = await client.post(
            "/api/mark-task-completed",
            json={
                "userId": "uid-1",
                "day": "monday",
                "taskIndex": 0,
                "focusArea": "React",
                "completedTasksCount": 0,
                "totalTasksCount": 0,
            },
        )
        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_mark_task_completed_rejects_count_above_total(
        self, client: AsyncClient, seed_roadmap: Roadmap
    ) -> None:
        response = await client.post(
            "/api/mark-task-completed",
            json={
                "userId": "uid-1",
                "day": "monday",
                "taskIndex": 0,
                "focusArea": "React",
                "completedTasksCount": 9,
                "totalTasksCount": 8,
            },
        )
        assert response.status_code == 400
        assert response.json()["error"] == "Missing required fields"
        assert seed_roadmap.steps[2].progress == 0

    @pytest.mark.asyncio
    async def test_get_progress(self, client: AsyncClient, seed_roadmap: Roadmap) -> None:
        response = await client.get(
            "/api/progress", params={"userId": "uid-1", "roadmapId": seed_roadmap.id}
        )

        assert response.status_code == 200
        assert response.json()["progress"]["totalSteps"] == 3
        assert response.headers["cache-control"] == "private, max-age=10"

        missing = await client.get("/api/progress", params={"userId": "uid-1", "roadmapId": 999})
        assert missing.status_code == 404

    @pytest.mark.asyncio
    async def test_generate_feedback_template(self, client: AsyncClient, seed_roadmap: Roadmap) -> None:
        response = await client.post(
            "/api/generate-feedback",
            json={"profile": PROFILE, "completedSteps": 2, "currentProgress": 67, "userId": "uid-1"},
        )

        body = response.json()
        assert body["source"] == "template"
        assert "2 steps" in body["feedback"]

    @pytest.mark.asyncio
    async def test_generate_feedback_from_llm(self, client: AsyncClient, fake_llm) -> None:
        fake_llm("Fantastic progress!")

        response = await client.post(
            "/api/generate-feedback",
            json={"profile": PROFILE, "completedSteps": 1, "currentProgress": 20},
        )

        assert response.json() == {"feedback": "Fantastic progress!", "source": "ai"}


class TestStudyPlanEndpoint:
    @pytest.mark.asyncio
    async def test_generate_study_plan(self, client: AsyncClient, seed_roadmap: Roadmap) -> None:
        response = await client.post(
            "/api/generate-study-plan",
            json={
                "profile": PROFILE,
                "currentStep": {"title": "React", "skills": ["Components", "Hooks"]},
                "userId": "uid-1",
            },
        )

        body = response.json()
        assert body["source"] == "template"
        assert body["studyPlan"]["focusArea"] == "React"
        assert body["studyPlan"]["dailyPlans"]["sunday"]

        notifications = (await client.get("/api/notifications", headers=HEADERS)).json()
        assert notifications["notifications"][0]["type"] == "study_plan"


class TestNotificationEndpoints:
    @pytest.mark.asyncio
    async def test_requires_header(self, client: AsyncClient) -> None:
        response = await client.get("/api/notifications")
        assert response.status_code == 401
        assert response.json() == {"error": "Unauthorized"}

    @pytest.mark.asyncio
    async def test_crud(self, client: AsyncClient) -> None:
        created = await client.post(
            "/api/notifications",
            headers=HEADERS,
            json={"type": "milestone", "title": "Hi", "message": "Welcome", "metadata": {"k": 1}},
        )
        assert created.status_code == 201
        notification = created.json()["notification"]
        assert notification["read"] is False
        assert notification["metadata"] == {"k": 1}

        listed = (await client.get("/api/notifications", headers=HEADERS)).json()
        assert listed["unreadCount"] == 1

        updated = await client.put(f"/api/notifications/{notification['id']}", headers=HEADERS)
        assert updated.json()["notification"]["read"] is True

        unread = (
            await client.get("/api/notifications", headers=HEADERS, params={"unreadOnly": "true"})
        ).json()
        assert unread == {"notifications": [], "unreadCount": 0}

        deleted = await client.delete(f"/api/notifications/{notification['id']}", headers=HEADERS)
        assert deleted.json() == {"success": True}

    @pytest.mark.asyncio
    async def test_other_users_notification(self, client: AsyncClient) -> None:
        created = await client.post(
            "/api/notifications",
            headers=HEADERS,
            json={"type": "milestone", "title": "Hi", "message": "Welcome"},
        )
        notification_id = created.json()["notification"]["id"]

        response = await client.delete(
            f"/api/notifications/{notification_id}", headers={"x-user-id": "intruder"}
        )
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_read_all(self, client: AsyncClient) -> None:
        for title in ("A", "B"):
            await client.post(
                "/api/notifications",
                headers=HEADERS,
                json={"type": "milestone", "title": title, "message": "m"},
            )

        response = await client.put("/api/notifications/read-all", headers=HEADERS)
        assert response.json() == {"success": True, "updated": 2}


class TestChatEndpoints:
    @pytest.mark.asyncio
    async def test_chat_round_trip(self, client: AsyncClient, fake_llm) -> None:
        fake_llm("Start with the first step of your roadmap.")

        response = await client.post("/api/chat", headers=HEADERS, json={"message": "Where do I start?"})

        body = response.json()
        assert body["message"] == "Start with the first step of your roadmap."
        assert isinstance(body["id"], int)

        history = (await client.get("/api/chat", headers=HEADERS)).json()["messages"]
        assert [m["role"] for m in history] == ["user", "assistant"]
        assert history[0]["content"] == "Where do I start?"

    @pytest.mark.asyncio
    async def test_chat_fallback_reply(self, client: AsyncClient) -> None:
        response = await client.post("/api/chat", headers=HEADERS, json={"message": "Hi"})
        assert response.status_code == 200
        assert "try asking me again" in response.json()["message"]

    @pytest.mark.asyncio
    async def test_chat_requires_message(self, client: AsyncClient) -> None:
        response = await client.post("/api/chat", headers=HEADERS, json={"message": ""})
        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_chat_requires_header(self, client: AsyncClient) -> None:
        response = await client.post("/api/chat", json={"message": "Hi"})
        assert response.status_code == 401


class TestWithoutLLMConfigured:
    """No API key: the real factories fail and every endpoint falls back."""

    @pytest.mark.asyncio
    async def test_generate_roadmap(self, client: AsyncClient, unconfigured_llm) -> None:
        response = await client.post(
            "/api/generate-roadmap", json={"profile": {"careerGoal": "Web Developer"}}
        )
        assert response.status_code == 200
        assert response.json()["source"] == "template"

    @pytest.mark.asyncio
    async def test_generate_next_roadmap(
        self, client: AsyncClient, seed_roadmap: Roadmap, unconfigured_llm
    ) -> None:
        response = await client.post(
            "/api/generate-next-roadmap",
            json={
                "profile": PROFILE,
                "userId": "uid-1",
                "completedRoadmap": {"id": seed_roadmap.id, "careerPath": "Web", "order": 1},
            },
        )
        assert response.status_code == 200
        assert response.json()["source"] == "template"

    @pytest.mark.asyncio
    async def test_generate_study_plan(self, client: AsyncClient, unconfigured_llm) -> None:
        response = await client.post(
            "/api/generate-study-plan",
            json={"profile": PROFILE, "currentStep": {"title": "React"}},
        )
        assert response.status_code == 200
        assert response.json()["source"] == "template"

    @pytest.mark.asyncio
    async def test_generate_feedback(self, client: AsyncClient, unconfigured_llm) -> None:
        response = await client.post(
            "/api/generate-feedback",
            json={"profile": PROFILE, "completedSteps": 1, "currentProgress": 20},
        )
        assert response.status_code == 200
        assert response.json()["source"] == "template"

    @pytest.mark.asyncio
    async def test_chat(self, client: AsyncClient, unconfigured_llm) -> None:
        response = await client.post("/api/chat", headers=HEADERS, json={"message": "Hi"})
        assert response.status_code == 200
        assert "try asking me again" in response.json()["message"]
