# tests/fakes.py

from __future__ import annotations

import json
import uuid
from datetime import datetime, timedelta, timezone
from types import SimpleNamespace

import httpx

from devtrack.exceptions import ValidationError
from devtrack.repositories.base import TaskRepository, UserRepository


class InMemoryUserRepository(UserRepository):
    """Dict-backed users, enough to exercise the auth service without a database."""

    def __init__(self) -> None:
        self.users: dict[str, SimpleNamespace] = {}

    async def add(self, name, email, hashed_password):
        if any(u.email == email for u in self.users.values()):
            raise ValidationError("Email already registered")
        user = SimpleNamespace(
            id=uuid.uuid4().hex,
            name=name,
            email=email,
            hashed_password=hashed_password,
            created_at=datetime.now(timezone.utc),
        )
        self.users[user.id] = user
        return user

    async def get_by_email(self, email):
        return next((u for u in self.users.values() if u.email == email), None)

    async def get_by_id(self, user_id):
        return self.users.get(user_id)

    async def update(self, user_id, changes):
        user = self.users.get(user_id)
        if user is None:
            return None
        for key, value in changes.items():
            setattr(user, key, value)
        return user


class InMemoryTaskRepository(TaskRepository):
    """
    Dict-backed tasks.

    Creation times are spaced one second apart so ordering is deterministic.
    """

    def __init__(self) -> None:
        self.tasks: dict[str, SimpleNamespace] = {}
        self._clock = datetime(2026, 1, 1, tzinfo=timezone.utc)

    async def add(self, owner_id, fields):
        self._clock += timedelta(seconds=1)
        task = SimpleNamespace(
            id=uuid.uuid4().hex,
            user_id=owner_id,
            created_at=self._clock,
            **fields,
        )
        task.time_spent = max(task.time_spent, 0)
        self.tasks[task.id] = task
        return task

    async def list_for_owner(self, owner_id, status=None, priority=None):
        out = [
            t for t in self.tasks.values()
            if t.user_id == owner_id
            and (status is None or t.status == status)
            and (priority is None or t.priority == priority)
        ]
        return sorted(out, key=lambda t: t.created_at, reverse=True)

    async def update_owned(self, task_id, owner_id, changes):
        task = self.tasks.get(task_id)
        if task is None or task.user_id != owner_id:
            return None
        for key, value in changes.items():
            setattr(task, key, value)
        task.time_spent = max(task.time_spent, 0)
        return task

    async def delete_owned(self, task_id, owner_id):
        task = self.tasks.get(task_id)
        if task is None or task.user_id != owner_id:
            return None
        return self.tasks.pop(task_id)


def make_task(**overrides) -> SimpleNamespace:
    """A task record as the repositories return it."""
    fields = {
        "id": uuid.uuid4().hex,
        "title": "Task",
        "status": "pending",
        "priority": "medium",
        "notes": "",
        "time_spent": 0,
        "tags": [],
        "user_id": "owner",
        "created_at": datetime(2026, 3, 1, 9, 0, tzinfo=timezone.utc),
    }
    fields.update(overrides)
    return SimpleNamespace(**fields)


class FakeApi:
    """
    Minimal stand-in for the DevTrack server, mounted with ``httpx.MockTransport``.

    Used by the client and CLI tests, which run a synchronous httpx client
    and so cannot talk to the ASGI app directly.
    """

    def __init__(self) -> None:
        self.users: dict[str, dict] = {}
        self.tasks: dict[str, dict] = {}
        self.tokens: dict[str, str] = {}
        self.requests: list = []
        # Set by tests: answer 500 to this HTTP method, or refuse connections
        self.fail_method: str | None = None
        self.offline = False

    def _auth_response(self, user: dict, status_code: int):
        token = f"tok-{user['id']}"
        self.tokens[token] = user["id"]
        public = {k: user[k] for k in ("id", "name", "email")}
        return httpx.Response(status_code, json={"user": public, "token": token})

    def _current_user(self, request):
        header = request.headers.get("Authorization", "")
        user_id = self.tokens.get(header.removeprefix("Bearer "))
        return next((u for u in self.users.values() if u["id"] == user_id), None)

    def __call__(self, request):
        self.requests.append(request)
        if self.offline:
            raise httpx.ConnectError("Connection refused", request=request)
        path, method = request.url.path, request.method
        if method == self.fail_method:
            return httpx.Response(500, json={"error": "Internal server error"})
        body = json.loads(request.content) if request.content else {}

        if path == "/api/auth/signup":
            if body["email"] in self.users:
                return httpx.Response(400, json={"error": "Email already registered"})
            user = {"id": uuid.uuid4().hex, "name": body["name"], "email": body["email"],
                    "password": body["password"]}
            self.users[user["email"]] = user
            return self._auth_response(user, 201)

        if path == "/api/auth/login":
            user = self.users.get(body["email"])
            if not user or user["password"] != body["password"]:
                return httpx.Response(400, json={"error": "Invalid login credentials"})
            return self._auth_response(user, 200)

        user = self._current_user(request)
        if user is None:
            return httpx.Response(401, json={"error": "Please authenticate"})

        if path == "/api/users/me":
            if method == "PATCH":
                user["name"] = body["name"]
            return httpx.Response(200, json={k: user[k] for k in ("id", "name", "email")})

        if path == "/api/tasks":
            if method == "POST":
                task = {"id": uuid.uuid4().hex, "status": "pending", "priority": "medium", "notes": "",
                        "timeSpent": 0, "tags": [], **body, "userId": user["id"],
                        "createdAt": datetime.now(timezone.utc).isoformat()}
                self.tasks[task["id"]] = task
                return httpx.Response(201, json=task)
            owned = [t for t in self.tasks.values() if t["userId"] == user["id"]]
            status = request.url.params.get("status")
            if status:
                owned = [t for t in owned if t["status"] == status]
            return httpx.Response(200, json=list(reversed(owned)))

        if path.startswith("/api/tasks/"):
            task = self.tasks.get(path.rsplit("/", 1)[-1])
            if task is None or task["userId"] != user["id"]:
                return httpx.Response(404)
            if method == "DELETE":
                return httpx.Response(200, json=self.tasks.pop(task["id"]))
            task.update(body)
            task["timeSpent"] = max(task["timeSpent"], 0)
            return httpx.Response(200, json=task)

        if path == "/api/analytics/summary":
            owned = [t for t in self.tasks.values() if t["userId"] == user["id"]]
            by_status = {s: sum(t["status"] == s for t in owned) for s in ("pending", "in-progress", "completed")}
            return httpx.Response(200, json={
                "total": len(owned),
                "byStatus": by_status,
                "totalTimeSpent": sum(t["timeSpent"] for t in owned),
                "completionRate": round(by_status["completed"] / len(owned) * 100, 2) if owned else 0,
                "topTags": [],
            })

        if path == "/api/analytics/reports/csv":
            rows = ["id,title"] + [f"{t['id']},{t['title']}" for t in self.tasks.values() if t["userId"] == user["id"]]
            return httpx.Response(200, text="\n".join(rows) + "\n", headers={"content-type": "text/csv"})

        return httpx.Response(404)
