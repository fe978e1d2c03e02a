import unittest
from pathlib import Path
from unittest.mock import AsyncMock, patch

import httpx
from fastapi import FastAPI
from store_support import StoreTestCase

from app.auth.security import create_user_token, create_viewer_token, get_password_hash, verify_token
from app.config import settings
from app.db import get_db
from app.errors import register_exception_handlers
from app.main import app as api_app
from app.models.enums import TokenKind, UserRole
from app.models.user import User


class ApiTestCase(StoreTestCase):
    async def asyncSetUp(self) -> None:
        await super().asyncSetUp()

        async def _get_db():
            async with self.sessionmaker() as session:
                yield session

        api_app.dependency_overrides[get_db] = _get_db
        self.client = httpx.AsyncClient(transport=httpx.ASGITransport(app=api_app), base_url="http://test")
        admin_token = create_user_token(user_id=205, name="Osama Ahmed", role=UserRole.admin)
        employee_token = create_user_token(user_id=301, name="Abeer F.", role=UserRole.employee)
        self.admin = {"Authorization": f"Bearer {admin_token}"}
        self.employee = {"Authorization": f"Bearer {employee_token}"}

    async def asyncTearDown(self) -> None:
        await self.client.aclose()
        api_app.dependency_overrides.clear()
        await super().asyncTearDown()

    async def create_board(self, **overrides) -> dict:
        body = {"projectName": "ESAP ERP", "fkpoid": 1001, "memberIds": [301, 302]}
        body.update(overrides)
        resp = await self.client.post("/boards", json=body, headers=self.admin)
        self.assertEqual(resp.status_code, 201, resp.text)
        return resp.json()

    async def kanban(self, board_id: str, headers: dict | None = None) -> httpx.Response:
        return await self.client.get(f"/boards/{board_id}/kanban", headers=headers or {})

    async def add_card(self, list_id: int, title: str) -> dict:
        resp = await self.client.post(f"/lists/{list_id}/cards", json={"title": title}, headers=self.employee)
        self.assertEqual(resp.status_code, 201, resp.text)
        return resp.json()


class TestBoardsApi(ApiTestCase):
    async def test_create_board_row_shape(self) -> None:
        board = await self.create_board(description="pilot")
        self.assertEqual(
            set(board),
            {
                "fkboardid",
                "title",
                "description",
                "members",
                "status",
                "progress",
                "createdAt",
                "addedby",
                "addedbyid",
                "fkpoid",
            },
        )
        self.assertEqual(board["title"], "ESAP ERP")
        self.assertEqual(board["addedbyid"], 205)
        self.assertEqual(board["addedby"], "Osama Ahmed")
        self.assertEqual(board["members"], [{"id": 301, "name": "Abeer F."}, {"id": 302, "name": "Badr N."}])
        self.assertEqual(board["status"], "open")

        resp = await self.client.get("/projects/1001/boards", headers=self.employee)
        self.assertEqual([b["fkboardid"] for b in resp.json()], [board["fkboardid"]])

    async def test_board_mutations_need_admin(self) -> None:
        body = {"projectName": "ESAP ERP", "fkpoid": 1001}
        resp = await self.client.post("/boards", json=body)
        self.assertEqual(resp.status_code, 401)
        self.assertEqual(resp.json(), {"error": "auth required"})

        resp = await self.client.post("/boards", json=body, headers=self.employee)
        self.assertEqual(resp.status_code, 403)
        self.assertEqual(resp.json(), {"error": "forbidden"})

    async def test_patch_and_delete_board(self) -> None:
        board = await self.create_board()
        board_id = board["fkboardid"]

        resp = await self.client.patch(
            f"/boards/{board_id}", json={"title": "Renamed", "memberIds": [303]}, headers=self.admin
        )
        self.assertEqual(resp.status_code, 200, resp.text)
        self.assertEqual(resp.json()["title"], "Renamed")
        self.assertEqual(resp.json()["members"], [{"id": 303, "name": "Carim K."}])

        resp = await self.client.delete(f"/boards/{board_id}", headers=self.admin)
        self.assertEqual(resp.json(), {"deleted": board_id})
        self.assertEqual((await self.kanban(board_id)).status_code, 404)

    async def test_unknown_project_lists_nothing(self) -> None:
        resp = await self.client.get("/projects/4242/boards", headers=self.admin)
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json(), [])

    async def test_validation_error_envelope(self) -> None:
        resp = await self.client.post("/boards", json={"fkpoid": 1001}, headers=self.admin)
        self.assertEqual(resp.status_code, 400)
        self.assertIn("projectName", resp.json()["error"])

    async def test_members_and_projects(self) -> None:
        await self.create_board()
        members = (await self.client.get("/members", headers=self.employee)).json()
        self.assertEqual([m["id"] for m in members], [205, 301, 302, 303])
        projects = (await self.client.get("/projects", headers=self.employee)).json()
        self.assertEqual(projects, [{"id": 1001, "name": "ESAP ERP"}])


class TestKanbanApi(ApiTestCase):
    async def test_progress_follows_done_list(self) -> None:
        board = await self.create_board()
        tree = (await self.kanban(board["fkboardid"])).json()
        todo, _, done = tree["lists"]
        self.assertEqual(tree["progress"], 0)

        cards = [await self.add_card(todo["id"], title) for title in ("a", "b", "c", "d")]
        resp = await self.client.patch(
            "/cards/move", json={"cardId": cards[1]["id"], "toListId": done["id"], "toIndex": 0}, headers=self.employee
        )
        self.assertEqual(resp.status_code, 200, resp.text)
        self.assertEqual(resp.json()["listId"], done["id"])
        self.assertEqual(resp.json()["position"], 0)

        tree = (await self.kanban(board["fkboardid"])).json()
        self.assertEqual(tree["progress"], 25)
        self.assertEqual(tree["board"]["progress"], 25)
        self.assertEqual([c["title"] for c in tree["lists"][0]["cards"]], ["a", "c", "d"])
        self.assertEqual([c["position"] for c in tree["lists"][0]["cards"]], [0, 1, 2])

    async def test_close_board_needs_full_progress(self) -> None:
        board = await self.create_board()
        todo, _, done = (await self.kanban(board["fkboardid"])).json()["lists"]
        card = await self.add_card(todo["id"], "a")
        await self.add_card(done["id"], "b")

        resp = await self.client.patch(f"/boards/{board['fkboardid']}/close", headers=self.admin)
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json(), {"error": "board is not fully done (50%)", "progress": 50})

        await self.client.patch("/cards/move", json={"cardId": card["id"], "toListId": done["id"]}, headers=self.admin)
        resp = await self.client.patch(f"/boards/{board['fkboardid']}/close", headers=self.admin)
        self.assertEqual(resp.status_code, 200, resp.text)
        self.assertEqual(resp.json()["status"], "closed")
        self.assertEqual(resp.json()["progress"], 100)

    async def test_viewer_token_is_board_scoped(self) -> None:
        first = await self.create_board()
        second = await self.create_board(title="Second")
        viewer = {"Authorization": f"Bearer {create_viewer_token(board_external_id=first['fkboardid'])}"}

        self.assertEqual((await self.kanban(first["fkboardid"], viewer)).status_code, 200)
        resp = await self.kanban(second["fkboardid"], viewer)
        self.assertEqual(resp.status_code, 403)
        self.assertEqual(resp.json(), {"error": "viewer token not for this board"})

        resp = await self.client.post(f"/boards/{first['fkboardid']}/lists", json={"name": "Review"}, headers=viewer)
        self.assertEqual(resp.status_code, 401)

    async def test_anonymous_read_is_public(self) -> None:
        board = await self.create_board()
        self.assertEqual((await self.kanban(board["fkboardid"])).status_code, 200)
        resp = await self.kanban(board["fkboardid"], {"Authorization": "Bearer not-a-token"})
        self.assertEqual(resp.status_code, 200)

    async def test_share_link_carries_viewer_token(self) -> None:
        board = await self.create_board()
        resp = await self.client.get(f"/boards/{board['fkboardid']}/share", headers=self.employee)
        self.assertEqual(resp.status_code, 200, resp.text)
        body = resp.json()
        principal = verify_token(body["token"])
        self.assertEqual(principal.kind, TokenKind.viewer)
        self.assertEqual(principal.board_external_id, board["fkboardid"])
        self.assertTrue(body["url"].startswith(settings.FRONTEND_URL.rstrip("/")))

    async def test_unknown_board_and_card(self) -> None:
        self.assertEqual((await self.kanban("missing")).json(), {"error": "Board not found"})
        resp = await self.client.delete("/cards/999", headers=self.employee)
        self.assertEqual(resp.status_code, 404)
        self.assertEqual(resp.json(), {"error": "Card not found"})


class TestListsAndItemsApi(ApiTestCase):
    async def test_list_lifecycle(self) -> None:
        board = await self.create_board()
        board_id = board["fkboardid"]
        resp = await self.client.post(f"/boards/{board_id}/lists", json={"name": "Review"}, headers=self.employee)
        self.assertEqual(resp.status_code, 201, resp.text)
        review = resp.json()
        self.assertEqual(review["position"], 3)
        self.assertEqual(review["fkboardid"], board_id)

        todo = (await self.kanban(board_id)).json()["lists"][0]
        resp = await self.client.patch(
            "/lists/reorder",
            json={"boardId": board_id, "fromListId": review["id"], "toListId": todo["id"]},
            headers=self.employee,
        )
        self.assertEqual(resp.status_code, 200, resp.text)
        self.assertEqual([lst["name"] for lst in resp.json()], ["Review", "To-do", "In-progress", "Done"])

        resp = await self.client.patch(f"/lists/{review['id']}", json={"name": "QA"}, headers=self.employee)
        self.assertEqual(resp.json()["name"], "QA")

        resp = await self.client.delete(f"/lists/{review['id']}", headers=self.employee)
        self.assertEqual(resp.json(), {"deleted": review["id"]})
        lists = (await self.kanban(board_id)).json()["lists"]
        self.assertEqual(
            [(lst["name"], lst["position"]) for lst in lists],
            [("To-do", 0), ("In-progress", 1), ("Done", 2)],
        )

    async def test_tasks_tags_comments(self) -> None:
        board = await self.create_board()
        todo = (await self.kanban(board["fkboardid"])).json()["lists"][0]
        card = await self.add_card(todo["id"], "a")

        resp = await self.client.post(f"/cards/{card['id']}/tasks", json={"name": "draft"}, headers=self.employee)
        task = resp.json()
        self.assertEqual(task["status"], "todo")
        resp = await self.client.patch(
            f"/tasks/{task['id']}", json={"status": "done", "assigneeId": 302}, headers=self.employee
        )
        self.assertEqual(resp.json()["status"], "done")
        self.assertEqual(resp.json()["assigneeId"], 302)

        resp = await self.client.post(f"/cards/{card['id']}/tags", json={"title": "urgent"}, headers=self.employee)
        tag = resp.json()
        resp = await self.client.post(f"/cards/{card['id']}/comments", json={"message": "hi"}, headers=self.employee)
        self.assertEqual(resp.json()["author"], "Abeer F.")

        loaded = (await self.kanban(board["fkboardid"])).json()["lists"][0]["cards"][0]
        self.assertEqual(len(loaded["tasks"]), 1)
        self.assertEqual(len(loaded["tags"]), 1)
        self.assertEqual(loaded["comments"][0]["message"], "hi")

        resp = await self.client.delete(f"/tags/{tag['id']}", headers=self.employee)
        self.assertEqual(resp.json(), {"deleted": tag["id"]})
        resp = await self.client.delete(f"/tasks/{task['id']}", headers=self.employee)
        self.assertEqual(resp.json(), {"deleted": task["id"]})
        resp = await self.client.delete(f"/tasks/{task['id']}", headers=self.employee)
        self.assertEqual(resp.status_code, 404)


class TestCardUploadApi(ApiTestCase):
    async def test_replace_image_removes_old_blob(self) -> None:
        board = await self.create_board()
        todo = (await self.kanban(board["fkboardid"])).json()["lists"][0]
        card = await self.add_card(todo["id"], "a")

        resp = await self.client.put(
            f"/cards/{card['id']}",
            data={"title": "with image", "startDate": "2025-05-01T00:00:00Z"},
            files={"image": ("first.png", b"first", "image/png")},
            headers=self.employee,
        )
        self.assertEqual(resp.status_code, 200, resp.text)
        first_url = resp.json()["imageUrl"]
        self.assertTrue(first_url.startswith("http://test/uploads/"))
        self.assertEqual(resp.json()["title"], "with image")
        first_file = Path(settings.UPLOAD_DIR) / first_url.rsplit("/", 1)[-1]
        self.assertTrue(first_file.is_file())

        served = await self.client.get(first_url)
        self.assertEqual(served.status_code, 200)
        self.assertEqual(served.content, b"first")
        self.assertEqual(served.headers["cache-control"], "no-store")

        resp = await self.client.put(
            f"/cards/{card['id']}",
            files={"image": ("second.png", b"second", "image/png")},
            headers=self.employee,
        )
        self.assertEqual(resp.status_code, 200, resp.text)
        second_url = resp.json()["imageUrl"]
        self.assertNotEqual(second_url, first_url)
        self.assertFalse(first_file.exists())
        second_file = Path(settings.UPLOAD_DIR) / second_url.rsplit("/", 1)[-1]
        self.assertTrue(second_file.is_file())

        resp = await self.client.delete(f"/cards/{card['id']}", headers=self.employee)
        self.assertEqual(resp.json(), {"deleted": card["id"]})
        self.assertFalse(second_file.exists())

    async def test_oversized_upload_is_rejected(self) -> None:
        board = await self.create_board()
        todo = (await self.kanban(board["fkboardid"])).json()["lists"][0]
        card = await self.add_card(todo["id"], "a")

        with patch.object(settings, "UPLOAD_MAX_FILE_MB", 1):
            resp = await self.client.put(
                f"/cards/{card['id']}",
                files={"image": ("big.png", b"x" * (1024 * 1024 + 1), "image/png")},
                headers=self.employee,
            )
        self.assertEqual(resp.status_code, 413)
        self.assertIn("error", resp.json())

        loaded = (await self.kanban(board["fkboardid"])).json()["lists"][0]["cards"][0]
        self.assertIsNone(loaded["imageUrl"])

    async def test_end_before_start_is_rejected(self) -> None:
        board = await self.create_board()
        todo = (await self.kanban(board["fkboardid"])).json()["lists"][0]
        card = await self.add_card(todo["id"], "a")
        resp = await self.client.put(
            f"/cards/{card['id']}",
            data={"startDate": "2025-05-02", "endDate": "2025-05-01"},
            headers=self.employee,
        )
        self.assertEqual(resp.status_code, 400)


class TestUnexpectedErrorsApi(ApiTestCase):
    async def test_unexpected_error_uses_envelope(self) -> None:
        failing_app = FastAPI()
        register_exception_handlers(failing_app)

        @failing_app.get("/boom")
        async def boom() -> dict:
            raise RuntimeError("secret internal detail")

        transport = httpx.ASGITransport(app=failing_app, raise_app_exceptions=False)
        async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
            resp = await client.get("/boom")
        self.assertEqual(resp.status_code, 500)
        self.assertEqual(resp.json(), {"error": "internal server error"})
        self.assertNotIn("secret", resp.text)

    async def test_upload_write_failure_uses_envelope(self) -> None:
        board = await self.create_board()
        todo = (await self.kanban(board["fkboardid"])).json()["lists"][0]
        card = await self.add_card(todo["id"], "a")

        transport = httpx.ASGITransport(app=api_app, raise_app_exceptions=False)
        async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
            with patch("app.api.routers.cards.store_image", AsyncMock(side_effect=OSError("disk full"))):
                resp = await client.put(
                    f"/cards/{card['id']}",
                    files={"image": ("a.png", b"png", "image/png")},
                    headers=self.employee,
                )
        self.assertEqual(resp.status_code, 500)
        self.assertEqual(resp.json(), {"error": "internal server error"})


class TestAuthApi(ApiTestCase):
    async def test_login_and_me(self) -> None:
        async with self.sessionmaker() as session:
            user = await session.get(User, 302)
            user.password_hash = get_password_hash("employee234")
            await session.commit()

        resp = await self.client.post("/auth/login", json={"email": "badr@example.com", "password": "employee234"})
        self.assertEqual(resp.status_code, 200, resp.text)
        token = resp.json()["access_token"]

        me = (await self.client.get("/auth/me", headers={"Authorization": f"Bearer {token}"})).json()
        self.assertEqual(me["kind"], "user")
        self.assertEqual(me["id"], 302)
        self.assertEqual(me["role"], "employee")

        resp = await self.client.post("/auth/login", json={"email": "badr@example.com", "password": "nope"})
        self.assertEqual(resp.status_code, 401)

    async def test_me_requires_token(self) -> None:
        resp = await self.client.get("/auth/me")
        self.assertEqual(resp.status_code, 401)
        self.assertEqual(resp.json(), {"error": "auth required"})

    async def test_health(self) -> None:
        self.assertEqual((await self.client.get("/health")).json(), {"status": "ok"})


if __name__ == "__main__":
    unittest.main()
