"""Atomicity of UsersService writes against an in-memory transactional store.

FakeDatabase stands in for the AsyncSession: repository writes land in a
working copy that ``commit()`` publishes and ``rollback()`` discards, so
the tests can assert on what a concurrent reader would see.
"""

import copy
from collections.abc import Sequence
from datetime import datetime
from typing import Any

import pytest

from src.um_common.errors import UserNotFoundError, UserOperationError
from src.um_gateway.auth.password import hash_password, verify_password
from src.um_permission.domain.models import Permission
from src.um_user.application.service import UsersService
from src.um_user.domain.models import UserDTO

_CREATED_AT = datetime(2024, 3, 28, 14, 5)
_MODIFIED_AT = datetime(2024, 4, 2, 9, 0)


class FakeDatabase:
    def __init__(self) -> None:
        self.committed: dict[str, Any] = {"users": {}, "links": set(), "next_id": 1}
        self._working: dict[str, Any] | None = None

    def state(self) -> dict[str, Any]:
        if self._working is None:
            self._working = copy.deepcopy(self.committed)
        return self._working

    async def commit(self) -> None:
        if self._working is not None:
            self.committed = self._working
        self._working = None

    async def rollback(self) -> None:
        self._working = None


class FakeUserRepository:
    async def get_all(self, db: FakeDatabase) -> list[UserDTO]:
        return [UserDTO.from_db_row(row) for row in db.state()["users"].values()]

    async def get_by_id(self, db: FakeDatabase, user_id: int) -> UserDTO | None:
        row = db.state()["users"].get(user_id)
        return UserDTO.from_db_row(row) if row else None

    async def get_by_username(self, db: FakeDatabase, username: str) -> UserDTO | None:
        for row in db.state()["users"].values():
            if row["username"] == username:
                return UserDTO.from_db_row(row)
        return None

    async def create(self, db: FakeDatabase, user: UserDTO) -> UserDTO:
        user.validate_for_insertion()
        state = db.state()
        user_id = state["next_id"]
        state["next_id"] += 1
        state["users"][user_id] = {
            "id": user_id,
            "username": user.username,
            "password_hash": user.password_hash,
            "email": user.email,
            "created_at": _CREATED_AT,
            "last_modified_at": None,
        }
        return UserDTO.from_db_row(state["users"][user_id])

    async def update(self, db: FakeDatabase, user: UserDTO) -> UserDTO:
        user.validate_for_update()
        row = db.state()["users"].get(user.id)
        if row is None:
            raise UserNotFoundError(user.id)  # type: ignore[arg-type]
        row.update(
            username=user.username,
            password_hash=user.password_hash,
            email=user.email,
            last_modified_at=_MODIFIED_AT,
        )
        return UserDTO.from_db_row(row)

    async def delete(self, db: FakeDatabase, user: UserDTO) -> None:
        user.validate_for_deletion()
        del db.state()["users"][user.id]


class FakeUserPermissionRepository:
    def __init__(self) -> None:
        self.fail_on_create = False

    async def create_many_for_user(
        self, db: FakeDatabase, user_id: int, permission_ids: Sequence[int]
    ) -> None:
        if self.fail_on_create:
            raise RuntimeError("insert into user_permissions failed")
        db.state()["links"] |= {(user_id, pid) for pid in permission_ids}

    async def delete_all_by_user_id(self, db: FakeDatabase, user_id: int) -> None:
        state = db.state()
        state["links"] = {link for link in state["links"] if link[0] != user_id}

    async def get_permissions_by_user_id(self, db: FakeDatabase, user_id: int) -> list[Permission]:
        return [
            Permission(id=pid, permission_key=f"P{pid}", name=f"P{pid}", description=None)
            for uid, pid in sorted(db.state()["links"])
            if uid == user_id
        ]


class FailingDeleteRepository(FakeUserRepository):
    async def delete(self, db: FakeDatabase, user: UserDTO) -> None:
        raise RuntimeError("row locked")


def _seed_user(db: FakeDatabase, username: str, password: str, permission_ids: list[int]) -> int:
    user_id = db.committed["next_id"]
    db.committed["next_id"] += 1
    db.committed["users"][user_id] = {
        "id": user_id,
        "username": username,
        "password_hash": hash_password(password),
        "email": f"{username}@example.com",
        "created_at": _CREATED_AT,
        "last_modified_at": None,
    }
    db.committed["links"] |= {(user_id, pid) for pid in permission_ids}
    return user_id


@pytest.fixture
def db() -> FakeDatabase:
    return FakeDatabase()


@pytest.fixture
def perm_repo() -> FakeUserPermissionRepository:
    return FakeUserPermissionRepository()


@pytest.fixture
def service(perm_repo: FakeUserPermissionRepository) -> UsersService:
    return UsersService(repo=FakeUserRepository(), permission_repo=perm_repo)


class TestCreate:
    async def test_commits_user_and_links(self, service: UsersService, db: FakeDatabase) -> None:
        user = await service.create(db, "carol", "Pass1word", "carol@example.com", [1, 3])

        assert user.id in db.committed["users"]
        assert db.committed["links"] == {(user.id, 1), (user.id, 3)}
        assert [p.id for p in user.permissions] == [1, 3]
        assert user.creation_date == _CREATED_AT

    async def test_failed_association_leaves_no_orphan_user(
        self, service: UsersService, perm_repo: FakeUserPermissionRepository, db: FakeDatabase
    ) -> None:
        perm_repo.fail_on_create = True

        with pytest.raises(UserOperationError, match=r"carol, carol@example.com"):
            await service.create(db, "carol", "Pass1word", "carol@example.com", [1])

        assert db.committed["users"] == {}


class TestUpdate:
    async def test_success_visible_after_commit(self, service: UsersService, db: FakeDatabase) -> None:
        user_id = _seed_user(db, "alice", "OldPass1", [1, 2])

        user = await service.update(db, user_id, "alice2", "NewPass1", "a2@example.com", [3])

        row = db.committed["users"][user_id]
        assert row["username"] == "alice2"
        assert verify_password("NewPass1", row["password_hash"])
        assert db.committed["links"] == {(user_id, 3)}
        assert user.last_modification_date == _MODIFIED_AT
        assert [p.id for p in user.permissions] == [3]

    async def test_unknown_id_leaves_store_unchanged(
        self, service: UsersService, db: FakeDatabase
    ) -> None:
        _seed_user(db, "alice", "OldPass1", [1])
        before = copy.deepcopy(db.committed)

        with pytest.raises(UserOperationError):
            await service.update(db, 999, "ghost", "Pass1word", "ghost@example.com", [1])

        assert db.committed == before

    async def test_failure_recreating_links_rolls_back_field_changes(
        self, service: UsersService, perm_repo: FakeUserPermissionRepository, db: FakeDatabase
    ) -> None:
        user_id = _seed_user(db, "alice", "OldPass1", [1, 2])
        before = copy.deepcopy(db.committed)
        perm_repo.fail_on_create = True

        with pytest.raises(UserOperationError, match=rf"update user id# \[{user_id}\]"):
            await service.update(db, user_id, "alice2", "NewPass1", "a2@example.com", [3])

        assert db.committed == before
        row = db.committed["users"][user_id]
        assert row["username"] == "alice"
        assert verify_password("OldPass1", row["password_hash"])
        assert db.committed["links"] == {(user_id, 1), (user_id, 2)}


class TestDelete:
    async def test_removes_row_and_links(self, service: UsersService, db: FakeDatabase) -> None:
        user_id = _seed_user(db, "alice", "OldPass1", [1, 2])
        other_id = _seed_user(db, "bob", "OldPass1", [1])

        await service.delete(db, user_id)

        assert user_id not in db.committed["users"]
        assert db.committed["links"] == {(other_id, 1)}

    async def test_row_failure_keeps_links(
        self, perm_repo: FakeUserPermissionRepository, db: FakeDatabase
    ) -> None:
        service = UsersService(repo=FailingDeleteRepository(), permission_repo=perm_repo)
        user_id = _seed_user(db, "alice", "OldPass1", [1, 2])
        before = copy.deepcopy(db.committed)

        with pytest.raises(UserOperationError):
            await service.delete(db, user_id)

        assert db.committed == before

    async def test_unknown_id_raises(self, service: UsersService, db: FakeDatabase) -> None:
        with pytest.raises(UserOperationError) as exc_info:
            await service.delete(db, 12345)
        assert isinstance(exc_info.value.__cause__, UserNotFoundError)


class TestCredentials:
    async def test_three_outcomes_stay_distinct(
        self, service: UsersService, db: FakeDatabase
    ) -> None:
        _seed_user(db, "alice", "Pass1word", [])

        missing = await service.validate_credentials(db, "ghost", "x")
        wrong = await service.validate_credentials(db, "alice", "WrongPass1")
        right = await service.validate_credentials(db, "alice", "Pass1word")

        assert len({missing.status, wrong.status, right.status}) == 3
        assert right.user is not None and right.user.username == "alice"
