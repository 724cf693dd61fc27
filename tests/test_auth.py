"""Admin auth: bcrypt credentials, signed tokens carrying id and role, admin gate."""

import jwt
import pytest
from click.testing import CliRunner
from fastapi import HTTPException

from auth import create_admin, dependencies, schemas, security, service


def test_password_hash_round_trip():
    hashed = security.hash_password("s3cret-pass")
    assert hashed != "s3cret-pass"
    assert security.verify_password("s3cret-pass", hashed)
    assert not security.verify_password("wrong", hashed)


def test_plaintext_stored_password_never_matches():
    assert not security.verify_password("admin1234", "admin1234")


def test_empty_password_cannot_be_hashed():
    with pytest.raises(security.AuthSecurityError):
        security.hash_password("")


def test_access_token_carries_identity_and_role():
    token = security.build_access_token(admin_id=42, role="admin")
    principal = service.principal_from_token(token)
    assert principal == schemas.Principal(identity=42, role="admin")


def test_token_signed_with_other_secret_is_rejected():
    token = jwt.encode(
        {"sub": "1", "role": "admin", "type": "access"},
        "another-secret-0123456789abcdef0123456789",
        algorithm="HS256",
    )
    with pytest.raises(HTTPException) as excinfo:
        service.principal_from_token(token)
    assert excinfo.value.status_code == 401


def test_non_access_token_is_rejected():
    token = jwt.encode({"sub": "1", "role": "admin", "type": "refresh"}, security.jwt_secret())
    with pytest.raises(HTTPException) as excinfo:
        service.principal_from_token(token)
    assert excinfo.value.status_code == 401


def test_expired_token_is_rejected(monkeypatch):
    monkeypatch.setenv("ACCESS_TOKEN_EXPIRE_MIN", "-1")
    token = security.build_access_token(admin_id=1, role="admin")
    with pytest.raises(HTTPException) as excinfo:
        service.principal_from_token(token)
    assert excinfo.value.status_code == 401


@pytest.mark.parametrize("header", [None, "", "Bearer", "Basic abc", "Bearer  "])
def test_malformed_authorization_header_is_unauthenticated(header):
    with pytest.raises(HTTPException) as excinfo:
        dependencies._extract_bearer_token(header)
    assert excinfo.value.status_code == 401


def test_non_admin_role_is_forbidden():
    with pytest.raises(HTTPException) as excinfo:
        service.ensure_admin(schemas.Principal(identity=2, role="editor"))
    assert excinfo.value.status_code == 403


async def test_login_returns_token_without_password_hash(fake_db):
    fake_db.queue(
        {
            "id": 5,
            "username": "root",
            "password_hash": security.hash_password("pw-123456"),
            "role": "admin",
        }
    )
    response = await service.login(fake_db, schemas.LoginRequest(username="root", password="pw-123456"))
    assert response.user.model_dump() == {"id": 5, "username": "root", "role": "admin"}
    assert service.principal_from_token(response.token).identity == 5


async def test_login_with_wrong_password_fails(fake_db):
    fake_db.queue(
        {"id": 5, "username": "root", "password_hash": security.hash_password("right"), "role": "admin"}
    )
    with pytest.raises(HTTPException) as excinfo:
        await service.login(fake_db, schemas.LoginRequest(username="root", password="wrong"))
    assert excinfo.value.status_code == 401


async def test_login_unknown_user_fails(fake_db):
    with pytest.raises(HTTPException) as excinfo:
        await service.login(fake_db, schemas.LoginRequest(username="ghost", password="x"))
    assert excinfo.value.status_code == 401


async def test_create_admin_stores_bcrypt_hash(fake_db):
    fake_db.queue({"id": 1, "username": "root", "role": "admin"})
    admin = await service.create_admin(fake_db, username=" root ", password="pw-123456")
    assert admin.username == "root"
    _, _, args = fake_db.calls[-1]
    assert args[0] == "root"
    assert args[1] != "pw-123456"
    assert security.verify_password("pw-123456", args[1])


def test_create_admin_command_prompts_for_password(monkeypatch):
    captured = {}

    async def fake_create(username, password, role):
        captured.update(username=username, password=password, role=role)
        return schemas.AdminResponse(id=1, username=username, role=role)

    monkeypatch.setattr(create_admin, "_create", fake_create)
    result = CliRunner().invoke(create_admin.main, ["root"], input="pw-123456\npw-123456\n")
    assert result.exit_code == 0, result.output
    assert captured == {"username": "root", "password": "pw-123456", "role": "admin"}
    assert "Created admin id=1" in result.output
