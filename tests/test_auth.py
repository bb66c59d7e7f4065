"""
Unit Tests for Token Authorization.

Covers token extraction from headers, actor resolution, capability checks
and the 401/403 status decision.
"""
import pytest

from auth import Actor, TokenAuthorizer
from config import ADMIN_TOKEN_ENV_VAR


@pytest.fixture
def authorizer():
    return TokenAuthorizer([
        {"name": "editor", "token": "editor-token", "capabilities": ["edit_theme_options"]},
        {"name": "reader", "token": "reader-token", "capabilities": ["read"]},
    ])


def test_authenticate_bearer_token(authorizer):
    actor = authorizer.authenticate({"Authorization": "Bearer editor-token"})

    assert actor == Actor(name="editor", capabilities=frozenset({"edit_theme_options"}))


def test_authenticate_bearer_scheme_is_case_insensitive(authorizer):
    actor = authorizer.authenticate({"Authorization": "bearer reader-token"})

    assert actor.name == "reader"


def test_authenticate_internal_token_header(authorizer):
    actor = authorizer.authenticate({"X-Internal-Token": "reader-token"})

    assert actor.name == "reader"


@pytest.mark.parametrize("headers", [
    {},
    {"Authorization": "Bearer "},
    {"Authorization": "Basic ZWRpdG9yOnRva2Vu"},
    {"Authorization": "Bearer wrong-token"},
])
def test_authenticate_anonymous(authorizer, headers):
    assert authorizer.authenticate(headers) is None


def test_user_can(authorizer):
    editor = authorizer.authenticate({"Authorization": "Bearer editor-token"})
    reader = authorizer.authenticate({"Authorization": "Bearer reader-token"})

    assert authorizer.user_can(editor, "edit_theme_options") is True
    assert authorizer.user_can(reader, "edit_theme_options") is False
    assert authorizer.user_can(None, "read") is False


def test_authorization_required_code(authorizer):
    assert authorizer.authorization_required_code(None) == 401
    assert authorizer.authorization_required_code(Actor(name="reader")) == 403


def test_from_config(monkeypatch):
    monkeypatch.delenv(ADMIN_TOKEN_ENV_VAR, raising=False)
    config = {"auth": {"tokens": [{"name": "ci", "token": "ci-token", "capabilities": ["read"]}]}}

    authorizer = TokenAuthorizer.from_config(config)

    assert authorizer.authenticate({"Authorization": "Bearer ci-token"}).name == "ci"


def test_from_config_without_tokens_rejects_everyone(monkeypatch):
    monkeypatch.delenv(ADMIN_TOKEN_ENV_VAR, raising=False)

    authorizer = TokenAuthorizer.from_config({"auth": {"tokens": []}})

    assert authorizer.tokens == []
    assert authorizer.authenticate({"Authorization": "Bearer anything"}) is None
