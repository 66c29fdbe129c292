"""Unit tests for token storage and expiry checks."""

from __future__ import annotations

import json
import time

import jwt
import pytest

from opsmgmt.auth.tokens import (
    FileTokenStore,
    InMemoryTokenStore,
    StoredTokens,
    is_token_valid,
)


def _jwt(exp: float | None) -> str:
    claims = {"sub": "user-1"}
    if exp is not None:
        claims["exp"] = int(exp)
    return jwt.encode(claims, "x" * 32, algorithm="HS256")


@pytest.mark.unit
class TestIsTokenValid:
    def test_empty_token_is_invalid(self) -> None:
        assert is_token_valid("") is False

    def test_opaque_token_is_valid(self) -> None:
        assert is_token_valid("opaque-session-token") is True

    def test_future_exp_is_valid(self) -> None:
        assert is_token_valid(_jwt(time.time() + 3600)) is True

    def test_past_exp_is_invalid(self) -> None:
        assert is_token_valid(_jwt(time.time() - 60)) is False

    def test_exp_within_leeway_is_invalid(self) -> None:
        now = 1_700_000_000
        assert is_token_valid(_jwt(now + 2), now=now) is False

    def test_jwt_without_exp_is_valid(self) -> None:
        assert is_token_valid(_jwt(None)) is True


@pytest.mark.unit
class TestInMemoryTokenStore:
    def test_bearer_token(self) -> None:
        store = InMemoryTokenStore(access_token="abc")
        assert store.bearer_token() == "abc"

    def test_clear_removes_both_tokens(self) -> None:
        store = InMemoryTokenStore(access_token="abc", refresh_token="def")
        store.clear()
        assert store.load() == StoredTokens()
        assert store.bearer_token() is None

    def test_expired_token_is_not_sent(self) -> None:
        store = InMemoryTokenStore(access_token=_jwt(time.time() - 60))
        assert store.bearer_token() is None


@pytest.mark.unit
class TestFileTokenStore:
    def test_save_and_load(self, tmp_path) -> None:
        path = tmp_path / "state" / "tokens.json"
        store = FileTokenStore(path)
        store.save(StoredTokens(access_token="abc", refresh_token="def"))

        reloaded = FileTokenStore(path).load()
        assert reloaded.access_token == "abc"
        assert reloaded.refresh_token == "def"
        assert path.stat().st_mode & 0o777 == 0o600

    def test_missing_file_is_empty(self, tmp_path) -> None:
        assert FileTokenStore(tmp_path / "none.json").load() == StoredTokens()

    def test_corrupt_file_is_empty(self, tmp_path) -> None:
        path = tmp_path / "tokens.json"
        path.write_text("{not json", encoding="utf-8")
        assert FileTokenStore(path).load() == StoredTokens()

    def test_clear_deletes_file(self, tmp_path) -> None:
        path = tmp_path / "tokens.json"
        path.write_text(json.dumps({"access_token": "abc"}), encoding="utf-8")
        store = FileTokenStore(path)
        store.clear()
        assert not path.exists()
        store.clear()
