from __future__ import annotations

import pytest

from core.actions.base import ACTION_ROLES
from core.auth.guard import Decision, authorize, enforce, require_owned
from core.auth.session import Identity
from core.errors import Forbidden, Unauthenticated

USER = Identity(id=1, email="u@x.com", role="user")
TRAINER = Identity(id=2, email="t@x.com", role="trainer")


def test_missing_identity_is_unauthenticated():
    decision = authorize(None)
    assert not decision.allowed
    with pytest.raises(Unauthenticated):
        enforce(decision)


def test_any_authenticated_passes_without_required_role():
    assert authorize(USER).allowed
    assert authorize(TRAINER).allowed


def test_role_must_match_exactly():
    assert authorize(USER, "user").allowed
    assert not authorize(USER, "trainer").allowed
    assert not authorize(TRAINER, "user").allowed
    with pytest.raises(Forbidden):
        enforce(authorize(TRAINER, "user"))


def test_ownership_check_receives_caller_id():
    seen = []

    def owns(caller_id: int) -> bool:
        seen.append(caller_id)
        return caller_id == 1

    assert authorize(USER, ownership_check=owns).allowed
    denied = authorize(TRAINER, ownership_check=owns)
    assert not denied.allowed
    assert "not found or unauthorized" in denied.reason
    assert seen == [1, 2]


def test_role_denial_short_circuits_ownership_check():
    def explode(caller_id: int) -> bool:
        raise AssertionError("ownership check must not run")

    assert not authorize(TRAINER, "user", ownership_check=explode).allowed


def test_enforce_permit_is_noop():
    enforce(Decision.permit())


class _Row:
    def __init__(self, owner_id: int):
        self.owner_id = owner_id


def test_require_owned_returns_entity_for_owner():
    rows = {10: _Row(owner_id=1)}
    row = require_owned(rows.get, 10, 1, owner_of=lambda r: r.owner_id, label="Thing")
    assert row is rows[10]


def test_require_owned_missing_and_foreign_are_indistinguishable():
    rows = {10: _Row(owner_id=1)}
    with pytest.raises(Forbidden) as missing:
        require_owned(rows.get, 99, 1, owner_of=lambda r: r.owner_id, label="Thing")
    with pytest.raises(Forbidden) as foreign:
        require_owned(rows.get, 10, 2, owner_of=lambda r: r.owner_id, label="Thing")
    assert str(missing.value) == str(foreign.value) == "Thing not found or unauthorized"
    assert missing.value.code == foreign.value.code


def test_every_declared_role_is_known():
    assert set(ACTION_ROLES.values()) <= {None, "user", "trainer"}
