import asyncio
from datetime import timedelta

import pytest
from fastapi import HTTPException
from fastapi.security import HTTPAuthorizationCredentials

from ecofire.auth import CurrentUser, create_access_token, get_current_user, verify_access_token


def bearer(token):
    return HTTPAuthorizationCredentials(scheme="Bearer", credentials=token)


def test_token_round_trip():
    payload = verify_access_token(create_access_token("user_123", organization_id="org_1"))
    assert payload["sub"] == "user_123"
    assert payload["org"] == "org_1"


def test_expired_token_is_rejected():
    token = create_access_token("user_123", expires_delta=timedelta(minutes=-5))
    assert verify_access_token(token) is None


def test_current_user_view_id():
    assert CurrentUser("user_123").view_id == "user_123"
    assert CurrentUser("user_123", organization_id="org_1").view_id == "org_1"


def test_get_current_user():
    user = asyncio.run(get_current_user(bearer(create_access_token("user_123"))))
    assert user == CurrentUser(user_id="user_123")


@pytest.mark.parametrize("credentials", [None, bearer("abc"), bearer("a.b.c")])
def test_get_current_user_rejects(credentials):
    with pytest.raises(HTTPException) as exc_info:
        asyncio.run(get_current_user(credentials))
    assert exc_info.value.status_code == 401
