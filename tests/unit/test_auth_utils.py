from datetime import UTC, datetime, timedelta
from uuid import uuid4

from jose import jwt

from comicstop.api.auth_utils import ALGORITHM, SECRET_KEY, issue_token, user_id_from_token


def test_token_carries_user_id():
    user_id = uuid4()
    assert user_id_from_token(issue_token(user_id)) == user_id


def test_expired_token_is_rejected():
    token = issue_token(
        uuid4(), ttl=timedelta(minutes=5), now=datetime.now(UTC) - timedelta(hours=1)
    )
    assert user_id_from_token(token) is None


def test_token_signed_with_another_secret_is_rejected():
    token = issue_token(uuid4(), secret="someone-else")
    assert user_id_from_token(token) is None


def test_subject_must_be_a_user_id():
    exp = datetime.now(UTC) + timedelta(minutes=5)
    not_uuid = jwt.encode({"sub": "ana", "exp": exp}, SECRET_KEY, algorithm=ALGORITHM)
    no_sub = jwt.encode({"exp": exp}, SECRET_KEY, algorithm=ALGORITHM)

    assert user_id_from_token(not_uuid) is None
    assert user_id_from_token(no_sub) is None


def test_garbage_token_is_rejected():
    assert user_id_from_token("not-a-jwt") is None
