import pytest

from files_manager.adapters.queue import Lane
from files_manager.db_layer import hash_password
from files_manager.errors import AlreadyExists, ValidationError
from files_manager.tasks.payloads import (
    CREATE_USER,
    SIGN_IN_USER,
    SIGN_OUT_USER,
    CreateUserPayload,
)
from files_manager.tasks.user_tasks import UserTaskProcessor


def submit_user_task(core, kind, **payload):
    return core.queue.submit(Lane.USER, kind, payload)


async def test_create_user_then_sign_in_scenario(running_core):
    user_id = await submit_user_task(running_core, CREATE_USER, email="a@x.com", password="secret")
    assert user_id

    user = await submit_user_task(running_core, SIGN_IN_USER, email="a@x.com", password="secret")
    assert user == {"id": user_id, "email": "a@x.com"}

    assert await submit_user_task(running_core, SIGN_IN_USER, email="a@x.com", password="wrong") is None


async def test_second_create_with_same_email_already_exists(running_core):
    await submit_user_task(running_core, CREATE_USER, email="a@x.com", password="secret")

    with pytest.raises(AlreadyExists) as exc_info:
        await submit_user_task(running_core, CREATE_USER, email="a@x.com", password="other")
    assert exc_info.value.message == "Already exist"


@pytest.mark.parametrize(
    "payload, message",
    [
        ({"password": "secret"}, "Missing email"),
        ({"email": "", "password": "secret"}, "Missing email"),
        ({"email": "a@x.com"}, "Missing password"),
    ],
)
async def test_create_user_requires_email_and_password(running_core, payload, message):
    with pytest.raises(ValidationError) as exc_info:
        await submit_user_task(running_core, CREATE_USER, **payload)
    assert exc_info.value.message == message


async def test_only_password_digest_is_stored(running_core, store):
    user_id = await submit_user_task(running_core, CREATE_USER, email="a@x.com", password="secret")

    document = store.find_one("users", {"_id": user_id})
    assert document["password"] == hash_password("secret")
    assert document["password"] != "secret"


async def test_sign_in_unknown_email_is_not_an_error(running_core):
    assert await submit_user_task(running_core, SIGN_IN_USER, email="nobody@x.com", password="x") is None


async def test_sign_out_revokes_token(running_core):
    token = await running_core.sessions.issue("u1")

    await submit_user_task(running_core, SIGN_OUT_USER, token=token)

    assert await running_core.sessions.resolve(token) is None


async def test_sign_out_unknown_token_succeeds(running_core):
    assert await submit_user_task(running_core, SIGN_OUT_USER, token="never-issued") is None


async def test_lost_race_on_insert_surfaces_as_already_exists(core):
    processor = UserTaskProcessor(core.users, core.sessions)

    # Another sign-up lands between the existence check and the insert
    async def always_absent(email):
        return False

    core.users.email_exists = always_absent
    await processor.create_user(CreateUserPayload(email="a@x.com", password="secret"))

    with pytest.raises(AlreadyExists):
        await processor.create_user(CreateUserPayload(email="a@x.com", password="secret"))


async def test_overlong_email_is_a_validation_error(running_core, store):
    with pytest.raises(ValidationError) as exc_info:
        await submit_user_task(running_core, CREATE_USER, email="a" * 260 + "@x.com", password="secret")

    assert exc_info.value.message == "Invalid email"
    assert store.count_documents("users") == 0
