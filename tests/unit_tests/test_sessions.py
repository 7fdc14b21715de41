from files_manager.sessions import SESSION_TTL_SECONDS, SessionStore, session_key


async def test_issued_token_resolves_to_user(cache):
    sessions = SessionStore(cache)

    token = await sessions.issue("5f1e0c9b8a7d6e5f4a3b2c1d")

    assert await sessions.resolve(token) == "5f1e0c9b8a7d6e5f4a3b2c1d"
    assert await cache.get(session_key(token)) == "5f1e0c9b8a7d6e5f4a3b2c1d"


async def test_tokens_are_unique_per_issue(cache):
    sessions = SessionStore(cache)

    first = await sessions.issue("u1")
    second = await sessions.issue("u1")

    assert first != second
    assert await sessions.resolve(first) == "u1"
    assert await sessions.resolve(second) == "u1"


async def test_token_expires_after_ttl(cache, clock):
    sessions = SessionStore(cache)
    token = await sessions.issue("u1")

    clock.advance(SESSION_TTL_SECONDS - 1)
    assert await sessions.resolve(token) == "u1"

    clock.advance(1)
    assert await sessions.resolve(token) is None


async def test_revoke_is_idempotent(cache):
    sessions = SessionStore(cache)
    token = await sessions.issue("u1")

    await sessions.revoke(token)
    await sessions.revoke(token)

    assert await sessions.resolve(token) is None


async def test_resolve_unknown_or_empty_token(cache):
    sessions = SessionStore(cache)

    assert await sessions.resolve("not-a-token") is None
    assert await sessions.resolve(None) is None
    assert await sessions.resolve("") is None


async def test_sessions_survive_a_new_store_instance(cache):
    token = await SessionStore(cache).issue("u1")

    assert await SessionStore(cache).resolve(token) == "u1"
