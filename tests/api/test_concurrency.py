"""Blocking service work must not stall other requests."""

import asyncio
import threading

import httpx

from fakes import TEST_PASSWORD


def test_slow_signin_does_not_block_other_requests(app, authenticator, user, monkeypatch):
    entered = threading.Event()
    release = threading.Event()
    released_in_time = []
    signin = authenticator.signin

    def slow_signin(email, password):
        entered.set()
        released_in_time.append(release.wait(timeout=5))
        return signin(email, password)

    monkeypatch.setattr(authenticator, "signin", slow_signin)

    async def scenario():
        transport = httpx.ASGITransport(app=app)
        async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
            pending = asyncio.create_task(
                client.post("/api/v1/user/signin", json={"email": user.email, "password": TEST_PASSWORD})
            )
            assert await asyncio.to_thread(entered.wait, 5)

            health = await asyncio.wait_for(client.get("/testing"), timeout=2)
            still_signing_in = not pending.done()
            release.set()
            return health, still_signing_in, await pending

    health, still_signing_in, signed_in = asyncio.run(scenario())

    assert health.status_code == 200
    assert still_signing_in
    assert released_in_time == [True]
    assert signed_in.status_code == 200
