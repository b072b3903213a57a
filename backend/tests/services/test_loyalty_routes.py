"""Loyalty routes — verified balances, redemption, tiers and admin client tools."""

import re

ALICE = {"id": 42, "username": "alice"}


async def test_loyalty_requires_verified_token(client, signed_init_data):
    assert (await client.get("/api/loyalty")).status_code == 401
    forged = signed_init_data(ALICE, bot_token="999:not-our-bot")
    res = await client.get("/api/loyalty", params={"initData": forged})
    assert res.status_code == 401


async def test_new_customer_has_zero_points(client, signed_init_data):
    res = await client.get(
        "/api/loyalty", headers={"X-Telegram-Init-Data": signed_init_data(ALICE)},
    )
    assert res.status_code == 200
    assert res.json() == {"success": True, "points": 0, "rewards": []}


async def test_redeem_issues_code_and_debits(client, seed_user, signed_init_data):
    await seed_user(12)
    init_data = signed_init_data(ALICE)

    res = await client.post("/api/loyalty/redeem", json={"initData": init_data})
    assert res.status_code == 200
    body = res.json()
    assert re.fullmatch(r"REWARD-[0-9A-Z]{6}", body["code"])
    assert body["points"] == 7

    await client.post("/api/loyalty/redeem", json={"initData": init_data})
    account = (await client.get("/api/loyalty", params={"initData": init_data})).json()
    assert account["points"] == 2
    assert len(account["rewards"]) == 2


async def test_redeem_with_too_few_points_changes_nothing(client, seed_user, signed_init_data):
    await seed_user(4)
    init_data = signed_init_data(ALICE)
    res = await client.post(
        "/api/loyalty/redeem", headers={"X-Telegram-Init-Data": init_data},
    )
    assert res.status_code == 400
    assert res.json()["error"]["code"] == "INSUFFICIENT_POINTS"
    account = (await client.get("/api/loyalty", params={"initData": init_data})).json()
    assert account == {"success": True, "points": 4, "rewards": []}


async def test_loyalty_config(client, admin_headers):
    default = (await client.get("/api/loyalty/config")).json()["data"]
    assert default == {"maxPoints": 10, "rewards": []}

    tiers = [{"points": 5, "label": "Free preroll"}, {"points": 10, "label": "Free gram"}]
    res = await client.post(
        "/api/loyalty/config", json={"rewards": tiers}, headers=admin_headers,
    )
    assert res.status_code == 200
    assert (await client.get("/api/loyalty/config")).json()["data"]["rewards"] == tiers


async def test_loyalty_config_write_requires_admin(client):
    res = await client.post("/api/loyalty/config", json={"rewards": []})
    assert res.status_code == 401


async def test_admin_lists_and_adjusts_clients(client, admin_headers, seed_user):
    await seed_user(3)
    clients = (await client.get("/api/clients", headers=admin_headers)).json()["data"]
    assert clients == [{"id": "42", "points": 3, "rewards": [], "totalSpent": 0}]

    res = await client.post(
        "/api/clients/42/points", json={"action": "add", "value": 4}, headers=admin_headers,
    )
    assert res.json() == {"success": True, "points": 7}

    res = await client.post(
        "/api/clients/42/points", json={"action": "add", "value": -50}, headers=admin_headers,
    )
    assert res.json()["points"] == 0

    res = await client.post(
        "/api/clients/42/points", json={"action": "set", "value": 15}, headers=admin_headers,
    )
    assert res.json()["points"] == 15

    res = await client.post(
        "/api/clients/42/points", json={"action": "reset"}, headers=admin_headers,
    )
    assert res.json()["points"] == 0


async def test_adjusting_unknown_client_is_404(client, admin_headers):
    res = await client.post(
        "/api/clients/777/points", json={"action": "add", "value": 1}, headers=admin_headers,
    )
    assert res.status_code == 404


async def test_unknown_adjust_action_is_400(client, admin_headers, seed_user):
    await seed_user(1)
    res = await client.post(
        "/api/clients/42/points", json={"action": "double"}, headers=admin_headers,
    )
    assert res.status_code == 400
