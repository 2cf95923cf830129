async def test_list_users(client, users):
    body = (await client.get("/api/users")).json()
    assert [u["name"] for u in body] == ["Ana", "Ben"]
    assert body[0]["level"] == 1
    assert body[0]["levelProgress"] == 0


async def test_update_profile_trims_name(client, users):
    response = await client.patch(f"/api/users/{users[0].id}", json={"name": "  Anna "})
    assert response.status_code == 200
    assert response.json()["name"] == "Anna"
    assert response.json()["avatar"] == "woman"


async def test_empty_avatar_clears_it(client, users):
    response = await client.patch(f"/api/users/{users[0].id}", json={"avatar": ""})
    assert response.json()["avatar"] is None


async def test_update_profile_rejects_null_name(client, users):
    response = await client.patch(f"/api/users/{users[0].id}", json={"name": None})
    assert response.status_code == 400
    assert response.json()["field"] == "name"


async def test_unknown_user_is_404(client, users):
    assert (await client.get("/api/users/99")).status_code == 404
    assert (await client.patch("/api/users/99", json={"name": "x"})).status_code == 404
