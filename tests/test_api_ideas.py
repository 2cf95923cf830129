async def test_idea_categories_and_ideas(client):
    category = (await client.post("/api/idea-categories", json={"name": "Trips"})).json()
    assert category["icon"] == "folder"

    created = await client.post("/api/ideas", json={"categoryId": category["id"], "title": "Lisbon"})
    assert created.status_code == 201
    idea = created.json()
    assert idea["completed"] is False

    patched = await client.patch(f"/api/ideas/{idea['id']}", json={"completed": True})
    assert patched.json()["completed"] is True

    ideas = (await client.get(f"/api/idea-categories/{category['id']}/ideas")).json()
    assert [i["title"] for i in ideas] == ["Lisbon"]


async def test_deleting_category_removes_its_ideas(client):
    category = (await client.post("/api/idea-categories", json={"name": "Food"})).json()
    await client.post("/api/ideas", json={"categoryId": category["id"], "title": "Ramen"})

    assert (await client.delete(f"/api/idea-categories/{category['id']}")).status_code == 204
    assert (await client.get("/api/ideas")).json() == []
    assert (await client.get(f"/api/idea-categories/{category['id']}/ideas")).status_code == 404


async def test_idea_needs_existing_category(client):
    response = await client.post("/api/ideas", json={"categoryId": 7, "title": "Ramen"})
    assert response.status_code == 404


async def test_rename_category(client):
    category = (await client.post("/api/idea-categories", json={"name": "Food"})).json()
    response = await client.patch(f"/api/idea-categories/{category['id']}", json={"name": "Restaurants"})
    assert response.json()["name"] == "Restaurants"
