async def test_notes_lifecycle(client, make_goal, users):
    goal = await make_goal()
    url = f"/api/goals/{goal['id']}/notes"

    created = await client.post(url, json={"content": "  Great week ", "userId": users[1].id})
    assert created.status_code == 201
    note = created.json()
    assert (note["content"], note["userId"]) == ("Great week", users[1].id)

    assert [n["id"] for n in (await client.get(url)).json()] == [note["id"]]

    assert (await client.delete(f"/api/notes/{note['id']}")).status_code == 204
    assert (await client.delete(f"/api/notes/{note['id']}")).status_code == 404
    assert (await client.get(url)).json() == []


async def test_blank_note_is_rejected(client, make_goal, users):
    goal = await make_goal()
    response = await client.post(f"/api/goals/{goal['id']}/notes", json={"content": "   "})
    assert response.status_code == 400
    assert response.json()["field"] == "content"


async def test_note_on_unknown_goal_is_404(client, users):
    response = await client.post("/api/goals/123/notes", json={"content": "hi"})
    assert response.status_code == 404


async def test_photos_lifecycle(client, make_goal, users):
    goal = await make_goal(title="Samenwonen", category="milestones", type="boolean")
    url = f"/api/goals/{goal['id']}/photos"

    created = await client.post(url, json={"imageUrl": "https://example.com/keys.jpg", "caption": "Keys!"})
    assert created.status_code == 201
    photo = created.json()
    assert photo["userId"] == users[0].id

    assert len((await client.get(url)).json()) == 1
    assert (await client.delete(f"/api/photos/{photo['id']}")).status_code == 204


async def test_photo_url_scheme_is_checked(client, make_goal, users):
    goal = await make_goal(title="Samenwonen", category="milestones", type="boolean")
    response = await client.post(f"/api/goals/{goal['id']}/photos", json={"imageUrl": "ftp://x/y.png"})
    assert response.status_code == 400
    assert response.json()["field"] == "imageUrl"
