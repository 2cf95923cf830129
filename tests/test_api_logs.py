from datetime import datetime, timedelta, timezone


async def test_three_logs_bring_counter_to_75_percent(client, make_goal, users):
    goal = await make_goal(targetValue=4, unit="workouts", resetPeriod="weekly")

    for _ in range(3):
        response = await client.post("/api/logs", json={"goalId": goal["id"], "value": 1})
        assert response.status_code == 201

    body = (await client.get(f"/api/goals/{goal['id']}")).json()
    assert body["currentValue"] == 3
    assert body["percentage"] == 75
    logs = (await client.get(f"/api/logs/{goal['id']}")).json()
    assert len(logs) == 3
    assert logs == sorted(logs, key=lambda l: (l["createdAt"], l["id"]), reverse=True)


async def test_opposite_logs_cancel_out(client, make_goal, users):
    goal = await make_goal(title="Tokio Trip", category="savings", type="progress",
                           currentValue=1200, targetValue=5000)

    await client.post("/api/logs", json={"goalId": goal["id"], "value": 5})
    await client.post("/api/logs", json={"goalId": goal["id"], "value": -5})

    body = (await client.get(f"/api/goals/{goal['id']}")).json()
    assert body["currentValue"] == 1200
    logs = (await client.get(f"/api/logs/{goal['id']}")).json()
    assert [l["value"] for l in logs] == [-5, 5]


async def test_log_awards_xp_and_feed_entry(client, make_goal, users):
    goal = await make_goal(title="Sport per week", targetValue=4, unit="workouts")

    response = await client.post("/api/logs", json={"goalId": goal["id"], "value": 2, "userId": users[1].id})

    assert response.json()["userId"] == users[1].id
    ben = (await client.get(f"/api/users/{users[1].id}")).json()
    assert ben["xp"] == 10
    assert ben["currentStreak"] == 1
    assert "first_log" in ben["badges"]

    [entry] = (await client.get("/api/activity")).json()
    assert entry["action"] == "log"
    assert entry["xpEarned"] == 10
    assert entry["description"] == "+2 workouts on Sport per week"


async def test_log_against_unknown_goal_is_404(client, users):
    response = await client.post("/api/logs", json={"goalId": 999, "value": 1})
    assert response.status_code == 404


async def test_log_against_room_goal_is_rejected(client, make_goal, users):
    goal = await make_goal(title="Tuin", category="casa", type="room", metadata={"items": [{"title": "a"}]})
    response = await client.post("/api/logs", json={"goalId": goal["id"], "value": 1})
    assert response.status_code == 400
    assert response.json()["field"] == "goalId"


async def test_log_requires_integer_value(client, make_goal, users):
    goal = await make_goal()
    response = await client.post("/api/logs", json={"goalId": goal["id"], "value": "lots"})
    assert response.status_code == 400
    assert response.json()["field"] == "value"


async def test_log_with_unknown_user_is_404(client, make_goal, users):
    goal = await make_goal()
    response = await client.post("/api/logs", json={"goalId": goal["id"], "value": 1, "userId": 42})
    assert response.status_code == 404


async def test_log_without_profiles_is_a_server_error(client, make_goal):
    goal = await make_goal()
    response = await client.post("/api/logs", json={"goalId": goal["id"], "value": 1})
    assert response.status_code == 500
    assert response.json() == {"message": "Internal server error"}


async def test_recent_logs_newest_first(client, make_goal, users):
    a = await make_goal(title="a")
    b = await make_goal(title="b")
    await client.post("/api/logs", json={"goalId": a["id"], "value": 1})
    await client.post("/api/logs", json={"goalId": b["id"], "value": 1})

    logs = (await client.get("/api/logs")).json()

    assert [l["goalId"] for l in logs] == [b["id"], a["id"]]


async def test_log_rolls_over_an_ended_period_first(client, make_goal, users):
    start = datetime.now(timezone.utc) - timedelta(days=8)
    goal = await make_goal(targetValue=4, currentValue=3, resetPeriod="weekly",
                           periodStartDate=start.isoformat())

    response = await client.post("/api/logs", json={"goalId": goal["id"], "value": 2})
    assert response.status_code == 201

    assert (await client.get(f"/api/goals/{goal['id']}")).json()["currentValue"] == 2
    history = (await client.get(f"/api/goals/{goal['id']}/history")).json()
    assert [h["finalValue"] for h in history] == [3]


async def test_unknown_goal_is_404_even_without_profiles(client):
    response = await client.post("/api/logs", json={"goalId": 999, "value": 1})
    assert response.status_code == 404
