async def test_stats_after_logging(client, make_goal, users):
    goal = await make_goal(targetValue=4)
    await client.post("/api/logs", json={"goalId": goal["id"], "value": 1})

    stats = (await client.get("/api/stats")).json()

    assert stats["totalLogs"] == 1
    assert stats["totalXp"] == 10
    assert stats["currentStreak"] == 1


async def test_savings_forecast_lists_savings_goals(client, make_goal, users):
    trip = await make_goal(title="Tokio Trip", category="savings", type="progress",
                           currentValue=1200, targetValue=5000, unit="€")
    await make_goal(title="Sport per week", targetValue=4)
    await client.post("/api/logs", json={"goalId": trip["id"], "value": 300})

    [item] = (await client.get("/api/reports/forecast")).json()

    assert item["goalId"] == trip["id"]
    assert item["saved"] == 1500
    assert item["remaining"] == 3500
    assert item["monthsToTarget"] is not None


async def test_monthly_report_counts_recent_savings(client, make_goal, users):
    trip = await make_goal(title="Tokio Trip", category="savings", type="progress", targetValue=5000)
    await make_goal(title="Samenwonen", category="milestones", type="boolean", currentValue=1)
    await client.post("/api/logs", json={"goalId": trip["id"], "value": 250})
    await client.post("/api/logs", json={"goalId": trip["id"], "value": -50})

    report = (await client.get("/api/reports/monthly")).json()

    assert report["savedLast30Days"] == 250
    assert (report["milestonesCompleted"], report["milestonesTotal"]) == (1, 1)


async def test_reminders_and_category_progress(client, make_goal):
    await make_goal(title="Sport per week", currentValue=0, targetValue=4)

    reminders = (await client.get("/api/reports/reminders")).json()
    assert reminders[0]["type"] == "warning"

    categories = (await client.get("/api/reports/categories")).json()
    lifestyle = next(c for c in categories if c["category"] == "lifestyle")
    assert (lifestyle["completed"], lifestyle["total"]) == (0, 4)
