"""
Integration tests for the admin dashboard
"""
import pytest
from httpx import AsyncClient

from app.models import Module, PerformanceStatistic, Question, Topic


@pytest.mark.asyncio
async def test_overview_counts(client: AsyncClient, battalion_user, admin_headers):
    response = await client.get("/api/v1/dashboard/overview", headers=admin_headers)

    data = response.json()["data"]
    assert data["states"] == 1
    assert data["battalions"] == 2
    assert data["users"] == 2
    assert data["active_users"] == 2
    assert data["communications"] == 0


@pytest.mark.asyncio
async def test_dashboard_requires_admin(client: AsyncClient, user_headers):
    response = await client.get("/api/v1/dashboard/overview", headers=user_headers)

    assert response.status_code == 403


@pytest.mark.asyncio
async def test_users_by_role_includes_empty_roles(client: AsyncClient, battalion_user, admin_headers):
    response = await client.get("/api/v1/dashboard/users/by-role", headers=admin_headers)

    counts = {entry["role_name"]: entry["count"] for entry in response.json()["data"]}
    assert counts == {"Battalion User": 1, "Range Admin": 0, "System Admin": 1}


@pytest.mark.asyncio
async def test_users_by_battalion(client: AsyncClient, admin_headers):
    response = await client.get("/api/v1/dashboard/users/by-battalion", headers=admin_headers)

    assert [(e["battalion_name"], e["count"]) for e in response.json()["data"]] == [("BSAP-1", 1), ("BSAP-2", 0)]


@pytest.mark.asyncio
async def test_recent_users_limit(client: AsyncClient, battalion_user, range_admin_user, admin_headers):
    response = await client.get("/api/v1/dashboard/users/recent", params={"limit": 2}, headers=admin_headers)

    data = response.json()["data"]
    assert len(data) == 2
    assert all("password" not in user for user in data)


@pytest.mark.asyncio
async def test_performance_by_month_and_module(client: AsyncClient, db_session, battalion_user, admin_headers):
    module = Module(module_name="Crime", priority=1, active=True)
    db_session.add(module)
    await db_session.flush()
    topic = Topic(module_id=module.id, topic_name="Arrests", active=True)
    db_session.add(topic)
    await db_session.flush()
    question = Question(topic_id=topic.id, question="Persons arrested", type="Number", active=True)
    db_session.add(question)
    await db_session.flush()
    for month, value, status in (("OCT 2025", "4", "INPROGRESS"), ("SEP 2025", "6", "SUCCESS")):
        db_session.add(PerformanceStatistic(
            user_id=battalion_user.id, module_id=module.id, topic_id=topic.id, question_id=question.id,
            month_year=month, value=value, status=status, active=True,
        ))
    await db_session.commit()

    by_month = await client.get("/api/v1/dashboard/performance/by-month", headers=admin_headers)
    assert by_month.json()["data"] == [
        {"month_year": "SEP 2025", "record_count": 1, "success_count": 1, "total_value": 6.0},
        {"month_year": "OCT 2025", "record_count": 1, "success_count": 0, "total_value": 4.0},
    ]

    by_module = await client.get("/api/v1/dashboard/performance/by-module", headers=admin_headers)
    assert by_module.json()["data"] == [
        {"module_id": module.id, "module_name": "Crime", "record_count": 2, "success_count": 1, "total_value": 10.0},
    ]
