"""
Integration tests for monthly performance statistics
"""
import logging
import pytest
from httpx import AsyncClient
from types import SimpleNamespace

from app.models import Module, PerformanceStatistic, Question, RoleTopic, SubTopic, Topic
from app.services.performance_service import performance_service
from app.utils.months import previous_month, reporting_month

BASE = "/api/v1/performance-statistics"


@pytest.fixture
async def form_data(db_session, roles):
    module = Module(module_name="Crime", priority=1, active=True)
    db_session.add(module)
    await db_session.flush()

    first = Topic(module_id=module.id, topic_name="Arrests", priority=1, form_type="NORMAL", active=True)
    second = Topic(module_id=module.id, topic_name="Seizures", priority=2, form_type="NORMAL", active=True)
    db_session.add_all([first, second])
    await db_session.flush()

    count = Question(topic_id=first.id, question="Persons arrested", priority=1, type="Number", active=True)
    note = Question(topic_id=first.id, question="Remarks", priority=2, type="Text", active=True)
    db_session.add_all([count, note])
    await db_session.flush()

    for topic in (first, second):
        db_session.add(RoleTopic(role_id=roles.battalion_user.id, topic_id=topic.id, active=True))
    await db_session.commit()
    return SimpleNamespace(module=module, topic=first, next_topic=second, count=count, note=note)


def _entries(form_data, count="12", note="All produced in court"):
    return {
        "module_id": form_data.module.id,
        "topic_id": form_data.topic.id,
        "entries": [
            {"question_id": form_data.count.id, "value": count},
            {"question_id": form_data.note.id, "value": note},
        ],
    }


@pytest.mark.asyncio
async def test_save_statistics_creates_then_updates(client: AsyncClient, form_data, battalion_user, user_headers):
    response = await client.post(f"{BASE}/save-statistics", json=_entries(form_data), headers=user_headers)
    data = response.json()["data"]
    assert data["month_year"] == reporting_month()
    assert (data["created"], data["updated"]) == (2, 0)

    response = await client.post(f"{BASE}/save-statistics", json=_entries(form_data, count="15"), headers=user_headers)
    data = response.json()["data"]
    assert (data["created"], data["updated"]) == (0, 2)

    count = await client.get(f"{BASE}/count/{battalion_user.id}", headers=user_headers)
    assert count.json()["data"]["count"] == 2


@pytest.mark.asyncio
async def test_save_statistics_copies_user_hierarchy(client: AsyncClient, form_data, hierarchy, user_headers):
    await client.post(f"{BASE}/save-statistics", json=_entries(form_data), headers=user_headers)

    response = await client.get(BASE, params={"question_id": form_data.count.id}, headers=user_headers)

    [row] = response.json()["data"]
    assert row["battalion_id"] == hierarchy.battalion.id
    assert row["range_id"] == hierarchy.range.id
    assert row["status"] == "INPROGRESS"


@pytest.mark.asyncio
async def test_save_statistics_topic_outside_module(client: AsyncClient, form_data, db_session, user_headers):
    other = Module(module_name="Traffic", priority=2, active=True)
    db_session.add(other)
    await db_session.commit()
    payload = _entries(form_data)
    payload["module_id"] = other.id

    response = await client.post(f"{BASE}/save-statistics", json=payload, headers=user_headers)

    assert response.status_code == 400
    assert response.json()["details"]["field"] == "topic_id"


@pytest.mark.asyncio
async def test_save_statistics_question_from_other_topic(client: AsyncClient, form_data, db_session, user_headers):
    stray = Question(topic_id=form_data.next_topic.id, question="Vehicles seized", priority=1, type="Number", active=True)
    db_session.add(stray)
    await db_session.commit()
    payload = _entries(form_data)
    payload["entries"].append({"question_id": stray.id, "value": "3"})

    response = await client.post(f"{BASE}/save-statistics", json=payload, headers=user_headers)

    assert response.status_code == 400
    assert response.json()["details"]["field"] == "question_id"
    listing = await client.get(BASE, params={"topic_id": form_data.topic.id}, headers=user_headers)
    assert listing.json()["data"] == []


@pytest.mark.asyncio
async def test_save_statistics_sub_topic_from_other_topic(client: AsyncClient, form_data, db_session, user_headers):
    stray = SubTopic(topic_id=form_data.next_topic.id, sub_topic_name="Narcotics", priority=1, active=True)
    db_session.add(stray)
    await db_session.commit()
    payload = _entries(form_data)
    payload["entries"][0]["sub_topic_id"] = stray.id

    response = await client.post(f"{BASE}/save-statistics", json=payload, headers=user_headers)

    assert response.status_code == 400
    assert response.json()["message"] == "Sub-topic does not belong to the topic"


@pytest.mark.asyncio
async def test_save_statistics_with_verbose_service_logging(client: AsyncClient, form_data, user_headers):
    service_logger = performance_service.logger
    previous = service_logger.level
    service_logger.setLevel(logging.DEBUG)
    try:
        response = await client.post(f"{BASE}/save-statistics", json=_entries(form_data), headers=user_headers)
    finally:
        service_logger.setLevel(previous)

    assert response.status_code == 200
    assert response.json()["data"]["created"] == 2


@pytest.mark.asyncio
async def test_list_filters_by_submission_status(client: AsyncClient, form_data, user_headers):
    await client.post(f"{BASE}/save-statistics", json=_entries(form_data), headers=user_headers)

    in_progress = await client.get(BASE, params={"status": "INPROGRESS"}, headers=user_headers)
    submitted = await client.get(BASE, params={"status": "SUCCESS"}, headers=user_headers)
    unknown = await client.get(BASE, params={"status": "active"}, headers=user_headers)

    assert in_progress.status_code == 200
    assert in_progress.json()["pagination"]["total"] == 2
    assert submitted.status_code == 200
    assert submitted.json()["data"] == []
    assert unknown.status_code == 400


@pytest.mark.asyncio
async def test_otp_finalises_month(client: AsyncClient, form_data, battalion_user, db_session, user_headers):
    await client.post(f"{BASE}/save-statistics", json=_entries(form_data), headers=user_headers)

    sent = await client.post(f"{BASE}/send-otp", headers=user_headers)
    assert sent.status_code == 200
    assert sent.json()["data"]["month_year"] == reporting_month()

    await db_session.refresh(battalion_user)
    otp = battalion_user.otp
    assert otp and len(otp) == 6

    verified = await client.post(f"{BASE}/verify-otp", json={"otp": otp}, headers=user_headers)
    assert verified.status_code == 200
    assert verified.json()["data"]["updated"] == 2

    success = await client.get(f"{BASE}/count/{battalion_user.id}/success", headers=user_headers)
    assert success.json()["data"]["count"] == 2

    resave = await client.post(f"{BASE}/save-statistics", json=_entries(form_data, count="99"), headers=user_headers)
    data = resave.json()["data"]
    assert data["updated"] == 0
    assert len(data["skipped"]) == 2


@pytest.mark.asyncio
async def test_wrong_otp(client: AsyncClient, battalion_user, user_headers):
    await client.post(f"{BASE}/send-otp", headers=user_headers)

    response = await client.post(f"{BASE}/verify-otp", json={"otp": "0000000"}, headers=user_headers)

    assert response.status_code == 400
    body = response.json()
    assert body["code"] == "INVALID_OTP"
    assert body["details"]["field"] == "otp"


@pytest.mark.asyncio
async def test_make_active(client: AsyncClient, form_data, user_headers):
    await client.post(f"{BASE}/save-statistics", json=_entries(form_data), headers=user_headers)

    response = await client.patch(f"{BASE}/make-active", json={}, headers=user_headers)

    assert response.json()["data"] == {"month_year": reporting_month(), "updated": 2}


@pytest.mark.asyncio
async def test_form_for_allowed_topic(client: AsyncClient, form_data, battalion_user, db_session, user_headers):
    previous = previous_month(reporting_month())
    db_session.add(PerformanceStatistic(
        user_id=battalion_user.id, module_id=form_data.module.id, topic_id=form_data.topic.id,
        question_id=form_data.count.id, month_year=previous, value="8", status="SUCCESS", active=True,
    ))
    await db_session.commit()
    await client.post(f"{BASE}/save-statistics", json=_entries(form_data), headers=user_headers)

    response = await client.get(
        f"{BASE}/form",
        params={"module_id": form_data.module.id, "topic_id": form_data.topic.id},
        headers=user_headers,
    )

    data = response.json()["data"]
    assert data["month_year"] == reporting_month()
    assert data["previous_month_year"] == previous
    count, note = data["questions"]
    assert count["question"] == "Persons arrested"
    assert count["previous_value"] == "8"
    assert count["current_value"] == "12"
    assert count["is_disabled"] is False
    assert note["fin_year_total"] is None


@pytest.mark.asyncio
async def test_form_for_role_without_topic(client: AsyncClient, form_data, range_admin_headers):
    response = await client.get(
        f"{BASE}/form",
        params={"module_id": form_data.module.id, "topic_id": form_data.topic.id},
        headers=range_admin_headers,
    )

    data = response.json()["data"]
    assert data["topic"]["topic_name"] == "Arrests"
    assert data["questions"] == []


@pytest.mark.asyncio
async def test_navigation(client: AsyncClient, form_data, user_headers):
    params = {"module_id": form_data.module.id, "topic_id": form_data.topic.id}

    nxt = await client.get(f"{BASE}/navigation/next", params=params, headers=user_headers)
    assert nxt.json()["data"] == {
        "module_id": form_data.module.id,
        "topic_id": form_data.next_topic.id,
        "is_same_module": True,
        "has_next": False,
    }

    prev = await client.get(f"{BASE}/navigation/previous", params=params, headers=user_headers)
    assert prev.json()["data"]["topic_id"] is None
    assert prev.json()["data"]["has_previous"] is False

    info = await client.get(f"{BASE}/navigation/info", params=params, headers=user_headers)
    assert info.json()["data"]["position"] == "1 of 2"


@pytest.mark.asyncio
async def test_navigation_topic_not_assigned(client: AsyncClient, form_data, range_admin_headers):
    response = await client.get(
        f"{BASE}/navigation/next",
        params={"module_id": form_data.module.id, "topic_id": form_data.topic.id},
        headers=range_admin_headers,
    )

    assert response.status_code == 404


@pytest.mark.asyncio
async def test_create_statistic_normalises_month(
    client: AsyncClient, form_data, battalion_user, hierarchy, user_headers
):
    response = await client.post(BASE, json={
        "user_id": battalion_user.id,
        "question_id": form_data.count.id,
        "module_id": form_data.module.id,
        "value": "4",
        "month_year": "sep 2025",
    }, headers=user_headers)

    assert response.status_code == 201
    data = response.json()["data"]
    assert data["month_year"] == "SEP 2025"
    assert data["battalion_id"] == hierarchy.battalion.id


@pytest.mark.asyncio
async def test_create_statistic_bad_month(client: AsyncClient, form_data, battalion_user, user_headers):
    response = await client.post(BASE, json={
        "user_id": battalion_user.id,
        "question_id": form_data.count.id,
        "module_id": form_data.module.id,
        "value": "4",
        "month_year": "September",
    }, headers=user_headers)

    assert response.status_code == 400
    assert "month_year" in response.json()["details"]["errors"]


@pytest.mark.asyncio
async def test_soft_delete_hides_statistic(client: AsyncClient, form_data, battalion_user, user_headers):
    created = await client.post(BASE, json={
        "user_id": battalion_user.id,
        "question_id": form_data.count.id,
        "module_id": form_data.module.id,
        "value": "4",
        "month_year": "SEP 2025",
    }, headers=user_headers)
    statistic_id = created.json()["data"]["id"]

    deleted = await client.delete(f"{BASE}/{statistic_id}", headers=user_headers)
    assert deleted.status_code == 200

    response = await client.get(f"{BASE}/{statistic_id}", headers=user_headers)
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_summary_labels_and_report_values(
    client: AsyncClient, form_data, battalion_user, hierarchy, user_headers
):
    items = [
        {"month_year": month, "value": value, "status": status}
        for month, value, status in (
            ("AUG 2025", "5", "SUCCESS"),
            ("SEP 2025", "7", "SUCCESS"),
            ("SEP 2025", "n/a", "INPROGRESS"),
        )
    ]
    for index, item in enumerate(items):
        item.update(
            user_id=battalion_user.id,
            question_id=form_data.count.id if index < 2 else form_data.note.id,
            module_id=form_data.module.id,
        )
    bulk = await client.post(f"{BASE}/bulk", json={"items": items}, headers=user_headers)
    assert bulk.status_code == 201

    summary = await client.get(f"{BASE}/summary", headers=user_headers)
    assert summary.json()["data"] == {
        "total_count": 3,
        "success_count": 2,
        "in_progress_count": 1,
        "total_value": 12,
        "success_rate": "66.67",
    }

    labels = await client.get(f"{BASE}/labels", headers=user_headers)
    assert labels.json()["data"] == ["SEP 2025", "AUG 2025"]

    values = await client.post(f"{BASE}/report-values", json={
        "type": "user",
        "id": battalion_user.id,
        "question_ids": [form_data.count.id, form_data.note.id],
    }, headers=user_headers)
    assert values.json()["data"] == [
        {"month_year": "AUG 2025", "value": 5},
        {"month_year": "SEP 2025", "value": 7},
    ]

    filtered = await client.post(
        f"{BASE}/labels/filter",
        json={"question_ids": [form_data.note.id], "battalion_id": hierarchy.battalion.id},
        headers=user_headers,
    )
    assert filtered.json()["data"] == []


@pytest.mark.asyncio
async def test_report_values_requires_id(client: AsyncClient, form_data, user_headers):
    response = await client.post(f"{BASE}/report-values", json={
        "type": "state", "question_ids": [form_data.count.id],
    }, headers=user_headers)

    assert response.status_code == 400
