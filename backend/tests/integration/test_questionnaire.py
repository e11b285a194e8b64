"""
Integration tests for modules, topics, sub-topics and questions
"""
import pytest
from httpx import AsyncClient

from app.models import Module, Question, SubTopic, Topic


@pytest.fixture
async def questionnaire(db_session):
    module = Module(module_name="Training", priority=1, active=True)
    db_session.add(module)
    await db_session.flush()

    topic = Topic(module_id=module.id, topic_name="Drill", priority=1, form_type="STQ", active=True)
    db_session.add(topic)
    await db_session.flush()

    sub_topics = [
        SubTopic(topic_id=topic.id, sub_topic_name="Morning", priority=2, active=True),
        SubTopic(topic_id=topic.id, sub_topic_name="Evening", priority=1, active=True),
    ]
    db_session.add_all(sub_topics)
    await db_session.flush()

    questions = [
        Question(topic_id=topic.id, question="Personnel present", priority=2, type="Number", active=True),
        Question(topic_id=topic.id, question="Remarks", priority=1, type="Text", active=True),
    ]
    db_session.add_all(questions)
    await db_session.commit()
    return {"module": module, "topic": topic, "sub_topics": sub_topics, "questions": questions}


@pytest.mark.asyncio
async def test_module_topics(client: AsyncClient, questionnaire, admin_headers):
    module_id = questionnaire["module"].id

    response = await client.get(f"/api/v1/modules/{module_id}/topics", headers=admin_headers)

    assert response.status_code == 200
    assert [t["topic_name"] for t in response.json()["data"]] == ["Drill"]


@pytest.mark.asyncio
async def test_delete_module_with_topics_blocked(client: AsyncClient, questionnaire, admin_headers):
    response = await client.delete(f"/api/v1/modules/{questionnaire['module'].id}", headers=admin_headers)

    assert response.status_code == 400
    assert response.json()["message"] == "Cannot delete module with associated topics"


@pytest.mark.asyncio
async def test_clone_module_copies_topics(client: AsyncClient, questionnaire, admin_headers):
    module_id = questionnaire["module"].id

    response = await client.post(f"/api/v1/modules/{module_id}/clone", headers=admin_headers)

    assert response.status_code == 201
    copy = response.json()["data"]
    assert copy["module_name"] == "Training (Copy)"

    topics = await client.get(f"/api/v1/modules/{copy['id']}/topics", headers=admin_headers)
    assert [t["topic_name"] for t in topics.json()["data"]] == ["Drill"]


@pytest.mark.asyncio
async def test_clone_module_with_name(client: AsyncClient, questionnaire, admin_headers):
    response = await client.post(
        f"/api/v1/modules/{questionnaire['module'].id}/clone",
        json={"name": "Training 2026"},
        headers=admin_headers,
    )

    assert response.json()["data"]["module_name"] == "Training 2026"


@pytest.mark.asyncio
async def test_module_order(client: AsyncClient, questionnaire, admin_headers):
    response = await client.patch(
        f"/api/v1/modules/{questionnaire['module'].id}/order", json={"priority": 7}, headers=admin_headers
    )

    assert response.json()["data"]["priority"] == 7


@pytest.mark.asyncio
async def test_topic_form_config_ordered_by_priority(client: AsyncClient, questionnaire, admin_headers):
    response = await client.get(
        f"/api/v1/topics/{questionnaire['topic'].id}/form-config", headers=admin_headers
    )

    data = response.json()["data"]
    assert data["topic"]["form_type"] == "STQ"
    assert [s["sub_topic_name"] for s in data["sub_topics"]] == ["Evening", "Morning"]
    assert [q["question"] for q in data["questions"]] == ["Remarks", "Personnel present"]


@pytest.mark.asyncio
async def test_reorder_topics(client: AsyncClient, questionnaire, admin_headers):
    topic_id = questionnaire["topic"].id

    response = await client.put(
        "/api/v1/topics/reorder", json=[{"id": topic_id, "priority": 5}], headers=admin_headers
    )
    assert response.status_code == 200
    assert response.json()["data"] == {"updated": 1}

    topic = await client.get(f"/api/v1/topics/{topic_id}", headers=admin_headers)
    assert topic.json()["data"]["priority"] == 5


@pytest.mark.asyncio
async def test_reorder_unknown_topic(client: AsyncClient, questionnaire, admin_headers):
    response = await client.put(
        "/api/v1/topics/reorder", json=[{"id": 999, "priority": 1}], headers=admin_headers
    )

    assert response.status_code == 404


@pytest.mark.asyncio
async def test_clone_topic_copies_sub_topics_and_questions(client: AsyncClient, questionnaire, admin_headers):
    response = await client.post(
        f"/api/v1/topics/{questionnaire['topic'].id}/clone", headers=admin_headers
    )
    copy_id = response.json()["data"]["id"]

    config = await client.get(f"/api/v1/topics/{copy_id}/form-config", headers=admin_headers)
    data = config.json()["data"]
    assert data["topic"]["topic_name"] == "Drill (Copy)"
    assert len(data["sub_topics"]) == 2
    assert len(data["questions"]) == 2


@pytest.mark.asyncio
async def test_sub_topic_questions(client: AsyncClient, questionnaire, admin_headers):
    topic_id = questionnaire["topic"].id
    sub_topic_id = questionnaire["sub_topics"][0].id
    await client.post(
        "/api/v1/questions",
        json={"topic_id": topic_id, "sub_topic_id": sub_topic_id, "question": "Rounds fired"},
        headers=admin_headers,
    )

    response = await client.get(f"/api/v1/sub-topics/{sub_topic_id}/questions", headers=admin_headers)

    assert [q["question"] for q in response.json()["data"]] == ["Rounds fired"]


@pytest.mark.asyncio
async def test_question_types(client: AsyncClient, admin_headers):
    response = await client.get("/api/v1/questions/config/types", headers=admin_headers)

    values = [t["value"] for t in response.json()["data"]]
    assert set(values) == {"Number", "Text", "Date", "YesNo", "Formula"}


@pytest.mark.asyncio
async def test_question_sub_topic_must_belong_to_topic(client: AsyncClient, questionnaire, admin_headers, db_session):
    other = Topic(module_id=questionnaire["module"].id, topic_name="Fitness", active=True)
    db_session.add(other)
    await db_session.commit()

    response = await client.post(
        "/api/v1/questions",
        json={
            "topic_id": other.id,
            "sub_topic_id": questionnaire["sub_topics"][0].id,
            "question": "Laps",
        },
        headers=admin_headers,
    )

    assert response.status_code == 400
    assert response.json()["message"] == "Sub-topic does not belong to the topic"


@pytest.mark.asyncio
async def test_question_update_checks_stored_topic(client: AsyncClient, questionnaire, admin_headers, db_session):
    other = Topic(module_id=questionnaire["module"].id, topic_name="Fitness", active=True)
    db_session.add(other)
    await db_session.flush()
    foreign = SubTopic(topic_id=other.id, sub_topic_name="Laps", priority=1, active=True)
    db_session.add(foreign)
    await db_session.commit()
    question_id = questionnaire["questions"][0].id

    rejected = await client.put(
        f"/api/v1/questions/{question_id}", json={"sub_topic_id": foreign.id}, headers=admin_headers
    )
    accepted = await client.put(
        f"/api/v1/questions/{question_id}",
        json={"sub_topic_id": questionnaire["sub_topics"][0].id},
        headers=admin_headers,
    )

    assert rejected.status_code == 400
    assert rejected.json()["details"]["field"] == "sub_topic_id"
    assert accepted.status_code == 200
    assert accepted.json()["data"]["sub_topic_id"] == questionnaire["sub_topics"][0].id


@pytest.mark.asyncio
async def test_bulk_create_questions(client: AsyncClient, questionnaire, admin_headers):
    topic_id = questionnaire["topic"].id

    response = await client.post(
        "/api/v1/questions/bulk-create",
        json=[
            {"topic_id": topic_id, "question": "Vehicles available", "type": "Number"},
            {"topic_id": topic_id, "question": "Inspection done", "type": "YesNo"},
        ],
        headers=admin_headers,
    )

    assert response.status_code == 201
    assert response.json()["message"] == "2 questions created successfully"

    by_type = await client.get("/api/v1/questions/by-type/YesNo", headers=admin_headers)
    assert [q["question"] for q in by_type.json()["data"]] == ["Inspection done"]


@pytest.mark.asyncio
async def test_bulk_create_is_all_or_nothing(client: AsyncClient, questionnaire, admin_headers):
    topic_id = questionnaire["topic"].id

    response = await client.post(
        "/api/v1/questions/bulk-create",
        json=[
            {"topic_id": topic_id, "question": "Vehicles available"},
            {"topic_id": 999, "question": "Orphan"},
        ],
        headers=admin_headers,
    )
    assert response.status_code == 404

    questions = await client.get(f"/api/v1/questions/by-topic/{topic_id}", headers=admin_headers)
    assert "Vehicles available" not in [q["question"] for q in questions.json()["data"]]


@pytest.mark.asyncio
async def test_question_list_filters(client: AsyncClient, questionnaire, admin_headers):
    response = await client.get(
        "/api/v1/questions",
        params={"topic_id": questionnaire["topic"].id, "type": "Text"},
        headers=admin_headers,
    )

    assert [q["question"] for q in response.json()["data"]] == ["Remarks"]


@pytest.mark.asyncio
async def test_question_stats_by_type(client: AsyncClient, questionnaire, admin_headers):
    response = await client.get("/api/v1/questions/stats/overview", headers=admin_headers)

    data = response.json()["data"]
    assert data["total"] == 2
    assert data["by_type"] == {"Number": 1, "Text": 1}
