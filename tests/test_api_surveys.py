"""API tests for survey, response, notification and quick survey endpoints."""
import uuid

import pytest
from fastapi import status
from sqlalchemy.exc import OperationalError

from alumni_backend.config import get_settings
from alumni_backend.services.aggregation_service import SurveyAggregationService
from alumni_backend.services.auth_service import AuthService
from alumni_backend.services.quick_survey_service import QuickSurveyService


async def _create_survey(client, admin_headers, payload) -> dict:
    response = await client.post("/surveys", json=payload, headers=admin_headers)
    assert response.status_code == status.HTTP_201_CREATED, response.text
    return response.json()["data"]


@pytest.mark.asyncio
async def test_endpoints_require_authentication(client):
    for method, path in [
        ("get", "/surveys/unanswered"),
        ("get", f"/surveys/{uuid.uuid4()}"),
        ("get", "/notifications"),
        ("get", "/quick-survey/status"),
    ]:
        response = await getattr(client, method)(path)
        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        body = response.json()
        assert body["success"] is False
        assert body["error"] == "missing_credentials"


@pytest.mark.asyncio
async def test_invalid_token_is_rejected(client):
    response = await client.get("/surveys/answered", headers={"Authorization": "Bearer not-a-jwt"})
    assert response.status_code == status.HTTP_401_UNAUTHORIZED
    assert response.json()["error"] == "invalid_token"


@pytest.mark.asyncio
async def test_token_for_unknown_alumni_is_rejected(client):
    token = AuthService().create_access_token(uuid.uuid4())
    response = await client.get("/surveys/answered", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == status.HTTP_401_UNAUTHORIZED


@pytest.mark.asyncio
async def test_cookie_token_is_accepted(client, alumni_factory):
    alumni = await alumni_factory()
    client.cookies.set(get_settings().access_token_cookie_name, AuthService().create_access_token(alumni.alumni_id))

    response = await client.get("/surveys/answered")

    assert response.status_code == status.HTTP_200_OK
    assert response.json() == {"success": True, "data": [], "message": None}


@pytest.mark.asyncio
async def test_admin_endpoints_reject_regular_alumni(client, alumni_factory, auth_headers, survey_payload):
    alumni = await alumni_factory()
    headers = auth_headers(alumni)

    create = await client.post("/surveys", json=survey_payload(), headers=headers)
    listing = await client.get("/survey-responses", headers=headers)

    assert create.status_code == status.HTTP_403_FORBIDDEN
    assert create.json()["error"] == "admin_access_required"
    assert listing.status_code == status.HTTP_403_FORBIDDEN


@pytest.mark.asyncio
async def test_create_and_fetch_survey(client, admin_alumni, alumni_factory, auth_headers, survey_payload):
    admin_headers = auth_headers(admin_alumni)
    created = await _create_survey(client, admin_headers, survey_payload(title="Career Outlook"))

    assert created["title"] == "Career Outlook"
    assert created["is_open"] is True
    question = created["sections"][0]["questions"][0]
    assert question["question_type"] == "Multiple Choice"
    assert [o["option_text"] for o in question["options"]] == ["Employed", "Unemployed", "Others"]

    alumni = await alumni_factory()
    response = await client.get(f"/surveys/{created['survey_id']}", headers=auth_headers(alumni))
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["data"]["sections"] == created["sections"]

    unanswered = await client.get("/surveys/unanswered", headers=auth_headers(alumni))
    assert created["survey_id"] in [s["survey_id"] for s in unanswered.json()["data"]]


@pytest.mark.asyncio
async def test_create_survey_validation_errors_use_envelope(client, admin_alumni, auth_headers, survey_payload):
    payload = survey_payload(sections=[
        {
            "section_title": "Free text",
            "questions": [
                {"question_text": "Why?", "question_type": "Open-ended", "options": [{"option_text": "No"}]},
            ],
        },
    ])

    response = await client.post("/surveys", json=payload, headers=auth_headers(admin_alumni))

    assert response.status_code == 422
    body = response.json()
    assert body["success"] is False
    assert body["error"] == "validation_error"
    assert body["errors"]
    assert all({"field", "message", "type"} <= set(error) for error in body["errors"])


@pytest.mark.asyncio
async def test_unknown_survey_returns_not_found(client, alumni_factory, auth_headers):
    alumni = await alumni_factory()
    response = await client.get(f"/surveys/{uuid.uuid4()}", headers=auth_headers(alumni))
    assert response.status_code == status.HTTP_404_NOT_FOUND
    assert response.json()["error"] == "survey_not_found"


@pytest.mark.asyncio
async def test_submit_resubmit_and_report(client, admin_alumni, alumni_factory, auth_headers, survey_payload):
    admin_headers = auth_headers(admin_alumni)
    created = await _create_survey(client, admin_headers, survey_payload(title="Career Outlook API"))
    survey_id = created["survey_id"]
    question = created["sections"][0]["questions"][0]
    others = question["options"][-1]

    alumni = await alumni_factory(first_name="Ada")
    headers = auth_headers(alumni)
    answer = {
        "responses": [
            {"question_id": question["question_id"], "option_id": others["option_id"], "response_text": "Freelancing"},
        ]
    }

    submitted = await client.post(f"/surveys/{survey_id}/responses", json=answer, headers=headers)
    assert submitted.status_code == status.HTTP_201_CREATED, submitted.text
    assert submitted.json()["data"]["order"] == 1
    response_id = submitted.json()["data"]["response_id"]

    again = await client.post(f"/surveys/{survey_id}/responses", json=answer, headers=headers)
    assert again.status_code == status.HTTP_409_CONFLICT
    assert again.json()["error"] == "already_responded"

    report = await client.get(f"/surveys/{survey_id}/responses", headers=admin_headers)
    assert report.status_code == status.HTTP_200_OK
    rows = report.json()["data"]["sections"][0]["questions"][0]["responses"]
    assert len(rows) == 1
    assert rows[0]["alumni_first_name"] == "Ada"
    assert rows[0]["option_text"] == "Others"
    assert rows[0]["response_text"] == "Freelancing"

    sheet = await client.get(f"/survey-responses/{response_id}", headers=admin_headers)
    assert sheet.status_code == status.HTTP_200_OK
    sheet_question = sheet.json()["data"]["sections"][0]["questions"][0]
    assert sheet_question["response"]["selected_option"]["option_text"] == "Others"

    listing = await client.get("/survey-responses", headers=admin_headers)
    assert response_id in [item["response_id"] for item in listing.json()["data"]]

    answered = await client.get("/surveys/answered", headers=headers)
    assert [s["survey_id"] for s in answered.json()["data"]] == [survey_id]


@pytest.mark.asyncio
async def test_submit_with_unanswered_question_reports_ids(
    client, admin_alumni, alumni_factory, auth_headers, survey_payload
):
    payload = survey_payload(sections=[
        {
            "section_title": "Two questions",
            "questions": [
                {"question_text": "First", "question_type": "Open-ended", "is_required": True},
                {"question_text": "Second", "question_type": "Open-ended"},
            ],
        },
    ])
    created = await _create_survey(client, auth_headers(admin_alumni), payload)
    first, second = created["sections"][0]["questions"]

    alumni = await alumni_factory()
    response = await client.post(
        f"/surveys/{created['survey_id']}/responses",
        json={"responses": [{"question_id": first["question_id"], "response_text": "answer"}]},
        headers=auth_headers(alumni),
    )

    assert response.status_code == 422
    body = response.json()
    assert body["error"] == "unanswered_questions"
    assert body["details"] == {"question_ids": [second["question_id"]]}


@pytest.mark.asyncio
async def test_unknown_response_returns_not_found(client, admin_alumni, auth_headers):
    response = await client.get(f"/survey-responses/{uuid.uuid4()}", headers=auth_headers(admin_alumni))
    assert response.status_code == status.HTTP_404_NOT_FOUND
    assert response.json()["error"] == "response_not_found"


@pytest.mark.asyncio
async def test_notifications_follow_invitation_lifecycle(
    client, admin_alumni, alumni_factory, auth_headers, survey_payload
):
    alumni = await alumni_factory()
    headers = auth_headers(alumni)
    created = await _create_survey(client, auth_headers(admin_alumni), survey_payload(title="Inbox"))
    survey_id = created["survey_id"]

    inbox = await client.get("/notifications", headers=headers)
    invitations = [n for n in inbox.json()["data"] if n["survey_id"] == survey_id]
    assert len(invitations) == 1
    assert invitations[0]["link"] == f"/survey/{survey_id}"
    assert invitations[0]["is_read"] is False

    question = created["sections"][0]["questions"][0]
    await client.post(
        f"/surveys/{survey_id}/responses",
        json={"responses": [{"question_id": question["question_id"], "option_id": question["options"][0]["option_id"]}]},
        headers=headers,
    )

    inbox = await client.get("/notifications", headers=headers)
    assert survey_id not in [n["survey_id"] for n in inbox.json()["data"]]


@pytest.mark.asyncio
async def test_delete_survey(client, admin_alumni, alumni_factory, auth_headers, survey_payload):
    admin_headers = auth_headers(admin_alumni)
    created = await _create_survey(client, admin_headers, survey_payload(title="Short-lived"))
    survey_id = created["survey_id"]

    deleted = await client.delete(f"/surveys/{survey_id}", headers=admin_headers)
    assert deleted.status_code == status.HTTP_200_OK
    assert deleted.json()["success"] is True

    alumni = await alumni_factory()
    fetched = await client.get(f"/surveys/{survey_id}", headers=auth_headers(alumni))
    assert fetched.status_code == status.HTTP_404_NOT_FOUND

    inbox = await client.get("/notifications", headers=auth_headers(alumni))
    assert survey_id not in [n["survey_id"] for n in inbox.json()["data"]]

    again = await client.delete(f"/surveys/{survey_id}", headers=admin_headers)
    assert again.status_code == status.HTTP_404_NOT_FOUND


@pytest.mark.asyncio
async def test_quick_survey_round_trip(client, alumni_factory, auth_headers):
    alumni = await alumni_factory()
    headers = auth_headers(alumni)

    before = await client.get("/quick-survey/status", headers=headers)
    assert before.json()["data"]["answered"] is False

    submitted = await client.post(
        "/quick-survey",
        json={"selected_options": ["Career fairs", "Other"], "other_response": "Book club"},
        headers=headers,
    )
    assert submitted.status_code == status.HTTP_200_OK

    after = await client.get("/quick-survey/status", headers=headers)
    data = after.json()["data"]
    assert data["answered"] is True
    assert data["selected_options"] == ["Career fairs", "Other"]
    assert data["other_response"] == "Book club"


@pytest.mark.asyncio
async def test_health_check(client):
    response = await client.get("/health")
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["data"]["database"] == "connected"


@pytest.mark.asyncio
async def test_storage_error_on_read_uses_error_envelope(
    client, admin_alumni, auth_headers, survey_payload, monkeypatch
):
    admin_headers = auth_headers(admin_alumni)
    created = await _create_survey(client, admin_headers, survey_payload(title="Broken report"))

    async def _fail(self, survey_id):
        raise OperationalError("SELECT feedback_responses", {}, Exception("database is locked"))

    monkeypatch.setattr(SurveyAggregationService, "get_responses_by_survey", _fail)

    response = await client.get(f"/surveys/{created['survey_id']}/responses", headers=admin_headers)

    assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
    assert response.headers["content-type"].startswith("application/json")
    body = response.json()
    assert body["success"] is False
    assert body["error"] == "internal_error"
    assert "database is locked" not in body["message"]


@pytest.mark.asyncio
async def test_quick_survey_storage_error_is_rolled_back(client, alumni_factory, auth_headers, monkeypatch):
    alumni = await alumni_factory()
    headers = auth_headers(alumni)

    async def _fail(self, alumni_id, values):
        raise OperationalError("INSERT INTO quick_survey_responses", {}, Exception("disk I/O error"))

    monkeypatch.setattr(QuickSurveyService, "_upsert", _fail)

    response = await client.post("/quick-survey", json={"selected_options": ["Mentoring"]}, headers=headers)

    assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
    assert response.json()["error"] == "quick_survey_submission_failed"

    monkeypatch.undo()
    status_response = await client.get("/quick-survey/status", headers=headers)
    assert status_response.json()["data"]["answered"] is False
