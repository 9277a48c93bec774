"""Tests for the per-survey report, the respondent answer sheet and the response listing."""
import uuid

import pytest

from alumni_backend.models import FeedbackResponse
from alumni_backend.schemas.feedback import AnswerSubmission, SurveySubmission
from alumni_backend.services import SurveyAggregationService, SurveyResponseService
from alumni_backend.utils.exceptions import NotFoundError


def _sections() -> list[dict]:
    return [
        {
            "section_title": "Work",
            "questions": [
                {
                    "question_text": "Status",
                    "question_type": "Dropdown",
                    "options": [{"option_text": "Employed"}, {"option_text": "Self-employed"}],
                },
            ],
        },
        {
            "section_title": "Feedback",
            "questions": [
                {
                    "question_text": "Satisfaction",
                    "question_type": "Rating",
                    "options": [{"option_text": "Low", "option_value": 1}, {"option_text": "High", "option_value": 5}],
                },
                {"question_text": "Suggestions", "question_type": "Open-ended"},
            ],
        },
    ]


async def _answer_all(db_session, survey, alumni_id, suggestion: str):
    status_q = survey.sections[0].questions[0]
    rating_q, suggestions_q = survey.sections[1].questions
    return await SurveyResponseService(db_session).submit_response(
        survey.survey_id,
        alumni_id,
        SurveySubmission(responses=[
            AnswerSubmission(question_id=status_q.question_id, option_id=status_q.options[1].option_id),
            AnswerSubmission(question_id=rating_q.question_id, option_id=rating_q.options[1].option_id),
            AnswerSubmission(question_id=suggestions_q.question_id, response_text=suggestion),
        ]),
    )


@pytest.mark.asyncio
async def test_report_lists_every_respondent_under_every_question(db_session, alumni_factory, survey_factory):
    first = await alumni_factory(major="History")
    second = await alumni_factory(major="Physics")
    survey = await survey_factory(title="Report", sections=_sections())

    await _answer_all(db_session, survey, first.alumni_id, "More mentoring")
    await _answer_all(db_session, survey, second.alumni_id, "Evening classes")

    report = await SurveyAggregationService(db_session).get_responses_by_survey(survey.survey_id)

    assert report.total_responses == 2
    assert [s.section_title for s in report.sections] == ["Work", "Feedback"]
    assert [q.question_text for q in report.sections[1].questions] == ["Satisfaction", "Suggestions"]
    for section in report.sections:
        for question in section.questions:
            assert [r.alumni_id for r in question.responses] == [first.alumni_id, second.alumni_id]

    rating_rows = report.sections[1].questions[0].responses
    assert {(r.option_text, r.option_value) for r in rating_rows} == {("High", 5)}
    suggestion_rows = report.sections[1].questions[1].responses
    assert [r.response_text for r in suggestion_rows] == ["More mentoring", "Evening classes"]
    assert [r.major for r in suggestion_rows] == ["History", "Physics"]


@pytest.mark.asyncio
async def test_report_yields_nulls_for_missing_answers(db_session, alumni_factory, survey_factory):
    alumni = await alumni_factory()
    survey = await survey_factory(title="Sparse", sections=_sections())

    # Answers can only be missing for rows written outside the validator
    db_session.add(FeedbackResponse(survey_id=survey.survey_id, alumni_id=alumni.alumni_id))
    await db_session.commit()

    report = await SurveyAggregationService(db_session).get_responses_by_survey(survey.survey_id)

    for section in report.sections:
        for question in section.questions:
            assert len(question.responses) == 1
            row = question.responses[0]
            assert row.alumni_id == alumni.alumni_id
            assert row.option_id is None
            assert row.option_text is None
            assert row.response_text is None


@pytest.mark.asyncio
async def test_report_for_survey_without_responses(db_session, survey_factory):
    survey = await survey_factory(title="Quiet")
    report = await SurveyAggregationService(db_session).get_responses_by_survey(survey.survey_id)
    assert report.total_responses == 0
    assert report.sections[0].questions[0].responses == []


@pytest.mark.asyncio
async def test_report_for_unknown_survey_raises_not_found(db_session):
    with pytest.raises(NotFoundError):
        await SurveyAggregationService(db_session).get_responses_by_survey(uuid.uuid4())


@pytest.mark.asyncio
async def test_respondent_sheet_overlays_answers_on_schema(db_session, alumni_factory, survey_factory):
    alumni = await alumni_factory(first_name="Grace", last_name="Hopper")
    survey = await survey_factory(title="Answer sheet", sections=_sections())
    submitted = await _answer_all(db_session, survey, alumni.alumni_id, "Keep it up")

    sheet = await SurveyAggregationService(db_session).get_responses_by_respondent(submitted.response_id)

    assert sheet.survey_id == survey.survey_id
    assert sheet.alumni.first_name == "Grace"
    assert sheet.alumni.last_name == "Hopper"
    assert [s.section_title for s in sheet.sections] == ["Work", "Feedback"]

    status_q = sheet.sections[0].questions[0]
    assert [o.option_text for o in status_q.options] == ["Employed", "Self-employed"]
    assert status_q.response.selected_option.option_text == "Self-employed"

    suggestions_q = sheet.sections[1].questions[1]
    assert suggestions_q.response.selected_option is None
    assert suggestions_q.response.response_text == "Keep it up"


@pytest.mark.asyncio
async def test_respondent_sheet_for_unknown_response_raises_not_found(db_session):
    with pytest.raises(NotFoundError) as exc_info:
        await SurveyAggregationService(db_session).get_responses_by_respondent(uuid.uuid4())
    assert exc_info.value.error == "response_not_found"


@pytest.mark.asyncio
async def test_list_all_responses_newest_first(db_session, alumni_factory, survey_factory):
    alumni = await alumni_factory(first_name="Alan", last_name="Turing")
    older = await survey_factory(title="Older listing", sections=_sections())
    newer = await survey_factory(title="Newer listing", sections=_sections())

    older_result = await _answer_all(db_session, older, alumni.alumni_id, "first")
    newer_result = await _answer_all(db_session, newer, alumni.alumni_id, "second")

    listing = await SurveyAggregationService(db_session).list_all_responses()
    ids = [item.response_id for item in listing]
    assert ids.index(newer_result.response_id) < ids.index(older_result.response_id)

    item = next(item for item in listing if item.response_id == newer_result.response_id)
    assert item.survey_title == "Newer listing"
    assert item.alumni.alumni_name == "Alan Turing"
    assert item.alumni.alumni_email == alumni.email
