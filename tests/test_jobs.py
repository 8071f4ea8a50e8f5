from datetime import datetime
from unittest.mock import AsyncMock, patch

import pytest
from fastapi.testclient import TestClient

from resume_hub.helpers.extraction import parse_resume

CANDIDATE = {"X-User-Id": "user-a"}
RECRUITER = {"X-User-Id": "rec-1", "X-User-Role": "recruiter"}


@pytest.fixture
def test_app():
    from fastapi import FastAPI
    from resume_hub.routers import jobs
    from resume_hub.middleware.error_handlers import resume_hub_error_handler
    from resume_hub.utils.exceptions import ResumeHubError

    app = FastAPI()
    app.include_router(jobs.router, prefix="/jobs")
    app.add_exception_handler(ResumeHubError, resume_hub_error_handler)
    return app


@pytest.fixture
def client(test_app):
    return TestClient(test_app)


def stored_job(job_id="job-1"):
    return {
        "job_id": job_id,
        "title": "Full Stack Engineer",
        "description": "Build backend services and web frontends",
        "requirements": ["5 years experience"],
        "skills": ["Python", "React"],
        "created_by": "rec-1",
        "embedding": [],
        "created_at": datetime(2024, 1, 1),
        "updated_at": datetime(2024, 1, 1),
    }


def stored_resume(resume_id, user_id, text):
    return {
        "resume_id": resume_id,
        "user_id": user_id,
        "filename": f"{resume_id}.txt",
        "original_name": f"{resume_id}.txt",
        "content": text,
        "parsed_data": parse_resume(text).model_dump(),
        "embedding": [],
        "uploaded_at": datetime(2024, 1, 1),
    }


RESUMES = [
    stored_resume(
        "a", "user-a",
        "Alice Smith\nalice@example.com\n5 years experience in backend roles.\nSkills: Python, Django",
    ),
    stored_resume(
        "b", "user-b",
        "Bob Jones\nbob@example.com\nShipped React dashboards.\nSkills: React, Node",
    ),
]


class TestJobCrud:
    """Create, list, read and update jobs"""

    @patch('resume_hub.routers.jobs.jobs_coll')
    def test_create_job(self, mock_jobs_coll, client):
        mock_jobs_coll.insert_one = AsyncMock()

        response = client.post("/jobs/", json={
            "title": "Backend Engineer",
            "description": "Python services",
            "skills": ["Python"],
            "requirements": ["3 years experience"],
        }, headers=RECRUITER)

        assert response.status_code == 201
        data = response.json()
        assert data["title"] == "Backend Engineer"
        assert data["skills"] == ["Python"]
        stored = mock_jobs_coll.insert_one.call_args[0][0]
        assert stored["created_by"] == "rec-1"
        assert len(stored["embedding"]) == 100

    def test_candidate_cannot_create(self, client):
        response = client.post("/jobs/", json={"title": "x", "description": "y"}, headers=CANDIDATE)
        assert response.status_code == 403

    def test_create_validation(self, client):
        response = client.post("/jobs/", json={"title": ""}, headers=RECRUITER)
        assert response.status_code == 422

    def test_unknown_role(self, client):
        response = client.get("/jobs/", headers={"X-User-Id": "u", "X-User-Role": "wizard"})
        assert response.status_code == 403

    @patch('resume_hub.routers.jobs.jobs_coll')
    def test_list_jobs(self, mock_jobs_coll, client):
        mock_jobs_coll.count_documents = AsyncMock(return_value=1)
        chain = mock_jobs_coll.find.return_value.sort.return_value.skip.return_value.limit.return_value
        chain.to_list = AsyncMock(return_value=[stored_job()])

        response = client.get("/jobs/", headers=CANDIDATE)

        assert response.status_code == 200
        data = response.json()
        assert data["total"] == 1
        assert data["items"][0]["id"] == "job-1"

    @patch('resume_hub.routers.jobs.jobs_coll')
    def test_get_job_not_found(self, mock_jobs_coll, client):
        mock_jobs_coll.find_one = AsyncMock(return_value=None)

        response = client.get("/jobs/nope", headers=CANDIDATE)

        assert response.status_code == 404
        assert response.json()["error"]["error_code"] == "NOT_FOUND"

    @patch('resume_hub.routers.jobs.jobs_coll')
    def test_update_recomputes_embedding(self, mock_jobs_coll, client):
        mock_jobs_coll.find_one = AsyncMock(return_value=stored_job())
        mock_jobs_coll.update_one = AsyncMock()

        response = client.put("/jobs/job-1", json={"skills": ["Go"]}, headers=RECRUITER)

        assert response.status_code == 200
        assert response.json()["skills"] == ["Go"]
        filter_, update = mock_jobs_coll.update_one.call_args[0]
        assert filter_ == {"job_id": "job-1"}
        assert update["$set"]["skills"] == ["Go"]
        assert len(update["$set"]["embedding"]) == 100

    @patch('resume_hub.routers.jobs.jobs_coll')
    def test_empty_update_is_noop(self, mock_jobs_coll, client):
        mock_jobs_coll.find_one = AsyncMock(return_value=stored_job())
        mock_jobs_coll.update_one = AsyncMock()

        response = client.put("/jobs/job-1", json={}, headers=RECRUITER)

        assert response.status_code == 200
        mock_jobs_coll.update_one.assert_not_called()


class TestMatchJob:
    """Ranking stored resumes against a job"""

    @patch('resume_hub.routers.jobs.resumes_coll')
    @patch('resume_hub.routers.jobs.jobs_coll')
    def test_match_breakdown(self, mock_jobs_coll, mock_resumes_coll, client):
        mock_jobs_coll.find_one = AsyncMock(return_value=stored_job())
        mock_resumes_coll.find.return_value.to_list = AsyncMock(return_value=RESUMES)

        response = client.post("/jobs/job-1/match", json={"top_n": 5}, headers=RECRUITER)

        assert response.status_code == 200
        data = response.json()
        assert data["job_title"] == "Full Stack Engineer"
        matches = {m["candidate_id"]: m for m in data["matches"]}
        assert matches["a"]["matched_skills"] == ["Python"]
        assert matches["a"]["missing_skills"] == ["React"]
        assert matches["a"]["matched_requirements"] == ["5 years experience"]
        assert matches["a"]["email"] == "alice@example.com"
        assert matches["b"]["matched_skills"] == ["React"]
        assert matches["b"]["missing_requirements"] == ["5 years experience"]

    @patch('resume_hub.routers.jobs.resumes_coll')
    @patch('resume_hub.routers.jobs.jobs_coll')
    def test_candidate_sees_only_own_email(self, mock_jobs_coll, mock_resumes_coll, client):
        mock_jobs_coll.find_one = AsyncMock(return_value=stored_job())
        mock_resumes_coll.find.return_value.to_list = AsyncMock(return_value=RESUMES)

        response = client.post("/jobs/job-1/match", headers=CANDIDATE)

        assert response.status_code == 200
        matches = {m["candidate_id"]: m for m in response.json()["matches"]}
        assert matches["a"]["email"] == "alice@example.com"
        assert matches["b"]["email"] is None

    @patch('resume_hub.routers.jobs.resumes_coll')
    @patch('resume_hub.routers.jobs.jobs_coll')
    def test_no_resumes(self, mock_jobs_coll, mock_resumes_coll, client):
        mock_jobs_coll.find_one = AsyncMock(return_value=stored_job())
        mock_resumes_coll.find.return_value.to_list = AsyncMock(return_value=[])

        response = client.post("/jobs/job-1/match", headers=RECRUITER)

        assert response.status_code == 200
        assert response.json()["matches"] == []

    @patch('resume_hub.routers.jobs.resumes_coll')
    @patch('resume_hub.routers.jobs.jobs_coll')
    def test_evidence_hides_contact_details_from_other_candidates(self, mock_jobs_coll, mock_resumes_coll, client):
        # no sentence punctuation, so the header lands in the same evidence sentence as the skill
        header_resume = stored_resume(
            "j", "user-j",
            "Jane Doe\njane@example.com\n555-123-4567\nSkills: Python, Docker\nBuilt Docker pipelines for Python services.",
        )
        mock_jobs_coll.find_one = AsyncMock(return_value=stored_job())
        mock_resumes_coll.find.return_value.to_list = AsyncMock(return_value=[header_resume])

        response = client.post("/jobs/job-1/match", headers=CANDIDATE)

        assert response.status_code == 200
        match = response.json()["matches"][0]
        assert match["email"] is None
        assert match["evidence"]
        for sentence in match["evidence"]:
            assert "jane@example.com" not in sentence
            assert "555-123-4567" not in sentence
        assert "[redacted]" in match["evidence"][0]

        response = client.post("/jobs/job-1/match", headers=RECRUITER)
        assert "jane@example.com" in response.json()["matches"][0]["evidence"][0]
