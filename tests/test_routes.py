"""End-to-end checks through the HTTP surface."""
import io
from datetime import datetime, timedelta

from blindhire.models import EligibilityTest

from conftest import auth_headers, make_job


def _answer_all(questions_with_answers):
    return [{"question_id": q["question_id"], "answer": q["correct_answer"]} for q in questions_with_answers]


def test_register_and_login(client):
    response = client.post("/api/auth/register", json={
        "name": "New Candidate", "email": "New@Example.com", "password": "secret123", "role": "candidate",
    })
    assert response.status_code == 201
    body = response.get_json()
    assert body["access_token"]
    assert body["user"]["candidate_public_id"].startswith("CAND-")

    response = client.post("/api/auth/login", json={"email": "new@example.com", "password": "secret123"})
    assert response.status_code == 200
    assert response.get_json()["user"]["role"] == "candidate"

    response = client.post("/api/auth/login", json={"email": "new@example.com", "password": "wrong"})
    assert response.status_code == 401
    assert response.get_json()["error"] == "Unauthorized"


def test_register_rejects_unknown_role_and_duplicates(client):
    payload = {"name": "A", "email": "a@example.com", "password": "secret123", "role": "admin"}
    assert client.post("/api/auth/register", json=payload).status_code == 400

    payload["role"] = "recruiter"
    assert client.post("/api/auth/register", json=payload).status_code == 201
    response = client.post("/api/auth/register", json=payload)
    assert response.status_code == 400
    assert response.get_json() == {"error": "ValidationError", "message": "Email already registered"}


def test_role_enforcement(client, candidate, recruiter):
    assert client.post("/api/jobs", json={"title": "x", "description": "y"}).status_code == 401
    response = client.post("/api/jobs", json={"title": "x", "description": "y"}, headers=auth_headers(candidate))
    assert response.status_code == 403
    assert client.get("/api/recruiter/jobs/any/applications", headers=auth_headers(candidate)).status_code == 403
    assert client.get("/api/candidate/applications", headers=auth_headers(recruiter)).status_code == 403


def test_job_create_without_skills_is_400(client, recruiter):
    response = client.post("/api/jobs", headers=auth_headers(recruiter), json={"title": "Dev", "description": "Build"})
    assert response.status_code == 400
    assert response.get_json() == {"error": "ValidationError", "message": "required_skills is required"}
    assert client.get("/api/jobs").get_json() == []


def test_job_create_list_and_detail(client, recruiter):
    response = client.post("/api/jobs", headers=auth_headers(recruiter), json={
        "title": "Platform Engineer",
        "description": "Kubernetes and Go",
        "required_skills": ["go", "kubernetes"],
        "recruiter_test": {
            "questions": [{"question": "k8s?", "options": ["yes", "no"], "correct_answer": "yes"}],
        },
    })
    assert response.status_code == 201
    job_id = response.get_json()["id"]

    listed = client.get("/api/jobs").get_json()
    assert [j["id"] for j in listed] == [job_id]
    assert listed[0]["has_company_test"] is True

    detail = client.get(f"/api/jobs/{job_id}")
    assert detail.status_code == 200
    assert "correct_answer" not in detail.get_data(as_text=True)

    mine = client.get("/api/jobs/mine", headers=auth_headers(recruiter)).get_json()
    assert mine[0]["application_count"] == 0

    assert client.get("/api/jobs/missing").status_code == 404


def test_full_dual_test_flow(client, app, recruiter, candidate):
    job = make_job(recruiter)
    cand, rec = auth_headers(candidate), auth_headers(recruiter)

    started = client.post(f"/api/candidate/eligibility/{job.id}/start", headers=cand)
    assert started.status_code == 200
    body = started.get_json()
    assert body["status"] == "pending"
    assert all("correct_answer" not in q for q in body["questions"])

    stored = EligibilityTest.query.filter_by(candidate_id=candidate.id, job_id=job.id).one()
    submitted = client.post(
        f"/api/candidate/eligibility/{job.id}/submit", headers=cand, json={"answers": _answer_all(stored.questions)}
    )
    assert submitted.get_json()["status"] == "passed"

    company = client.get(f"/api/candidate/company-test/{job.id}", headers=cand).get_json()
    assert "correct_answer" not in str(company)
    passed = client.post(
        f"/api/candidate/company-test/{job.id}/submit", headers=cand,
        json={"answers": _answer_all(job.recruiter_test["questions"])},
    ).get_json()
    assert passed["status"] == "passed"
    application_id = passed["application_id"]

    mine = client.get("/api/candidate/applications", headers=cand).get_json()
    assert mine[0]["id"] == application_id
    assert mine[0]["interview_invite"] is None

    listed = client.get(f"/api/recruiter/jobs/{job.id}/applications", headers=rec)
    assert "private_profile" not in listed.get_data(as_text=True)
    assert candidate.email not in listed.get_data(as_text=True)

    assert client.get(f"/api/recruiter/applications/{application_id}/reveal", headers=rec).status_code == 403
    assert client.put(
        f"/api/recruiter/applications/{application_id}/status", headers=rec, json={"status": "shortlisted"}
    ).status_code == 403

    shortlisted = client.put(
        f"/api/recruiter/applications/{application_id}/shortlist", headers=rec, json={"message": "Tuesday 10am"}
    )
    assert shortlisted.get_json()["interview_invite"]["message"] == "Tuesday 10am"

    revealed = client.get(f"/api/recruiter/applications/{application_id}/reveal", headers=rec).get_json()
    assert revealed["private_profile"]["email"] == candidate.email

    again = client.post(f"/api/jobs/{job.id}/apply", headers=cand)
    assert again.status_code == 400
    assert again.get_json()["error"] == "Duplicate"


def test_expired_job_returns_410(client, recruiter, candidate):
    job = make_job(recruiter, deadline_at=datetime.utcnow() - timedelta(hours=1))
    response = client.post(f"/api/candidate/eligibility/{job.id}/start", headers=auth_headers(candidate))
    assert response.status_code == 410
    assert response.get_json()["error"] == "Expired"
    assert client.post("/api/jobs/missing/apply", headers=auth_headers(candidate)).status_code == 404


def test_submit_without_answers_is_400(client, recruiter, candidate):
    job = make_job(recruiter)
    headers = auth_headers(candidate)
    client.post(f"/api/candidate/eligibility/{job.id}/start", headers=headers)
    response = client.post(f"/api/candidate/eligibility/{job.id}/submit", headers=headers, json={"answers": []})
    assert response.status_code == 400
    assert response.get_json()["message"] == "Answers are required"


def test_resume_upload_and_suitable_jobs(client, recruiter, candidate):
    make_job(recruiter, required_skills=["python", "docker"])
    headers = auth_headers(candidate)
    resume = (
        b"Rina Candidate\nrina@example.com\n"
        b"Engineer with 3 years of Python and Docker work on internal platforms, "
        b"deployment tooling, monitoring dashboards and data services for product teams."
    )

    response = client.post(
        "/api/candidate/profile/resume", headers=headers,
        data={"resume": (io.BytesIO(resume), "resume.txt")}, content_type="multipart/form-data",
    )
    assert response.status_code == 200
    body = response.get_json()
    assert "Rina Candidate" not in body["resume_anonymized"]["text"]

    suited = client.get("/api/candidate/jobs/suitable", headers=headers).get_json()
    assert suited[0]["match_score"] == 100


def test_generate_and_set_company_test(client, recruiter):
    job = make_job(recruiter, recruiter_test=False)
    headers = auth_headers(recruiter)

    draft = client.post(
        "/api/recruiter/jobs/test/generate", headers=headers, json={"title": "Data Engineer", "required_skills": ["sql"]}
    ).get_json()
    assert len(draft["questions"]) >= 3

    response = client.put(f"/api/recruiter/jobs/{job.id}/test", headers=headers, json=draft)
    assert response.status_code == 200
    assert client.get(f"/api/jobs/{job.id}").get_json()["has_company_test"] is True


def test_expire_endpoint(client, recruiter):
    job = make_job(recruiter)
    headers = auth_headers(recruiter)
    assert client.put(f"/api/jobs/{job.id}/expire", headers=headers).get_json()["status"] == "expired"
    assert client.get("/api/jobs").get_json() == []
