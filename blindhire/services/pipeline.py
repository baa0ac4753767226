# blindhire/services/pipeline.py
"""
Candidate side of the admission pipeline.

Canonical ``dual_test`` flow: eligibility test -> company test -> application
(created automatically on the company pass). The earlier ``single_gate`` flow
is kept as a tagged variant: eligibility only, then apply, with an optional
post-application recruiter work test deciding shortlist or rejection.
"""
import logging
from collections import namedtuple

from sqlalchemy.exc import IntegrityError

from blindhire.errors import Duplicate, GateNotSatisfied, NotFound, ValidationError
from blindhire.extensions import db
from blindhire.models import Application, CompanyRound, EligibilityTest, RecruiterRoundTest
from blindhire.services.job_service import load_open_job
from blindhire.services.match_scorer import score_skills
from blindhire.services.profile_service import ensure_candidate_public_id
from blindhire.services.qualification import QualificationTest
from blindhire.services.questions import normalize_question_ids

logger = logging.getLogger(__name__)

PipelineVariant = namedtuple(
    "PipelineVariant",
    ["name", "requires_company_round", "manual_status_override", "work_test_round"],
)

DUAL_TEST = PipelineVariant("dual_test", True, False, False)
SINGLE_GATE = PipelineVariant("single_gate", False, True, True)
VARIANTS = {variant.name: variant for variant in (DUAL_TEST, SINGLE_GATE)}

DISPLAY_FIELDS = ("skills", "projects", "education", "experience")


def variant_from_config(config):
    name = (config.get("PIPELINE_VARIANT") or DUAL_TEST.name).strip().lower()
    if name not in VARIANTS:
        raise ValueError(f"Unknown PIPELINE_VARIANT '{name}', expected one of {sorted(VARIANTS)}")
    return VARIANTS[name]


def build_display_profile(profile):
    public = dict((profile.public if profile else None) or {})
    display = {key: list(public.get(key) or []) for key in DISPLAY_FIELDS}
    display.update({
        "experience_years": public.get("experience_years") or 0,
        "portfolio_link": public.get("portfolio_link") or "",
        "city": public.get("city") or "",
        "tagline": public.get("tagline") or "",
        "resume_anonymized_text": (profile.resume_anonymized_text if profile else "") or "",
    })
    return display


def build_private_profile(user, profile):
    personal = dict((profile.personal if profile else None) or {})
    resume = personal.pop("resume_original", None)
    personal["full_name"] = personal.get("full_name") or user.name
    personal["email"] = personal.get("email") or user.email
    if resume:
        personal["resume_file_name"] = resume.get("file_name") or ""
    return personal


class ApplicationPipeline:
    def __init__(self, variant=DUAL_TEST, generator=None, pass_score=60):
        self.variant = variant
        self.generator = generator
        self.pass_score = pass_score
        self.eligibility = QualificationTest(EligibilityTest, "Eligibility test")
        self.company = QualificationTest(CompanyRound, "Company test")
        self.work_test = QualificationTest(RecruiterRoundTest, "Recruiter work test")

    # ----- eligibility -----

    def start_eligibility(self, candidate, job_id):
        job = load_open_job(job_id)

        def build():
            generated_by, questions = self.generator.generate(job.title, job.required_skills)
            return {
                "questions": normalize_question_ids(questions, "q"),
                "pass_score": self.pass_score,
                "generated_by": generated_by,
                "required_skills_snapshot": list(job.required_skills or []),
            }

        return self.eligibility.start({"candidate_id": candidate.id, "job_id": job.id}, build)

    def eligibility_status(self, candidate, job_id):
        row = self.eligibility.find(candidate_id=candidate.id, job_id=job_id)
        if row is None:
            raise NotFound("Eligibility test not started")
        return row

    def submit_eligibility(self, candidate, job_id, answers):
        job = load_open_job(job_id)
        row = self.eligibility.find(candidate_id=candidate.id, job_id=job.id)
        return self.eligibility.submit(row, answers)

    def _passed_eligibility(self, candidate, job, action):
        row = self.eligibility.find(candidate_id=candidate.id, job_id=job.id)
        if row is None or row.status != "passed":
            raise GateNotSatisfied(f"Pass the eligibility test before {action}")
        return row

    # ----- company test -----

    def _require_company_round(self):
        if not self.variant.requires_company_round:
            raise GateNotSatisfied("The company test is not part of this hiring pipeline")

    def open_company_test(self, candidate, job_id):
        self._require_company_round()
        job = load_open_job(job_id)
        eligibility = self._passed_eligibility(candidate, job, "attempting the company test")

        test = job.recruiter_test or {}
        if eligibility.company_round is None and not job.recruiter_test_questions:
            raise ValidationError("Company test is not configured for this job")

        def build():
            return {
                "questions": normalize_question_ids(job.recruiter_test_questions, "cq"),
                "pass_score": int(test.get("pass_score", 60)),
                "generated_by": test.get("generated_by") or "manual",
            }

        return self.company.start({"eligibility_test_id": eligibility.id}, build)

    def submit_company_test(self, candidate, job_id, answers):
        """Grade the company round; a pass creates the application in the same transaction."""
        self._require_company_round()
        job = load_open_job(job_id)
        eligibility = self._passed_eligibility(candidate, job, "attempting the company test")
        # assigned up front so its commit never splits the grading transaction
        ensure_candidate_public_id(candidate)

        result = self.company.submit(eligibility.company_round, answers, commit=False)
        application = None
        if result.passed:
            application = self._find_application(candidate, job)
            if application is None:
                application = self.create_application_record(job, candidate, commit=False)
        db.session.commit()

        if result.passed:
            logger.info(f"✅ company test passed, candidate {candidate.id} shared with recruiter for job {job.id}")
        else:
            logger.info(f"company test failed for candidate {candidate.id} on job {job.id}; no application")
        return result, application

    # ----- apply -----

    def _find_application(self, candidate, job):
        return Application.query.filter_by(job_id=job.id, candidate_id=candidate.id).first()

    def apply(self, candidate, job_id):
        job = load_open_job(job_id)
        if self._find_application(candidate, job) is not None:
            raise Duplicate("Already applied for this job")

        eligibility = self._passed_eligibility(candidate, job, "applying")
        if self.variant.requires_company_round:
            company_round = eligibility.company_round
            if company_round is None or company_round.status != "passed":
                raise GateNotSatisfied("Pass the company test before your profile is shared with the recruiter")

        return self.create_application_record(job, candidate)

    def create_application_record(self, job, candidate, commit=True):
        public_id = ensure_candidate_public_id(candidate)
        profile = candidate.candidate_profile
        candidate_skills = ((profile.public if profile else None) or {}).get("skills") or []
        match = score_skills(job.required_skills, candidate_skills)

        application = Application(
            job_id=job.id,
            recruiter_id=job.recruiter_id,
            candidate_id=candidate.id,
            anonymous_id=public_id,
            match_score=match.score,
            matched_skills=match.matched,
            missing_skills=match.missing,
            status="applied",
            display_profile=build_display_profile(profile),
            private_profile=build_private_profile(candidate, profile),
        )
        db.session.add(application)
        try:
            db.session.flush()
            if commit:
                db.session.commit()
        except IntegrityError:
            db.session.rollback()
            raise Duplicate("Already applied for this job")

        logger.info(f"application {application.id} created for {public_id} on job {job.id} (match {match.score}%)")
        return application

    def my_applications(self, candidate):
        return (
            Application.query
            .filter_by(candidate_id=candidate.id)
            .order_by(Application.created_at.desc())
            .all()
        )

    # ----- recruiter work test (single_gate) -----

    def _own_application(self, candidate, application_id):
        application = db.session.get(Application, application_id)
        if application is None or application.candidate_id != candidate.id:
            raise NotFound("Application not found")
        return application

    def get_work_test(self, candidate, application_id):
        application = self._own_application(candidate, application_id)
        if application.recruiter_round_test is None:
            raise NotFound("Recruiter work test is not assigned yet")
        return application, application.recruiter_round_test

    def submit_work_test(self, candidate, application_id, answers):
        """Pass shortlists the application, fail rejects it; one attempt only."""
        application = self._own_application(candidate, application_id)
        if application.recruiter_round_test is None:
            raise ValidationError("Recruiter work test is not assigned yet")

        result = self.work_test.submit(application.recruiter_round_test, answers, commit=False)
        application.status = "shortlisted" if result.passed else "rejected"
        db.session.commit()
        logger.info(f"work test for application {application.id}: {result.status} -> {application.status}")
        return result, application
