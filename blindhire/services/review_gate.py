# blindhire/services/review_gate.py
"""
Recruiter side: anonymous review, interview invite and identity reveal.

Identity is released only for applications that are ``shortlisted`` and
carry an interview invite stamp.
"""
import logging
from datetime import datetime

from blindhire.errors import GateNotSatisfied, NotFound, Unauthorized, ValidationError
from blindhire.extensions import db
from blindhire.models import Application, RecruiterRoundTest
from blindhire.serializers import application_for_recruiter
from blindhire.services.job_service import load_owned_job, parse_pass_score
from blindhire.services.pipeline import DUAL_TEST
from blindhire.services.qualification import QualificationTest
from blindhire.services.questions import normalize_question_ids, validate_question_set

logger = logging.getLogger(__name__)

APPLICATION_STATUSES = ("applied", "shortlisted", "rejected")
DEFAULT_INVITE_MESSAGE = "You have been shortlisted for an interview. The recruiter will contact you soon."


class RecruiterReviewGate:
    def __init__(self, variant=DUAL_TEST, generator=None):
        self.variant = variant
        self.generator = generator
        self.work_test = QualificationTest(RecruiterRoundTest, "Recruiter work test")

    def _owned_application(self, recruiter_id, application_id):
        application = db.session.get(Application, application_id)
        if application is None:
            raise NotFound("Application not found")
        if application.recruiter_id != str(recruiter_id):
            raise Unauthorized("Not authorized to review this application")
        return application

    def list_applications(self, recruiter_id, job_id):
        job = load_owned_job(job_id, recruiter_id)
        applications = (
            Application.query
            .filter_by(job_id=job.id)
            .order_by(Application.match_score.desc(), Application.created_at.asc())
            .all()
        )
        return [application_for_recruiter(a) for a in applications]

    def shortlist_for_interview(self, recruiter_id, application_id, message=None):
        application = self._owned_application(recruiter_id, application_id)
        if application.status == "rejected":
            raise GateNotSatisfied("Rejected applications cannot be invited to interview")

        now = datetime.utcnow()
        message = (message or "").strip()
        values = {"status": "shortlisted", "updated_at": now}
        if message:
            values["interview_invite_message"] = message
        elif not application.interview_invite_message:
            values["interview_invite_message"] = DEFAULT_INVITE_MESSAGE

        updated = (
            Application.query
            .filter(Application.id == application.id, Application.status.in_(("applied", "shortlisted")))
            .update(values, synchronize_session=False)
        )
        if updated != 1:
            db.session.rollback()
            raise GateNotSatisfied("Rejected applications cannot be invited to interview")

        # the first invite stamp wins
        Application.query.filter(
            Application.id == application.id,
            Application.interview_invite_sent_at.is_(None),
        ).update({"interview_invite_sent_at": now}, synchronize_session=False)
        db.session.commit()
        db.session.refresh(application)
        logger.info(f"📨 interview invite for application {application.id} ({application.anonymous_id})")
        return application

    def reveal_identity(self, recruiter_id, application_id):
        """Read-only; repeated calls return the same snapshot."""
        application = self._owned_application(recruiter_id, application_id)
        if application.status != "shortlisted" or application.interview_invite_sent_at is None:
            raise GateNotSatisfied(
                "Identity is revealed only after the candidate is shortlisted and invited to interview"
            )
        return {
            "anonymous_id": application.anonymous_id,
            "private_profile": dict(application.private_profile or {}),
        }

    def update_status(self, recruiter_id, application_id, status):
        application = self._owned_application(recruiter_id, application_id)
        if not self.variant.manual_status_override:
            raise GateNotSatisfied(
                "Application status follows test outcomes; use the interview invite to shortlist"
            )
        status = str(status or "").strip().lower()
        if status not in APPLICATION_STATUSES:
            raise ValidationError(f"status must be one of {', '.join(APPLICATION_STATUSES)}")

        application.status = status
        db.session.commit()
        logger.info(f"application {application.id} status set to {status} by recruiter")
        return application

    def assign_work_test(self, recruiter_id, application_id, data=None):
        """
        Attach a recruiter work test to an application.

        Questions come from the request, else the job's company test, else
        the question generator. Assigning twice returns the stored round.
        """
        if not self.variant.work_test_round:
            raise GateNotSatisfied("Recruiter work tests are not part of this hiring pipeline")
        application = self._owned_application(recruiter_id, application_id)
        if application.status == "rejected":
            raise GateNotSatisfied("Cannot assign a work test to a rejected application")

        data = data or {}
        job = application.job
        job_test = job.recruiter_test or {}

        def build():
            if data.get("questions"):
                generated_by, questions = "manual", validate_question_set(data["questions"], prefix="wq")
            elif job.recruiter_test_questions:
                generated_by, questions = job_test.get("generated_by") or "manual", job.recruiter_test_questions
            else:
                generated_by, questions = self.generator.generate(job.title, job.required_skills, fallback_tag="manual")
            return {
                "questions": normalize_question_ids(questions, "wq"),
                "pass_score": parse_pass_score(data.get("pass_score"), default=int(job_test.get("pass_score", 60))),
                "generated_by": generated_by,
            }

        return self.work_test.start({"application_id": application.id}, build)
