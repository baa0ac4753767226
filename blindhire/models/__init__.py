from .user import User
from .candidate_profile import CandidateProfile
from .job import Job
from .eligibility_test import EligibilityTest, CompanyRound
from .application import Application, RecruiterRoundTest

__all__ = [
    "User",
    "CandidateProfile",
    "Job",
    "EligibilityTest",
    "CompanyRound",
    "Application",
    "RecruiterRoundTest",
]
