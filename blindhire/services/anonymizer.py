# blindhire/services/anonymizer.py
"""
Identity-free rendering of a candidate's resume for recruiter consumption.

Two tiers: regex redaction of the raw resume text, then a summary synthesized
from public-safe profile fields when the redacted text is not usable.
An optional AI ``rewriter`` is consulted first; its failures only cost richness.
"""
import logging
import re
from typing import Callable, Optional

logger = logging.getLogger(__name__)

REDACTED = "[REDACTED]"
REDACTED_EMAIL = "[REDACTED_EMAIL]"
REDACTED_PHONE = "[REDACTED_PHONE]"
WITHHELD_NOTICE = "Identity-protected details are hidden until shortlist."

EMAIL_PATTERN = re.compile(r"[A-Z0-9._%+-]+@[A-Z0-9.-]+\.[A-Z]{2,}", re.IGNORECASE)
PHONE_PATTERN = re.compile(r"\+?\d[\d\s\-()]{8,}\d")
IDENTITY_LINE_PATTERN = re.compile(r"(gender|photo|profile picture)", re.IGNORECASE)

# personal fields whose literal values are scrubbed from the text
IDENTITY_FIELDS = ("full_name", "gender", "college", "address", "github_link", "linkedin_link")

MIN_USABLE_LENGTH = 120
MIN_PRINTABLE_RATIO = 0.9


def sanitize_readable_text(text: str) -> str:
    text = re.sub(r"[^\x09\x0A\x0D\x20-\x7E]", " ", text or "")
    text = re.sub(r"\n{3,}", "\n\n", text)
    text = re.sub(r"[ \t]{2,}", " ", text)
    return text.strip()


def is_readable_text(text: str) -> bool:
    if not text:
        return False
    printable = len(re.findall(r"[\x20-\x7E\n\r\t]", text))
    return printable / len(text) > MIN_PRINTABLE_RATIO


def redact_resume_text(text: str, personal: Optional[dict] = None) -> str:
    cleaned = text or ""
    personal = personal or {}

    for field in IDENTITY_FIELDS:
        value = str(personal.get(field) or "").strip()
        if not value:
            continue
        pattern = re.compile(r"(?<!\w)" + re.escape(value) + r"(?!\w)", re.IGNORECASE)
        cleaned = pattern.sub(REDACTED, cleaned)

    cleaned = EMAIL_PATTERN.sub(REDACTED_EMAIL, cleaned)
    cleaned = PHONE_PATTERN.sub(REDACTED_PHONE, cleaned)

    lines = [line for line in re.split(r"\r?\n", cleaned) if not IDENTITY_LINE_PATTERN.search(line)]
    return "\n".join(lines)


def synthesize_summary(public_data: Optional[dict] = None, extracted: Optional[dict] = None) -> str:
    public_data = public_data or {}
    extracted_public = (extracted or {}).get("public") or {}

    skills = public_data.get("skills")
    if not isinstance(skills, list):
        skills = extracted_public.get("skills") or []
    experience_years = public_data.get("experience_years") or extracted_public.get("experience_years") or 0
    tagline = public_data.get("tagline") or ""
    city = public_data.get("city") or ""

    lines = [
        "Bias-Free Candidate Profile",
        "",
        f"Tagline: {tagline}" if tagline else "",
        f"Experience: {experience_years} years" if experience_years else "",
        f"Location: {city}" if city else "",
        f"Skills: {', '.join(str(s) for s in skills)}" if skills else "",
        "",
        WITHHELD_NOTICE,
    ]
    return sanitize_readable_text("\n".join(line for line in lines if line))


def build_preview(
    raw_text: str,
    personal: Optional[dict] = None,
    extracted: Optional[dict] = None,
    public_data: Optional[dict] = None,
    rewriter: Optional[Callable[[str], Optional[str]]] = None,
) -> str:
    """Always returns an anonymized string; never raises."""
    if rewriter and raw_text:
        try:
            rewritten = rewriter(raw_text)
            if rewritten:
                # the rewrite still goes through redaction in case the model kept identifiers
                candidate_text = sanitize_readable_text(redact_resume_text(rewritten, personal))
                if candidate_text:
                    logger.info("bias-free preview produced by AI rewriter")
                    return candidate_text
        except Exception as e:
            logger.warning(f"⚠️ AI rewriter failed, using local redaction: {e}")

    try:
        anonymized = sanitize_readable_text(redact_resume_text(raw_text, personal))
        if len(anonymized) > MIN_USABLE_LENGTH and is_readable_text(anonymized):
            return anonymized
    except Exception as e:
        logger.warning(f"⚠️ Redaction failed, falling back to structured summary: {e}")

    try:
        return synthesize_summary(public_data, extracted)
    except Exception as e:
        logger.error(f"❌ Structured summary failed: {e}")
        return f"Bias-Free Candidate Profile\n\n{WITHHELD_NOTICE}"
