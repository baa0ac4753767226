# blindhire/services/profile_service.py
import hashlib
import hmac
import logging
from datetime import datetime

from flask import current_app

from blindhire.errors import NotFound, ValidationError
from blindhire.extensions import db
from blindhire.models import CandidateProfile, User
from blindhire.services.anonymizer import build_preview
from blindhire.services.resume_extractor import extract_text

logger = logging.getLogger(__name__)

# identity-bearing fields; never copied into the public half
PERSONAL_FIELDS = (
    "full_name", "email", "phone", "gender", "college", "address", "bio",
    "profile_pic", "github_link", "linkedin_link", "current_role", "current_company",
)
PUBLIC_FIELDS = (
    "skills", "experience_years", "tagline", "projects", "education",
    "experience", "portfolio_link", "city",
)
PUBLIC_LIST_FIELDS = ("projects", "education", "experience")
ALLOWED_RESUME_EXTENSIONS = (".pdf", ".docx", ".txt")


def derive_candidate_public_id(user_id, secret):
    """Stable, non-reversible id shown to recruiters in place of identity."""
    digest = hmac.new(str(secret).encode("utf-8"), str(user_id).encode("utf-8"), hashlib.sha256).hexdigest()
    return f"CAND-{digest[:10].upper()}"


def ensure_candidate_public_id(user):
    """Assign the public id once; a concurrent assigner cannot overwrite it."""
    if user.candidate_public_id:
        return user.candidate_public_id

    public_id = derive_candidate_public_id(user.id, current_app.config["SECRET_KEY"])
    User.query.filter(User.id == user.id, User.candidate_public_id.is_(None)).update(
        {"candidate_public_id": public_id}, synchronize_session=False
    )
    db.session.commit()
    db.session.refresh(user)
    return user.candidate_public_id


def get_or_create_profile(user):
    profile = user.candidate_profile
    if profile is None:
        profile = CandidateProfile(user_id=user.id, personal={}, public={})
        db.session.add(profile)
        db.session.flush()
    return profile


def sanitize_personal(data):
    if not isinstance(data, dict):
        return {}
    return {key: str(data.get(key) or "").strip() for key in PERSONAL_FIELDS if key in data}


def sanitize_public(data):
    if not isinstance(data, dict):
        return {}
    cleaned = {}
    for key in PUBLIC_FIELDS:
        if key not in data:
            continue
        value = data[key]
        if key == "skills":
            value = [str(s).strip() for s in value or [] if str(s).strip()] if isinstance(value, list) else []
        elif key == "experience_years":
            try:
                value = max(0, min(60, int(float(value or 0))))
            except (TypeError, ValueError):
                raise ValidationError("experience_years must be a number")
        elif key in PUBLIC_LIST_FIELDS:
            value = [item for item in value or [] if isinstance(item, dict)] if isinstance(value, list) else []
            value = [{k: v for k, v in item.items() if k not in PERSONAL_FIELDS} for item in value]
        else:
            value = str(value or "").strip()
        cleaned[key] = value
    return cleaned


def update_profile(user, personal=None, public=None):
    profile = get_or_create_profile(user)
    if personal is not None:
        profile.personal = {**(profile.personal or {}), **sanitize_personal(personal)}
    if public is not None:
        profile.public = {**(profile.public or {}), **sanitize_public(public)}
    db.session.commit()
    logger.info(f"profile updated for user {user.id}")
    return profile


def _merge_by_key(existing, incoming, key_builder):
    merged = {}
    for item in list(existing or []) + list(incoming or []):
        key = key_builder(item)
        if key and key not in merged:
            merged[key] = item
    return list(merged.values())


def _merge_extracted(user, profile, extracted, resume_text, rewriter=None):
    existing_personal = dict(profile.personal or {})
    existing_public = dict(profile.public or {})
    extracted_personal = sanitize_personal(extracted.get("personal"))
    extracted_public = sanitize_public(extracted.get("public"))

    merged_skills = []
    for skill in list(existing_public.get("skills") or []) + list(extracted_public.get("skills") or []):
        if skill.lower() not in [s.lower() for s in merged_skills]:
            merged_skills.append(skill)

    next_personal = dict(existing_personal)
    for key in PERSONAL_FIELDS:
        next_personal[key] = extracted_personal.get(key) or existing_personal.get(key) or ""
    next_personal["full_name"] = next_personal["full_name"] or user.name
    next_personal["email"] = next_personal["email"] or user.email

    next_public = dict(existing_public)
    next_public.update({
        "skills": merged_skills,
        "experience_years": extracted_public.get("experience_years") or existing_public.get("experience_years") or 0,
        "tagline": extracted_public.get("tagline") or existing_public.get("tagline") or "",
        "projects": _merge_by_key(
            existing_public.get("projects"), extracted_public.get("projects"),
            lambda p: f"{str(p.get('title') or '').lower()}|{str(p.get('link') or '').lower()}",
        ),
        "education": _merge_by_key(
            existing_public.get("education"), extracted_public.get("education"),
            lambda e: f"{str(e.get('school') or '').lower()}|{str(e.get('degree') or '').lower()}",
        ),
        "experience": _merge_by_key(
            existing_public.get("experience"), extracted_public.get("experience"),
            lambda x: f"{str(x.get('company') or '').lower()}|{str(x.get('role') or '').lower()}",
        ),
        "portfolio_link": extracted_public.get("portfolio_link") or existing_public.get("portfolio_link") or "",
        "city": extracted_public.get("city") or existing_public.get("city") or "",
    })

    preview = build_preview(
        resume_text,
        personal=next_personal,
        extracted=extracted,
        public_data=next_public,
        rewriter=rewriter,
    )

    updated_fields = [
        key for key in PERSONAL_FIELDS
        if str(existing_personal.get(key) or "").strip() != str(next_personal.get(key) or "").strip()
    ]
    for key in ("skills", "projects", "education", "experience"):
        if len(next_public.get(key) or []) > len(existing_public.get(key) or []):
            updated_fields.append(key)
    for key in ("experience_years", "tagline", "portfolio_link", "city"):
        if str(existing_public.get(key) or "") != str(next_public.get(key) or ""):
            updated_fields.append(key)

    return next_personal, next_public, preview, updated_fields


def ingest_resume(user, file_bytes, filename, mimetype, extractor):
    """Extract, merge and anonymize an uploaded resume; returns (profile, updated_fields, extracted)."""
    if not file_bytes:
        raise ValidationError("Resume file is required")
    lower_name = (filename or "").lower()
    allowed = (
        "pdf" in (mimetype or "")
        or "text/plain" in (mimetype or "")
        or "wordprocessingml" in (mimetype or "")
        or lower_name.endswith(ALLOWED_RESUME_EXTENSIONS)
    )
    if not allowed:
        raise ValidationError("Only PDF, DOCX, or TXT resumes are allowed")

    text = extract_text(file_bytes, filename, mimetype)
    extracted = extractor.extract_details(text)
    profile = get_or_create_profile(user)

    next_personal, next_public, preview, updated_fields = _merge_extracted(
        user, profile, extracted, text, rewriter=extractor.bias_free_rewrite
    )
    next_personal["resume_original"] = {
        "file_name": filename,
        "mime_type": mimetype,
        "size": len(file_bytes),
        "uploaded_at": datetime.utcnow().isoformat(),
        "text": text,
    }

    profile.personal = next_personal
    profile.public = next_public
    profile.resume_anonymized_text = preview
    profile.resume_anonymized_at = datetime.utcnow()
    db.session.commit()
    logger.info(f"resume ingested for user {user.id}: {len(updated_fields)} field(s) filled")
    return profile, updated_fields, extracted


def auto_fill_from_resume(user, extractor):
    profile = user.candidate_profile
    resume = (profile.personal or {}).get("resume_original") if profile else None
    if not resume:
        raise NotFound("No uploaded resume found. Please upload a resume first.")
    text = resume.get("text") or ""
    if not text:
        raise ValidationError("No resume text found. Please try re-uploading your resume.")

    extracted = extractor.extract_details(text)
    next_personal, next_public, preview, updated_fields = _merge_extracted(
        user, profile, extracted, text, rewriter=extractor.bias_free_rewrite
    )
    next_personal["resume_original"] = resume

    profile.personal = next_personal
    profile.public = next_public
    profile.resume_anonymized_text = preview
    profile.resume_anonymized_at = datetime.utcnow()
    db.session.commit()
    return profile, updated_fields, extracted


def profile_to_dict(profile):
    if profile is None:
        return {"personal": {}, "public": {}, "resume_anonymized": None}
    personal = dict(profile.personal or {})
    resume = personal.pop("resume_original", None)
    if resume:
        personal["resume_original"] = {k: v for k, v in resume.items() if k != "text"}
    return {
        "personal": personal,
        "public": dict(profile.public or {}),
        "resume_anonymized": {
            "text": profile.resume_anonymized_text or "",
            "updated_at": profile.resume_anonymized_at.isoformat() if profile.resume_anonymized_at else None,
        },
    }
