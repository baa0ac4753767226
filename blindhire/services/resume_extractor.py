import io
import json
import logging
import re

import fitz  #pyMuPDF
import docx

logger = logging.getLogger(__name__)

KNOWN_SKILLS = [
    'javascript', 'typescript', 'react', 'node', 'express', 'mongodb', 'sql',
    'python', 'java', 'docker', 'kubernetes', 'aws', 'html', 'css', 'tailwind',
    'git', 'flask', 'django', 'postgresql', 'mysql',
]

EMPTY_PERSONAL = {
    "full_name": "", "email": "", "phone": "", "gender": "", "college": "",
    "address": "", "bio": "", "github_link": "", "linkedin_link": "",
    "current_role": "", "current_company": "",
}

EMPTY_PUBLIC = {
    "skills": [], "experience_years": 0, "tagline": "", "projects": [],
    "education": [], "experience": [], "portfolio_link": "", "city": "",
}

EXTRACTION_PROMPT = """Extract candidate details from this resume text.
Return ONLY valid JSON with this exact shape:
{schema}
Rules:
- Do not include markdown or backticks.
- Keep unknown fields as empty string, empty list, or 0.
- skills must be array of short strings.
- experience_years must be a number.
- Keep arrays concise and only include real entries from resume.
Resume:
{text}
"""

BIAS_FREE_PROMPT = """You are an expert at removing bias from resumes for fair hiring.
Rewrite the following resume text to be COMPLETELY ANONYMOUS and BIAS-FREE.
Rules:
1. Remove all names, email addresses, phone numbers, and social media links.
2. Remove gender, age, ethnicity, religion, or any personal identity markers.
3. Remove specific college names (replace with "Reputed University" or similar).
4. Keep all professional experience, skills, and achievements intact, but anonymized.
5. Focus on WHAT the person did, not WHO they are.
6. Return only the anonymized text.

Resume:
{text}
"""


def extract_text(file_bytes, filename="", mimetype=""):
    """
    Extract plain text from a PDF (PyMuPDF), DOCX or TXT upload.
    Returns "" when the file cannot be read.
    """
    name = (filename or "").lower()
    mimetype = mimetype or ""
    try:
        if "pdf" in mimetype or name.endswith('.pdf'):
            doc = fitz.open(stream=file_bytes, filetype="pdf")
            all_blocks = []
            for page in doc:
                all_blocks.extend(page.get_text("blocks"))
            doc.close()

            # reading order: top to bottom, then left to right
            all_blocks.sort(key=lambda b: (b[1], b[0]))
            return "\n".join([block[4] for block in all_blocks])

        if "wordprocessingml" in mimetype or name.endswith('.docx'):
            doc = docx.Document(io.BytesIO(file_bytes))
            return '\n'.join(para.text for para in doc.paragraphs)

        if mimetype.startswith("text/") or name.endswith('.txt'):
            return file_bytes.decode("utf-8", errors="replace")

        return ""

    except Exception as e:
        logger.warning(f"⚠️ Could not read resume '{filename}': {e}")
        return ""


def _clean(value):
    return str(value or "").strip()


def _string_list(value):
    return [_clean(v) for v in value if _clean(v)] if isinstance(value, list) else []


def _year(value):
    try:
        return int(value) or None
    except (TypeError, ValueError):
        return None


def normalize_extracted(parsed):
    """Coerce a model reply into the ``{personal, public}`` shape, or None."""
    if not isinstance(parsed, dict):
        return None
    personal_raw = parsed.get("personal")
    public_raw = parsed.get("public")
    if not isinstance(personal_raw, dict) or not isinstance(public_raw, dict):
        return None

    personal = {key: _clean(personal_raw.get(key)) for key in EMPTY_PERSONAL}

    projects = [
        {
            "title": _clean(p.get("title")),
            "description": _clean(p.get("description")),
            "link": _clean(p.get("link")),
            "technologies": _string_list(p.get("technologies")),
        }
        for p in public_raw.get("projects") or [] if isinstance(p, dict)
    ]
    education = [
        {
            "school": _clean(e.get("school")),
            "degree": _clean(e.get("degree")),
            "field_of_study": _clean(e.get("field_of_study")),
            "start_year": _year(e.get("start_year")),
            "end_year": _year(e.get("end_year")),
        }
        for e in public_raw.get("education") or [] if isinstance(e, dict)
    ]
    experience = [
        {
            "company": _clean(x.get("company")),
            "role": _clean(x.get("role")),
            "location": _clean(x.get("location")),
            "description": _clean(x.get("description")),
            "start_date": _clean(x.get("start_date")),
            "end_date": _clean(x.get("end_date")),
            "is_current": bool(x.get("is_current")),
        }
        for x in public_raw.get("experience") or [] if isinstance(x, dict)
    ]

    try:
        experience_years = int(float(public_raw.get("experience_years") or 0))
    except (TypeError, ValueError):
        experience_years = 0

    public = {
        "skills": _string_list(public_raw.get("skills")),
        "experience_years": experience_years,
        "tagline": _clean(public_raw.get("tagline")),
        "projects": [p for p in projects if p["title"] or p["description"] or p["link"] or p["technologies"]],
        "education": [e for e in education if e["school"] or e["degree"] or e["field_of_study"]],
        "experience": [x for x in experience if x["company"] or x["role"] or x["description"]],
        "portfolio_link": _clean(public_raw.get("portfolio_link")),
        "city": _clean(public_raw.get("city")),
    }
    return {"personal": personal, "public": public}


def extract_details_local(text):
    """Regex heuristics used when no AI provider answers."""
    lines = [line.strip() for line in re.split(r"\r?\n", text or "") if line.strip()]

    email_match = re.search(r"[A-Z0-9._%+-]+@[A-Z0-9.-]+\.[A-Z]{2,}", text or "", re.IGNORECASE)
    phone_match = re.search(r"(\+?\d[\d\s\-()]{8,}\d)", text or "")
    phone = re.sub(r"\s+", " ", phone_match.group(1)).strip() if phone_match else ""
    if phone and not 10 <= len(re.sub(r"\D", "", phone)) <= 12:
        phone = ""
    linkedin = re.search(r"https?://(?:www\.)?linkedin\.com/[^\s)]+", text or "", re.IGNORECASE)
    github = re.search(r"https?://(?:www\.)?github\.com/[^\s)]+", text or "", re.IGNORECASE)
    years = re.search(r"(\d{1,2})\+?\s*(?:years|yrs)", text or "", re.IGNORECASE)

    college = next((line for line in lines if re.search(r"(university|college|institute|school)", line, re.IGNORECASE)), "")
    name_guess = lines[0] if lines and len(lines[0]) <= 80 else ""
    looks_like_name = bool(re.fullmatch(r"[a-zA-Z.\s'-]+", name_guess)) and len(name_guess.split()) <= 5

    text_lower = (text or "").lower()
    skills = [skill for skill in KNOWN_SKILLS if re.search(r"(?<![a-z])" + re.escape(skill) + r"(?![a-z])", text_lower)]

    personal = dict(EMPTY_PERSONAL)
    personal.update({
        "full_name": name_guess if looks_like_name else "",
        "email": email_match.group(0) if email_match else "",
        "phone": phone,
        "college": college,
        "github_link": github.group(0) if github else "",
        "linkedin_link": linkedin.group(0) if linkedin else "",
    })
    public = dict(EMPTY_PUBLIC)
    public.update({
        "skills": skills,
        "experience_years": int(years.group(1)) if years else 0,
    })
    return {"personal": personal, "public": public}


class ResumeExtractor:
    """
    Resume -> structured profile collaborator.
    Tries each AI client in turn and degrades to local heuristics; never raises.
    """

    def __init__(self, clients=()):
        self.clients = list(clients)

    def extract_details(self, text):
        schema = json.dumps({"personal": EMPTY_PERSONAL, "public": EMPTY_PUBLIC}, indent=2)
        for client in self.clients:
            try:
                parsed = client.generate_json(EXTRACTION_PROMPT.format(schema=schema, text=(text or "")[:12000]), temperature=0.1)
                extracted = normalize_extracted(parsed)
                if extracted:
                    logger.info(f"resume extracted with {client.name}")
                    return extracted
            except Exception as e:
                logger.warning(f"⚠️ {client.name} resume extraction failed, falling back: {e}")
        return extract_details_local(text)

    def bias_free_rewrite(self, text):
        """AI rewrite used by the anonymizer's first tier; None when unavailable."""
        for client in self.clients:
            try:
                rewritten = client.generate_text(BIAS_FREE_PROMPT.format(text=(text or "")[:10000]))
                if rewritten:
                    return rewritten
            except Exception as e:
                logger.warning(f"⚠️ {client.name} bias-free rewrite failed: {e}")
        return None
