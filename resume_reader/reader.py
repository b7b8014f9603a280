# ---------------------------
# PDF text extraction + light structuring for interview context
# ---------------------------
from dataclasses import asdict
import io
import re
from typing import Dict, List, Optional, Tuple

import pdfplumber

from .models import EducationItem, ExperienceItem


EMAIL_RE = re.compile(r"[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}")
PHONE_RE = re.compile(r"(\+?\d{1,3}[\s.-]?)?(\(?\d{3}\)?[\s.-]?)\d{3}[\s.-]?\d{4}")
URL_RE = re.compile(r"(https?://\S+|www\.\S+|\bgithub\.com/\S+|\blinkedin\.com/\S+)", re.IGNORECASE)

MONTH = r"(Jan|Feb|Mar|Apr|May|Jun|Jul|Aug|Sep|Sept|Oct|Nov|Dec)[a-z]*\.?"
DATE_TOKEN = rf"({MONTH}\s+\d{{4}}|\d{{4}}|Present|Current)"
DATE_RANGE_RE = re.compile(rf"{DATE_TOKEN}\s*(-|–|—|to)\s*{DATE_TOKEN}", re.IGNORECASE)

DEGREE_RE = re.compile(
    r"\b(MS|M\.S\.|Master|MTech|M\.Tech|MBA|PhD|Bachelors|Bachelor|B\.E\.|B\.Tech|BE|BS|B\.S\.|BSc|MSc|Associate)\b",
    re.IGNORECASE,
)

BULLET_CHARS = ("•", "-", "●", "◦", "▪", "–", "·", "*")

SECTION_ALIASES = {
    "summary": ["summary", "professional summary", "profile", "objective", "about me"],
    "experience": [
        "experience", "work experience", "employment", "professional experience",
        "relevant experience", "career history", "employment history",
    ],
    "education": ["education", "academics", "academic background"],
    "skills": ["skills", "technical skills", "core skills", "technologies", "expertise", "technical expertise"],
    "projects": ["projects", "project experience", "academic projects", "key projects"],
    "certifications": ["certifications", "certificates", "licenses", "awards", "achievements"],
}


class PdfTextError(RuntimeError):
    """The upload could not be read as a PDF."""


def normalize_text(text: str) -> str:
    text = text.replace("\r", "\n")
    text = re.sub(r"\n{3,}", "\n\n", text)
    text = re.sub(r"[ \t]{2,}", " ", text)
    # fix hyphenated line breaks: "engi-\nneer" -> "engineer"
    text = re.sub(r"(\w)-\n(\w)", r"\1\2", text)
    return text.strip()


def extract_text_from_pdf_bytes(content: bytes) -> str:
    """Concatenate the text of every page."""
    try:
        with pdfplumber.open(io.BytesIO(content)) as pdf:
            pages = [page.extract_text() or "" for page in pdf.pages]
    except Exception as e:
        raise PdfTextError(f"Failed to extract text from PDF: {e}") from e
    return normalize_text("\n".join(pages))


# ---------------------------
# Contact + headings
# ---------------------------
def _first_match(rx: re.Pattern, text: str) -> Optional[str]:
    m = rx.search(text)
    return m.group(0) if m else None


def normalize_heading(s: str) -> str:
    s = s.lower().strip().replace("&", " and ")
    s = re.sub(r"[^a-z\s]", "", s)
    return re.sub(r"\s{2,}", " ", s).strip()


_HEADING_LOOKUP = {normalize_heading(a): canon for canon, aliases in SECTION_ALIASES.items() for a in aliases}


def match_heading(line: str) -> Optional[str]:
    return _HEADING_LOOKUP.get(normalize_heading(line))


def extract_contact(text: str) -> Dict[str, Optional[str]]:
    urls = URL_RE.findall(text)
    lines = [l.strip() for l in text.splitlines() if l.strip()]
    name = None
    # Name heuristic: first short line near the top that is not contact info or a heading
    for l in lines[:8]:
        if EMAIL_RE.search(l) or PHONE_RE.search(l) or URL_RE.search(l) or match_heading(l):
            continue
        if 1 <= len(l.split()) <= 5 and re.search(r"[A-Za-z]", l):
            name = l
            break
    return {
        "name": name,
        "email": _first_match(EMAIL_RE, text),
        "phone": _first_match(PHONE_RE, text),
        "linkedin": next((u for u in urls if "linkedin.com" in u.lower()), None),
        "github": next((u for u in urls if "github.com" in u.lower()), None),
    }


def split_sections(text: str) -> Dict[str, str]:
    """Map canonical section name -> body text. Repeated headings are merged."""
    lines = text.splitlines()
    found: List[Tuple[int, str]] = [(i, match_heading(l)) for i, l in enumerate(lines) if l.strip() and match_heading(l)]
    sections: Dict[str, str] = {}
    for k, (start, canon) in enumerate(found):
        end = found[k + 1][0] if k + 1 < len(found) else len(lines)
        body = normalize_text("\n".join(lines[start + 1 : end]))
        if not body:
            continue
        sections[canon] = f"{sections[canon]}\n\n{body}" if canon in sections else body
    return sections


# ---------------------------
# Section parsers
# ---------------------------
def is_bullet(line: str) -> bool:
    return line.strip().startswith(BULLET_CHARS)


def clean_bullet(s: str) -> str:
    return re.sub(r"\s{2,}", " ", s.strip().lstrip("".join(BULLET_CHARS)).strip())


def strip_duration(line: str) -> Tuple[str, Optional[str]]:
    m = DATE_RANGE_RE.search(line)
    if not m:
        return line.strip(), None
    rest = (line[: m.start()] + line[m.end() :]).strip(" -–|,")
    return rest, m.group(0).strip()


def _split_title_company(header: str) -> Tuple[Optional[str], Optional[str]]:
    # "Title (Company)", "Title, Company", "Title at Company", "Title | Company"
    m = re.match(r"^(?P<t>.+?)\s*\((?P<c>.+?)\)\s*$", header)
    if m:
        return m.group("t").strip(), m.group("c").strip()
    for sep in (" at ", ", ", " | ", " - "):
        if sep in header:
            t, c = header.split(sep, 1)
            return t.strip() or None, c.strip(" |,") or None
    return header.strip() or None, None


def parse_experience(section_text: str) -> List[ExperienceItem]:
    """An entry starts at every non-bullet line carrying a date range (or followed by one)."""
    lines = [l.strip() for l in section_text.splitlines() if l.strip()]
    items: List[ExperienceItem] = []
    current: Optional[ExperienceItem] = None
    i = 0
    while i < len(lines):
        line = lines[i]
        if is_bullet(line):
            if current is not None:
                current.bullets.append(clean_bullet(line))
            i += 1
            continue
        header, duration = strip_duration(line)
        if duration is None and i + 1 < len(lines) and not is_bullet(lines[i + 1]):
            rest, next_duration = strip_duration(lines[i + 1])
            if next_duration and not rest:
                duration = next_duration
                i += 1
        if duration:
            title, company = _split_title_company(header)
            current = ExperienceItem(title=title, company=company, duration=duration)
            items.append(current)
        elif current is not None:
            # wrapped bullet text
            if current.bullets:
                current.bullets[-1] = f"{current.bullets[-1]} {line}"
            else:
                current.bullets.append(line)
        i += 1
    return items


def parse_education(section_text: str) -> List[EducationItem]:
    lines = [l.strip() for l in section_text.splitlines() if l.strip()]
    out: List[EducationItem] = []
    i = 0
    while i < len(lines):
        line = lines[i]
        if not DEGREE_RE.search(line):
            i += 1
            continue
        degree, duration = strip_duration(line)
        institution = None
        if "," in degree:
            degree, institution = [p.strip() for p in degree.split(",", 1)]
        elif i + 1 < len(lines) and not DEGREE_RE.search(lines[i + 1]) and not match_heading(lines[i + 1]):
            inst, inst_duration = strip_duration(lines[i + 1])
            institution = inst or None
            duration = duration or inst_duration
            i += 1
        out.append(EducationItem(degree=degree.strip(" -–|,") or None, institution=institution, duration=duration))
        i += 1
    return out


def parse_skills(section_text: str) -> List[str]:
    """Flatten "Group: a, b" lines and plain comma/bullet lists, keeping first-seen order."""
    seen: Dict[str, None] = {}
    for line in section_text.splitlines():
        s = clean_bullet(line) if is_bullet(line) else line.strip()
        if ":" in s:
            s = s.split(":", 1)[1]
        for token in re.split(r"[,;|•]", s):
            token = token.strip().strip(".")
            if token and len(token) <= 60:
                seen.setdefault(token, None)
    return list(seen)


def build_resume_object(text: str) -> Dict:
    """Structured view of resume text; sections that are missing come back empty."""
    sections = split_sections(text)
    summary = sections.get("summary")
    return {
        "contact": extract_contact(text),
        "summary": re.sub(r"\s+", " ", summary).strip() if summary else None,
        "skills": parse_skills(sections.get("skills", "")),
        "experience": [asdict(x) for x in parse_experience(sections.get("experience", ""))],
        "education": [asdict(x) for x in parse_education(sections.get("education", ""))],
    }
