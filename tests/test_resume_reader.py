import pytest

from resume_reader import PdfTextError, build_resume_object, extract_text_from_pdf_bytes
from resume_reader.reader import match_heading, parse_skills, split_sections, strip_duration

SAMPLE = """Jane Doe
jane.doe@example.com | (555) 123-4567 | linkedin.com/in/janedoe
SUMMARY
Backend engineer with six years
of experience building APIs.
EXPERIENCE
Senior Engineer at Initech
Jan 2020 - Present
• Built billing APIs in Python
• Led migration to PostgreSQL
Engineer, Globex Jun 2017 - Dec 2019
- Maintained data pipelines
EDUCATION
Bachelor of Science in Computer Science, State University 2013 - 2017
SKILLS
Languages: Python, Go, SQL
Tools: Docker; Kubernetes
"""


def test_build_resume_object_sections():
    data = build_resume_object(SAMPLE)
    assert data["contact"]["name"] == "Jane Doe"
    assert data["contact"]["email"] == "jane.doe@example.com"
    assert data["contact"]["phone"]
    assert data["contact"]["linkedin"] == "linkedin.com/in/janedoe"
    assert data["summary"] == "Backend engineer with six years of experience building APIs."
    assert data["skills"] == ["Python", "Go", "SQL", "Docker", "Kubernetes"]


def test_build_resume_object_experience_and_education():
    data = build_resume_object(SAMPLE)
    first, second = data["experience"]
    assert first["title"] == "Senior Engineer"
    assert first["company"] == "Initech"
    assert first["duration"] == "Jan 2020 - Present"
    assert first["bullets"] == ["Built billing APIs in Python", "Led migration to PostgreSQL"]
    assert second["title"] == "Engineer"
    assert second["company"] == "Globex"
    assert second["bullets"] == ["Maintained data pipelines"]

    (edu,) = data["education"]
    assert edu["degree"] == "Bachelor of Science in Computer Science"
    assert edu["institution"] == "State University"
    assert edu["duration"] == "2013 - 2017"


def test_text_without_headings_has_empty_sections():
    data = build_resume_object("just a paragraph of plain words with no structure at all")
    assert data["skills"] == []
    assert data["experience"] == []
    assert data["education"] == []
    assert data["summary"] is None


def test_heading_aliases_and_merging():
    assert match_heading("Work Experience") == "experience"
    assert match_heading("Technical Skills:") == "skills"
    assert match_heading("Built APIs") is None
    sections = split_sections("SKILLS\nPython\nPROJECTS\nX\nSkills\nGo")
    assert sections["skills"] == "Python\n\nGo"


def test_strip_duration_and_skills():
    assert strip_duration("Engineer | Acme | 2019 - 2021") == ("Engineer | Acme", "2019 - 2021")
    assert strip_duration("No dates here") == ("No dates here", None)
    assert parse_skills("• Python, Python, SQL") == ["Python", "SQL"]


def test_extract_text_rejects_non_pdf_bytes():
    with pytest.raises(PdfTextError):
        extract_text_from_pdf_bytes(b"%PDF-1.4 not really a pdf")
