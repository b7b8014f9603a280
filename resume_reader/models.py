from dataclasses import dataclass, field
from typing import List, Optional


@dataclass
class ExperienceItem:
    title: Optional[str]
    company: Optional[str]
    duration: Optional[str]
    bullets: List[str] = field(default_factory=list)


@dataclass
class EducationItem:
    degree: Optional[str]
    institution: Optional[str]
    duration: Optional[str]
