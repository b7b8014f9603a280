from datetime import datetime

from pydantic import Field

from entrevisto.schemas.base import CamelModel


class CompanyResponse(CamelModel):
    id: str
    name: str


class JobCreate(CamelModel):
    title: str = Field(min_length=1, max_length=200)
    department: str | None = None
    location: str | None = None
    salary: str | None = None
    description: str | None = Field(default=None, max_length=50000)
    requirements: str | None = Field(default=None, max_length=50000)
    required_skills: list[str] = Field(default_factory=list)


class JobResponse(CamelModel):
    id: str
    title: str
    department: str | None = None
    location: str | None = None
    salary: str | None = None
    description: str | None = None
    requirements: str | None = None
    required_skills: list[str] = Field(default_factory=list)
    posted_date: datetime | None = None
    status: str = "active"
    company: CompanyResponse | None = None
