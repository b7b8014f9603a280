from typing import Literal

from pydantic import Field

from entrevisto.schemas.base import CamelModel


class ProfileCreate(CamelModel):
    role: Literal["CANDIDATE", "RECRUITER"]
    company_name: str | None = Field(default=None, max_length=200)


class ProfileResponse(CamelModel):
    id: str
    email: str
    role: str
    company_id: str | None = None


class RoleResponse(CamelModel):
    role: str
