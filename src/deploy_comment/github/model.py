from datetime import datetime
from typing import Optional

import pydantic


class Model(pydantic.BaseModel):
    model_config = pydantic.ConfigDict(extra="ignore")


class User(Model):
    login: str
    type: Optional[str] = None


class IssueComment(Model):
    id: int
    body: Optional[str] = None
    html_url: Optional[str] = None
    user: Optional[User] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def contains(self, marker: str) -> bool:
        return marker in (self.body or "")

    def __str__(self) -> str:
        return f"IssueComment({self.id})"
