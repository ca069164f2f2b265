from typing import List

from pydantic import BaseModel, Field


class LoginRequest(BaseModel):
    username: str = Field(min_length=1)
    password: str = Field(min_length=1)


class UserRecord(BaseModel):
    username: str
    name: str = ""
    page_access: List[str] = Field(default_factory=lambda: ["all"])


class ActiveViewUpdate(BaseModel):
    view: str = Field(min_length=1)


class ActiveViewResponse(BaseModel):
    view: str


class LoginResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: UserRecord
