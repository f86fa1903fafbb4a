from pydantic import BaseModel, EmailStr, field_validator, ConfigDict
from typing import ClassVar

# Author base schema
class AuthorBase(BaseModel):
    authorname: str
    email: EmailStr

    @field_validator("authorname", mode="before")
    @classmethod
    def trim_and_check(cls, v: object) -> str:
        if not isinstance(v, str):
            raise ValueError("authorname must be a string")
        v = v.strip()
        if not v:
            raise ValueError("authorname cannot be empty")
        return v

# Author create schema
class AuthorCreate(AuthorBase):
    password: str

    @field_validator("password")
    @classmethod
    def password_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("password cannot be empty")
        return v

# Author update schema, email selects the record
class AuthorUpdate(AuthorCreate):
    pass

# Author read schema
class AuthorRead(AuthorBase):
    password: str
    is_authorised: bool

    model_config: ClassVar[ConfigDict] = ConfigDict(from_attributes=True)
