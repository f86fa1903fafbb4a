from pydantic import BaseModel, field_validator, ConfigDict
from pydantic.alias_generators import to_camel
from typing import Any, ClassVar

# Book base schema, wire format of the book service is camelCase
class BookBase(BaseModel):
    book_id: str | None = None
    author_name: str | None = None
    genre: str | None = None
    description: str | None = None

    model_config: ClassVar[ConfigDict] = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)

# Book create schema, unknown fields are dropped before forwarding
class BookCreate(BookBase):
    book_name: str
    author_id: str

    model_config: ClassVar[ConfigDict] = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    @field_validator("book_name", mode="before")
    @classmethod
    def trim_and_check(cls, v: object) -> str:
        if not isinstance(v, str):
            raise ValueError("book_name must be a string")
        v = v.strip()
        if not v:
            raise ValueError("book_name cannot be empty")
        return v

# Book read schema, as returned by the book service
class BookRead(BookBase):
    book_name: str | None = None
    author_id: str | None = None

    model_config: ClassVar[ConfigDict] = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="allow",
    )
