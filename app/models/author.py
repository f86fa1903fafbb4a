from sqlalchemy import Boolean, String, Text, false
from sqlalchemy.orm import Mapped, mapped_column
from app.models.base import Base
#Author
class Author(Base):
    __tablename__: str = "authors"
    email: Mapped[str] = mapped_column(String(320), primary_key=True)
    authorname: Mapped[str] = mapped_column(Text, nullable=False)
    password: Mapped[str] = mapped_column(Text, nullable=False)
    is_authorised: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False, server_default=false()
    )
