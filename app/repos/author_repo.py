from sqlalchemy import delete, exists as sa_exists, select
from sqlalchemy.orm import Session

from app.models.author import Author


class AuthorRepository:

    @staticmethod
    # Get an author by email
    def get_by_id(db: Session, email: str) -> Author | None:
        return db.get(Author, email)

    @staticmethod
    # Check whether an author with this email exists
    def exists(db: Session, email: str) -> bool:
        return bool(db.scalar(select(sa_exists().where(Author.email == email))))

    @staticmethod
    # Insert a new author; a duplicate email raises IntegrityError
    def create(db: Session, author: Author) -> Author:
        db.add(author)
        db.commit()
        db.refresh(author)
        return author

    @staticmethod
    # Update an existing author
    def save(db: Session, author: Author) -> Author:
        author = db.merge(author)
        db.commit()
        db.refresh(author)
        return author

    @staticmethod
    # Delete an author by email
    def delete_by_id(db: Session, email: str) -> None:
        _ = db.execute(delete(Author).where(Author.email == email))
        db.commit()

    @staticmethod
    # List authors
    def list(db: Session, is_authorised: bool | None = None) -> list[Author]:
        stmt = select(Author)

        if is_authorised is not None:
            stmt = stmt.where(Author.is_authorised == is_authorised)

        stmt = stmt.order_by(Author.email.asc())
        return list(db.scalars(stmt).all())
