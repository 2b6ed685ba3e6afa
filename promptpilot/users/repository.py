"""Database operations for users."""

from sqlalchemy.orm import Session

from promptpilot.users.models import User


def get_user_by_clerk_id(db: Session, clerk_id: str) -> User | None:
    return db.query(User).filter(User.clerk_id == clerk_id).first()


def create_user(db: Session, clerk_id: str, email: str, name: str | None) -> User:
    user = User(clerk_id=clerk_id, email=email, name=name)
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def update_user(db: Session, clerk_id: str, **kwargs) -> int:
    """Update user fields by external id. Returns the number of rows updated."""
    updated = db.query(User).filter(User.clerk_id == clerk_id).update(kwargs)
    db.commit()
    return updated


def delete_user(db: Session, clerk_id: str) -> int:
    deleted = db.query(User).filter(User.clerk_id == clerk_id).delete()
    db.commit()
    return deleted


def increment_usage(db: Session, clerk_id: str) -> int:
    """
    Increment a user's usage counter in a single UPDATE.

    Returns the number of rows updated (0 if the user is not synced yet).
    """
    updated = (
        db.query(User)
        .filter(User.clerk_id == clerk_id)
        .update({User.usage_count: User.usage_count + 1}, synchronize_session=False)
    )
    db.commit()
    return updated
