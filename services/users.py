import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from errors import DuplicateEmail, InvalidCredentials
from models import User
from security import create_access_token, hash_password, verify_password

logger = logging.getLogger(__name__)


def exists_by_email(db: Session, email: str) -> bool:
    return db.query(User.id).filter(User.email == email).first() is not None


def register(db: Session, name: str, email: str, password: str) -> User:
    if exists_by_email(db, email):
        logger.warning("Registration refused, email already in use: %s", email)
        raise DuplicateEmail(email)

    user = User(name=name, email=email, hashed_password=hash_password(password))
    db.add(user)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        logger.warning("Registration lost a race on email %s", email)
        raise DuplicateEmail(email)
    db.refresh(user)
    logger.info("Registered user %s", user.id)
    return user


def login(db: Session, email: str, password: str) -> dict:
    """Check the credentials and issue a token for the matching user."""
    user = db.query(User).filter(User.email == email).first()
    if not user or not verify_password(password, user.hashed_password):
        logger.warning("Failed login for %s", email)
        raise InvalidCredentials()

    token = create_access_token(user.email, user.id)
    logger.info("User %s logged in", user.id)
    return {"token": token, "id": user.id, "name": user.name, "email": user.email}
