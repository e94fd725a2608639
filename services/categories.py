import logging

from sqlalchemy.orm import Session

from errors import CategoryInUse, NotFound
from models import Category, Transaction
from pagination import PageParams, fetch
from schemas import CategoryIn

logger = logging.getLogger(__name__)

SORTABLE = ("id", "name", "description")


def list_categories(db: Session, params: PageParams):
    return fetch(db.query(Category), Category, SORTABLE, params)


def get_category(db: Session, category_id: int) -> Category:
    category = db.get(Category, category_id)
    if not category:
        raise NotFound("Category", category_id)
    return category


def create_category(db: Session, payload: CategoryIn) -> Category:
    category = Category(name=payload.name, description=payload.description)
    db.add(category)
    db.commit()
    db.refresh(category)
    logger.info("Created category %s", category.id)
    return category


def update_category(db: Session, category_id: int, payload: CategoryIn) -> Category:
    category = get_category(db, category_id)
    category.name = payload.name
    category.description = payload.description
    db.commit()
    db.refresh(category)
    logger.info("Updated category %s", category.id)
    return category


def delete_category(db: Session, category_id: int) -> None:
    category = get_category(db, category_id)

    in_use = db.query(Transaction).filter(Transaction.category_id == category_id).count()
    if in_use:
        logger.warning("Refusing to delete category %s, %s transaction(s) reference it", category_id, in_use)
        raise CategoryInUse(category_id, in_use)

    db.delete(category)
    db.commit()
    logger.info("Deleted category %s", category_id)
