import io
import logging
from datetime import datetime
from decimal import Decimal
from typing import Optional

import openpyxl
from sqlalchemy import extract, func
from sqlalchemy.orm import Session

from errors import Forbidden, NotFound, ValidationFailed
from models import Category, Transaction, TransactionType, User
from pagination import PageParams, fetch
from schemas import TransactionIn
from services.categories import get_category

logger = logging.getLogger(__name__)

SORTABLE = ("id", "description", "amount", "date", "type", "category_id")

CENTS = Decimal("0.01")


def _money(value) -> Decimal:
    return Decimal(str(value or 0)).quantize(CENTS)


def _owned(db: Session, user: User):
    return db.query(Transaction).filter(Transaction.user_id == user.id)


def _check_range(start: datetime, end: datetime) -> None:
    if start > end:
        raise ValidationFailed("start must not be after end")


# ---------- CRUD ----------
def list_transactions(db: Session, user: User, params: PageParams):
    return fetch(_owned(db, user), Transaction, SORTABLE, params)


def get_transaction(db: Session, transaction_id: int, user: User) -> Transaction:
    transaction = db.get(Transaction, transaction_id)
    if not transaction:
        raise NotFound("Transaction", transaction_id)
    if transaction.user_id != user.id:
        logger.warning(
            "User %s tried to access transaction %s owned by %s",
            user.id, transaction_id, transaction.user_id,
        )
        raise Forbidden("Transaction does not belong to the current user")
    return transaction


def _apply(db: Session, transaction: Transaction, payload: TransactionIn) -> None:
    category = get_category(db, payload.category_id)
    transaction.description = payload.description
    transaction.amount = payload.amount
    transaction.date = payload.date
    transaction.type = payload.type
    transaction.category_id = category.id


def create_transaction(db: Session, payload: TransactionIn, user: User) -> Transaction:
    transaction = Transaction(user_id=user.id)
    _apply(db, transaction, payload)
    db.add(transaction)
    db.commit()
    db.refresh(transaction)
    logger.info("Created transaction %s for user %s", transaction.id, user.id)
    return transaction


def update_transaction(db: Session, transaction_id: int, payload: TransactionIn, user: User) -> Transaction:
    transaction = get_transaction(db, transaction_id, user)
    _apply(db, transaction, payload)
    db.commit()
    db.refresh(transaction)
    logger.info("Updated transaction %s for user %s", transaction.id, user.id)
    return transaction


def delete_transaction(db: Session, transaction_id: int, user: User) -> None:
    transaction = get_transaction(db, transaction_id, user)
    db.delete(transaction)
    db.commit()
    logger.info("Deleted transaction %s for user %s", transaction_id, user.id)


# ---------- Filters ----------
def list_by_date_range(db: Session, start: datetime, end: datetime, user: User, params: PageParams):
    _check_range(start, end)
    query = _owned(db, user).filter(Transaction.date.between(start, end))
    return fetch(query, Transaction, SORTABLE, params)


def list_by_type(db: Session, tx_type: TransactionType, user: User, params: PageParams):
    query = _owned(db, user).filter(Transaction.type == tx_type)
    return fetch(query, Transaction, SORTABLE, params)


def list_by_category(db: Session, category_id: int, user: User, params: PageParams):
    query = _owned(db, user).filter(Transaction.category_id == category_id)
    return fetch(query, Transaction, SORTABLE, params)


# ---------- Reports ----------
def summary(db: Session, user: User, year: int) -> dict:
    """Monthly income/expense totals for one year plus the expense split per category."""
    start = datetime(year, 1, 1)
    end = datetime(year + 1, 1, 1)
    in_year = (
        Transaction.user_id == user.id,
        Transaction.date >= start,
        Transaction.date < end,
    )

    rows = (
        db.query(
            extract("month", Transaction.date).label("m"),
            Transaction.type,
            func.sum(Transaction.amount).label("total"),
        )
        .filter(*in_year)
        .group_by("m", Transaction.type)
        .all()
    )

    months = {m: {"month": m, "income": _money(0), "expense": _money(0)} for m in range(1, 13)}
    for m, tx_type, total in rows:
        key = "income" if tx_type == TransactionType.INCOME else "expense"
        months[int(m)][key] = _money(total)

    category_rows = (
        db.query(Category.id, Category.name, func.sum(Transaction.amount).label("total"))
        .select_from(Transaction)
        .join(Category, Category.id == Transaction.category_id)
        .filter(*in_year, Transaction.type == TransactionType.EXPENSE)
        .group_by(Category.id, Category.name)
        .order_by(func.sum(Transaction.amount).desc())
        .all()
    )

    total_income = sum((m["income"] for m in months.values()), _money(0))
    total_expense = sum((m["expense"] for m in months.values()), _money(0))

    return {
        "year": year,
        "total_income": total_income,
        "total_expense": total_expense,
        "balance": total_income - total_expense,
        "months": [months[m] for m in range(1, 13)],
        "expense_by_category": [
            {"category_id": cid, "category_name": name, "total": _money(total)}
            for cid, name, total in category_rows
        ],
    }


def export_excel(
    db: Session,
    user: User,
    start: Optional[datetime] = None,
    end: Optional[datetime] = None,
) -> io.BytesIO:
    query = (
        db.query(Transaction, Category.name)
        .outerjoin(Category, Category.id == Transaction.category_id)
        .filter(Transaction.user_id == user.id)
    )
    if start and end:
        _check_range(start, end)
    if start:
        query = query.filter(Transaction.date >= start)
    if end:
        query = query.filter(Transaction.date <= end)

    workbook = openpyxl.Workbook()
    sheet = workbook.active
    sheet.title = "Transactions"

    sheet.append(["ID", "Date", "Description", "Type", "Category", "Amount"])

    for tx, category_name in query.order_by(Transaction.date.asc(), Transaction.id.asc()).all():
        sheet.append([
            tx.id,
            tx.date,
            tx.description,
            tx.type.value,
            category_name,
            float(tx.amount),
        ])

    stream = io.BytesIO()
    workbook.save(stream)
    stream.seek(0)
    logger.info("Exported transactions for user %s", user.id)
    return stream
