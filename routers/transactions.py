from typing import List, Optional, Union

from fastapi import APIRouter, Depends, Query
from fastapi.responses import StreamingResponse
from pydantic import NaiveDatetime
from sqlalchemy.orm import Session

from database import get_db
from models import TransactionType, User
from pagination import PageParams, page_params
from schemas import MessageResponse, PageResponse, SummaryResponse, TransactionIn, TransactionOut
from security import get_current_user
from services import transactions

router = APIRouter(prefix="/api/transactions", tags=["transactions"])

TransactionList = Union[PageResponse[TransactionOut], List[TransactionOut]]
transaction_page = page_params("date", "desc")


@router.get("", response_model=TransactionList)
def list_transactions(
    params: PageParams = Depends(transaction_page),
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    return transactions.list_transactions(db, user, params)


@router.get("/date-range", response_model=TransactionList)
def list_by_date_range(
    start: NaiveDatetime = Query(...),
    end: NaiveDatetime = Query(...),
    params: PageParams = Depends(transaction_page),
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    return transactions.list_by_date_range(db, start, end, user, params)


@router.get("/type/{tx_type}", response_model=TransactionList)
def list_by_type(
    tx_type: TransactionType,
    params: PageParams = Depends(transaction_page),
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    return transactions.list_by_type(db, tx_type, user, params)


@router.get("/category/{category_id}", response_model=TransactionList)
def list_by_category(
    category_id: int,
    params: PageParams = Depends(transaction_page),
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    return transactions.list_by_category(db, category_id, user, params)


@router.get("/summary", response_model=SummaryResponse)
def summary(
    year: int = Query(..., ge=1970, le=9999),
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    return transactions.summary(db, user, year)


@router.get("/export/excel")
def export_excel(
    start: Optional[NaiveDatetime] = Query(None),
    end: Optional[NaiveDatetime] = Query(None),
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    stream = transactions.export_excel(db, user, start, end)

    filename = "transactions"
    if start:
        filename += f"_{start.date().isoformat()}"
    if end:
        filename += f"_{end.date().isoformat()}"

    return StreamingResponse(
        stream,
        media_type="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        headers={
            "Content-Disposition": f"attachment; filename={filename}.xlsx"
        },
    )


@router.get("/{transaction_id}", response_model=TransactionOut)
def get_transaction(transaction_id: int, db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    return transactions.get_transaction(db, transaction_id, user)


@router.post("", response_model=TransactionOut)
def create_transaction(payload: TransactionIn, db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    return transactions.create_transaction(db, payload, user)


@router.put("/{transaction_id}", response_model=TransactionOut)
def update_transaction(
    transaction_id: int,
    payload: TransactionIn,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    return transactions.update_transaction(db, transaction_id, payload, user)


@router.delete("/{transaction_id}", response_model=MessageResponse)
def delete_transaction(transaction_id: int, db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    transactions.delete_transaction(db, transaction_id, user)
    return {"message": "Transaction deleted successfully"}
