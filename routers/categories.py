from typing import List, Union

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from database import get_db
from models import User
from pagination import PageParams, page_params
from schemas import CategoryIn, CategoryOut, MessageResponse, PageResponse
from security import get_current_user
from services import categories

router = APIRouter(prefix="/api/categories", tags=["categories"])


@router.get("", response_model=Union[PageResponse[CategoryOut], List[CategoryOut]])
def list_categories(
    params: PageParams = Depends(page_params("name", "asc")),
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    return categories.list_categories(db, params)


@router.get("/{category_id}", response_model=CategoryOut)
def get_category(category_id: int, db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    return categories.get_category(db, category_id)


@router.post("", response_model=CategoryOut)
def create_category(payload: CategoryIn, db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    return categories.create_category(db, payload)


@router.put("/{category_id}", response_model=CategoryOut)
def update_category(
    category_id: int,
    payload: CategoryIn,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    return categories.update_category(db, category_id, payload)


@router.delete("/{category_id}", response_model=MessageResponse)
def delete_category(category_id: int, db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    categories.delete_category(db, category_id)
    return {"message": "Category deleted successfully"}
