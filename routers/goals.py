from typing import List, Union

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from database import get_db
from models import User
from pagination import PageParams, page_params
from schemas import GoalIn, GoalOut, MessageResponse, PageResponse
from security import get_current_user
from services import goals

router = APIRouter(prefix="/api/goals", tags=["goals"])


@router.get("", response_model=Union[PageResponse[GoalOut], List[GoalOut]])
def list_goals(
    params: PageParams = Depends(page_params("targetDate", "asc")),
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    return goals.list_goals(db, user, params)


@router.get("/{goal_id}", response_model=GoalOut)
def get_goal(goal_id: int, db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    return goals.get_goal(db, goal_id, user)


@router.post("", response_model=GoalOut)
def create_goal(payload: GoalIn, db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    return goals.create_goal(db, payload, user)


@router.put("/{goal_id}", response_model=GoalOut)
def update_goal(
    goal_id: int,
    payload: GoalIn,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    return goals.update_goal(db, goal_id, payload, user)


@router.delete("/{goal_id}", response_model=MessageResponse)
def delete_goal(goal_id: int, db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    goals.delete_goal(db, goal_id, user)
    return {"message": "Goal deleted successfully"}
