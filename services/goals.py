import logging

from sqlalchemy.orm import Session

from errors import Forbidden, NotFound
from models import Goal, User
from pagination import PageParams, fetch
from schemas import GoalIn

logger = logging.getLogger(__name__)

SORTABLE = ("id", "name", "description", "target_amount", "current_amount", "target_date")


def list_goals(db: Session, user: User, params: PageParams):
    query = db.query(Goal).filter(Goal.user_id == user.id)
    return fetch(query, Goal, SORTABLE, params)


def get_goal(db: Session, goal_id: int, user: User) -> Goal:
    goal = db.get(Goal, goal_id)
    if not goal:
        raise NotFound("Goal", goal_id)
    if goal.user_id != user.id:
        logger.warning("User %s tried to access goal %s owned by %s", user.id, goal_id, goal.user_id)
        raise Forbidden("Goal does not belong to the current user")
    return goal


def _apply(goal: Goal, payload: GoalIn) -> None:
    goal.name = payload.name
    goal.description = payload.description
    goal.target_amount = payload.target_amount
    goal.current_amount = payload.current_amount
    goal.target_date = payload.target_date


def create_goal(db: Session, payload: GoalIn, user: User) -> Goal:
    goal = Goal(user_id=user.id)
    _apply(goal, payload)
    db.add(goal)
    db.commit()
    db.refresh(goal)
    logger.info("Created goal %s for user %s", goal.id, user.id)
    return goal


def update_goal(db: Session, goal_id: int, payload: GoalIn, user: User) -> Goal:
    goal = get_goal(db, goal_id, user)
    _apply(goal, payload)
    db.commit()
    db.refresh(goal)
    logger.info("Updated goal %s for user %s", goal.id, user.id)
    return goal


def delete_goal(db: Session, goal_id: int, user: User) -> None:
    goal = get_goal(db, goal_id, user)
    db.delete(goal)
    db.commit()
    logger.info("Deleted goal %s for user %s", goal_id, user.id)
