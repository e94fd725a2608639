from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from database import get_db
from schemas import JwtResponse, LoginRequest, RegisterRequest, RegisterResponse
from services import users

router = APIRouter(prefix="/api/auth", tags=["auth"])


@router.post("/login", response_model=JwtResponse)
def login(payload: LoginRequest, db: Session = Depends(get_db)):
    return users.login(db, payload.email, payload.password)


@router.post("/register", response_model=RegisterResponse)
def register(payload: RegisterRequest, db: Session = Depends(get_db)):
    user = users.register(db, payload.name, payload.email, payload.password)
    return {"message": "User registered successfully!", "user_id": user.id}
