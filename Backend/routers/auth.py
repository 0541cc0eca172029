import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import or_
from sqlalchemy.orm import Session

from database import get_db
from models.user import User
from schemas.auth import LoginRequest, RegisterRequest, TokenResponse
from schemas.user import UserOut
from services.security import create_access_token, hash_password, verify_password

router = APIRouter(prefix="/auth", tags=["Authentication"])
logger = logging.getLogger(__name__)


def _token_for(user: User) -> TokenResponse:
    token = create_access_token({"sub": str(user.id), "username": user.username})
    return TokenResponse(access_token=token, user_id=user.id, username=user.username)


@router.post("/register", response_model=UserOut, status_code=status.HTTP_201_CREATED)
def register(req: RegisterRequest, db: Session = Depends(get_db)):
    """Create a user account with a hashed password."""
    username = req.username.strip().lower()
    email = req.email.strip().lower() if req.email else None

    clash = db.query(User).filter(
        or_(User.username == username, User.email == email) if email else User.username == username
    ).first()
    if clash:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Username or email already registered")

    user = User(
        username=username,
        email=email,
        password_hash=hash_password(req.password),
        first_name=req.first_name,
        last_name=req.last_name,
        is_active=True,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    logger.info("Registered user %s", user.username)
    return user


@router.post("/login", response_model=TokenResponse)
def login(req: LoginRequest, db: Session = Depends(get_db)):
    """Verify credentials and return a JWT access token."""
    username = req.username.strip().lower()
    user = db.query(User).filter(User.username == username).first()
    if not user or not user.is_active or not verify_password(req.password, user.password_hash):
        logger.info("Failed login for %s", username)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid username or password",
        )
    return _token_for(user)
