from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from database import get_db
from dependencies import get_current_user
from models.user import User
from schemas.user import UserUpdate, UserOut

router = APIRouter(prefix="/users", tags=["Users"])


@router.get("/me", response_model=UserOut)
def get_profile(current_user: User = Depends(get_current_user)):
    """Return current user profile."""
    return current_user


@router.put("/me", response_model=UserOut)
def update_profile(
    data: UserUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Update current user profile fields."""
    update_data = data.model_dump(exclude_unset=True)
    if "email" in update_data:
        # Blank email is stored as NULL.
        email = (update_data["email"] or "").strip().lower() or None
        if email:
            taken = db.query(User).filter(User.email == email, User.id != current_user.id).first()
            if taken:
                raise HTTPException(status_code=409, detail="Email already registered")
        update_data["email"] = email
    for key, value in update_data.items():
        setattr(current_user, key, value)
    db.commit()
    db.refresh(current_user)
    return current_user
