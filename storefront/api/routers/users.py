# storefront/api/routers/users.py
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from storefront.data.database import get_db
from storefront.domain.schemas import (
    SignupStartIn,
    SignupStartOut,
    SignupVerifyIn,
    UserCreate,
    UserRead,
    WalletOut,
)
from storefront.services.signup_store import SignupSessionStore, get_signup_store
from storefront.services.user_service import UserService
from storefront.services.wallet_service import WalletService

router = APIRouter(prefix="/users", tags=["users"])


@router.post("", response_model=UserRead, status_code=201)
def create_user(payload: UserCreate, db: Session = Depends(get_db)):
    return UserService(db).create_user(payload)


@router.post("/signup", response_model=SignupStartOut, status_code=201)
def start_signup(
    payload: SignupStartIn,
    db: Session = Depends(get_db),
    signup_store: SignupSessionStore = Depends(get_signup_store),
):
    session = UserService(db, signup_store=signup_store).start_signup(payload.name, payload.email)
    return SignupStartOut(
        message="OTP sent to your email",
        token=session.token,
        expires_at=session.expires_at,
    )


@router.post("/signup/verify", response_model=UserRead, status_code=201)
def verify_signup(
    payload: SignupVerifyIn,
    db: Session = Depends(get_db),
    signup_store: SignupSessionStore = Depends(get_signup_store),
):
    return UserService(db, signup_store=signup_store).verify_signup(payload.token, payload.otp)


@router.get("/{user_id}", response_model=UserRead)
def get_user(user_id: int, db: Session = Depends(get_db)):
    return UserService(db).get_user(user_id)


@router.get("/{user_id}/wallet", response_model=WalletOut)
def get_wallet(user_id: int, db: Session = Depends(get_db)):
    return WalletService(db).get_wallet(user_id)
