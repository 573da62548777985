from fastapi import APIRouter, Depends, status
from fastapi.security import OAuth2PasswordRequestForm
from pydantic import BaseModel, EmailStr, Field
from sqlmodel import Session

from core.dependencies import get_current_user
from model.database import get_session
from model.user import User
from service import auth_service

router = APIRouter(prefix="/auth", tags=["auth"])


# --- 요청/응답 스키마 ---

class RegisterRequest(BaseModel):
    email: EmailStr
    password: str = Field(min_length=6)
    name: str | None = Field(default=None, max_length=50)


class UserResponse(BaseModel):
    id: int
    email: str
    name: str | None = None


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"


# --- 엔드포인트 ---

@router.post("/register", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
def register(req: RegisterRequest, session: Session = Depends(get_session)):
    """회원가입: 이메일 + 패스워드 (+ 이름) → 사용자 생성. 중복이면 409."""
    user = auth_service.register(req.email, req.password, session, name=req.name)
    return UserResponse(id=user.id, email=user.email, name=user.name)


@router.post("/login", response_model=TokenResponse)
def login(form: OAuth2PasswordRequestForm = Depends(), session: Session = Depends(get_session)):
    """로그인: 이메일 + 패스워드 → JWT 토큰 반환.

    OAuth2 표준 필드명이 username이라 form.username에 이메일을 넣는다.
    """
    token = auth_service.login(form.username, form.password, session)
    return TokenResponse(access_token=token)


@router.get("/me", response_model=UserResponse)
def get_me(current_user: User = Depends(get_current_user)):
    """현재 로그인한 사용자 정보 조회. (토큰 필수)"""
    return UserResponse(id=current_user.id, email=current_user.email, name=current_user.name)
