from sqlmodel import Session, select

from core.exceptions import DuplicateEmail, InvalidCredentials
from core.security import create_access_token, hash_password, verify_password
from model.user import User


def register(email: str, password: str, session: Session, name: str | None = None) -> User:
    """새 사용자를 등록한다.

    1. 이메일은 소문자로 정규화한 뒤 중복 확인
    2. 패스워드는 bcrypt 해시로만 저장
    """
    email = email.strip().lower()
    existing = session.exec(select(User).where(User.email == email)).first()
    if existing:
        raise DuplicateEmail

    user = User(
        email=email,
        name=name,
        hashed_password=hash_password(password),
    )
    session.add(user)
    session.commit()
    session.refresh(user)
    return user


def login(email: str, password: str, session: Session) -> str:
    """이메일/패스워드를 확인하고 sub=사용자 id인 JWT를 반환한다.

    사용자가 없거나 패스워드가 틀리면 같은 InvalidCredentials를 던진다.
    """
    user = session.exec(select(User).where(User.email == email.strip().lower())).first()
    if not user or not verify_password(password, user.hashed_password):
        raise InvalidCredentials

    return create_access_token(user.id)
