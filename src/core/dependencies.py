from fastapi import Depends
from fastapi.security import OAuth2PasswordBearer
from sqlmodel import Session

from core.exceptions import InvalidToken, Unauthorized
from core.security import token_subject
from model.database import get_session
from model.user import User

# auto_error=False: 토큰 누락도 Unauthorized로 던져서
# 전역 핸들러의 {"error_code", "message"} 형식으로 응답한다.
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/login", auto_error=False)


def get_current_user(
    token: str | None = Depends(oauth2_scheme),
    session: Session = Depends(get_session),
) -> User:
    """Bearer 토큰에서 현재 사용자를 추출한다.

    흐름:
    1. Authorization 헤더에 토큰이 없으면 Unauthorized
    2. 서명/만료 검증 후 sub(사용자 id) 추출, 실패 시 InvalidToken
    3. 해당 사용자가 DB에 없으면 InvalidToken
    """
    if not token:
        raise Unauthorized

    user_id = token_subject(token)
    if user_id is None:
        raise InvalidToken

    user = session.get(User, user_id)
    if not user:
        raise InvalidToken("토큰의 사용자를 찾을 수 없습니다")

    return user
