from datetime import UTC, datetime, timedelta

import jwt
from pwdlib.hashers.bcrypt import BcryptHasher

from core.config import settings

# --- 패스워드 해싱 ---
# bcrypt 해시만 저장하고 평문은 어디에도 남기지 않는다.
pwd_hash = BcryptHasher()


def hash_password(plain: str) -> str:
    """평문 패스워드 → bcrypt 해시."""
    return pwd_hash.hash(plain)


def verify_password(plain: str, hashed: str) -> bool:
    """평문과 해시를 비교한다."""
    return pwd_hash.verify(plain, hashed)


# --- JWT 토큰 ---
# sub에는 사용자 id를 문자열로 넣는다 (JWT 표준상 sub는 문자열).
# Payload는 누구나 디코딩 가능하므로 민감정보는 넣지 않는다.


def create_access_token(subject: str | int, expires_delta: timedelta | None = None) -> str:
    """사용자 식별자를 sub로 담은 JWT 액세스 토큰을 생성한다.

    Args:
        subject: 토큰 주체 (사용자 id)
        expires_delta: 만료 시간. None이면 설정값 사용.
    """
    expire = datetime.now(UTC) + (
        expires_delta or timedelta(minutes=settings.JWT_EXPIRE_MINUTES)
    )
    payload = {"sub": str(subject), "exp": expire}
    return jwt.encode(payload, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def verify_token(token: str) -> dict | None:
    """JWT 토큰을 검증하고 payload를 반환한다.

    유효하지 않거나 만료된 토큰이면 None을 반환.
    """
    try:
        return jwt.decode(
            token, settings.JWT_SECRET_KEY, algorithms=[settings.JWT_ALGORITHM]
        )
    except jwt.PyJWTError:
        return None


def token_subject(token: str) -> int | None:
    """토큰에서 사용자 id를 꺼낸다. 검증 실패나 형식 오류면 None."""
    payload = verify_token(token)
    if not payload:
        return None
    try:
        return int(payload.get("sub", ""))
    except ValueError:
        return None
