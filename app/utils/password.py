"""비밀번호 해싱 및 검증 유틸리티 모듈.

Password hashing for login and self-registration (bcrypt).
"""

import bcrypt

# bcrypt 입력 한도 — bcrypt only reads the first 72 bytes; newer releases reject longer input
_BCRYPT_MAX_BYTES: int = 72


def _secret(password: str) -> bytes:
    return password.encode("utf-8")[:_BCRYPT_MAX_BYTES]


def hash_password(password: str) -> str:
    """평문 비밀번호를 bcrypt 해시로 변환합니다.

    Hash a plain text password with a fresh salt.

    Args:
        password: 평문 비밀번호 (Plain text password)

    Returns:
        str: bcrypt 해시 문자열 (Bcrypt hash string, ~60 chars)
    """
    return bcrypt.hashpw(_secret(password), bcrypt.gensalt()).decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """평문 비밀번호와 저장된 해시를 비교합니다 — Constant-time check against a stored hash."""
    try:
        return bcrypt.checkpw(_secret(plain_password), hashed_password.encode("utf-8"))
    except ValueError:
        # 손상된 해시 — Malformed stored hash never matches
        return False
