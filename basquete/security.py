from datetime import datetime, timedelta, timezone
from typing import Optional

from fastapi import Response
from jose import JWTError, jwt
from passlib.context import CryptContext

from .config import (IS_PRODUCTION, SESSION_ALGORITHM, SESSION_COOKIE_NAME,
                     SESSION_MAX_AGE_DAYS, SESSION_SECRETS)

# --- SENHAS ---
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

def verify_password(plain_password, hashed_password):
    return pwd_context.verify(plain_password, hashed_password)

def get_password_hash(password):
    return pwd_context.hash(password)

def dummy_verify():
    # Mesmo custo de um verify real, usado quando o email não existe.
    pwd_context.dummy_verify()


# --- SESSÃO (token assinado, sem armazenamento no servidor) ---
SESSION_MAX_AGE_SECONDS = 60 * 60 * 24 * SESSION_MAX_AGE_DAYS

def create_session(user_id: str) -> str:
    expire = datetime.now(timezone.utc) + timedelta(seconds=SESSION_MAX_AGE_SECONDS)
    to_encode = {"sub": user_id, "exp": expire}
    return jwt.encode(to_encode, SESSION_SECRETS[0], algorithm=SESSION_ALGORITHM)

def resolve_session(token: Optional[str]) -> Optional[str]:
    """Devolve o id do usuário do token, ou None para qualquer token ausente/inválido."""
    if not token:
        return None
    for secret in SESSION_SECRETS:
        try:
            payload = jwt.decode(token, secret, algorithms=[SESSION_ALGORITHM])
        except JWTError:
            continue
        user_id = payload.get("sub")
        return user_id if isinstance(user_id, str) and user_id else None
    return None

def commit_session(response: Response, user_id: str) -> str:
    token = create_session(user_id)
    response.set_cookie(
        key=SESSION_COOKIE_NAME,
        value=token,
        max_age=SESSION_MAX_AGE_SECONDS,
        path="/",
        httponly=True,
        samesite="lax",
        secure=IS_PRODUCTION,
    )
    return token

def destroy_session(response: Response) -> None:
    response.delete_cookie(
        key=SESSION_COOKIE_NAME,
        path="/",
        httponly=True,
        samesite="lax",
        secure=IS_PRODUCTION,
    )
