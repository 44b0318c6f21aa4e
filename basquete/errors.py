"""Taxonomia de erros de domínio e os handlers que os convertem em respostas HTTP.

Falhas de validação e de regra de negócio viram respostas estruturadas
(``{"error": ..., "field_errors": {...}}``); apenas falhas inesperadas chegam
ao handler genérico, que registra o traceback e devolve uma mensagem neutra.
"""
import logging
from typing import Dict, List, Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, RedirectResponse

from .config import LOGIN_PATH

logger = logging.getLogger(__name__)

FieldErrors = Dict[str, List[str]]

GENERIC_ERROR_MESSAGE = "Ocorreu um erro inesperado"


class AppError(Exception):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Requisição inválida"

    def __init__(self, message: Optional[str] = None, field_errors: Optional[FieldErrors] = None):
        self.message = message or self.default_message
        self.field_errors = field_errors or {}
        super().__init__(self.message)

    def to_body(self) -> dict:
        return {"error": self.message, "field_errors": self.field_errors}


class ValidationError(AppError):
    status_code = status.HTTP_422_UNPROCESSABLE_ENTITY
    default_message = "Falha na validação"

    @classmethod
    def for_field(cls, field: str, message: str, summary: Optional[str] = None) -> "ValidationError":
        return cls(summary or message, {field: [message]})


class Unauthenticated(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Sessão inválida ou expirada"


class InvalidCredentials(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Email ou senha incorretos"


class Forbidden(AppError):
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Acesso negado"


class NotFound(AppError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Registro não encontrado"


class ConstraintViolation(AppError):
    status_code = status.HTTP_409_CONFLICT
    default_message = "Registro duplicado"


class DuplicateEmail(ConstraintViolation):
    default_message = "Este email já está cadastrado"

    def __init__(self, field: str = "email", message: Optional[str] = None):
        super().__init__(message, {field: ["Email já está em uso"]})


class InvalidTransition(AppError):
    status_code = status.HTTP_409_CONFLICT
    default_message = "Transição de status inválida"


def _field_name(error: dict) -> str:
    if error.get("type") in ("union_tag_invalid", "union_tag_not_found"):
        return "intent"
    names = [part for part in error.get("loc", ()) if isinstance(part, str)]
    # loc começa por "body"/"query"; o último nome é o campo do formulário.
    names = names[1:] if len(names) > 1 else names
    return names[-1] if names else "__all__"


def field_errors_from_pydantic(errors) -> FieldErrors:
    result: FieldErrors = {}
    for error in errors:
        result.setdefault(_field_name(error), []).append(error.get("msg", "Valor inválido"))
    return result


def install_error_handlers(app: FastAPI) -> None:

    @app.exception_handler(Unauthenticated)
    async def unauthenticated_handler(request: Request, exc: Unauthenticated):
        return RedirectResponse(LOGIN_PATH, status_code=status.HTTP_303_SEE_OTHER)

    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError):
        logger.warning("%s %s rejeitado: %s", request.method, request.url.path, exc.message)
        return JSONResponse(status_code=exc.status_code, content=exc.to_body())

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        error = ValidationError(field_errors=field_errors_from_pydantic(exc.errors()))
        return JSONResponse(status_code=error.status_code, content=error.to_body())

    @app.exception_handler(Exception)
    async def internal_error_handler(request: Request, exc: Exception):
        logger.exception("Erro inesperado em %s %s", request.method, request.url.path)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": GENERIC_ERROR_MESSAGE, "field_errors": {}},
        )
