import logging
import math
from dataclasses import dataclass, field
from typing import Any, Generic, List, Mapping, Type, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

logger = logging.getLogger(__name__)

T = TypeVar("T")
F = TypeVar("F", bound=BaseModel)


def total_pages(total_count: int, limit: int) -> int:
    return math.ceil(total_count / limit) if limit > 0 else 0


@dataclass
class Page(Generic[T]):
    items: List[T] = field(default_factory=list)
    total_count: int = 0
    current_page: int = 1
    limit: int = 20

    @property
    def total_pages(self) -> int:
        return total_pages(self.total_count, self.limit)

    def pagination(self) -> dict:
        return {
            "total_count": self.total_count,
            "total_pages": self.total_pages,
            "current_page": self.current_page,
        }


def parse_filters(filters_cls: Type[F], params: Mapping[str, Any]) -> F:
    """Valida os filtros da listagem; qualquer valor inválido devolve os filtros padrão.

    Valores vazios (``?search=``) são tratados como ausentes.
    """
    raw = {key: value for key, value in params.items() if value not in (None, "")}
    try:
        return filters_cls.model_validate(raw)
    except PydanticValidationError:
        logger.debug("Filtros inválidos para %s, usando padrão: %s", filters_cls.__name__, raw)
        return filters_cls()
