"""Parámetros de consulta REST (filtros, orden, paginación).

Se conserva el orden de inserción: algunos servicios son sensibles al orden
de los parámetros en la continuación por marcador.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterator, Optional


def _to_param(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, Enum):
        return str(value.value)
    return str(value)


@dataclass
class Query:
    """Secuencia ordenada de pares (clave, valor-string)."""

    items: list[tuple[str, str]] = field(default_factory=list)

    def push(self, key: str, value: Any) -> "Query":
        self.items.append((key, _to_param(value)))
        return self

    def get(self, key: str) -> Optional[str]:
        """Último valor para `key` (o None)."""

        for k, v in reversed(self.items):
            if k == key:
                return v
        return None

    def without(self, key: str) -> "Query":
        return Query([(k, v) for k, v in self.items if k != key])

    def copy(self) -> "Query":
        return Query(list(self.items))

    def __iter__(self) -> Iterator[tuple[str, str]]:
        return iter(self.items)

    def __len__(self) -> int:
        return len(self.items)

    def __contains__(self, key: object) -> bool:
        return any(k == key for k, _ in self.items)


@dataclass(frozen=True)
class Sort:
    """Petición de ordenación por un campo."""

    field: str
    direction: str = "asc"

    @classmethod
    def asc(cls, field: Any) -> "Sort":
        return cls(_to_param(field), "asc")

    @classmethod
    def desc(cls, field: Any) -> "Sort":
        return cls(_to_param(field), "desc")

    def apply(self, query: Query) -> Query:
        return query.push("sort_key", self.field).push("sort_dir", self.direction)
