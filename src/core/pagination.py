"""Iteración paginada y perezosa de recursos.

Por qué un iterador propio:
- Convierte una consulta filtrada en un flujo de objetos tipados, siguiendo
  el marcador de continuación sin que el llamador lo vea.
- Tira de la red solo cuando se consume: nunca hay más de una página en vuelo.
"""

from __future__ import annotations

import logging
from collections import deque
from typing import Any, Callable, Generic, Iterator, Optional, Sequence, TypeVar

from core.errors import ResourceNotFound, TooManyItems
from core.query import Query, Sort

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_LIMIT = 50


def _default_marker(item: Any) -> str:
    return item.id


class ResourceIterator(Generic[T]):
    """Flujo de recursos en el orden del servidor, solo hacia delante.

    Para reiniciar hay que construir otro iterador.
    """

    def __init__(
        self,
        fetch_page: Callable[[Query], Sequence[T]],
        query: Optional[Query] = None,
        *,
        can_paginate: bool = True,
        page_size: int = DEFAULT_LIMIT,
        marker_of: Callable[[T], str] = _default_marker,
    ) -> None:
        if page_size < 1:
            raise ValueError("page_size must be positive")
        self._fetch_page = fetch_page
        self._query = query.copy() if query is not None else Query()
        self._can_paginate = can_paginate
        self._page_size = page_size
        self._marker_of = marker_of
        self._pending: deque[T] = deque()
        self._marker: Optional[str] = None
        self._exhausted = False
        self._pages = 0

    @property
    def can_paginate(self) -> bool:
        return self._can_paginate

    @property
    def exhausted(self) -> bool:
        return self._exhausted and not self._pending

    @property
    def pages_fetched(self) -> int:
        return self._pages

    def __iter__(self) -> "ResourceIterator[T]":
        return self

    def __next__(self) -> T:
        if not self._pending and not self._exhausted:
            self._extend()
        if not self._pending:
            raise StopIteration
        return self._pending.popleft()

    def _extend(self) -> None:
        query = self._query.copy()
        if self._can_paginate:
            query.push("limit", self._page_size)
            if self._marker is not None:
                query.push("marker", self._marker)

        logger.debug("Fetching page %d with %s", self._pages + 1, query.items)
        items = list(self._fetch_page(query))
        self._pages += 1

        if not self._can_paginate or len(items) < self._page_size:
            self._exhausted = True
        else:
            self._marker = self._marker_of(items[-1])
        self._pending.extend(items)

    def collect_all(self) -> list[T]:
        """Drena el flujo completo; si falla una página no devuelve nada parcial."""

        try:
            return list(self)
        except Exception:
            self._pending.clear()
            raise

    def first(self) -> Optional[T]:
        return next(self, None)

    def one(self) -> T:
        """Exactamente un resultado.

        Con paginación automática se piden como mucho 2 elementos: basta para
        detectar ambigüedad sin recorrer la colección.
        """

        if self._can_paginate and self._pages == 0:
            self._page_size = 2

        result = next(self, None)
        if result is None:
            raise ResourceNotFound("Query returned no results")
        if next(self, None) is not None:
            raise TooManyItems("Query returned more than one result")
        return result


class ResourceQuery(Generic[T]):
    """Consulta encadenable sobre una colección.

    Las subclases implementan `_fetch_page` (la llamada de listado) y
    exponen filtros con `_filter`.
    """

    def __init__(self, session: Any) -> None:
        self._session = session
        self._query = Query()
        self._can_paginate = True
        self._page_size = getattr(session, "page_size", DEFAULT_LIMIT)

    @property
    def query(self) -> Query:
        return self._query.copy()

    @property
    def can_paginate(self) -> bool:
        return self._can_paginate

    def _fetch_page(self, query: Query) -> Sequence[T]:
        raise NotImplementedError

    def _prepare(self) -> Query:
        """Última oportunidad de completar la consulta antes de enviarla."""

        return self._query

    def _filter(self, key: str, value: Any) -> "ResourceQuery[T]":
        self._query.push(key, value)
        return self

    def with_marker(self, marker: str) -> "ResourceQuery[T]":
        """Añade el marcador a la petición. Desactiva la paginación automática."""

        self._can_paginate = False
        self._query.push("marker", marker)
        return self

    def with_limit(self, limit: int) -> "ResourceQuery[T]":
        """Añade el límite a la petición. Desactiva la paginación automática."""

        self._can_paginate = False
        self._query.push("limit", limit)
        return self

    def sort_by(self, sort: Sort) -> "ResourceQuery[T]":
        sort.apply(self._query)
        return self

    def into_iter(self) -> ResourceIterator[T]:
        """No se hace ninguna petición hasta empezar a iterar."""

        query = self._prepare()
        logger.debug("Fetching %s with %s", type(self).__name__, query.items)
        return ResourceIterator(
            self._fetch_page,
            query,
            can_paginate=self._can_paginate,
            page_size=self._page_size,
        )

    def __iter__(self) -> Iterator[T]:
        return self.into_iter()

    def all(self) -> list[T]:
        return self.into_iter().collect_all()

    def first(self) -> Optional[T]:
        return self.into_iter().first()

    def one(self) -> T:
        return self.into_iter().one()
