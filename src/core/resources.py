"""Base de los objetos de recurso.

Por qué composición:
- Cada recurso = sesión + registro interno (snapshot del servidor).
- Las propiedades se declaran con descriptores en vez de copiar getters a mano.
"""

from __future__ import annotations

import copy
from typing import Any, Generic, TypeVar

from pydantic import BaseModel

InnerT = TypeVar("InnerT", bound=BaseModel)


class InnerField:
    """Propiedad de solo lectura que delega en el registro interno."""

    def __init__(self, doc: str | None = None) -> None:
        self.__doc__ = doc
        self.name = ""

    def __set_name__(self, owner: type, name: str) -> None:
        self.name = name

    def __get__(self, obj: Any, objtype: type | None = None) -> Any:
        if obj is None:
            return self
        value = getattr(obj._inner, self.name)
        # Copia: mutar la lista devuelta no debe tocar el snapshot.
        if isinstance(value, (list, dict)):
            return copy.deepcopy(value)
        return value

    def __set__(self, obj: Any, value: Any) -> None:
        raise AttributeError(f"{type(obj).__name__}.{self.name} is read-only")


class Resource(Generic[InnerT]):
    """Recurso cargado: sesión compartida (solo lectura) + snapshot propio."""

    id = InnerField("Unique ID.")

    def __init__(self, session: Any, inner: InnerT) -> None:
        self._session = session
        self._inner = inner

    @property
    def session(self) -> Any:
        return self._session

    def _fetch(self) -> InnerT:
        """Obtiene el registro canónico (GET por ID)."""

        raise NotImplementedError

    def _load(self, inner: InnerT) -> None:
        self._inner = inner

    def refresh(self) -> None:
        """Recarga el snapshot. Si la petición falla, el estado local no cambia."""

        inner = self._fetch()
        self._load(inner)

    def to_dict(self) -> dict[str, Any]:
        return self._inner.model_dump(mode="json")

    def __repr__(self) -> str:
        return f"{type(self).__name__}(id={self._inner.id!r})"  # type: ignore[attr-defined]
