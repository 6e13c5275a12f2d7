"""Seguimiento de campos modificados para actualizaciones parciales.

Por qué:
- El usuario muta una vista local y `save()` envía solo lo tocado.
- "No mencionado" y "puesto a null" son cosas distintas para el servidor:
  el documento de parche marca explícitamente los campos no tocados.
"""

from __future__ import annotations

import logging
from typing import Any, ClassVar, Iterator, Mapping

from pydantic_core import to_jsonable_python

from core.resources import InnerField, InnerT, Resource

logger = logging.getLogger(__name__)


class _Unset:
    """Marcador de "campo no tocado" (distinto de `None`)."""

    _instance: ClassVar["_Unset | None"] = None

    def __new__(cls) -> "_Unset":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "UNSET"


UNSET: Any = _Unset()


class PatchDocument(Mapping[str, Any]):
    """Carga de actualización parcial: cada campo rastreable está presente.

    Un campo tiene su valor actual si fue modificado y `UNSET` si no.
    `to_body()` produce el JSON a enviar: los `UNSET` no se mencionan y los
    `None` viajan como `null`.
    """

    def __init__(self, fields: Mapping[str, Any]) -> None:
        self._fields = dict(fields)

    def __getitem__(self, key: str) -> Any:
        return self._fields[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._fields)

    def __len__(self) -> int:
        return len(self._fields)

    def is_set(self, key: str) -> bool:
        return self._fields[key] is not UNSET

    def changes(self) -> dict[str, Any]:
        return {k: v for k, v in self._fields.items() if v is not UNSET}

    def to_body(self) -> dict[str, Any]:
        return to_jsonable_python(self.changes())

    def __repr__(self) -> str:
        return f"PatchDocument({self._fields!r})"


class TrackedField(InnerField):
    """Propiedad actualizable: el setter marca el campo como sucio."""

    def __set__(self, obj: Any, value: Any) -> None:
        obj._set_field(self.name, value)


class MutableResource(Resource[InnerT]):
    """Recurso con cambios locales pendientes de guardar.

    Invariante: cada nombre en `_dirty` es un campo del snapshot que puede
    diferir del último estado cargado/guardado.
    """

    def __init__(self, session: Any, inner: InnerT) -> None:
        super().__init__(session, inner)
        self._dirty: set[str] = set()
        self._live: set[str] = set()

    @classmethod
    def tracked_fields(cls) -> tuple[str, ...]:
        names: list[str] = []
        for klass in reversed(cls.__mro__):
            for name, attr in vars(klass).items():
                if isinstance(attr, TrackedField) and name not in names:
                    names.append(name)
        return tuple(names)

    def _set_field(self, name: str, value: Any) -> None:
        # Se valida sobre una copia: si falla, ni snapshot ni `_dirty` cambian.
        updated = self._inner.model_copy()
        setattr(updated, name, value)
        self._inner = updated
        self._dirty.add(name)

    def set_field(self, name: str, value: Any) -> None:
        if name not in self.tracked_fields():
            raise AttributeError(f"{type(self).__name__}.{name} cannot be updated")
        self._set_field(name, value)

    def field_mut(self, name: str) -> list[Any]:
        """Lista viva de un campo rastreable, marcada como modificada.

        Por qué:
        - Las propiedades devuelven copias; editar la lista en sitio (append,
          remove) necesita una referencia al snapshot.
        - Los elementos nuevos se validan al construir el parche.
        """

        if name not in self.tracked_fields():
            raise AttributeError(f"{type(self).__name__}.{name} cannot be updated")
        value = getattr(self._inner, name)
        if not isinstance(value, list):
            raise TypeError(f"{type(self).__name__}.{name} is not a list")
        self._dirty.add(name)
        self._live.add(name)
        return value

    def _validate_live(self) -> None:
        # Se valida sobre una copia y el resultado se vuelca en la misma lista:
        # quien la tenga sigue viendo el snapshot.
        for name in sorted(self._live):
            current = getattr(self._inner, name)
            checked = self._inner.model_copy()
            setattr(checked, name, list(current))
            current[:] = getattr(checked, name)

    @property
    def dirty_fields(self) -> frozenset[str]:
        return frozenset(self._dirty)

    def is_dirty(self) -> bool:
        """Indica si hay campos modificados desde la última carga o guardado."""

        return bool(self._dirty)

    def build_patch(self) -> PatchDocument:
        self._validate_live()
        return PatchDocument(
            {
                name: getattr(self._inner, name) if name in self._dirty else UNSET
                for name in self.tracked_fields()
            }
        )

    def _send_patch(self, patch: PatchDocument) -> InnerT:
        """Envía el parche y devuelve el registro que responde el servidor."""

        raise NotImplementedError

    def save(self) -> None:
        """Envía el parche y resincroniza todo el snapshot con la respuesta."""

        patch = self.build_patch()
        logger.debug("Saving %r with changes to %s", self, sorted(self._dirty))
        inner = self._send_patch(patch)
        self._load(inner)
        self._dirty.clear()
        self._live.clear()

    def refresh(self) -> None:
        """Recarga el snapshot y descarta los cambios locales no guardados."""

        inner = self._fetch()
        self._load(inner)
        self._dirty.clear()
        self._live.clear()
