"""Utilidades de URL (sin dependencias de I/O)."""

from __future__ import annotations

from typing import Iterable
from urllib.parse import quote, urlsplit, urlunsplit


def is_root(url: str) -> bool:
    """True si la URL no tiene más segmentos de path que recortar."""

    return urlsplit(url).path.strip("/") == ""


def pop_segment(url: str) -> str:
    """Quita el último segmento del path (`/v2/x/y` -> `/v2/x/`).

    Query y fragmento se descartan: el padre es otro recurso.
    """

    parts = urlsplit(url)
    path = parts.path.rstrip("/")
    parent = path.rsplit("/", 1)[0] + "/"
    return urlunsplit((parts.scheme, parts.netloc, parent, "", ""))


def extend(url: str, segments: Iterable[str]) -> str:
    """Añade segmentos (escapados) al path de `url`."""

    parts = urlsplit(url)
    path = parts.path.rstrip("/")
    for segment in segments:
        path = f"{path}/{quote(str(segment), safe='')}"
    return urlunsplit((parts.scheme, parts.netloc, path or "/", parts.query, ""))


def force_scheme(url: str, scheme: str) -> str:
    parts = urlsplit(url)
    return urlunsplit((scheme, parts.netloc, parts.path, parts.query, parts.fragment))
