"""
Mapa de codigos de ubicacion -> ID de item de la coleccion de ubicaciones.
"""
from __future__ import annotations

import re
from typing import Dict, List, Optional

_WHITESPACE_RE = re.compile(r"\s+")


def code_variants(code: str) -> List[str]:
    """
    Formas candidatas de un codigo, en orden de especificidad.

    exacto -> minusculas -> recortado -> sin espacios. Las variantes
    recortada y sin espacios tambien se prueban en minusculas. No hay
    duplicados y el orden se conserva.
    """
    trimmed = code.strip()
    no_ws = _WHITESPACE_RE.sub("", code)
    ordered = [
        code,
        code.lower(),
        trimmed,
        trimmed.lower(),
        no_ws,
        no_ws.lower(),
    ]
    seen: Dict[str, None] = {}
    for candidate in ordered:
        if candidate and candidate not in seen:
            seen[candidate] = None
    return list(seen)


class LocationMap:
    """
    Lookup construido una vez por corrida y de solo lectura despues.

    Cada codigo se registra bajo sus variantes; la primera registracion de
    una clave gana, asi una colision tras normalizar nunca pisa a la forma
    mas especifica ya registrada.
    """

    def __init__(self) -> None:
        self._entries: Dict[str, str] = {}
        self._codes: Dict[str, str] = {}

    def register(self, code: str, item_id: str) -> None:
        if not code or not item_id:
            return
        self._codes.setdefault(code, item_id)
        for key in code_variants(code):
            self._entries.setdefault(key, item_id)

    def resolve(self, code: Optional[str]) -> Optional[str]:
        if not code:
            return None
        for key in code_variants(str(code)):
            item_id = self._entries.get(key)
            if item_id:
                return item_id
        return None

    def __len__(self) -> int:
        return len(self._codes)

    def __bool__(self) -> bool:
        return bool(self._entries)
