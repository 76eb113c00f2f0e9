"""
Utilidades de fechas para el mapeo de ofertas.
"""
from datetime import date, datetime, timezone
from typing import Any, Optional

# Formatos aceptados ademas de ISO 8601 (orden = prioridad)
_FALLBACK_FORMATS = (
    "%Y/%m/%d",
    "%Y/%m/%d %H:%M:%S",
    "%m/%d/%Y",
    "%m/%d/%Y %H:%M:%S",
    "%d %b %Y",
    "%b %d, %Y",
    "%a, %d %b %Y %H:%M:%S %Z",
)


def _to_utc(dt: datetime) -> datetime:
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def parse_datetime(value: Any) -> Optional[datetime]:
    """
    Intenta interpretar un valor como fecha/hora.

    Acepta datetime, date, epoch en milisegundos (int/float) y strings en
    ISO 8601 o en alguno de los formatos de _FALLBACK_FORMATS.
    Nunca lanza: retorna None si no se puede interpretar.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, datetime):
        return _to_utc(value)
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day, tzinfo=timezone.utc)
    if isinstance(value, (int, float)):
        try:
            return datetime.fromtimestamp(value / 1000.0, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            return None

    raw = str(value).strip()
    if not raw:
        return None

    try:
        return _to_utc(datetime.fromisoformat(raw.replace("Z", "+00:00")))
    except ValueError:
        pass

    for fmt in _FALLBACK_FORMATS:
        try:
            return _to_utc(datetime.strptime(raw, fmt))
        except ValueError:
            continue
    return None


def to_iso_z(dt: datetime) -> str:
    """Serializa a ISO 8601 UTC con milisegundos y sufijo 'Z'."""
    dt_utc = _to_utc(dt)
    return dt_utc.strftime("%Y-%m-%dT%H:%M:%S.") + f"{dt_utc.microsecond // 1000:03d}Z"


def parse_to_iso(value: Any) -> Any:
    """
    Normaliza una fecha del feed a ISO 8601.

    Si el valor no se puede interpretar se devuelve sin cambios.
    """
    parsed = parse_datetime(value)
    if parsed is None:
        return value
    return to_iso_z(parsed)
