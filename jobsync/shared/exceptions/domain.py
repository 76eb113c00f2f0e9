"""
Excepciones relacionadas con la lógica de dominio.
"""
from typing import Any

from jobsync.shared.exceptions.base import AppException


class DomainException(AppException):
    """Excepción base para errores de dominio."""

    def __init__(self, message: str, error_code: str = "DOMAIN_ERROR", details=None):
        super().__init__(
            message=message,
            status_code=400,
            error_code=error_code,
            details=details
        )


class EntityNotFoundException(DomainException):
    """Excepción cuando no se encuentra una entidad."""

    def __init__(self, entity_name: str, entity_id: Any):
        super().__init__(
            message=f"{entity_name} con ID {entity_id} no encontrado",
            error_code="ENTITY_NOT_FOUND",
            details={"entity": entity_name, "id": str(entity_id)}
        )
        self.status_code = 404


class ValidationException(DomainException):
    """Excepción para errores de validación."""

    def __init__(self, message: str, field: str = None):
        details = {"field": field} if field else None
        super().__init__(
            message=message,
            error_code="VALIDATION_ERROR",
            details=details
        )


class ConfigurationException(AppException):
    """Falta configuracion obligatoria (token, coleccion, URL del feed)."""

    def __init__(self, setting_name: str):
        super().__init__(
            message=f"Falta configuracion obligatoria: {setting_name}",
            status_code=500,
            error_code="CONFIGURATION_ERROR",
            details={"setting": setting_name}
        )


class SyncAlreadyRunningException(DomainException):
    """Excepcion cuando ya hay una sincronizacion en curso."""

    def __init__(self):
        super().__init__(
            message="Ya hay una sincronizacion en curso. Intenta de nuevo en unos minutos.",
            error_code="SYNC_ALREADY_RUNNING",
        )
        self.status_code = 409


class StoreOperationException(AppException):
    """El CMS destino rechazo una operacion solicitada desde la UI."""

    def __init__(self, message: str, status_code: int, body: str = ""):
        super().__init__(
            message=message,
            status_code=status_code if 400 <= status_code < 600 else 502,
            error_code="STORE_OPERATION_FAILED",
            details={"upstream_status": status_code, "body": body[:500]}
        )
