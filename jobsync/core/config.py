"""
Configuracion central de la aplicacion.
Gestiona variables de entorno y configuraciones globales.

La instancia global `settings` solo la usa la capa web (FastAPI, eventos,
dependencias). El motor de sincronizacion recibe un `SyncConfig` explicito
en su constructor y nunca lee `settings` directamente.
"""
import json
from dataclasses import dataclass
from typing import List, Optional

from pydantic import Field, computed_field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """
    Clase de configuracion de la aplicacion.
    Lee variables de entorno y proporciona valores por defecto.
    """

    # Configuracion de la aplicacion
    APP_NAME: str = Field(default="Webflow Job Sync")
    APP_VERSION: str = Field(default="1.0.0")
    DEBUG: bool = Field(default=False)
    ENVIRONMENT: str = Field(default="production")

    # Configuracion del servidor
    HOST: str = Field(default="0.0.0.0")
    PORT: int = Field(default=8000)

    # CORS (acepta lista JSON o "*" para todos los origenes)
    CORS_ORIGINS: str = Field(default="*")

    # Webflow CMS
    WEBFLOW_API_TOKEN: str = Field(default="")
    WEBFLOW_API_BASE_URL: str = Field(default="https://api.webflow.com/v2")
    WEBFLOW_API_VERSION: str = Field(default="2.0.0")
    WEBFLOW_TIMEOUT_S: float = Field(default=30.0)
    WEBFLOW_COLLECTION_ID: str = Field(default="")
    WEBFLOW_LOCATION_COLLECTION_ID: str = Field(default="")
    WEBFLOW_CATEGORY_COLLECTION_ID: str = Field(default="")
    WEBFLOW_COMMUNITY_COLLECTION_ID: str = Field(default="")
    WEBFLOW_SITE_ID: str = Field(default="")

    # Feed externo de ofertas
    JOB_FEED_URL: str = Field(default="")
    JOB_FEED_TIMEOUT_S: float = Field(default=30.0)
    JOB_FEED_MAX_ATTEMPTS: int = Field(default=3)
    JOB_FEED_BACKOFF_BASE_S: float = Field(default=1.0)
    JOB_FEED_BACKOFF_MAX_S: float = Field(default=5.0)

    # Sincronizacion
    # 0 desactiva la sincronizacion periodica (solo disparo manual)
    SYNC_INTERVAL_MINUTES: int = Field(default=0)
    SYNC_MAX_INVALID_FIELDS_FOR_RETRY: int = Field(default=3)

    # Logging
    LOG_LEVEL: str = Field(default="INFO")
    LOG_FILE: str = Field(default="logs/app.log")

    @computed_field
    @property
    def is_development(self) -> bool:
        """Indica si el entorno es de desarrollo."""
        return self.ENVIRONMENT.lower() == "development"

    class Config:
        """Configuracion de Pydantic."""
        env_file = ".env"
        case_sensitive = True
        extra = "ignore"  # Ignorar campos extra del .env


@dataclass(frozen=True)
class SyncConfig:
    """
    Configuracion inmutable de una corrida de sincronizacion.

    - collection_id: coleccion destino (eventos/ofertas)
    - location_collection_id: coleccion de ubicaciones usada para referencias
    - site_id: sitio a publicar tras cambios de visibilidad (opcional)
    - max_invalid_fields_for_retry: umbral de campos invalidos para reintentar
    """

    collection_id: str
    location_collection_id: Optional[str] = None
    site_id: Optional[str] = None
    max_invalid_fields_for_retry: int = 3

    @classmethod
    def from_settings(cls, s: "Settings") -> "SyncConfig":
        return cls(
            collection_id=s.WEBFLOW_COLLECTION_ID,
            location_collection_id=s.WEBFLOW_LOCATION_COLLECTION_ID or None,
            site_id=s.WEBFLOW_SITE_ID or None,
            max_invalid_fields_for_retry=s.SYNC_MAX_INVALID_FIELDS_FOR_RETRY,
        )


def get_cors_origins(cors_string: str) -> List[str]:
    """
    Parsea la configuracion de CORS.
    Acepta "*" para todos los origenes o una lista JSON.
    """
    if cors_string == "*":
        return ["*"]
    try:
        return json.loads(cors_string)
    except json.JSONDecodeError:
        # Si no es JSON valido, retornar como lista simple
        return [origin.strip() for origin in cors_string.split(",")]


# Instancia global de configuracion
settings = Settings()
