"""
Casos de uso de la aplicacion.
"""
from .collection_use_cases import CollectionUseCases
from .sync_use_cases import JobSyncUseCases

__all__ = ["CollectionUseCases", "JobSyncUseCases"]
