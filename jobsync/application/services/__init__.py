"""
Servicios de aplicacion.

Contiene el motor de sincronizacion: mapeo de ofertas, resolucion de
ubicaciones, introspeccion del esquema y reconciliacion.
"""
from jobsync.application.services.field_mapper import JobFieldMapper, map_job_to_fields
from jobsync.application.services.location_resolver import LocationResolver
from jobsync.application.services.payload_builder import PayloadBuilder, ValidationRetryPolicy
from jobsync.application.services.reconciler import JobReconciler, SyncOutcome, SyncPlan
from jobsync.application.services.schema_introspector import (
    SchemaIntrospector,
    SchemaUnavailableError,
)

__all__ = [
    "JobFieldMapper",
    "map_job_to_fields",
    "LocationResolver",
    "PayloadBuilder",
    "ValidationRetryPolicy",
    "JobReconciler",
    "SyncOutcome",
    "SyncPlan",
    "SchemaIntrospector",
    "SchemaUnavailableError",
]
