from urlregistry.core.query import QueryService, RegistrySummary, describe_client
from urlregistry.core.clicks import ClickRecorder
from urlregistry.core.registry import UrlRegistry


__all__ = [
    'UrlRegistry',
    'ClickRecorder',
    'QueryService',
    'RegistrySummary',
    'describe_client',
]
