from urlregistry.core import UrlRegistry, ClickRecorder, QueryService, RegistrySummary, describe_client
from urlregistry.models import UrlRecordModel, ClickEventModel, ShortenedUrl, UrlRecordWithStats
from urlregistry.bootstrap import build_dao, build_registry


__all__ = [
    'UrlRegistry',
    'ClickRecorder',
    'QueryService',
    'RegistrySummary',
    'describe_client',
    'UrlRecordModel',
    'ClickEventModel',
    'ShortenedUrl',
    'UrlRecordWithStats',
    'build_dao',
    'build_registry',
]
