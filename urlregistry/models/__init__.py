from urlregistry.models.click_event_model import ClickEventModel
from urlregistry.models.url_record_model import UrlRecordModel, ShortenedUrl, UrlRecordWithStats


__all__ = [
    'ClickEventModel',
    'UrlRecordModel',
    'ShortenedUrl',
    'UrlRecordWithStats',
]
