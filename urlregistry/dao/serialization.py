"""Conversion between registry state and plain JSON-compatible documents.

The document shape mirrors the browser demo's two local storage keys:

    {
        "shortened_urls": [ {<record>}, ... ],
        "url_clicks": { "<shortcode>": [ {<click>}, ... ], ... }
    }
"""

from typing import Any

from urlregistry.constants import Storage
from urlregistry.dao.exceptions import DataStoreError
from urlregistry.models import UrlRecordModel, ClickEventModel
from urlregistry.types import Records, ClickIndex, RegistryState


def dump_state(records: Records, clicks: ClickIndex) -> dict[str, Any]:
    return {
        Storage.RECORDS: [record.to_dict() for record in records],
        Storage.CLICKS: {shortcode: [click.to_dict() for click in events] for shortcode, events in clicks.items()},
    }


def load_state(document: dict[str, Any]) -> RegistryState:
    """Rebuild registry state from a document produced by `dump_state()`.

    Raises:
        DataStoreError: If the document is missing fields or holds malformed values.
    """
    if not isinstance(document, dict):
        raise DataStoreError(f'Stored registry state must be a mapping (given type: {type(document)}).')

    try:
        records = [UrlRecordModel.from_dict(item) for item in document.get(Storage.RECORDS) or []]
        clicks = {
            shortcode: [ClickEventModel.from_dict(item) for item in events]
            for shortcode, events in (document.get(Storage.CLICKS) or {}).items()
        }
    except (KeyError, TypeError, ValueError, AttributeError) as e:
        raise DataStoreError(f'Stored registry state is corrupted ({e!r}).') from e

    return records, clicks
