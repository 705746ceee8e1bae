"""In-memory implementation of RegistryBaseDAO.

Keeps a private snapshot of the last saved state inside the process. Useful
for tests, demos and single-process deployments where durability across
restarts is not required.

Example:
    >>> dao = RegistryMemoryDAO()
    >>> dao.load()
    ([], {})
"""

from beartype import beartype

from urlregistry.dao.base import RegistryBaseDAO
from urlregistry.dao.exceptions import DataStoreError
from urlregistry.models import UrlRecordModel, ClickEventModel
from urlregistry.types import Records, ClickIndex, RegistryState


class RegistryMemoryDAO(RegistryBaseDAO):
    """Process-local durable store

    Attributes:
        fail_saves (bool):
            When True, every save() raises DataStoreError. Lets callers
            exercise the registry's rollback path without a real outage.
        saves (int):
            Number of successful save() calls.
    """

    def __init__(self, records: list[UrlRecordModel] | None = None, clicks: dict[str, list[ClickEventModel]] | None = None):
        self._records: Records = list(records or [])
        self._clicks: ClickIndex = {shortcode: list(events) for shortcode, events in (clicks or {}).items()}
        self.fail_saves = False
        self.saves = 0

    def load(self, **kwargs) -> RegistryState:
        return list(self._records), {shortcode: list(events) for shortcode, events in self._clicks.items()}

    @beartype
    def save(self, records: list[UrlRecordModel], clicks: dict[str, list[ClickEventModel]], **kwargs) -> None:
        if self.fail_saves:
            raise DataStoreError('In-memory store is configured to reject saves.')

        # Models are frozen, copying the containers is enough to detach the snapshot
        self._records = list(records)
        self._clicks = {shortcode: list(events) for shortcode, events in clicks.items()}
        self.saves += 1
