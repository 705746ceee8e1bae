"""Data Access Object (DAO) implementation storing registry state in a JSON file

Responsibilities:
    - Load the registry state from a single JSON document;
    - Replace the document atomically on every save;
    - Translate filesystem and decoding errors into DataStoreError.

Classes:
    RegistryFileDAO:
        DAO for storing and retrieving registry state in a local JSON file.

Example:
    >>> dao = RegistryFileDAO('/var/lib/urlregistry/state.json')
    >>> records, clicks = dao.load()   # ([], {}) when the file doesn't exist yet
    >>> dao.save(records, clicks)
"""

import os
import json
import logging
import tempfile
from pathlib import Path

from beartype import beartype

from urlregistry.dao.base import RegistryBaseDAO
from urlregistry.dao.exceptions import DataStoreError
from urlregistry.dao.serialization import dump_state, load_state
from urlregistry.models import UrlRecordModel, ClickEventModel
from urlregistry.types import RegistryState


logger = logging.getLogger(__name__)


class RegistryFileDAO(RegistryBaseDAO):
    """JSON file backed durable store

    Attributes:
        path (Path):
            Location of the JSON state document.

    Methods:
        load(**kwargs) -> RegistryState:
            Read and decode the state document. A missing file is an empty registry.
            Raises DataStoreError on unreadable or corrupted files.

        save(records, clicks, **kwargs) -> None:
            Write the document to a temporary file in the same directory and
            move it over the previous one with os.replace().
            Raises DataStoreError when the file can't be written.
    """

    def __init__(self, path: str | os.PathLike):
        self.path = Path(path)

    def load(self, **kwargs) -> RegistryState:
        if not self.path.exists():
            logger.debug('State file does not exist yet. Starting with an empty registry.', extra={'statePath': str(self.path)})
            return [], {}

        try:
            with self.path.open('r', encoding='utf-8') as f:
                document = json.load(f)
        except OSError as e:
            raise DataStoreError(f"Can't read registry state from {self.path}.") from e
        except json.JSONDecodeError as e:
            raise DataStoreError(f'Registry state in {self.path} is not valid JSON.') from e

        return load_state(document)

    @beartype
    def save(self, records: list[UrlRecordModel], clicks: dict[str, list[ClickEventModel]], **kwargs) -> None:
        document = dump_state(records, clicks)
        directory = self.path.parent

        # NOTE: The document is written to a sibling temporary file first and
        #       then renamed over the old one. os.replace() is atomic on POSIX and
        #       Windows, so readers never observe a half written state file and a
        #       failed save leaves the previous state intact.
        tmp_name = None
        try:
            directory.mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile('w', encoding='utf-8', dir=directory, prefix=f'.{self.path.name}.', delete=False) as tmp:
                tmp_name = tmp.name
                json.dump(document, tmp)
                tmp.flush()
                os.fsync(tmp.fileno())
            os.replace(tmp_name, self.path)
        except OSError as e:
            if tmp_name is not None and os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise DataStoreError(f"Can't write registry state to {self.path}.") from e
