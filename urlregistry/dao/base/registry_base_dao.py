"""Abstract base class for registry data access objects (DAOs).

This class establishes a consistent contract for all durable stores backing a
UrlRegistry, regardless of the underlying storage mechanism (e.g. process
memory, a JSON file, Redis).

Responsibilities:
    - Load the full registry state (records and click lists) at start-up.
    - Save the full registry state after every mutation.
    - Standardize failure signaling via DataStoreError.

Example:
    Typical usage with a datastore-specific implementation:

        >>> from urlregistry.dao.file import RegistryFileDAO

        >>> dao = RegistryFileDAO('state.json')
        >>> records, clicks = dao.load()
        >>> dao.save(records, clicks)
"""

from abc import ABC, abstractmethod

from urlregistry.types import Records, ClickIndex, RegistryState


class RegistryBaseDAO(ABC):
    """Interface for registry state data access objects (DAOs).

    Methods:
        load(**kwargs) -> tuple[list[UrlRecordModel], dict[str, list[ClickEventModel]]]:
            Return every stored record (in creation order) and the click
            lists keyed by shortcode. An empty store returns ([], {}).
            Raises DataStoreError on connection, read or decode failure.

        save(records, clicks, **kwargs) -> None:
            Replace the stored state with the given records and click lists.
            Raises DataStoreError on connection or write failure.

    Subclassing:
        Datastore-specific implementations must extend this class and
        implement both abstract methods.

    NOTE:
        - The registry treats the store as opaque. Implementations must not
          keep references to the passed containers, because the registry
          mutates them in place after the call returns.
        - `save()` must either store the whole state or fail. A partially
          written state would diverge from the registry's rolled back memory.
    """

    @abstractmethod
    def load(self, **kwargs) -> RegistryState:
        """Load the registry state from the data store.

        Args:
            **kwargs:
                Additional keyword arguments, used by data store.

        Returns:
            tuple[list[UrlRecordModel], dict[str, list[ClickEventModel]]]:
                Records in creation order and click lists keyed by shortcode.

        Raises:
            DataStoreError:
                If there is an error in the data store.
        """
        pass

    @abstractmethod
    def save(self, records: Records, clicks: ClickIndex, **kwargs) -> None:
        """Persist the registry state to the data store.

        Args:
            records (list[UrlRecordModel]):
                All records in creation order.

            clicks (dict[str, list[ClickEventModel]]):
                Click lists keyed by shortcode, each in append order.

            **kwargs:
                Additional keyword arguments, used by data store.

        Raises:
            DataStoreError:
                If there is an error in the data store.
        """
        pass
