import pytest

from urlregistry.core import UrlRegistry, QueryService
from urlregistry.dao import RegistryMemoryDAO


BASE_URL = 'https://sho.rt'


@pytest.fixture
def dao():
    """Provide an empty in-memory durable store."""
    return RegistryMemoryDAO()


@pytest.fixture
def registry(dao):
    """Create a UrlRegistry over the in-memory store."""
    return UrlRegistry(dao, base_url=BASE_URL)


@pytest.fixture
def query(registry):
    return QueryService(registry)
