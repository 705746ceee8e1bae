from urlregistry.dao.base import RegistryBaseDAO
from urlregistry.dao.memory import RegistryMemoryDAO
from urlregistry.dao.file import RegistryFileDAO


__all__ = [
    'RegistryBaseDAO',
    'RegistryMemoryDAO',
    'RegistryFileDAO',
]
