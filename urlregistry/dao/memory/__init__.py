from urlregistry.dao.memory.registry_memory_dao import RegistryMemoryDAO


__all__ = ['RegistryMemoryDAO']
