from typing import Any, TypeAlias

from urlregistry.models import UrlRecordModel, ClickEventModel


# Type aliases for registry state
Records: TypeAlias = list[UrlRecordModel]
ClickIndex: TypeAlias = dict[str, list[ClickEventModel]]
RegistryState: TypeAlias = tuple[Records, ClickIndex]

# Type aliases for Python dictionaries
AppConfig: TypeAlias = dict[str, Any]
