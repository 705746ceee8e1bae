"""Click accounting for registry shortcodes

Classes:
    ClickRecorder:
        Append-only click log writer bound to one UrlRegistry.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Optional

from beartype import beartype

from urlregistry.constants import DEFAULT_CLICK_SOURCE, CLICK_RECORDED
from urlregistry.core.query import describe_client
from urlregistry.models import ClickEventModel

if TYPE_CHECKING:
    from urlregistry.core.registry import UrlRegistry


logger = logging.getLogger(__name__)


class ClickRecorder:
    """Append visit events to a registry's click lists

    The recorder does not re-check expiry. A caller that resolved a shortcode
    a moment ago must still be able to count the visit even if the link
    expired in between.
    """

    def __init__(self, registry: UrlRegistry):
        self.registry = registry

    @beartype
    def record_click(
        self,
        shortcode: str,
        source: str = DEFAULT_CLICK_SOURCE,
        client_signature: Optional[str] = None,
        location: Optional[str] = None,
    ) -> ClickEventModel:
        """Append a click event and persist it

        Args:
            shortcode (str):
                Shortcode that was visited.

            source (str):
                Origin tag, e.g. 'direct_access' or 'statistics_page'.

            client_signature (Optional[str]):
                Raw client string (user-agent like), stored as given.

            location (Optional[str]):
                Location descriptor. Derived from client_signature when omitted.

        Returns:
            ClickEventModel: The appended event.

        Raises:
            PersistenceFailureError:
                If the durable store rejected the save. The event is not kept.

        Example:
            >>> recorder.record_click('abc123', 'direct_access', 'Mozilla/5.0 (X11; Linux) Chrome/120.0')
            ClickEventModel(timestamp=..., source='direct_access', location='Chrome Browser', ...)
        """
        if location is None:
            location = describe_client(client_signature)

        event, click_count = self.registry.append_click(shortcode, source, location, client_signature)

        logger.info(
            'Click recorded.',
            extra={'shortcode': shortcode, 'source': source, 'clickCount': click_count, 'event': CLICK_RECORDED},
        )
        return event
