"""Client-side navigation state."""

import logging
from dataclasses import dataclass

from barbershop_client.domain.routing import HOME_PATH

logger = logging.getLogger(__name__)


@dataclass
class Navigator:
    """Tracks where the visitor is being sent; forced moves replace the location."""

    location: str = HOME_PATH

    def navigate(self, path: str) -> None:
        logger.info("Navigating", extra={"from": self.location, "to": path})
        self.location = path
