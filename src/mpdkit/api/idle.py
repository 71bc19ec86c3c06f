"""MPD client for change notifications.

The idle connection blocks in ``idle`` until the server reports a change. It
is the only push channel; everything else is fetched on demand.

Example:
    async with IdleClient() as idle:
        while True:
            event = await idle.idle_for_events([IdleEvent.PLAYER, IdleEvent.MIXER])
            ...
"""

import asyncio
import logging
from collections.abc import Iterable

from mpdkit.api.client import MpdClient
from mpdkit.api.connection import IDLE_MODE
from mpdkit.api.protocol import parse_idle_event
from mpdkit.models.types import IdleEvent

logger = logging.getLogger(__name__)


class IdleClient(MpdClient):
    """Client waiting for subsystem changes on its own connection."""

    mode = IDLE_MODE

    async def idle_for_events(self, mask: Iterable[IdleEvent]) -> IdleEvent:
        """Wait until one of the subsystems in ``mask`` changes.

        Cancelling the waiting task closes the connection, so it has to be
        reconnected before the next wait.

        Returns:
            The first subsystem the server reported.

        Raises:
            MalformedResponseError: If the response has no ``changed`` line
                or names an unknown subsystem.
        """
        command = " ".join(["idle", *(event.value for event in mask)])
        try:
            lines = await self._run(command)
        except asyncio.CancelledError:
            logger.debug("Idle wait cancelled, closing connection")
            self._connection.close()
            raise

        event = parse_idle_event(lines)
        logger.debug("MPD idle event: %s", event.value)
        return event
