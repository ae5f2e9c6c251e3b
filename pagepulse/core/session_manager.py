# ==============================================================================
# Session Manager
# ==============================================================================
"""
Session lifecycle state machine.

States are tracked purely by whether a collector-assigned session id is set:

    NoSession --create_session()--> (creating) --id assigned--> Active
    Active --end_session() / inactivity timeout--> NoSession

"Creating" is a transient in-flight condition, not a durable state. Handlers
interleave at await points, so every operation re-checks the session id
instead of relying on state read before a network call.

Ending a session is fire-and-forget: the residual event queue is attached to
the end request and the local state is cleared immediately, whatever the
delivery outcome.
"""

import logging
from typing import Optional

from pagepulse.base import PageEnvironment
from pagepulse.core.activity import ActivityMonitor
from pagepulse.core.batcher import EventBatcher
from pagepulse.core.delivery import DeliveryClient
from pagepulse.core.models import Session, SessionStartContext
from pagepulse.core.visitor import VisitorIdentity

logger = logging.getLogger(__name__)


class SessionManager:
    """
    Owns the session and orchestrates identity, activity, batching and delivery.

    Args:
        project_id: Project identifier sent with the session
        environment: Page information provider
        visitor: Visitor identity
        delivery: Collector operations
        activity: Inactivity timer; its timeout ends the session
        batcher: Event queue, drained into the end-of-session request
    """

    def __init__(
        self,
        project_id: str,
        environment: PageEnvironment,
        visitor: VisitorIdentity,
        delivery: DeliveryClient,
        activity: ActivityMonitor,
        batcher: EventBatcher,
    ) -> None:
        self._project_id = project_id
        self._environment = environment
        self._visitor = visitor
        self._delivery = delivery
        self._activity = activity
        self._batcher = batcher
        self._session: Optional[Session] = None
        self._creating = False

        self._activity.register(self.end_session)

    @property
    def session(self) -> Session | None:
        return self._session

    @property
    def session_id(self) -> str | None:
        return self._session.id if self._session is not None else None

    @property
    def is_active(self) -> bool:
        return self.session_id is not None

    @property
    def creating(self) -> bool:
        return self._creating

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    async def create_session(self) -> str | None:
        """
        Open a session unless one is already active or being created.

        On success the collector-assigned id is stored and the inactivity
        timer starts. On failure the manager stays in NoSession.

        Returns:
            The active session id, or None
        """
        if self.is_active or self._creating:
            return self.session_id

        context = SessionStartContext.from_page(
            visitor_id=self._visitor.get_or_create(),
            project_id=self._project_id,
            page=self._environment.page_info(),
        )
        session = Session(start_context=context)
        self._session = session

        self._creating = True
        try:
            session_id = await self._delivery.create_session(context.to_payload())
        finally:
            self._creating = False

        if session_id is None:
            self._session = None
            logger.debug("Session creation failed")
            return None

        session.id = session_id
        logger.debug("Session %s created", session_id)
        self._activity.reset()
        return session_id

    async def update_session(self) -> None:
        """
        Report the current page for the active session.

        Creates a session instead if none is active. Does not reset the
        inactivity timer.
        """
        session_id = self.session_id
        if session_id is None:
            await self.create_session()
            return

        payload = self._environment.page_info().to_update_payload()
        await self._delivery.update_session(session_id, payload)

    def end_session(self) -> None:
        """
        Close the active session, sending any queued events with it.

        The session id is cleared immediately; delivery is not awaited.
        """
        session_id = self.session_id
        if session_id is None:
            return

        events = self._batcher.drain()
        self._delivery.end_session(
            session_id, {"events": [event.to_payload() for event in events]}
        )
        self._session = None
        self._activity.cancel()
        logger.debug("Session %s ended with %d residual events", session_id, len(events))
