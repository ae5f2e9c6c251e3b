# ==============================================================================
# Page Lifecycle Bridge
# ==============================================================================
"""
Translates page signals into session and event operations.

    load              -> create a session, or update the active one
    visibilitychange  -> create a session if the page became visible and
                         none is active
    beforeunload      -> end the session (never blocks teardown)
    click             -> reset the activity timer; log an event for
                         relevant targets while a session is active
    mousemove/keydown/scroll -> reset the activity timer

Click relevance:
    An element is tracked if it carries data-analytics="true", or it is a
    button, a link, or an input of type submit/button. An icon glyph (<i>)
    inside another element is promoted to its parent first.
"""

import asyncio
import logging
from typing import Any, Optional

from pagepulse.core.activity import ACTIVITY_SIGNALS, ActivityMonitor
from pagepulse.core.batcher import EventBatcher
from pagepulse.core.models import Event, EventAttributes, PageElement
from pagepulse.core.session_manager import SessionManager
from pagepulse.core.visitor import VisitorIdentity
from pagepulse.utils.tasks import BackgroundTasks

logger = logging.getLogger(__name__)

# ==============================================================================
# Element Attribute Contract
# ==============================================================================

ANALYTICS_MARKER_ATTRIBUTE = "data-analytics"
EVENT_NAME_ATTRIBUTE = "data-event-name"
EVENT_TYPE_ATTRIBUTE = "data-event-type"

DEFAULT_EVENT_NAME = "Unnamed Click Event"
DEFAULT_EVENT_TYPE = "click"
UNNAMED_TARGET = "unnamed element"

TRACKED_TAGS = frozenset({"button", "a"})
TRACKED_INPUT_TYPES = frozenset({"submit", "button"})
ICON_TAG = "i"

# Page signals handled by the bridge
LOAD = "load"
VISIBILITY_CHANGE = "visibilitychange"
BEFORE_UNLOAD = "beforeunload"
CLICK = "click"

VISIBLE = "visible"


def resolve_click_target(element: PageElement) -> PageElement:
    """Promote an icon glyph to the element that wraps it."""
    if element.tag == ICON_TAG and element.parent is not None:
        return element.parent
    return element


def is_relevant_element(element: PageElement) -> bool:
    """Check whether clicks on this element are tracked."""
    if element.get_attribute(ANALYTICS_MARKER_ATTRIBUTE) == "true":
        return True
    tag = element.tag
    if tag in TRACKED_TAGS:
        return True
    return tag == "input" and (element.type or "").lower() in TRACKED_INPUT_TYPES


class PageLifecycleBridge:
    """
    Routes page signals to the session manager, batcher and activity monitor.

    Args:
        sessions: Session state machine
        batcher: Event queue
        activity: Inactivity timer
        visitor: Visitor identity
        project_id: Project identifier stamped on events
        tasks: Registry for handlers dispatched in the background
    """

    def __init__(
        self,
        sessions: SessionManager,
        batcher: EventBatcher,
        activity: ActivityMonitor,
        visitor: VisitorIdentity,
        project_id: str,
        tasks: BackgroundTasks,
    ) -> None:
        self._sessions = sessions
        self._batcher = batcher
        self._activity = activity
        self._visitor = visitor
        self._project_id = project_id
        self._tasks = tasks

    # ------------------------------------------------------------------
    # Signal handlers
    # ------------------------------------------------------------------

    async def on_load(self) -> None:
        if self._sessions.is_active:
            await self._sessions.update_session()
        else:
            await self._sessions.create_session()

    async def on_visibility_change(self, visibility_state: Optional[str]) -> None:
        if visibility_state == VISIBLE and not self._sessions.is_active:
            await self._sessions.create_session()

    def on_unload(self) -> None:
        logger.debug("Before unload")
        self._sessions.end_session()

    def on_click(self, target: Optional[PageElement]) -> Event | None:
        """
        Log a click on a relevant element.

        Args:
            target: Element the click landed on

        Returns:
            The queued event, or None if the click was not tracked
        """
        session_id = self._sessions.session_id
        if target is None or session_id is None:
            return None

        element = resolve_click_target(target)
        if not is_relevant_element(element):
            return None

        event = Event(
            visitor_id=self._visitor.get_or_create(),
            session_id=session_id,
            project_id=self._project_id,
            event_type=element.get_attribute(EVENT_TYPE_ATTRIBUTE) or DEFAULT_EVENT_TYPE,
            event_name=element.get_attribute(EVENT_NAME_ATTRIBUTE) or DEFAULT_EVENT_NAME,
            event_target=element.id or element.name or UNNAMED_TARGET,
            element_type=element.tag,
            event_attributes=EventAttributes(inner_text=element.inner_text, value=element.value),
        )
        self._batcher.enqueue(event)
        return event

    def on_activity(self, signal: str) -> bool:
        return self._activity.handle_signal(signal)

    # ------------------------------------------------------------------
    # Dispatch
    # ------------------------------------------------------------------

    def dispatch(self, signal: str, payload: Any = None) -> asyncio.Task | None:
        """
        Route one page signal.

        Synchronous handlers run immediately; handlers that talk to the
        collector are started as background tasks.

        Args:
            signal: Signal name (load, visibilitychange, beforeunload, click,
                mousemove, keydown, scroll)
            payload: Visibility state for visibilitychange, the target
                PageElement for click

        Returns:
            The background task for load/visibilitychange, otherwise None
        """
        if signal in ACTIVITY_SIGNALS:
            self.on_activity(signal)

        if signal == LOAD:
            return self._tasks.spawn(self.on_load())
        if signal == VISIBILITY_CHANGE:
            return self._tasks.spawn(self.on_visibility_change(payload))
        if signal == BEFORE_UNLOAD:
            self.on_unload()
        elif signal == CLICK:
            self.on_click(payload)
        elif signal not in ACTIVITY_SIGNALS:
            logger.debug("Ignoring unknown signal %s", signal)
        return None
