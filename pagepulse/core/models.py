# ==============================================================================
# PagePulse Domain Models
# ==============================================================================
"""
Pydantic models for page context, sessions and interaction events.

These models are used for:
- Snapshotting the page the client runs in
- Building collector request payloads with the collector's field names
- Type safety throughout the client

PageElement is a plain dataclass: it describes a node of the host page and is
never sent over the wire as-is.

This module is part of the core domain layer and has no external dependencies
beyond Pydantic.
"""

from dataclasses import dataclass, field
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

DIRECT_REFERRER = "Direct"


class PageInfo(BaseModel):
    """
    Snapshot of the current page.

    Attributes:
        hostname: Host the page was served from (drives environment detection)
        path: URL path of the page
        title: Document title
        referrer: Referring URL, empty when the visit is direct
        user_agent: Browser user agent string
    """

    hostname: str = Field(default="", description="Page hostname")
    path: str = Field(default="/", description="Page URL path")
    title: str = Field(default="", description="Document title")
    referrer: str = Field(default="", description="Referring URL")
    user_agent: str = Field(default="", description="User agent string")

    @property
    def referrer_or_direct(self) -> str:
        return self.referrer or DIRECT_REFERRER

    def to_update_payload(self) -> dict:
        """Serialize page context for a session update request."""
        return {
            "exitPage": self.path,
            "pageUrl": self.path,
            "pageTitle": self.title,
            "referrer": self.referrer_or_direct,
        }


class SessionStartContext(BaseModel):
    """Body of a session create request."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    visitor_id: str = Field(..., alias="visitorId")
    project_id: str = Field(..., alias="project")
    referrer: str = Field(default=DIRECT_REFERRER)
    page_url: str = Field(..., alias="pageUrl")
    page_title: str = Field(default="", alias="pageTitle")
    user_agent: str = Field(default="", alias="userAgent")

    @classmethod
    def from_page(cls, visitor_id: str, project_id: str, page: PageInfo) -> "SessionStartContext":
        return cls(
            visitor_id=visitor_id,
            project_id=project_id,
            referrer=page.referrer_or_direct,
            page_url=page.path,
            page_title=page.title,
            user_agent=page.user_agent,
        )

    def to_payload(self) -> dict:
        return self.model_dump(by_alias=True)


class Session(BaseModel):
    """
    The live session of a SessionManager.

    id stays None until the collector assigns one.
    """

    id: Optional[str] = None
    start_context: SessionStartContext

    @property
    def is_active(self) -> bool:
        return self.id is not None


class EventAttributes(BaseModel):
    """Element-level details attached to an event."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    inner_text: Optional[str] = Field(default=None, alias="innerText")
    value: Optional[str] = None


class Event(BaseModel):
    """
    A single tracked interaction.

    Immutable once constructed. Serialized with the collector's field names:
    visitorId, session, project, eventType, eventName, eventTarget,
    elementType, eventAttributes.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    visitor_id: str = Field(..., alias="visitorId")
    session_id: str = Field(..., alias="session")
    project_id: str = Field(..., alias="project")
    event_type: str = Field(default="click", alias="eventType")
    event_name: str = Field(..., alias="eventName")
    event_target: str = Field(..., alias="eventTarget")
    element_type: str = Field(..., alias="elementType")
    event_attributes: EventAttributes = Field(
        default_factory=EventAttributes, alias="eventAttributes"
    )

    def to_payload(self) -> dict:
        """Serialize event for a collector request body."""
        return self.model_dump(by_alias=True)


@dataclass
class PageElement:
    """
    A node of the host page, as seen by the click handler.

    Attributes:
        tag_name: Element tag name (any case)
        type: Input type attribute, for input elements
        id: Element id attribute
        name: Element name attribute
        attributes: All other attributes (data-* markers live here)
        inner_text: Rendered text content
        value: Form control value
        parent: Enclosing element, if any
    """

    tag_name: str
    type: Optional[str] = None
    id: str = ""
    name: str = ""
    attributes: dict[str, str] = field(default_factory=dict)
    inner_text: Optional[str] = None
    value: Optional[str] = None
    parent: Optional["PageElement"] = None

    @property
    def tag(self) -> str:
        return self.tag_name.lower()

    def get_attribute(self, name: str) -> str | None:
        return self.attributes.get(name)
