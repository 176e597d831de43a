# meeting_governance/services/notice_publisher.py
from __future__ import annotations

from functools import lru_cache
from typing import Any, Dict, List, Optional

import httpx

from meeting_governance.core.config import get_settings
from meeting_governance.core.logging import get_logger
from meeting_governance.schemas.meeting import MeetingRead, MeetingType

logger = get_logger(__name__).bind(component="notice_publisher")

DEFAULT_CHANNELS: List[str] = ["website", "office_posting"]


class NoticePublisher:
    """
    Pushes public notice artifacts to an external publication endpoint.

    Responsibilities
    ----------------
    - Build the notice artifact (title, body, channels) from a meeting.
    - POST it as JSON to the configured URL.

    Notes
    -----
    - Publication is fire-and-forget: it runs after the notice posting has
      committed, and a failure is logged, never raised to the caller.
    - The notice record already stored is the legal record; publication is
      a convenience copy.
    """

    def __init__(
        self,
        url: str,
        timeout_seconds: float = 10.0,
        channels: Optional[List[str]] = None,
    ) -> None:
        if not url:
            raise ValueError("url is required")
        self._url = url
        self._timeout_seconds = timeout_seconds
        self._channels = list(channels or DEFAULT_CHANNELS)

    @staticmethod
    def build_title(meeting: MeetingRead, body_name: str) -> str:
        meeting_type = MeetingType(meeting.meeting_type)
        if meeting_type == MeetingType.SPECIAL:
            return f"Special Meeting - {body_name}"
        if meeting_type == MeetingType.EMERGENCY:
            return f"Emergency Meeting - {body_name}"
        if meeting_type == MeetingType.EXECUTIVE:
            return f"Executive Session - {body_name}"
        return f"{body_name} Meeting"

    def build_artifact(self, meeting: MeetingRead, body_name: str) -> Dict[str, Any]:
        latest = meeting.notices[-1] if meeting.notices else None
        return {
            "tenant_id": meeting.tenant_id,
            "meeting_id": meeting.id,
            "title": self.build_title(meeting, body_name),
            "body": (
                f"Meeting scheduled for {meeting.scheduled_start.isoformat()} "
                f"at {meeting.location}."
            ),
            "channels": list(self._channels),
            "posted_at": latest.posted_at.isoformat() if latest else None,
            "notice_id": latest.id if latest else None,
        }

    async def publish(self, meeting: MeetingRead, body_name: str) -> bool:
        """
        Send the artifact. Returns True on a 2xx response, False otherwise.
        """
        artifact = self.build_artifact(meeting, body_name)
        try:
            async with httpx.AsyncClient(timeout=self._timeout_seconds) as client:
                resp = await client.post(self._url, json=artifact)
        except httpx.HTTPError as exc:
            logger.warning(
                "notice_publication_failed",
                tenant_id=meeting.tenant_id,
                meeting_id=meeting.id,
                error=str(exc),
            )
            return False

        if resp.status_code // 100 != 2:
            logger.warning(
                "notice_publication_rejected",
                tenant_id=meeting.tenant_id,
                meeting_id=meeting.id,
                status_code=resp.status_code,
            )
            return False

        logger.info(
            "notice_published",
            tenant_id=meeting.tenant_id,
            meeting_id=meeting.id,
            notice_id=artifact["notice_id"],
        )
        return True


@lru_cache()
def _build_notice_publisher(url: str, timeout_seconds: float) -> NoticePublisher:
    return NoticePublisher(url=url, timeout_seconds=timeout_seconds)


def get_notice_publisher() -> Optional[NoticePublisher]:
    """
    Configured publisher, or None when NOTICE_PUBLICATION_URL is unset.
    """
    settings = get_settings()
    if settings.NOTICE_PUBLICATION_URL is None:
        return None
    return _build_notice_publisher(
        str(settings.NOTICE_PUBLICATION_URL),
        settings.NOTICE_PUBLICATION_TIMEOUT_SECONDS,
    )
