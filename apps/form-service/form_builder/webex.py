"""Webex meetings client used by the video conferencing integration.

Tokens are refreshed by the credential owner; this client only consumes an
access token and reports credentials that Webex rejected.
"""

import logging
import os
import time
from datetime import datetime
from typing import Any, Callable, Dict, List, Mapping, Optional

import requests
from pydantic import BaseModel, Field, ValidationError

from form_builder.errors import WebexApiError

log = logging.getLogger(__name__)

WEBEX_API_URL = os.getenv("WEBEX_API_URL", "https://webexapis.com/v1")
REQUEST_TIMEOUT = 30

TokenProvider = Callable[[], str]
InvalidateCredential = Callable[[Any], None]


class WebexToken(BaseModel):
    access_token: str
    refresh_token: str
    expires_in: int
    refresh_token_expires_in: int
    # Milliseconds since the epoch.
    expiry_date: int


class WebexMeeting(BaseModel):
    id: str
    start: datetime
    end: datetime


class WebexMeetingList(BaseModel):
    items: List[WebexMeeting] = Field(default_factory=list)


class WebexEventResult(BaseModel):
    id: str
    web_link: str = Field(alias="webLink")
    password: str = ""


class CalendarEvent(BaseModel):
    title: str
    start_time: datetime
    end_time: datetime
    description: Optional[str] = None
    timezone: Optional[str] = None


class VideoCallData(BaseModel):
    type: str = "webex_video"
    id: str
    url: str
    password: str = ""


def static_token_provider(credential_key: Mapping[str, Any]) -> TokenProvider:
    """Token provider for a stored credential key that is still valid."""
    try:
        token = WebexToken.model_validate(credential_key)
    except ValidationError as exc:
        raise WebexApiError("Webex credential keys parsing error") from exc

    def get_token() -> str:
        if token.expiry_date <= int(time.time() * 1000):
            raise WebexApiError("Webex access token expired")
        return token.access_token

    return get_token


def handle_webex_response(
    response: requests.Response, credential_id: Any, invalidate_credential: InvalidateCredential
) -> Optional[Any]:
    if response.status_code < 200 or response.status_code >= 300:
        try:
            body = response.json()
        except ValueError:
            body = {}
        invalid_grant = isinstance(body, dict) and body.get("error") == "invalid_grant"
        if response.status_code == 124 or invalid_grant:
            log.warning("Invalidating Webex credential %s", credential_id)
            invalidate_credential(credential_id)
        raise WebexApiError(f"{response.status_code} {response.reason or ''}".strip())

    # 204 carries no body
    if response.status_code == 204:
        return None
    return response.json()


class WebexVideoApiAdapter:
    def __init__(
        self,
        credential_id: Any,
        get_access_token: TokenProvider,
        invalidate_credential: InvalidateCredential,
        base_url: Optional[str] = None,
        session: Optional[requests.Session] = None,
    ):
        self.credential_id = credential_id
        self._get_access_token = get_access_token
        self._invalidate_credential = invalidate_credential
        self.base_url = (base_url or WEBEX_API_URL).rstrip("/")
        self._session = session or requests.Session()

    def _fetch(self, endpoint: str, method: str = "GET", body: Optional[Dict[str, Any]] = None) -> Any:
        headers = {
            "Authorization": f"Bearer {self._get_access_token()}",
            "Content-Type": "application/json",
        }
        response = self._session.request(
            method,
            f"{self.base_url}/{endpoint}",
            json=body,
            headers=headers,
            timeout=REQUEST_TIMEOUT,
        )
        return handle_webex_response(response, self.credential_id, self._invalidate_credential)

    def get_availability(self) -> List[Dict[str, datetime]]:
        try:
            payload = self._fetch("meetings")
            meetings = WebexMeetingList.model_validate(payload or {})
        except Exception as exc:
            log.error("Webex availability lookup failed: %s", exc)
            return []
        return [{"start": meeting.start, "end": meeting.end} for meeting in meetings.items]

    def create_meeting(self, event: CalendarEvent) -> VideoCallData:
        payload = self._fetch("meetings", method="POST", body=self._translate_event(event))
        return self._to_video_call_data(payload)

    def update_meeting(self, uid: str, event: CalendarEvent) -> VideoCallData:
        payload = self._fetch(f"meetings/{uid}", method="PUT", body=self._translate_event(event))
        return self._to_video_call_data(payload)

    def delete_meeting(self, uid: str) -> None:
        try:
            self._fetch(f"meetings/{uid}", method="DELETE")
        except (WebexApiError, requests.RequestException) as exc:
            log.warning("Failed to delete Webex meeting %s: %s", uid, exc)
            raise WebexApiError("Failed to delete meeting") from exc

    @staticmethod
    def _translate_event(event: CalendarEvent) -> Dict[str, Any]:
        # TODO: recurring events need a "recurrence" rule once bookings expose one.
        body: Dict[str, Any] = {
            "title": event.title,
            "start": event.start_time.isoformat(),
            "end": event.end_time.isoformat(),
        }
        if event.description:
            body["agenda"] = event.description
        if event.timezone:
            body["timezone"] = event.timezone
        return body

    @staticmethod
    def _to_video_call_data(payload: Any) -> VideoCallData:
        try:
            result = WebexEventResult.model_validate(payload or {})
        except ValidationError as exc:
            raise WebexApiError("Unexpected Webex meeting response") from exc
        return VideoCallData(id=result.id, url=result.web_link, password=result.password)
