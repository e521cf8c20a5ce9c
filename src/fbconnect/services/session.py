"""Logs a request in as a synced member using the signed cookie session."""

import logging

from fastapi import Request

from src.fbconnect.sync.models import LocalUserRecord

logger = logging.getLogger(__name__)

SESSION_MEMBER_ID = "member_id"
SESSION_MEMBER_EMAIL = "member_email"


class RequestSessionAuthenticator:
    """
    Writes the member into `request.session`.

    Requires Starlette's `SessionMiddleware` to wrap the request.
    """

    def __init__(self, request: Request):
        self.request = request

    def login_as(self, record: LocalUserRecord) -> None:
        if record.id is None:
            raise ValueError("Cannot log in a member that has not been saved")

        self.request.session[SESSION_MEMBER_ID] = record.id
        self.request.session[SESSION_MEMBER_EMAIL] = record.email
        logger.info(f"Member {record.id} logged in via provider session")
