"""
HTTP client construction for the verification service.

One AsyncClient is shared by every submission of a session so that the
connection pool and the session cookies are reused. No timeout is set
here: the transport's defaults apply.
"""

import logging

import httpx

from portal.app.config import PortalSettings, SessionCredentials

logger = logging.getLogger("portal.http")


def create_http_client(
    settings: PortalSettings,
    credentials: SessionCredentials,
) -> httpx.AsyncClient:
    """
    Build the AsyncClient used for verification requests.

    Cookies from the session credentials are attached to the client
    itself; the CSRF token is sent per request by the controller.
    """
    client = httpx.AsyncClient(cookies=credentials.cookies)
    logger.debug(
        "http client created for %s cookies=%s",
        settings.base_url,
        sorted(credentials.cookies),
    )
    return client
