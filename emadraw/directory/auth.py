import logging
import time
import uuid
from typing import Optional

import jwt
import requests

logger = logging.getLogger(__name__)

CLIENT_ASSERTION_TYPE = "urn:ietf:params:oauth:client-assertion-type:jwt-bearer"
ASSERTION_LIFETIME_SECONDS = 200


def open_session() -> requests.Session:
    """Open a requests session used for every call to the directory."""
    session = requests.Session()
    session.headers.update({"Accept": "application/json"})
    return session


def build_client_assertion(
    service_account: str, private_key: str, token_url: str
) -> str:
    """Sign the short-lived JWT that identifies the service account.

    Parameters
    ----------
    service_account : str
        Service account name, used as both issuer and subject.
    private_key : str
        PEM encoded RSA private key of the service account.
    token_url : str
        Token endpoint, used as the audience.

    Returns
    -------
    str
        The RS256 signed assertion.
    """
    now = int(time.time())
    claims = {
        "iss": service_account,
        "sub": service_account,
        "aud": token_url,
        "exp": now + ASSERTION_LIFETIME_SECONDS,
        "jti": str(uuid.uuid4()),
    }
    return jwt.encode(claims, private_key, algorithm="RS256")


def get_access_token(
    session: requests.Session,
    service_account: str,
    private_key: str,
    token_url: str,
    timeout: int = 45,
) -> Optional[str]:
    """Exchange a signed client assertion for an API access token.

    Returns
    -------
    Optional[str]
        The bearer token, or ``None`` when the private key cannot sign the
        assertion, the token endpoint cannot be reached, rejects the
        credentials or answers without an ``access_token``.
    """
    # Never log the assertion or the key.
    logger.debug("Requesting access token for configured service account")
    try:
        assertion = build_client_assertion(service_account, private_key, token_url)
    except (jwt.PyJWTError, ValueError) as e:
        logger.error(f"Could not sign client assertion with the configured key: {type(e).__name__}")
        return None

    try:
        response = session.post(
            token_url,
            data={
                "scope": "api",
                "grant_type": "client_credentials",
                "client_assertion_type": CLIENT_ASSERTION_TYPE,
                "client_assertion": assertion,
            },
            timeout=timeout,
        )
    except requests.RequestException as e:
        logger.error(f"Token endpoint could not be reached: {e}")
        return None

    try:
        response.raise_for_status()
    except requests.HTTPError as e:
        logger.error(f"Token endpoint rejected the service account: {e}")
        return None

    try:
        payload = response.json()
    except ValueError:
        logger.error("Token endpoint returned a malformed payload")
        return None
    token = payload.get("access_token") if isinstance(payload, dict) else None
    if not token:
        logger.error("Token endpoint response did not include an access token")
        return None
    logger.debug("Access token acquired")
    return token
