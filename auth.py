"""OAuth credential loading with a cached token file and an interactive fallback."""

import json
import logging
import os
from typing import Any, Callable, Dict, List

import requests
from google.auth.exceptions import GoogleAuthError
from google.auth.transport.requests import Request
from google.oauth2.credentials import Credentials
from google_auth_oauthlib.flow import Flow
from oauthlib.oauth2.rfc6749.errors import OAuth2Error

logger = logging.getLogger('gdoc_markdown_exporter.auth')

DEFAULT_REDIRECT_URI = 'http://localhost'
AUTH_STATE = 'state-token'


class ConfigurationError(Exception):
    """Raised when a local credential or configuration file is unusable."""
    pass


class AuthenticationError(Exception):
    """Raised when an access token cannot be obtained."""
    pass


def load_client_config(client_secret_file: str) -> Dict[str, Any]:
    """
    Read the OAuth client description downloaded from the Google console.

    Args:
        client_secret_file: Path to the client secret JSON file

    Returns:
        Client configuration dictionary

    Raises:
        ConfigurationError: If the file is missing, unreadable or malformed
    """
    try:
        with open(client_secret_file, 'r', encoding='utf-8') as f:
            client_config = json.load(f)
    except (OSError, ValueError) as e:
        raise ConfigurationError(f"Unable to read client secret file {client_secret_file}: {e}") from e

    if not isinstance(client_config, dict) or not ('installed' in client_config or 'web' in client_config):
        raise ConfigurationError(
            f"Unable to parse client secret file {client_secret_file}: "
            "expected an 'installed' or 'web' client"
        )

    return client_config


def get_token_from_file(token_file: str, scopes: List[str]) -> Credentials:
    """
    Load a cached token.

    Raises:
        OSError: If the file cannot be opened
        ValueError: If the file is not an authorized-user token
    """
    with open(token_file, 'r', encoding='utf-8') as f:
        token_info = json.load(f)

    if not isinstance(token_info, dict):
        raise ValueError(f"Token file {token_file} does not hold a JSON object")

    return Credentials.from_authorized_user_info(token_info, scopes)


def get_token_from_web(
    client_config: Dict[str, Any],
    scopes: List[str],
    input_func: Callable[[], str] = input
) -> Credentials:
    """
    Run the interactive authorization code exchange.

    Prints the authorization URL, blocks for a single line holding the
    authorization code and exchanges it for a token.

    Args:
        client_config: OAuth client configuration
        scopes: Requested OAuth scopes
        input_func: Callable returning the line typed by the user

    Returns:
        Freshly issued credentials

    Raises:
        AuthenticationError: If the code cannot be read or exchanged
    """
    client = client_config.get('installed') or client_config.get('web') or {}
    redirect_uris = client.get('redirect_uris') or [DEFAULT_REDIRECT_URI]

    flow = Flow.from_client_config(client_config, scopes=scopes, redirect_uri=redirect_uris[0])
    auth_url, _ = flow.authorization_url(access_type='offline', state=AUTH_STATE)

    print("Go to the following link in your browser then type the authorization code:")
    print(auth_url)

    try:
        auth_code = input_func().strip()
    except EOFError as e:
        raise AuthenticationError("Unable to read authorization code") from e

    if not auth_code:
        raise AuthenticationError("Unable to read authorization code: empty input")

    try:
        flow.fetch_token(code=auth_code)
    except (OAuth2Error, GoogleAuthError, requests.RequestException, ValueError) as e:
        raise AuthenticationError(f"Unable to retrieve token from web: {e}") from e

    return flow.credentials


def save_token(token_file: str, credentials: Credentials) -> None:
    """Persist credentials to the token file, readable by the owner only."""
    print(f"Saving credential file to: {token_file}")
    try:
        fd = os.open(token_file, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
        with os.fdopen(fd, 'w', encoding='utf-8') as f:
            f.write(credentials.to_json())
    except OSError as e:
        raise AuthenticationError(f"Unable to cache OAuth token: {e}") from e


def load_credentials(
    client_secret_file: str,
    token_file: str,
    scopes: List[str],
    input_func: Callable[[], str] = input
) -> Credentials:
    """
    Return usable credentials, prompting the user only when no token is cached.

    The token file is written only after an interactive exchange; a refresh
    of an expired cached token stays in memory.

    Args:
        client_secret_file: Path to the OAuth client JSON
        token_file: Path to the cached token JSON
        scopes: Requested OAuth scopes
        input_func: Callable returning the authorization code line

    Returns:
        Authorized credentials

    Raises:
        ConfigurationError: If the client secret file is unusable
        AuthenticationError: If no token can be obtained
    """
    client_config = load_client_config(client_secret_file)

    try:
        credentials = get_token_from_file(token_file, scopes)
        logger.debug(f"Loaded cached token from {token_file}")
    except (OSError, ValueError) as e:
        logger.info(f"No usable cached token ({e}); starting interactive authorization")
        credentials = get_token_from_web(client_config, scopes, input_func=input_func)
        save_token(token_file, credentials)
        return credentials

    if not credentials.valid and credentials.refresh_token:
        logger.info("Cached token expired, refreshing")
        try:
            credentials.refresh(Request())
        except GoogleAuthError as e:
            raise AuthenticationError(f"Unable to refresh cached token from {token_file}: {e}") from e

    return credentials


__all__ = [
    'ConfigurationError',
    'AuthenticationError',
    'load_client_config',
    'get_token_from_file',
    'get_token_from_web',
    'save_token',
    'load_credentials'
]
