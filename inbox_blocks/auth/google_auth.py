# File: inbox_blocks/auth/google_auth.py
"""
Google API authentication module.
Handles OAuth2 flow and credential management.
"""

from typing import Optional
from google.auth.exceptions import RefreshError
from google.auth.transport.requests import Request
from google.oauth2.credentials import Credentials
from google_auth_oauthlib.flow import InstalledAppFlow
from googleapiclient.discovery import build, Resource
from googleapiclient.errors import HttpError

from inbox_blocks.core.config_manager import Config
from inbox_blocks.utils.logger import setup_logger

logger = setup_logger(__name__)


def _authenticate() -> Optional[Credentials]:
    """
    Internal helper to load or refresh credentials.

    Returns:
        Credentials object or None if authentication fails
    """
    creds = None

    if Config.TOKEN_FILE.exists():
        logger.debug(f"Loading existing token from {Config.TOKEN_FILE}")
        creds = Credentials.from_authorized_user_file(
            str(Config.TOKEN_FILE),
            Config.GOOGLE_SCOPES
        )

    if not creds or not creds.valid:
        if creds and creds.expired and creds.refresh_token:
            logger.info("Refreshing expired credentials")
            try:
                creds.refresh(Request())
            except RefreshError as e:
                # Unattended hourly runs cannot re-prompt; leave the token for the operator
                logger.error(f"Error refreshing token: {e}", exc_info=True)
                return None
            logger.info("Credentials refreshed successfully")
        else:
            logger.warning("No valid credentials found")
            return None

        logger.debug("Saving refreshed credentials")
        with open(Config.TOKEN_FILE, "w") as token_file:
            token_file.write(creds.to_json())

    return creds


def create_initial_token() -> bool:
    """
    Forces the interactive, browser-based auth flow.
    Called by 'scripts/authenticate.py' during initial setup.

    Returns:
        True if authentication successful, False otherwise
    """
    logger.info("Starting interactive authentication flow")

    if not Config.CREDENTIALS_FILE.exists():
        logger.error(f"credentials.json not found at {Config.CREDENTIALS_FILE}")
        logger.error("Please download it from Google Cloud Console and place it in the project root")
        return False

    try:
        flow = InstalledAppFlow.from_client_secrets_file(
            str(Config.CREDENTIALS_FILE),
            Config.GOOGLE_SCOPES
        )
        logger.info("Opening browser for authentication...")
        creds = flow.run_local_server(port=0)
    except Exception as e:
        logger.error(f"Authentication flow failed: {e}", exc_info=True)
        return False

    with open(Config.TOKEN_FILE, "w") as token_file:
        token_file.write(creds.to_json())

    logger.info(f"Authentication successful! Token saved to {Config.TOKEN_FILE}")
    return True


def get_calendar_service() -> Optional[Resource]:
    """
    Get an authenticated Calendar API resource using the existing 'token.json'.

    Returns:
        Calendar API resource, or None if authentication fails
    """
    logger.info("Initializing Google Calendar service")

    creds = _authenticate()

    if not creds:
        logger.error("Authentication failed")
        logger.error("token.json is missing or invalid")
        logger.error("Please run 'python scripts/authenticate.py' to authenticate")
        return None

    try:
        calendar_service = build("calendar", "v3", credentials=creds, cache_discovery=False)
    except HttpError as err:
        logger.error(f"HTTP error occurred building calendar service: {err}", exc_info=True)
        return None

    logger.info("Google Calendar service initialized successfully")
    return calendar_service
