"""
Gmail Submission Adapter

Implements SubmissionAdapter for the Gmail API: the serialized message is
sent as a raw base64url blob and the Message-Id Gmail assigned is read back.
"""

import base64
import logging

from ..config import DEFAULT_USER_ID, DEFAULT_USER_AGENT, GMAIL_SEND_SCOPE
from ..interface import SubmissionAdapter, SubmissionAccount, AccessToken, SubmissionFailure

logger = logging.getLogger(__name__)


def find_header(msg_data: dict, name: str) -> str:
    """Value of a header in a Gmail API message resource, or ""."""
    payload = msg_data.get('payload') or {}
    for h in payload.get('headers') or []:
        if h.get('name', '').lower() == name.lower():
            return h.get('value', '')
    return ''


class GmailAdapter(SubmissionAdapter):
    """Gmail submission adapter."""

    adapter_type = "gmail"

    def __init__(self, account: SubmissionAccount):
        super().__init__(account)
        self._service = None
        self._user_id = account.config.get("user_id", DEFAULT_USER_ID)
        self._user_agent = account.config.get("user_agent", DEFAULT_USER_AGENT)

    async def connect(self, credential: AccessToken) -> bool:
        """Connect to the Gmail API with an access token."""
        try:
            import google_auth_httplib2
            import httplib2
            from google.oauth2.credentials import Credentials
            from googleapiclient.discovery import build
            from googleapiclient.http import set_user_agent

            creds = Credentials(token=credential.token, scopes=[GMAIL_SEND_SCOPE])
            http = google_auth_httplib2.AuthorizedHttp(creds, http=httplib2.Http())
            set_user_agent(http, self._user_agent)

            self._service = build('gmail', 'v1', http=http, cache_discovery=False)

            logger.info(f"✅ Connected to Gmail: {self.account.name} ({self._user_id})")
            return True

        except ImportError:
            logger.error("❌ Google API libraries not installed")
            return False
        except Exception as e:
            logger.error(f"❌ Failed to connect to Gmail: {e}")
            return False

    async def disconnect(self) -> None:
        """Disconnect from Gmail."""
        self._service = None

    async def send_raw(self, raw: bytes) -> str:
        """
        Send a serialized message.

        Returns:
            The Message-Id header of the sent message, "" if absent

        Raises:
            SubmissionFailure: If not connected or the API call fails
        """
        if not self._service:
            raise SubmissionFailure("Not connected to Gmail")

        body = {'raw': base64.urlsafe_b64encode(raw).decode('ascii').rstrip('=')}

        try:
            result = self._service.users().messages().send(userId=self._user_id, body=body).execute()

            sent = self._service.users().messages().get(
                userId=self._user_id,
                id=result['id'],
                format='metadata',
                metadataHeaders=['Message-Id']
            ).execute()

        except Exception as e:
            logger.error(f"❌ Send failed: {e}")
            raise SubmissionFailure(f"Send failed: {e}") from e

        message_id = find_header(sent, 'Message-Id')
        logger.info(f"✅ Sent message: {result['id']} {message_id}")
        return message_id

    @property
    def connected(self) -> bool:
        return self._service is not None
