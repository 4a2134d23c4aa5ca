"""
Gmail MIME MCP Server

Provides:
- Compose: build a raw RFC 5322 message from addresses, subject, body and attachments
- Send: deliver a composed message through a configured Gmail account
- Accounts: manage submission accounts
"""

import logging
from email.utils import getaddresses
from typing import Dict, List, Optional

from fastmcp import FastMCP

from .compose import AttachmentData, Email, build_message
from .config import SERVER_HOST, SERVER_PORT
from .interface import AccessToken, Address, MimeError
from .manager import SubmissionManager
from .message import Message

logger = logging.getLogger(__name__)

mcp = FastMCP("Gmail MIME")
manager = SubmissionManager()


def parse_addresses(entries: Optional[List[str]]) -> List[Address]:
    """Split "Name <addr>" / "addr" strings into Address values."""
    return [Address(email=addr, name=name or None) for name, addr in getaddresses(entries or []) if addr]


def compose_email(
    from_address: str,
    to: List[str],
    subject: str,
    body: str,
    cc: Optional[List[str]] = None,
    bcc: Optional[List[str]] = None,
    attachments: Optional[Dict[str, str]] = None,
    in_reply_to: str = "",
    references: Optional[List[str]] = None,
    headers: Optional[Dict[str, str]] = None
) -> Message:
    """Build a Message from tool arguments."""
    sender = parse_addresses([from_address])
    if not sender:
        raise ValueError(f"Invalid sender: {from_address!r}")

    email = Email(
        from_address=sender[0],
        to=parse_addresses(to),
        cc=parse_addresses(cc),
        bcc=parse_addresses(bcc),
        subject=subject,
        body=body,
        attachments=[AttachmentData(filename=name, encoded=data) for name, data in (attachments or {}).items()],
        in_reply_to=in_reply_to,
        references=references or [],
    )
    return build_message(email, headers)


# =============================================================================
# HEALTH
# =============================================================================
@mcp.tool()
def ping() -> str:
    """Health check. Returns pong if the server is running."""
    return "pong from Gmail MIME 📧"


# =============================================================================
# COMPOSE / SEND
# =============================================================================
@mcp.tool()
def mail_compose(
    from_address: str,
    to: List[str],
    subject: str,
    body: str,
    cc: Optional[List[str]] = None,
    bcc: Optional[List[str]] = None,
    attachments: Optional[Dict[str, str]] = None,
    in_reply_to: str = "",
    references: Optional[List[str]] = None,
    headers: Optional[Dict[str, str]] = None
) -> str:
    """
    Compose a message and return its raw MIME text without sending it.

    Args:
        from_address: Sender address
        to: Recipients ("Name <addr>" or "addr")
        subject: Subject line
        body: Plain text or HTML body (detected automatically)
        cc: Cc recipients
        bcc: Bcc recipients
        attachments: Filename to base64 content
        in_reply_to: Message-Id being replied to
        references: Message-Ids of the conversation
        headers: Extra header fields

    Returns:
        The serialized message, or error message
    """
    try:
        msg = compose_email(
            from_address, to, subject, body, cc, bcc, attachments,
            in_reply_to=in_reply_to, references=references, headers=headers
        )
        return msg.as_bytes().decode("utf-8", errors="replace")
    except (MimeError, ValueError) as e:
        logger.error(f"❌ Compose failed: {e}")
        return f"❌ Compose failed: {e}"


@mcp.tool()
async def mail_send(
    account: str,
    access_token: str,
    from_address: str,
    to: List[str],
    subject: str,
    body: str,
    cc: Optional[List[str]] = None,
    bcc: Optional[List[str]] = None,
    attachments: Optional[Dict[str, str]] = None,
    in_reply_to: str = "",
    references: Optional[List[str]] = None,
    headers: Optional[Dict[str, str]] = None
) -> str:
    """
    Compose and send a message.

    Args:
        account: Configured account name
        access_token: OAuth access token with gmail.send scope
        from_address: Sender address
        to: Recipients ("Name <addr>" or "addr")
        subject: Subject line
        body: Plain text or HTML body (detected automatically)
        cc: Cc recipients
        bcc: Bcc recipients
        attachments: Filename to base64 content
        in_reply_to: Message-Id being replied to
        references: Message-Ids of the conversation
        headers: Extra header fields

    Returns:
        The Message-Id of the sent message, or error message
    """
    try:
        msg = compose_email(
            from_address, to, subject, body, cc, bcc, attachments,
            in_reply_to=in_reply_to, references=references, headers=headers
        )
        message_id = await manager.send(account, msg, AccessToken(access_token))
        return f"✅ Sent message: {message_id}"
    except (MimeError, ValueError) as e:
        logger.error(f"❌ Send failed: {e}")
        return f"❌ Send failed: {e}"


# =============================================================================
# ACCOUNTS
# =============================================================================
@mcp.tool()
def mail_accounts() -> str:
    """List configured mail accounts."""
    return manager.list_accounts()


@mcp.tool()
def mail_account_add(name: str, adapter: str = "gmail", user_id: str = "me") -> str:
    """
    Add a mail account.

    Args:
        name: Account name
        adapter: Adapter type (default: "gmail")
        user_id: Gmail user id (default: "me", the token owner)
    """
    return manager.add_account(name, adapter, {"user_id": user_id})


@mcp.tool()
def mail_account_remove(name: str) -> str:
    """Remove a mail account."""
    return manager.remove_account(name)


# =============================================================================
# MAIN
# =============================================================================
def main() -> None:
    logging.basicConfig(level=logging.INFO)
    mcp.run(transport="http", host=SERVER_HOST, port=SERVER_PORT)


if __name__ == "__main__":
    main()
