"""
Shared configuration constants for gmail-mime.

Import from here to avoid duplication across the serializer, adapters and server.
"""

from pathlib import Path

# Header folding
# Max header line length is 78 characters in RFC 5322 and 76 characters in
# RFC 2047. The stricter limit is used everywhere.
MAX_LINE_LENGTH = 76
CONTINUATION_LENGTH = MAX_LINE_LENGTH - 1  # leading space of a folded line

CRLF = "\r\n"
FOLD = "\r\n "

# Transfer encodings
QUOTED_PRINTABLE = "quoted-printable"
BASE64 = "base64"
TRANSFER_ENCODINGS = (QUOTED_PRINTABLE, BASE64)

MIME_VERSION = "1.0"

# Number of leading payload bytes inspected by content sniffing
SNIFF_LENGTH = 512

# Base paths
CONFIG_DIR = Path("/data/config")
ACCOUNTS_CONFIG = CONFIG_DIR / "mail_accounts.json"

# Gmail
DEFAULT_USER_ID = "me"
DEFAULT_USER_AGENT = "gmail-mime/0.1.0"
GMAIL_SEND_SCOPE = "https://www.googleapis.com/auth/gmail.send"

# MCP server
SERVER_HOST = "0.0.0.0"
SERVER_PORT = 8000
