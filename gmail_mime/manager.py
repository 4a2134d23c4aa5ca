"""
Submission Account Manager

Named submission accounts, persisted as JSON, and per-send routing to the
adapter an account is configured for.
"""

import json
from pathlib import Path
from typing import Dict, Mapping, Optional, Type
import logging

from .adapters import ADAPTERS
from .config import ACCOUNTS_CONFIG, DEFAULT_USER_ID
from .interface import SubmissionAdapter, SubmissionAccount, AccessToken, SubmissionFailure
from .message import Message

logger = logging.getLogger(__name__)


class SubmissionManager:
    """
    Submission accounts and the adapter types that can serve them.

    Credentials are never stored: every send connects a fresh adapter with
    the caller's access token and disconnects it afterwards.
    """

    def __init__(
        self,
        config_path: Optional[Path] = None,
        adapters: Optional[Mapping[str, Type[SubmissionAdapter]]] = None
    ):
        self.config_path = config_path or ACCOUNTS_CONFIG
        self.adapters: Dict[str, Type[SubmissionAdapter]] = dict(ADAPTERS if adapters is None else adapters)
        self.accounts: Dict[str, SubmissionAccount] = self._read()

    def _read(self) -> Dict[str, SubmissionAccount]:
        if not self.config_path.exists():
            return {}

        try:
            stored = json.loads(self.config_path.read_text()).get("accounts", {})
        except (OSError, ValueError) as e:
            logger.error(f"❌ Unreadable accounts file {self.config_path}: {e}")
            return {}

        accounts = {
            name: SubmissionAccount(name, entry.get("adapter", ""), entry.get("config", {}))
            for name, entry in stored.items()
        }
        logger.info(f"Loaded {len(accounts)} submission accounts from {self.config_path}")
        return accounts

    def _write(self) -> None:
        stored = {
            name: {"adapter": account.adapter, "config": account.config}
            for name, account in self.accounts.items()
        }
        self.config_path.parent.mkdir(parents=True, exist_ok=True)
        self.config_path.write_text(json.dumps({"accounts": stored}, indent=2))

    def add_account(self, name: str, adapter: str, config: Optional[Dict] = None) -> str:
        """Register an account for an installed adapter type."""
        if name in self.accounts:
            return f"❌ Account '{name}' already exists"
        if adapter not in self.adapters:
            return f"❌ No '{adapter}' adapter. Installed: {', '.join(self.adapters) or 'none'}"

        self.accounts[name] = SubmissionAccount(name, adapter, config or {})
        self._write()
        return f"✅ Added {adapter} account: {name}"

    def remove_account(self, name: str) -> str:
        if self.accounts.pop(name, None) is None:
            return f"❌ Account '{name}' not found"
        self._write()
        return f"✅ Removed account: {name}"

    def list_accounts(self) -> str:
        """One line per account: name, adapter and the mailbox it sends as."""
        if not self.accounts:
            return "📧 No submission accounts configured"

        lines = ["📧 Submission accounts"]
        for name, account in self.accounts.items():
            user_id = account.config.get("user_id", DEFAULT_USER_ID)
            missing = "" if account.adapter in self.adapters else " (adapter not installed)"
            lines.append(f"  {name}: {account.adapter} as {user_id}{missing}")
        return "\n".join(lines)

    async def send(self, account_name: str, message: Message, credential: AccessToken) -> str:
        """
        Serialize a message and submit it through an account.

        Returns:
            The Message-Id assigned by the provider ("" if none)

        Raises:
            MimeError: If the message cannot be serialized; nothing is sent
            SubmissionFailure: If the account is unknown, cannot be
                connected, or the provider rejects the message
        """
        raw = message.as_bytes()

        account = self.accounts.get(account_name)
        if account is None:
            raise SubmissionFailure(f"Unknown account: {account_name}")
        adapter_class = self.adapters.get(account.adapter)
        if adapter_class is None:
            raise SubmissionFailure(f"No '{account.adapter}' adapter for account: {account_name}")

        adapter = adapter_class(account)
        if not await adapter.connect(credential):
            raise SubmissionFailure(f"Could not connect to account: {account_name}")

        try:
            return await adapter.send_raw(raw)
        finally:
            await adapter.disconnect()
