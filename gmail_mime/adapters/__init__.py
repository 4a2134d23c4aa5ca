"""Submission adapters by type."""

from .gmail import GmailAdapter

ADAPTERS = {
    GmailAdapter.adapter_type: GmailAdapter,
}

__all__ = ["ADAPTERS", "GmailAdapter"]
