import pytest

from gmail_mime import Message
from gmail_mime.interface import SubmissionAccount
from tests.helpers import PNG_BYTES


@pytest.fixture
def png_bytes():
    return PNG_BYTES


@pytest.fixture
def message():
    return Message()


@pytest.fixture
def gmail_account():
    return SubmissionAccount(name="work", adapter="gmail", config={"user_id": "me"})


@pytest.fixture
def accounts_path(tmp_path):
    """Path for a temporary accounts config file."""
    return tmp_path / "config" / "mail_accounts.json"
