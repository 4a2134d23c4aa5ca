"""
Tests for address rendering.
"""

import pytest

from gmail_mime.address import AddressList, encode_header_value, format_address, format_address_list
from gmail_mime.interface import Address


class TestFormatAddress:
    def test_display_name_is_quoted(self):
        assert format_address(Address("a@x", "A")) == '"A" <a@x>'

    def test_without_name(self):
        assert format_address(Address("a@x")) == "<a@x>"

    def test_bare_mailbox(self):
        assert format_address(Address("a@x", "A"), include_name=False) == "a@x"

    def test_quotes_and_backslashes_escaped(self):
        assert format_address(Address("a@x", 'Say "hi" \\o/')) == '"Say \\"hi\\" \\\\o/" <a@x>'

    def test_special_characters_stay_inside_quotes(self):
        assert format_address(Address("a@x", "Doe, John")) == '"Doe, John" <a@x>'

    def test_non_ascii_name_is_encoded_word(self):
        rendered = format_address(Address("a@x", "José"))
        assert rendered.startswith("=?utf-8?q?")
        assert rendered.endswith("?= <a@x>")

    def test_malformed_address_passes_through(self):
        assert format_address(Address("not an address"), include_name=False) == "not an address"

    def test_str_uses_formatter(self):
        assert str(Address("a@x", "A")) == '"A" <a@x>'


class TestFormatAddressList:
    def test_single_element_has_no_separator(self):
        assert format_address_list([Address("a@x", "A")]) == '"A" <a@x>'

    def test_comma_joined_in_order(self):
        addresses = [Address("b@y", "B"), Address("a@x", "A")]
        assert format_address_list(addresses) == '"B" <b@y>,"A" <a@x>'

    def test_bare_addresses(self):
        addresses = [Address("a@x", "A"), Address("b@y", "B")]
        assert format_address_list(addresses, include_name=False) == "a@x,b@y"

    def test_empty_list(self):
        assert format_address_list([]) == ""

    def test_address_list_helpers(self):
        addresses = AddressList([Address("a@x", "A"), Address("b@y")])
        assert addresses.addresses() == ["a@x", "b@y"]
        assert addresses.render() == '"A" <a@x>,<b@y>'
        assert addresses.render(include_name=False) == "a@x,b@y"


class TestEncodeHeaderValue:
    @pytest.mark.parametrize("value", ["Hi", "The subject of the email", "tab\tseparated"])
    def test_printable_ascii_unchanged(self, value):
        assert encode_header_value(value) == value

    def test_non_ascii_is_q_encoded(self):
        assert encode_header_value("Café") == "=?utf-8?q?Caf=C3=A9?="

    def test_long_value_uses_crlf_continuations(self):
        encoded = encode_header_value("Grüße " * 30, header_name="Subject")
        assert "\r\n " in encoded
        assert "\n" not in encoded.replace("\r\n", "")
