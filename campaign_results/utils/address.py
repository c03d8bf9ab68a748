"""Display addresses for the To header of outgoing messages."""

from email.utils import formataddr, quote


def format_address(email: str, first_name: str, last_name: str) -> str:
    """
    Build the recipient address for a target.

    When both names are present the result is a quoted display name
    followed by the angle-bracketed address, e.g.
    ``"Jane Doe" <jane@example.com>``. Quotes and backslashes in the name
    are escaped, and non-ASCII names are RFC 2047 encoded. Otherwise the
    bare email is returned unchanged.
    """
    if not first_name or not last_name:
        return email

    name = f"{first_name} {last_name}"

    if not name.isascii() or not name.isprintable():
        return formataddr((name, email))

    return f'"{quote(name)}" <{email}>'
