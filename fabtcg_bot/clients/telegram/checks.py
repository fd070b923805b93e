"""Access checks applied to every inbound event."""

from fabtcg_bot.clients.telegram.constants import CMD_ID
from fabtcg_bot.core.allowlist import Allowlist

# Commands that bypass the allowlist (available to everyone), so a user can
# learn the id they need to be added with
EXEMPT_COMMANDS: frozenset[str] = frozenset({CMD_ID})


def is_permitted(allowlist: Allowlist, user_id: int, text: str) -> bool:
    """Check whether an event from ``user_id`` with ``text`` may be served.

    Args:
        allowlist: The configured allowlist.
        user_id: Telegram id of the sender.
        text: Message or query text. Must equal an exempt command exactly
            to bypass the allowlist.

    Returns:
        True if the sender is allowlisted or the text is exempt.
    """
    return allowlist.is_allowed(user_id) or text in EXEMPT_COMMANDS
