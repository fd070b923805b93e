"""Shared constants for Telegram client components."""

# Default commands
CMD_START = "/start"
CMD_STOP = "/stop"
CMD_HELP = "/help"
CMD_ABOUT = "/about"

# Debug
CMD_ID = "/id"

BOT_USERNAME = "@fabtcg_bot"

# Inline queries this short are ignored to avoid overly broad searches
MIN_INLINE_QUERY_LENGTH = 3
# How long Telegram clients may cache an inline answer (seconds)
INLINE_CACHE_TIME = 60
# Timeout for a card search triggered by an inline query (seconds)
CARD_SEARCH_TIMEOUT = 15.0

# Long polling timeout for getUpdates (seconds)
POLL_TIMEOUT = 10

RESPONSE_START = (
    "Hi, {name}! 👋 Check out " + CMD_HELP + " for further details.\n"
    " You can share card information from everywhere by simply typing "
    + BOT_USERNAME + " followed by a card query in your chat window.\n"
    "Data is provided by https://fabdb.net."
)

RESPONSE_STOP = (
    "Alright, {name}! I won't talk to you again 🙊. Check out "
    + CMD_HELP + " for further details."
)

RESPONSE_HELP = f"""
I'm a Flesh and Blood TCG Bot 🤖 on steroids for Telegram. I will send you card information directly into your telegram channels!
You can find out more about me using {CMD_ABOUT}

You can share card information from everywhere by simply typing {BOT_USERNAME} followed by a card query in your chat window.

👇 Available commands:
{CMD_START} - Say hello!
{CMD_STOP} - Say Goodbye!
{CMD_ID} - Sends you your Telegram ID (works for all users!).
"""

RESPONSE_ABOUT = """
This Telegram Bot is a non-commercial hobby project and is developed as open source software for fans of the FaB TCG!

Feedback of any kind is very welcome and can be given in the project's issue tracker.

The data of this bot is provided by https://fabdb.net.

This Bot is in no way affiliated with Legend Story Studios®. All intellectual IP belongs to Legend Story Studios®,
Flesh & Blood™, and set names are trademarks of Legend Story Studios®. Flesh and Blood™ characters, cards, logos,
and art are property of Legend Story Studios®.
"""

RESPONSE_ID = "Your user id is {user_id}"
