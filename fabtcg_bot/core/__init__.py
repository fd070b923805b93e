"""Core building blocks shared by the bot and the supervisor."""
