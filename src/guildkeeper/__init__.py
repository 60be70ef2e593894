"""guildkeeper: moderation and community automation for a Discord guild."""

__version__ = "0.1.0"
