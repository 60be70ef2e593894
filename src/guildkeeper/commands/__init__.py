"""
Application command cogs.

Each module in ``commands/handlers`` declares its cog with
:func:`register_cog`; :func:`discover_handlers` imports those modules when this
package is first imported. Cogs are keyed by ``__cog_name__`` and a name may be
claimed once. :func:`setup` builds every cog against the bot; cogs read shared
state from ``bot.services`` when their commands run.
"""

from __future__ import annotations

import logging
from importlib import import_module
from pathlib import Path
from pkgutil import iter_modules
from typing import Dict, List, Optional, Type

from discord.ext import commands as commands_ext

logger = logging.getLogger(__name__)

_HANDLERS_DIR = Path(__file__).resolve().parent / "handlers"

_COGS: Dict[str, Type[commands_ext.Cog]] = {}


def register_cog(cls: Optional[Type[commands_ext.Cog]] = None):
    """Class decorator adding a cog to the registry under its cog name."""

    def _register(cog_cls: Type[commands_ext.Cog]):
        if not issubclass(cog_cls, commands_ext.Cog):
            raise TypeError("register_cog expects a discord.ext.commands.Cog subclass")
        name = cog_cls.__cog_name__
        existing = _COGS.get(name)
        if existing is not None and existing is not cog_cls:
            raise ValueError(f"cog name {name!r} is already registered by {existing.__module__}")
        _COGS[name] = cog_cls
        return cog_cls

    if cls is None:
        return _register
    return _register(cls)


def registered_cogs() -> List[Type[commands_ext.Cog]]:
    return list(_COGS.values())


def discover_handlers() -> List[str]:
    """Import every public module in ``commands/handlers``; returns their names."""

    names = []
    for _, modname, _ in iter_modules([str(_HANDLERS_DIR)]):
        if modname.startswith("_"):
            continue
        import_module(f"{__name__}.handlers.{modname}")
        names.append(modname)
    return names


async def setup(bot: commands_ext.Bot) -> List[str]:
    """
    Attach registered cogs to ``bot`` and return the names newly added.

    Runs inside ``GKBot.setup_hook`` before the command tree is synced. Cogs
    already present on the bot are left alone.
    """

    added: List[str] = []
    for name, cog_cls in _COGS.items():
        if bot.get_cog(name) is not None:
            continue
        await bot.add_cog(cog_cls(bot))
        added.append(name)

    if added:
        logger.info("Loaded command cogs: %s", ", ".join(added))
    elif not _COGS:
        logger.warning("No command cogs discovered; command tree is empty")
    return added


discover_handlers()


__all__ = [
    "discover_handlers",
    "register_cog",
    "registered_cogs",
    "setup",
]
