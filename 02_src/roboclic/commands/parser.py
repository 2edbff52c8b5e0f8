"""Bot commands and their text parsing."""

from dataclasses import dataclass
from enum import Enum

from ..access import AccessLevel


class Command(Enum):
    """Commands understood by the bot.

    Each value is (name typed after the slash, key stored in authorization
    rows, access level, description shown by /help).
    """

    HELP = ("help", "help", AccessLevel.PUBLIC, "affiche ce texte.")
    BUREAU = (
        "bureau",
        "bureau",
        AccessLevel.AUTHORIZED,
        "Crée un sondage pour savoir qui est au bureau",
    )
    POLL = (
        "poll",
        "poll",
        AccessLevel.AUTHORIZED,
        "Crée un quiz sur une citation d'un des membres du comité",
    )
    AUTHENTICATE = (
        "auth",
        "auth",
        AccessLevel.PUBLIC,
        "Authentification admin: /auth <token> <nom>",
    )
    ADMIN_LIST = ("adminlist", "adminlist", AccessLevel.ADMIN, "(Admin) Liste les admins")
    ADMIN_REMOVE = (
        "adminremove",
        "adminremove",
        AccessLevel.ADMIN,
        "(Admin) Supprime un admin à partir de son nom",
    )
    AUTHORIZE = (
        "authorize",
        "authorize",
        AccessLevel.ADMIN,
        "(Admin) Autorise le groupe à utiliser la commande donnée",
    )
    UNAUTHORIZE = (
        "unauthorize",
        "unauthorize",
        AccessLevel.ADMIN,
        "(Admin) Révoque l'autorisation du groupe à utiliser la commande donnée",
    )
    AUTHORIZATIONS = (
        "authorizations",
        "authorizations",
        AccessLevel.ADMIN,
        "(Admin) Liste les commandes que ce groupe peut utiliser",
    )
    STATS = (
        "stats",
        "stats",
        AccessLevel.AUTHORIZED,
        "Affiche les stats des membres du comité",
    )
    # keys keep the historical spelling already stored in authorization rows
    COMMITTEE_ADD = (
        "committeeadd",
        "comitteeadd",
        AccessLevel.ADMIN,
        "(Admin) Ajoute des personnes au comité",
    )
    COMMITTEE_REMOVE = (
        "committeeremove",
        "comitteeremove",
        AccessLevel.ADMIN,
        "(Admin) Retire des personnes du comité",
    )

    def __init__(self, text: str, key: str, access: AccessLevel, description: str):
        self.text = text
        self.key = key
        self.access = access
        self.description = description

    @classmethod
    def from_text(cls, text: str) -> "Command | None":
        """Find a command by the name typed after the slash."""
        text = text.lower()
        for command in cls:
            if command.text == text:
                return command
        return None

    @classmethod
    def descriptions(cls) -> str:
        """Help text listing every command."""
        lines = ["Commandes disponibles :"]
        lines.extend(f"/{c.text} - {c.description}" for c in cls)
        return "\n".join(lines)


@dataclass(frozen=True)
class ParsedCommand:
    """A command found in a message, with its raw arguments."""

    command: Command
    args: str = ""


def parse_command(text: str | None, bot_username: str | None = None) -> ParsedCommand | None:
    """
    Parse a message text into a command.

    Accepts "/name", "/name args" and "/name@botname args". A command
    addressed to another bot, or an unknown name, is not a command.

    Args:
        text: Message text.
        bot_username: Username of this bot, to filter "/name@otherbot".

    Returns:
        ParsedCommand, or None if the text is not one of our commands.
    """
    if not text or not text.startswith("/"):
        return None

    head, _, args = text[1:].partition(" ")
    name, _, addressee = head.partition("@")
    if addressee and bot_username and addressee.lower() != bot_username.lower():
        return None

    command = Command.from_text(name)
    if command is None:
        return None

    return ParsedCommand(command=command, args=args.strip())
