import logging
from dataclasses import dataclass
from enum import Enum

from chat_core.memory import ConversationStore

logger = logging.getLogger(__name__)


class CommandKind(str, Enum):
    NEW = "new"
    DELETE = "delete"
    HELP = "help"
    QUIT = "quit"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class Command:
    """A parsed session meta-command and the text it was parsed from."""
    kind: CommandKind
    raw_input: str


@dataclass(frozen=True)
class CommandResult:
    """
    The outcome of handling a command. `should_exit` is the signal for the
    host to end the session; the interpreter never exits the process itself.
    """
    kind: CommandKind
    message: str
    should_exit: bool = False


COMMAND_PREFIX = ":"

COMMAND_ALIASES = {
    ":new": CommandKind.NEW,
    ":del": CommandKind.DELETE,
    ":help": CommandKind.HELP,
    ":quit": CommandKind.QUIT,
    ":exit": CommandKind.QUIT,
    ":q": CommandKind.QUIT,
}

HELP_TEXT = """Available Commands:
==================
:new    - Start a new conversation (clears history)
:del    - Delete your last message
:help   - Show this help message
:quit   - Exit the application (:q, :exit also work)

Simply type your message and press Enter to chat with the AI.
Commands are vim-style and start with a colon (:)."""


class CommandInterpreter:
    """Recognizes and executes session meta-commands such as `:new` or `:quit`."""

    def is_command(self, text: str) -> bool:
        stripped = (text or "").lstrip()
        return bool(stripped) and stripped.startswith(COMMAND_PREFIX)

    def parse_command(self, text: str) -> Command:
        """
        Maps the input onto a command kind. Matching is literal after trimming
        and lower-casing, so commands with extra arguments are unknown.
        """
        if not text or not text.strip():
            return Command(kind=CommandKind.UNKNOWN, raw_input=text or "")

        normalized = text.strip().lower()
        kind = COMMAND_ALIASES.get(normalized, CommandKind.UNKNOWN)
        return Command(kind=kind, raw_input=text)

    def handle_command(self, command: Command, conversation: ConversationStore) -> CommandResult:
        logger.info(f"Handling command '{command.kind.value}'.")

        if command.kind == CommandKind.NEW:
            conversation.clear_conversation()
            return CommandResult(
                kind=command.kind,
                message="✓ Started new conversation. Previous history cleared.",
            )

        if command.kind == CommandKind.DELETE:
            # Same feedback whether or not a message was actually removed.
            conversation.remove_last_user_message()
            return CommandResult(kind=command.kind, message="✓ Removed your last message.")

        if command.kind == CommandKind.HELP:
            return CommandResult(kind=command.kind, message=self.get_help_text())

        if command.kind == CommandKind.QUIT:
            return CommandResult(kind=command.kind, message="Goodbye!", should_exit=True)

        return CommandResult(
            kind=CommandKind.UNKNOWN,
            message=f"Unknown command: {command.raw_input}\nType :help for available commands.",
        )

    def get_help_text(self) -> str:
        return HELP_TEXT
