from .interpreter import Command, CommandInterpreter, CommandKind, CommandResult

__all__ = ["Command", "CommandInterpreter", "CommandKind", "CommandResult"]
