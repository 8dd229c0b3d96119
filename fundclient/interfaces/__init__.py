from .command_sink import CommandEvent, CommandSink
from .display_sink import DisplaySink

__all__ = ["CommandEvent", "CommandSink", "DisplaySink"]
