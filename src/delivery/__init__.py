"""
Delivery: how sessions reach their clients.

Components:
- OutputSink: styled line output
- StreamChannel / TerminalChannel: single-shot question reads
- QuizServer: asyncio TCP server, one session per connection
"""

from .channel import QuestionChannel, StreamChannel, TerminalChannel
from .output import OutputSink, colorize, figlet

__all__ = [
    "OutputSink",
    "colorize",
    "figlet",
    "QuestionChannel",
    "StreamChannel",
    "TerminalChannel",
]
