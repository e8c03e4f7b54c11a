"""World status monitor for the FINAL FANTASY XIV Lodestone.

Polls the world status page for one world's population tier and relays
availability changes to a Telegram chat.
"""

__version__ = "0.1.0"
