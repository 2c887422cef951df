"""
YouTube Transcript Chat.

Fetch the captions of a YouTube video and chat with a language model
whose answers are grounded in that transcript.
"""

from tubechat.config import config

__version__ = config.APP_VERSION
