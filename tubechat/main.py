"""
Command line entry point for the YouTube transcript chat application.
"""

import argparse
import asyncio
import json
import sys
from typing import List, Optional

from dotenv import load_dotenv

from tubechat.config import config
from tubechat.core.chat.handler import ChatHandler
from tubechat.core.chat.session import SessionManager
from tubechat.core.chat.store import InMemorySessionStore
from tubechat.core.completion import CompletionService
from tubechat.core.formatter import render_output
from tubechat.core.transcriber import TranscriptFetcher
from tubechat.models.schemas import OutputFormat
from tubechat.utils.error_handling import TubeChatError
from tubechat.utils.helpers import extract_video_id
from tubechat.utils.logger import logging


def print_transcript(video_id: str, lang: str, fmt: OutputFormat, fallback: bool = True) -> None:
    """Fetch a transcript and print it in the requested format."""
    fetcher = TranscriptFetcher()
    if fallback:
        segments = fetcher.fetch_with_fallback(video_id, lang).segments
    else:
        segments = fetcher.fetch(video_id, lang)

    output = render_output(segments, fmt)
    if isinstance(output, str):
        print(output)
    else:
        print(json.dumps(output, indent=2, default=lambda seg: seg.model_dump()))


async def chat_loop(video_id: str, lang: str, model: Optional[str] = None, lines: Optional[List[str]] = None) -> None:
    """
    Interactive chat about a video in the terminal.

    Args:
        video_id: YouTube video ID
        lang: Preferred caption language
        model: Optional model override
        lines: Pre-supplied user messages (reads stdin when None)
    """
    manager = SessionManager(InMemorySessionStore())
    handler = ChatHandler(manager, CompletionService())
    session_id = None

    source = iter(lines) if lines is not None else None
    while True:
        try:
            message = next(source) if source is not None else input("you> ")
        except (StopIteration, EOFError):
            break

        message = message.strip()
        if not message:
            continue
        if message in ("/quit", "/exit"):
            break

        try:
            result = await handler.handle_turn(message, video_id, session_id=session_id, model=model, language=lang)
        except TubeChatError as e:
            print(f"[{e.code}] {e.message}")
            continue

        session_id = result.session_id
        print(f"assistant> {result.message.content}\n")


def main():
    """Main function to run the application from command line."""
    load_dotenv()

    parser = argparse.ArgumentParser(description="YouTube Transcript Chat")
    parser.add_argument("url", help="YouTube video URL or ID")
    parser.add_argument("--lang", default=config.DEFAULT_LANGUAGE, help="Preferred caption language")
    parser.add_argument(
        "--format",
        default=OutputFormat.TEXT_ONLY.value,
        choices=[fmt.value for fmt in OutputFormat],
        help="Transcript output format",
    )
    parser.add_argument("--no-fallback", action="store_true", help="Do not try other caption languages")
    parser.add_argument("--chat", action="store_true", help="Chat about the video instead of printing its transcript")
    parser.add_argument("--model", default=None, help="Model to chat with")

    args = parser.parse_args()

    video_id = extract_video_id(args.url)
    if not video_id:
        parser.error("Could not extract a video ID from the URL")

    try:
        if args.chat:
            asyncio.run(chat_loop(video_id, args.lang, model=args.model))
        else:
            print_transcript(video_id, args.lang, OutputFormat(args.format), fallback=not args.no_fallback)
    except TubeChatError as e:
        logging.error(f"{e.code}: {e.message}")
        sys.exit(1)


if __name__ == "__main__":
    main()
