"""
Video metadata lookup.
"""

from pytubefix import YouTube

from tubechat.utils.helpers import build_watch_url
from tubechat.utils.logger import logging


def placeholder_title(video_id: str) -> str:
    return f"YouTube Video {video_id}"


class VideoInfoFetcher:
    """Resolves display metadata for a YouTube video."""

    def get_title(self, video_id: str) -> str:
        """
        Get the title of a video, or a placeholder if it cannot be read.

        Metadata is cosmetic; a lookup failure never blocks a chat.
        """
        try:
            title = YouTube(build_watch_url(video_id)).title
        except Exception as e:
            logging.warning(f"Could not read title for video {video_id}: {e}")
            return placeholder_title(video_id)
        return title or placeholder_title(video_id)
