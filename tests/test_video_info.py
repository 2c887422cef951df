"""
Tests for video metadata lookup.
"""

from unittest.mock import patch

from tubechat.core.video_info import VideoInfoFetcher


@patch("tubechat.core.video_info.YouTube")
def test_get_title(mock_youtube, test_video_id):
    mock_youtube.return_value.title = "Test Video Title"

    assert VideoInfoFetcher().get_title(test_video_id) == "Test Video Title"
    mock_youtube.assert_called_once_with(f"https://www.youtube.com/watch?v={test_video_id}")


@patch("tubechat.core.video_info.YouTube")
def test_get_title_falls_back_to_placeholder(mock_youtube, test_video_id):
    mock_youtube.side_effect = Exception("Video unavailable")

    assert VideoInfoFetcher().get_title(test_video_id) == f"YouTube Video {test_video_id}"
