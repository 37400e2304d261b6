"""Tests for the video qualifier."""

import pytest

from src.playlistgen.errors import OperationCancelled, UpstreamError
from src.playlistgen.qualifier import CandidateVideo, parse_timestamp, qualify_videos, to_candidate
from tests.factories import video_item


def test_to_candidate_admitted():
    """Test an admissible item becomes a CandidateVideo."""
    item = video_item("v1", duration="PT10M", title="Talk", channel_title="Chan")

    assert to_candidate(item) == CandidateVideo(
        video_id="v1",
        published_at="2024-01-01T00:00:00Z",
        title="Talk",
        channel_title="Chan",
        duration=600,
    )


@pytest.mark.parametrize("duration", ["PT1M", "PT20M1S", "PT2H", "P0D"])
def test_to_candidate_rejected(duration):
    """Test too short, too long and unparseable durations are dropped."""
    assert to_candidate(video_item("v1", duration=duration)) is None


def test_qualify_keeps_order_and_drops_rejects(client, youtube_client, cancel_token):
    """Test admitted videos keep their order and rejects vanish silently."""
    youtube_client.videos.return_value.list.return_value.execute.return_value = {
        "items": [
            video_item("v1", duration="PT5M"),
            video_item("v2", duration="PT30S"),
            video_item("v3", duration="PT20M"),
        ]
    }

    videos = qualify_videos(client, ["v1", "v2", "v3"], cancel_token)

    assert [video.video_id for video in videos] == ["v1", "v3"]


def test_qualify_batches_of_fifty(client, youtube_client, cancel_token):
    """Test IDs are split into batches of at most 50."""
    ids = [f"v{n}" for n in range(120)]
    youtube_client.videos.return_value.list.return_value.execute.side_effect = [
        {"items": [video_item(video_id) for video_id in ids[:50]]},
        {"items": [video_item(video_id) for video_id in ids[50:100]]},
        {"items": [video_item(video_id) for video_id in ids[100:]]},
    ]

    videos = qualify_videos(client, ids, cancel_token)

    assert [video.video_id for video in videos] == ids
    calls = youtube_client.videos.return_value.list.call_args_list
    assert [len(call.kwargs["id"].split(",")) for call in calls] == [50, 50, 20]


def test_qualify_empty_input(client, youtube_client, cancel_token):
    """Test nothing is requested for an empty list."""
    assert qualify_videos(client, [], cancel_token) == []
    youtube_client.videos.return_value.list.assert_not_called()


def test_qualify_cancelled(client, youtube_client, cancel_token):
    """Test a cancelled run sends no batch."""
    cancel_token.cancel()

    with pytest.raises(OperationCancelled):
        qualify_videos(client, ["v1"], cancel_token)
    youtube_client.videos.return_value.list.return_value.execute.assert_not_called()


def test_qualify_batch_failure_propagates(client, youtube_client, cancel_token):
    """Test a failed metadata call fails the stage."""
    youtube_client.videos.return_value.list.return_value.execute.return_value = {
        "error": {"message": "backendError"}
    }

    with pytest.raises(UpstreamError):
        qualify_videos(client, ["v1"], cancel_token)


def test_parse_timestamp():
    """Test publish times order correctly and bad values sort last."""
    assert parse_timestamp("2024-01-02T00:00:00Z") > parse_timestamp("2024-01-01T23:59:59Z")
    assert parse_timestamp("") == 0.0
    assert parse_timestamp("yesterday") == 0.0
