"""Video source normalization for catalog lessons.

The catalog reports a lesson's video in one of three shapes: a hosted (Mux)
video asset, a YouTube embed, or a Loom embed. The asset payload itself uses
several spellings for the same field depending on which endpoint produced it.
``normalize_video_source`` resolves all of that into one ``NormalizedVideo``
in a fixed priority order:

video_id
    ``asset_id``, then the caller-provided video id, then the asset's ``id``.
playback_id
    ``playback_id``, then ``signed_playback_id`` (the id is extracted when the
    value is a ``stream.mux.com/<id>`` URL), then ``playbackId``, then the
    caller-provided playback id.
signed_playback_token
    ``signed_video_playback_token``, ``signedVideoPlaybackToken``,
    ``signed_token``, looked up on the asset first and then on the lesson,
    then the caller-provided token.
video_source_type
    The explicit type, else ``mux`` when there is a playback id or any video
    asset, else the embed type when it is ``youtube`` or ``loom``.

Storing an asset id as the playback id breaks playback for every member, so a
playback id equal to the video id is treated as a normalization bug whenever
the asset shows the two should differ (see ``_playback_collides``).
"""

import re
from dataclasses import dataclass
from typing import Any

from knowledge_portal.domain.enums import EmbedType, VideoSourceType
from knowledge_portal.logging import get_logger

logger = get_logger(__name__)

# https://stream.mux.com/{playback_id}.m3u8?token=...
MUX_STREAM_URL = re.compile(r"stream\.mux\.com/([^?/.]+)")

TOKEN_FIELDS = ("signed_video_playback_token", "signedVideoPlaybackToken", "signed_token")

# Upstream asset status once the playback id exists
ASSET_READY = "ready"


@dataclass(frozen=True)
class NormalizedVideo:
    """Resolved video identifiers for a lesson."""

    video_id: str | None = None
    playback_id: str | None = None
    signed_playback_token: str | None = None
    embed_id: str | None = None
    embed_type: str | None = None
    video_source_type: VideoSourceType | None = None
    asset_status: str | None = None  # Upstream processing status of a hosted asset

    @property
    def is_hosted(self) -> bool:
        return self.video_source_type == VideoSourceType.MUX

    @property
    def is_processing(self) -> bool:
        """Whether the hosted asset reports a non-ready processing status."""
        return bool(self.asset_status) and self.asset_status != ASSET_READY


def extract_playback_id(value: str | None) -> str | None:
    """Get a playback id from a signed playback field.

    The field holds either a streaming URL or the bare playback id.
    """
    if not value:
        return None
    match = MUX_STREAM_URL.search(value)
    if match:
        return match.group(1)
    return value


def _resolve_token(*payloads: dict[str, Any] | None) -> str | None:
    for payload in payloads:
        if not payload:
            continue
        for key in TOKEN_FIELDS:
            if payload.get(key):
                return payload[key]
    return None


def _resolve_playback_id(asset: dict[str, Any], fallback: str | None) -> str | None:
    if asset.get("playback_id"):
        return asset["playback_id"]
    if asset.get("signed_playback_id"):
        return extract_playback_id(asset["signed_playback_id"])
    if asset.get("playbackId"):
        return asset["playbackId"]
    return fallback


def _playback_collides(asset: dict[str, Any], playback_id: str | None, video_id: str | None) -> bool:
    """Detect an asset identifier that ended up in the playback id slot.

    Fires when the playback id equals the video id and the asset itself shows
    they should differ: its ``asset_id`` and ``id`` are both present and
    distinct, or its ``asset_id`` differs from its own ``playback_id`` field.
    An asset whose ``asset_id`` and ``playback_id`` legitimately match does not
    trigger it.
    """
    if not playback_id or playback_id != video_id:
        return False

    asset_id = asset.get("asset_id")
    generic_id = asset.get("id")
    if asset_id and generic_id and asset_id != generic_id:
        return True
    return bool(asset_id) and asset_id != asset.get("playback_id")


def resolve_source_type(
    explicit: str | VideoSourceType | None,
    playback_id: str | None,
    has_asset: bool,
    embed_type: str | None,
) -> VideoSourceType | None:
    if explicit:
        return VideoSourceType(explicit)
    if playback_id or has_asset:
        return VideoSourceType.MUX
    if embed_type in (EmbedType.YOUTUBE, EmbedType.LOOM):
        return VideoSourceType(embed_type)
    return None


def normalize_video_source(
    video_asset: dict[str, Any] | None = None,
    embed_id: str | None = None,
    embed_type: str | None = None,
    explicit_source_type: str | VideoSourceType | None = None,
    lesson: dict[str, Any] | None = None,
    video_id: str | None = None,
    playback_id: str | None = None,
    signed_token: str | None = None,
) -> NormalizedVideo:
    """Resolve a lesson's video identifiers from raw catalog payloads.

    Args:
        video_asset: Raw ``video_asset`` payload, if the lesson has one
        embed_id: Raw embed id (YouTube/Loom)
        embed_type: Raw embed type
        explicit_source_type: Source type given by the caller; wins if set
        lesson: Raw lesson payload, searched for the signed token
        video_id: Caller-provided video id
        playback_id: Caller-provided playback id
        signed_token: Caller-provided signed playback token

    Returns:
        NormalizedVideo. Validation (required fields per source type) is the
        caller's responsibility.

    Raises:
        ValueError: If ``explicit_source_type`` is not a known source type
    """
    resolved_video_id = video_id
    resolved_playback_id = playback_id
    asset_status = None

    if video_asset:
        resolved_video_id = video_asset.get("asset_id") or video_id or video_asset.get("id")
        resolved_playback_id = _resolve_playback_id(video_asset, playback_id)
        asset_status = video_asset.get("status")

        if _playback_collides(video_asset, resolved_playback_id, resolved_video_id):
            logger.error(
                "playback_id_matches_video_id",
                video_id=resolved_video_id,
                asset_id=video_asset.get("asset_id"),
                asset_playback_id=video_asset.get("playback_id"),
            )
            strict = video_asset.get("playback_id")
            resolved_playback_id = strict if strict and strict != resolved_video_id else None

    token = _resolve_token(video_asset, lesson) or signed_token

    source_type = resolve_source_type(
        explicit_source_type,
        resolved_playback_id,
        bool(video_asset),
        embed_type,
    )

    return NormalizedVideo(
        video_id=resolved_video_id or None,
        playback_id=resolved_playback_id or None,
        signed_playback_token=token or None,
        embed_id=embed_id or None,
        embed_type=embed_type or None,
        video_source_type=source_type,
        asset_status=asset_status,
    )
