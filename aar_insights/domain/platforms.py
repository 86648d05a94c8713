"""Platform and media-type catalog."""

from __future__ import annotations

from dataclasses import dataclass

from aar_insights.domain.models import MediaType, Platform

PLATFORM_LABELS: dict[Platform, str] = {
    Platform.OPEN_WEB: "Open Web",
    Platform.META: "Meta",
    Platform.TIKTOK: "TikTok",
    Platform.YOUTUBE: "YouTube",
    Platform.CTV: "CTV",
    Platform.SNAPCHAT: "Snapchat",
    Platform.LINKEDIN: "LinkedIn",
    Platform.TWITCH: "Twitch",
}


@dataclass(frozen=True)
class MediaTypeConfig:
    media_type: MediaType
    label: str
    desc: str
    metric_focus: str
    platforms: tuple[Platform, ...]


MEDIA_TYPE_CONFIGS: dict[MediaType, MediaTypeConfig] = {
    MediaType.DISPLAY: MediaTypeConfig(
        media_type=MediaType.DISPLAY,
        label="Display",
        desc="Banner and native ads across the open web",
        metric_focus="Block Rate & URL verification",
        platforms=(Platform.OPEN_WEB,),
    ),
    MediaType.SOCIAL: MediaTypeConfig(
        media_type=MediaType.SOCIAL,
        label="Social",
        desc="Walled garden platforms",
        metric_focus="Feed-level Brand Safety analysis",
        platforms=(Platform.META, Platform.TIKTOK, Platform.SNAPCHAT),
    ),
    MediaType.VIDEO: MediaTypeConfig(
        media_type=MediaType.VIDEO,
        label="Video",
        desc="Pre-roll, mid-roll, and outstream video",
        metric_focus="Viewability & Attention metrics",
        platforms=(Platform.YOUTUBE,),
    ),
    MediaType.CTV: MediaTypeConfig(
        media_type=MediaType.CTV,
        label="CTV",
        desc="Connected TV streaming environments",
        metric_focus="Fraud (SIVT) & app-level verification",
        platforms=(Platform.CTV,),
    ),
}


def platform_label(platform: Platform | str) -> str:
    return PLATFORM_LABELS[Platform(platform)]


def media_type_for_platform(platform: Platform) -> MediaType | None:
    for config in MEDIA_TYPE_CONFIGS.values():
        if platform in config.platforms:
            return config.media_type
    return None
