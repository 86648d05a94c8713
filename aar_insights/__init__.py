"""Authentic Ad Rate insights package."""

from .application import (
    CampaignViewState,
    build_campaign_list,
    build_overview,
    filter_rows,
    flatten,
    run_reporting_pipeline,
    sort_rows,
)
from .channel_mix import ChannelMixEngine
from .domain import primary_driver
from .weighting import weighted_mean

__all__ = [
    "ChannelMixEngine",
    "CampaignViewState",
    "build_campaign_list",
    "build_overview",
    "filter_rows",
    "flatten",
    "primary_driver",
    "run_reporting_pipeline",
    "sort_rows",
    "weighted_mean",
]
