"""Tests for settings, summary export and the reporting pipeline."""

import json
from pathlib import Path

import openpyxl
import polars as pl
import pytest

from aar_insights import config
from aar_insights.application.overview_service import build_overview
from aar_insights.application.report_service import goal_rows, run_reporting_pipeline, summary_sheets
from aar_insights.application.view_state import CampaignViewState, GoalViewState
from aar_insights.config import Settings
from aar_insights.domain.models import GoalOverrides, MediaType, Platform
from aar_insights.infrastructure import summary_exporter
from aar_insights.infrastructure.summary_exporter import (
    PERCENT_FORMAT,
    SheetSpec,
    save_summary_json,
    save_summary_workbook,
    write_summary_workbook,
)
from tests.factories import make_goal

SAMPLE_PATH = Path(__file__).resolve().parent.parent / "data" / "sample_dataset.json"


# ── Settings ─────────────────────────────────────────────────────────


def test_settings_from_env(monkeypatch, tmp_path):
    monkeypatch.setenv("AAR_INPUT_PATH", str(tmp_path / "in.json"))
    monkeypatch.setenv("AAR_OUTPUT_DIR", str(tmp_path / "out"))
    monkeypatch.setenv("AAR_BLOCK_RATE_WARNING", "12.5")
    monkeypatch.setenv("AAR_LOG_LEVEL", "debug")
    settings = Settings.from_env()
    assert settings.input_path == tmp_path / "in.json"
    assert settings.output_dir == tmp_path / "out"
    assert settings.block_rate_warning == 12.5
    assert settings.log_level == "DEBUG"


def test_settings_defaults(monkeypatch):
    for name in ("AAR_INPUT_PATH", "AAR_OUTPUT_DIR", "AAR_BLOCK_RATE_WARNING", "AAR_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)
    settings = Settings.from_env()
    assert settings.input_path == config.DEFAULT_INPUT_PATH
    assert settings.block_rate_warning == config.DEFAULT_BLOCK_RATE_WARNING
    assert settings.log_level == "INFO"


@pytest.mark.parametrize("raw", ["abc", "-1", "101"])
def test_invalid_block_rate_warning(monkeypatch, raw):
    monkeypatch.setenv("AAR_BLOCK_RATE_WARNING", raw)
    with pytest.raises(ValueError, match="AAR_BLOCK_RATE_WARNING"):
        Settings.from_env()


def test_invalid_log_level(monkeypatch):
    monkeypatch.setenv("AAR_LOG_LEVEL", "chatty")
    with pytest.raises(ValueError, match="AAR_LOG_LEVEL"):
        Settings.from_env()


# ── Summary export ───────────────────────────────────────────────────


def _sheet(**overrides):
    fields = {
        "name": "channel_mix",
        "frame": pl.DataFrame({"platform": ["meta", "youtube"], "block_rate": [4.5, None], "spend": [100.0, 0.0]}),
        "percent_columns": ("block_rate", "viewability_rate"),
        "currency_columns": ("spend",),
    }
    fields.update(overrides)
    return SheetSpec(**fields)


def test_sheet_spec_formats_only_present_columns():
    formats = _sheet().column_formats()
    assert formats == {"block_rate": PERCENT_FORMAT, "spend": '"$"#,##0'}


def test_sheet_spec_title_is_truncated_for_excel():
    assert len(_sheet(name="x" * 40).title) == 31


def test_write_summary_workbook_creates_all_tabs(tmp_path):
    path = tmp_path / "nested" / "out.xlsx"
    write_summary_workbook(path, [_sheet(), _sheet(name="goals")])
    workbook = openpyxl.load_workbook(path)
    assert workbook.sheetnames == ["channel_mix", "goals"]
    header = [cell.value for cell in next(workbook["channel_mix"].iter_rows(max_row=1))]
    assert header == ["platform", "block_rate", "spend"]


def test_openpyxl_fallback_applies_number_formats(tmp_path, monkeypatch):
    def _broken(path, sheets):
        raise RuntimeError("writer unavailable")

    monkeypatch.setattr(summary_exporter, "_write_with_polars", _broken)
    path = tmp_path / "fallback.xlsx"
    write_summary_workbook(path, [_sheet()])
    worksheet = openpyxl.load_workbook(path)["channel_mix"]
    assert worksheet["B2"].value == 4.5
    assert worksheet["B2"].number_format == PERCENT_FORMAT
    assert worksheet["B3"].value is None


def test_write_summary_workbook_requires_sheets(tmp_path):
    with pytest.raises(ValueError):
        write_summary_workbook(tmp_path / "empty.xlsx", [])


def test_save_summary_workbook_reports_locked_file(tmp_path, monkeypatch):
    def _locked(path, sheets):
        raise PermissionError("file is open")

    monkeypatch.setattr(summary_exporter, "write_summary_workbook", _locked)
    assert save_summary_workbook(tmp_path / "locked.xlsx", [_sheet()]) == (False, "file is open")


def test_save_summary_workbook_reports_success(tmp_path):
    assert save_summary_workbook(tmp_path / "ok.xlsx", [_sheet()]) == (True, "")


def test_save_summary_json(tmp_path):
    path = save_summary_json(tmp_path / "out" / "summary.json", {"overview": {"insight": "—"}})
    assert json.loads(path.read_text(encoding="utf-8")) == {"overview": {"insight": "—"}}


# ── Pipeline ─────────────────────────────────────────────────────────


def test_run_reporting_pipeline_on_sample(tmp_path):
    settings = Settings(
        input_path=SAMPLE_PATH,
        output_dir=tmp_path,
        block_rate_warning=10.0,
        log_level="INFO",
    )
    view_state = CampaignViewState.from_params({"status": "active", "platform": "meta", "sort": "spend", "dir": "desc"})
    summary = run_reporting_pipeline(settings, view_state=view_state, overrides={"camp-u2": "goal-5"})

    assert (tmp_path / "summary.json").exists()
    assert (tmp_path / "summary.xlsx").exists()
    written = json.loads((tmp_path / "summary.json").read_text(encoding="utf-8"))
    assert written == summary

    campaign_ids = [row["id"] for row in summary["campaigns"]["rows"]]
    assert campaign_ids == ["camp-101", "camp-501", "camp-u2"]
    by_id = {row["id"]: row for row in summary["campaigns"]["rows"]}
    assert by_id["camp-u2"]["goal_name"] == "Meta Retargeting"
    assert by_id["camp-u2"]["link"] == "/goals/goal-5/campaigns/camp-u2"
    assert summary["campaigns"]["query"] == "status=active&platform=meta&sort=spend&dir=desc"
    assert summary["campaigns"]["total"] == 9

    channels = summary["channel_mix"]
    assert [row["platform"] for row in channels] == ["open-web", "meta", "ctv", "youtube", "total"]
    assert channels[3]["authentic_ad_rate_text"] == "—"
    assert channels[0]["primary_driver"] == "Viewability"
    assert channels[2]["primary_driver"] == "Fraud"
    assert "spend" in summary["overview"]
    assert all("total_spend" in row for row in summary["goals"])


def _settings(tmp_path, input_path=SAMPLE_PATH):
    return Settings(input_path=input_path, output_dir=tmp_path, block_rate_warning=10.0, log_level="INFO")


def test_summary_sheets_have_expected_tabs(tmp_path):
    summary = run_reporting_pipeline(_settings(tmp_path))
    sheets = {sheet.name: sheet for sheet in summary_sheets(summary)}
    assert list(sheets) == ["channel_mix", "goals", "goal_list", "campaigns"]
    assert sheets["campaigns"].frame.height == 9
    assert sheets["campaigns"].frame["name"].to_list()[0] == "Cart Abandoners"
    assert sheets["goal_list"].frame.height == 5
    assert sheets["channel_mix"].column_formats()["block_rate"] == PERCENT_FORMAT
    assert openpyxl.load_workbook(tmp_path / "summary.xlsx").sheetnames == list(sheets)


# ── Goal list ────────────────────────────────────────────────────────


def test_pipeline_builds_unfiltered_goal_list(tmp_path):
    goal_list = run_reporting_pipeline(_settings(tmp_path))["goal_list"]
    assert goal_list["total"] == 5
    assert [row["id"] for row in goal_list["rows"]] == ["goal-1", "goal-2", "goal-3", "goal-4", "goal-5"]
    assert goal_list["available_platforms"] == ["meta", "open-web", "ctv", "youtube"]
    assert goal_list["status_counts"] == {"on-track": 3, "at-risk": 1, "needs-attention": 1}
    assert goal_list["platform_counts"]["meta"] == 2
    assert goal_list["query"] == ""


def test_pipeline_filters_goal_list(tmp_path):
    goal_view_state = GoalViewState.from_params({"status": "on-track", "platform": "meta"})
    goal_list = run_reporting_pipeline(_settings(tmp_path), goal_view_state=goal_view_state)["goal_list"]
    assert [row["id"] for row in goal_list["rows"]] == ["goal-1", "goal-5"]
    assert goal_list["query"] == "status=on-track&platform=meta"
    assert goal_list["status_counts"]["at-risk"] == 1
    assert goal_list["rows"][0]["link"] == "/goals/goal-1"


def test_created_goal_joins_goal_and_campaign_lists(tmp_path):
    summary = run_reporting_pipeline(
        _settings(tmp_path),
        overrides={"camp-u1": "goal-6"},
        include_created_goal=True,
        goal_overrides=GoalOverrides(connected_dsp="DV360", platform=Platform.TWITCH, name="Twitch Launch"),
    )
    goal_list = summary["goal_list"]
    assert goal_list["total"] == 6
    first = goal_list["rows"][0]
    assert (first["id"], first["name"], first["platform"], first["connected_dsp"]) == (
        "goal-6",
        "Twitch Launch",
        "twitch",
        "DV360",
    )
    assert goal_list["available_platforms"][0] == "twitch"

    by_id = {row["id"]: row for row in summary["campaigns"]["rows"]}
    assert by_id["camp-u1"]["goal_name"] == "Twitch Launch"
    assert by_id["camp-u1"]["link"] == "/goals/goal-6/campaigns/camp-u1"
    assert by_id["camp-u1"]["assignable"] is False

    assert summary["overview"]["platform_count"] == 4
    assert all(row["platform"] != "twitch" for row in summary["channel_mix"])


def test_created_goal_requires_dataset_record(tmp_path):
    path = tmp_path / "dataset.json"
    path.write_text(json.dumps({"goals": [], "unassignedCampaigns": []}), encoding="utf-8")
    with pytest.raises(ValueError, match="createdGoal"):
        run_reporting_pipeline(_settings(tmp_path, input_path=path), include_created_goal=True)


def test_goal_rows_fall_back_to_platform_media_type():
    goals = [
        make_goal("g1", platforms=(Platform.TIKTOK,), media_type=None),
        make_goal("g2", platforms=(Platform.LINKEDIN,), media_type=None),
        make_goal("g3", platforms=(Platform.META,), media_type=MediaType.VIDEO),
    ]
    rows = {row["id"]: row for row in goal_rows(build_overview(goals))}
    assert rows["g1"]["media_type"] == "social"
    assert rows["g2"]["media_type"] is None
    assert rows["g3"]["media_type"] == "video"
