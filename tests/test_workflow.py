"""Tests for cut_release.workflow."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import MagicMock, call, patch

import pytest

from cut_release.errors import DirtyWorkingTreeError, FatalConflictError, MissingMetadataError
from cut_release.models import ReleaseAnswers, ReleaseOptions
from cut_release.workflow import run_release, validate_repository


@pytest.fixture
def mock_steps():
    """Patch every collaborator of run_release and hand back the mocks."""
    with (
        patch("cut_release.workflow.maybe_self_update") as self_update,
        patch("cut_release.workflow.check_clean") as check_clean,
        patch("cut_release.workflow.detect_tracking", return_value=None) as tracking,
        patch("cut_release.workflow.gather_answers") as gather,
        patch("cut_release.workflow.check_sync") as check_sync,
        patch("cut_release.workflow.resolve_tag_conflict") as tag_conflict,
        patch("cut_release.workflow.run_plan") as run_plan,
        patch("cut_release.workflow.info"),
        patch("cut_release.workflow.success") as success,
    ):
        yield {
            "self_update": self_update,
            "check_clean": check_clean,
            "tracking": tracking,
            "gather": gather,
            "check_sync": check_sync,
            "tag_conflict": tag_conflict,
            "run_plan": run_plan,
            "success": success,
        }


class TestRunRelease:
    """Tests for run_release()."""

    def test_full_release_with_remote(self, package_dir: Path, mock_steps: dict) -> None:
        mock_steps["gather"].return_value = ReleaseAnswers(
            version="minor", tag="latest", remote="origin/main", confirm=True
        )

        assert run_release(ReleaseOptions(increment="minor", yes=True), argv=["minor", "-y"]) is True

        mock_steps["self_update"].assert_called_once_with(["minor", "-y"])
        mock_steps["check_clean"].assert_called_once()
        mock_steps["check_sync"].assert_called_once_with("origin", "main", None)
        mock_steps["tag_conflict"].assert_called_once_with("1.3.0", dry_run=False)
        mock_steps["run_plan"].assert_called_once_with(
            [
                ("npm", "version", "1.3.0"),
                ("git", "push", "origin", "main"),
                ("git", "push", "origin", "v1.3.0"),
                ("npm", "publish", "--tag", "latest"),
            ],
            dry_run=False,
        )
        mock_steps["success"].assert_called_once_with("Done")

    def test_declined_confirmation_changes_nothing(self, package_dir: Path, mock_steps: dict) -> None:
        mock_steps["gather"].return_value = ReleaseAnswers(version="patch", tag="latest", confirm=False)

        assert run_release(ReleaseOptions()) is False

        mock_steps["check_sync"].assert_not_called()
        mock_steps["run_plan"].assert_not_called()

    def test_dry_run_skips_self_update(self, package_dir: Path, mock_steps: dict) -> None:
        mock_steps["gather"].return_value = ReleaseAnswers(version="patch", tag="latest", confirm=True)

        run_release(ReleaseOptions(increment="patch", dry_run=True))

        mock_steps["self_update"].assert_not_called()
        assert mock_steps["run_plan"].call_args == call(
            [("npm", "version", "1.2.4"), ("npm", "publish", "--tag", "latest")], dry_run=True
        )

    def test_config_disables_self_update_and_sets_message(
        self, package_dir: Path, mock_steps: dict
    ) -> None:
        (package_dir / ".cut-release.toml").write_text(
            'self-update = false\nmessage = "release %s"\n'
        )
        mock_steps["gather"].return_value = ReleaseAnswers(version="patch", tag="latest", confirm=True)

        run_release(ReleaseOptions(increment="patch"))

        mock_steps["self_update"].assert_not_called()
        plan = mock_steps["run_plan"].call_args[0][0]
        assert plan[0] == ("npm", "version", "1.2.4", "--message", "release %s")

    def test_cli_message_overrides_config(self, package_dir: Path, mock_steps: dict) -> None:
        (package_dir / ".cut-release.toml").write_text('message = "release %s"\n')
        mock_steps["gather"].return_value = ReleaseAnswers(version="patch", tag="latest", confirm=True)

        run_release(ReleaseOptions(increment="patch", message="v%s"))

        plan = mock_steps["run_plan"].call_args[0][0]
        assert plan[0] == ("npm", "version", "1.2.4", "--message", "v%s")

    def test_dirty_tree_stops_before_prompting(self, package_dir: Path, mock_steps: dict) -> None:
        mock_steps["check_clean"].side_effect = DirtyWorkingTreeError("dirty")

        with pytest.raises(DirtyWorkingTreeError):
            run_release(ReleaseOptions())

        mock_steps["gather"].assert_not_called()

    def test_missing_package_json(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch, mock_steps: dict
    ) -> None:
        monkeypatch.chdir(tmp_path)

        with pytest.raises(MissingMetadataError):
            run_release(ReleaseOptions())

        mock_steps["check_clean"].assert_not_called()

    def test_tag_conflict_aborts_before_running(self, package_dir: Path, mock_steps: dict) -> None:
        mock_steps["gather"].return_value = ReleaseAnswers(
            version="patch", tag="latest", remote="origin/main", confirm=True
        )
        mock_steps["tag_conflict"].side_effect = FatalConflictError("The git tag v1.2.4 already exists")

        with pytest.raises(FatalConflictError):
            run_release(ReleaseOptions(increment="patch"))

        mock_steps["run_plan"].assert_not_called()


    def test_release_from_branch_tracking_differently_named_upstream(
        self, package_dir: Path, mock_steps: dict
    ) -> None:
        mock_steps["gather"].return_value = ReleaseAnswers(
            version="patch", tag="latest", remote="origin/main", branch="dev", confirm=True
        )

        run_release(ReleaseOptions(increment="patch", yes=True))

        mock_steps["check_sync"].assert_called_once_with("origin", "main", "dev")
        plan = mock_steps["run_plan"].call_args[0][0]
        assert plan[1] == ("git", "push", "origin", "dev:main")

class TestValidateRepository:
    @patch("cut_release.workflow.resolve_tag_conflict")
    @patch("cut_release.workflow.check_sync")
    def test_no_remote_skips_checks(self, mock_sync: MagicMock, mock_tag: MagicMock) -> None:
        validate_repository(ReleaseAnswers(version="patch", tag="latest"), "1.2.4", dry_run=False)

        mock_sync.assert_not_called()
        mock_tag.assert_not_called()

    @patch("cut_release.workflow.resolve_tag_conflict")
    @patch("cut_release.workflow.check_sync")
    def test_sync_checked_before_tags(self, mock_sync: MagicMock, mock_tag: MagicMock) -> None:
        parent = MagicMock()
        parent.attach_mock(mock_sync, "sync")
        parent.attach_mock(mock_tag, "tag")
        answers = ReleaseAnswers(version="patch", tag="latest", remote="origin/main")

        validate_repository(answers, "1.2.4", dry_run=True)

        assert parent.mock_calls == [
            call.sync("origin", "main", None),
            call.tag("1.2.4", dry_run=True),
        ]

    @patch("cut_release.workflow.resolve_tag_conflict")
    @patch("cut_release.workflow.check_sync")
    def test_local_branch_passed_to_sync_check(self, mock_sync: MagicMock, mock_tag: MagicMock) -> None:
        answers = ReleaseAnswers(version="patch", tag="latest", remote="origin/main", branch="dev")

        validate_repository(answers, "1.2.4", dry_run=False)

        mock_sync.assert_called_once_with("origin", "main", "dev")
