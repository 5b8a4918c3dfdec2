"""Tests for cut_release.models."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from cut_release.models import PackageInfo, ReleaseAnswers, ReleaseConfig


class TestPackageInfo:
    def test_ignores_other_fields(self) -> None:
        pkg = PackageInfo.model_validate({"name": "a", "version": "1.0.0", "scripts": {}})
        assert pkg.name == "a"


class TestReleaseConfig:
    def test_alias_for_self_update(self) -> None:
        assert ReleaseConfig.model_validate({"self-update": False}).self_update is False


class TestReleaseAnswers:
    def test_remote_split_at_first_slash(self) -> None:
        answers = ReleaseAnswers(version="patch", tag="latest", remote="origin/feat/x")
        assert answers.remote_name == "origin"
        assert answers.remote_branch == "feat/x"

    def test_no_remote(self) -> None:
        answers = ReleaseAnswers(version="patch", tag="latest")
        assert answers.remote_name is None
        assert answers.remote_branch is None

    def test_pre_increment_requires_preid(self) -> None:
        with pytest.raises(ValidationError):
            ReleaseAnswers(version="prerelease", tag="next")

    def test_preid_only_with_pre_increment(self) -> None:
        with pytest.raises(ValidationError):
            ReleaseAnswers(version="patch", preid="rc", tag="latest")

    def test_tag_must_not_be_empty(self) -> None:
        with pytest.raises(ValidationError):
            ReleaseAnswers(version="patch", tag="")
