"""Data models for cut-release.

These Pydantic models represent the core data structures passed between
the prompts, the validation checks and the command sequencer.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, model_validator

Command = tuple[str, ...]


class PackageInfo(BaseModel):
    """The package being released, as read from package.json.

    Attributes:
        name: Package name.
        version: Current version string.
    """

    model_config = ConfigDict(extra="ignore")

    name: str
    version: str


class ReleaseConfig(BaseModel):
    """Project defaults from .cut-release.toml or [tool.cut-release].

    Attributes:
        tag: Distribution tag used when no tag prompt is needed.
        preids: Prerelease identifiers offered when prompting.
        message: Default commit message template for `npm version`.
        self_update: Whether to check PyPI for a newer cut-release.
    """

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    tag: str = "latest"
    preids: list[str] = Field(default_factory=lambda: ["rc", "alpha", "beta"])
    message: str | None = None
    self_update: bool = Field(default=True, alias="self-update")


class ReleaseOptions(BaseModel):
    """Flags supplied on the command line.

    A value of None means "not given", so the matching prompt runs. An
    empty tag is meaningful: it forces the tag prompt.
    """

    increment: str | None = None
    preid: str | None = None
    tag: str | None = None
    yes: bool = False
    dry_run: bool = False
    message: str | None = None


class Tracking(BaseModel):
    """The current branch and the remote/branch it tracks, if any."""

    branch: str
    upstream: str | None = None


class ReleaseAnswers(BaseModel):
    """Everything the user decided for this release.

    Attributes:
        version: Increment keyword or explicit version.
        preid: Prerelease identifier; set only for "pre*" increments.
        tag: Distribution tag to publish under.
        remote: "remote/branch" to push to, or None outside a repo.
        branch: Local branch being released, or None outside a repo.
        set_remote: True when the branch has no upstream yet and one must
                    be configured before pushing.
        confirm: Whether the user agreed to go ahead.
    """

    version: str
    preid: str | None = None
    tag: str
    remote: str | None = None
    branch: str | None = None
    set_remote: bool = False
    confirm: bool = False

    @model_validator(mode="after")
    def _check_preid(self) -> ReleaseAnswers:
        if self.version.startswith("pre") != bool(self.preid):
            raise ValueError(
                "preid must be set exactly when version is a pre* increment"
            )
        if not self.tag:
            raise ValueError("tag must not be empty")
        return self

    @property
    def remote_name(self) -> str | None:
        return self.remote.partition("/")[0] if self.remote else None

    @property
    def remote_branch(self) -> str | None:
        return self.remote.partition("/")[2] if self.remote else None


class ExecutionResult(BaseModel):
    """Outcome of running (or dry-running) one command."""

    command: Command
    ok: bool = True
    stdout: str = ""
    stderr: str = ""
    message: str | None = None
    dry_run: bool = False
