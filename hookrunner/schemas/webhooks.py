"""Pydantic models for GitLab push webhook payloads.

Only ``repository.name`` is needed for dispatch, so every other field has a
default and unknown keys are ignored.

Reference: https://docs.gitlab.com/ee/user/project/integrations/webhook_events.html#push-events
"""

from pydantic import AliasChoices, BaseModel, Field


class CommitAuthor(BaseModel):
    """Author information from a Git commit."""

    name: str = ""
    email: str = ""


class Commit(BaseModel):
    """A single commit within a push event."""

    id: str = ""
    message: str = ""
    timestamp: str = ""
    url: str = ""
    author: CommitAuthor = Field(default_factory=CommitAuthor)


class Repository(BaseModel):
    """Repository metadata from the webhook payload."""

    name: str
    url: str = ""
    description: str | None = ""
    home_page: str = Field("", validation_alias=AliasChoices("home_page", "homepage"))


class PushWebhookPayload(BaseModel):
    """Push event payload sent by the hosting service."""

    before: str = ""
    after: str = ""
    ref: str = ""
    user_name: str = Field("", validation_alias=AliasChoices("user_name", "username"))
    user_id: int = 0
    project_id: int = 0
    repository: Repository
    commits: list[Commit] = Field(default_factory=list)
    total_commits_count: int = 0
