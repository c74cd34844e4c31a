"""Pydantic models for the JSON repository configuration file.

The file uses capitalised keys (``Address``, ``Port``, ``Repositories``,
``Name``, ``Commands``); lower-case keys are accepted as well. Models are
frozen so a loaded snapshot can be shared between request threads.
"""

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class RepositoryEntry(BaseModel):
    """One configuration entry: a repository name and its ordered commands."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(validation_alias=AliasChoices("Name", "name"))
    commands: tuple[str, ...] = Field((), validation_alias=AliasChoices("Commands", "commands"))


class RunnerConfig(BaseModel):
    """Listen address and the repository entries to dispatch against."""

    model_config = ConfigDict(frozen=True)

    address: str = Field("", validation_alias=AliasChoices("Address", "address"))
    port: int = Field(8080, validation_alias=AliasChoices("Port", "port"))
    repositories: tuple[RepositoryEntry, ...] = Field(
        (), validation_alias=AliasChoices("Repositories", "repositories")
    )

    @property
    def listen_address(self) -> str:
        """``host:port`` string; an empty address means all interfaces."""
        return f"{self.address or '0.0.0.0'}:{self.port}"
