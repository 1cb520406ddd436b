"""GitHub image host data models."""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, ValidationError


class ImageHostType(str, Enum):
    """Kind of image host backend."""

    GITHUB = "github"


class HostConfig(BaseModel):
    """Image host configuration, persisted under the GitHub key names."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    access_token: str = Field(default="", alias="personal_access_token")
    owner_name: str = Field(default="", alias="user_name")
    repo_name: str = Field(default="", alias="repository_name")

    def is_complete(self) -> bool:
        """Check that token, owner and repository are all set."""
        return bool(self.access_token and self.owner_name and self.repo_name)

    def to_persisted(self) -> dict[str, str]:
        """Dump using the persisted key names."""
        return self.model_dump(by_alias=True)


class CreateContentRequest(BaseModel):
    """Body of a Contents API PUT."""

    message: str
    content: str  # Base64 encoded file content


class DeleteContentRequest(BaseModel):
    """Body of a Contents API DELETE."""

    message: str
    sha: str


class ContentInfo(BaseModel):
    """Subset of a Contents API file entry."""

    sha: str = ""
    download_url: str | None = None


class CreateContentResponse(BaseModel):
    """Subset of a Contents API PUT response."""

    content: ContentInfo | None = None

    @property
    def download_url(self) -> str:
        if self.content is None:
            return ""
        return self.content.download_url or ""


def parse_content_info(data: bytes) -> ContentInfo:
    """Parse a contents GET body, treating malformed JSON as an empty object."""
    try:
        return ContentInfo.model_validate_json(data)
    except ValidationError:
        return ContentInfo()


def parse_create_response(data: bytes) -> CreateContentResponse:
    """Parse a contents PUT body, treating malformed JSON as an empty object."""
    try:
        return CreateContentResponse.model_validate_json(data)
    except ValidationError:
        return CreateContentResponse()
