"""GitHub image host client."""

import base64
import logging
from urllib.parse import unquote

from .models import (
    CreateContentRequest,
    DeleteContentRequest,
    HostConfig,
    ImageHostType,
    parse_content_info,
    parse_create_response,
)
from .transport import HttpxTransport, ReplyError, Transport

logger = logging.getLogger(__name__)

RAW_URL_TEMPLATE = "https://raw.githubusercontent.com/{owner}/{repo}/master/"


def purify_url(url: str) -> str:
    """Drop query and fragment from a URL and percent-decode it."""
    for sep in ("?", "#"):
        idx = url.find(sep)
        if idx > -1:
            url = url[:idx]
    return unquote(url)


class GitHubImageHost:
    """Image host storing files in a GitHub repository via the Contents API."""

    API_URL = "https://api.github.com"
    USER_AGENT = "imagehost-github-client"

    def __init__(
        self,
        config: HostConfig | None = None,
        transport: Transport | None = None,
        api_url: str | None = None,
    ):
        """
        Initialize image host.

        Args:
            config: Host configuration (empty if omitted)
            transport: Transport used for all requests (httpx by default)
            api_url: Custom API base URL (defaults to GitHub API)
        """
        self.api_url = (api_url or self.API_URL).rstrip("/")
        self.transport = transport or HttpxTransport()
        self.configure(config or HostConfig())

    @property
    def type(self) -> ImageHostType:
        return ImageHostType.GITHUB

    @property
    def config(self) -> HostConfig:
        return self._config

    @property
    def image_url_prefix(self) -> str:
        return self._image_url_prefix

    def configure(self, config: HostConfig) -> None:
        """Replace the active configuration. No validation is done here."""
        self._config = config
        self._image_url_prefix = RAW_URL_TEMPLATE.format(
            owner=config.owner_name, repo=config.repo_name
        )
        logger.debug("Configured image host, prefix=%s", self._image_url_prefix)

    def get_config(self) -> dict[str, str]:
        """Active configuration under the persisted key names."""
        return self._config.to_persisted()

    def ready(self) -> bool:
        return self._config.is_complete()

    def _headers(self, token: str) -> dict[str, str]:
        return {
            "Authorization": f"token {token}",
            "Accept": "application/vnd.github.v3+json",
            "User-Agent": self.USER_AGENT,
        }

    def _contents_url(self, path: str) -> str:
        return (
            f"{self.api_url}/repos/{self._config.owner_name}/"
            f"{self._config.repo_name}/contents/{path}"
        )

    def validate_config(self, config: HostConfig) -> tuple[bool, str]:
        """
        Check a candidate configuration against the remote repository.

        Args:
            config: Configuration to test; need not be the active one

        Returns:
            (ok, message) where message is the raw API response body
        """
        if not config.is_complete():
            return False, "PersonalAccessToken/UserName/RepositoryName should not be empty."

        url = f"{self.api_url}/repos/{config.owner_name}/{config.repo_name}"
        logger.info("Validating repository: %s/%s", config.owner_name, config.repo_name)
        reply = self.transport.send("GET", url, self._headers(config.access_token))
        if not reply.ok:
            logger.warning("Repository check failed: %s", reply.error_string)
        return reply.ok, reply.text

    def create(self, content: bytes, path: str) -> tuple[str, str]:
        """
        Upload content as a new file.

        Args:
            content: Raw file bytes
            path: Repository relative path of the new file

        Returns:
            (download_url, message); download_url is empty on failure
        """
        if not path:
            return "", "Failed to create image with empty path."

        return self._create_resource(content, path)

    def _create_resource(self, content: bytes, path: str) -> tuple[str, str]:
        if not path:
            raise ValueError("path must not be empty")

        if not self.ready():
            return "", "Invalid GitHub image host configuration."

        headers = self._headers(self._config.access_token)
        url = self._contents_url(path)

        # Never overwrite an existing file
        reply = self.transport.send("GET", url, headers)
        if reply.ok:
            return "", f"The resource already exists at the image host ({path})."
        if reply.error is not ReplyError.CONTENT_NOT_FOUND:
            logger.warning("Failed to query %s: %s", url, reply.error_string)
            return "", (
                f"Failed to query the resource at the image host "
                f"({url}) ({reply.error_string}) ({reply.text})."
            )

        body = CreateContentRequest(
            message=f"VX_ADD: {path}",
            content=base64.b64encode(content).decode("ascii"),
        )
        reply = self.transport.send("PUT", url, headers, body.model_dump_json().encode("utf-8"))
        failure = (
            f"Failed to create resource at the image host "
            f"({url}) ({reply.error_string}) ({reply.text})."
        )
        if not reply.ok:
            logger.warning("Failed to create %s: %s", url, reply.error_string)
            return "", failure

        target_url = parse_create_response(reply.data).download_url
        if not target_url:
            logger.warning("No download_url in response for %s", path)
            return "", failure

        logger.info("Created resource: %s", target_url)
        return target_url, ""

    def owns_url(self, url: str) -> bool:
        return url.startswith(self._image_url_prefix)

    def remove(self, url: str) -> tuple[bool, str]:
        """
        Delete a file previously created by this host.

        The SHA lookup and the delete are two separate requests; a concurrent
        change to the file in between makes the delete fail.

        Args:
            url: Download URL; must satisfy owns_url()

        Returns:
            (ok, message)
        """
        if not self.owns_url(url):
            raise ValueError(f"URL is not owned by this image host: {url}")

        if not self.ready():
            return False, "Invalid GitHub image host configuration."

        path = purify_url(url[len(self._image_url_prefix):])
        headers = self._headers(self._config.access_token)
        contents_url = self._contents_url(path)

        reply = self.transport.send("GET", contents_url, headers)
        if not reply.ok:
            logger.warning("Failed to fetch %s: %s", contents_url, reply.error_string)
            return False, f"Failed to fetch information about the resource ({path})."

        sha = parse_content_info(reply.data).sha
        if not sha:
            return False, f"Failed to fetch SHA about the resource ({path}) ({reply.text})."

        body = DeleteContentRequest(message=f"VX_DEL: {path}", sha=sha)
        reply = self.transport.send(
            "DELETE", contents_url, headers, body.model_dump_json().encode("utf-8")
        )
        if not reply.ok:
            logger.warning("Failed to delete %s: %s", path, reply.error_string)
            return False, f"Failed to delete resource ({path}) ({reply.text})."

        logger.info("Deleted resource: %s", path)
        return True, ""
