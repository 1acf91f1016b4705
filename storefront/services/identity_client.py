# storefront/services/identity_client.py
import requests
from requests import RequestException

from storefront.domain.errors import Unauthenticated, UpstreamFailure
from storefront.utils.retry import http_retry
from storefront.utils.settings import IDENTITY_PROVIDER_URL
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class IdentityClient:
    """
    Thin client for the external identity provider.
    Resolves a caller's bearer token to {id, email, image_url}.
    """

    def __init__(self, base_url: str | None = None, timeout: int = 2):
        self.base_url = (base_url or IDENTITY_PROVIDER_URL).rstrip("/")
        self.timeout = timeout

    @http_retry()
    def _get_me(self, token: str) -> requests.Response:
        url = f"{self.base_url}/v1/me"
        logger.info(f"IdentityClient GET {url}")
        return requests.get(
            url,
            headers={"Authorization": f"Bearer {token}"},
            timeout=self.timeout,
        )

    def fetch_profile(self, token: str) -> dict:
        try:
            resp = self._get_me(token)
        except RequestException as e:
            logger.error(f"Identity provider unreachable: {e}")
            raise UpstreamFailure("Identity provider unavailable") from e

        #rejected tokens are not retried
        if resp.status_code in (401, 403):
            raise Unauthenticated("Invalid or expired session")

        try:
            resp.raise_for_status()
        except RequestException as e:
            logger.error(f"Identity provider error: {e}")
            raise UpstreamFailure("Identity provider error") from e

        data = resp.json()
        if not data.get("id"):
            raise Unauthenticated("Session has no user id")

        return {
            "id": str(data["id"]),
            "email": data.get("email"),
            "image_url": data.get("image_url"),
        }
