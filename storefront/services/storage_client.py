# storefront/services/storage_client.py
import time
from urllib.parse import quote, unquote, urlparse

import requests
from requests import RequestException

from storefront.domain.errors import UpstreamFailure, ValidationFailed
from storefront.utils.settings import SUPABASE_URL, SUPABASE_KEY, STORAGE_BUCKET
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


def image_name_from_url(url: str) -> str:
    #only the last path segment identifies the object
    name = unquote(urlparse(url or "").path.rstrip("/").split("/")[-1])
    if not name:
        raise ValidationFailed("Invalid image URL")
    return name


class StorageClient:
    """
    Object storage for product images (Supabase storage REST API).

    upload -> public URL, delete by URL. Neither call is retried:
    a failed upload aborts the calling mutation before any database write.
    """

    def __init__(
        self,
        base_url: str | None = None,
        api_key: str | None = None,
        bucket: str | None = None,
        timeout: int = 10,
    ):
        self.base_url = (base_url or SUPABASE_URL).rstrip("/")
        self.api_key = api_key if api_key is not None else SUPABASE_KEY
        self.bucket = bucket or STORAGE_BUCKET
        self.timeout = timeout

    def _headers(self) -> dict:
        return {
            "Authorization": f"Bearer {self.api_key}",
            "apikey": self.api_key,
        }

    def public_url(self, name: str) -> str:
        return f"{self.base_url}/storage/v1/object/public/{self.bucket}/{quote(name)}"

    def upload(self, filename: str, content: bytes, content_type: str) -> str:
        name = f"{int(time.time() * 1000)}-{filename}"
        url = f"{self.base_url}/storage/v1/object/{self.bucket}/{quote(name)}"
        logger.info(f"StorageClient POST {url}")

        try:
            resp = requests.post(
                url,
                data=content,
                headers={
                    **self._headers(),
                    "Content-Type": content_type,
                    "cache-control": "3600",
                },
                timeout=self.timeout,
            )
            resp.raise_for_status()
        except RequestException as e:
            logger.error(f"Image upload of {name} failed: {e}")
            raise UpstreamFailure("Image upload failed") from e

        return self.public_url(name)

    def delete(self, url: str) -> bool:
        """Best-effort delete, returns False when the store could not be reached."""
        name = image_name_from_url(url)
        endpoint = f"{self.base_url}/storage/v1/object/{self.bucket}"
        logger.info(f"StorageClient DELETE {endpoint} [{name}]")

        try:
            resp = requests.delete(
                endpoint,
                json={"prefixes": [name]},
                headers=self._headers(),
                timeout=self.timeout,
            )
            resp.raise_for_status()
        except RequestException as e:
            logger.warning(f"Failed to delete image {name}: {e}")
            return False

        return True
