from __future__ import annotations

import io
import logging
from pathlib import Path
from typing import Any, List, Mapping, Optional
from urllib.parse import unquote, urljoin, urlparse

import requests
from PIL import Image, UnidentifiedImageError

from photopost.app.errors import ResourceError, TransportError
from photopost.core.models import Photo

logger = logging.getLogger(__name__)

MSG_LOAD_FAILED = "Could not load photos"
MSG_SEND_FAILED = "Could not send the photo"


class PhotoApi:
    """
    Thin client for the photo service.

    GET  {base_url}/data -> JSON list of photos
    POST {base_url}/     -> multipart upload, JSON acknowledgment
    """

    def __init__(self, base_url: str, timeout: float = 30.0, session: Optional[requests.Session] = None):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()

    def get_data(self) -> List[Photo]:
        url = f"{self.base_url}/data"
        try:
            resp = self.session.get(url, timeout=self.timeout)
        except requests.RequestException as e:
            logger.warning("GET %s failed: %s", url, e)
            raise TransportError(MSG_LOAD_FAILED) from e

        if not resp.ok:
            logger.warning("GET %s returned %s", url, resp.status_code)
            raise TransportError(MSG_LOAD_FAILED, resp.status_code)

        try:
            data = resp.json()
        except ValueError as e:
            raise TransportError(MSG_LOAD_FAILED, resp.status_code) from e
        if not isinstance(data, list):
            raise TransportError(MSG_LOAD_FAILED, resp.status_code)

        try:
            return [Photo.from_dict(item) for item in data]
        except (KeyError, TypeError, ValueError) as e:
            raise TransportError(MSG_LOAD_FAILED, resp.status_code) from e

    def send_data(self, fields: Mapping[str, str], files: Mapping[str, Any]) -> Any:
        url = f"{self.base_url}/"
        try:
            resp = self.session.post(url, data=dict(fields), files=dict(files), timeout=self.timeout)
        except requests.RequestException as e:
            logger.warning("POST %s failed: %s", url, e)
            raise TransportError(MSG_SEND_FAILED) from e

        if not resp.ok:
            logger.warning("POST %s returned %s: %s", url, resp.status_code, resp.text[:200])
            raise TransportError(MSG_SEND_FAILED, resp.status_code)

        if not resp.content:
            return None
        try:
            return resp.json()
        except ValueError:
            return resp.text

    def resolve_url(self, url: str) -> str:
        return urljoin(self.base_url + "/", url)

    def fetch_image(self, url: str) -> Image.Image:
        """Load a thumbnail: file:// URIs and local paths from disk, anything else over HTTP."""
        parsed = urlparse(url)
        try:
            if parsed.scheme == "file":
                with Image.open(Path(unquote(parsed.path))) as img:
                    return img.convert("RGB")
            if not parsed.scheme and Path(url).is_file():
                with Image.open(url) as img:
                    return img.convert("RGB")

            full = self.resolve_url(url)
            resp = self.session.get(full, timeout=self.timeout)
            resp.raise_for_status()
            with Image.open(io.BytesIO(resp.content)) as img:
                return img.convert("RGB")
        except (OSError, UnidentifiedImageError, requests.RequestException) as e:
            raise ResourceError(f"Could not load image {url}: {e}", path=url) from e
