"""Client for the Tinify compress/resize HTTP API."""

from typing import Any, Dict, Optional, Tuple
from urllib.parse import urljoin

import requests

from .error_handling import with_remote_error
from .exceptions import CompressionError, MissingResultReferenceError, ResizeError
from .models import API_HOST, CompressionResult, OptimizedImage, ResizePolicy
from .observability import LogContext
from .protocols import HTTPSessionProtocol, ImageOptimizationClient, LoggerProtocol

API_USERNAME = "api"


def _int_or_none(value: Any) -> Optional[int]:
    # bool is an int subclass
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    return None


class TinifyClient(ImageOptimizationClient):
    """Compresses images and resizes the compressed result.

    The API answers a compression with a `Location` that the resize call
    posts to, so redirects are never followed and every request pins the
    `Host` header to the canonical API host.
    """

    def __init__(
        self,
        api_key: str,
        logger: LoggerProtocol,
        api_host: str = API_HOST,
        resize_policy: Optional[ResizePolicy] = None,
        timeout: Tuple[float, float] = (5.0, 60.0),
        session: Optional[HTTPSessionProtocol] = None,
    ):
        self._auth = (API_USERNAME, api_key)
        self._api_host = api_host
        self._resize_policy = resize_policy or ResizePolicy()
        self._timeout = timeout
        self._session = session if session is not None else requests.Session()
        self._logger = logger

    @property
    def shrink_url(self) -> str:
        return f"https://{self._api_host}/shrink"

    def _post(self, url: str, headers: Optional[Dict[str, str]] = None, **kwargs: Any) -> Any:
        request_headers = {"Host": self._api_host}
        if headers:
            request_headers.update(headers)
        return self._session.post(
            url,
            headers=request_headers,
            auth=self._auth,
            timeout=self._timeout,
            allow_redirects=False,
            **kwargs,
        )

    @with_remote_error(CompressionError)
    def compress(self, image: bytes, context: Optional[LogContext] = None) -> CompressionResult:
        """
        Upload raw image bytes to the shrink endpoint.

        Returns:
            The compressed artifact's location and informational sizes

        Raises:
            CompressionError: If the status is not 201 or the request fails
            MissingResultReferenceError: If the 201 response has no Location
        """
        self._logger.info("sending compression request", context, input_bytes=len(image))

        response = self._post(self.shrink_url, data=image)
        try:
            if response.status_code != 201:
                raise CompressionError.from_status(response.status_code)

            input_size, input_type, output_size = self._parse_sizes(response, context)
            self._logger.info(
                "image compressed",
                context,
                img_input_size=input_size,
                img_output_size=output_size,
            )

            location = response.headers.get("Location")
            if not location:
                raise MissingResultReferenceError(
                    "compression response carries no Location header",
                    status_code=response.status_code,
                )
        finally:
            response.close()

        return CompressionResult(
            location=urljoin(self.shrink_url, location),
            input_size=input_size,
            input_type=input_type,
            output_size=output_size,
        )

    def _parse_sizes(self, response: Any, context: Optional[LogContext]) -> Tuple[Any, Any, Any]:
        try:
            body = response.json()
            input_size = body.get("input", {}).get("size")
            input_type = body.get("input", {}).get("type")
            output_size = body.get("output", {}).get("size")
        except (ValueError, AttributeError) as e:
            self._logger.debug(f"could not parse compression response body: {e}", context)
            return None, None, None

        return (
            _int_or_none(input_size),
            input_type if isinstance(input_type, str) else None,
            _int_or_none(output_size),
        )

    @with_remote_error(ResizeError)
    def resize(self, location: str, context: Optional[LogContext] = None) -> OptimizedImage:
        """
        Request the resized variant of the artifact at `location`.

        The returned image streams the response body; the caller must close
        it once consumed.

        Raises:
            ResizeError: If the status is not 200 or the request fails
        """
        self._logger.info("sending resize request", context, location=location)

        response = self._post(
            location,
            headers={"Content-Type": "application/json"},
            json=self._resize_policy.as_payload(),
            stream=True,
        )
        if response.status_code != 200:
            response.close()
            raise ResizeError.from_status(response.status_code)

        width = response.headers.get("Image-Width")
        height = response.headers.get("Image-Height")
        self._logger.info("compressed image resized", context, img_width=width, img_height=height)

        raw = response.raw
        if hasattr(raw, "decode_content"):
            raw.decode_content = True
        return OptimizedImage(stream=raw, width=width, height=height, release=response.close)

    def close(self) -> None:
        self._session.close()

    def __enter__(self) -> "TinifyClient":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
