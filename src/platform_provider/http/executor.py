"""
HTTP request executor for the platform REST API.

Issues exactly one logical request per call (plus transparent re-sends on
HTTP 429), reads the full response body, and classifies the result:

- 2xx                         -> ok, body decoded into result_type if given
- non-2xx in the allow-list   -> ok, no decode, caller branches on status
- anything else               -> not ok, exactly one diagnostic appended

Retrying a failed call is the caller's (or a polling protocol's) job.
"""

import asyncio
import json
import random
import time
from functools import lru_cache
from typing import Any, Optional, TypeVar

import httpx
import structlog
import yaml
from pydantic import BaseModel, TypeAdapter

from platform_provider.config import Settings
from platform_provider.context import OperationContext
from platform_provider.diagnostics import Diagnostics
from platform_provider.http.exceptions import BodyEncodingError, RequestCancelled
from platform_provider.models.enums import BodyEncoding, HttpOption
from platform_provider.models.http_models import Outcome, RequestDescriptor
from platform_provider.monitoring.metrics import (
    platform_http_request_latency_seconds,
    platform_http_requests_total,
    rate_limit_retries_total,
)


logger = structlog.get_logger(__name__)

T = TypeVar("T")


@lru_cache(maxsize=256)
def _adapter(result_type: Any) -> TypeAdapter:
    return TypeAdapter(result_type)


class ApiExecutor:
    """
    Executes platform API requests and classifies their outcome.

    The executor never raises for remote failures. Transport errors,
    encode errors, unexpected statuses and decode failures all become
    Outcome(ok=False) with one diagnostic in the caller's sink.

    Attributes:
        client: Shared httpx AsyncClient (base URL, auth, limits)
        settings: Provider settings (timeouts, rate-limit policy)
    """

    def __init__(self, client: httpx.AsyncClient, settings: Settings):
        self.client = client
        self.settings = settings

    async def request(
        self,
        ctx: OperationContext,
        method: str,
        path: str,
        body: Any = None,
        result_type: Optional[type[T]] = None,
        *,
        diagnostics: Diagnostics,
        options: HttpOption = HttpOption.NONE,
    ) -> Outcome[T]:
        """
        Issue one request and classify the response.

        Args:
            ctx: Operation context; cancellation aborts the in-flight request
            method: HTTP verb
            path: Server-relative path
            body: None, a JSON-serializable value, a pydantic model, or a
                pre-encoded string (sent verbatim)
            result_type: Type to decode a 2xx body into (pydantic model,
                dict, list[...]); None to skip decoding
            diagnostics: Sink that receives one entry on any failure
            options: HttpOption flags (ALLOW_404, YAML_BODY)

        Returns:
            Outcome with ok flag, HTTP status (-1 if no response) and the
            decoded result
        """
        descriptor = RequestDescriptor(method=method.upper(), path=path, body=body, options=options)
        method = descriptor.method
        url = str(self.client.base_url).rstrip("/") + path

        try:
            content = self._encode(descriptor)
        except BodyEncodingError as e:
            platform_http_requests_total.labels(method=method, outcome="encode_error").inc()
            diagnostics.add_error(
                f"{method} failed",
                f"{method} {path} failed with error: {e.message}",
            )
            return Outcome(ok=False, status=-1)

        logger.debug(f"--> {method} {url}", body=content.decode("utf-8", "replace") if content else None)

        start_time = time.monotonic()
        try:
            response = await self._send(ctx, descriptor, content)
        except (httpx.HTTPError, httpx.InvalidURL, RequestCancelled) as e:
            error = e.message if isinstance(e, RequestCancelled) else (str(e) or type(e).__name__)
            logger.debug(f"<-- {method} {url} [{error}]")
            platform_http_requests_total.labels(method=method, outcome="transport_error").inc()
            diagnostics.add_error(
                f"{method} failed",
                f"{method} {path} failed with error: {error}",
            )
            return Outcome(ok=False, status=-1)
        finally:
            platform_http_request_latency_seconds.labels(method=method).observe(
                time.monotonic() - start_time
            )

        status = response.status_code
        raw_text = response.text
        logger.debug(f"<-- {method} {url} [{status}]", response=raw_text)

        if response.is_success:
            result: Optional[T] = None
            if result_type is not None:
                try:
                    result = self._decode(response, result_type)
                except (ValueError, yaml.YAMLError) as e:
                    platform_http_requests_total.labels(method=method, outcome="decode_error").inc()
                    diagnostics.add_error(
                        f"{method} failed",
                        f"{method} {path} returned an invalid response body: {e}",
                    )
                    return Outcome(ok=False, status=status)
            platform_http_requests_total.labels(method=method, outcome="success").inc()
            return Outcome(ok=True, status=status, result=result)

        if descriptor.allows(status):
            platform_http_requests_total.labels(method=method, outcome="allowed_404").inc()
            return Outcome(ok=True, status=status)

        platform_http_requests_total.labels(method=method, outcome="http_error").inc()
        diagnostics.add_error(
            f"{method} failed",
            f"{method} {path} returned status code {status}: {raw_text}",
        )
        return Outcome(ok=False, status=status)

    def _encode(self, descriptor: RequestDescriptor) -> Optional[bytes]:
        """Serialize the body for the declared encoding."""
        body = descriptor.body
        if body is None:
            return None
        if isinstance(body, bytes):
            return body
        if isinstance(body, str):
            return body.encode("utf-8")
        try:
            if descriptor.encoding is BodyEncoding.YAML:
                if isinstance(body, BaseModel):
                    body = body.model_dump(mode="json", by_alias=True, exclude_none=True)
                return yaml.safe_dump(body, sort_keys=False).encode("utf-8")
            if isinstance(body, BaseModel):
                return body.model_dump_json(by_alias=True, exclude_none=True).encode("utf-8")
            return json.dumps(body).encode("utf-8")
        except (TypeError, ValueError, yaml.YAMLError) as e:
            raise BodyEncodingError(
                f"cannot encode request body as {descriptor.encoding.name}: {e}",
                details={"body_type": type(body).__name__},
            ) from e

    def _decode(self, response: httpx.Response, result_type: type[T]) -> T:
        content_type = response.headers.get("content-type", "")
        if "yaml" in content_type:
            return _adapter(result_type).validate_python(yaml.safe_load(response.content))
        return _adapter(result_type).validate_json(response.content)

    async def _send(
        self,
        ctx: OperationContext,
        descriptor: RequestDescriptor,
        content: Optional[bytes],
    ) -> httpx.Response:
        """Send the request, re-sending on 429 per the rate-limit policy."""
        headers = {"Content-Type": descriptor.encoding.content_type}
        rate_limited = 0
        while True:
            if ctx.done:
                raise RequestCancelled(ctx.reason or "context cancelled")

            response = await self._send_once(ctx, descriptor, content, headers)
            if response.status_code != 429 or rate_limited >= self.settings.RATE_LIMIT_RETRIES:
                return response

            rate_limited += 1
            delay = self._retry_after(response)
            rate_limit_retries_total.inc()
            logger.info(
                "Rate limited by platform, retrying",
                method=descriptor.method,
                path=descriptor.path,
                retry=rate_limited,
                max_retries=self.settings.RATE_LIMIT_RETRIES,
                delay=round(delay, 3),
            )
            if not await ctx.sleep(delay):
                raise RequestCancelled(ctx.reason or "context cancelled")

    async def _send_once(
        self,
        ctx: OperationContext,
        descriptor: RequestDescriptor,
        content: Optional[bytes],
        headers: dict[str, str],
    ) -> httpx.Response:
        """Race one HTTP exchange against the context's cancellation."""
        remaining = ctx.remaining()
        timeout = (
            httpx.USE_CLIENT_DEFAULT
            if remaining is None
            else min(remaining, self.settings.HTTP_TIMEOUT)
        )
        send = asyncio.ensure_future(
            self.client.request(
                descriptor.method,
                descriptor.path,
                content=content,
                headers=headers,
                timeout=timeout,
            )
        )
        waiter = asyncio.ensure_future(ctx.wait())
        try:
            done, _ = await asyncio.wait({send, waiter}, return_when=asyncio.FIRST_COMPLETED)
        finally:
            waiter.cancel()
            if not send.done():
                send.cancel()
        if send in done:
            return send.result()
        raise RequestCancelled(ctx.reason or "context cancelled")

    def _retry_after(self, response: httpx.Response) -> float:
        """Seconds to wait before re-sending a rate-limited request."""
        header = response.headers.get("Retry-After", "")
        try:
            delay = float(header)
        except ValueError:
            logger.debug("Invalid Retry-After header", retry_after=header)
            return self.settings.RATE_LIMIT_DEFAULT_DELAY
        # Spread out clients that were throttled together
        return max(0.0, delay) + random.uniform(0.0, self.settings.RATE_LIMIT_JITTER)
