"""Optional design-system enrichment.

An external design-system service may restyle generated component and page
sources before they are written.  The client never raises: every failure is
returned as an unsuccessful :class:`DesignSystemResponse`.  The enrichment
step then turns the first failed response into :class:`DesignSystemError`,
which aborts the run before the synchronizer touches the filesystem.

Typical usage::

    client = DesignSystemClient("https://design.example.com", api_key="...")
    requests = await enrich_requests(plan(spec), client, spec)
"""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import PurePosixPath
from typing import Any

import httpx
from pydantic import BaseModel, Field

from appgen.errors import DesignSystemError
from appgen.scaffolder.models import ArtifactCategory, ArtifactRequest
from appgen.spec.models import Specification

ENRICH_ENDPOINT = "/v1/enrich"

ENRICHED_CATEGORIES = frozenset({ArtifactCategory.COMPONENT, ArtifactCategory.PAGE})


class DesignSystemResponse(BaseModel):
    """Structured response from an enrichment call."""

    content: str = Field(default="", description="Enriched source text")
    success: bool = Field(default=True, description="Whether the request succeeded")
    error: str | None = Field(default=None, description="Error message on failure")


class DesignSystemClient:
    """Async client for the design-system enrichment API."""

    def __init__(
        self,
        base_url: str,
        api_key: str = "",
        timeout: int = 30,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.timeout = timeout

    def _client(self) -> httpx.AsyncClient:
        """Return a fresh ``AsyncClient`` configured with our base URL and timeout."""
        headers = {"Authorization": f"Bearer {self.api_key}"} if self.api_key else {}
        return httpx.AsyncClient(
            base_url=self.base_url,
            headers=headers,
            timeout=httpx.Timeout(self.timeout, connect=10.0),
        )

    async def enrich(
        self,
        category: str,
        name: str,
        framework: str,
        content: str,
        styling: Mapping[str, Any] | None = None,
    ) -> DesignSystemResponse:
        """Ask the service to enrich one generated source file.

        Args:
            category: ``"component"`` or ``"page"``.
            name: Element name, e.g. ``"TaskList"``.
            framework: Frontend framework the source is written for.
            content: The rendered source to enrich.
            styling: The specification's free-form styling section.

        Returns:
            A ``DesignSystemResponse`` with the enriched source or an error.
        """
        payload = {
            "category": category,
            "name": name,
            "framework": framework,
            "content": content,
            "styling": dict(styling or {}),
        }
        try:
            async with self._client() as client:
                response = await client.post(ENRICH_ENDPOINT, json=payload)
                response.raise_for_status()
                data = response.json()
        except httpx.ConnectError:
            return DesignSystemResponse(
                success=False,
                error=f"Cannot connect to design system at {self.base_url}.",
            )
        except httpx.TimeoutException:
            return DesignSystemResponse(
                success=False,
                error=f"Request to design system timed out after {self.timeout}s.",
            )
        except httpx.HTTPStatusError as exc:
            return DesignSystemResponse(
                success=False,
                error=f"Design system returned HTTP {exc.response.status_code}: {exc.response.text[:500]}",
            )
        except Exception as exc:  # noqa: BLE001
            return DesignSystemResponse(
                success=False,
                error=f"Unexpected error during enrichment: {exc}",
            )

        enriched = data.get("content") if isinstance(data, dict) else None
        if not isinstance(enriched, str):
            return DesignSystemResponse(success=False, error="Response did not include 'content'.")
        return DesignSystemResponse(content=enriched, success=True)


async def enrich_requests(
    requests: list[ArtifactRequest],
    client: DesignSystemClient,
    spec: Specification,
) -> list[ArtifactRequest]:
    """Return *requests* with component and page contents enriched.

    Makes at most one call per component or page, in plan order; every
    other request is passed through unchanged.

    Raises:
        DesignSystemError: On the first unsuccessful response.
    """
    framework = spec.stack.frontend.framework.value
    enriched: list[ArtifactRequest] = []
    for request in requests:
        if request.category not in ENRICHED_CATEGORIES or request.content is None:
            enriched.append(request)
            continue

        name = PurePosixPath(request.target_path).stem
        response = await client.enrich(
            request.category.value, name, framework, request.content, spec.styling
        )
        if not response.success:
            raise DesignSystemError(request.target_path, response.error or "unknown error")
        enriched.append(request.model_copy(update={"content": response.content}))
    return enriched
