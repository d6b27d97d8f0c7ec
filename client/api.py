"""Async HTTP client for the Paper Critic service."""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

import httpx

from backend.models.section import Section

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "http://localhost:3000"


class ApiError(Exception):
    """Non-2xx response from the service."""

    def __init__(self, status_code: int, detail: Any):
        self.status_code = status_code
        self.detail = detail
        super().__init__(f"HTTP {status_code}: {detail}")


@dataclass(frozen=True)
class PaperFile:
    name: str
    data: bytes


def _encode(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, Enum):
        return str(value.value)
    return str(value)


class PaperCriticApi:
    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        client: Optional[httpx.AsyncClient] = None,
        timeout: float = 300.0,
    ):
        self._client = client or httpx.AsyncClient(base_url=base_url, timeout=timeout)

    async def aclose(self):
        await self._client.aclose()

    async def __aenter__(self) -> "PaperCriticApi":
        return self

    async def __aexit__(self, *exc_info):
        await self.aclose()

    @staticmethod
    def _check(response: httpx.Response) -> httpx.Response:
        if response.is_error:
            try:
                detail = response.json().get("detail", response.text)
            except (ValueError, AttributeError):
                detail = response.text
            raise ApiError(response.status_code, detail)
        return response

    async def _post(self, path: str, fields: dict, file: Optional[PaperFile] = None) -> httpx.Response:
        data = {key: _encode(value) for key, value in fields.items() if value is not None}
        files = {"file": (file.name, file.data)} if file is not None else None
        logger.debug(f"POST {path} ({', '.join(sorted(data))})")
        return self._check(await self._client.post(path, data=data, files=files))

    async def _post_text(self, path: str, fields: dict, file: Optional[PaperFile] = None) -> str:
        return (await self._post(path, fields, file)).text

    # Generation

    async def overall_analysis(self, fields: dict, file: PaperFile) -> str:
        return await self._post_text("/overall_analysis", fields, file)

    async def section_analysis(self, fields: dict, file: PaperFile, section_title: str) -> str:
        return await self._post_text("/section_analysis", {**fields, "sectionTitle": section_title}, file)

    async def review(self, fields: dict, file: PaperFile) -> str:
        return await self._post_text("/review", fields, file)

    async def sections(self, fields: dict, file: PaperFile) -> list[Section]:
        response = await self._post("/sections", fields, file)
        return [Section.model_validate(item) for item in response.json()]

    # Prompt previews

    async def overall_analysis_system_prompt(self, fields: dict, file: Optional[PaperFile] = None) -> str:
        return await self._post_text("/overall_analysis_system_prompt", fields, file)

    async def overall_analysis_message_part(self, fields: dict, file: Optional[PaperFile] = None) -> str:
        return await self._post_text("/overall_analysis_message_part", fields, file)

    async def review_system_prompt(self) -> str:
        return await self._post_text("/review_system_prompt", {})

    async def review_message_part(self, fields: dict, file: Optional[PaperFile] = None) -> str:
        return await self._post_text("/review_message_part", fields, file)

    async def section_analysis_system_prompt(
        self, fields: dict, section_title: str, file: Optional[PaperFile] = None
    ) -> str:
        return await self._post_text(
            "/section_analysis_system_prompt", {**fields, "sectionTitle": section_title}, file
        )

    async def section_analysis_message_part(
        self, fields: dict, section_title: str, file: Optional[PaperFile] = None
    ) -> str:
        return await self._post_text(
            "/section_analysis_message_part", {**fields, "sectionTitle": section_title}, file
        )

    async def sections_system_prompt(self) -> str:
        response = await self._client.get("/sections_system_prompt")
        return self._check(response).text
