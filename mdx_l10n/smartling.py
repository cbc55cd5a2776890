# mdx_l10n/smartling.py
"""
Smartling 翻译服务的异步客户端。

只覆盖上传流程需要的接口：认证、创建任务 (job)、创建批次 (batch)、
向批次上传 JSON 文件、上传可视化上下文。
"""

import json
from types import TracebackType
from typing import Any, Optional

import httpx
import structlog

from mdx_l10n.config import LocalizerConfig
from mdx_l10n.exceptions import ConfigurationError, SmartlingAPIError

logger = structlog.get_logger(__name__)


class SmartlingClient:
    def __init__(
        self, config: LocalizerConfig, http_client: Optional[httpx.AsyncClient] = None
    ) -> None:
        self.config = config
        self.settings = config.smartling
        self._owns_client = http_client is None
        self.client = http_client or httpx.AsyncClient(
            base_url=self.settings.base_url, timeout=self.settings.timeout
        )
        self.access_token: Optional[str] = None

    async def __aenter__(self) -> "SmartlingClient":
        return self

    async def __aexit__(
        self,
        exc_type: Optional[type[BaseException]],
        exc: Optional[BaseException],
        tb: Optional[TracebackType],
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client and not self.client.is_closed:
            await self.client.aclose()

    @property
    def project_id(self) -> str:
        if not self.settings.project_id:
            raise ConfigurationError("缺少 Smartling 项目 ID (MDX_L10N_SMARTLING__PROJECT_ID)。")
        return self.settings.project_id

    def _auth_headers(self) -> dict[str, str]:
        if self.access_token is None:
            raise ConfigurationError("尚未完成 Smartling 认证。")
        return {"Authorization": f"Bearer {self.access_token}"}

    async def authenticate(self, user_id: str, user_secret: str) -> str:
        """获取访问令牌，并保存在客户端上供后续请求使用。"""
        response = await self.client.post(
            "/auth-api/v2/authenticate",
            json={"userIdentifier": user_id, "userSecret": user_secret},
        )
        data = _validate_response(response, "authentication with Smartling")
        self.access_token = data["response"]["data"]["accessToken"]
        return self.access_token

    async def create_job(self, name: str) -> str:
        """创建翻译任务，返回任务 UID。名称超过服务端长度限制时被截断。"""
        max_length = self.settings.max_job_name_length
        response = await self.client.post(
            f"/jobs-api/v3/projects/{self.project_id}/jobs",
            json={
                "jobName": name[:max_length],
                "targetLocaleIds": list(self.config.target_locales),
            },
            headers=self._auth_headers(),
        )
        data = _validate_response(response, "job creation in Smartling")
        return data["response"]["data"]["translationJobUid"]

    async def create_batch(self, file_uris: list[str], job_uid: str) -> str:
        # 不自动授权任务，由本地化团队处理
        response = await self.client.post(
            f"/job-batches-api/v2/projects/{self.project_id}/batches",
            json={"authorize": False, "translationJobUid": job_uid, "fileUris": file_uris},
            headers=self._auth_headers(),
        )
        data = _validate_response(response, "batch creation for job in Smartling")
        return data["response"]["data"]["batchUid"]

    async def upload_file_to_batch(self, content: bytes, file_uri: str, batch_uid: str) -> None:
        """上传 JSON 文件；批次中所有文件上传完毕后，服务端自动执行该批次。"""
        data: dict[str, Any] = {
            "fileUri": file_uri,
            "fileType": "json",
            "localeIdsToAuthorize[]": list(self.config.target_locales),
        }
        response = await self.client.post(
            f"/job-batches-api/v2/projects/{self.project_id}/batches/{batch_uid}/file",
            data=data,
            files={"file": (file_uri, content, "application/json")},
            headers=self._auth_headers(),
        )
        _validate_response(response, f"file upload to batch for {file_uri}")

    async def upload_context(self, file_uri: str, content: bytes, job_uid: str) -> None:
        response = await self.client.post(
            f"/context-api/v2/projects/{self.project_id}/contexts/upload-and-match-async",
            data={
                "name": file_uri,
                "matchParams": json.dumps({"translationJobUids": [job_uid]}),
            },
            files={"content": (file_uri, content, "text/html")},
            headers=self._auth_headers(),
        )
        _validate_response(response, f"context upload for {file_uri}")


def _validate_response(response: httpx.Response, description: str) -> dict[str, Any]:
    try:
        data = response.json()
    except ValueError:
        data = {}

    if not response.is_success:
        try:
            message = data["response"]["errors"][0]["message"]
        except (KeyError, IndexError, TypeError):
            message = response.reason_phrase or "unknown error"
        raise SmartlingAPIError(description, message, response.status_code)

    logger.info(f"✅ Successful {description}")
    return data
