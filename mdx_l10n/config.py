# mdx_l10n/config.py

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from mdx_l10n.utils import DEFAULT_PLACEHOLDER_NAME, short_locale, validate_lang_codes


class LoggingConfig(BaseModel):
    level: str = "INFO"
    format: Literal["json", "console"] = "console"


class SmartlingConfig(BaseModel):
    """Smartling 翻译服务的连接参数。"""

    base_url: str = "https://api.smartling.com"
    project_id: str | None = None
    user_id: str | None = None
    user_secret: SecretStr | None = None
    timeout: float = Field(default=30.0, gt=0)
    max_job_name_length: int = Field(default=170, gt=0)

    @property
    def is_complete(self) -> bool:
        return bool(self.project_id and self.user_id and self.user_secret)


class LocalizerConfig(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="MDX_L10N_",
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        extra="ignore",
    )

    default_locale: str = "en-US"
    target_locales: list[str] = Field(default_factory=lambda: ["zh-CN", "ja-JP"])
    placeholder_name: str = DEFAULT_PLACEHOLDER_NAME
    emphasize: bool = Field(
        default=False, description="回填时将译文大写并标记空格，便于人工核对"
    )
    debug_dir: Path | None = Field(
        default=None, description="设置后，每个文档的语法树会以 JSON 写入该目录"
    )

    smartling: SmartlingConfig = Field(default_factory=SmartlingConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @field_validator("default_locale")
    @classmethod
    def validate_default_locale(cls, v: str) -> str:
        validate_lang_codes([v])
        return v

    @field_validator("target_locales")
    @classmethod
    def validate_target_locales(cls, v: list[str]) -> list[str]:
        if not v:
            raise ValueError("target_locales 不能为空。")
        validate_lang_codes(v)
        return v

    @property
    def short_locale(self) -> str:
        return short_locale(self.default_locale)
