# mdx_l10n/utils.py
"""
本模块包含项目范围内的通用工具函数。
语言代码校验采用 langcodes 库。
"""

import re

from langcodes import Language
from langcodes.tag_parser import LanguageTagError

# 语言子标签应该由 2-3 个字母组成 (BCP 47)
LANGUAGE_SUBTAG_PATTERN = re.compile(r"^[a-zA-Z]{2,3}$")

DEFAULT_PLACEHOLDER_NAME = "locale"


def validate_lang_codes(lang_codes: list[str]) -> None:
    """使用 `langcodes` 库校验语言代码列表中的每个代码是否符合 BCP 47 规范。"""
    for code in lang_codes:
        try:
            lang = Language.get(code)
            if not lang.language or not LANGUAGE_SUBTAG_PATTERN.match(lang.language):
                raise LanguageTagError(
                    f"Tag '{code}' lacks a valid 2-3 letter language subtag."
                )
        except LanguageTagError as e:
            raise ValueError(f"提供的语言代码 '{code}' 格式无效。原因: {e}") from e


def create_placeholder(name: str) -> str:
    """生成下游工具负责替换的占位符，例如 `%%locale%%`。"""
    return f"%%{name}%%"


def short_locale(locale: str) -> str:
    """取语言标签的语言子标签，例如 'en-US' -> 'en'。"""
    return Language.get(locale).language or locale[:2]


def localize_url(
    url: str, locale: str = "en-US", placeholder: str = DEFAULT_PLACEHOLDER_NAME
) -> str:
    """
    将 URL / 路径中第一个默认语言路径段替换为占位符。

    例如: '../en/guides/a.mdx' -> '../%%locale%%/guides/a.mdx'。
    只匹配完整的路径段，'/english' 不会被改写。
    """
    segment = re.escape(short_locale(locale))
    pattern = re.compile(rf"/{segment}(?=[/\"'#?]|$)")
    return pattern.sub(f"/{create_placeholder(placeholder)}", url, count=1)


def chomp(text: str) -> str:
    """移除字符串末尾的一个换行符。"""
    if text.endswith("\r\n"):
        return text[:-2]
    if text.endswith("\n"):
        return text[:-1]
    return text
