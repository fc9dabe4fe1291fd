"""
프롬프트 YAML 로더

[사용법]
```python
from testbuddy.domain.llm.prompts import render_prompt

prompt = render_prompt("code_hint", description="...", code="...")
```

YAML 파일 구조: version, name, description, variables, template
템플릿 변수는 $variable 또는 ${variable} 형식 (string.Template)
"""

import logging
from functools import lru_cache
from pathlib import Path
from string import Template
from typing import Any, Dict

import yaml

logger = logging.getLogger(__name__)

PROMPTS_DIR = Path(__file__).parent


class PromptNotFoundError(Exception):
    """프롬프트 파일을 찾을 수 없을 때 발생하는 예외"""

    pass


class PromptRenderError(Exception):
    """프롬프트 렌더링 중 오류가 발생했을 때 발생하는 예외"""

    pass


@lru_cache(maxsize=32)
def _load_yaml_file(file_path: str) -> Dict[str, Any]:
    path = Path(file_path)
    if not path.exists():
        raise PromptNotFoundError(f"프롬프트 파일을 찾을 수 없습니다: {file_path}")

    try:
        with open(path, "r", encoding="utf-8") as f:
            content = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise PromptRenderError(f"YAML 파싱 오류: {file_path} - {str(e)}")

    if not isinstance(content, dict):
        raise PromptRenderError(f"프롬프트 파일 형식 오류 (매핑 아님): {file_path}")

    logger.debug(f"프롬프트 파일 로드 완료: {file_path}")
    return content


def load_prompt(name: str) -> Dict[str, Any]:
    """
    프롬프트 YAML 파일을 로드합니다.

    Args:
        name: 프롬프트 이름 (확장자 제외, 예: "judge_evaluate")

    Raises:
        PromptNotFoundError: 프롬프트 파일을 찾을 수 없는 경우
    """
    return _load_yaml_file(str(PROMPTS_DIR / f"{name}.yaml"))


def render_prompt(name: str, **variables: Any) -> str:
    """
    프롬프트 템플릿을 로드하고 변수를 치환합니다.
    누락된 변수는 그대로 남습니다 (safe_substitute).

    Raises:
        PromptNotFoundError: 프롬프트 파일을 찾을 수 없는 경우
        PromptRenderError: template 필드가 없거나 렌더링에 실패한 경우
    """
    data = load_prompt(name)
    template_str = data.get("template", "")
    if not template_str:
        raise PromptRenderError(f"프롬프트 '{name}'에 template 필드가 없습니다.")

    try:
        rendered = Template(template_str).safe_substitute(**variables)
    except Exception as e:
        raise PromptRenderError(f"프롬프트 렌더링 오류: {name} - {str(e)}")

    logger.debug(
        f"프롬프트 렌더링 완료: {name}, 변수: {list(variables.keys())}, 결과 길이: {len(rendered)}"
    )
    return rendered


def get_prompt_metadata(name: str) -> Dict[str, Any]:
    """프롬프트 메타데이터 (version, name, description, variables)"""
    data = load_prompt(name)
    return {
        "version": data.get("version", "1.0"),
        "name": data.get("name", name),
        "description": data.get("description", ""),
        "variables": data.get("variables", []),
    }


def clear_cache():
    """프롬프트 캐시를 초기화합니다."""
    _load_yaml_file.cache_clear()
    logger.info("프롬프트 캐시 초기화 완료")


__all__ = [
    "load_prompt",
    "render_prompt",
    "get_prompt_metadata",
    "clear_cache",
    "PromptNotFoundError",
    "PromptRenderError",
    "PROMPTS_DIR",
]
