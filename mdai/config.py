"""YAML configuration for mdai.

The configuration lives in ``~/.mdai/config.yml``. Keys missing from the file
fall back to the built-in defaults below, so a user file only needs to carry
what it changes. Message templates use ``{{.Name}}`` placeholders.
"""

import copy
import logging
import re
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from mdai.errors import ConfigError

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "gpt-4o-mini"
DEFAULT_MAX_TOKENS = 2000
DEFAULT_TEMPERATURE = 0.7

LOG_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "warning": logging.WARNING,
    "error": logging.ERROR,
}

PLACEHOLDER_PATTERN = re.compile(r"\{\{\s*\.(\w+)\s*\}\}")

ANSWER_SYSTEM_MESSAGE = """You are a helpful and detailed assistant. When answering questions based on the given context, please follow these guidelines:

1. Answer in the same language as the question
2. Make full use of the context information
3. Add examples and explanations when necessary
4. Ensure answers are appropriately long and content-rich
5. Provide insights that deepen the questioner's understanding
6. Prefer rich markdown formatting"""

ANSWER_USER_MESSAGE = """Context: {{.Context}}

Question: {{.Question}}"""

SUMMARIZE_SYSTEM_MESSAGE = """You are a helpful and detailed assistant specialized in summarizing markdown documents. When summarizing content, please follow these guidelines:

1. Provide a comprehensive yet concise summary of the main content
2. Maintain the key points and important information
3. Use clear and organized structure with markdown formatting
4. Include main headings and subheadings when relevant
5. Preserve important details, examples, and references
6. Make the summary easy to read and understand
7. Use appropriate markdown elements (headers, lists, emphasis, etc.)
8. Keep the summary appropriately long - not too brief, not too verbose
9. Focus on the most valuable and actionable information
10. Maintain the original tone and style when appropriate"""

SUMMARIZE_USER_MESSAGE = """Please provide a comprehensive summary of the following markdown content:

{{.Content}}

Please create a well-structured summary that captures the essence and key points of this content."""

TRANSLATE_SYSTEM_MESSAGE = """You are a professional translator specialized in translating markdown documents. When translating content, please follow these guidelines:

1. Translate the content to the specified target language accurately and naturally
2. Maintain the original markdown formatting and structure
3. Preserve all headings, lists, code blocks, and formatting elements
4. Keep the same tone and style as the original document
5. Ensure technical terms are translated appropriately for the target language
6. Maintain the document's readability and flow in the target language
7. Preserve any links, references, or citations
8. Keep the same level of detail and information as the original
9. Use appropriate language conventions for the target language
10. Ensure the translation sounds natural to native speakers of the target language"""

TRANSLATE_USER_MESSAGE = """Please translate the following content to {{.TargetLanguage}}:

{{.Content}}

Please maintain the original markdown formatting and structure while ensuring the translation is accurate and natural."""


class QualityConfig(BaseModel):
    max_tokens: int = DEFAULT_MAX_TOKENS
    temperature: float = DEFAULT_TEMPERATURE

    @field_validator("max_tokens")
    @classmethod
    def _default_max_tokens(cls, value: int) -> int:
        return value or DEFAULT_MAX_TOKENS

    @field_validator("temperature")
    @classmethod
    def _default_temperature(cls, value: float) -> float:
        return value or DEFAULT_TEMPERATURE


class DefaultConfig(BaseModel):
    model: str = DEFAULT_MODEL
    quality: QualityConfig = Field(default_factory=QualityConfig)
    log_level: str = "info"
    disable_stream: bool = False

    @field_validator("model")
    @classmethod
    def _default_model(cls, value: str) -> str:
        return value or DEFAULT_MODEL

    @property
    def logging_level(self) -> int:
        return LOG_LEVELS.get((self.log_level or "info").lower(), logging.INFO)


class ArgsConfig(BaseModel):
    """Allowed number of extra CLI arguments; ``max_count`` 0 means unbounded."""

    min_count: int = 0
    max_count: int = 0


class OperationConfig(BaseModel):
    system_message: str = ""
    user_message: str = ""
    suffix: str = ""
    target_length: int = 0
    args: ArgsConfig = Field(default_factory=ArgsConfig)

    def build_system_message(self) -> str:
        if self.target_length > 0:
            return (
                f"{self.system_message}\n\n**Length Guidance**: "
                f"Please keep the response to approximately {self.target_length} characters."
            )
        return self.system_message


class AppendConfig(BaseModel):
    operations: dict[str, OperationConfig] = Field(default_factory=dict)


class TransformConfig(BaseModel):
    operations: dict[str, OperationConfig] = Field(default_factory=dict)


class MdaiConfig(BaseModel):
    default: DefaultConfig = Field(default_factory=DefaultConfig)
    append: AppendConfig = Field(default_factory=AppendConfig)
    transform: TransformConfig = Field(default_factory=TransformConfig)


DEFAULTS: dict[str, Any] = {
    "default": {
        "model": DEFAULT_MODEL,
        "quality": {"max_tokens": DEFAULT_MAX_TOKENS, "temperature": DEFAULT_TEMPERATURE},
        "log_level": "info",
        "disable_stream": False,
    },
    "append": {
        "operations": {
            "answer": {
                "system_message": ANSWER_SYSTEM_MESSAGE,
                "user_message": ANSWER_USER_MESSAGE,
                "target_length": 500,
            },
        },
    },
    "transform": {
        "operations": {
            "summarize": {
                "system_message": SUMMARIZE_SYSTEM_MESSAGE,
                "user_message": SUMMARIZE_USER_MESSAGE,
                "suffix": "_sum",
                "target_length": 800,
            },
            "translate": {
                "system_message": TRANSLATE_SYSTEM_MESSAGE,
                "user_message": TRANSLATE_USER_MESSAGE,
                "suffix": "_{{.Arg0}}",
                "args": {"min_count": 1, "max_count": 1},
            },
        },
    },
}


def default_config_path() -> Path:
    return Path.home() / ".mdai" / "config.yml"


def render_template(template: str, variables: dict[str, str]) -> str:
    """Substitute ``{{.Name}}`` placeholders from ``variables``."""
    if not template:
        raise ConfigError("template is empty")

    def substitute(match: re.Match) -> str:
        name = match.group(1)
        if name not in variables:
            raise ConfigError(f"template variable not provided: {name}")
        return variables[name]

    return PLACEHOLDER_PATTERN.sub(substitute, template)


def _merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def default_config() -> MdaiConfig:
    return MdaiConfig.model_validate(DEFAULTS)


def load_config(path: Path | None = None) -> MdaiConfig:
    """Load configuration from ``path`` merged over the defaults."""
    path = Path(path) if path else default_config_path()
    if not path.exists():
        logger.debug("config file %s not found, using defaults", path)
        return default_config()

    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except OSError as e:
        raise ConfigError(f"failed to read config file {path}: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigError(f"failed to parse config file {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"config file {path} must contain a mapping")

    try:
        return MdaiConfig.model_validate(_merge(DEFAULTS, data))
    except ValidationError as e:
        raise ConfigError(f"invalid config file {path}: {e}") from e


def write_default_config(path: Path | None = None, force: bool = False) -> bool:
    """Write the default configuration. Returns False if the file was kept."""
    path = Path(path) if path else default_config_path()
    if path.exists() and not force:
        logger.info("config file already exists: %s", path)
        return False

    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(
        yaml.safe_dump(DEFAULTS, default_flow_style=False, sort_keys=False, allow_unicode=True),
        encoding="utf-8",
    )
    logger.info("configuration written to %s", path)
    return True
