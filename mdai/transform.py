"""Transform operations: write a summarized or translated copy of a file."""

import logging
from pathlib import Path

from mdai.config import ArgsConfig, MdaiConfig, OperationConfig, render_template
from mdai.document import load_content, output_path, validate_markdown_file
from mdai.errors import OperationError
from mdai.llm_client import OpenAIClient

logger = logging.getLogger(__name__)

LANGUAGE_NAMES = {
    "en": "English",
    "ja": "Japanese (日本語)",
    "zh": "Chinese (中文)",
    "ko": "Korean (한국어)",
    "es": "Spanish (Español)",
    "fr": "French (Français)",
    "de": "German (Deutsch)",
    "it": "Italian (Italiano)",
    "pt": "Portuguese (Português)",
    "ru": "Russian (Русский)",
    "ar": "Arabic (العربية)",
    "hi": "Hindi (हिन्दी)",
    "th": "Thai (ไทย)",
    "vi": "Vietnamese (Tiếng Việt)",
    "nl": "Dutch (Nederlands)",
    "sv": "Swedish (Svenska)",
    "no": "Norwegian (Norsk)",
    "da": "Danish (Dansk)",
    "fi": "Finnish (Suomi)",
    "pl": "Polish (Polski)",
    "tr": "Turkish (Türkçe)",
    "he": "Hebrew (עברית)",
    "id": "Indonesian (Bahasa Indonesia)",
    "ms": "Malay (Bahasa Melayu)",
    "ca": "Catalan (Català)",
}


def is_valid_language_code(code: str) -> bool:
    return code.lower() in LANGUAGE_NAMES


def language_name(code: str) -> str:
    return LANGUAGE_NAMES.get(code.lower(), code)


def get_transform_operation(config: MdaiConfig, operation: str) -> OperationConfig:
    try:
        return config.transform.operations[operation]
    except KeyError:
        raise OperationError(f"unsupported operation: {operation}") from None


def validate_args(args: list[str], args_config: ArgsConfig) -> None:
    count = len(args)
    if count < args_config.min_count:
        raise OperationError(
            f"operation requires at least {args_config.min_count} arguments, got {count}"
        )
    if args_config.max_count > 0 and count > args_config.max_count:
        raise OperationError(
            f"operation accepts at most {args_config.max_count} arguments, got {count}"
        )


def build_user_message(operation: str, op_config: OperationConfig, content: str, args: list[str]) -> str:
    variables = {"Content": content}
    variables.update({f"Arg{i}": arg for i, arg in enumerate(args)})

    if operation == "translate" and args:
        if not is_valid_language_code(args[0]):
            raise OperationError(
                f"invalid language code: {args[0]}. "
                "Please use standard language codes like 'en', 'ja', 'zh', etc."
            )
    if len(args) == 1 and is_valid_language_code(args[0]):
        variables["TargetLanguage"] = language_name(args[0])

    return render_template(op_config.user_message, variables)


async def transform_file(
    config: MdaiConfig,
    operation: str,
    path: Path,
    args: list[str] | None = None,
    client: OpenAIClient | None = None,
) -> Path:
    """Run a transform operation on ``path`` and return the written output path."""
    args = args or []
    op_config = get_transform_operation(config, operation)
    validate_args(args, op_config.args)
    path = validate_markdown_file(path)

    suffix_vars = {f"Arg{i}": arg for i, arg in enumerate(args)}
    suffix = render_template(op_config.suffix, suffix_vars) if op_config.suffix else ""
    destination = output_path(path, suffix)
    if destination == path:
        raise OperationError(f"operation {operation} would overwrite its input: {path}")

    content = load_content(path)
    user_message = build_user_message(operation, op_config, content, args)

    client = client or OpenAIClient.from_quality(config.default.model, config.default.quality)
    logger.info(
        "using configuration: model=%s max_tokens=%s temperature=%s target_length=%s",
        client.model, client.max_tokens, client.temperature, op_config.target_length,
    )
    result = await client.complete(op_config.build_system_message(), user_message, operation=operation)

    destination.write_text(result, encoding="utf-8")
    logger.info("%s completed: input=%s output=%s", operation, path, destination)
    return destination
