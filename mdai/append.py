"""Append operations: answer the last quoted question in a markdown file."""

import logging
from pathlib import Path

from mdai.config import MdaiConfig, OperationConfig, render_template
from mdai.document import load_content, validate_markdown_file
from mdai.errors import OperationError
from mdai.llm_client import OpenAIClient
from mdai.quote import extract_last_quote

logger = logging.getLogger(__name__)

ANSWER_SEPARATOR = "\n\n"


def get_append_operation(config: MdaiConfig, operation: str) -> OperationConfig:
    try:
        return config.append.operations[operation]
    except KeyError:
        raise OperationError(f"unsupported append operation: {operation}") from None


def build_messages(op_config: OperationConfig, content: str) -> tuple[str, str] | None:
    """Return (system, user) messages, or None when the document has no live quote."""
    last_quote = extract_last_quote(content)
    if not last_quote.found:
        return None

    user_message = render_template(
        op_config.user_message,
        {
            "Content": content,
            "Context": last_quote.remainder,
            "Question": last_quote.quote,
        },
    )
    return op_config.build_system_message(), user_message


def _make_client(config: MdaiConfig) -> OpenAIClient:
    return OpenAIClient.from_quality(config.default.model, config.default.quality)


async def answer_content(
    config: MdaiConfig,
    content: str,
    operation: str = "answer",
    client: OpenAIClient | None = None,
) -> str | None:
    """Answer the last quote in ``content`` and return the reply text."""
    messages = build_messages(get_append_operation(config, operation), content)
    if messages is None:
        logger.info("no quote found at the end of the document, skipping")
        return None

    client = client or _make_client(config)
    return await client.complete(*messages, operation=operation)


async def append_answer(
    config: MdaiConfig,
    path: Path,
    operation: str = "answer",
    stream: bool | None = None,
    client: OpenAIClient | None = None,
) -> bool:
    """Answer the last quote in ``path`` and append the reply to the file.

    Returns False without contacting the API when the document does not end
    with a quote block.
    """
    op_config = get_append_operation(config, operation)
    path = validate_markdown_file(path)
    content = load_content(path)

    messages = build_messages(op_config, content)
    if messages is None:
        logger.info("no quote found at the end of %s, skipping", path)
        return False

    client = client or _make_client(config)
    if stream is None:
        stream = not config.default.disable_stream

    logger.info(
        "using configuration: model=%s max_tokens=%s temperature=%s",
        client.model, client.max_tokens, client.temperature,
    )

    if not stream:
        answer = await client.complete(*messages, operation=operation)
        with open(path, "a", encoding="utf-8") as f:
            f.write(ANSWER_SEPARATOR + answer)
        return True

    with open(path, "a", encoding="utf-8") as f:
        f.write(ANSWER_SEPARATOR)
        async for chunk in client.stream(*messages, operation=operation):
            f.write(chunk)
            f.flush()
    return True
