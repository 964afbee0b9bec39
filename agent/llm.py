import asyncio

import openai

import logger
from extraction import FinishReason, RawCompletionText
from generics import TimedLabel, timer

from .settings import DEFAULT_MODEL, MAX_OUTPUT_TOKENS, MAX_RATE_LIMIT_RETRIES, RETRY_BACKOFF_SECONDS, client


def _summarize_for_log(text: str, max_chars: int = 600) -> str:
    cleaned = " ".join((text or "").split())
    if len(cleaned) <= max_chars:
        return cleaned
    return f"{cleaned[:max_chars]}... [truncated {len(cleaned) - max_chars} chars]"


def _is_retryable_error(exc: Exception) -> bool:
    if isinstance(exc, (openai.RateLimitError, openai.APITimeoutError, openai.APIConnectionError)):
        return True
    if isinstance(exc, (TimeoutError, asyncio.TimeoutError)):
        return True
    message = str(exc).lower()
    transient_markers = (
        "timeout",
        "temporar",
        "rate limit",
        "connection reset",
        "connection aborted",
    )
    return any(marker in message for marker in transient_markers)


async def run_completion_async(
    *,
    system_prompt: str,
    user_prompt: str,
    model: str = DEFAULT_MODEL,
    max_tokens: int = MAX_OUTPUT_TOKENS,
    max_retries: int = MAX_RATE_LIMIT_RETRIES,
    retry_backoff_seconds: float = RETRY_BACKOFF_SECONDS,
    stage: str = "structuring",
) -> RawCompletionText:
    model = model or DEFAULT_MODEL
    attempt = 0
    while True:
        attempt += 1
        try:
            with timer(TimedLabel.CHAT_COMPLETION):
                response = await asyncio.to_thread(
                    client.chat.completions.create,
                    model=model,
                    max_tokens=max_tokens,
                    messages=[
                        {"role": "system", "content": system_prompt},
                        {"role": "user", "content": user_prompt},
                    ],
                )
            break
        except Exception as e:
            if attempt <= max_retries and _is_retryable_error(e):
                delay = retry_backoff_seconds * (2 ** (attempt - 1))
                logger.saveToLog(
                    f"[run_completion_async] retryable failure attempt={attempt}/{max_retries + 1} "
                    f"sleeping={delay}s: {e}",
                    "WARNING",
                )
                await asyncio.sleep(delay)
                continue
            logger.saveToLog(f"[run_completion_async] completion call failed: {e}", "ERROR")
            raise RuntimeError("Model completion call failed") from e

    choice = response.choices[0]
    content = choice.message.content or ""
    finish_reason = FinishReason.coerce(choice.finish_reason)
    usage = getattr(response, "usage", None)
    logger.saveToLog(
        (
            "Completion call succeeded. "
            f"stage={stage} "
            f"model={model} "
            f"finish_reason={finish_reason.value} "
            f"tokens={getattr(usage, 'total_tokens', None)} "
            f"prompt_chars={len((system_prompt or '')) + len((user_prompt or ''))} "
            f"response_chars={len(content)} "
            f"response_preview={_summarize_for_log(content, 180)}"
        ),
        "INFO",
    )
    return RawCompletionText(text=content, finish_reason=finish_reason)
