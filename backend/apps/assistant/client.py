"""
OpenAI chat completions with retry and backoff.
"""
import json
import logging
import re

import openai
from django.conf import settings
from openai import OpenAI
from tenacity import Retrying, retry_if_exception_type, stop_after_attempt, wait_exponential

logger = logging.getLogger(__name__)

# Transient upstream failures worth another attempt
RETRYABLE_ERRORS = (
    openai.APIConnectionError,
    openai.RateLimitError,
    openai.InternalServerError,
)


class AssistantError(Exception):
    """The model could not be reached or returned something unusable"""


def _retrying():
    return Retrying(
        stop=stop_after_attempt(settings.ASSISTANT_RETRY_MAX_RETRIES + 1),
        wait=wait_exponential(
            multiplier=settings.ASSISTANT_RETRY_INITIAL_DELAY,
            max=settings.ASSISTANT_RETRY_MAX_DELAY,
        ),
        retry=retry_if_exception_type(RETRYABLE_ERRORS),
        reraise=True,
    )


def complete(messages, api_key, model, temperature, max_tokens):
    """Send ``messages`` and return the reply text"""
    # Retries are handled here, not by the SDK
    client = OpenAI(api_key=api_key, max_retries=0)
    try:
        response = _retrying()(
            client.chat.completions.create,
            model=model,
            messages=messages,
            temperature=temperature,
            max_tokens=max_tokens,
        )
    except openai.OpenAIError as e:
        logger.warning(f"OpenAI request failed ({model}): {e}")
        raise AssistantError(str(e)) from e

    if not response.choices:
        raise AssistantError("OpenAI returned no choices")
    return (response.choices[0].message.content or '').strip()


def parse_json_reply(content):
    """Decode a JSON reply, tolerating markdown code fences around it"""
    if "```" in content:
        content = re.sub(r'```(?:json)?', '', content).strip()
    try:
        return json.loads(content)
    except ValueError as e:
        raise AssistantError(f"Reply is not valid JSON: {e}") from e
