"""
Ask an LLM for a structured reply and validate it against a pydantic model.

The call goes through ``llm.as_structured_llm(response_model)``. Models without
function calling fall back to a text completion program, where the JSON schema is
appended to the prompt and the reply is parsed by llama-index.
"""
import logging
import time
from math import ceil
from typing import Tuple, Type, TypeVar
from llama_index.core.llms import ChatMessage, MessageRole
from llama_index.core.llms.llm import LLM
from pydantic import BaseModel

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=BaseModel)

class LLMResponseFormatError(ValueError):
    """The reply didn't contain JSON of the expected shape."""
    pass

def chat_json(llm: LLM, system_prompt: str, user_prompt: str, response_model: Type[T]) -> Tuple[T, dict]:
    """
    Returns the validated reply and metadata about the call: the LLM's own metadata,
    its class name and the duration in whole seconds.
    """
    if not isinstance(llm, LLM):
        raise ValueError("Invalid LLM instance.")

    messages = [
        ChatMessage(role=MessageRole.SYSTEM, content=system_prompt.strip()),
        ChatMessage(role=MessageRole.USER, content=user_prompt.strip()),
    ]

    sllm = llm.as_structured_llm(response_model)
    start_time = time.perf_counter()
    try:
        chat_response = sllm.chat(messages)
    except ValueError as e:
        # pydantic's ValidationError is a ValueError, as is llama-index's "no json found".
        logger.error(f"{response_model.__name__} parsing failed: {e}")
        raise LLMResponseFormatError(f"Response doesn't match {response_model.__name__}: {e}") from e
    end_time = time.perf_counter()

    result = chat_response.raw
    if not isinstance(result, response_model):
        logger.error(f"Expected {response_model.__name__}, got {type(result).__name__}")
        raise LLMResponseFormatError(f"Response doesn't match {response_model.__name__}")

    metadata = dict(llm.metadata)
    metadata["llm_classname"] = llm.class_name()
    metadata["duration"] = int(ceil(end_time - start_time))
    return result, metadata
