"""
Create llama-index LLM instances from llm_config.json.

Each entry in llm_config.json names a llama-index class and its constructor arguments:

    "openrouter-gemini-2.0-flash": {
        "class": "OpenRouter",
        "priority": 1,
        "arguments": {"model": "google/gemini-2.0-flash-001", "api_key": "${OPENROUTER_API_KEY}"}
    }

PROMPT> python -m codecraft.llm_factory
"""
import logging
from dataclasses import dataclass
from typing import Any, Optional
from llama_index.core.llms.llm import LLM
from llama_index.llms.ollama import Ollama
from llama_index.llms.openai_like import OpenAILike
from llama_index.llms.openrouter import OpenRouter
from codecraft.utils.codecraft_llmconfig import CodeCraftLLMConfig

# You can disable this if you don't want to send app info to OpenRouter.
SEND_APP_INFO_TO_OPENROUTER = True

logger = logging.getLogger(__name__)

__all__ = ["get_llm", "LLMInfo", "get_llm_names_by_priority", "is_valid_llm_name"]

LLM_CLASSES: dict[str, type[LLM]] = {
    "OpenRouter": OpenRouter,
    "OpenAILike": OpenAILike,
    "Ollama": Ollama,
}

_llm_config: Optional[CodeCraftLLMConfig] = None

def _llm_config_dict(llm_config: Optional[CodeCraftLLMConfig] = None) -> dict[str, Any]:
    global _llm_config
    if llm_config is not None:
        return llm_config.llm_config_dict
    if _llm_config is None:
        _llm_config = CodeCraftLLMConfig.load()
    return _llm_config.llm_config_dict

@dataclass
class LLMConfigItem:
    id: str
    label: str
    priority: Optional[int] = None

@dataclass
class LLMInfo:
    llm_config_items: list[LLMConfigItem]

    @classmethod
    def obtain_info(cls, llm_config: Optional[CodeCraftLLMConfig] = None) -> 'LLMInfo':
        items = []
        for config_id, config in _llm_config_dict(llm_config).items():
            priority = config.get("priority")
            label = f"{config_id} (prio: {priority})" if priority is not None else config_id
            items.append(LLMConfigItem(id=config_id, label=label, priority=priority))
        return cls(llm_config_items=items)

def get_llm_names_by_priority(llm_config: Optional[CodeCraftLLMConfig] = None) -> list[str]:
    """
    Names of the LLMs that have a priority, lowest value first.
    """
    configs = [(name, config) for name, config in _llm_config_dict(llm_config).items()
               if config.get("priority") is not None]
    configs.sort(key=lambda x: x[1]["priority"])
    return [name for name, _ in configs]

def is_valid_llm_name(llm_name: str, llm_config: Optional[CodeCraftLLMConfig] = None) -> bool:
    return llm_name in _llm_config_dict(llm_config)

def get_llm(llm_name: Optional[str] = None, llm_config: Optional[CodeCraftLLMConfig] = None, **kwargs: Any) -> LLM:
    """
    Returns an LLM instance for the named entry in llm_config.json.

    :param llm_name: The key in llm_config.json. If None, the entry with the lowest priority value is used.
    :param kwargs: Additional keyword arguments that override the configured arguments.
    :return: An instance of a llama-index LLM class.
    """
    config_dict = _llm_config_dict(llm_config)
    if not llm_name:
        llm_names = get_llm_names_by_priority(llm_config)
        if not llm_names:
            raise ValueError("No LLM models configured with a priority")
        llm_name = llm_names[0]

    if llm_name not in config_dict:
        logger.error(f"Cannot create LLM, the llm_name {llm_name!r} is not found in llm_config.json.")
        raise ValueError(f"Unsupported LLM name: {llm_name}")

    config = config_dict[llm_name]
    class_name = config.get("class")
    arguments = dict(config.get("arguments", {}))
    arguments.update(kwargs)

    if class_name == "OpenRouter" and SEND_APP_INFO_TO_OPENROUTER:
        # https://openrouter.ai/docs/api-reference/overview#headers
        arguments["additional_kwargs"] = {
            "extra_headers": {
                "X-Title": "CodeCraft Estimator"
            }
        }

    llm_class = LLM_CLASSES.get(class_name)
    if llm_class is None:
        raise ValueError(f"Invalid LLM class name in llm_config.json: {class_name}")
    try:
        return llm_class(**arguments)
    except TypeError as e:
        raise ValueError(f"Error instantiating {class_name} with arguments: {e}")

if __name__ == '__main__':
    logging.basicConfig(level=logging.DEBUG)
    for llm_name in get_llm_names_by_priority():
        print(f"- {llm_name}")
    llm = get_llm()
    print(llm.complete("Hello, how are you?"))
