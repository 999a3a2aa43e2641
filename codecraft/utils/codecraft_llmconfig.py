"""
Load CodeCraft's llm_config.json file, containing LLM configurations.

Values like "${OPENROUTER_API_KEY}" are replaced by the corresponding .env or environment value.

PROMPT> python -m codecraft.utils.codecraft_llmconfig
"""
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Mapping
import json
import os
import logging
from codecraft.utils.codecraft_config import CodeCraftConfig
from codecraft.utils.codecraft_dotenv import CodeCraftDotEnv

logger = logging.getLogger(__name__)

@dataclass
class CodeCraftLLMConfig:
    llm_config_json_path: Path
    llm_config_dict_raw: dict[str, Any]
    llm_config_dict: dict[str, Any]

    @classmethod
    def load(cls) -> 'CodeCraftLLMConfig':
        config = CodeCraftConfig.load()
        config.raise_if_required_files_not_found()
        dotenv = CodeCraftDotEnv.load()
        env_vars = {**os.environ, **dotenv.dotenv_dict}
        return cls.from_path(config.llm_config_json_path, env_vars)

    @classmethod
    def from_path(cls, llm_config_json_path: Path, env_vars: Mapping[str, str]) -> 'CodeCraftLLMConfig':
        llm_config_dict_raw = cls.load_llm_config(llm_config_json_path)
        return cls(
            llm_config_json_path=llm_config_json_path,
            llm_config_dict_raw=llm_config_dict_raw,
            llm_config_dict=cls.substitute_env_vars(llm_config_dict_raw, env_vars),
        )

    @classmethod
    def load_llm_config(cls, llm_config_json_path: Path) -> Dict[str, Any]:
        try:
            with open(llm_config_json_path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise ValueError(f"Error decoding JSON from {llm_config_json_path}: {e}")
        if not isinstance(data, dict):
            raise ValueError(f"Expected a JSON object in {llm_config_json_path}, got {type(data).__name__}")
        return data

    @classmethod
    def substitute_env_vars(cls, config: Dict[str, Any], env_vars: Mapping[str, str]) -> Dict[str, Any]:
        """Recursively substitutes "${NAME}" string values. Unknown names are left as they are."""

        def replace_value(value: Any) -> Any:
            if isinstance(value, str) and value.startswith("${") and value.endswith("}"):
                var_name = value[2:-1]
                if var_name in env_vars:
                    return env_vars[var_name]
                logger.warning(f"Environment variable {var_name!r} not found.")
            return value

        def process_item(item):
            if isinstance(item, dict):
                return {k: process_item(v) for k, v in item.items()}
            if isinstance(item, list):
                return [process_item(i) for i in item]
            return replace_value(item)

        return process_item(config)

    def __repr__(self):
        return f"CodeCraftLLMConfig(llm_config_json_path={self.llm_config_json_path!r}, llm_config_dict.keys()={self.llm_config_dict.keys()!r})"

if __name__ == "__main__":
    logging.basicConfig(level=logging.DEBUG)
    llm_config = CodeCraftLLMConfig.load()
    print(llm_config)
