"""
Load CodeCraft's .env file, containing secrets such as API keys, like: OPENROUTER_API_KEY.

Environment variables take priority over the values in the .env file.

PROMPT> python -m codecraft.utils.codecraft_dotenv
"""
from dataclasses import dataclass
import os
from pathlib import Path
from typing import Mapping, Optional
from dotenv import dotenv_values
import logging
from codecraft.utils.codecraft_config import CodeCraftConfig

logger = logging.getLogger(__name__)

@dataclass
class CodeCraftDotEnv:
    dotenv_path: Optional[Path]
    dotenv_dict: dict[str, str]

    @classmethod
    def load(cls, environ: Optional[Mapping[str, str]] = None) -> 'CodeCraftDotEnv':
        config = CodeCraftConfig.load()
        return cls.from_path(config.dotenv_path, environ=environ)

    @classmethod
    def from_path(cls, dotenv_path: Optional[Path], environ: Optional[Mapping[str, str]] = None) -> 'CodeCraftDotEnv':
        """
        Read the .env file without touching os.environ.

        A key that is also set in the environment gets the environment's value.
        Keys without a value in the file are dropped.
        """
        if environ is None:
            environ = os.environ

        dotenv_dict: dict[str, str] = {}
        if dotenv_path is not None and dotenv_path.is_file():
            for key, value in dotenv_values(dotenv_path=dotenv_path).items():
                if value is not None:
                    dotenv_dict[key] = value
            logger.debug(f"Loaded {len(dotenv_dict)} values from {dotenv_path}")
        else:
            logger.info("No .env file found, using environment variables only")

        overridden = 0
        for key in list(dotenv_dict.keys()):
            env_value = environ.get(key)
            if env_value:
                dotenv_dict[key] = env_value
                overridden += 1
        if overridden:
            logger.debug(f"{overridden} .env values overridden by environment variables")
        return cls(dotenv_path=dotenv_path, dotenv_dict=dotenv_dict)

    def get(self, key: str, environ: Optional[Mapping[str, str]] = None) -> Optional[str]:
        """Look up a key, falling back to the environment for keys that aren't in the .env file."""
        if key in self.dotenv_dict:
            return self.dotenv_dict[key]
        if environ is None:
            environ = os.environ
        return environ.get(key)

    def __repr__(self):
        return f"CodeCraftDotEnv(dotenv_path={self.dotenv_path!r}, dotenv_dict.keys()={self.dotenv_dict.keys()!r})"

if __name__ == "__main__":
    logging.basicConfig(level=logging.DEBUG)
    dotenv = CodeCraftDotEnv.load()
    print(dotenv)
