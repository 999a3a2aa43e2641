"""
Locate CodeCraft's config files, like .env and llm_config.json.

Finds config files by checking the following locations in order:
1. The directory specified by the CODECRAFT_CONFIG_PATH environment variable. It must be an absolute path.
2. The current working directory (CWD).
3. The project root directory (two levels above this file's location).

Usage: without any CODECRAFT_CONFIG_PATH environment variable.
PROMPT> python -m codecraft.utils.codecraft_config

Usage: with a CODECRAFT_CONFIG_PATH environment variable set.
PROMPT> CODECRAFT_CONFIG_PATH='/home/user/codecraft-config' python -m codecraft.utils.codecraft_config
"""
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, ClassVar
import logging
import os
from enum import Enum

logger = logging.getLogger(__name__)

CONFIG_PATH_ENV_VAR = "CODECRAFT_CONFIG_PATH"

class ConfigNameEnum(str, Enum):
    DOTENV = ".env"
    LLM_CONFIG_JSON = "llm_config.json"

class CodeCraftConfigError(Exception):
    """Raised when there is an error with the configuration."""
    pass

@dataclass
class CodeCraftConfig:
    """
    Resolved paths to the configuration files.

    Attributes:
        codecraft_config_path: Optional[Path] - The directory specified by CODECRAFT_CONFIG_PATH
        dotenv_path: Optional[Path] - Path to the .env file
        llm_config_json_path: Optional[Path] - Path to the llm_config.json file
    """
    codecraft_config_path: Optional[Path]
    dotenv_path: Optional[Path]
    llm_config_json_path: Optional[Path]

    _instance: ClassVar[Optional['CodeCraftConfig']] = None

    def raise_if_required_files_not_found(self) -> None:
        """
        The .env file is optional, its values may come from the environment instead.
        The llm_config.json file is required for anything that talks to an LLM.

        :raises: CodeCraftConfigError if llm_config.json was not found
        """
        if self.llm_config_json_path is None:
            msg = f"Required configuration file not found: {ConfigNameEnum.LLM_CONFIG_JSON.value}"
            logger.error(msg)
            raise CodeCraftConfigError(msg)
        logger.debug("Configuration files found")

    @classmethod
    def load(cls) -> 'CodeCraftConfig':
        """
        Loads configuration paths by searching predefined locations.
        The result is cached, so the filesystem is only scanned once.
        """
        if cls._instance is not None:
            return cls._instance

        logger.debug("CodeCraftConfig.load() creating a new instance...")
        config_path = cls.resolve_config_path()
        cls._instance = cls(
            codecraft_config_path=config_path,
            dotenv_path=cls.find_file_in_search_order(ConfigNameEnum.DOTENV.value, config_path),
            llm_config_json_path=cls.find_file_in_search_order(ConfigNameEnum.LLM_CONFIG_JSON.value, config_path),
        )
        return cls._instance

    @classmethod
    def reset(cls) -> None:
        """Forget the cached instance, so the next load() scans again."""
        cls._instance = None

    @classmethod
    def resolve_config_path(cls) -> Optional[Path]:
        """
        Resolves and validates the CODECRAFT_CONFIG_PATH environment variable.
        It's expected to be an absolute path to a directory.

        :return: A Path object if valid, otherwise None.
        """
        path_str = os.environ.get(CONFIG_PATH_ENV_VAR)
        if path_str is None:
            logger.debug(f"{CONFIG_PATH_ENV_VAR} is not set")
            return None

        path_obj = Path(path_str)
        if not path_obj.is_absolute():
            logger.error(f"{CONFIG_PATH_ENV_VAR} must be an absolute path: {path_obj!r}")
            return None
        if not path_obj.is_dir():
            logger.error(f"{CONFIG_PATH_ENV_VAR} must be a directory: {path_obj!r}")
            return None
        logger.debug(f"Using {CONFIG_PATH_ENV_VAR}: {path_obj!r}")
        return path_obj

    @classmethod
    def find_file_in_search_order(cls, filename: str, config_path: Optional[Path]) -> Optional[Path]:
        """
        Search order: CODECRAFT_CONFIG_PATH, then CWD, then the project root.

        :return: The Path to the file if found, otherwise None.
        """
        candidates = []
        if config_path is not None:
            candidates.append(config_path / filename)
        candidates.append(Path.cwd() / filename)
        candidates.append(Path(__file__).parent.parent.parent / filename)

        for candidate in candidates:
            if candidate.is_file():
                logger.debug(f"Found {filename!r} at {candidate!r}")
                return candidate

        logger.warning(f"{filename!r} not found in any of the search locations (ENV_VAR, CWD, Project Root).")
        return None

if __name__ == "__main__":
    logging.basicConfig(level=logging.DEBUG)
    config = CodeCraftConfig.load()
    print(f"config: {config!r}")
    config.raise_if_required_files_not_found()
