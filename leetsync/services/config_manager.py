import os
import yaml
from pathlib import Path
from string import Template
from typing import Any, Dict, List, Mapping, Optional
from dotenv import load_dotenv
import structlog
from pydantic import ValidationError

from leetsync.models.config import SyncConfig
from leetsync.utils.exceptions import ConfigurationError

logger = structlog.get_logger()


# GitHub Actions exposes `with:` inputs as INPUT_<NAME> environment variables
ACTION_INPUTS = {
    "github_token": "INPUT_GITHUB-TOKEN",
    "leetcode_session": "INPUT_LEETCODE-SESSION",
    "leetcode_csrf_token": "INPUT_LEETCODE-CSRF-TOKEN",
}

LOCAL_VARIABLES = {
    "github_token": "GITHUB_TOKEN",
    "leetcode_session": "LEETCODE_SESSION",
    "leetcode_csrf_token": "LEETCODE_CSRF_TOKEN",
}


class ConfigManager:
    """Loads credentials and settings from a YAML file or the environment.

    Two invocation contexts are supported without a config file:
    - GitHub Actions: action inputs plus GITHUB_REPOSITORY
    - Local: GITHUB_TOKEN, GITHUB_REPO (owner/name), LEETCODE_SESSION and
      LEETCODE_CSRF_TOKEN, typically from a .env file
    """

    def __init__(
        self,
        config_path: Optional[str] = None,
        env: Optional[Mapping[str, str]] = None,
    ):
        self.config_path = Path(config_path) if config_path else None
        self._env = env
        self.env_loaded = env is not None
        self._config: Optional[SyncConfig] = None

    @property
    def env(self) -> Mapping[str, str]:
        return self._env if self._env is not None else os.environ

    def load_config(self) -> SyncConfig:
        """Load and validate configuration"""
        if self._config:
            return self._config

        # 1. Load environment
        if not self.env_loaded:  # pragma: no cover
            load_dotenv()
            self.env_loaded = True

        # 2. Read raw data
        if self.config_path is not None:
            data = self._read_yaml()
        else:
            data = {"credentials": self._credentials_from_env()}

        # 3. Validate with Pydantic
        try:
            self._config = SyncConfig(**data)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid configuration: {e}")

        logger.info(
            "config_loaded",
            repo=self._config.credentials.repo_full_name,
            source=str(self.config_path) if self.config_path else "environment",
        )
        return self._config

    def _read_yaml(self) -> Dict[str, Any]:
        assert self.config_path is not None

        if not self.config_path.exists():
            raise ConfigurationError(
                f"Configuration file not found: {self.config_path}"
            )

        try:
            raw_content = self.config_path.read_text()
        except OSError as e:
            raise ConfigurationError(f"Failed to read config file: {e}")

        try:
            # Use safe_substitute to allow ${VAR} syntax
            template = Template(raw_content)
            substituted_content = template.safe_substitute(dict(self.env))
            config_data = yaml.safe_load(substituted_content)
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Failed to parse YAML: {e}")

        if not isinstance(config_data, dict):
            raise ConfigurationError("Configuration file must contain a mapping")

        return config_data

    def in_github_actions(self) -> bool:
        return self.env.get("GITHUB_ACTIONS") == "true"

    def _credentials_from_env(self) -> Dict[str, str]:
        """Collect credentials for the current invocation context"""
        if self.in_github_actions():
            names = ACTION_INPUTS
            repo_variable = "GITHUB_REPOSITORY"
        else:
            names = LOCAL_VARIABLES
            repo_variable = "GITHUB_REPO"

        credentials: Dict[str, str] = {}
        missing: List[str] = []
        for field_name, variable in names.items():
            value = (self.env.get(variable) or "").strip()
            if not value:
                missing.append(variable)
            credentials[field_name] = value

        repo = (self.env.get(repo_variable) or "").strip()
        if not repo:
            missing.append(repo_variable)

        if missing:
            raise ConfigurationError(
                f"Missing required configuration: {', '.join(missing)}"
            )

        owner, _, name = repo.partition("/")
        if not owner or not name:
            raise ConfigurationError(
                f"{repo_variable} must be in the form '<owner>/<repo>', got '{repo}'"
            )

        credentials["repo_owner"] = owner
        credentials["repo_name"] = name
        return credentials
