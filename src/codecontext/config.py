"""Configuration management for codecontext using pydantic and platformdirs."""

from pathlib import Path
from typing import List, Literal, Optional

from platformdirs import user_state_dir
from pydantic import AliasChoices, BaseModel, ConfigDict, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

CONFIG_FILENAME = ".codecontext.json"

Mode = Literal["quick", "smart", "deep"]

DEFAULT_IGNORE_PATTERNS = [
    "node_modules/**",
    "dist/**",
    "build/**",
    "*.log",
    ".git/**",
    "coverage/**",
]


class ConfigNotFoundError(Exception):
    """Raised when a project has not been initialized."""

    def __init__(self, start: Path):
        super().__init__(
            f"No {CONFIG_FILENAME} found at or above {start}. "
            "Run 'codecontext init' first."
        )
        self.start = start


class Integrations(BaseModel):
    git: bool = True
    claude: bool = True


class ProjectConfig(BaseModel):
    """Per-project settings stored in .codecontext.json."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    version: str = "1.0.0"
    mode: Mode = "smart"
    ignore_patterns: List[str] = Field(
        default_factory=lambda: list(DEFAULT_IGNORE_PATTERNS), alias="ignorePatterns"
    )
    analysis_focus: List[str] = Field(
        default_factory=lambda: ["architecture", "dependencies", "recent-changes"],
        alias="analysisFocus",
    )
    output_format: str = Field(default="markdown", alias="outputFormat")
    integrations: Integrations = Field(default_factory=Integrations)


class GlobalSettings(BaseSettings):
    """Process-wide settings read from the environment."""

    model_config = SettingsConfigDict(
        env_prefix="CODECONTEXT_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    anthropic_api_key: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("CODECONTEXT_ANTHROPIC_API_KEY", "ANTHROPIC_API_KEY"),
    )
    smart_model: str = Field(default="claude-3-5-haiku-latest", description="Model for smart mode")
    deep_model: str = Field(default="claude-sonnet-4-20250514", description="Model for deep mode")
    ai_timeout: float = Field(default=30.0, description="Seconds to wait for the AI service")
    git_timeout: float = Field(default=10.0, description="Seconds to wait for git")
    workers: int = Field(default=4, ge=1, description="Threads used per directory")
    update_delay: float = Field(default=2.0, description="Quiet period before watch refreshes")


class ConfigManager:
    """Loads and saves project configuration and owns the state directory."""

    def __init__(self, state_dir: Optional[Path] = None):
        self.state_dir = state_dir or Path(user_state_dir("codecontext", "codecontext"))
        self.settings = GlobalSettings()

    @property
    def log_file(self) -> Path:
        return self.state_dir / "codecontext.log"

    def ensure_state_dir(self) -> Path:
        self.state_dir.mkdir(parents=True, exist_ok=True)
        return self.state_dir

    @staticmethod
    def config_path(root: Path) -> Path:
        return root / CONFIG_FILENAME

    @staticmethod
    def find_project_root(start: Path) -> Path:
        """Return the nearest directory at or above start holding a config file."""
        start = start.resolve()
        for candidate in (start, *start.parents):
            if (candidate / CONFIG_FILENAME).is_file():
                return candidate
        raise ConfigNotFoundError(start)

    @staticmethod
    def default_config(mode: Mode = "smart") -> ProjectConfig:
        return ProjectConfig(mode=mode)

    def exists(self, root: Path) -> bool:
        return self.config_path(root).is_file()

    def load(self, root: Path) -> ProjectConfig:
        path = self.config_path(root)
        if not path.is_file():
            raise ConfigNotFoundError(root)
        return ProjectConfig.model_validate_json(path.read_text(encoding="utf-8"))

    def save(self, root: Path, config: ProjectConfig) -> Path:
        path = self.config_path(root)
        path.write_text(config.model_dump_json(by_alias=True, indent=2) + "\n", encoding="utf-8")
        return path
