# File: go_dao_generator/config_validation.py
from argparse import Namespace
import logging
import re
from typing import List, Optional, Dict, Any
import yaml
from pathlib import Path

from psycopg2.extensions import make_dsn
from pydantic import (
    AliasChoices,
    BaseModel,
    Field,
    ValidationError,
    field_validator,
    ConfigDict,
)

from go_dao_generator.constants import DefaultConfig, GO_KEYWORDS
from go_dao_generator.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

GO_PACKAGE_NAME = re.compile(r"^[a-z_][a-z0-9_]*$")


# --- Helper Functions for Validation ---


def is_valid_go_package_name(name: str) -> bool:
    """Check if a string is a lower-case Go package name and not a keyword."""
    return bool(GO_PACKAGE_NAME.match(name)) and name not in GO_KEYWORDS


# --- Pydantic Models for Configuration Schema ---
class DatabaseSettings(BaseModel):
    """Connection settings for the PostgreSQL catalog to introspect."""

    host: str = Field(default="localhost", min_length=1, description="Database host address.")
    port: Optional[int] = Field(default=DefaultConfig.PORT, description="Database port number.")
    user: Optional[str] = Field(default=None, description="Database user.")
    password: Optional[str] = Field(default=None, description="Database password.")
    dbname: str = Field(
        ...,
        min_length=1,
        validation_alias=AliasChoices("dbname", "db", "name"),
        description="Database name.",
    )
    sslmode: str = Field(default=DefaultConfig.SSLMODE, description="libpq sslmode.")
    connect_timeout: Optional[int] = Field(
        default=10, ge=0, description="Connection timeout in seconds."
    )

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    @field_validator("port", mode="before")
    @classmethod
    def validate_port(cls, v: Any) -> Optional[int]:
        """Ensure port is a number or string representation of one, and within range."""
        if v is None or v == "":
            return None
        port_num: Optional[int] = None
        if isinstance(v, bool):
            raise ValueError("Port must be an integer, got bool")
        if isinstance(v, int):
            port_num = v
        elif isinstance(v, str):
            if not v.isdigit():
                raise ValueError(
                    f"Port must be a number or string containing only digits, got '{v}'"
                )
            port_num = int(v)
        else:
            raise ValueError(
                f"Port must be an integer or string containing digits, got {type(v).__name__}"
            )

        if not 0 <= port_num <= 65535:
            raise ValueError(f"Port must be between 0 and 65535, got {port_num}")
        return port_num

    @field_validator("sslmode")
    @classmethod
    def validate_sslmode(cls, v: str) -> str:
        allowed = ["disable", "allow", "prefer", "require", "verify-ca", "verify-full"]
        if v not in allowed:
            raise ValueError(f"sslmode '{v}' is not one of: {', '.join(allowed)}")
        return v

    def dsn(self) -> str:
        """libpq keyword/value connection string."""
        params = {
            "host": self.host,
            "port": self.port,
            "user": self.user,
            "password": self.password,
            "dbname": self.dbname,
            "sslmode": self.sslmode,
            "connect_timeout": self.connect_timeout,
        }
        return make_dsn(**{k: v for k, v in params.items() if v is not None})


class ToolConfigSchema(BaseModel):
    """Pydantic schema defining the expected structure and types for the configuration."""

    database: DatabaseSettings = Field(
        ..., description="Connection settings of the database to introspect."
    )
    output_dir: str = Field(
        DefaultConfig.OUTPUT_DIR,
        min_length=1,
        description="Directory the generated Go files are written to.",
    )
    log_file: str = Field(
        DefaultConfig.LOG_FILE,
        min_length=1,
        description="Progress log file, recreated on every run.",
    )
    package_name: str = Field(
        DefaultConfig.PACKAGE_NAME,
        min_length=1,
        description="Go package declared by every generated file.",
    )
    include_tables: Optional[List[str]] = Field(
        default=None,
        description="Optional list of specific table names (strings) to include.",
    )
    exclude_tables: Optional[List[str]] = Field(
        default=None, description="Optional list of table names (strings) to exclude."
    )

    @field_validator("package_name")
    @classmethod
    def check_package_name(cls, v: str) -> str:
        if not is_valid_go_package_name(v):
            raise ValueError(f"'{v}' is not a valid Go package name or is a reserved keyword.")
        return v

    @field_validator("include_tables", "exclude_tables", mode="before")
    @classmethod
    def check_table_names_list(cls, v: Optional[List[Any]]) -> Optional[List[str]]:
        """Ensure items in table lists are non-empty strings."""
        if v is None:
            return None
        if not isinstance(v, list):
            raise ValueError("include_tables/exclude_tables must be a list.")
        processed_list = []
        for index, item in enumerate(v):
            if not isinstance(item, str):
                raise ValueError(
                    f"Item at index {index} must be a string, found: {type(item).__name__}"
                )
            stripped_item = item.strip()
            if not stripped_item:
                raise ValueError(
                    f"Item at index {index} cannot be empty or just whitespace."
                )
            processed_list.append(stripped_item)
        return processed_list

    model_config = ConfigDict(extra="ignore")


# --- Validation Function ---
def validate_and_parse_config(
    config_dict: Dict[str, Any], config_file: Optional[str] = None
) -> ToolConfigSchema:
    """
    Validates a raw configuration dictionary against the ToolConfigSchema.
    Raises ConfigurationError listing every validation problem.
    """
    try:
        validated_config = ToolConfigSchema.model_validate(config_dict)
    except ValidationError as e:
        problems = []
        for error in e.errors():
            loc_parts = [str(loc_item) for loc_item in error.get("loc", ())]
            loc_str = " -> ".join(loc_parts) if loc_parts else "Model Level"
            problems.append(f"{loc_str}: {error.get('msg', 'Unknown validation error')}")
        raise ConfigurationError(
            "Configuration validation failed: " + "; ".join(problems),
            config_file=config_file,
            context={"errors": len(problems)},
        ) from e
    logger.debug("Configuration dictionary parsed and validated successfully against schema.")
    return validated_config


def load_config(config_path: Optional[str], cli_args: Namespace) -> ToolConfigSchema:
    """
    Loads configuration from a YAML (or JSON) file, merges with CLI arguments,
    validates the result, and returns a validated Pydantic model instance.
    """
    raw_config: Dict[str, Any] = {}

    # 1. Load from the config file; unlike the optional CLI overrides it is mandatory
    if not config_path:
        raise ConfigurationError("No configuration file given (use -c/--config).")
    config_file = Path(config_path)
    if not config_file.is_file():
        raise ConfigurationError(
            f"Can not read config file: {config_path}", config_file=config_path
        )
    try:
        with open(config_file, "r", encoding="utf-8") as f:
            file_config = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigurationError(
            f"Can not parse config file: {e}", config_file=config_path
        ) from e
    except OSError as e:
        raise ConfigurationError(
            f"Can not read config file: {e}", config_file=config_path
        ) from e

    if not isinstance(file_config, dict):
        raise ConfigurationError(
            "Config file content must be a mapping.", config_file=config_path
        )
    raw_config.update(file_config)
    logger.debug(f"Loaded configuration from {config_path}")

    # Flat JSON layout: connection keys at the top level, "db" naming the database
    if "database" not in raw_config and any(k in raw_config for k in ("db", "dbname")):
        raw_config["database"] = {
            k: raw_config.pop(k)
            for k in list(raw_config)
            if k in DatabaseSettings.model_fields or k in ("db", "name")
        }

    # 2. Override with CLI arguments (only those explicitly provided)
    overridden_keys = set()
    for key, value in vars(cli_args).items():
        if value is not None and key in ToolConfigSchema.model_fields and key != "database":
            raw_config[key] = value
            overridden_keys.add(key)
    if overridden_keys:
        logger.debug(f"Overridden config keys from CLI arguments: {overridden_keys}")

    # 3. Validate
    validated_config = validate_and_parse_config(raw_config, config_file=config_path)

    # 4. Post-validation adjustments
    validated_config.output_dir = str(Path(validated_config.output_dir).resolve())

    logger.debug("Configuration loaded and validated successfully.")
    return validated_config
