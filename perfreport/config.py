"""Configuration for building report aggregates."""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

import yaml

from perfreport.endpoint import EndpointAggregate
from perfreport.errors import ConfigError
from perfreport.logging_utils import configure_logging, load_env
from perfreport.parsers import ParserModeRegistry, ParserSpec
from perfreport.report import ReportAggregate

# Endpoint listings sort by these keys, largest first.
ENDPOINT_ORDERS: Dict[str, Callable[[EndpointAggregate], Any]] = {
    "average": EndpointAggregate.sort_key,
    "median": lambda e: (e.median_duration(), e.key),
    "p90": lambda e: (e.p90_duration(), e.key),
    "max": lambda e: (e.max_duration or 0, e.key),
    "error_rate": lambda e: (e.error_rate(), e.key),
    "sample_count": lambda e: (e.sample_count, e.key),
    "key": lambda e: e.key,
}


@dataclass
class EngineConfig:
    parsers: List[ParserSpec] = field(default_factory=list)
    endpoint_order: str = "average"
    log_level: str = "INFO"

    def __post_init__(self) -> None:
        if self.endpoint_order not in ENDPOINT_ORDERS:
            raise ConfigError(
                f"Unknown endpoint_order {self.endpoint_order!r}, expected one of {sorted(ENDPOINT_ORDERS)}"
            )

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "EngineConfig":
        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ConfigError(f"Configuration must be a mapping, got {type(data).__name__}")
        unknown = sorted(set(data) - {f.name for f in fields(cls)})
        if unknown:
            raise ConfigError(f"Unknown configuration keys: {', '.join(map(str, unknown))}")
        data = dict(data)
        parsers = []
        for entry in data.get("parsers") or []:
            if not isinstance(entry, dict) or "name" not in entry:
                raise ConfigError(f"Parser entry needs a 'name': {entry!r}")
            parsers.append(ParserSpec.from_dict(entry))
        data["parsers"] = parsers
        return cls(**data)

    @classmethod
    def from_yaml(cls, path: Path) -> "EngineConfig":
        return cls.from_dict(yaml.safe_load(path.read_text()))

    @classmethod
    def from_env(cls, env_file: str | None = None) -> "EngineConfig":
        """Read ``PERFREPORT_CONFIG`` (a YAML file) and per-field overrides."""
        load_env(env_file)
        config_path = os.getenv("PERFREPORT_CONFIG")
        config = cls.from_yaml(Path(config_path)) if config_path else cls()
        if os.getenv("PERFREPORT_ENDPOINT_ORDER"):
            config = replace(config, endpoint_order=os.environ["PERFREPORT_ENDPOINT_ORDER"])
        if os.getenv("PERFREPORT_LOG_LEVEL"):
            config.log_level = os.environ["PERFREPORT_LOG_LEVEL"]
        return config

    def parser_registry(self) -> ParserModeRegistry:
        return ParserModeRegistry(self.parsers)

    def new_report(self, report_identifier: str, log: Optional[logging.Logger] = None) -> ReportAggregate:
        return ReportAggregate(
            report_identifier,
            is_summarized=self.parser_registry(),
            endpoint_order=ENDPOINT_ORDERS[self.endpoint_order],
            log=log,
        )

    def configure_logging(self, output_dir: Optional[Path] = None) -> Optional[Path]:
        return configure_logging(self.log_level, output_dir)
