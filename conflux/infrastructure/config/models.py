"""
Retriever option models.

This module defines the options used to build a configuration retriever:
the ordered store list, the scan period and logging settings.
"""

from dataclasses import dataclass, field, asdict
from typing import Any, Dict, List, Optional


@dataclass
class StoreOptions:
    """Options of a single configuration store."""
    type: str = ""
    format: str = "json"
    config: Dict[str, Any] = field(default_factory=dict)
    optional: bool = False
    name: Optional[str] = None

    def __post_init__(self) -> None:
        if not self.type:
            raise ValueError("Store type must not be empty")
        if not self.format:
            raise ValueError(f"Store '{self.type}' must declare a format")
        if not isinstance(self.config, dict):
            raise ValueError(f"Store '{self.type}' config must be a mapping")

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'StoreOptions':
        """Create store options from a dictionary."""
        return cls(
            type=data.get('type', ''),
            format=data.get('format', 'json'),
            config=dict(data.get('config') or {}),
            optional=bool(data.get('optional', False)),
            name=data.get('name'),
        )


@dataclass
class LoggingConfig:
    """Logging configuration."""
    level: str = "INFO"
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    log_directory: str = "logs"
    max_file_size: str = "10MB"
    backup_count: int = 5
    console_enabled: bool = True
    file_enabled: bool = False


@dataclass
class RetrieverOptions:
    """Configuration retriever options."""

    # Seconds between scheduled scans; <= 0 means on-demand only
    scan_period: float = 5.0
    stores: List[StoreOptions] = field(default_factory=list)
    include_default_stores: bool = False
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    config_file_path: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate options after initialization."""
        if isinstance(self.scan_period, bool) or not isinstance(self.scan_period, (int, float)):
            raise ValueError(f"Scan period must be a number, got {self.scan_period!r}")

        if self.logging.level.upper() not in ('TRACE', 'DEBUG', 'INFO', 'SUCCESS',
                                              'WARNING', 'ERROR', 'CRITICAL'):
            raise ValueError(f"Invalid log level: {self.logging.level}")

    def to_dict(self) -> Dict[str, Any]:
        """Convert options to dictionary."""
        result = asdict(self)
        result.pop('config_file_path', None)
        return result

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'RetrieverOptions':
        """Create options from dictionary."""
        stores = [
            store if isinstance(store, StoreOptions) else StoreOptions.from_dict(store)
            for store in data.get('stores') or []
        ]
        logging_config = LoggingConfig(**(data.get('logging') or {}))

        return cls(
            scan_period=data.get('scan_period', 5.0),
            stores=stores,
            include_default_stores=bool(data.get('include_default_stores', False)),
            logging=logging_config,
            config_file_path=data.get('config_file_path'),
        )
