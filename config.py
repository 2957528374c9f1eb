# Directory: config.py
"""
Configuration management for the application.
"""
from dataclasses import dataclass, field
from typing import Dict, Any, List


DEFAULT_SEED_WORKERS = ["Maria Lopez", "James Carter", "Aisha Khan"]

DEFAULT_SEED_TASKS = [
    {
        "description": "Deep clean office kitchen",
        "priority": "high",
        "time_estimate": 3,
        "days_until_deadline": 1,
    },
    {
        "description": "Vacuum conference rooms",
        "priority": "medium",
        "time_estimate": 2,
        "days_until_deadline": 2,
    },
    {
        "description": "Restock restroom supplies",
        "priority": "low",
        "time_estimate": 1,
        "days_until_deadline": 3,
    },
]


@dataclass
class CapacityConfig:
    """Configuration for worker capacity rules."""

    daily_hours: float = 8.0


@dataclass
class StorageConfig:
    """Configuration for the key-value persistence collaborator."""

    backend: str = "json"
    data_dir: str = "data"
    key: str = "worker_management_data"


@dataclass
class SeedConfig:
    """Defaults written to an empty store on first start."""

    workers: List[str] = field(default_factory=lambda: list(DEFAULT_SEED_WORKERS))
    tasks: List[Dict[str, Any]] = field(
        default_factory=lambda: [dict(t) for t in DEFAULT_SEED_TASKS]
    )


@dataclass
class AppConfig:
    """Main application configuration."""

    seed: int = 42
    log_level: str = "INFO"
    id_width: int = 3
    capacity: CapacityConfig = field(default_factory=CapacityConfig)
    storage: StorageConfig = field(default_factory=StorageConfig)
    seed_data: SeedConfig = field(default_factory=SeedConfig)

    @classmethod
    def from_dict(cls, config_dict: Dict[str, Any]) -> "AppConfig":
        """Create a configuration from a flat dictionary."""
        capacity_config = CapacityConfig(
            **{
                k.split("_", 1)[1].lower(): v
                for k, v in config_dict.items()
                if k.startswith("CAPACITY_")
            }
        )

        storage_config = StorageConfig(
            **{
                k.split("_", 1)[1].lower(): v
                for k, v in config_dict.items()
                if k.startswith("STORAGE_")
            }
        )

        seed_config = SeedConfig(
            workers=list(config_dict.get("SEED_WORKERS", DEFAULT_SEED_WORKERS)),
            tasks=[dict(t) for t in config_dict.get("SEED_TASKS", DEFAULT_SEED_TASKS)],
        )

        return cls(
            seed=config_dict.get("SEED", 42),
            log_level=config_dict.get("LOG_LEVEL", "INFO"),
            id_width=config_dict.get("ID_WIDTH", 3),
            capacity=capacity_config,
            storage=storage_config,
            seed_data=seed_config,
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to a flat dictionary."""
        result = {
            "SEED": self.seed,
            "LOG_LEVEL": self.log_level,
            "ID_WIDTH": self.id_width,
        }

        for key, value in vars(self.capacity).items():
            result[f"CAPACITY_{key.upper()}"] = value

        for key, value in vars(self.storage).items():
            result[f"STORAGE_{key.upper()}"] = value

        result["SEED_WORKERS"] = list(self.seed_data.workers)
        result["SEED_TASKS"] = [dict(t) for t in self.seed_data.tasks]

        return result
