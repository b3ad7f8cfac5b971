from dataclasses import dataclass, field

from common.storage import default_data_dir


@dataclass
class ProtectionServiceConfig:
    data_dir: str = field(default_factory=default_data_dir)
    protected_prefix: str = "protected"
    unlocked_prefix: str = "unlocked"
