from dataclasses import dataclass, field

from common.storage import default_data_dir


@dataclass
class AssemblyServiceConfig:
    data_dir: str = field(default_factory=default_data_dir)
    merged_prefix: str = "merged"
    split_prefix: str = "split"
    compressed_prefix: str = "compressed"
    images_prefix: str = "converted"
