from dataclasses import dataclass, field

from common.storage import default_data_dir

from .models import ConversionOptions


@dataclass
class ConversionServiceConfig:
    data_dir: str = field(default_factory=default_data_dir)
    output_prefix: str = "converted"
    options: ConversionOptions = field(default_factory=ConversionOptions)
