from .loader import load_config, load_config_with_overrides
from .schema import AnnotatorConfig, FragmentationConfig, SequencePolicy

__all__ = [
    "load_config",
    "load_config_with_overrides",
    "AnnotatorConfig",
    "FragmentationConfig",
    "SequencePolicy",
]
