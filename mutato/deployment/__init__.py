from .deployment_config import PipelineConfig

__all__ = ["PipelineConfig"]
