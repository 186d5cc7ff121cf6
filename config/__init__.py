from .settings import BotConfig, PipelineConfig, pipeline_config_from_dict

__all__ = ["BotConfig", "PipelineConfig", "pipeline_config_from_dict"]
