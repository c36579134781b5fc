"""核心模块包。

尺寸规划与单张图片转码。
"""

from .dimensions import DimensionPlanner, plan_dimensions, round_half_up
from .formats import FormatProcessor, get_save_parameters, probe_dimensions
from .transcoder import ImageTranscoder, process_item


__all__ = [
    "DimensionPlanner",
    "FormatProcessor",
    "ImageTranscoder",
    "get_save_parameters",
    "plan_dimensions",
    "probe_dimensions",
    "process_item",
    "round_half_up",
]
