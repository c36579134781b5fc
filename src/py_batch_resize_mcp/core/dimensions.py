"""尺寸规划模块。

根据原始尺寸、目标框和宽高比策略计算输出尺寸。纯函数，无副作用。
"""

import math
from fractions import Fraction

from ..exceptions import ValidationError
from ..models.resize_request import PlannedDimensions, ResizeRequest


def round_half_up(value: Fraction) -> int:
    """四舍五入（0.5 向上），结果至少为 1"""
    return max(1, math.floor(value + Fraction(1, 2)))


class DimensionPlanner:
    """输出尺寸规划器

    使用有理数计算宽高比，比较和取整都不受浮点误差影响。
    """

    def plan(
        self, original_width: int, original_height: int, request: ResizeRequest
    ) -> PlannedDimensions:
        """计算单张图片的输出尺寸

        Args:
            original_width: 原始宽度
            original_height: 原始高度
            request: 缩放请求

        Returns:
            PlannedDimensions: 取整后的输出尺寸

        Raises:
            ValidationError: 原始尺寸不是正数时
        """
        if original_width <= 0 or original_height <= 0:
            raise ValidationError(
                f"原始尺寸必须为正数，得到: {original_width}x{original_height}"
            )

        if not request.preserve_aspect_ratio:
            # 直接使用目标框，丢弃原始宽高比
            return PlannedDimensions(
                width=request.target_width, height=request.target_height
            )

        original_ratio = Fraction(original_width, original_height)
        target_ratio = Fraction(request.target_width, request.target_height)

        if original_ratio > target_ratio:
            # 原图相对更宽：宽度贴合
            width = Fraction(request.target_width)
            height = width / original_ratio
        else:
            height = Fraction(request.target_height)
            width = height * original_ratio

        return PlannedDimensions(width=round_half_up(width), height=round_half_up(height))


_default_planner = DimensionPlanner()


def plan_dimensions(
    original_width: int, original_height: int, request: ResizeRequest
) -> PlannedDimensions:
    """便捷的尺寸规划函数"""
    return _default_planner.plan(original_width, original_height, request)
