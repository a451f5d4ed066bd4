"""
错误模型模块

提供均匀替换错误模拟
"""

from .base import BaseErrorModel, IdentityErrorModel
from .uniform import UniformErrorModel, inject_errors, inject_errors_counted


def get_error_model(name: str, **kwargs) -> BaseErrorModel:
    """
    根据名称获取错误模型

    Args:
        name: 模型名称 (identity, uniform)
        **kwargs: 传递给模型的参数

    Returns:
        错误模型实例
    """
    models = {
        "identity": IdentityErrorModel,
        "uniform": UniformErrorModel,
    }

    if name not in models:
        raise ValueError(f"Unknown error model: {name}. Available: {list(models.keys())}")

    return models[name](**kwargs)


__all__ = [
    'BaseErrorModel',
    'IdentityErrorModel',
    'UniformErrorModel',
    'inject_errors',
    'inject_errors_counted',
    'get_error_model'
]
