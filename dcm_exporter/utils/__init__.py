# File: utils/__init__.py
# Purpose: Utils 模块初始化

__all__ = [
    'logger',
]
