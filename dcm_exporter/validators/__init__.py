# File: validators/__init__.py
# Purpose: Validators 模块初始化

__all__ = [
    'structure_checker',
]
