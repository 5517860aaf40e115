"""
Configuration module for the finance engine.
"""
from .settings import (
    FinanceEngineConfig,
    get_config,
    load_config,
    reload_config
)

__all__ = [
    'FinanceEngineConfig',
    'get_config',
    'load_config',
    'reload_config'
]
