#!/usr/bin/env python3
"""
Config module for engine version handling.
"""

from .engine_config import BuildMode, EngineProfile, EngineConfig, ENGINE_PROFILES, get_engine_profile

__all__ = ['BuildMode', 'EngineProfile', 'EngineConfig', 'ENGINE_PROFILES', 'get_engine_profile']
