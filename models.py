"""
Pydantic Models

Configuration and measurement models for the running-fold (scan) operators.
"""

import logging
import os
from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ScanStepping(str, Enum):
    """Stepping policy used by lazy scan iterators"""
    IMMEDIATE = "immediate"
    LOOKAHEAD = "lookahead"


class ScanSettings(BaseModel):
    """Settings that control how lazy scans are iterated"""
    stepping: ScanStepping = Field(
        ScanStepping.IMMEDIATE,
        description="IMMEDIATE computes each value when it is requested; "
                    "LOOKAHEAD computes the following value one step early"
    )
    log_level: str = Field(
        "WARNING",
        description="Logging level name used by the demo entry point"
    )

    model_config = ConfigDict(frozen=True)

    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v):
        """Validate the level is one the logging module knows"""
        level = v.strip().upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Unknown log level: {v}")
        return level

    @classmethod
    def from_env(cls) -> "ScanSettings":
        """Build settings from SCAN_STEPPING / SCAN_LOG_LEVEL"""
        values = {}
        stepping = os.environ.get("SCAN_STEPPING")
        if stepping:
            values["stepping"] = stepping.strip().lower()
        log_level = os.environ.get("SCAN_LOG_LEVEL")
        if log_level:
            values["log_level"] = log_level
        return cls(**values)


class PerformanceMetric(BaseModel):
    """Timing and memory figures for one measured operation"""
    operation: str = Field(..., description="Operation name")
    execution_time_ms: float = Field(..., description="Wall time in milliseconds", ge=0)
    peak_memory_mb: float = Field(..., description="Peak traced allocation in MB", ge=0)
    rss_mb: float = Field(..., description="Process resident set size after the call in MB", ge=0)
    success: bool = Field(..., description="Whether the call returned normally")
    result_size: Optional[int] = Field(
        None,
        description="len() of the result when it has one",
        ge=0
    )
    error: Optional[str] = Field(None, description="Error message when the call raised")
    timestamp: datetime = Field(default_factory=datetime.now, description="Measurement timestamp")
