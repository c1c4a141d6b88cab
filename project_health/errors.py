# Copyright (c) 2025 Bytedance Ltd. and/or its affiliates
# SPDX-License-Identifier: MIT

"""
Error types for the project health analyzer.

Input errors name the offending parameter, data-source errors describe the
failed read, and the pipeline wraps any data-source failure into a single
``ProjectHealthAnalysisError`` with a stable message prefix.
"""

from enum import Enum
from typing import Any, Dict, Optional

ANALYSIS_FAILED_PREFIX = "project health analysis failed: "


class ErrorCode(Enum):
    """Error codes for different types of errors"""
    VALIDATION_ERROR = "VAL_001"
    TIMEFRAME_ERROR = "VAL_002"
    DATA_SOURCE_ERROR = "SRC_001"
    AUTHENTICATION_ERROR = "SRC_002"
    NOT_FOUND_ERROR = "SRC_003"
    ANALYSIS_ERROR = "ANALYSIS_001"
    UNKNOWN_ERROR = "UNKNOWN_001"


class HealthAnalysisError(Exception):
    """Base exception for the project health analyzer"""

    def __init__(
        self,
        message: str,
        error_code: ErrorCode = ErrorCode.UNKNOWN_ERROR,
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary"""
        return {
            'error_code': self.error_code.value,
            'message': self.message,
            'details': self.details
        }


class InvalidParameterError(HealthAnalysisError):
    """A request parameter is missing or malformed"""

    def __init__(
        self,
        parameter: str,
        message: str,
        error_code: ErrorCode = ErrorCode.VALIDATION_ERROR,
        details: Optional[Dict[str, Any]] = None
    ):
        self.parameter = parameter
        details = {'parameter': parameter, **(details or {})}
        super().__init__(f"Invalid parameter '{parameter}': {message}", error_code, details)


class InvalidTimeframeError(InvalidParameterError):
    """Analysis timeframe does not end after it starts"""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__("timeframe", message, ErrorCode.TIMEFRAME_ERROR, details)


class DataSourceError(HealthAnalysisError):
    """Reading records or the team roster from the data source failed"""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        error_code: ErrorCode = ErrorCode.DATA_SOURCE_ERROR,
        details: Optional[Dict[str, Any]] = None
    ):
        self.status_code = status_code
        details = dict(details or {})
        if status_code is not None:
            details['status_code'] = status_code
        super().__init__(message, error_code, details)


class ProjectHealthAnalysisError(HealthAnalysisError):
    """The analysis pipeline was aborted by a failed data fetch"""

    def __init__(self, cause: Exception, stage: str = "fetch"):
        reason = str(cause) or cause.__class__.__name__
        details = {'stage': stage, 'cause': cause.__class__.__name__}
        if isinstance(cause, HealthAnalysisError):
            details['cause_code'] = cause.error_code.value
        super().__init__(f"{ANALYSIS_FAILED_PREFIX}{reason}", ErrorCode.ANALYSIS_ERROR, details)
