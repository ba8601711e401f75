"""
Survey error types

Every error here is reported to the surveyor and never stops the session.
"""

PERMISSION_DENIED = 1
POSITION_UNAVAILABLE = 2
TIMEOUT = 3


class SurveyError(Exception):
    """Base class for survey errors"""


class LocationUnavailable(SurveyError):
    """Location provider could not produce a fix"""
    
    def __init__(self, code: int, message: str):
        super().__init__(f"Error {code}: {message}")
        self.code = code
        self.message = message


class LowAccuracy(SurveyError):
    """Fix is too inaccurate to be used"""
    
    def __init__(self, accuracy_m: float, threshold_m: float):
        super().__init__(f"Location accuracy {accuracy_m}m exceeds {threshold_m}m")
        self.accuracy_m = accuracy_m
        self.threshold_m = threshold_m


class FetchFailure(SurveyError):
    """Overpass query failed or returned an unusable document"""


class SubmissionFailure(SurveyError):
    """Note could not be published"""
