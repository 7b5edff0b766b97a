class AnalysisValidationError(ValueError):
    """Input is missing something the selected mode needs; nothing was sent."""

class AnalysisInProgressError(Exception):
    """Another analysis request is still outstanding."""

class AnalysisFailedError(RuntimeError):
    """The inference call failed or returned an unusable result."""

class CaptureError(Exception):
    pass

class MicrophoneUnavailableError(CaptureError):
    pass

class UnsupportedMediaError(CaptureError):
    pass
