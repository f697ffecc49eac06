"""Exception hierarchy for the transcription service."""


class KanaScribeError(Exception):
    """Base class for all service errors."""


class MissingParameterError(KanaScribeError):
    """Raised when a required request parameter is absent or blank."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Missing '{name}' query parameter.")


class ServiceInitError(KanaScribeError):
    """Raised when the shared model or analyzer cannot be loaded at startup."""


class PipelineError(KanaScribeError):
    """Raised when a stage of the request pipeline fails."""


class TranscodeError(PipelineError):
    """Raised when fetching or transcoding the source media fails."""

    def __init__(self, source_url: str, diagnostic: str):
        self.source_url = source_url
        self.diagnostic = diagnostic
        super().__init__(f"Conversion failed for '{source_url}': {diagnostic}")


class WaveFormatError(PipelineError):
    """Raised when a waveform header does not meet the recognizer contract."""


class RecognitionError(PipelineError):
    """Raised when the recognizer session fails while streaming or finalizing."""


class KanaConversionError(PipelineError):
    """Raised when the script analyzer fails to convert recognized text."""
