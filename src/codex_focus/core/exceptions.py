class FocusedCodeError(Exception):
    """Base class for errors raised while extracting focused code."""


class ParseFailure(FocusedCodeError):
    def __init__(self, language: str, reason: str) -> None:
        super().__init__(f"Could not parse {language} source: {reason}")
        self.language = language
        self.reason = reason


class UnsupportedLanguageError(FocusedCodeError, ValueError):
    pass
