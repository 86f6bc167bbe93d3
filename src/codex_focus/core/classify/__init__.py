from codex_focus.core.classify.base import (
    NON_CODE_RANGE_KINDS,
    SCOPE_KINDS,
    Classification,
    LanguageClassifier,
    SignatureBuilder,
    TextProvider,
)
from codex_focus.core.classify.c import CClassifier
from codex_focus.core.classify.go import GoClassifier
from codex_focus.core.classify.python import PythonClassifier
from codex_focus.core.languages import normalize_language

_CLASSIFIERS: dict[str, type[LanguageClassifier]] = {
    "c": CClassifier,
    "go": GoClassifier,
    "python": PythonClassifier,
}


def get_classifier(language: str) -> LanguageClassifier:
    return _CLASSIFIERS[normalize_language(language)]()


__all__ = [
    "NON_CODE_RANGE_KINDS",
    "SCOPE_KINDS",
    "CClassifier",
    "Classification",
    "GoClassifier",
    "LanguageClassifier",
    "PythonClassifier",
    "SignatureBuilder",
    "TextProvider",
    "get_classifier",
]
