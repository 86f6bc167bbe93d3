from pathlib import Path

from codex_focus.core.exceptions import UnsupportedLanguageError

_LANGUAGE_ALIASES = {
    "c": "c",
    "h": "c",
    "go": "go",
    "golang": "go",
    "python": "python",
    "py": "python",
    "python3": "python",
}

_EXTENSION_LANGUAGE_MAP = {
    ".c": "c",
    ".h": "c",
    ".go": "go",
    ".py": "python",
    ".pyi": "python",
}

_SUPPORTED_LANGUAGES = {"c", "go", "python"}


def supported_languages() -> list[str]:
    return sorted(_SUPPORTED_LANGUAGES)


def normalize_language(language: str) -> str:
    normalized = language.strip().lower()
    resolved = _LANGUAGE_ALIASES.get(normalized, normalized)
    if resolved not in _SUPPORTED_LANGUAGES:
        raise UnsupportedLanguageError(f"Unsupported language '{language}'. Supported: {supported_languages()}")
    return resolved


def detect_language_from_path(file_path: Path) -> str:
    suffix = file_path.suffix.lower()
    if suffix in _EXTENSION_LANGUAGE_MAP:
        return _EXTENSION_LANGUAGE_MAP[suffix]
    raise UnsupportedLanguageError(f"Unsupported file extension: {suffix!r}")


def resolve_language(language: str | None, file_path: Path | None) -> str:
    if language:
        return normalize_language(language)
    if file_path:
        return detect_language_from_path(file_path)
    raise UnsupportedLanguageError("Language must be provided when no file path is available.")
