"""Exception hierarchy shared by the resolver, pipelines and providers."""

from __future__ import annotations

from typing import Any, Dict, Optional


class BilingualTranslationError(Exception):
    """Base error with an optional machine-readable code and details."""

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.details = details or {}


class DocumentReadError(BilingualTranslationError):
    """Source document could not be read or decoded."""


class TranslationError(BilingualTranslationError):
    """Translation engine failed to produce a result."""


class ConfigError(BilingualTranslationError):
    """Configuration value is missing or invalid."""
