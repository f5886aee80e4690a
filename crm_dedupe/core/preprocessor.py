"""Normalization and domain extraction for duplicate detection."""

from typing import Any, Dict, Type
from abc import ABC, abstractmethod
from functools import lru_cache
import pandas as pd
import regex as re

_DISALLOWED_CHARS = re.compile(r'[^a-z0-9\s]')
_WHITESPACE_RUN = re.compile(r'\s+')
# Scheme and "www." residue once normalization has dropped ':', '/' and '.'
_RESIDUAL_URL_PREFIX = re.compile(r'^(?:https?)?(?:www)?')

def is_absent(value: Any) -> bool:
    """Check if a field value is missing: None, empty string or a pandas NA."""
    if value is None:
        return True
    if isinstance(value, str):
        return value == ''
    return pd.api.types.is_scalar(value) and bool(pd.isna(value))

@lru_cache(maxsize=10000)
def _normalize_text(text: str) -> str:
    text = text.lower().strip()
    text = _DISALLOWED_CHARS.sub('', text)
    return _WHITESPACE_RUN.sub(' ', text).strip()

def normalize(value: Any) -> str:
    """
    Normalize a value for comparison.

    Lowercases, trims, drops every character outside ``[a-z0-9\\s]`` and
    collapses whitespace. Missing values normalize to ``''``.

    Args:
        value: Raw field value

    Returns:
        str: Normalized string
    """
    if is_absent(value):
        return ''
    return _normalize_text(str(value))

def email_domain(value: Any) -> str:
    """Return the lowercased part of an email address after the first '@'."""
    if is_absent(value):
        return ''
    _, separator, domain = str(value).lower().partition('@')
    return domain if separator else ''

def web_domain(value: Any) -> str:
    """Return a normalized website with any leading scheme and 'www' removed."""
    text = normalize(value)
    if not text:
        return ''
    return _RESIDUAL_URL_PREFIX.sub('', text, count=1)

class BasePreprocessor(ABC):
    """Base class for field preprocessors used by domain rules."""

    @abstractmethod
    def process(self, value: Any) -> str:
        """Process a value into a comparable string."""
        pass

class EmailDomainPreprocessor(BasePreprocessor):
    """Extracts the domain of an email address."""

    def process(self, value: Any) -> str:
        return email_domain(value)

class WebDomainPreprocessor(BasePreprocessor):
    """Extracts a comparable domain from a website URL."""

    def process(self, value: Any) -> str:
        return web_domain(value)

class PreprocessorRegistry:
    """Registry for preprocessor types and instances."""

    def __init__(self):
        self._preprocessors: Dict[str, Type[BasePreprocessor]] = {}
        self._register_defaults()

    def _register_defaults(self) -> None:
        """Register default preprocessors."""
        self.register('email_domain', EmailDomainPreprocessor)
        self.register('web_domain', WebDomainPreprocessor)

    def register(self, name: str, preprocessor_class: Type[BasePreprocessor]) -> None:
        """
        Register a new preprocessor type.

        Args:
            name: Name to register the preprocessor under
            preprocessor_class: Preprocessor class to register
        """
        self._preprocessors[name] = preprocessor_class

    def create(self, name: str) -> BasePreprocessor:
        """
        Create a preprocessor instance.

        Args:
            name: Name of the preprocessor type

        Returns:
            BasePreprocessor: Preprocessor instance

        Raises:
            ValueError: If preprocessor type not found
        """
        preprocessor_class = self._preprocessors.get(name)
        if not preprocessor_class:
            raise ValueError(f"Unknown preprocessor type: {name}")

        return preprocessor_class()

# Global registry instance
registry = PreprocessorRegistry()
