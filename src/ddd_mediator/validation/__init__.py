"""Validation primitives."""

from __future__ import annotations

from .result import ValidationResult

__all__ = ["ValidationResult"]
