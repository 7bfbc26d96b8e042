"""Filled field validation."""

from formsense.validation.rules import is_valid_date, is_valid_email, is_valid_phone
from formsense.validation.validator import Validator

__all__ = ["Validator", "is_valid_date", "is_valid_email", "is_valid_phone"]
