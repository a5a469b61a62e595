"""Warranty domain errors."""

from __future__ import annotations


class WarrantyError(Exception):
    """Base class for warranty lifecycle failures."""


class InvalidWarrantyInput(WarrantyError):
    """Missing or malformed user input; the caller should re-prompt."""


class WarrantyNotFound(WarrantyError):
    """No warranty record matches the given code, serial or id."""


class SellerNotFound(WarrantyError):
    """No seller profile exists for the given id."""


class AlreadyClaimed(WarrantyError):
    """The warranty already has a buyer attached."""


class NotWarrantyOwner(WarrantyError):
    """The acting user does not currently own the warranty."""


class DuplicateCode(WarrantyError):
    """The store already holds a record with this code."""


class StoreUnavailable(WarrantyError):
    """The document store rejected or failed a call."""


class CodeGenerationExhausted(WarrantyError):
    """Every generated code collided with an existing one."""
