# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Exception hierarchy shared by the store, the session layer and the routes."""

from __future__ import annotations


class VaultError(Exception):
    """Base class for application errors."""


class ConfigError(VaultError):
    pass


class StorageError(VaultError):
    """Any failure talking to the database."""


class ConstraintViolation(StorageError):
    """An insert or update was rejected by a database constraint."""


class SessionError(VaultError):
    """A session could not be created or destroyed."""
