# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Authentication helpers.

This package provides:
- Password hashing/verification (argon2)
- Email/password authentication against the user table
- Signed session cookies (itsdangerous) backed by a revocable session registry
"""
