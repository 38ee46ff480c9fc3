# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

"""secretvault: register, log in and keep private notes."""

__version__ = "0.1.0"
