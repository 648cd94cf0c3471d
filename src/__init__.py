"""StudyPilot backend.

Study assistant chat engine that either answers a message directly or
breaks a learning request into steps executed by background workers,
tracking what the learner has studied along the way.

Copyright (C) 2025 Global Digital Labs (gdlabs.io)
SPDX-License-Identifier: LGPL-3.0-or-later
"""

__version__ = "0.1.0"
