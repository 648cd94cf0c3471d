# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Domain services layer for StudyPilot.

Each domain module owns one slice of per-session learner state and the
service that reads and writes it.

Domains:
    knowledge: Mastery per (subject, topic), weak areas and resets.
    quiz: Append-only quiz ledger and its statistics.
    profile: Learner profile and session preferences.
    study_session: Timed study sessions.
    learner_context: Read-only snapshot over all of the above.
    chat: Chat log, single-turn responder and the message entry point.
"""
