# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Core package for StudyPilot.

This package contains the core logic and shared building blocks:
- config: Application configuration and settings
- prompts: YAML prompt catalog
- intelligence: Inference client (LiteLLM)
- orchestration: Intent routing and the durable plan state machine
- tools: Tool base classes and registry
"""
