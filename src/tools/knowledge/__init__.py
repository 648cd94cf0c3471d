# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Knowledge tools.

Tools for reading and writing mastery of (subject, topic) pairs:
- update_knowledge: Record study of a topic
- get_knowledge: List studied topics
- get_weak_areas: List topics that need review
- reset_progress: Clear learner data after confirmation
"""

from src.tools.knowledge.get_knowledge import GetKnowledgeTool
from src.tools.knowledge.get_weak_areas import GetWeakAreasTool
from src.tools.knowledge.reset_progress import ResetProgressTool
from src.tools.knowledge.update_knowledge import UpdateKnowledgeTool

__all__ = [
    "UpdateKnowledgeTool",
    "GetKnowledgeTool",
    "GetWeakAreasTool",
    "ResetProgressTool",
]
