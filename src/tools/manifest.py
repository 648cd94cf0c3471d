# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Central tool manifest.

This is the single list of tools the single-turn responder can offer to
the model. The description the model sees lives in
config/prompts/tools.yaml under the same name; the description here is
for developers.

To add a new tool:
1. Create the tool class in the matching category folder (e.g., src/tools/quiz/)
2. Add an entry to TOOL_MANIFEST below
3. Add its model-facing description to config/prompts/tools.yaml
"""

from typing import TypedDict


class ToolInfo(TypedDict):
    """Information about a registered tool."""

    class_path: str  # module.path:ClassName
    category: str  # general, learner, knowledge, quiz, study
    description: str


TOOL_MANIFEST: dict[str, ToolInfo] = {
    # =========================================================================
    # GENERAL
    # =========================================================================
    "answer_general_question": {
        "class_path": "src.tools.general.answer_general_question:AnswerGeneralQuestionTool",
        "category": "general",
        "description": "Answers off-topic questions with a separate completion.",
    },
    # =========================================================================
    # LEARNER
    # Profile, preferences and the onboarding flow
    # =========================================================================
    "get_user_context": {
        "class_path": "src.tools.learner.get_user_context:GetUserContextTool",
        "category": "learner",
        "description": "Readable summary of profile, knowledge, quizzes and stats.",
    },
    "update_user_profile": {
        "class_path": "src.tools.learner.update_user_profile:UpdateUserProfileTool",
        "category": "learner",
        "description": "Saves profile fields and names the next onboarding question.",
    },
    "update_session_preferences": {
        "class_path": "src.tools.learner.update_session_preferences:UpdateSessionPreferencesTool",
        "category": "learner",
        "description": "Saves session goal and choices and names the next question.",
    },
    # =========================================================================
    # KNOWLEDGE
    # =========================================================================
    "update_knowledge": {
        "class_path": "src.tools.knowledge.update_knowledge:UpdateKnowledgeTool",
        "category": "knowledge",
        "description": "Counts a study of (subject, topic) and sets mastery/confidence.",
    },
    "get_knowledge": {
        "class_path": "src.tools.knowledge.get_knowledge:GetKnowledgeTool",
        "category": "knowledge",
        "description": "Lists knowledge entries, optionally for one subject.",
    },
    "get_weak_areas": {
        "class_path": "src.tools.knowledge.get_weak_areas:GetWeakAreasTool",
        "category": "knowledge",
        "description": "Lists entries below the weak thresholds, weakest first.",
    },
    "reset_progress": {
        "class_path": "src.tools.knowledge.reset_progress:ResetProgressTool",
        "category": "knowledge",
        "description": "Deletes learner data of a scope after explicit confirmation.",
    },
    # =========================================================================
    # QUIZ
    # =========================================================================
    "record_quiz_result": {
        "class_path": "src.tools.quiz.record_quiz_result:RecordQuizResultTool",
        "category": "quiz",
        "description": "Appends a quiz to the ledger and updates topic mastery.",
    },
    "get_quiz_history": {
        "class_path": "src.tools.quiz.get_quiz_history:GetQuizHistoryTool",
        "category": "quiz",
        "description": "Lists recent quiz results, newest first.",
    },
    # =========================================================================
    # STUDY
    # =========================================================================
    "start_study_session": {
        "class_path": "src.tools.study.start_study_session:StartStudySessionTool",
        "category": "study",
        "description": "Opens a study session and returns its id.",
    },
    "end_study_session": {
        "class_path": "src.tools.study.end_study_session:EndStudySessionTool",
        "category": "study",
        "description": "Closes a study session with its duration and summary.",
    },
}


def get_available_tool_names() -> list[str]:
    """Get the names of all tools, in manifest order."""
    return list(TOOL_MANIFEST.keys())


def get_tool_info(tool_name: str) -> ToolInfo | None:
    """Get the manifest entry of a tool, or None if unknown."""
    return TOOL_MANIFEST.get(tool_name)


def get_tools_by_category(category: str) -> list[str]:
    """Get all tool names in a category.

    Args:
        category: general, learner, knowledge, quiz or study.

    Returns:
        Tool names in that category, in manifest order.
    """
    return [
        name
        for name, info in TOOL_MANIFEST.items()
        if info["category"] == category
    ]
