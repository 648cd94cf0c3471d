# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Result combiner.

Merges the step answers of a finished plan into one document, infers a
(subject, topic) tag for the request and records it in the knowledge
store at a fixed mastery of 50.
"""

import json
import logging
import re
from dataclasses import dataclass
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError

from src.core.config.settings import PlanSettings, get_settings
from src.core.intelligence.llm import LLMClient, LLMError
from src.core.prompts import PromptCatalog, get_prompt_catalog
from src.domains.knowledge.scoring import PLAN_LEARNED_MASTERY
from src.domains.knowledge.service import KnowledgeService, KnowledgeServiceError
from src.infrastructure.database.connection import DatabaseError

logger = logging.getLogger(__name__)

HEURISTIC_SUBJECT = "General"
MIN_TOPIC_LENGTH = 2

_STEP_PREFIX = re.compile(r"^Step \d+:\s*", re.IGNORECASE)
_JSON_OBJECT = re.compile(r"\{[\s\S]*?\}")
_QUESTION_PREFIX = re.compile(
    r"^(explain|what is|what are|how does|how do|tell me about|teach me|describe|define"
    r"|help me understand)\s*",
    re.IGNORECASE,
)
_FILLER_SUFFIX = re.compile(
    r"\s*(work|works|in detail|fully|please|for me|to me|step by step).*$",
    re.IGNORECASE,
)
_TRAILING_QUESTION_MARKS = re.compile(r"\s*\?+$")


@dataclass(frozen=True)
class TopicTag:
    """Knowledge graph node a plan is filed under."""

    subject: str
    topic: str


def combine_sections(steps: list[str], results: list[str]) -> str:
    """Join step answers under their step headings, in plan order.

    A leading ``Step N:`` is dropped from each heading.
    """
    sections = [
        f"### {_STEP_PREFIX.sub('', step)}\n{result}"
        for step, result in zip(steps, results)
    ]
    return "\n\n".join(sections)


def parse_topic_reply(reply: str) -> Optional[TopicTag]:
    """Read the first JSON object of a topic inference reply.

    Returns:
        The tag when the object has non-blank string subject and topic.
    """
    match = _JSON_OBJECT.search(reply)
    if not match:
        return None
    try:
        parsed = json.loads(match.group(0))
    except json.JSONDecodeError:
        return None
    if not isinstance(parsed, dict):
        return None

    subject = parsed.get("subject")
    topic = parsed.get("topic")
    if not isinstance(subject, str) or not isinstance(topic, str):
        return None
    if not subject.strip() or not topic.strip():
        return None
    return TopicTag(subject=subject.strip(), topic=topic.strip())


def heuristic_topic(prompt: str) -> Optional[TopicTag]:
    """Derive a topic by stripping question phrasing from the prompt.

    Example:
        >>> heuristic_topic("Explain how binary search works?")
        TopicTag(subject='General', topic='how binary search')

    Returns:
        A tag under the General subject, or None when fewer than 2
        characters remain.
    """
    topic = _QUESTION_PREFIX.sub("", prompt)
    topic = _FILLER_SUFFIX.sub("", topic)
    topic = _TRAILING_QUESTION_MARKS.sub("", topic).strip()
    if len(topic) < MIN_TOPIC_LENGTH:
        return None
    return TopicTag(subject=HEURISTIC_SUBJECT, topic=topic)


class ResultCombiner:
    """Builds the final document of a plan and records what was learned."""

    def __init__(
        self,
        llm: LLMClient,
        prompts: Optional[PromptCatalog] = None,
        plan_settings: Optional[PlanSettings] = None,
    ) -> None:
        self._llm = llm
        self._prompts = prompts or get_prompt_catalog()
        self._limits = plan_settings or get_settings().plan

    async def infer_topic(self, prompt: str) -> Optional[TopicTag]:
        """Ask the model for a topic tag, falling back to the heuristic.

        Never raises.
        """
        prompts = self._prompts.orchestration.topic
        try:
            response = await self._llm.complete(
                prompt=PromptCatalog.render(
                    prompts.user_template,
                    prompt=prompt[: self._limits.topic_prompt_chars],
                ),
                system_prompt=PromptCatalog.render(prompts.system),
                temperature=0.0,
                max_tokens=self._limits.topic_max_tokens,
            )
        except LLMError as e:
            logger.warning("Topic inference failed, using heuristic: %s", e)
            return heuristic_topic(prompt)

        return parse_topic_reply(response.content) or heuristic_topic(prompt)

    async def combine(
        self,
        original_prompt: str,
        steps: list[str],
        results: list[str],
        knowledge: KnowledgeService,
    ) -> str:
        """Build the final document and record the learned topic.

        Args:
            original_prompt: The request the plan answered.
            steps: Step descriptions in plan order.
            results: Step answers in plan order.
            knowledge: Knowledge store of the session.

        Returns:
            The combined document with its footer.
        """
        document = combine_sections(steps, results)
        copy = self._prompts.orchestration.plan_copy

        tag = await self.infer_topic(original_prompt)
        if tag is not None and not await self._record(tag, len(steps), knowledge):
            tag = None

        if tag is None:
            return document + copy.explain_more

        footer = PromptCatalog.render(
            copy.tracking_added_template,
            subject=tag.subject,
            topic=tag.topic,
        )
        return document + footer + copy.what_next

    async def _record(self, tag: TopicTag, step_count: int, knowledge: KnowledgeService) -> bool:
        try:
            await knowledge.record_study(
                subject=tag.subject,
                topic=tag.topic,
                mastery=PLAN_LEARNED_MASTERY,
                mark_studied=True,
                notes=f"Learned via {step_count}-step explanation",
            )
        except (SQLAlchemyError, DatabaseError, KnowledgeServiceError) as e:
            logger.error("Failed to record learned topic %s > %s: %s", tag.subject, tag.topic, e)
            return False

        logger.info("Learned topic recorded: %s > %s", tag.subject, tag.topic)
        return True
