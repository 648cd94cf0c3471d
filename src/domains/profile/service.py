# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Profile service for learner profile and session preferences.

This module provides the ProfileService that handles:
- Reading and partially updating the learner profile
- Reading and partially updating session preferences (onboarding state)

Example:
    >>> service = ProfileService(db, session_id="abc")
    >>> profile = await service.update_profile(UserProfileUpdate(name="Ana"))
    >>> profile.missing_fields
    ['major', 'year', 'preferred_learning_methods']
"""

import logging
from enum import Enum
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.infrastructure.database.models import SessionPreferences, UserProfile
from src.models.profile import (
    ExamDepth,
    Goal,
    LearningMethod,
    SessionPreferencesResponse,
    SessionPreferencesUpdate,
    UserProfileResponse,
    UserProfileUpdate,
)
from src.models.quiz import QuizType
from src.utils.datetime import utc_now

logger = logging.getLogger(__name__)

# Enumerated preference fields and the values they accept
_PREFERENCE_ENUMS: dict[str, type[Enum]] = {
    "goal": Goal,
    "exam_depth": ExamDepth,
    "quiz_type": QuizType,
}


class ProfileServiceError(Exception):
    """Base exception for profile service errors."""

    pass


class InvalidPreferenceError(ProfileServiceError):
    """Raised when an enumerated profile or preference field has an unknown value."""

    pass


def _check_enum(field: str, value: str, enum_cls: type[Enum]) -> None:
    valid = [member.value for member in enum_cls]
    if value not in valid:
        raise InvalidPreferenceError(
            f"Invalid {field}: {value}. Must be one of: {', '.join(valid)}"
        )


class ProfileService:
    """Service for the profile and preferences of one session.

    Attributes:
        _db: Async database session.
        _session_id: Session whose rows are read and written.
    """

    def __init__(self, db: AsyncSession, session_id: str) -> None:
        self._db = db
        self._session_id = session_id

    async def get_profile(self) -> Optional[UserProfileResponse]:
        """Get the learner profile, or None if nothing was saved yet."""
        profile = await self._get_profile_row()
        return UserProfileResponse.model_validate(profile) if profile else None

    async def update_profile(self, update: UserProfileUpdate) -> UserProfileResponse:
        """Create or partially update the learner profile.

        Only fields carrying a value are written; last_active is always
        refreshed.

        Raises:
            InvalidPreferenceError: If a learning method is unknown.
                Nothing is written.
        """
        for method in update.preferred_learning_methods or []:
            _check_enum("learning method", method, LearningMethod)

        profile = await self._get_profile_row()
        if profile is None:
            profile = UserProfile(session_id=self._session_id)
            self._db.add(profile)

        for field, value in update.provided_fields().items():
            setattr(profile, field, value)
        profile.last_active = utc_now()

        await self._db.commit()
        await self._db.refresh(profile)

        logger.info(
            "Profile updated: session=%s, fields=%s",
            self._session_id,
            sorted(update.provided_fields()),
        )
        return UserProfileResponse.model_validate(profile)

    async def get_preferences(self) -> Optional[SessionPreferencesResponse]:
        """Get session preferences, or None if nothing was saved yet."""
        preferences = await self._get_preferences_row()
        return SessionPreferencesResponse.model_validate(preferences) if preferences else None

    async def update_preferences(
        self,
        update: SessionPreferencesUpdate,
    ) -> SessionPreferencesResponse:
        """Create or partially update session preferences.

        Raises:
            InvalidPreferenceError: If goal, exam_depth or quiz_type is not
                a known value. Nothing is written.
        """
        values = update.model_dump(exclude_none=True)
        for field, enum_cls in _PREFERENCE_ENUMS.items():
            if field in values:
                _check_enum(field, values[field], enum_cls)

        preferences = await self._get_preferences_row()
        if preferences is None:
            preferences = SessionPreferences(
                session_id=self._session_id,
                onboarding_complete=False,
            )
            self._db.add(preferences)

        for field, value in values.items():
            setattr(preferences, field, value)

        await self._db.commit()
        await self._db.refresh(preferences)

        logger.info(
            "Session preferences updated: session=%s, fields=%s",
            self._session_id,
            sorted(values),
        )
        return SessionPreferencesResponse.model_validate(preferences)

    async def _get_profile_row(self) -> Optional[UserProfile]:
        result = await self._db.execute(
            select(UserProfile).where(UserProfile.session_id == self._session_id)
        )
        return result.scalar_one_or_none()

    async def _get_preferences_row(self) -> Optional[SessionPreferences]:
        result = await self._db.execute(
            select(SessionPreferences).where(SessionPreferences.session_id == self._session_id)
        )
        return result.scalar_one_or_none()
