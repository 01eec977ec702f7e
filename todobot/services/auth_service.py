"""Password login and session checks."""

from __future__ import annotations

import logging
from datetime import datetime, timedelta

from todobot.domain import NotFoundError, ServiceError, Session, User
from todobot.repositories import SessionRepository, UserRepository

logger = logging.getLogger(__name__)


class AuthService:
    """Logs chat users in with a shared password and tracks their sessions."""

    def __init__(
        self,
        user_repository: UserRepository,
        session_repository: SessionRepository,
        password: str,
        session_timeout: timedelta,
    ) -> None:
        self._users = user_repository
        self._sessions = session_repository
        self._password = password
        self._session_timeout = session_timeout

    def login(
        self,
        telegram_id: int,
        username: str,
        first_name: str,
        last_name: str,
        password: str,
    ) -> User:
        """Check the password, create or refresh the user and open a session."""
        if password != self._password:
            logger.warning("invalid password attempt, telegram_id=%s", telegram_id)
            raise ServiceError("неверный пароль")

        try:
            user = self._users.get_by_telegram_id(telegram_id)
        except NotFoundError:
            user = User(
                telegram_id=telegram_id,
                username=username,
                first_name=first_name,
                last_name=last_name,
                is_active=True,
            )
            try:
                self._users.create(user)
            except Exception as exc:
                logger.error("failed to create user: %s", exc)
                raise ServiceError("не удалось создать пользователя") from exc
            logger.info("new user created, telegram_id=%s", telegram_id)
        except Exception as exc:
            logger.error("failed to get user: %s", exc)
            raise ServiceError("ошибка получения пользователя") from exc
        else:
            user.username = username
            user.first_name = first_name
            user.last_name = last_name
            user.last_login_at = datetime.now()
            try:
                self._users.update(user)
            except Exception as exc:
                logger.error("failed to update user: %s", exc)

        session = Session(
            user_id=user.id,
            telegram_id=telegram_id,
            is_active=True,
            expires_at=datetime.now() + self._session_timeout,
        )
        try:
            self._sessions.create(session)
        except Exception as exc:
            logger.error("failed to create session: %s", exc)
            raise ServiceError("ошибка создания сессии") from exc

        logger.info("user logged in, user_id=%s telegram_id=%s", user.id, telegram_id)
        return user

    def is_authenticated(self, telegram_id: int) -> User:
        """Return the user if they hold a valid session, else raise ServiceError."""
        try:
            session = self._sessions.get_by_telegram_id(telegram_id)
        except Exception as exc:
            raise ServiceError("сессия не найдена") from exc

        if not session.is_valid():
            logger.info("invalid session, telegram_id=%s", telegram_id)
            raise ServiceError("сессия истекла или недействительна")

        try:
            user = self._users.get_by_telegram_id(telegram_id)
        except Exception as exc:
            logger.error("failed to get user: %s", exc)
            raise ServiceError("пользователь не найден") from exc

        if not user.is_active:
            raise ServiceError("пользователь неактивен")
        return user

    def logout(self, telegram_id: int) -> None:
        try:
            self._sessions.delete(telegram_id)
        except Exception as exc:
            logger.error("failed to delete session: %s", exc)
            raise ServiceError("ошибка выхода из системы") from exc
        logger.info("user logged out, telegram_id=%s", telegram_id)

    def cleanup_expired_sessions(self) -> None:
        try:
            self._sessions.cleanup_expired()
        except Exception:
            logger.exception("failed to cleanup expired sessions")
            raise
        logger.info("expired sessions cleaned up")