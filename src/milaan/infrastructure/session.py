"""SessionStore — the explicitly owned state container for one session.

The SessionStore is the single dependency injected into every service.
It owns the user directory, the problem and comment collections, the
notification inbox, the ID counters, and the current-identity slot.
It is created at session start and discarded with :meth:`close`.

The :meth:`transaction` context manager makes each operation atomic:
the collections are snapshotted on entry and restored if the body
raises, so callers never observe a partial update. Entities are frozen
models, so a snapshot is a shallow copy of the containers.
"""

from __future__ import annotations

import json
import logging
from contextlib import contextmanager
from dataclasses import dataclass
from typing import TYPE_CHECKING

from pydantic import ValidationError

from milaan.domain.ids import TYPE_PREFIXES
from milaan.domain.models import Comment, Notification, Problem, User
from milaan.infrastructure import seed
from milaan.infrastructure.counters import IdCounters
from milaan.infrastructure.storage import IDENTITY_KEY, LocalStorage

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator

    from milaan.config.settings import MilaanSettings
    from milaan.plugins.manager import PluginManager

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class _Snapshot:
    users: dict[str, User]
    problems: list[Problem]
    comments: list[Comment]
    notifications: list[Notification]
    current_user: User | None
    counters: dict[str, int]


class SessionStore:
    """In-memory collections for one session, plus the persisted identity slot.

    Parameters:
        settings: Resolved settings for this session.
        storage: Key-value slot for the current identity. Defaults to
            ``<root>/<session.state_dir>``; pass ``persist_identity=False``
            to keep the identity in memory only.
    """

    def __init__(
        self,
        settings: MilaanSettings,
        *,
        storage: LocalStorage | None = None,
        persist_identity: bool = True,
    ) -> None:
        self._settings = settings
        self._users: dict[str, User] = {}
        self._problems: list[Problem] = []
        self._comments: list[Comment] = []
        self._notifications: list[Notification] = []
        self._current_user: User | None = None
        self._counters = IdCounters()
        self._txn_depth = 0
        self._identity_dirty = False
        self._plugin_manager: PluginManager | None = None

        if storage is None and persist_identity:
            storage = LocalStorage(settings.root / settings.session.state_dir)
        self._storage = storage

        if settings.session.seed_demo_data:
            self.load(
                users=seed.demo_users(),
                problems=seed.demo_problems(),
                comments=seed.demo_comments(),
            )
        self._restore_identity()

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    @property
    def settings(self) -> MilaanSettings:
        return self._settings

    @property
    def storage(self) -> LocalStorage | None:
        return self._storage

    @property
    def plugin_manager(self) -> PluginManager | None:
        """Loaded plugin manager, or None if plugins were never initialized."""
        return self._plugin_manager

    def init_plugins(self) -> None:
        """Load entry-point plugins and register the built-in ones."""
        from milaan.plugins.builtins.notifications import NotificationPlugin
        from milaan.plugins.manager import PluginManager

        pm = PluginManager()
        pm.discover_and_load()
        if self._settings.notifications.enabled:
            pm.register_plugin(NotificationPlugin(self), name="milaan-notifications")
        self._plugin_manager = pm

    def load(
        self,
        *,
        users: Iterable[User] = (),
        problems: Iterable[Problem] = (),
        comments: Iterable[Comment] = (),
    ) -> None:
        """Bulk-load records (seeding, fixtures).

        Problems are appended in the given order. Each loaded problem's
        ``comment_count`` is recomputed from the comments now in the store.
        """
        for user in users:
            self._users[user.id] = user
            self._counters.observe(user.id, TYPE_PREFIXES["user"])
        for comment in comments:
            self._comments.append(comment)
            self._counters.observe(comment.id, TYPE_PREFIXES["comment"])
        loaded = list(problems)
        for problem in loaded:
            self._counters.observe(problem.id, TYPE_PREFIXES["problem"])
        self._problems.extend(
            p.model_copy(update={"comment_count": len(self.comments_for(p.id))}) for p in loaded
        )

    def close(self) -> None:
        """Discard all session state. The persisted identity is left alone."""
        self._users.clear()
        self._problems.clear()
        self._comments.clear()
        self._notifications.clear()
        self._current_user = None
        self._plugin_manager = None

    # ------------------------------------------------------------------
    # Transactions
    # ------------------------------------------------------------------

    @contextmanager
    def transaction(self) -> Iterator[SessionStore]:
        """Run a block atomically against the session state.

        Nested transactions join the outermost one. The identity slot is
        written only once the outermost transaction commits.
        """
        if self._txn_depth:
            self._txn_depth += 1
            try:
                yield self
            finally:
                self._txn_depth -= 1
            return

        snapshot = self._snapshot()
        self._txn_depth = 1
        try:
            yield self
        except BaseException:
            self._restore(snapshot)
            self._identity_dirty = False
            logger.debug("Session transaction rolled back")
            raise
        finally:
            self._txn_depth = 0

        if self._identity_dirty:
            self._identity_dirty = False
            self._persist_identity()

    def _snapshot(self) -> _Snapshot:
        return _Snapshot(
            users=dict(self._users),
            problems=list(self._problems),
            comments=list(self._comments),
            notifications=list(self._notifications),
            current_user=self._current_user,
            counters=self._counters.snapshot(),
        )

    def _restore(self, snapshot: _Snapshot) -> None:
        self._users = dict(snapshot.users)
        self._problems = list(snapshot.problems)
        self._comments = list(snapshot.comments)
        self._notifications = list(snapshot.notifications)
        self._current_user = snapshot.current_user
        self._counters.restore(snapshot.counters)

    # ------------------------------------------------------------------
    # IDs
    # ------------------------------------------------------------------

    def next_id(self, entity_type: str) -> str:
        """Claim the next ID for *entity_type* (``"problem"``, ``"comment"``, ...)."""
        return self._counters.next_id(TYPE_PREFIXES[entity_type])

    # ------------------------------------------------------------------
    # Users
    # ------------------------------------------------------------------

    def get_user(self, user_id: str) -> User | None:
        return self._users.get(user_id)

    def find_user_by_email(self, email: str) -> User | None:
        """First user whose email matches *email* (case-insensitive)."""
        needle = email.strip().lower()
        for user in self._users.values():
            if user.email.lower() == needle:
                return user
        return None

    def list_users(self) -> list[User]:
        return list(self._users.values())

    def put_user(self, user: User) -> None:
        """Insert or replace a directory record.

        Keeps the current identity in step when it is the same user.
        """
        self._users[user.id] = user
        if self._current_user is not None and self._current_user.id == user.id:
            self.set_current_user(user)

    # ------------------------------------------------------------------
    # Problems
    # ------------------------------------------------------------------

    def get_problem(self, problem_id: str) -> Problem | None:
        for problem in self._problems:
            if problem.id == problem_id:
                return problem
        return None

    def list_problems(self) -> list[Problem]:
        """All problems, most recent first."""
        return list(self._problems)

    def insert_problem(self, problem: Problem) -> None:
        """Prepend a new problem (the collection is most-recent-first)."""
        self._problems.insert(0, problem)

    def put_problem(self, problem: Problem) -> None:
        """Replace a stored problem in place.

        Raises:
            KeyError: If no problem with that ID is stored.
        """
        for index, existing in enumerate(self._problems):
            if existing.id == problem.id:
                self._problems[index] = problem
                return
        raise KeyError(problem.id)

    def remove_problem(self, problem_id: str) -> Problem | None:
        """Remove and return a problem, or None if it was not stored."""
        for index, existing in enumerate(self._problems):
            if existing.id == problem_id:
                return self._problems.pop(index)
        return None

    # ------------------------------------------------------------------
    # Comments
    # ------------------------------------------------------------------

    def get_comment(self, comment_id: str) -> Comment | None:
        for comment in self._comments:
            if comment.id == comment_id:
                return comment
        return None

    def comments_for(self, problem_id: str) -> list[Comment]:
        """Comments under *problem_id*, oldest first."""
        return [c for c in self._comments if c.problem_id == problem_id]

    def add_comment(self, comment: Comment) -> None:
        self._comments.append(comment)

    def put_comment(self, comment: Comment) -> None:
        """Replace a stored comment in place.

        Raises:
            KeyError: If no comment with that ID is stored.
        """
        for index, existing in enumerate(self._comments):
            if existing.id == comment.id:
                self._comments[index] = comment
                return
        raise KeyError(comment.id)

    def remove_comments_for(self, problem_id: str) -> int:
        """Drop every comment under *problem_id*. Returns how many were removed."""
        kept = [c for c in self._comments if c.problem_id != problem_id]
        removed = len(self._comments) - len(kept)
        self._comments = kept
        return removed

    # ------------------------------------------------------------------
    # Notifications
    # ------------------------------------------------------------------

    def add_notification(self, notification: Notification) -> None:
        self._notifications.append(notification)

    def get_notification(self, notification_id: str) -> Notification | None:
        for notification in self._notifications:
            if notification.id == notification_id:
                return notification
        return None

    def put_notification(self, notification: Notification) -> None:
        for index, existing in enumerate(self._notifications):
            if existing.id == notification.id:
                self._notifications[index] = notification
                return
        raise KeyError(notification.id)

    def notifications_for(self, user_id: str) -> list[Notification]:
        """Notifications addressed to *user_id*, newest first."""
        return [n for n in reversed(self._notifications) if n.user_id == user_id]

    # ------------------------------------------------------------------
    # Current identity
    # ------------------------------------------------------------------

    @property
    def current_user(self) -> User | None:
        """The acting user for this session, if anyone is logged in."""
        return self._current_user

    def set_current_user(self, user: User | None) -> None:
        """Adopt (or clear) the current identity and persist it."""
        self._current_user = user
        if self._txn_depth:
            self._identity_dirty = True
        else:
            self._persist_identity()

    def _persist_identity(self) -> None:
        if self._storage is None:
            return
        if self._current_user is None:
            self._storage.remove_item(IDENTITY_KEY)
        else:
            self._storage.set_item(IDENTITY_KEY, self._current_user.model_dump_json())

    def _restore_identity(self) -> None:
        """Adopt the identity persisted by a previous session, if any.

        Unparseable data is discarded and the slot cleared.
        """
        if self._storage is None:
            return
        raw = self._storage.get_item(IDENTITY_KEY)
        if raw is None:
            return
        try:
            user = User.model_validate_json(raw)
        except (ValidationError, json.JSONDecodeError):
            logger.warning("Failed to parse stored identity, clearing it")
            self._storage.remove_item(IDENTITY_KEY)
            return
        # The stored record carries the user's own edits, and registered
        # users are not part of the demo directory at all.
        self._users[user.id] = user
        self._counters.observe(user.id, TYPE_PREFIXES["user"])
        self._current_user = user
