"""Push fresh friend assignments to observers when a user document changes."""

from __future__ import annotations

import threading
from typing import TYPE_CHECKING, Any, Callable

from firebase_admin import firestore
from flask import current_app

from canvasfriends.constants import USERS_COLLECTION

from .aggregator import get_friend_assignments

if TYPE_CHECKING:
    from flask import Flask
    from google.cloud.firestore_v1.client import Client

    from ..models import FriendAssignments

Observer = Callable[[list["FriendAssignments"]], Any]


class Subscription:
    """A live subscription to one user's friend assignments.

    Each refresh is numbered when its change event arrives. A result is only
    handed to the observer if the subscription is still open and no newer
    refresh has been delivered already, so slow aggregations can finish out
    of order without overwriting fresher data.
    """

    def __init__(
        self,
        uid: str,
        observer: Observer,
        on_close: Callable[[Subscription], None] | None = None,
    ) -> None:
        """Initialize the subscription."""
        self.uid = uid
        self._observer = observer
        self._on_close = on_close
        self._cancelled = threading.Event()
        self._lock = threading.RLock()
        self._issued = 0
        self._delivered = 0
        self.watch: Any = None

    @property
    def active(self) -> bool:
        """Return True until the subscription is torn down."""
        return not self._cancelled.is_set()

    def next_generation(self) -> int:
        """Number the next refresh."""
        with self._lock:
            self._issued += 1
            return self._issued

    def deliver(self, generation: int, entries: list[FriendAssignments]) -> bool:
        """Hand ``entries`` to the observer unless they are stale or unwanted."""
        with self._lock:
            if self._cancelled.is_set() or generation <= self._delivered:
                return False
            self._delivered = generation
            self._observer(entries)
            return True

    def unsubscribe(self) -> None:
        """Stop listening. No observer call starts after this returns."""
        with self._lock:
            if self._cancelled.is_set():
                return
            self._cancelled.set()
        if self.watch is not None:
            self.watch.unsubscribe()
        if self._on_close is not None:
            self._on_close(self)


class ChangeNotifier:
    """Flask extension tracking the live subscriptions of every user."""

    def __init__(
        self,
        app: Flask | None = None,
        db: Client | None = None,
        background: bool = True,
    ) -> None:
        """Initialize the notifier."""
        self.app = app
        self._db = db
        self.background = background
        self._subscriptions: dict[str, list[Subscription]] = {}
        self._lock = threading.Lock()
        if app is not None:
            self.init_app(app)

    def init_app(self, app: Flask) -> None:
        """Register the notifier on ``app``."""
        self.app = app
        app.extensions["change_notifier"] = self

    @property
    def db(self) -> Client:
        """Return the Firestore client used for watches and refreshes."""
        if self._db is None:
            self._db = firestore.client()
        return self._db

    def subscribe(self, uid: str | None, observer: Observer) -> Subscription | None:
        """Watch ``users/{uid}`` and re-aggregate on every change.

        This is an in-process API for callers embedding the app, such as a
        long-lived worker or a push channel. No HTTP route subscribes;
        ``/auth/logout`` only tears down what such callers opened.
        """
        if not uid:
            return None

        subscription = Subscription(uid, observer, on_close=self._discard)

        def on_snapshot(doc_snapshots: list[Any], changes: Any, read_time: Any) -> None:
            if not subscription.active:
                return
            if not any(doc.exists for doc in doc_snapshots):
                return
            self._schedule_refresh(subscription, subscription.next_generation())

        with self._lock:
            self._subscriptions.setdefault(uid, []).append(subscription)
        user_ref = self.db.collection(USERS_COLLECTION).document(uid)
        subscription.watch = user_ref.on_snapshot(on_snapshot)
        current_app.logger.info(f"Subscribed to assignment changes for {uid}")
        return subscription

    def subscriptions(self, uid: str) -> list[Subscription]:
        """Return the open subscriptions of ``uid``."""
        with self._lock:
            return list(self._subscriptions.get(uid, []))

    def unsubscribe_user(self, uid: str) -> int:
        """Tear down every subscription of ``uid``, as on sign-out."""
        with self._lock:
            subscriptions = self._subscriptions.pop(uid, [])
        for subscription in subscriptions:
            subscription.unsubscribe()
        return len(subscriptions)

    def unsubscribe_all(self) -> int:
        """Tear down every subscription held by this notifier."""
        with self._lock:
            uids = list(self._subscriptions)
        return sum(self.unsubscribe_user(uid) for uid in uids)

    def _discard(self, subscription: Subscription) -> None:
        with self._lock:
            remaining = [
                s for s in self._subscriptions.get(subscription.uid, [])
                if s is not subscription
            ]
            if remaining:
                self._subscriptions[subscription.uid] = remaining
            else:
                self._subscriptions.pop(subscription.uid, None)

    def _schedule_refresh(self, subscription: Subscription, generation: int) -> None:
        if not self.background:
            self._refresh(subscription, generation)
            return
        thread = threading.Thread(
            target=self._refresh, args=(subscription, generation), daemon=True
        )
        thread.start()

    def _refresh(self, subscription: Subscription, generation: int) -> None:
        """Re-run the aggregation and deliver it inside an app context."""
        if self.app is None:
            return
        with self.app.app_context():
            if not subscription.active:
                return
            entries = get_friend_assignments(
                self.db,
                subscription.uid,
                repair_dangling=current_app.config.get(
                    "REPAIR_DANGLING_MEMBERSHIPS", False
                ),
            )
            try:
                subscription.deliver(generation, entries)
            except Exception as e:
                current_app.logger.error(
                    f"Assignment observer for {subscription.uid} failed: {e}"
                )
