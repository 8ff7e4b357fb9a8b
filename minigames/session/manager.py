"""
Session Manager - Creates, tracks and tears down game sessions.

LIFECYCLE:
1. A player invokes a game's command -> join the open signup, or create one
   (a challenge creates a session with a fixed set of players instead)
2. The start condition fires: the session filled up, every participant is
   ready, the signup timer elapsed, or a participant started it explicitly
3. Settings are resolved once, possibly by asking the initiating player
   - cancelled or invalid settings leave the session in SIGNUP
4. The session becomes ACTIVE and the game implementation takes over
5. The game signals a winner, or everyone leaves -> FINISHED
6. Results are reported and the session record is released

CONCURRENCY:
- All state checks and the mutations that depend on them happen without a
  suspension point in between
- A player is in at most one session per game identity at a time
- After every suspension point the session and its descriptor are
  re-validated, since anything may have happened in the meantime
- Removing a game does not touch running sessions, they keep the descriptor
  they were created with
"""

from __future__ import annotations
from typing import Any, Hashable, Iterable
import asyncio
import logging

from ..description import GameDescriptor
from ..errors import (
    AlreadyJoinedError,
    ConfigurationDataError,
    NotEnoughPlayersError,
    NotParticipatingError,
    SessionFullError,
    SessionNotJoinableError,
)
from ..messages import Message
from ..registry import GameRegistry, ObserverList
from .session import Session, SessionState

logger = logging.getLogger(__name__)


class SessionManager:
    """
    Manages game sessions.

    Responsibilities:
    - Create sessions and add or remove their players
    - Drive each session through its state machine
    - Report results and release finished sessions

    Observers may implement `on_session_started(session)`,
    `on_session_finished(session)` and `on_session_aborted(session)`.

    Creating sessions starts signup timers, so it must happen while an event
    loop is running.
    """

    def __init__(
        self,
        registry: GameRegistry,
        customization,
        players,
        announce=None,
        settings=None,
    ):
        self._registry = registry
        self._customization = customization
        self._players = players
        self._announce = announce
        self._settings = settings

        self._sessions: dict[str, Session] = {}
        self._memberships: dict[tuple[Hashable, Hashable], str] = {}
        self._timers: dict[str, asyncio.Task] = {}
        self._tasks: set[asyncio.Task] = set()
        self._observers = ObserverList()

    # =========================================================================
    # Lookup
    # =========================================================================

    def get_session(self, session_id: str) -> Session | None:
        return self._sessions.get(session_id)

    def list_sessions(self, identity: Hashable | None = None) -> list[Session]:
        return [
            session for session in self._sessions.values()
            if identity is None or session.descriptor.identity == identity
        ]

    def find_session(self, identity: Hashable, player_id: Hashable) -> Session | None:
        """The session of game `identity` the player participates in, if any."""
        session_id = self._memberships.get((identity, player_id))
        if session_id is None:
            return None
        return self._sessions.get(session_id)

    # =========================================================================
    # Signup
    # =========================================================================

    def create_session(
        self,
        descriptor: GameDescriptor,
        player_id: Hashable,
        challenge: bool = False,
    ) -> Session:
        """Create a new session for `descriptor` with `player_id` as its first player."""
        self._ensure_not_participating(descriptor, player_id)

        session = Session(descriptor=descriptor, challenge=challenge)
        self._sessions[session.session_id] = session
        self._add_player(session, player_id)

        logger.info("Created %s session %s", descriptor.name, session.session_id)

        if not challenge:
            self._start_signup_timer(session)
            self._announce_signup(session, player_id)
        return session

    def join(self, session: Session, player_id: Hashable) -> Session:
        """
        Add `player_id` to `session`.

        Raises SessionFullError, AlreadyJoinedError or SessionNotJoinableError.
        Filling the session schedules its start.
        """
        descriptor = session.descriptor
        if session.player_count >= descriptor.maximum_players:
            raise SessionFullError(descriptor.name)
        if session.state != SessionState.SIGNUP:
            raise SessionNotJoinableError(descriptor.name)
        self._ensure_not_participating(descriptor, player_id)

        self._add_player(session, player_id)
        self._announce_signup(session, player_id)

        if session.is_full and not session.challenge:
            self.request_start(session)
        return session

    def join_or_create(self, descriptor: GameDescriptor, player_id: Hashable) -> tuple[Session, bool]:
        """
        Join the open signup of `descriptor`, or create a new session.

        Returns the session and whether it was created.
        """
        self._ensure_not_participating(descriptor, player_id)

        for session in self._sessions.values():
            if session.descriptor is descriptor and session.is_open:
                return self.join(session, player_id), False

        session = self.create_session(descriptor, player_id)
        if session.is_full:
            self.request_start(session)
        return session, True

    def challenge(
        self,
        descriptor: GameDescriptor,
        challenger_id: Hashable,
        player_ids: Iterable[Hashable],
    ) -> Session:
        """
        Create a session for the challenger and the challenged players.

        The session does not take signups. The caller starts it.
        """
        participants = [challenger_id]
        for player_id in player_ids:
            if player_id not in participants:
                participants.append(player_id)

        if len(participants) > descriptor.maximum_players:
            raise SessionFullError(descriptor.name)
        if len(participants) < descriptor.minimum_players:
            raise NotEnoughPlayersError(descriptor.name)
        for player_id in participants:
            self._ensure_not_participating(descriptor, player_id)

        session = self.create_session(descriptor, challenger_id, challenge=True)
        for player_id in participants[1:]:
            self._add_player(session, player_id)
        return session

    def mark_ready(self, session: Session, player_id: Hashable) -> asyncio.Task | None:
        """Mark the player ready. Schedules the start once everyone is ready."""
        if not session.has_player(player_id):
            raise NotParticipatingError(session.descriptor.name)
        if session.state != SessionState.SIGNUP:
            raise SessionNotJoinableError(session.descriptor.name)

        session._ready.add(player_id)
        if (len(session._ready) == session.player_count
                and session.player_count >= session.descriptor.minimum_players):
            return self.request_start(session)
        return None

    # =========================================================================
    # Start
    # =========================================================================

    def ensure_startable(self, session: Session, player_id: Hashable | None = None):
        """Raise the player facing error explaining why `session` cannot start now."""
        descriptor = session.descriptor
        if player_id is not None and not session.has_player(player_id):
            raise NotParticipatingError(descriptor.name)
        if session.state != SessionState.SIGNUP or session.starting:
            raise SessionNotJoinableError(descriptor.name)
        if session.player_count < descriptor.minimum_players:
            raise NotEnoughPlayersError(descriptor.name)

    def request_start(
        self,
        session: Session,
        initiator_id: Hashable | None = None,
        interactive: bool = False,
    ) -> asyncio.Task:
        """Schedule `start` and return the task running it."""
        task = asyncio.get_running_loop().create_task(
            self.start(session, initiator_id=initiator_id, interactive=interactive)
        )
        self._tasks.add(task)
        task.add_done_callback(self._on_task_done)
        return task

    async def start(
        self,
        session: Session,
        initiator_id: Hashable | None = None,
        interactive: bool = False,
    ) -> bool:
        """
        Move `session` from SIGNUP to ACTIVE.

        Settings are resolved first, interactively by the initiator when
        `interactive` is set. Returns whether the session became active.
        """
        descriptor = session.descriptor
        if session.state != SessionState.SIGNUP or session.starting:
            return False
        if session.player_count < descriptor.minimum_players:
            return False

        self._cancel_timer(session)
        session._starting = True
        session._initiator = initiator_id

        initiator = None
        if initiator_id is not None:
            initiator = self._players.get_by_id(initiator_id)

        try:
            result = await self._customization.resolve(descriptor, initiator, interactive)
        except ConfigurationDataError as e:
            logger.warning("Cannot start %s session %s: %s", descriptor.name, session.session_id, e)
            self._message(session.players, Message.GAME_CANNOT_START, descriptor.name, str(e))
            self._return_to_signup(session)
            return False
        except Exception:
            logger.exception("Customization of %s session %s failed", descriptor.name, session.session_id)
            self._message(session.players, Message.GAME_CANNOT_START, descriptor.name, "customization failed")
            self._return_to_signup(session)
            return False
        finally:
            session._starting = False
            session._initiator = None

        # Anything may have happened while settings were being resolved.
        if session.state != SessionState.SIGNUP:
            return False
        if self._registry.get_game(descriptor.identity) is not descriptor:
            self.abort(session, Message.format(Message.GAME_UNAVAILABLE, descriptor.name))
            return False
        if result.cancelled:
            if initiator is not None and session.has_player(initiator.id):
                initiator.send_message(Message.GAME_CUSTOMIZATION_CANCELLED, descriptor.name)
            self._return_to_signup(session)
            return False
        if session.player_count < descriptor.minimum_players:
            self._message(session.players, Message.GAME_NOT_ENOUGH_PLAYERS, descriptor.name)
            self._return_to_signup(session)
            return False

        session._activate(result.configuration, descriptor.game_class(session, self))
        logger.info("Started %s session %s with %d player(s)",
                    descriptor.name, session.session_id, session.player_count)

        self._message(session.players, Message.GAME_STARTING, descriptor.name)
        if self._announce is not None:
            self._announce.announce(Message.GAME_ANNOUNCE_STARTED, descriptor.name, session.player_count)
            self._announce.echo("minigame-started", descriptor.name, session.player_count)
        self._observers.notify("on_session_started", session)

        try:
            initialized = await session.game.on_initialized(session.configuration)
        except Exception:
            logger.exception("%s failed to initialize session %s", descriptor.name, session.session_id)
            initialized = False

        if initialized is False and session.state == SessionState.ACTIVE:
            self._message(session.players, Message.GAME_CANNOT_START, descriptor.name, "setup failed")
            await self.finish(session)
            return False

        for player_id in session.players:
            if session.state != SessionState.ACTIVE:
                break
            try:
                await session.game.on_player_added(player_id)
            except Exception:
                logger.exception("%s failed to add player %r", descriptor.name, player_id)
        return True

    def _return_to_signup(self, session: Session):
        if session.state != SessionState.SIGNUP:
            return
        session._ready.clear()
        if not session.challenge:
            self._start_signup_timer(session)

    # =========================================================================
    # Leave, finish, abort
    # =========================================================================

    async def leave(self, session: Session, player_id: Hashable):
        """
        Remove `player_id` from `session`.

        An emptied signup is aborted, an emptied active session finishes
        without a winner.
        """
        if not session.has_player(player_id):
            raise NotParticipatingError(session.descriptor.name)

        customizing = session.starting and session._initiator == player_id
        self._remove_player(session, player_id)

        if session.state == SessionState.SIGNUP:
            if customizing:
                self._customization.cancel(player_id)
            if session.player_count == 0:
                self.abort(session, "everyone left")
            return

        if session.state == SessionState.ACTIVE:
            emptied = session.player_count == 0
            try:
                await session.game.on_player_removed(player_id)
            except Exception:
                logger.exception("%s failed to remove player %r", session.descriptor.name, player_id)
            if emptied and session.state == SessionState.ACTIVE:
                await self.finish(session)

    async def leave_all(self, player_id: Hashable) -> int:
        """Remove the player from every session, e.g. when they disconnect."""
        sessions = [s for s in self._sessions.values() if s.has_player(player_id)]
        for session in sessions:
            if session.has_player(player_id):
                await self.leave(session, player_id)
        return len(sessions)

    async def finish(self, session: Session, winner_id: Hashable | None = None) -> bool:
        """Move an ACTIVE session to FINISHED, report the result and release it."""
        if session.state != SessionState.ACTIVE:
            return False

        descriptor = session.descriptor
        session._transition(SessionState.FINISHED)
        session._winner = winner_id
        self._cancel_timer(session)

        logger.info("Finished %s session %s (winner: %r)", descriptor.name, session.session_id, winner_id)

        if winner_id is not None:
            winner = self._players.get_by_id(winner_id)
            winner_name = winner.name if winner is not None else str(winner_id)
            self._message(session.players, Message.GAME_FINISHED_WINNER, descriptor.name, winner_name)
            if self._announce is not None and self._announce_results():
                self._announce.announce(Message.GAME_ANNOUNCE_WON, winner_name, descriptor.name)
                self._announce.echo("minigame-won", winner_name, descriptor.name)
        else:
            self._message(session.players, Message.GAME_FINISHED, descriptor.name)

        try:
            await session.game.on_finished()
        except Exception:
            logger.exception("%s failed to finish session %s", descriptor.name, session.session_id)

        self._observers.notify("on_session_finished", session)
        self._release(session)
        return True

    def abort(self, session: Session, reason: str) -> bool:
        """Move a SIGNUP session to ABORTED and release it."""
        if session.state != SessionState.SIGNUP:
            return False

        session._transition(SessionState.ABORTED)
        self._cancel_timer(session)
        if session._initiator is not None:
            self._customization.cancel(session._initiator)

        logger.info("Aborted %s session %s: %s", session.descriptor.name, session.session_id, reason)
        self._message(session.players, Message.GAME_ABORTED, session.descriptor.name, reason)

        self._observers.notify("on_session_aborted", session)
        self._release(session)
        return True

    async def stop_sessions(self, identity: Hashable) -> int:
        """
        Stop every session of the game registered as `identity`.

        Signups are aborted, active sessions finish without a winner.
        """
        stopped = 0
        for session in self.list_sessions(identity):
            if session.state == SessionState.SIGNUP:
                stopped += self.abort(session, "the game has been stopped")
            elif session.state == SessionState.ACTIVE:
                stopped += await self.finish(session)
        return stopped

    # =========================================================================
    # Observers and housekeeping
    # =========================================================================

    def add_observer(self, owner: Hashable, observer: Any):
        self._observers.add(owner, observer)

    def remove_observer(self, owner: Hashable) -> bool:
        return self._observers.remove(owner)

    async def wait_until_idle(self):
        """Wait for all scheduled starts to complete."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    def dispose(self):
        for task in list(self._timers.values()) + list(self._tasks):
            task.cancel()
        self._timers.clear()
        self._tasks.clear()
        self._observers.clear()

    # =========================================================================
    # Internals
    # =========================================================================

    def _ensure_not_participating(self, descriptor: GameDescriptor, player_id: Hashable):
        if (descriptor.identity, player_id) in self._memberships:
            raise AlreadyJoinedError(descriptor.name)

    def _add_player(self, session: Session, player_id: Hashable):
        session._players.append(player_id)
        self._memberships[(session.descriptor.identity, player_id)] = session.session_id

    def _remove_player(self, session: Session, player_id: Hashable):
        session._players.remove(player_id)
        session._ready.discard(player_id)
        key = (session.descriptor.identity, player_id)
        if self._memberships.get(key) == session.session_id:
            del self._memberships[key]

    def _release(self, session: Session):
        for player_id in session.players:
            key = (session.descriptor.identity, player_id)
            if self._memberships.get(key) == session.session_id:
                del self._memberships[key]
        self._sessions.pop(session.session_id, None)

    def _start_signup_timer(self, session: Session):
        timeout = 0
        if self._settings is not None:
            timeout = self._settings.get_value("games/signup_timeout_sec")
        if not timeout:
            return
        self._cancel_timer(session)
        self._timers[session.session_id] = asyncio.get_running_loop().create_task(
            self._signup_timer(session, timeout)
        )

    async def _signup_timer(self, session: Session, timeout: float):
        await asyncio.sleep(timeout)
        self._timers.pop(session.session_id, None)

        if session.state != SessionState.SIGNUP or session.starting:
            return
        if session.player_count >= session.descriptor.minimum_players:
            await self.start(session)
        else:
            self.abort(session, "not enough players signed up")

    def _cancel_timer(self, session: Session):
        timer = self._timers.pop(session.session_id, None)
        if timer is not None and timer is not asyncio.current_task():
            timer.cancel()

    def _on_task_done(self, task: asyncio.Task):
        self._tasks.discard(task)
        if not task.cancelled() and task.exception() is not None:
            logger.error("Session start failed", exc_info=task.exception())

    def _announce_signup(self, session: Session, player_id: Hashable):
        descriptor = session.descriptor
        player = self._players.get_by_id(player_id)
        if player is None:
            return
        if session.player_count == 1:
            player.send_message(Message.GAME_REGISTRATION_CREATED, descriptor.name, descriptor.command or "games")
        else:
            player.send_message(Message.GAME_REGISTRATION_JOINED, descriptor.name)

        if self._announce is not None and descriptor.command:
            self._announce.announce(Message.GAME_ANNOUNCE_SIGNUP, player.name, descriptor.name, descriptor.command)
            self._announce.echo("minigame-signup", player.name, descriptor.name)

    def _announce_results(self) -> bool:
        if self._settings is None:
            return True
        return bool(self._settings.get_value("games/announce_results"))

    def _message(self, player_ids: Iterable[Hashable], template: str, *args):
        for player_id in player_ids:
            player = self._players.get_by_id(player_id)
            if player is not None:
                player.send_message(template, *args)
