"""
Orchestration of one player's session: editing, playing (strict or sandbox), the bot, and the online room.

Every user action / incoming message is a discrete event handled here. Errors raised by the codec, the rule oracle
or the transport are caught at this boundary: the session keeps its last-known-good position and reports what went
wrong in `status`.
"""

import logging
import random
from typing import Any, Optional, Self

from pydantic import ValidationError

from src.api.models import SessionSnapshot
from src.chess.board import Board
from src.chess.bot import select_move
from src.chess.castling import CastlingDirection
from src.chess.editor import PositionEditor
from src.chess.fen import STARTING_FEN, decode
from src.chess.moves import Move
from src.chess.oracle import ChessOracle, OracleHandle, RuleOracle
from src.chess.pieces import Piece
from src.chess.sandbox import from_freeform, is_freeform, to_freeform
from src.chess.square import Square
from src.core.config import Settings
from src.core.exceptions import (
    ChannelUnavailable,
    MalformedPlacement,
    OracleRejectedMove,
    OracleRejectedPosition,
    PositionValidationError,
)
from src.core.shared_types import Color, Mode, PieceType, PlayMode, Termination
from src.sync.protocol import (
    CREATOR_COLOR,
    JOINER_COLOR,
    MOVE_EVENT,
    MoveMessage,
    new_room_code,
)
from src.sync.transport import Channel, Transport

_log = logging.getLogger(__name__)

INVALID_STRICT_POSITION = "Invalid FEN for strict mode."
IGNORED_REMOTE_POSITION = "Ignored an invalid position from the other player."
ONLINE_UNAVAILABLE = "Online play is not available."
UNSHARED_EDIT = "Edited position not sent: the other player sees it after your next move."
REMOTE_MOVE_WHILE_EDITING = "The other player moved while you were editing."


class Session:
    """State of one player's board, and the operations the UI can trigger on it."""

    def __init__(
        self,
        oracle: RuleOracle,
        transport: Optional[Transport] = None,
        rng: Optional[random.Random] = None,
    ) -> None:
        self.oracle = oracle
        self.transport = transport
        self.rng = rng or random.Random()

        self.mode = Mode.STRICT
        self.play_mode = PlayMode.NONE
        self.handle: OracleHandle = oracle.load(STARTING_FEN)
        self.fen = oracle.current_fen(self.handle)
        self.sandbox = Board()
        self.turn = Color.WHITE
        self.status = ""

        self.editor: Optional[PositionEditor] = None
        self.selected_piece: Optional[Piece] = None

        self.channel: Optional[Channel] = None
        self.room_code: Optional[str] = None
        self.joined = False
        self.my_color = Color.WHITE

    @classmethod
    def from_settings(
        cls, settings: Settings, transport: Optional[Transport] = None
    ) -> Self:
        """Online play is only offered if the settings say a realtime transport is available"""
        return cls(
            ChessOracle(),
            transport=transport if settings.online_enabled else None,
            rng=random.Random(settings.bot_seed),
        )

    # --- state for the UI ---
    @property
    def editing(self) -> bool:
        return self.editor is not None

    @property
    def online_available(self) -> bool:
        return self.transport is not None

    @property
    def bot_color(self) -> Color:
        return self.my_color.opponent

    @property
    def turn_label(self) -> str:
        label = f"Turn: {self.turn.capitalize()}"
        return f"{label} (sandbox)" if self.mode == Mode.SANDBOX else label

    def snapshot(self) -> SessionSnapshot:
        if self.editor is not None:
            board = self.editor.board
        elif self.mode == Mode.STRICT:
            board = Board(decode(self.fen).position)
        else:
            board = self.sandbox
        return SessionSnapshot(
            mode=self.mode,
            play_mode=self.play_mode,
            editing=self.editing,
            position=self.export_position(),
            board=board.to_algebraic(),
            turn=self.turn,
            turn_label=self.turn_label,
            status=self.status,
            selected_piece=self.selected_piece.to_code() if self.selected_piece else None,
            online_available=self.online_available,
            room_code=self.room_code,
            joined=self.joined,
            my_color=self.my_color,
        )

    # --- modes ---
    def set_mode(self, mode: Mode) -> None:
        self.mode = mode
        if mode == Mode.STRICT:
            self._refresh_strict_status()
        self.maybe_bot_move()

    def set_play_mode(self, play_mode: PlayMode) -> None:
        if play_mode == PlayMode.ONLINE and not self.online_available:
            _log.info("No realtime transport configured, online play stays hidden.")
            self.status = ONLINE_UNAVAILABLE
            return
        self.play_mode = play_mode
        self.maybe_bot_move()

    def set_my_color(self, color: Color) -> None:
        self.my_color = color
        self.maybe_bot_move()

    def reset(self) -> None:
        if self.mode == Mode.STRICT:
            self._accept_strict(self.oracle.load(STARTING_FEN))
        else:
            self.sandbox = Board()
            self.turn = Color.WHITE
        self.status = ""
        self.maybe_bot_move()

    # --- position I/O ---
    def export_position(self) -> str:
        if self.mode == Mode.STRICT:
            return self.fen
        return to_freeform(self.sandbox.position, self.turn)

    def import_position(self, text: str) -> bool:
        """Paste a FEN (strict mode) or a sandbox string (sandbox mode). Returns whether it was accepted."""
        text = text.strip()
        if is_freeform(text):
            try:
                freeform = from_freeform(text)
            except MalformedPlacement as exc:
                self.status = f"Invalid sandbox code: {exc}"
                return False
            self._enter_sandbox(Board(freeform.position), freeform.color_to_move)
            return True

        try:
            handle = self.oracle.load(text)
        except OracleRejectedPosition:
            self.status = INVALID_STRICT_POSITION
            return False
        self.mode = Mode.STRICT
        self._accept_strict(handle)
        self.maybe_bot_move()
        return True

    # --- playing ---
    def drop_piece(self, from_square: Square, to_square: Square) -> bool:
        """Drag & drop of a piece on the board. Returns False if the move is refused."""
        if self.editing:
            return False
        if self.mode == Mode.STRICT:
            return self._drop_strict(from_square, to_square)
        return self._drop_sandbox(from_square, to_square)

    def _drop_strict(self, from_square: Square, to_square: Square) -> bool:
        if self.play_mode == PlayMode.BOT and self._bot_to_move():
            _log.debug("Refused move %s-%s: waiting for the bot", from_square, to_square)
            return False
        try:
            move = self.oracle.apply_move(
                self.handle, from_square, to_square, PieceType.QUEEN
            )
        except OracleRejectedMove:
            _log.debug("Refused move %s-%s in %r", from_square, to_square, self.fen)
            return False
        self._after_strict_move(move)
        self.maybe_bot_move()
        return True

    def _drop_sandbox(self, from_square: Square, to_square: Square) -> bool:
        piece = self.sandbox.move_piece(from_square, to_square)
        if piece is None:
            return False
        self.turn = self.turn.opponent
        self._broadcast(
            from_square,
            to_square,
            f"{piece.to_code()}:{from_square}-{to_square}",
            self.export_position(),
        )
        return True

    def maybe_bot_move(self) -> Optional[Move]:
        """Let the bot reply if it is its turn (strict mode, playing against the bot)"""
        if self.mode != Mode.STRICT or self.play_mode != PlayMode.BOT or self.editing:
            return None
        if not self._bot_to_move():
            return None

        best = select_move(self.fen, self.bot_color, self.oracle, self.rng)
        if best is None:
            return None
        move = self.oracle.apply_move(
            self.handle, best.from_square, best.to_square, best.promote_to
        )
        self._after_strict_move(move)
        return move

    def _after_strict_move(self, move: Move) -> None:
        self.fen = self.oracle.current_fen(self.handle)
        self._refresh_strict_status()
        self._broadcast(move.from_square, move.to_square, str(move), self.fen)

    # --- editing ---
    def start_editing(self) -> None:
        """Open the editor, pre-filled with what is on the board right now"""
        if self.editor is not None:
            return
        if self.mode == Mode.STRICT:
            self.editor = PositionEditor.from_fen(self.fen)
        else:
            self.editor = PositionEditor(self.sandbox.copy(), self.turn)

    def select_piece(self, code: Optional[str]) -> None:
        """Pick a piece from the palette (None: the eraser)"""
        self.selected_piece = Piece.from_code(code) if code else None

    def click_square(self, square: Square) -> None:
        """While editing: place the selected piece, or erase the square if no piece is selected"""
        if self.editor is None:
            return
        if self.selected_piece is None:
            self.editor.erase(square)
        else:
            self.editor.place(square, self.selected_piece)

    def set_castling_right(self, direction: CastlingDirection, allowed: bool) -> None:
        if self.editor is not None:
            self.editor.set_castling_right(direction, allowed)

    def set_turn(self, color: Color) -> None:
        if self.editor is not None:
            self.editor.set_color_to_move(color)

    def commit_edit(self) -> bool:
        """
        Done editing.
        ----

        The edited position is validated (codec) and loaded into the rule oracle. If either refuses it,
        the position is kept anyway, but in sandbox mode. Returns whether strict play continues.
        """
        editor = self.editor
        if editor is None:
            return self.mode == Mode.STRICT
        self.editor = None

        try:
            handle = self.oracle.load(editor.commit())
        except (PositionValidationError, OracleRejectedPosition) as exc:
            _log.info("Edited position not playable in strict mode: %s", exc)
            self._enter_sandbox(editor.board, editor.color_to_move)
            self.status = f"Sandbox mode: {exc}"
            return False

        self.mode = Mode.STRICT
        self._accept_strict(handle)
        if self.joined and not self.status:
            self.status = UNSHARED_EDIT
        self.maybe_bot_move()
        return True

    def cancel_edit(self) -> None:
        if self.editor is not None:
            self.editor.cancel()
            self.editor = None

    # --- online ---
    def create_room(self) -> Optional[str]:
        """Open a new room. The creator plays white. None if online play is not available."""
        if self.transport is None:
            _log.info("No realtime transport configured, cannot create a room.")
            return None
        room_code = new_room_code()
        if not self._subscribe(self.transport, room_code, CREATOR_COLOR):
            return None
        return room_code

    def join_room(self, room_code: str) -> bool:
        """Join an existing room. The joiner plays black."""
        if self.transport is None:
            _log.info("No realtime transport configured, cannot join room %s.", room_code)
            return False
        return self._subscribe(self.transport, room_code.strip(), JOINER_COLOR)

    def leave_room(self) -> None:
        if self.channel is not None:
            self.channel.close()
        self.channel = None
        self.room_code = None
        self.joined = False

    def receive_move(self, payload: dict[str, Any]) -> bool:
        """
        Handle a "move" message from the other player.
        ----

        The message carries the full position after the move, which simply replaces ours.
        Sandbox positions are taken as they are; FEN positions must be accepted by the rule oracle,
        otherwise the message is dropped. Returns whether the message was applied.
        """
        try:
            message = MoveMessage.model_validate(payload)
        except ValidationError as exc:
            _log.info("Dropping malformed move message: %s", exc)
            return False

        position = message.resulting_position
        if is_freeform(position):
            try:
                freeform = from_freeform(position)
            except MalformedPlacement as exc:
                _log.info("Dropping sandbox position %r: %s", position, exc)
                self.status = IGNORED_REMOTE_POSITION
                return False
            self._enter_sandbox(Board(freeform.position), freeform.color_to_move)
            self._note_remote_move_while_editing()
            return True

        try:
            handle = self.oracle.load(position)
        except OracleRejectedPosition:
            _log.info("Dropping position rejected by the rules: %r", position)
            self.status = IGNORED_REMOTE_POSITION
            return False
        self.mode = Mode.STRICT
        self._accept_strict(handle)
        self._note_remote_move_while_editing()
        return True

    def _subscribe(self, transport: Transport, room_code: str, color: Color) -> bool:
        self.leave_room()
        try:
            channel = transport.open_channel(room_code)
        except ChannelUnavailable as exc:
            _log.info("Cannot subscribe to room %s: %s", room_code, exc)
            self.status = ONLINE_UNAVAILABLE
            return False
        channel.on_message(MOVE_EVENT, self.receive_move)
        self.channel = channel
        self.room_code = room_code
        self.joined = True
        self.my_color = color
        return True

    def _broadcast(
        self, from_square: Square, to_square: Square, description: str, position: str
    ) -> None:
        if self.channel is None:
            return
        message = MoveMessage(
            from_square=from_square.to_algebraic(),
            to_square=to_square.to_algebraic(),
            description=description,
            resulting_position=position,
        )
        self.channel.send(MOVE_EVENT, message.to_payload())

    # --- internal helpers ---
    def _bot_to_move(self) -> bool:
        return self.oracle.side_to_move(self.handle) == self.bot_color

    def _note_remote_move_while_editing(self) -> None:
        if self.editing:
            self.status = REMOTE_MOVE_WHILE_EDITING

    def _accept_strict(self, handle: OracleHandle) -> None:
        """New source of truth for strict mode"""
        self.handle = handle
        self.fen = self.oracle.current_fen(handle)
        self._refresh_strict_status()

    def _enter_sandbox(self, board: Board, color_to_move: Color) -> None:
        self.mode = Mode.SANDBOX
        self.sandbox = board
        self.turn = color_to_move
        self.status = ""

    def _refresh_strict_status(self) -> None:
        self.turn = self.oracle.side_to_move(self.handle)
        termination = self.oracle.termination(self.handle)
        if termination == Termination.CHECKMATE:
            self.status = f"Checkmate. {self.turn.opponent.capitalize()} wins."
        elif termination == Termination.STALEMATE:
            self.status = "Stalemate."
        elif termination == Termination.DRAW:
            self.status = "Game over."
        else:
            self.status = ""
