"""State of one user's training session against the receiver."""

from __future__ import annotations

import logging
import random

from strikepad.analysis import filter_user_trainings
from strikepad.client import EspClient, EspError
from strikepad.training import (
    ZONE_COUNT,
    UserType,
    detect_user_type,
    generate_training_sequence,
    random_sequence,
    sequence_to_string,
)

log = logging.getLogger(__name__)

RANDOM_TRAINING_LENGTH = 10


class SessionError(Exception):
    """An action cannot be carried out in the session's current state."""


class TrainingSession:
    """Recording, sending and polling of training sequences for one user."""

    def __init__(
        self,
        client: EspClient,
        username: str,
        rng: random.Random | None = None,
    ) -> None:
        self.client = client
        self.username = username
        self.rng = rng or random.Random()
        self.recording = False
        self.sequence: list[int] = []
        self.sent = ""
        self.polling = False

    def _send(self, encoded: str) -> str:
        self.sent = encoded
        reply = self.client.send_sequence(self.username, encoded)
        log.debug("receiver answered the sequence: %r", reply)
        self.polling = True
        return encoded

    def toggle_recording(self) -> bool:
        """Start recording a new sequence, or finish the current one."""
        if not self.recording:
            self.recording = True
            self.sequence = []
            log.debug("recording of a new training started")
        else:
            self.recording = False
            log.debug("recording finished: %s", self.sequence)
        return self.recording

    def press_lamp(self, lamp: int) -> bool:
        """Record a lamp press; returns whether it was recorded."""
        if not 1 <= lamp <= ZONE_COUNT:
            raise ValueError(f"lamp must be between 1 and {ZONE_COUNT}")
        if not self.recording:
            return False
        self.sequence.append(lamp)
        log.debug("lamp %d recorded", lamp)
        return True

    def start_training(self) -> str:
        """Send the recorded sequence; returns the string that was sent."""
        if not self.sequence:
            raise SessionError("the training sequence is empty; record one first")
        return self._send(sequence_to_string(self.sequence))

    def fast_training(self) -> UserType:
        """Generate a sequence for the user's type, send it, return the type."""
        try:
            trainings = self.client.read_file(self.username)
        except EspError as exc:
            log.debug("could not read trainings (%s), using the default type", exc)
            user_type = UserType.TEMPO
        else:
            user_type = detect_user_type(trainings, self.username)
        log.debug("user type: %s", user_type.value)
        self.sequence = generate_training_sequence(user_type, self.rng)
        self._send(sequence_to_string(self.sequence))
        return user_type

    def random_training(self) -> str:
        """Send a uniformly random sequence; returns the string that was sent."""
        return self._send(
            sequence_to_string(random_sequence(RANDOM_TRAINING_LENGTH, self.rng))
        )

    def poll(self) -> dict[int, tuple[int, float]]:
        """Latest zone results reported by the receiver."""
        return self.client.poll_result(self.username)

    def load_statistics(self) -> list:
        """The user's stored training records, oldest first."""
        try:
            trainings = self.client.read_file(self.username)
        except EspError as exc:
            raise SessionError("Не удалось загрузить статистику") from exc
        return filter_user_trainings(trainings, self.username)