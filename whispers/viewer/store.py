"""
Whisper Store

An immutable, ordered snapshot of the whispers the viewer can show.
Order is whatever the caller supplies (the posts API returns newest first).
The viewer never edits a store; a refresh replaces it wholesale.
"""

from collections.abc import Iterable, Sequence

from whispers.schemas import Whisper


class WhisperStore(Sequence):
    """
    Read-only sequence of whispers with lookup by id.

    Args:
        whispers: Whispers in display order. Ids must be unique.

    Raises:
        ValueError: If two whispers share an id
    """

    def __init__(self, whispers: Iterable[Whisper] = ()):
        self._whispers = tuple(whispers)
        self._positions = {}
        for position, whisper in enumerate(self._whispers):
            if whisper.id in self._positions:
                raise ValueError(f"Duplicate whisper id: {whisper.id}")
            self._positions[whisper.id] = position

    def find_by_id(self, whisper_id) -> Whisper | None:
        position = self._positions.get(whisper_id)
        if position is None:
            return None
        return self._whispers[position]

    def index_of(self, whisper_id) -> int | None:
        return self._positions.get(whisper_id)

    def size(self) -> int:
        return len(self._whispers)

    def __contains__(self, whisper_id) -> bool:
        return whisper_id in self._positions

    def __getitem__(self, index):
        return self._whispers[index]

    def __len__(self) -> int:
        return len(self._whispers)

    def __repr__(self) -> str:
        return f"WhisperStore(size={len(self._whispers)})"
