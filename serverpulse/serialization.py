from abc import ABC, abstractmethod
from enum import Enum
from typing import Any

import orjson


class Serializer(ABC):
    """Abstract base class for document serialization."""

    @abstractmethod
    def serialize(self, data: Any) -> bytes:
        """Serializes data into bytes."""
        pass

    @abstractmethod
    def deserialize(self, data: bytes | str) -> Any:
        """Deserializes bytes into data."""
        pass


class SnapshotSerializer(Serializer):
    """orjson-backed JSON codec for rosters, snapshots and probe bodies."""

    def __init__(self, indent: bool = False) -> None:
        self.option = orjson.OPT_INDENT_2 if indent else 0

    def serialize(self, data: Any) -> bytes:
        def default(obj: Any) -> Any:
            if isinstance(obj, Enum):
                return obj.value
            if isinstance(obj, frozenset | set):
                return list(obj)
            raise TypeError

        return orjson.dumps(data, default=default, option=self.option)

    def deserialize(self, data: bytes | str) -> Any:
        return orjson.loads(data)

    def try_deserialize(self, data: bytes | str) -> Any:
        """Decode JSON, returning None for empty or invalid input."""
        if not data or not data.strip():
            return None
        try:
            return orjson.loads(data)
        except orjson.JSONDecodeError:
            return None
