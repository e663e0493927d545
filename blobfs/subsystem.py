"""
BlobFS Subsystem Base

Lifecycle base class shared by the node store and the pointer
filesystem facade.

Version: 1.0.0
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from enum import Enum, auto

from blobfs.logger import Logger, get_logger


class SubsystemState(Enum):
    """Lifecycle state of a subsystem."""
    CREATED = auto()
    INITIALIZED = auto()
    ERROR = auto()


class Subsystem(ABC):
    """
    Abstract base class for BlobFS subsystems.

    Lifecycle:
        1. __init__() - Subsystem is created
        2. initialize() - Subsystem prepares its backing state
    """

    def __init__(self, name: str):
        self._name = name
        self._logger = get_logger(name)
        self._state = SubsystemState.CREATED

    @property
    def name(self) -> str:
        """Get the subsystem name."""
        return self._name

    @property
    def state(self) -> SubsystemState:
        """Get the current state."""
        return self._state

    @property
    def logger(self) -> Logger:
        """Get the subsystem logger."""
        return self._logger

    def set_state(self, state: SubsystemState) -> None:
        """Set the subsystem state."""
        if state is not self._state:
            self._state = state
            self._logger.debug(f"State changed to {state.name}")

    @abstractmethod
    def initialize(self) -> None:
        """
        Initialize the subsystem.

        Must be idempotent: calling it on already-initialized
        state leaves that state unchanged.
        """

    def health_check(self) -> bool:
        """Return True if the subsystem is usable."""
        return self._state is SubsystemState.INITIALIZED
