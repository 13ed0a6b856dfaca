"""
Fonte de tempo injetável.

Os services recebem um Clock no construtor em vez de chamar
datetime.utcnow() diretamente, o que permite fixar o "agora" nos testes.
"""

from datetime import datetime, timezone
from typing import Protocol


class Clock(Protocol):
    """Qualquer objeto com now() -> datetime (timezone-aware, UTC)."""

    def now(self) -> datetime:
        ...


class SystemClock:
    """Relógio real do sistema, sempre em UTC."""

    def now(self) -> datetime:
        return datetime.now(timezone.utc)


system_clock = SystemClock()
