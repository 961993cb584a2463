import threading
from datetime import datetime, timedelta, timezone


class MonotonicClock:
    """
    Reloj UTC que nunca devuelve dos veces el mismo instante.

    Dos escrituras dentro de la resolución del reloj reciben timestamps
    distintos, así el orden por `created_at` refleja el orden de inserción
    y `updated_at` siempre avanza.

    Args:
        resolution: Paso mínimo entre dos lecturas (MongoDB guarda milisegundos).
    """

    def __init__(self, resolution: timedelta = timedelta(microseconds=1)) -> None:
        self.resolution = resolution
        self._last: datetime | None = None
        self._lock = threading.Lock()

    def now(self) -> datetime:
        with self._lock:
            current = self._truncate(datetime.now(timezone.utc))
            if self._last is not None and current <= self._last:
                current = self._last + self.resolution
            self._last = current
            return current

    def _truncate(self, value: datetime) -> datetime:
        if self.resolution >= timedelta(milliseconds=1):
            return value.replace(microsecond=(value.microsecond // 1000) * 1000)
        return value
