"""
Espera acotada a que un almacenamiento responda durante el arranque.

Si el almacenamiento no está listo (p.ej. su contenedor aún arranca), se
reintenta un número fijo de veces con una pausa constante entre intentos.
Agotar los intentos NO lanza excepción: se registra el error y se devuelve
False para que el proceso siga arrancando en modo degradado.
"""

import logging
import time
from typing import Any, Callable

logger = logging.getLogger(__name__)


def wait_until_ready(
    probe: Callable[[], Any],
    max_retries: int = 6,
    retry_delay_ms: int = 1000,
    name: str = "store",
) -> bool:
    """
    Ejecuta `probe()` hasta que tenga éxito o se agoten los intentos.

    Args:
        probe:          Callable sin argumentos; cualquier excepción cuenta como fallo.
        max_retries:    Número total de intentos (incluye el primero).
        retry_delay_ms: Pausa entre intentos en milisegundos (no hay pausa tras el último).
        name:           Nombre descriptivo para los logs.

    Returns:
        True si algún intento tuvo éxito, False si todos fallaron.
    """
    attempts = max(1, max_retries)

    for attempt in range(1, attempts + 1):
        try:
            probe()
        except Exception as e:
            logger.warning(f"🔁 {name}: intento de conexión {attempt}/{attempts} falló: {e}")
            if attempt == attempts:
                logger.error(
                    f"❌ No se pudo conectar a {name} durante el arranque "
                    f"tras {attempts} intentos. Último error: {e}"
                )
                return False
            time.sleep(retry_delay_ms / 1000)
        else:
            logger.info(f"✅ Conectado a {name} (intento {attempt}/{attempts})")
            return True

    return False
