"""
Comandos de teclado do dashboard ao vivo.

Lidos linha a linha do stdin (tecla + Enter); cada caractere é um comando:
  o m s a i  -> aba (overview, metrics, services, alerts, infrastructure)
  1..9       -> seleciona/desseleciona a N-ésima métrica
  t          -> alterna o tema
  q          -> sai
"""
import logging

from .state import TABS

logger = logging.getLogger(__name__)

QUIT = "q"
THEME = "t"
TAB_KEYS = {tab[0]: tab for tab in TABS}

HELP = "[o]verview [m]etrics [s]ervices [a]lerts [i]nfrastructure  [1-9] métrica  [t]ema  [q]uit"


def handle_key(state, key):
    """Aplica um comando ao estado. Retorna False para teclas desconhecidas."""
    key = key.lower()
    if key in TAB_KEYS:
        state.select_tab(TAB_KEYS[key])
        return True
    if key == THEME:
        state.toggle_theme()
        return True
    if key.isdigit() and key != "0":
        idx = int(key) - 1
        if idx < len(state.metrics):
            state.toggle_metric(state.metrics[idx]["key"])
            return True
    return False


def read_commands(stream, poller):
    """Lê comandos até EOF ou `q`; roda numa thread própria no modo ao vivo."""
    for line in iter(stream.readline, ""):
        for key in line.strip():
            if key.lower() == QUIT:
                poller.stop()
                return
            handled = poller.update_view(lambda state, key=key: handle_key(state, key))
            if not handled:
                logger.debug("[KEYS] Comando ignorado: %r", key)
        if not poller.alive:
            return
