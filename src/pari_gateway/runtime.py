"""Wiring: one hub, one store, one service and one dispatcher per application."""

from dataclasses import dataclass

from config.settings import Settings
from src.pari_broadcast.hub import ConnectionHub
from src.pari_common.datetime_utils import Clock, utc_now
from src.pari_exchange.service import ExchangeService
from src.pari_exchange.store import ExchangeStore
from src.pari_gateway.dispatcher import CommandDispatcher


@dataclass
class ExchangeRuntime:
    hub: ConnectionHub
    service: ExchangeService
    dispatcher: CommandDispatcher


def build_runtime(settings: Settings, clock: Clock = utc_now) -> ExchangeRuntime:
    hub = ConnectionHub(queue_size=settings.OUTBOUND_QUEUE_SIZE)
    store = ExchangeStore.from_settings(settings, clock=clock)
    service = ExchangeService(store, hub, settings, clock=clock)
    return ExchangeRuntime(hub=hub, service=service, dispatcher=CommandDispatcher(service, hub))
