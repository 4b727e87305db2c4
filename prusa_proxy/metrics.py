"""
Prometheus metrics for printer state.
"""

import logging

from prometheus_client import CollectorRegistry, generate_latest
from prometheus_client.core import GaugeMetricFamily

from .errors import ProxyError
from .operations import PrinterOperations

logger = logging.getLogger(__name__)

STATE_METRIC = 'prusa_proxy_printer_state'
STATE_HELP = 'Current printer state reported by PrusaLink (1 = in this state)'


class PrinterStateCollector:
    """Queries every configured printer on each scrape."""

    def __init__(self, operations: PrinterOperations):
        self.operations = operations

    def describe(self):
        return [GaugeMetricFamily(STATE_METRIC, STATE_HELP, labels=['printer', 'state'])]

    def collect(self):
        g_state = GaugeMetricFamily(STATE_METRIC, STATE_HELP, labels=['printer', 'state'])

        for printer in self.operations.config.printers:
            address = printer.address
            try:
                handler = self.operations.get_handler(address)
            except ProxyError as e:
                logger.warning('Skipping metrics for %s: %s', address, e.message)
                continue

            try:
                state = handler.get_state()
            except ProxyError as e:
                logger.warning('Error getting status for printer %s: %s', address, e.message)
                continue

            g_state.add_metric([address, state], 1)

        yield g_state


def build_registry(operations: PrinterOperations) -> CollectorRegistry:
    """Registry holding only the printer state collector."""
    registry = CollectorRegistry()
    registry.register(PrinterStateCollector(operations))
    return registry


def render_metrics(registry: CollectorRegistry) -> bytes:
    return generate_latest(registry)
