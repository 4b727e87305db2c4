"""
Printer Operations
==================

Resolves printer addresses to credentials and jobs, and runs pause,
resume and stop against one printer or all configured printers.
"""

import logging
import time
from typing import Callable, List, Optional, Tuple

from .config import (
    ProxyConfig, OPERATIONS, DEFAULT_TIMEOUT,
    STOP_MAX_ATTEMPTS, STOP_POLL_INTERVAL, STOP_MAX_BACKOFF,
)
from .errors import (
    ProxyError, PrinterNotFoundError, NoJobError, JobLookupError,
)
from .handlers import PrusaLinkHandler
from .models import PrinterRecord, StopOutcome, StopResult

logger = logging.getLogger(__name__)


class PrinterOperations:
    """Operations against the printers of one ProxyConfig."""

    def __init__(self, config: ProxyConfig,
                 handler_class: type = PrusaLinkHandler,
                 timeout: Optional[float] = DEFAULT_TIMEOUT,
                 max_attempts: int = STOP_MAX_ATTEMPTS,
                 poll_interval: float = STOP_POLL_INTERVAL,
                 max_backoff: float = STOP_MAX_BACKOFF,
                 sleep: Callable[[float], None] = time.sleep):
        self.config = config
        self.handler_class = handler_class
        self.timeout = timeout
        self.max_attempts = max(1, max_attempts)
        self.poll_interval = poll_interval
        self.max_backoff = max_backoff
        self.sleep = sleep

    # =========================================================================
    # Resolution
    # =========================================================================

    def get_handler(self, address: str) -> PrusaLinkHandler:
        """
        Build a handler for a configured address.

        Raises:
            PrinterNotFoundError: username or password missing
        """
        username = self.config.get_username(address)
        if not username:
            raise PrinterNotFoundError(address, 'username')
        password = self.config.get_password(address)
        if not password:
            raise PrinterNotFoundError(address, 'password')

        return self.handler_class(
            PrinterRecord(address=address, username=username, password=password),
            timeout=self.timeout,
        )

    def resolve(self, address: str) -> Tuple[PrusaLinkHandler, int]:
        """
        Get a handler and the active job ID for an address.

        Raises:
            PrinterNotFoundError: credentials missing
            JobLookupError: job ID could not be fetched
            NoJobError: printer has no job
        """
        handler = self.get_handler(address)
        try:
            job_id = handler.get_job_id()
        except ProxyError as e:
            raise JobLookupError(address, e)
        if job_id == 0:
            raise NoJobError(address)
        return handler, job_id

    # =========================================================================
    # Single Printer
    # =========================================================================

    def run(self, address: str, operation: str):
        """
        Run pause, resume or stop on one printer.

        Raises:
            ProxyError: first failure, with the status to answer with
        """
        handler, job_id = self.resolve(address)
        try:
            handler.run_operation(job_id, operation)
        except ProxyError as e:
            raise ProxyError(f'Failed to {operation} the printer: {e.message}', e.status_code) from e
        logger.info('Printer %s %s (job %s)', address, OPERATIONS[operation]['past'], job_id)

    # =========================================================================
    # All Printers
    # =========================================================================

    def run_all(self, operation: str) -> List[str]:
        """
        Run pause or resume on every printer in configured order.

        Failures are reported and do not stop the loop.

        Returns:
            Report lines, one per printer
        """
        lines = []
        past = OPERATIONS[operation]['past']

        for printer in self.config.printers:
            address = printer.address
            try:
                handler, job_id = self.resolve(address)
            except ProxyError as e:
                logger.warning('Skipping %s for %s: %s', operation, address, e.message)
                lines.append(f'Error getting configuration for printer {address}: {e.message}')
                continue

            try:
                handler.run_operation(job_id, operation)
            except ProxyError as e:
                logger.warning('Failed to %s printer %s: %s', operation, address, e.message)
                lines.append(f'Failed to {operation} the printer {address}: {e.message}')
                continue

            lines.append(f'Printer {address} {past} successfully.')

        return lines

    def backoff(self, attempt: int) -> float:
        """Delay before the attempt after ``attempt``."""
        return min(self.poll_interval * 2 ** (attempt - 1), self.max_backoff)

    def stop_printer(self, address: str) -> StopResult:
        """
        Stop one printer, retrying until its job is gone.

        Each attempt resolves the job, issues DELETE, then polls the
        status and the job ID. The printer is stopped once the refreshed
        job ID is 0.
        """
        result = StopResult(address=address)

        for attempt in range(1, self.max_attempts + 1):
            result.attempts = attempt

            try:
                handler, job_id = self.resolve(address)
            except NoJobError as e:
                if attempt == 1:
                    result.emit(f'Error getting configuration for printer {address}: {e.message}')
                    return result.finish(StopOutcome.FAILED)
                # Previous DELETE took effect
                result.emit(f'No job found for printer {address}.')
                result.emit(f'Printer {address} stopped successfully.')
                return result.finish(StopOutcome.STOPPED)
            except ProxyError as e:
                result.emit(f'Error getting configuration for printer {address}: {e.message}')
                return result.finish(StopOutcome.FAILED)

            try:
                handler.run_operation(job_id, 'stop')
            except ProxyError as e:
                result.emit(f'Failed to stop the printer {address}: {e.message}')
                return result.finish(StopOutcome.FAILED)

            try:
                status = handler.get_status()
            except ProxyError as e:
                result.emit(f'Error getting status for printer {address}: {e.message}')
                return result.finish(StopOutcome.FAILED)

            if status.printer.is_stopping():
                result.emit(f'Printer {address} is stopping, waiting for it to finish.')
                self._wait(address, attempt)
                continue

            try:
                remaining_job = handler.get_job_id()
            except ProxyError as e:
                result.emit(f'Error getting status for printer {address}: {e.message}')
                return result.finish(StopOutcome.FAILED)

            if remaining_job != 0:
                result.emit(f'{address} - still not stopped, trying again.')
                self._wait(address, attempt)
                continue

            result.emit(f'No job found for printer {address}.')
            result.emit(f'Printer {address} stopped successfully.')
            return result.finish(StopOutcome.STOPPED)

        result.emit(f'Printer {address} did not stop after {self.max_attempts} attempts.')
        logger.warning('Printer %s still stopping after %d attempts', address, self.max_attempts)
        return result.finish(StopOutcome.STILL_STOPPING)

    def _wait(self, address: str, attempt: int):
        if attempt >= self.max_attempts:
            return
        delay = self.backoff(attempt)
        logger.info('Printer %s not stopped yet (attempt %d), retrying in %.1fs',
                    address, attempt, delay)
        self.sleep(delay)

    def stop_all(self) -> List[StopResult]:
        """Stop every printer, last configured first."""
        results = []
        for printer in reversed(self.config.printers):
            result = self.stop_printer(printer.address)
            if result.outcome == StopOutcome.FAILED:
                logger.warning('Failed to stop printer %s: %s',
                               printer.address, result.lines[-1] if result.lines else '')
            results.append(result)
        return results
