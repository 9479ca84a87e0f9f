"""Concurrent fact collection.

Runs the probes of one platform on a bounded thread pool and builds a
single Facts bundle. Probe failures are isolated: a probe that raises or
does not finish before the deadline leaves its fact absent, and the rest
of the bundle is still delivered.
"""

import logging
import time
from concurrent.futures import ThreadPoolExecutor, TimeoutError as FuturesTimeout, as_completed
from typing import Any, Callable, Dict, Optional

from tqdm import tqdm

from refurb_inspector.models import Facts, HardwareTelemetry
from refurb_inspector.probes import PlatformProbes, select_probes
from refurb_inspector.utils.exceptions import ProbeError

logger = logging.getLogger(__name__)


class FactCollector:
    """Collects facts from platform probes in parallel."""

    def __init__(
        self,
        probes: Optional[PlatformProbes] = None,
        timeout: float = 10.0,
        max_workers: int = 4,
        show_progress: bool = False,
    ):
        """Initialize the collector.

        Args:
            probes: Probe set to run (default: selected from this platform)
            timeout: Seconds to wait for all probes before giving up on
                the stragglers
            max_workers: Thread pool size
            show_progress: Display a progress bar while probing
        """
        self.probes = probes or select_probes(command_timeout=timeout)
        self.timeout = timeout
        self.max_workers = max(1, max_workers)
        self.show_progress = show_progress

    def _run_probe(self, name: str, probe: Callable[[], Any]) -> Any:
        """Worker function: run one probe, resolving every failure to None."""
        try:
            return probe()
        except ProbeError as e:
            logger.warning(f"Probe {name} unavailable: {e}")
            return None
        except Exception as e:
            logger.error(f"Unexpected error in probe {name}: {e}", exc_info=True)
            return None

    def _run_all(self, probes: Dict[str, Callable[[], Any]], desc: str) -> Dict[str, Any]:
        results: Dict[str, Any] = {}
        start_time = time.time()

        executor = ThreadPoolExecutor(max_workers=self.max_workers, thread_name_prefix="probe")
        try:
            future_to_name = {
                executor.submit(self._run_probe, name, probe): name
                for name, probe in probes.items()
            }

            with tqdm(
                total=len(future_to_name), desc=desc, unit="probe", disable=not self.show_progress
            ) as pbar:
                try:
                    for future in as_completed(future_to_name, timeout=self.timeout):
                        results[future_to_name[future]] = future.result()
                        pbar.update(1)
                except FuturesTimeout:
                    pending = sorted(
                        name for future, name in future_to_name.items() if not future.done()
                    )
                    logger.warning(
                        f"Probes did not finish within {self.timeout}s, "
                        f"treating as absent: {', '.join(pending)}"
                    )
        finally:
            # Do not block on stragglers; their subprocesses carry their own timeout
            executor.shutdown(wait=False, cancel_futures=True)

        logger.info(
            f"Collected {sum(1 for v in results.values() if v)} of {len(probes)} "
            f"facts in {time.time() - start_time:.2f}s"
        )
        return results

    def collect(self) -> Facts:
        """Run every fact probe and build the fact bundle.

        Returns:
            Facts with absent values for failed or timed-out probes
        """
        probes = {
            name: (lambda name=name: self.probes.run_probe(name))
            for name in self.probes.probe_names()
        }
        results = self._run_all(probes, "Collecting facts")

        values = {name: value for name, value in results.items() if value is not None}
        return Facts(platform=self.probes.platform_name, **values)

    def collect_telemetry(self) -> HardwareTelemetry:
        """Run the pass-through health probes.

        Returns:
            HardwareTelemetry with None for unavailable readouts
        """
        results = self._run_all(
            {
                "battery": self.probes.battery_info,
                "storage": self.probes.storage_health,
            },
            "Reading hardware",
        )
        return HardwareTelemetry(
            platform=self.probes.platform_name,
            battery=results.get("battery"),
            storage=results.get("storage"),
        )
