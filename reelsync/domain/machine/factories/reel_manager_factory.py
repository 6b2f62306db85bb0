# reelsync/domain/machine/factories/reel_manager_factory.py
import logging
import os
from typing import Dict, Any, List, Optional

from ..entities.reel import DEFAULT_STRIP, Reel
from ..entities.reel_manager import DEFAULT_STOP_DELAY, ReelManager
from reelsync.infrastructure.rng.rng_provider import RNGProvider
from reelsync.infrastructure.timing.timer_manager import TimerManager


class ReelManagerFactory:
    """
    Factory for creating ReelManager instances from configuration.
    """
    def __init__(self, rng_provider: Optional[RNGProvider] = None, event_dispatcher=None):
        """
        Initialize the factory.

        Args:
            rng_provider: Provider for the reels' RNG strategies
            event_dispatcher: Dispatcher handed to every created manager
        """
        self.logger = logging.getLogger("domain.machine.factory")
        self.rng_provider = rng_provider or RNGProvider()
        self.event_dispatcher = event_dispatcher

    def create_manager(self, config: Dict[str, Any], manager_id: Optional[str] = None,
                       timer=None) -> ReelManager:
        """
        Create a reel manager and its reels.

        Args:
            config: Machine configuration dictionary
            manager_id: Overrides ``machine_id`` from the config
            timer: Timer to use instead of one built from ``timing.time_scale``

        Returns:
            Initialized ReelManager
        """
        manager_id = manager_id or config.get("machine_id", "reel_manager")
        layout = config.get("layout", {})
        timing = config.get("timing", {})

        number_of_reels = layout.get("number_of_reels", 3)
        symbols_per_reel = layout.get("symbols_per_reel", 3)
        settle_time = timing.get("settle_time", 0)

        if timer is None:
            timer = TimerManager(timing.get("time_scale", 1.0))

        rng_config = config.get("rng", {})
        rng = self.rng_provider.create_from_config(rng_config)
        self.logger.debug(f"Using RNG {rng!r} for {manager_id}")

        strips = self._load_strips(config.get("reels", {}), number_of_reels)

        def build_reel(index: int, window_size: int, symbol_height: int) -> Reel:
            return Reel(strips[index], window_size=window_size, symbol_height=symbol_height,
                        reel_id=f"{manager_id}.reel{index + 1}", rng=rng, timer=timer,
                        settle_time=settle_time)

        self.logger.info(f"Creating reel manager: {manager_id}")

        return ReelManager(
            number_of_reels,
            symbols_per_reel,
            layout.get("reel_width", 0),
            layout.get("symbol_height", 0),
            reel_factory=build_reel,
            timer=timer,
            stop_delay=timing.get("stop_delay", DEFAULT_STOP_DELAY),
            stop_delays=timing.get("stop_delays"),
            event_dispatcher=self.event_dispatcher,
            manager_id=manager_id,
        )

    def _load_strips(self, reels_config: Dict[str, Any], number_of_reels: int) -> List[List[Any]]:
        """
        Take symbol strips in the order the config lists them and pad with DEFAULT_STRIP.

        Args:
            reels_config: Mapping of reel name to list of symbol IDs
            number_of_reels: Number of strips needed

        Returns:
            Exactly ``number_of_reels`` strips
        """
        strips = []

        for reel_name, symbols in reels_config.items():
            # Skip comment entries
            if reel_name.startswith('_'):
                continue

            if not isinstance(symbols, list):
                self.logger.warning(f"Invalid reel format {reel_name}: expected list")
                continue

            strips.append(symbols)
            self.logger.debug(f"Loaded reel {reel_name} with {len(symbols)} symbols")

        if len(strips) > number_of_reels:
            self.logger.warning(f"{len(strips)} strips configured for {number_of_reels} reels, "
                                f"ignoring the extra ones")
            strips = strips[:number_of_reels]

        while len(strips) < number_of_reels:
            self.logger.warning(f"No strip for reel {len(strips) + 1}, using the default strip")
            strips.append(list(DEFAULT_STRIP))

        return strips

    def create_manager_from_file(self, config_loader, file_path: str, schema=None,
                                 manager_id: Optional[str] = None, timer=None) -> ReelManager:
        """
        Create a manager from a configuration file.

        Args:
            config_loader: YamlConfigLoader instance
            file_path: Path to the YAML file
            schema: Optional JSON schema (dict or path) to validate against
            manager_id: Optional explicit ID; defaults to ``machine_id`` or the file name
            timer: Optional timer override

        Returns:
            Initialized ReelManager
        """
        self.logger.info(f"Creating reel manager from file: {file_path}")

        config = config_loader.load_file(file_path, schema)

        if manager_id is None and "machine_id" not in config:
            manager_id = os.path.splitext(os.path.basename(file_path))[0]

        return self.create_manager(config, manager_id, timer)
