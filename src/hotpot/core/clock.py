"""Fixed-step simulation clock for the hot pot.

The clock uses fixed-size ticks for deterministic behavior regardless of how
often the async loop wakes up. Each tick advances simulated time by
``tick_seconds`` and every rate is multiplied by it, so the pace of the
simulation only depends on the speed multiplier.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable, Optional

from ..simulator.thermal_model import (
    HeatSource,
    PotState,
    ThermalInvariantError,
    ThermalParameters,
    net_heat_rate,
    total_heat_capacity,
)
from .events import Event, boiling_changed_event, error_event, temp_reading_event
from .states import PotPhase, select_phase

logger = logging.getLogger(__name__)

# Simulated seconds per tick
TICK_SIZE_SECONDS: float = 1.0

# Default speed: one tick per 100ms of wall-clock time
DEFAULT_SPEED_MULTIPLIER: float = 10.0

# Cap on ticks per update so a long pause cannot trigger a burst of catch-up
MAX_TICKS_PER_UPDATE: int = 100

# Type alias for event listeners
EventListener = Callable[[Event], Awaitable[None]]


class SimulationClock:
    """Tick driver that advances the pot state.

    Transition rule, evaluated on the pre-tick state:
    - At or above the boiling point with positive net heat: BOILING. The
      temperature is pinned to the boiling point and liquid evaporates down
      to the minimum volume.
    - Otherwise: HEATING. The temperature moves by net heat over heat
      capacity and never drops below ambient.

    Example:
        clock = SimulationClock(state, params, HeatSource(params))
        clock.add_listener(on_event)
        await clock.start()
        ...
        await clock.stop()
    """

    def __init__(
        self,
        state: PotState,
        params: ThermalParameters,
        heat_source: HeatSource,
        lock: Optional[asyncio.Lock] = None,
        speed_multiplier: float = DEFAULT_SPEED_MULTIPLIER,
        tick_seconds: float = TICK_SIZE_SECONDS,
    ) -> None:
        """Initialize the clock.

        Args:
            state: Pot state advanced by each tick.
            params: Thermal parameters.
            heat_source: Heater model used for the net heat rate.
            lock: Lock shared with every other writer of the state.
            speed_multiplier: Simulated seconds per wall-clock second.
            tick_seconds: Simulated seconds per tick.
        """
        self.state = state
        self.params = params
        self.heat_source = heat_source
        self.tick_seconds = tick_seconds
        self.speed_multiplier = speed_multiplier
        self._lock = lock or asyncio.Lock()
        self._accumulated_time = 0.0
        self._boil_changes: list[Event] = []
        self._listeners: list[EventListener] = []
        self._running = False
        self._update_task: Optional[asyncio.Task[None]] = None

    @property
    def lock(self) -> asyncio.Lock:
        """Exclusive-access lock for the pot state."""
        return self._lock

    @property
    def is_running(self) -> bool:
        """Whether the background loop is running."""
        return self._running

    @property
    def phase(self) -> PotPhase:
        """Phase chosen by the most recent tick."""
        return PotPhase.BOILING if self.state.is_boiling else PotPhase.HEATING

    def add_listener(self, listener: EventListener) -> None:
        """Add event listener for tick readings and boiling changes.

        Args:
            listener: Async function taking Event.
        """
        self._listeners.append(listener)

    def remove_listener(self, listener: EventListener) -> None:
        """Remove an event listener.

        Args:
            listener: Previously added listener function.
        """
        if listener in self._listeners:
            self._listeners.remove(listener)

    async def emit_event(self, event: Event) -> None:
        """Deliver an event to every listener, logging listener failures."""
        for listener in self._listeners:
            try:
                await listener(event)
            except Exception as e:
                logger.error("Event listener error: %s", e)

    def set_speed_multiplier(self, multiplier: float) -> None:
        """Set simulation speed multiplier."""
        multiplier = max(0.1, min(1000.0, multiplier))
        self.speed_multiplier = multiplier
        logger.info("Simulation speed set to %.1fx", multiplier)

    def reset(self, state: PotState) -> None:
        """Point the clock at a fresh state and drop partial ticks."""
        self.state = state
        self._accumulated_time = 0.0
        self._boil_changes.clear()

    def tick(self) -> PotPhase:
        """Advance the simulation by one fixed tick.

        Returns:
            The phase the pot is in after the tick.

        Raises:
            ThermalInvariantError: If the pot has no heat capacity.
        """
        state = self.state
        p = self.params

        net_heat = net_heat_rate(state, p, self.heat_source)
        capacity = total_heat_capacity(state, p)
        if capacity <= 0:
            raise ThermalInvariantError(
                f"Pot heat capacity must be positive, got {capacity} "
                f"(volume={state.volume})"
            )

        phase = select_phase(state.temperature, net_heat, p.boiling_point)
        if phase is PotPhase.BOILING:
            state.is_boiling = True
            state.temperature = p.boiling_point
            if state.volume > p.min_volume:
                evaporated = p.evaporation_rate * self.tick_seconds
                state.volume = max(p.min_volume, state.volume - evaporated)
        else:
            state.is_boiling = False
            delta_t = net_heat * self.tick_seconds / capacity
            state.temperature = max(p.ambient_temp, state.temperature + delta_t)

        state.simulated_time_seconds += self.tick_seconds
        state.ticks += 1
        return phase

    def update(self, dt: float) -> int:
        """Update simulation for a wall-clock time step.

        Converts wall-clock time to whole ticks based on the speed multiplier.
        Partial ticks carry over to the next update. Every boiling start or
        stop during these ticks is queued for take_boil_changes().

        Args:
            dt: Wall-clock time step in seconds.

        Returns:
            Number of ticks applied.
        """
        self._accumulated_time += dt * self.speed_multiplier

        ticks = 0
        # Small tolerance so 0.1s * 10x lands on a whole tick despite rounding
        threshold = self.tick_seconds - 1e-9
        while self._accumulated_time >= threshold and ticks < MAX_TICKS_PER_UPDATE:
            was_boiling = self.state.is_boiling
            self.tick()
            if self.state.is_boiling != was_boiling:
                self._record_boil_change()
            self._accumulated_time -= self.tick_seconds
            ticks += 1

        if ticks >= MAX_TICKS_PER_UPDATE and self._accumulated_time > self.tick_seconds:
            logger.warning(
                "Tick cap reached: discarding %.1fs of accumulated time",
                self._accumulated_time,
            )
            self._accumulated_time = self._accumulated_time % self.tick_seconds

        self._accumulated_time = max(0.0, self._accumulated_time)
        return ticks

    def take_boil_changes(self) -> list[Event]:
        """Return and clear the boiling changes queued by update()."""
        changes = self._boil_changes
        self._boil_changes = []
        return changes

    def _record_boil_change(self) -> None:
        state = self.state
        logger.info(
            "Pot %s at %.1f°C (t=%.0fs)",
            "started boiling" if state.is_boiling else "stopped boiling",
            state.temperature,
            state.simulated_time_seconds,
        )
        self._boil_changes.append(boiling_changed_event(
            state.is_boiling, state.temperature, state.volume,
        ))

    async def run(self, update_interval: float = 0.1) -> None:
        """Run the tick loop until stop() is called.

        Each update runs under the state lock, so ticks never overlap each
        other or a mutation requested from outside.

        Args:
            update_interval: Wall-clock seconds between updates.
        """
        self._running = True
        logger.info("Simulation clock started (speed: %.1fx)", self.speed_multiplier)

        last_log_time = 0.0
        log_interval = 10.0  # Log every 10 simulated seconds

        while self._running:
            try:
                async with self._lock:
                    ticks = self.update(update_interval)
                    boil_changes = self.take_boil_changes()
            except ThermalInvariantError as e:
                logger.error("Simulation halted: %s", e)
                await self.emit_event(error_event(str(e), error_type="invariant"))
                self._running = False
                raise

            if ticks:
                for event in boil_changes:
                    await self.emit_event(event)
                state = self.state
                await self.emit_event(temp_reading_event(
                    state.temperature,
                    state.volume,
                    state.is_boiling,
                    state.simulated_time_seconds,
                ))

            if self.state.simulated_time_seconds - last_log_time >= log_interval:
                last_log_time = self.state.simulated_time_seconds
                self._log_state()

            try:
                await asyncio.sleep(update_interval)
            except asyncio.CancelledError:
                break

        logger.info("Simulation clock stopped")

    async def start(self, update_interval: float = 0.1) -> None:
        """Start the tick loop as a background task."""
        if self._update_task is not None:
            return
        self._update_task = asyncio.create_task(
            self.run(update_interval),
            name="simulation-clock",
        )

    async def stop(self) -> None:
        """Stop the tick loop. No further ticks are applied afterwards."""
        self._running = False
        if self._update_task is not None:
            self._update_task.cancel()
            try:
                await self._update_task
            except (asyncio.CancelledError, ThermalInvariantError):
                # Invariant failures were already logged and published by run()
                pass
            self._update_task = None

    def _log_state(self) -> None:
        state = self.state
        logger.debug(
            "SIM t=%.1fs | phase=%s | temp=%.2f°C | volume=%.1fmL | heater=%d | food=%d",
            state.simulated_time_seconds,
            self.phase.name,
            state.temperature,
            state.volume,
            state.heater_setting,
            len(state.inventory),
        )
