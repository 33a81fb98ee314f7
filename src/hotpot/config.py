"""Configuration management for the hot pot simulator."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Optional

import yaml

from .simulator.thermal_model import ThermalParameters

logger = logging.getLogger(__name__)


def _load_dotenv(env_path: Path) -> None:
    """Load environment variables from .env file."""
    if not env_path.exists():
        return

    with open(env_path) as f:
        for line in f:
            line = line.strip()
            if not line or line.startswith("#"):
                continue
            if "=" in line:
                key, _, value = line.partition("=")
                key = key.strip()
                value = value.strip().strip('"').strip("'")
                # Only set if not already in environment
                if key not in os.environ:
                    os.environ[key] = value


@dataclass
class LiquidPreset:
    """A ready-made pour, e.g. a jug of cold water."""

    amount: float  # mL
    temperature: float  # °C


def _default_presets() -> dict[str, LiquidPreset]:
    return {
        "cold_water": LiquidPreset(amount=200.0, temperature=10.0),
        "hot_broth": LiquidPreset(amount=200.0, temperature=60.0),
    }


@dataclass
class HotPotConfig:
    """Main configuration class for the hot pot simulator.

    All temperature values are in Celsius, volumes in millilitres.
    """

    physics: ThermalParameters = field(default_factory=ThermalParameters)

    # Simulation settings
    speed_multiplier: float = 10.0  # Simulated seconds per wall-clock second
    tick_interval: float = 0.1  # Wall-clock seconds between clock updates
    random_seed: Optional[int] = None  # Seed for the heater flicker

    liquid_presets: dict[str, LiquidPreset] = field(default_factory=_default_presets)

    # API settings
    api_host: str = "0.0.0.0"
    api_port: int = 8000

    # Logging
    log_level: str = "INFO"


def load_config(
    config_path: Path | None = None,
    env: str | None = None,
) -> HotPotConfig:
    """Load configuration from YAML files and environment variables.

    Configuration is loaded with the following priority (highest to lowest):
    1. Environment variables (HOTPOT_*)
    2. Environment-specific config (development.yaml, production.yaml)
    3. Default config (default.yaml)
    4. Hardcoded defaults

    Args:
        config_path: Path to config directory. Defaults to project config/.
        env: Environment name. Defaults to HOTPOT_ENV or "development".

    Returns:
        Loaded HotPotConfig instance.
    """
    config = HotPotConfig()

    if config_path is None:
        # Try relative to this file, then fall back to cwd
        module_dir = Path(__file__).parent
        config_path = module_dir.parent.parent / "config"
        if not config_path.exists():
            config_path = Path.cwd() / "config"

    _load_dotenv(config_path.parent / ".env")

    default_path = config_path / "default.yaml"
    if default_path.exists():
        config = _merge_yaml(config, default_path)
        logger.debug("Loaded default config from %s", default_path)

    if env is None:
        env = os.environ.get("HOTPOT_ENV", "development")

    env_config_path = config_path / f"{env}.yaml"
    if env_config_path.exists():
        config = _merge_yaml(config, env_config_path)
        logger.debug("Loaded %s config from %s", env, env_config_path)

    config = _apply_env_overrides(config)

    logger.info("Configuration loaded for environment: %s", env)
    return config


def _merge_yaml(config: HotPotConfig, path: Path) -> HotPotConfig:
    """Merge YAML file into config."""
    with open(path) as f:
        data = yaml.safe_load(f)

    if data is None:
        return config

    if "physics" in data:
        known = {f.name for f in fields(ThermalParameters)}
        for key, value in (data["physics"] or {}).items():
            if key in known:
                setattr(config.physics, key, value)
            else:
                logger.warning("Unknown physics setting in %s: %s", path, key)

    if "simulation" in data:
        sim = data["simulation"]
        config.speed_multiplier = sim.get("speed", config.speed_multiplier)
        config.tick_interval = sim.get("tick_interval", config.tick_interval)
        config.random_seed = sim.get("seed", config.random_seed)

    if "presets" in data:
        for name, preset in (data["presets"] or {}).items():
            config.liquid_presets[name] = LiquidPreset(**preset)

    if "api" in data:
        api = data["api"]
        config.api_host = api.get("host", config.api_host)
        config.api_port = api.get("port", config.api_port)

    config.log_level = data.get("log_level", config.log_level)

    return config


def _apply_env_overrides(config: HotPotConfig) -> HotPotConfig:
    """Apply environment variable overrides."""
    env_map: dict[str, tuple[str, str | None, type[Any]]] = {
        "HOTPOT_AMBIENT_TEMP": ("physics", "ambient_temp", float),
        "HOTPOT_BOILING_POINT": ("physics", "boiling_point", float),
        "HOTPOT_MAX_VOLUME": ("physics", "max_volume", float),
        "HOTPOT_MIN_VOLUME": ("physics", "min_volume", float),
        "HOTPOT_INITIAL_VOLUME": ("physics", "initial_volume", float),
        "HOTPOT_HEATER_SETTING": ("physics", "initial_heater_setting", int),
        "HOTPOT_POWER_PER_SETTING": ("physics", "power_per_setting", float),
        "HOTPOT_HEATER_NOISE": ("physics", "heater_noise", float),
        "HOTPOT_SPEED": ("speed_multiplier", None, float),
        "HOTPOT_TICK_INTERVAL": ("tick_interval", None, float),
        "HOTPOT_SEED": ("random_seed", None, int),
        "HOTPOT_API_HOST": ("api_host", None, str),
        "HOTPOT_API_PORT": ("api_port", None, int),
        "HOTPOT_LOG_LEVEL": ("log_level", None, str),
    }

    for env_var, (attr, sub_attr, converter) in env_map.items():
        value = os.environ.get(env_var)
        if value is not None:
            try:
                converted = converter(value)
                if sub_attr:
                    setattr(getattr(config, attr), sub_attr, converted)
                else:
                    setattr(config, attr, converted)
                logger.debug("Applied env override: %s=%s", env_var, converted)
            except (ValueError, TypeError) as e:
                logger.warning("Invalid env var %s=%s: %s", env_var, value, e)

    return config
