"""Application configuration using Pydantic Settings."""

from pydantic_settings import BaseSettings, SettingsConfigDict


class LayoutSettings(BaseSettings):
    """Generation banding and initial horizontal placement."""

    model_config = SettingsConfigDict(env_prefix="LAYOUT_")

    generation_gap: float = 160.0
    node_spacing: float = 140.0


class ForceSettings(BaseSettings):
    """Force simulation tuning."""

    model_config = SettingsConfigDict(env_prefix="FORCE_")

    spouse_distance: float = 80.0
    spouse_strength: float = 1.5
    parent_distance: float = 120.0
    parent_strength: float = 0.5
    sibling_distance: float = 120.0
    sibling_strength: float = 0.5

    charge_strength: float = -800.0
    collide_radius: float = 50.0
    collide_iterations: int = 2
    y_strength: float = 3.0
    x_strength: float = 0.2

    alpha_min: float = 0.001
    # 1 - alpha_min ** (1 / 300): cools from 1 to alpha_min in ~300 ticks
    alpha_decay: float = 0.0228
    velocity_decay: float = 0.4
    drag_alpha_target: float = 0.3

    tick_rate: float = 60.0
    max_ticks_per_advance: int = 4
    seed: int = 0


class InteractionSettings(BaseSettings):
    """Drag, proximity and zoom constants."""

    model_config = SettingsConfigDict(env_prefix="INTERACTION_")

    proximity_threshold: float = 150.0
    node_radius: float = 30.0
    click_tolerance: float = 3.0
    zoom_min: float = 0.1
    zoom_max: float = 4.0
    wheel_step: float = 0.002


class UISettings(BaseSettings):
    """Browser host settings."""

    model_config = SettingsConfigDict(env_prefix="UI_")

    title: str = "Family Graph"
    port: int = 8080
    width: int = 1200
    height: int = 800
    frame_interval: float = 1 / 30


class Settings(BaseSettings):
    """Main application settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    log_level: str = "INFO"

    layout: LayoutSettings = LayoutSettings()
    forces: ForceSettings = ForceSettings()
    interaction: InteractionSettings = InteractionSettings()
    ui: UISettings = UISettings()


settings = Settings()
