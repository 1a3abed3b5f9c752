from pydantic_settings import BaseSettings

from engine.solar_thermal.constants import PhysicalConstants


class Settings(BaseSettings):
    model_config = {"env_prefix": "", "case_sensitive": False}

    # App
    environment: str = "development"
    debug: bool = True
    app_name: str = "SolarLoop"
    cors_origins: str = "*"
    log_json: bool = False
    engine_trace: bool = False

    # Simulation limits
    max_duration_steps: int = 8760
    simulate_rate_limit: int = 30
    simulate_rate_window_seconds: int = 60
    # Only enable behind a reverse proxy that sets X-Forwarded-For itself
    trust_forwarded_for: bool = False

    # Physical constants injected into the engine
    fluid_density: float = 1000.0
    gravity: float = 9.81
    peak_irradiance: float = 1000.0

    @property
    def physical_constants(self) -> PhysicalConstants:
        return PhysicalConstants(
            fluid_density=self.fluid_density,
            gravity=self.gravity,
            peak_irradiance=self.peak_irradiance,
        )


settings = Settings()
