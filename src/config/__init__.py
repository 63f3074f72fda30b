# Bot configuration: environment and solver settings
from .config import Config, SolverSettings, load_settings

__all__ = ['Config', 'SolverSettings', 'load_settings']
