from .kinds import Kinds
from .options import BackendOptions
from .config import ActiveBackendConfig, get_default_config
from .logger import DispatchLogger, backend_tag

__all__ = [
    'Kinds',
    'BackendOptions',
    'ActiveBackendConfig',
    'get_default_config',
    'DispatchLogger',
    'backend_tag',
]
