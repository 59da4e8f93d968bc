"""Lookup of executor classes by provider name."""

import logging
from typing import Dict, List, Tuple, Type

from ..core.config import Settings, settings
from ..core.constants import ProviderNames
from ..core.errors import UnknownProviderError
from .alchemy_client import AlchemyClient
from .base import Executor
from .bitext_client import BitextClient
from .chatterbox_client import ChatterboxClient
from .mturk_client import MechanicalTurkClient
from .repustate_client import RepustateClient
from .semantria_client import SemantriaClient
from .skyttle_client import SkyttleClient
from .viralheat_client import ViralheatClient

logger = logging.getLogger(__name__)

EXECUTORS: Dict[str, Type] = {
    ProviderNames.ALCHEMY: AlchemyClient,
    ProviderNames.BITEXT: BitextClient,
    ProviderNames.CHATTERBOX: ChatterboxClient,
    ProviderNames.REPUSTATE: RepustateClient,
    ProviderNames.SEMANTRIA: SemantriaClient,
    ProviderNames.SKYTTLE: SkyttleClient,
    ProviderNames.VIRALHEAT: ViralheatClient,
    ProviderNames.MECHANICAL_TURK: MechanicalTurkClient,
}

# Machine providers offered by the robot command
MACHINE_PROVIDERS = [name for name in EXECUTORS if name != ProviderNames.MECHANICAL_TURK]


def create_executor(name: str, **kwargs) -> Executor:
    """Instantiate the executor registered under ``name``."""
    try:
        executor_class = EXECUTORS[name]
    except KeyError:
        raise UnknownProviderError(f"Unknown provider: {name}") from None
    return executor_class(**kwargs)


def supported_providers(language: str) -> List[str]:
    """Machine providers able to analyze documents in ``language``."""
    return [name for name in MACHINE_PROVIDERS if EXECUTORS[name]().is_language_supported(language)]


def credentials_for(name: str, config: Settings = settings) -> Tuple[str, str]:
    """(key, secret) pair for a provider; secret is empty where the provider has none."""
    credentials = {
        ProviderNames.ALCHEMY: (config.alchemy_api_key, ""),
        ProviderNames.BITEXT: (config.bitext_login, config.bitext_password),
        ProviderNames.CHATTERBOX: (config.chatterbox_api_key, ""),
        ProviderNames.REPUSTATE: (config.repustate_api_key, ""),
        ProviderNames.SEMANTRIA: (config.semantria_key, config.semantria_secret),
        ProviderNames.SKYTTLE: (config.skyttle_api_key, ""),
        ProviderNames.VIRALHEAT: (config.viralheat_api_key, ""),
        ProviderNames.MECHANICAL_TURK: (config.mturk_access_key, config.mturk_secret_key),
    }
    if name not in credentials:
        raise UnknownProviderError(f"Unknown provider: {name}")
    return credentials[name]


def requires_secret(name: str) -> bool:
    return name in (ProviderNames.BITEXT, ProviderNames.SEMANTRIA, ProviderNames.MECHANICAL_TURK)
