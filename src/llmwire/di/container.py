"""Dependency injection container."""
from dependency_injector import containers, providers

from llmwire.core.credentials import CredentialStore
from llmwire.core.logger import LoggerService
from llmwire.core.settings import Settings
from llmwire.providers.factory import ProviderFactory
from llmwire.providers.manager import ProviderManager
from llmwire.providers.mapper_factory import MapperFactory
from llmwire.providers.model_mapper_factory import ModelMapperFactory
from llmwire.providers.transport import Transport


class Container(containers.DeclarativeContainer):
    """Composition root of the library.

    The default credential store is the only place the process-wide
    fallback credentials live.
    """

    # Settings
    settings = providers.Singleton(Settings)

    # Core services
    logger = providers.Singleton(LoggerService, settings_instance=settings)

    # HTTP client, overridden in tests with a mock transport client
    http_client = providers.Object(None)

    transport = providers.Singleton(
        Transport,
        settings=settings,
        logger=logger,
        client=http_client,
    )

    credential_store = providers.Singleton(CredentialStore, settings=settings)

    # Provider services
    mapper_factory = providers.Singleton(MapperFactory, settings=settings, logger=logger)
    model_mapper_factory = providers.Singleton(ModelMapperFactory, logger=logger)

    provider_factory = providers.Singleton(
        ProviderFactory,
        logger=logger,
        transport=transport,
    )

    provider_manager = providers.Singleton(
        ProviderManager,
        logger=logger,
        credential_store=credential_store,
        provider_factory=provider_factory,
        mapper_factory=mapper_factory,
        model_mapper_factory=model_mapper_factory,
    )


# Module-level container used by the package facade
container = Container()
