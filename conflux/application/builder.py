"""
Retriever construction from options.

Turns declarative store options into store descriptors through the store
and processor registries, then builds the retriever around them.
"""

import logging
from typing import List, Optional

from ..core.interfaces.stores import StoreDescriptor
from ..core.services.retriever import ConfigRetriever
from ..infrastructure.config.models import RetrieverOptions, StoreOptions
from ..infrastructure.processors import ProcessorRegistry, create_default_processor_registry
from ..infrastructure.stores import StoreRegistry, create_default_store_registry

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILE = "conf/config.json"


def default_store_options() -> List[StoreOptions]:
    """Stores prepended when ``include_default_stores`` is enabled."""
    return [
        StoreOptions(type="file", format="json", config={'path': DEFAULT_CONFIG_FILE},
                     optional=True, name="default-file"),
        StoreOptions(type="env", name="default-env"),
    ]


def build_descriptors(
    store_options: List[StoreOptions],
    stores: Optional[StoreRegistry] = None,
    processors: Optional[ProcessorRegistry] = None
) -> List[StoreDescriptor]:
    """
    Create store descriptors in declaration order.

    Args:
        store_options: Store options; order defines merge precedence
        stores: Store registry (defaults to the built-in types)
        processors: Processor registry (defaults to the built-in formats)

    Returns:
        Store descriptors

    Raises:
        ConfigurationError: If a store type or format is unknown
    """
    stores = stores or create_default_store_registry()
    processors = processors or create_default_processor_registry()

    descriptors = []
    for index, options in enumerate(store_options):
        name = options.name or f"{options.type}#{index}"
        descriptors.append(StoreDescriptor(
            name=name,
            store=stores.create(options.type, options.config, processors),
            processor=processors.create(options.format, options.config),
            optional=options.optional,
            options=dict(options.config),
        ))
        logger.debug(f"Configured store '{name}' (type={options.type}, format={options.format})")

    return descriptors


def build_retriever(
    options: RetrieverOptions,
    stores: Optional[StoreRegistry] = None,
    processors: Optional[ProcessorRegistry] = None
) -> ConfigRetriever:
    """
    Build a configuration retriever from options.

    Args:
        options: Retriever options
        stores: Store registry (defaults to the built-in types)
        processors: Processor registry (defaults to the built-in formats)

    Returns:
        Configured, not yet started, retriever
    """
    store_options = list(options.stores)
    if options.include_default_stores:
        store_options = default_store_options() + store_options

    descriptors = build_descriptors(store_options, stores, processors)
    logger.info(
        f"Built configuration retriever with {len(descriptors)} store(s), "
        f"scan period {options.scan_period}s"
    )
    return ConfigRetriever(descriptors, scan_period=options.scan_period)
