import logging
import os
from typing import Dict, List, Any, Optional

import yaml

from .model import Configuration, ConfigurationError

logger = logging.getLogger(__name__)

CONFIG_ENVIRONMENT = 'ADDRESS_FORMATTER_CONFIG'
BUNDLED_CONFIG = os.path.join(os.path.dirname(os.path.abspath(__file__)), 'conf')


def _open(path:str):
    if not os.path.isfile(path):
        raise ConfigurationError("No file: {}".format(path))
    return open(path, 'r', encoding='utf-8')


def load_file(path:str) -> Any:
    # BaseLoader keeps every scalar a string, `NO` or `ON` are codes, not booleans
    with _open(path) as fp:
        return yaml.load(fp, Loader=yaml.BaseLoader)


def load_stream(path:str) -> List[Any]:
    with _open(path) as fp:
        return list(yaml.load_all(fp, Loader=yaml.BaseLoader))


def load_templates(path:str) -> Dict[str, Any]:
    """
    Merge all country template files of a directory, in file name order

    :param path: directory containing the ``*.yaml`` country files
    :returns: dictionary of country code to raw template entry
    """
    if not os.path.isdir(path):
        raise ConfigurationError("No directory: {}".format(path))

    templates = {}
    for filename in sorted(os.listdir(path)):
        if not filename.endswith('.yaml'):
            continue
        data = load_file(os.path.join(path, filename))
        if not isinstance(data, dict):
            continue
        templates.update(data)
    return templates


def load_components(path:str) -> List[Any]:
    components = []
    for document in load_stream(path):
        if not isinstance(document, dict) or 'name' not in document:
            continue
        aliases = document.get('aliases', None)
        if not isinstance(aliases, list):
            aliases = []
        components.append((document['name'], [a for a in aliases if isinstance(a, str)]))
    return components


def load_configuration(path:Optional[str]=None) -> Configuration:
    """
    Load a formatter configuration from an address-formatting style directory

    The directory has to contain ``countries/*.yaml``, ``components.yaml``,
    ``state_codes.yaml`` and ``county_codes.yaml``.

    :param path: configuration directory, defaults to the directory named in
                 the ``ADDRESS_FORMATTER_CONFIG`` environment variable or the
                 configuration bundled with this package
    :returns: Configuration instance
    """
    if path is None:
        path = os.environ.get(CONFIG_ENVIRONMENT, BUNDLED_CONFIG)

    templates = load_templates(os.path.join(path, 'countries'))
    components = load_components(os.path.join(path, 'components.yaml'))
    state_codes = load_file(os.path.join(path, 'state_codes.yaml'))
    county_codes = load_file(os.path.join(path, 'county_codes.yaml'))

    config = Configuration(
        templates,
        components,
        state_codes=state_codes if isinstance(state_codes, dict) else {},
        county_codes=county_codes if isinstance(county_codes, dict) else {}
    )
    logger.info(
        'Loaded address formatter configuration from %s: %d templates, %d components',
        path, len(config.templates), len(config.components)
    )
    return config
