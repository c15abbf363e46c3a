"""
Site config component.
"""

from sjba_api.components.site_config.component import (
    MISSING_PARAM,
    get_config,
    parse_keys,
    set_config,
)
from sjba_api.components.site_config.ports import SiteConfigRepoPort

__all__ = [
    "get_config",
    "set_config",
    "parse_keys",
    "MISSING_PARAM",
    "SiteConfigRepoPort",
]
