"""
Role assignment: picks the imposters and the round's secret item.
"""

import logging
import random
from dataclasses import dataclass
from enum import Enum
from typing import Callable, FrozenSet, List, Mapping, Optional, Sequence, Tuple

from .configuration import GameConfiguration

logger = logging.getLogger(__name__)

IMPOSTER_LABEL = "Imposter"
DEFAULT_SECRET_ITEM = "Mystery Item"

OptionsMapping = Mapping[str, Sequence[str]]


class ItemSource(Enum):
    """Where the secret item was drawn from."""
    CATEGORY = "category"
    GLOBAL_POOL = "global_pool"
    DEFAULT = "default"


@dataclass(frozen=True)
class RoundAssignment:
    """Secret roles for one game. Immutable for the life of the round."""
    imposter_indices: FrozenSet[int]
    secret_item: str
    item_source: ItemSource = ItemSource.CATEGORY

    def is_imposter(self, player_index: int) -> bool:
        return player_index in self.imposter_indices

    def reveal_for(self, player_index: int) -> str:
        """What a player sees during their private reveal."""
        return IMPOSTER_LABEL if self.is_imposter(player_index) else self.secret_item


def select_imposters(player_count: int, imposter_count: int,
                     rng: Optional[random.Random] = None) -> FrozenSet[int]:
    """Choose ``imposter_count`` distinct player indices uniformly from ``[0, player_count)``."""
    if not 0 <= imposter_count <= player_count:
        raise ValueError(
            f"Cannot pick {imposter_count} imposters from {player_count} players"
        )
    rng = rng or random.Random()
    return frozenset(rng.sample(range(player_count), imposter_count))


def _category_pool(options: OptionsMapping, category: str) -> List[str]:
    key = category.strip().lower()
    for name, items in options.items():
        if name.lower() == key:
            return list(items or [])
    return []


def _global_pool(options: OptionsMapping, category: str) -> List[str]:
    return [item for items in options.values() for item in (items or [])]


def _default_pool(options: OptionsMapping, category: str) -> List[str]:
    return [DEFAULT_SECRET_ITEM]


ItemStrategy = Tuple[ItemSource, Callable[[OptionsMapping, str], List[str]]]

# Tried in order; the first non-empty pool wins.
ITEM_STRATEGIES: List[ItemStrategy] = [
    (ItemSource.CATEGORY, _category_pool),
    (ItemSource.GLOBAL_POOL, _global_pool),
    (ItemSource.DEFAULT, _default_pool),
]


def choose_secret_item(options: OptionsMapping, category: str,
                       rng: Optional[random.Random] = None,
                       strategies: Sequence[ItemStrategy] = ITEM_STRATEGIES) -> Tuple[str, ItemSource]:
    """
    Pick the secret item for a category.

    Falls back from the exact category to the pool of every category, then to
    ``DEFAULT_SECRET_ITEM``.

    Returns:
        (item, source) tuple
    """
    rng = rng or random.Random()
    for source, strategy in strategies:
        pool = strategy(options, category)
        if pool:
            if source is not ItemSource.CATEGORY:
                logger.warning("No options for category '%s'; using %s", category, source.value)
            return rng.choice(pool), source
    raise LookupError(f"No secret item strategy produced an item for '{category}'")


def assign_roles(configuration: GameConfiguration, options: OptionsMapping,
                 rng: Optional[random.Random] = None) -> RoundAssignment:
    """Create the round assignment for a configuration. An empty mapping means no options."""
    rng = rng or random.Random()
    imposters = select_imposters(configuration.player_count, configuration.imposter_count, rng)
    item, source = choose_secret_item(options, configuration.category, rng)
    logger.debug("Assigned %d imposters, item source %s", len(imposters), source.value)
    return RoundAssignment(imposter_indices=imposters, secret_item=item, item_source=source)
