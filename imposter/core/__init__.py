"""
Core game components: configuration, role assignment, naming, rounds, and the session.
"""

from .configuration import (
    CATEGORIES, Category, ConfigurationDraft, GameConfiguration,
    clamp_imposters, get_category, max_imposters_for,
)
from .exceptions import (
    ImposterGameError, InvalidConfiguration, InvalidPlayerIndex, InvalidTransition,
    NameValidationError, OptionsFetchFailed, PrematureTransition,
)
from .naming import ManualScheduler, NamingSequencer, NamingState, threading_scheduler
from .notices import Notice, NoticeLevel
from .player import PlayerRecord
from .roles import (
    DEFAULT_SECRET_ITEM, IMPOSTER_LABEL, ItemSource, RoundAssignment,
    assign_roles, choose_secret_item, select_imposters,
)
from .round_engine import GameOutcome, RoundEngine, Winner, evaluate_outcome
from .session import GameSnapshot, SessionController, SessionStage

__all__ = [
    'CATEGORIES',
    'Category',
    'ConfigurationDraft',
    'GameConfiguration',
    'clamp_imposters',
    'get_category',
    'max_imposters_for',
    'ImposterGameError',
    'InvalidConfiguration',
    'InvalidPlayerIndex',
    'InvalidTransition',
    'NameValidationError',
    'OptionsFetchFailed',
    'PrematureTransition',
    'ManualScheduler',
    'NamingSequencer',
    'NamingState',
    'threading_scheduler',
    'Notice',
    'NoticeLevel',
    'PlayerRecord',
    'DEFAULT_SECRET_ITEM',
    'IMPOSTER_LABEL',
    'ItemSource',
    'RoundAssignment',
    'assign_roles',
    'choose_secret_item',
    'select_imposters',
    'GameOutcome',
    'RoundEngine',
    'Winner',
    'evaluate_outcome',
    'GameSnapshot',
    'SessionController',
    'SessionStage',
]
