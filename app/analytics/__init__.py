"""
Analytics Subsystem

Session-based visitor tracking, conversion flags and dashboard roll-ups.
"""

from .aggregator import AggregationEngine
from .client import AnalyticsClient, generate_session_id
from .errors import AnalyticsError, SessionNotFound, StorageUnavailable, ValidationError
from .factory import create_analytics_module
from .models import ActionType, DeviceType, Session
from .recorder import EventRecorder
from .session_store import SessionStore

__all__ = [
    'AggregationEngine',
    'AnalyticsClient',
    'generate_session_id',
    'AnalyticsError',
    'SessionNotFound',
    'StorageUnavailable',
    'ValidationError',
    'create_analytics_module',
    'ActionType',
    'DeviceType',
    'Session',
    'EventRecorder',
    'SessionStore',
]
