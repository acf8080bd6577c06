"""
Exchange Orchestrator Module

Group lifecycle, shuffle, the wish/address approval tracks and santa disclosure.
"""

from santa_api.workflow.orchestrator.disclosure import notify_santas
from santa_api.workflow.orchestrator.exchange import ExchangeOrchestrator
from santa_api.workflow.orchestrator.exchange import utcnow
from santa_api.workflow.orchestrator.group_status import build_group_status
from santa_api.workflow.orchestrator.group_status import build_participant_list

__all__ = [
    "ExchangeOrchestrator",
    "build_group_status",
    "build_participant_list",
    "notify_santas",
    "utcnow",
]
