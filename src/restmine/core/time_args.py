"""
Parser dos argumentos livres do apontamento de horas.

Cada argumento é classificado de forma independente pelo primeiro padrão que
casar, na ordem abaixo, então a ordem dos argumentos não importa:

    2018-10-20   data (spent_on)
    2:30  :45    horas no formato H:MM (hours)
    iss          código de atividade (activity_id)
    1234         número do ticket (issue_id)
    iss1234      atividade + ticket
    qualquer     comentário

Quando o mesmo campo aparece mais de uma vez, vale o último.
"""

import re
from dataclasses import dataclass
from datetime import date
from typing import Any, Callable, Dict, List, Optional, Sequence

from ..config.settings import ActivityTable
from ..errors import ValidationError
from ..git_monitor.branch_parser import IssueBranchParser

DEFAULT_ACTIVITY = 'iss'

# Valor inicial de hours; continua assim se nenhum H:MM válido for informado
NO_HOURS = '0'
ZERO_HOURS = '0.00'


@dataclass
class TimeLogRequest:
    """Apontamento de horas pronto para ser enviado ao Redmine."""
    issue_id: str
    hours: str
    activity_id: int
    spent_on: str
    comments: Optional[str] = None

    def to_payload(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            'issue_id': self.issue_id,
            'hours': self.hours,
            'activity_id': self.activity_id,
            'spent_on': self.spent_on,
        }
        if self.comments is not None:
            payload['comments'] = self.comments
        return payload


@dataclass(frozen=True)
class TokenMatcher:
    """Par predicado/extrator: o regex decide, o extrator grava os campos."""
    name: str
    pattern: re.Pattern
    extract: Callable[['TimeArgParser', re.Match, Dict[str, Any]], None]


def _set_date(parser: 'TimeArgParser', match: re.Match, fields: Dict[str, Any]):
    fields['spent_on'] = match.group(0)


def _set_hours(parser: 'TimeArgParser', match: re.Match, fields: Dict[str, Any]):
    hours = int(match.group('hours') or 0)
    minutes = int(match.group('minutes'))
    fields['hours'] = f"{(hours * 60 + minutes) / 60:.2f}"


def _set_activity(parser: 'TimeArgParser', match: re.Match, fields: Dict[str, Any]):
    fields['activity_id'] = parser.activity_id_for(match.group(0), match.group(0))


def _set_issue(parser: 'TimeArgParser', match: re.Match, fields: Dict[str, Any]):
    fields['issue_id'] = match.group(0)


def _set_activity_and_issue(parser: 'TimeArgParser', match: re.Match, fields: Dict[str, Any]):
    fields['activity_id'] = parser.activity_id_for(match.group('activity'), match.group(0))
    fields['issue_id'] = match.group('issue')


def _set_comments(parser: 'TimeArgParser', match: re.Match, fields: Dict[str, Any]):
    fields['comments'] = match.group(0)


TOKEN_MATCHERS: List[TokenMatcher] = [
    TokenMatcher('date', re.compile(r'\d{4}-\d{2}-\d{2}', re.ASCII), _set_date),
    TokenMatcher('hours', re.compile(r'(?P<hours>\d{0,2}):(?P<minutes>\d{2})', re.ASCII), _set_hours),
    TokenMatcher('activity', re.compile(r'[a-zA-Z]{3}'), _set_activity),
    TokenMatcher('issue', re.compile(r'\d+', re.ASCII), _set_issue),
    TokenMatcher('activity_issue', re.compile(r'(?P<activity>[a-zA-Z]{3})(?P<issue>\d+)', re.ASCII),
                 _set_activity_and_issue),
    TokenMatcher('comments', re.compile(r'.*', re.DOTALL), _set_comments),
]


class TimeArgParser:
    """Transforma os argumentos de `rr log` em um TimeLogRequest."""

    def __init__(self, activities: ActivityTable, matchers: Optional[List[TokenMatcher]] = None):
        self.activities = activities
        self.matchers = matchers or TOKEN_MATCHERS

    def activity_id_for(self, code: str, token: str) -> int:
        if code not in self.activities:
            raise ValidationError(f"unknown activity {token}")
        return self.activities[code]

    def parse(self, tokens: Sequence[str], current_branch: Optional[str] = None) -> TimeLogRequest:
        fields: Dict[str, Any] = {'hours': NO_HOURS}

        # O ticket da branch atual vale até que um argumento o substitua
        handle = IssueBranchParser.classify(current_branch)
        if handle:
            fields['issue_id'] = handle.id

        for token in tokens:
            for matcher in self.matchers:
                match = matcher.pattern.fullmatch(token)
                if match:
                    matcher.extract(self, match, fields)
                    break

        if fields['hours'] in (NO_HOURS, ZERO_HOURS):
            raise ValidationError("no time given?")

        if not fields.get('issue_id'):
            raise ValidationError("not on a iss-branch and no issue-id given?")

        if 'activity_id' not in fields:
            fields['activity_id'] = self.activities.resolve(DEFAULT_ACTIVITY)

        if 'spent_on' not in fields:
            fields['spent_on'] = date.today().isoformat()

        return TimeLogRequest(**fields)
