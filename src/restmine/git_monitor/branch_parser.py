"""
Parser de branches para extrair o ticket do Redmine do nome da branch.
"""

import re
from dataclasses import dataclass
from typing import Union


@dataclass(frozen=True)
class IssueHandle:
    """Ticket codificado no nome da branch (ex: iss1234 -> type='iss', id='1234')."""
    type: str
    id: str


class IssueBranchParser:
    """Reconhece branches de ticket: 3 letras de tipo seguidas do número do ticket."""

    # Padrão: iss1234, org55
    ISSUE_BRANCH_PATTERN = re.compile(r'([a-zA-Z]{3})(\d+)', re.ASCII)

    @classmethod
    def classify(cls, branch_name: str) -> Union[IssueHandle, bool]:
        """Retorna o IssueHandle da branch ou False se não for branch de ticket."""
        if not branch_name:
            return False

        match = cls.ISSUE_BRANCH_PATTERN.fullmatch(branch_name)
        if not match:
            return False

        return IssueHandle(type=match.group(1), id=match.group(2))
