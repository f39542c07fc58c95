"""Configuração do pytest e fixtures compartilhadas.

Coloca o diretório `src` no sys.path para importar o pacote sem instalação.
"""

import json
import sys
from pathlib import Path
from typing import Dict, List, Optional

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from restmine.config.settings import ActivityTable, RestmineConfig  # noqa: E402


class FakeGit:
    """Substituto do GitRepository: branch fixa e reflog por filtro."""

    def __init__(self, branch: Optional[str] = None, reflog: Optional[Dict[Optional[str], str]] = None):
        self.branch = branch
        self.reflog_lines = reflog or {}
        self.reflog_calls: List[Optional[str]] = []

    def current_branch_name(self) -> Optional[str]:
        return self.branch

    def reflog(self, grep: Optional[str] = None) -> str:
        self.reflog_calls.append(grep)
        return self.reflog_lines.get(grep, '')


@pytest.fixture
def activities():
    return ActivityTable({'asd': 12, 'iss': 33, 'org': 10})


@pytest.fixture
def config(activities):
    return RestmineConfig(
        host='redmine.example.org',
        key='secret',
        user_id=2,
        project_id='7',
        edit_id=4,
        category_id=3,
        activities=activities,
        tty=False,
    )


@pytest.fixture
def fake_git():
    return FakeGit(branch='iss5677')


@pytest.fixture
def config_file(tmp_path):
    path = tmp_path / '.restmine.json'
    path.write_text(json.dumps({
        'host': 'redmine.example.org',
        'https': True,
        'key': 'secret',
        'user_id': 2,
        'project_id': 7,
        'edit_id': 4,
        'category_id': 3,
        'activity': {'iss': 33, 'org': 10},
        'tty': False,
    }), encoding='utf-8')
    return path
