"""
Acesso ao repositório Git: branch atual e consultas ao reflog.
"""

from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Optional
import logging

import pygit2

from ..errors import ConfigurationError

logger = logging.getLogger(__name__)


class GitRepository:
    """Capacidades do Git usadas pelos hooks: nome da branch atual e reflog do HEAD."""

    def __init__(self, path: str = '.'):
        self.path = path
        self._repo: Optional[pygit2.Repository] = None

    @staticmethod
    def is_git_repository(path: str) -> bool:
        """Verifica se o caminho é um repositório Git."""
        git_dir = Path(path) / ".git"
        return git_dir.exists() and (git_dir.is_dir() or git_dir.is_file())

    @property
    def repo(self) -> pygit2.Repository:
        if self._repo is None:
            git_dir = pygit2.discover_repository(str(Path(self.path).resolve()))
            if git_dir is None:
                raise ConfigurationError(f"not a git repository: {self.path}")
            self._repo = pygit2.Repository(git_dir)
        return self._repo

    def get_top_level(self) -> str:
        """Raiz da working tree (equivalente a git rev-parse --show-toplevel)."""
        workdir = self.repo.workdir
        if workdir is None:
            raise ConfigurationError("bare repositories are not supported")
        return workdir.rstrip('/\\')

    def hooks_dir(self) -> Path:
        return Path(self.repo.path) / 'hooks'

    def current_branch_name(self) -> Optional[str]:
        """Nome curto da branch atual; None com HEAD destacado."""
        repo = self.repo
        if repo.head_is_detached:
            logger.debug("HEAD destacado, nenhuma branch atual")
            return None

        if repo.head_is_unborn:
            # Branch sem commits ainda: o HEAD simbólico aponta para refs/heads/<nome>
            target = repo.lookup_reference('HEAD').target
            return str(target).replace('refs/heads/', '', 1)

        return repo.head.shorthand

    def reflog(self, grep: Optional[str] = None) -> str:
        """Linha mais recente do reflog do HEAD, opcionalmente filtrada pela mensagem.

        O formato segue `git reflog -n 1 --date=iso-strict`:
        `4554b66 HEAD@{2018-03-28T21:01:42+02:00}: checkout: moving from master to test`
        Retorna string vazia quando nada corresponde.
        """
        try:
            head = self.repo.lookup_reference('HEAD')
            for entry in head.log():
                message = (entry.message or '').strip()
                if grep and grep not in message:
                    continue
                return self._format_entry(entry, message)
        except (KeyError, pygit2.GitError) as e:
            logger.error(f"Erro ao ler reflog: {e}")
            raise ConfigurationError(f"cannot read reflog: {e}") from e

        return ''

    @staticmethod
    def _format_entry(entry, message: str) -> str:
        committer = entry.committer
        tz = timezone(timedelta(minutes=committer.offset))
        timestamp = datetime.fromtimestamp(committer.time, tz).isoformat()
        return f"{str(entry.oid_new)[:7]} HEAD@{{{timestamp}}}: {message}"
