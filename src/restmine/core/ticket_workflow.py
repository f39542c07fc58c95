"""
Fluxo dos tickets nos hooks do git: entrar e sair de branches de ticket.
"""

import logging
import re
from typing import Any, Callable, Dict, Optional, Sequence

from ..config.settings import RestmineConfig
from ..errors import ConfigurationError, TransportError
from ..git_monitor.branch_parser import IssueBranchParser, IssueHandle
from .elapsed import format_hours, iso_to_millis, now_millis, time_delta
from .formatting import format_issue_list, format_listing, format_ticket
from .time_args import TimeArgParser, TimeLogRequest

logger = logging.getLogger(__name__)

CHECKOUT_PATTERN = re.compile(r'checkout: moving from ([^ ]+) to ([^ ]+)')
REFLOG_DATE_PATTERN = re.compile(r'HEAD@\{([^}]+)\}')
TICKET_ID_PATTERN = re.compile(r'\d+', re.ASCII)

# Só tickets desse tipo são assumidos automaticamente ao entrar na branch
TAKE_OVER_TYPE = 'iss'


class TicketWorkflow:
    """Orquestra Redmine, git e console para os hooks e comandos do `rr`."""

    def __init__(self, api, git, config: RestmineConfig,
                 output: Callable[[str], None] = print,
                 clock: Callable[[], float] = now_millis):
        self.api = api
        self.git = git
        self.config = config
        self.output = output
        self.clock = clock

    def is_issue_branch(self, branch_name: Optional[str]):
        return IssueBranchParser.classify(branch_name)

    def print_ticket(self, issue: Dict[str, Any]) -> Dict[str, Any]:
        self.output(format_ticket(issue, self.config.column_width, self.config.tty))
        return issue

    def get_ticket(self, issue_id: str) -> Optional[Dict[str, Any]]:
        """Busca e mostra o ticket; falhas de transporte são só reportadas."""
        try:
            issue = self.api.get_ticket(issue_id)
        except TransportError as e:
            logger.error(f"Erro ao buscar ticket {issue_id}: {e}")
            self.output(f"❌ {e}")
            return None
        return self.print_ticket(issue)

    def show_ticket(self, branch_name_or_ticket_id: Optional[str] = None) -> Optional[Dict[str, Any]]:
        """Mostra o ticket de um número, de uma branch ou da branch atual."""
        if branch_name_or_ticket_id and TICKET_ID_PATTERN.fullmatch(branch_name_or_ticket_id):
            return self.get_ticket(branch_name_or_ticket_id)

        branch_name = branch_name_or_ticket_id or self.git.current_branch_name()
        handle = self.is_issue_branch(branch_name)
        if not handle:
            self.output('not an issue branch')
            return None
        return self.get_ticket(handle.id)

    def info(self) -> Optional[Dict[str, Any]]:
        handle = self.is_issue_branch(self.git.current_branch_name())
        if handle:
            return self.get_ticket(handle.id)
        return None

    def log_time(self, issue_id: str, hours: str, activity_id: int,
                 spent_on: Optional[str] = None, comments: Optional[str] = None) -> Any:
        try:
            return self.api.log_time(issue_id, hours, activity_id, spent_on, comments)
        except TransportError as e:
            logger.error(f"Erro ao registrar apontamento no ticket {issue_id}: {e}")
            self.output(f"❌ {e}")
            return None

    def log_time_from_args(self, tokens: Sequence[str]) -> TimeLogRequest:
        """`rr log 2:30 iss 2018-10-20 ...`: interpreta os argumentos e registra as horas."""
        request = TimeArgParser(self.config.activities).parse(tokens, self.git.current_branch_name())
        self.api.log_time(**request.to_payload())
        self.output(f"✅ {request.hours}h registradas no ticket #{request.issue_id} em {request.spent_on}")
        return request

    def commit_msg(self, message_file: str) -> bool:
        """Hook commit-msg: referencia o ticket da branch na mensagem do commit."""
        handle = self.is_issue_branch(self.git.current_branch_name())
        if not handle:
            return False

        with open(message_file, 'a', encoding='utf-8') as f:
            f.write(f"\nrefs #{handle.id}")
        return True

    def take_over(self, handle: IssueHandle, issue: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """Assume o ticket: atribui ao usuário, coloca em andamento e define a categoria padrão."""
        if handle.type.lower() != TAKE_OVER_TYPE:
            return None

        changes: Dict[str, Any] = {}

        assigned_to = issue.get('assigned_to')
        if not assigned_to or int(assigned_to.get('id', 0)) != self.config.user_id:
            changes['assigned_to_id'] = self.config.user_id

        status = issue.get('status') or {}
        if int(status.get('id', 0)) != self.config.edit_id:
            changes['status_id'] = self.config.edit_id

        if self.config.uses_category and not issue.get('category'):
            changes['category_id'] = self.config.category_id

        if not changes:
            return None

        data = {'issue': changes}
        self.api.update_ticket(issue['id'], data)
        return data

    def enter_issue_branch(self, handle: IssueHandle) -> Optional[Dict[str, Any]]:
        issue = self.api.get_ticket(handle.id)
        self.print_ticket(issue)
        return self.take_over(handle, issue)

    def get_checkout_time(self, branch_name: str) -> Optional[str]:
        """Timestamp ISO-8601 do último checkout para a branch."""
        reflog = self.git.reflog(f"to {branch_name}")
        match = REFLOG_DATE_PATTERN.search(reflog or '')
        return match.group(1) if match else None

    def get_activity_id(self, issue_type: str) -> int:
        issue_type = issue_type.lower()
        # Id 0 é o valor do modelo ainda não editado
        activity_id = self.config.activities.get(issue_type)
        if not activity_id:
            raise ConfigurationError(f"unknown issue-type {issue_type}")
        return activity_id

    def leave_issue_branch(self, handle: IssueHandle, branch_name: str) -> Optional[str]:
        """Registra o tempo gasto na branch desde o último checkout dela."""
        checkout_time = self.get_checkout_time(branch_name)
        if not checkout_time:
            logger.debug(f"Nenhum checkout encontrado para {branch_name}")
            return None

        delta = time_delta(iso_to_millis(checkout_time), self.clock())
        hours = format_hours(delta)
        self.output(f"Tempo em #{handle.id}: {hours}h")

        if hours == '0.00':
            return None
        if not self.config.auto_log_time:
            logger.info(f"Apontamento automático desativado, {hours}h não registradas")
            return None

        self.log_time(handle.id, hours, self.get_activity_id(handle.type))
        return hours

    def post_checkout(self, previous_head: str, new_head: str, flag: str) -> None:
        """Hook post-checkout; flag '1' indica troca de branch, '0' checkout de arquivo."""
        reflog = self.git.reflog()
        match = CHECKOUT_PATTERN.search(reflog or '')
        if not match:
            logger.debug("Reflog sem troca de branch, nada a fazer")
            return

        source_branch, target_branch = match.group(1), match.group(2)
        if flag != '1' or source_branch == target_branch:
            return

        logger.info(f"Troca de branch: {source_branch} -> {target_branch}")
        source_issue = self.is_issue_branch(source_branch)
        target_issue = self.is_issue_branch(target_branch)

        if source_issue:
            self.leave_issue_branch(source_issue, source_branch)

        if target_issue:
            self.enter_issue_branch(target_issue)

    def print_statuses(self) -> str:
        return self._print_listing(self.api.get_issue_statuses())

    def print_categories(self) -> str:
        return self._print_listing(self.api.get_issue_categories())

    def print_activities(self) -> str:
        return self._print_listing(self.api.get_activities())

    def print_projects(self) -> str:
        return self._print_listing(self.api.get_projects())

    def print_queries(self) -> str:
        return self._print_listing(self.api.get_queries())

    def print_issues(self) -> str:
        text = format_issue_list(self.api.get_issues())
        self.output(text)
        return text

    def run_query(self, query_id: str) -> str:
        text = format_issue_list(self.api.run_query(query_id))
        self.output(text)
        return text

    def _print_listing(self, items) -> str:
        text = format_listing(items)
        self.output(text)
        return text
