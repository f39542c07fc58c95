"""
Cliente para a API REST do Redmine.
"""

import logging
from typing import Any, Dict, List, Optional

import requests

from ..config.settings import RestmineConfig
from ..errors import ConfigurationError, TransportError

logger = logging.getLogger(__name__)

REQUEST_TIMEOUT = 30


class RedmineClient:
    """Cliente para interação com o Redmine (uma requisição por chamada, sem retry)."""

    def __init__(self, config: RestmineConfig, session: Optional[requests.Session] = None):
        self.config = config
        self.base_url = config.base_url
        self._session = session or requests.Session()
        self._session.headers.update({
            'X-Redmine-API-Key': config.key,
            'Content-Type': 'application/json; charset=utf-8',
        })
        # Desligar a verificação TLS precisa ser explícito na configuração
        self._session.verify = config.verify_ssl
        if not config.verify_ssl:
            logger.warning(f"Verificação TLS desativada para {self.base_url}")

    def send_request(self, method: str, path: str, payload: Optional[Dict[str, Any]] = None,
                     params: Optional[Dict[str, Any]] = None) -> Any:
        """Envia a requisição e devolve o corpo JSON (ou None se vazio)."""
        url = f"{self.base_url}{path}"
        logger.debug(f"{method} {url}")

        try:
            response = self._session.request(
                method,
                url,
                json=payload,
                params=params,
                timeout=REQUEST_TIMEOUT,
            )
        except requests.RequestException as e:
            logger.error(f"Erro de rede em {method} {path}: {e}")
            raise TransportError(f"request failed: {e}") from e

        if response.status_code < 200 or response.status_code > 299:
            message = f"request failed, status: {response.status_code} {response.reason}"
            logger.error(f"{method} {path}: {message}")
            raise TransportError(
                message,
                status=response.status_code,
                reason=response.reason,
                response_text=response.text,
            )

        if not response.text or not response.text.strip():
            return None

        try:
            return response.json()
        except ValueError as e:
            raise TransportError(f"invalid JSON from {path}: {e}",
                                 status=response.status_code,
                                 response_text=response.text) from e

    def _get(self, path: str, key: str, params: Optional[Dict[str, Any]] = None) -> Any:
        """GET que extrai a chave raiz da resposta do Redmine (issue, issues, projects...)."""
        body = self.send_request('GET', path, params=params)
        if not isinstance(body, dict) or key not in body:
            raise TransportError(f"unexpected response from {path}: missing '{key}'")
        return body[key]

    def _require_project(self) -> str:
        if not self.config.project_id:
            raise ConfigurationError("project_id is not configured")
        return self.config.project_id

    def get_ticket(self, issue_id: str) -> Dict[str, Any]:
        """Busca um ticket do Redmine."""
        return self._get(f"/issues/{issue_id}.json", 'issue')

    def get_issues(self) -> List[Dict[str, Any]]:
        """Tickets do projeto configurado, por prioridade."""
        params = {'project_id': self._require_project(), 'sort': 'priority:desc'}
        return self._get('/issues.json', 'issues', params=params)

    def update_ticket(self, issue_id: str, data: Dict[str, Any]) -> None:
        self.send_request('PUT', f"/issues/{issue_id}.json", data)
        logger.info(f"Ticket {issue_id} atualizado: {data}")

    def log_time(self, issue_id: str, hours: str, activity_id: int,
                 spent_on: Optional[str] = None, comments: Optional[str] = None) -> Any:
        """Registra um apontamento de horas no ticket."""
        time_entry: Dict[str, Any] = {
            'issue_id': issue_id,
            'hours': hours,
            'activity_id': activity_id,
        }
        if spent_on:
            time_entry['spent_on'] = spent_on
        if comments:
            time_entry['comments'] = comments

        result = self.send_request('POST', '/time_entries.json', {'time_entry': time_entry})
        logger.info(f"Apontamento registrado no ticket {issue_id}: {hours}h")
        return result

    def get_issue_statuses(self) -> List[Dict[str, Any]]:
        return self._get('/issue_statuses.json', 'issue_statuses')

    def get_issue_categories(self) -> List[Dict[str, Any]]:
        project_id = self._require_project()
        return self._get(f"/projects/{project_id}/issue_categories.json", 'issue_categories')

    def get_activities(self) -> List[Dict[str, Any]]:
        return self._get('/enumerations/time_entry_activities.json', 'time_entry_activities')

    def get_projects(self) -> List[Dict[str, Any]]:
        return self._get('/projects.json', 'projects')

    def get_queries(self) -> List[Dict[str, Any]]:
        return self._get('/queries.json', 'queries')

    def run_query(self, query_id: str) -> List[Dict[str, Any]]:
        """Executa uma consulta salva e devolve os tickets encontrados."""
        params: Dict[str, Any] = {'query_id': query_id}
        if self.config.project_id:
            params['project_id'] = self.config.project_id
        return self._get('/issues.json', 'issues', params=params)
