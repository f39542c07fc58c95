"""
Gerenciador de configurações do restmine.
"""

import copy
import json
import os
import sys
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterator, Optional
import logging

from ..errors import ConfigurationError

logger = logging.getLogger(__name__)

CONFIG_FILE_NAME = '.restmine.json'

CONFIG_TEMPLATE = {
    'host': 'host.domain.tld',
    'https': True,
    'key': 'xxxxxxxxxxxxxxxx',
    'user_id': 0,
    'project_id': 0,
    'edit_id': 0,
    'category_id': 0,
    'activity': {
        'org': 0,
        'iss': 0
    }
}


class ActivityTable(Mapping):
    """Tabela somente leitura de código de atividade (3 letras) para id do Redmine."""

    def __init__(self, activities: Optional[Dict[str, int]] = None):
        self._activities: Dict[str, int] = {}
        for code, activity_id in (activities or {}).items():
            try:
                self._activities[str(code)] = int(activity_id)
            except (TypeError, ValueError):
                raise ConfigurationError(f"invalid activity id for {code}: {activity_id!r}")

    def __getitem__(self, code: str) -> int:
        return self._activities[code]

    def __iter__(self) -> Iterator[str]:
        return iter(self._activities)

    def __len__(self) -> int:
        return len(self._activities)

    def __repr__(self) -> str:
        return f"ActivityTable({self._activities!r})"

    def resolve(self, code: str) -> int:
        """Retorna o id da atividade ou falha com ConfigurationError."""
        if code not in self._activities:
            raise ConfigurationError(f"unknown activity {code}")
        return self._activities[code]


@dataclass
class RestmineConfig:
    """Configuração tipada usada pelo cliente, pelos hooks e pela CLI."""
    host: str = ''
    key: str = ''
    https: bool = True
    port: Optional[int] = None
    user_id: int = 0
    project_id: Optional[str] = None
    edit_id: int = 0
    category_id: Optional[int] = None
    activities: ActivityTable = field(default_factory=ActivityTable)
    auto_log_time: bool = True
    column_width: int = 20
    tty: bool = False
    verify_ssl: bool = True

    @property
    def base_url(self) -> str:
        scheme = 'https' if self.https else 'http'
        port = self.port or (443 if self.https else 80)
        return f"{scheme}://{self.host}:{port}"

    @property
    def uses_category(self) -> bool:
        return self.category_id is not None


class ConfigManager:
    """Gerenciador de configurações do restmine."""

    def __init__(self, config_file: Optional[str] = None, search_dir: Optional[str] = None):
        if config_file is None:
            config_file = self._find_config_file(search_dir)

        self.config_file = config_file
        self._config: Dict[str, Any] = {}
        self._load_config()

    @staticmethod
    def _find_config_file(search_dir: Optional[str] = None) -> str:
        """Procura .restmine.json no diretório do repositório, senão usa ~/.config/restmine."""
        local_file = Path(search_dir or os.getcwd()) / CONFIG_FILE_NAME
        if local_file.exists():
            return str(local_file)
        return str(Path.home() / ".config" / "restmine" / "config.json")

    def _load_config(self):
        """Carrega configurações do arquivo."""
        self._config = self._get_default_config()
        if not os.path.exists(self.config_file):
            logger.debug(f"Arquivo de configuração não encontrado: {self.config_file}")
            return

        try:
            with open(self.config_file, 'r', encoding='utf-8') as f:
                loaded = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.error(f"Erro ao carregar configurações: {e}")
            raise ConfigurationError(f"cannot read {self.config_file}: {e}") from e

        if not isinstance(loaded, dict):
            raise ConfigurationError(f"{self.config_file} must contain a JSON object")

        self._config.update(loaded)
        logger.debug(f"Configurações carregadas de {self.config_file}")

    def _save_config(self):
        """Salva configurações no arquivo."""
        os.makedirs(os.path.dirname(os.path.abspath(self.config_file)), exist_ok=True)
        with open(self.config_file, 'w', encoding='utf-8') as f:
            json.dump(self._config, f, indent=2, ensure_ascii=False)
        logger.debug(f"Configurações salvas em {self.config_file}")

    def _get_default_config(self) -> Dict[str, Any]:
        """Retorna configurações padrão."""
        return {
            'host': '',
            'https': True,
            'key': '',
            'user_id': 0,
            'project_id': None,
            'edit_id': 0,
            'activity': {},
            'auto_log_time': True,
            'column_width': 20,
            'verify_ssl': True,
        }

    def exists(self) -> bool:
        return os.path.exists(self.config_file)

    def get_setting(self, key: str, default: Any = None) -> Any:
        """Obtém uma configuração."""
        keys = key.split('.')
        value = self._config

        try:
            for k in keys:
                value = value[k]
            return value
        except (KeyError, TypeError):
            return default

    def set_setting(self, key: str, value: Any):
        """Define uma configuração."""
        keys = key.split('.')
        config = self._config

        # Navega até o penúltimo nível
        for k in keys[:-1]:
            if k not in config:
                config[k] = {}
            config = config[k]

        config[keys[-1]] = value
        self._save_config()
        logger.debug(f"Configuração definida: {key} = {value}")

    def update_config(self, updates: Dict[str, Any]):
        """Atualiza múltiplas configurações."""
        for key, value in updates.items():
            self.set_setting(key, value)
        logger.info(f"Atualizadas {len(updates)} configurações")

    def get_all_settings(self) -> Dict[str, Any]:
        """Retorna todas as configurações."""
        return self._config.copy()

    def write_template(self) -> bool:
        """Cria o arquivo de configuração modelo, se ainda não existir."""
        if self.exists():
            return False

        self._config = copy.deepcopy(CONFIG_TEMPLATE)
        self._save_config()
        logger.info(f"Arquivo de configuração criado: {self.config_file}")
        return True

    def add_to_gitignore(self, gitignore: str = '.gitignore') -> bool:
        """Acrescenta o arquivo de configuração ao .gitignore, se ainda não estiver lá."""
        entry = os.path.basename(self.config_file)
        content = ''
        if os.path.exists(gitignore):
            with open(gitignore, 'r', encoding='utf-8') as f:
                content = f.read()
        if entry in (line.strip() for line in content.splitlines()):
            return False

        with open(gitignore, 'a', encoding='utf-8') as f:
            if content and not content.endswith('\n'):
                f.write('\n')
            f.write(f"{entry}\n")
        logger.info(f"{entry} adicionado a {gitignore}")
        return True

    def to_config(self) -> RestmineConfig:
        """Converte o JSON carregado em uma RestmineConfig tipada."""
        settings = self._config
        category_id = settings.get('category_id')
        port = settings.get('port')
        tty = settings.get('tty')

        try:
            return RestmineConfig(
                host=str(settings.get('host') or ''),
                key=str(settings.get('key') or ''),
                https=bool(settings.get('https', True)),
                port=int(port) if port is not None else None,
                user_id=int(settings.get('user_id') or 0),
                project_id=str(settings['project_id']) if settings.get('project_id') is not None else None,
                edit_id=int(settings.get('edit_id') or 0),
                category_id=int(category_id) if category_id is not None else None,
                activities=ActivityTable(settings.get('activity') or {}),
                auto_log_time=bool(settings.get('auto_log_time', True)),
                column_width=int(settings.get('column_width') or 20),
                tty=sys.stdout.isatty() if tty is None else bool(tty),
                verify_ssl=bool(settings.get('verify_ssl', True)),
            )
        except (TypeError, ValueError) as e:
            raise ConfigurationError(f"invalid configuration in {self.config_file}: {e}") from e

    def get_config_file_path(self) -> str:
        """Retorna caminho do arquivo de configuração."""
        return self.config_file
