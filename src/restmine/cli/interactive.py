"""
Instalação dos hooks e configuração interativa com InquirerPy.
"""

import logging
import os
import stat
import sys
from pathlib import Path
from typing import Any, Dict, List

from InquirerPy import inquirer

from ..config.settings import ConfigManager
from ..git_monitor.repository import GitRepository

logger = logging.getLogger(__name__)

HOOKS = ['commit-msg', 'post-checkout']

HOOK_TEMPLATE = """#!/bin/sh
# Instalado por restmine (rr setup)
exec "{python}" -m restmine.cli.main {hook} "$@"
"""


class SetupWizard:
    """Prepara um repositório: hooks do git e arquivo .restmine.json."""

    def __init__(self, git: GitRepository, config: ConfigManager):
        self.git = git
        self.config = config

    def install_hooks(self) -> List[Path]:
        """Instala os hooks; hooks existentes são preservados como <hook>.old."""
        hooks_dir = self.git.hooks_dir()
        hooks_dir.mkdir(parents=True, exist_ok=True)
        installed = []

        for hook in HOOKS:
            hook_path = hooks_dir / hook
            if hook_path.exists():
                backup = hook_path.with_name(f"{hook}.old")
                os.replace(hook_path, backup)
                logger.info(f"Hook existente movido para {backup}")

            hook_path.write_text(HOOK_TEMPLATE.format(python=sys.executable, hook=hook), encoding='utf-8')
            mode = hook_path.stat().st_mode
            hook_path.chmod(mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
            installed.append(hook_path)
            logger.info(f"Hook instalado: {hook_path}")

        return installed

    def prompt_config(self) -> Dict[str, Any]:
        """Pergunta os dados do Redmine e grava no arquivo de configuração."""
        def as_int(value: str) -> bool:
            return value.strip().isdigit()

        host = inquirer.text(
            message="Host do Redmine (sem http://):",
            default=str(self.config.get_setting('host', '') or ''),
            validate=lambda x: len(x) > 0,
            invalid_message="Host não pode estar vazio"
        ).execute()

        https = inquirer.confirm(
            message="Usar HTTPS?",
            default=bool(self.config.get_setting('https', True))
        ).execute()

        key = inquirer.secret(
            message="Chave da API do Redmine:",
            validate=lambda x: len(x) > 0,
            invalid_message="Chave não pode estar vazia"
        ).execute()

        numbers = {}
        for setting, message in [
            ('user_id', "Seu id de usuário:"),
            ('project_id', "Id do projeto:"),
            ('edit_id', "Id do status 'em andamento':"),
            ('activity.iss', "Id da atividade para tickets (iss):"),
            ('activity.org', "Id da atividade para organização (org):"),
        ]:
            value = inquirer.text(
                message=message,
                default=str(self.config.get_setting(setting, 0) or 0),
                validate=as_int,
                invalid_message="Informe um número"
            ).execute()
            numbers[setting] = int(value)

        category = inquirer.text(
            message="Id da categoria padrão (vazio para nenhuma):",
            default='',
            validate=lambda x: not x.strip() or as_int(x),
            invalid_message="Informe um número ou deixe vazio"
        ).execute()

        updates: Dict[str, Any] = {'host': host, 'https': https, 'key': key}
        updates.update(numbers)
        updates['category_id'] = int(category) if category.strip() else None
        self.config.update_config(updates)
        return updates

    def run(self, interactive: bool = False, gitignore: str = '.gitignore') -> int:
        self.install_hooks()
        print("✅ Hooks commit-msg e post-checkout instalados")

        if interactive:
            self.prompt_config()
            print(f"✅ Configuração salva em {self.config.get_config_file_path()}")
        elif self.config.write_template():
            print(f"⚠️  Não esqueça de editar \"{self.config.get_config_file_path()}\".")

        # O arquivo de configuração guarda a chave da API
        self.config.add_to_gitignore(gitignore)

        return 0
