"""
Interface de linha de comando principal do restmine (`rr`).
"""

import argparse
import sys
import logging
import os
from typing import Optional

from ..config.settings import CONFIG_FILE_NAME, ConfigManager
from ..core.ticket_workflow import TicketWorkflow
from ..errors import RestmineError
from ..git_monitor.repository import GitRepository
from ..redmine_integration.client import RedmineClient
from .interactive import SetupWizard

# Configuração de logging
logging.basicConfig(
    level=logging.WARNING,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    datefmt='%Y-%m-%d %H:%M:%S'
)

logger = logging.getLogger(__name__)

# Hooks nunca devem impedir o commit/checkout
HOOK_COMMANDS = {'commit-msg', 'post-checkout'}


class RestmineCLI:
    """Interface de linha de comando do restmine."""

    def __init__(self, config: Optional[ConfigManager] = None, git: Optional[GitRepository] = None,
                 api: Optional[RedmineClient] = None):
        self.git = git or GitRepository()
        self._config = config
        self._api = api
        self._workflow: Optional[TicketWorkflow] = None

    @property
    def config(self) -> ConfigManager:
        if self._config is None:
            self._config = ConfigManager(search_dir=self._search_dir())
        return self._config

    @property
    def workflow(self) -> TicketWorkflow:
        if self._workflow is None:
            settings = self.config.to_config()
            api = self._api or RedmineClient(settings)
            self._workflow = TicketWorkflow(api, self.git, settings)
        return self._workflow

    def _search_dir(self) -> str:
        try:
            return self.git.get_top_level()
        except RestmineError:
            return os.getcwd()

    def create_parser(self) -> argparse.ArgumentParser:
        """Cria o parser de argumentos."""
        parser = argparse.ArgumentParser(
            prog='rr',
            description='''
Liga suas branches do git aos tickets do Redmine.

    Numa branch iss1234 o rr mostra o ticket #1234, assume o ticket ao entrar
    na branch e registra o tempo gasto nela quando você sai.
            ''',
            epilog='''
Exemplos de uso:
    rr setup                       # Instala os hooks e cria o .restmine.json
    rr info                        # Ticket da branch atual
    rr show 1234                   # Ticket #1234
    rr log 2:30                    # 2,5h no ticket da branch atual, hoje
    rr log 1:15 org 4711 2018-10-20 "reunião"
    rr statuses                    # Ids dos status (para edit_id)
            ''',
            formatter_class=argparse.RawDescriptionHelpFormatter
        )
        parser.add_argument(
            '--log-level',
            choices=['debug', 'info', 'warning', 'error'],
            default='warning',
            help='Nível de log'
        )

        subparsers = parser.add_subparsers(dest='command', help='Comandos disponíveis')

        subparsers.add_parser('info', help='Mostra o ticket da branch atual')

        show_parser = subparsers.add_parser('show', help='Mostra um ticket')
        show_parser.add_argument(
            'target',
            nargs='?',
            help='Número do ticket ou nome da branch (padrão: branch atual)'
        )

        log_parser = subparsers.add_parser(
            'log',
            help='Registra horas: H:MM, AAAA-MM-DD, atividade, ticket e comentário em qualquer ordem'
        )
        log_parser.add_argument('tokens', nargs='*', help='Argumentos do apontamento')

        subparsers.add_parser('statuses', help='Lista os status de ticket')
        subparsers.add_parser('categories', help='Lista as categorias do projeto')
        subparsers.add_parser('activities', help='Lista as atividades de apontamento')
        subparsers.add_parser('projects', help='Lista os projetos')
        subparsers.add_parser('queries', help='Lista as consultas salvas')
        subparsers.add_parser('issues', help='Lista os tickets do projeto')

        query_parser = subparsers.add_parser('query', help='Executa uma consulta salva')
        query_parser.add_argument('query_id', help='Id da consulta')

        setup_parser = subparsers.add_parser('setup', help='Instala os hooks no repositório atual')
        setup_parser.add_argument(
            '--interactive',
            action='store_true',
            help='Pergunta os dados do Redmine em vez de criar o modelo'
        )

        config_parser = subparsers.add_parser('config', help='Configurações do restmine')
        config_parser.add_argument(
            '--show',
            action='store_true',
            help='Mostra configurações atuais'
        )

        commit_msg_parser = subparsers.add_parser('commit-msg', help='Hook commit-msg do git')
        commit_msg_parser.add_argument('message_file', help='Arquivo com a mensagem do commit')

        checkout_parser = subparsers.add_parser('post-checkout', help='Hook post-checkout do git')
        checkout_parser.add_argument('previous_head', help='Ref do HEAD anterior')
        checkout_parser.add_argument('new_head', help='Ref do novo HEAD')
        checkout_parser.add_argument('flag', help='1 para troca de branch, 0 para checkout de arquivo')

        return parser

    def handle_info(self, args):
        """Mostra o ticket da branch atual."""
        self.workflow.info()
        return 0

    def handle_show(self, args):
        """Mostra um ticket."""
        issue = self.workflow.show_ticket(args.target)
        return 0 if issue else 1

    def handle_log(self, args):
        """Registra horas."""
        self.workflow.log_time_from_args(args.tokens)
        return 0

    def handle_statuses(self, args):
        self.workflow.print_statuses()
        return 0

    def handle_categories(self, args):
        self.workflow.print_categories()
        return 0

    def handle_activities(self, args):
        self.workflow.print_activities()
        return 0

    def handle_projects(self, args):
        self.workflow.print_projects()
        return 0

    def handle_queries(self, args):
        self.workflow.print_queries()
        return 0

    def handle_query(self, args):
        self.workflow.run_query(args.query_id)
        return 0

    def handle_issues(self, args):
        self.workflow.print_issues()
        return 0

    def handle_setup(self, args):
        """Instala hooks e cria a configuração do repositório."""
        if not GitRepository.is_git_repository(os.getcwd()):
            print("❌ .git not found")
            return 1

        config = ConfigManager(config_file=os.path.join(os.getcwd(), CONFIG_FILE_NAME))
        wizard = SetupWizard(self.git, config)
        return wizard.run(interactive=args.interactive)

    def handle_config(self, args):
        """Mostra configurações."""
        if not args.show:
            print(f"Arquivo de configuração: {self.config.get_config_file_path()}")
            return 0

        print("⚙️  Configurações atuais:")
        print("=" * 30)
        for key, value in self.config.get_all_settings().items():
            if key == 'key':
                value = '*' * len(str(value)) if value else 'Não configurado'
            print(f"{key}: {value}")
        return 0

    def handle_commit_msg(self, args):
        """Hook commit-msg."""
        self.workflow.commit_msg(args.message_file)
        return 0

    def handle_post_checkout(self, args):
        """Hook post-checkout."""
        self.workflow.post_checkout(args.previous_head, args.new_head, args.flag)
        return 0

    def run(self, args=None):
        """Executa o CLI."""
        parser = self.create_parser()
        parsed_args = parser.parse_args(args)

        logging.getLogger().setLevel(getattr(logging, parsed_args.log_level.upper()))

        if not parsed_args.command:
            parser.print_help()
            return 0

        # Mapeia comandos para handlers
        handlers = {
            'info': self.handle_info,
            'show': self.handle_show,
            'log': self.handle_log,
            'statuses': self.handle_statuses,
            'categories': self.handle_categories,
            'activities': self.handle_activities,
            'projects': self.handle_projects,
            'queries': self.handle_queries,
            'query': self.handle_query,
            'issues': self.handle_issues,
            'setup': self.handle_setup,
            'config': self.handle_config,
            'commit-msg': self.handle_commit_msg,
            'post-checkout': self.handle_post_checkout,
        }

        handler = handlers.get(parsed_args.command)
        if not handler:
            print(f"❌ Comando não implementado: {parsed_args.command}")
            return 1

        try:
            return handler(parsed_args)
        except RestmineError as e:
            logger.error(f"Erro em {parsed_args.command}: {e}")
            print(f"❌ {e}")
            return 0 if parsed_args.command in HOOK_COMMANDS else 1


def main():
    """Ponto de entrada principal."""
    cli = RestmineCLI()
    return cli.run()


if __name__ == '__main__':
    sys.exit(main())
