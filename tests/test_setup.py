"""Testes da instalação dos hooks e da configuração interativa."""
import json
import os
import stat
from types import SimpleNamespace

from restmine.cli import interactive
from restmine.cli.interactive import HOOKS, SetupWizard
from restmine.config.settings import ConfigManager


class _HooksOnlyGit:
    def __init__(self, hooks_dir):
        self._hooks_dir = hooks_dir

    def hooks_dir(self):
        return self._hooks_dir


class _Prompt:
    def __init__(self, value):
        self._value = value

    def execute(self):
        return self._value


def _fake_inquirer(answers):
    def ask(message, **kwargs):
        return _Prompt(answers.get(message, kwargs.get('default', '')))
    return SimpleNamespace(text=ask, confirm=ask, secret=ask)


def test_install_hooks(tmp_path):
    hooks_dir = tmp_path / 'hooks'
    hooks_dir.mkdir()
    (hooks_dir / 'commit-msg').write_text('#!/bin/sh\necho antigo\n', encoding='utf-8')

    wizard = SetupWizard(_HooksOnlyGit(hooks_dir), ConfigManager(config_file=str(tmp_path / '.restmine.json')))
    installed = wizard.install_hooks()

    assert [path.name for path in installed] == HOOKS
    assert (hooks_dir / 'commit-msg.old').read_text(encoding='utf-8') == '#!/bin/sh\necho antigo\n'
    script = (hooks_dir / 'post-checkout').read_text(encoding='utf-8')
    assert '-m restmine.cli.main post-checkout "$@"' in script
    if os.name == 'posix':
        assert (hooks_dir / 'commit-msg').stat().st_mode & stat.S_IXUSR


def test_run_writes_template(tmp_path, monkeypatch, capsys):
    monkeypatch.chdir(tmp_path)
    hooks_dir = tmp_path / 'hooks'
    config = ConfigManager(config_file=str(tmp_path / '.restmine.json'))

    assert SetupWizard(_HooksOnlyGit(hooks_dir), config).run() == 0
    assert (tmp_path / '.restmine.json').exists()
    assert (tmp_path / '.gitignore').read_text(encoding='utf-8') == '.restmine.json\n'
    assert 'Não esqueça de editar' in capsys.readouterr().out


def test_interactive_run_saves_config_and_ignores_it(tmp_path, monkeypatch, capsys):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr(interactive, 'inquirer', _fake_inquirer({
        "Host do Redmine (sem http://):": 'redmine.example.org',
        "Chave da API do Redmine:": 'APIKEY',
        "Seu id de usuário:": '2',
        "Id da atividade para tickets (iss):": '33',
        "Id da categoria padrão (vazio para nenhuma):": '3',
    }))
    config_path = tmp_path / '.restmine.json'
    config = ConfigManager(config_file=str(config_path))

    assert SetupWizard(_HooksOnlyGit(tmp_path / 'hooks'), config).run(interactive=True) == 0

    saved = json.loads(config_path.read_text(encoding='utf-8'))
    assert saved['key'] == 'APIKEY'
    assert saved['host'] == 'redmine.example.org'
    assert saved['https'] is True
    assert saved['user_id'] == 2
    assert saved['activity'] == {'iss': 33, 'org': 0}
    assert saved['category_id'] == 3
    assert (tmp_path / '.gitignore').read_text(encoding='utf-8') == '.restmine.json\n'
    assert 'Configuração salva' in capsys.readouterr().out


def test_repeated_setup_does_not_duplicate_gitignore_entry(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    config = ConfigManager(config_file=str(tmp_path / '.restmine.json'))
    wizard = SetupWizard(_HooksOnlyGit(tmp_path / 'hooks'), config)

    wizard.run()
    wizard.run()
    assert (tmp_path / '.gitignore').read_text(encoding='utf-8') == '.restmine.json\n'
