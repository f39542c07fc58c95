"""
Formatação de tickets e listagens para o terminal.
"""

from typing import Any, Dict, Iterable, List

GREEN = '\033[32m'
RED = '\033[31m'
RESET = '\033[0m'


def colorize(text: str, color: str, enabled: bool) -> str:
    if not enabled:
        return text
    return f"{color}{text}{RESET}"


def format_ticket(issue: Dict[str, Any], width: int = 20, color: bool = False) -> str:
    """Resumo do ticket, um campo por linha com o rótulo alinhado em `width` colunas."""
    def line(label: str, value: Any) -> str:
        return f"{(label + ':').ljust(width)} {value}"

    output: List[str] = [f"Ticket #{issue['id']}"]
    output.append(line('Título', colorize(issue.get('subject', ''), GREEN, color)))
    status = issue.get('status') or {}
    output.append(line('Status', status.get('name', '')))

    if issue.get('author'):
        output.append(line('Autor', issue['author']['name']))
    if issue.get('assigned_to'):
        output.append(line('Atribuído', issue['assigned_to']['name']))

    estimated_hours = issue.get('estimated_hours')
    if estimated_hours:
        output.append(line('Estimado', f"{estimated_hours} h"))

    spent_hours = issue.get('spent_hours')
    if spent_hours:
        hours = f"{spent_hours:.2f}"
        if estimated_hours:
            hours = colorize(hours, RED if spent_hours > estimated_hours else GREEN, color)
        output.append(line('Gasto', f"{hours} h"))

    return '\n'.join(output)


def format_listing(items: Iterable[Dict[str, Any]]) -> str:
    """Linhas `id<TAB>nome`, ordenadas pelo nome."""
    ordered = sorted(items, key=lambda item: str(item.get('name', '')).lower())
    return '\n'.join(f"{item['id']}\t{item.get('name', '')}" for item in ordered)


def format_issue_list(issues: Iterable[Dict[str, Any]]) -> str:
    """Linhas `#id status assunto` na ordem recebida do Redmine."""
    lines = []
    for issue in issues:
        status = (issue.get('status') or {}).get('name', '')
        lines.append(f"#{issue['id']}\t{status}\t{issue.get('subject', '')}")
    return '\n'.join(lines)
