"""
restmine - Liga branches do git a tickets do Redmine.

Hooks de git e comandos de linha de comando que mostram o ticket da branch
atual, assumem o ticket ao entrar na branch e registram o tempo gasto nela
automaticamente ao sair.
"""

__version__ = "0.3.0"
__author__ = "Mateus Lacerda"
__description__ = "Integração de branches git com tickets e apontamento de horas do Redmine"
