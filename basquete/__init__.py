"""Gestão do grupo de basquete: atletas, partidas, presenças e financeiro."""

__version__ = "1.0.0"
