"""Interfaces del core (Protocol).

Contratos estructurales que implementan los adapters.
"""
