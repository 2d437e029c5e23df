"""Dominio: modelos (Pydantic v2) y jerarquía de errores.

No hace I/O ni conoce la CLI.
"""
