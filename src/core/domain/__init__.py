"""Dominio GitLab: enums de la API, modelos Pydantic y `Result`.

Nada aquí hace I/O; el transporte vive en `adapters`.
"""
