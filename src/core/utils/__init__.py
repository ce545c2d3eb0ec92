"""Utilidades genéricas del Core.

Por qué aquí:
- Son helpers puros (codec Base32, colecciones, Dict, pool de hilos) sin
  dependencia de HTTP ni de la CLI.
"""
